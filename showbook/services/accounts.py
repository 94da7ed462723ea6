"""Admin / subscriber access gate.

This is a convenience lock for a single-device tool, not a security boundary:
the credential is the CPF plus year of birth, stored as an unsalted digest.
"""

from __future__ import annotations

import hashlib
import logging
import re
from datetime import date

from showbook.domain.bus import EventBus
from showbook.domain.events import AccountBlocked, AccountDeleted
from showbook.domain.models import Account, LoginResult, Subscription
from showbook.repos.accounts import AccountRepository, SessionRepository

log = logging.getLogger("showbook.accounts")

_NON_DIGITS = re.compile(r"\D")


def normalize_cpf(cpf: str) -> str:
    """Strip everything but digits (``123.456.789-00`` -> ``12345678900``)."""
    return _NON_DIGITS.sub("", cpf or "")


def credential_digest(cpf: str, year_of_birth: str) -> str:
    return hashlib.sha256(f"{normalize_cpf(cpf)}:{year_of_birth}".encode()).hexdigest()


class AccountService:
    """Registration, login and subscription bookkeeping for all accounts."""

    def __init__(
        self,
        accounts: AccountRepository,
        sessions: SessionRepository,
        bus: EventBus,
    ) -> None:
        self.accounts = accounts
        self.sessions = sessions
        self.bus = bus

    # ------------------------------------------------------------------
    # Admin
    # ------------------------------------------------------------------

    def register_admin(self, cpf: str, year_of_birth: str) -> bool:
        """Register the single admin; once one exists this acts as a login."""
        cpf = normalize_cpf(cpf)
        if not cpf or not year_of_birth:
            return False
        if self.accounts.get_admin() is not None:
            return self.login_admin(cpf, year_of_birth)

        self.accounts.set_admin(
            Account(
                name="Admin",
                cpf=cpf,
                year_of_birth=year_of_birth,
                hashed_year_of_birth=credential_digest(cpf, year_of_birth),
            )
        )
        self.sessions.start_admin()
        log.info("Admin account registered")
        return True

    def login_admin(self, cpf: str, year_of_birth: str) -> bool:
        admin = self.accounts.get_admin()
        cpf = normalize_cpf(cpf)
        if admin is None or admin.cpf != cpf:
            return False
        if admin.hashed_year_of_birth != credential_digest(cpf, year_of_birth):
            return False
        self.sessions.start_admin()
        return True

    def logout_admin(self) -> None:
        self.sessions.end_admin()

    def is_admin_session_active(self) -> bool:
        return self.sessions.is_admin_active()

    # ------------------------------------------------------------------
    # Regular accounts, managed by the admin
    # ------------------------------------------------------------------

    def list_accounts(self) -> list[Account]:
        return self.accounts.list_all()

    def add_account(self, name: str, cpf: str, year_of_birth: str) -> bool:
        """Create a regular account; False for blank fields or a taken CPF."""
        cpf = normalize_cpf(cpf)
        if not name.strip() or not cpf or not year_of_birth:
            return False
        if self.accounts.get(cpf) is not None:
            return False
        self.accounts.upsert(
            Account(
                name=name.strip(),
                cpf=cpf,
                year_of_birth=year_of_birth,
                hashed_year_of_birth=credential_digest(cpf, year_of_birth),
            )
        )
        return True

    def delete_account(self, cpf: str) -> bool:
        cpf = normalize_cpf(cpf)
        if not self.accounts.delete(cpf):
            return False
        self.bus.publish(AccountDeleted(cpf=cpf))
        return True

    def block(self, cpf: str, reason: str = "manual") -> bool:
        account = self.accounts.get(normalize_cpf(cpf))
        if account is None:
            return False
        account.is_blocked = True
        self.accounts.upsert(account)
        self.bus.publish(AccountBlocked(cpf=account.cpf, reason=reason))
        return True

    def unblock(self, cpf: str) -> bool:
        account = self.accounts.get(normalize_cpf(cpf))
        if account is None:
            return False
        account.is_blocked = False
        self.accounts.upsert(account)
        return True

    def update_subscription(
        self, cpf: str, subscription: Subscription | None, today: date
    ) -> bool:
        """Replace an account's subscription and re-derive its block flag.

        An active subscription unblocks the account; removing it or setting
        one that already ended blocks it. Returns False for an unknown CPF.
        """
        account = self.accounts.get(normalize_cpf(cpf))
        if account is None:
            return False
        account.subscription = subscription
        active = subscription is not None and not subscription.is_expired(today)
        account.is_blocked = not active
        self.accounts.upsert(account)
        if not active:
            self.bus.publish(AccountBlocked(cpf=account.cpf, reason="subscription"))
        return True

    def enforce_subscription(self, account: Account, today: date) -> LoginResult:
        """Block *account* if its subscription has lapsed since the last check."""
        subscription = account.subscription
        if subscription is not None and subscription.is_expired(today) and not account.is_blocked:
            self.block(account.cpf, reason="subscription expired")
            account.is_blocked = True
            return LoginResult.BLOCKED
        return LoginResult.SUCCESS

    def block_expired_subscriptions(self, today: date) -> list[str]:
        """Block every account whose subscription ended before *today*."""
        blocked: list[str] = []
        for account in self.accounts.list_all():
            if self.enforce_subscription(account, today) == LoginResult.BLOCKED:
                blocked.append(account.cpf)
        if blocked:
            log.info("Blocked %d account(s) with expired subscriptions", len(blocked))
        return blocked

    # ------------------------------------------------------------------
    # Regular login
    # ------------------------------------------------------------------

    def register_account(self, name: str, cpf: str, year_of_birth: str, today: date) -> bool:
        """Self-registration; an already registered CPF is treated as a login."""
        cpf = normalize_cpf(cpf)
        if not name.strip() or not cpf or not year_of_birth:
            return False
        if self.accounts.get(cpf) is not None:
            return self.login(cpf, year_of_birth, today) == LoginResult.SUCCESS
        self.add_account(name, cpf, year_of_birth)
        self.sessions.start_user(cpf)
        return True

    def login(self, cpf: str, year_of_birth: str, today: date) -> LoginResult:
        account = self.accounts.get(normalize_cpf(cpf))
        if account is None:
            return LoginResult.INVALID
        # Subscription expiry is checked first since it can flip the block flag.
        if self.enforce_subscription(account, today) == LoginResult.BLOCKED:
            return LoginResult.BLOCKED
        if account.is_blocked:
            return LoginResult.BLOCKED
        if account.hashed_year_of_birth != credential_digest(account.cpf, year_of_birth):
            return LoginResult.INVALID
        self.sessions.start_user(account.cpf)
        return LoginResult.SUCCESS

    def logout(self) -> None:
        self.sessions.end_user()

    def active_account(self) -> Account | None:
        cpf = self.sessions.active_user()
        return None if cpf is None else self.accounts.get(cpf)
