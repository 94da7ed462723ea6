"""Repositories for the admin account, regular accounts and active sessions."""

from __future__ import annotations

import logging

from pydantic import ValidationError

from showbook.domain.models import Account
from showbook.repos.storage import KeyValueStorage

log = logging.getLogger("showbook.repos")

ADMIN_KEY = "agenda_shows_admin_creds"
ACCOUNTS_KEY = "agenda_shows_regular_users_list"
ADMIN_SESSION_KEY = "agenda_shows_admin_session_active"
USER_SESSION_KEY = "agenda_shows_active_regular_user_cpf"


class AccountRepository:
    """Admin record plus the list of regular accounts, keyed by CPF digits."""

    def __init__(self, storage: KeyValueStorage) -> None:
        self._storage = storage

    def get_admin(self) -> Account | None:
        raw = self._storage.get(ADMIN_KEY)
        return None if raw is None else Account.model_validate(raw)

    def set_admin(self, account: Account) -> None:
        self._storage.set(ADMIN_KEY, account.model_dump(mode="json"))

    def list_all(self) -> list[Account]:
        raw = self._storage.get(ACCOUNTS_KEY)
        if not isinstance(raw, list):
            return []
        accounts: list[Account] = []
        for item in raw:
            try:
                accounts.append(Account.model_validate(item))
            except ValidationError as e:
                log.error("Dropping unreadable account record: %s", e)
        return accounts

    def save_all(self, accounts: list[Account]) -> None:
        self._storage.set(ACCOUNTS_KEY, [a.model_dump(mode="json") for a in accounts])

    def get(self, cpf: str) -> Account | None:
        return next((a for a in self.list_all() if a.cpf == cpf), None)

    def upsert(self, account: Account) -> None:
        accounts = self.list_all()
        for index, existing in enumerate(accounts):
            if existing.cpf == account.cpf:
                accounts[index] = account
                break
        else:
            accounts.append(account)
        self.save_all(accounts)

    def delete(self, cpf: str) -> bool:
        accounts = self.list_all()
        remaining = [a for a in accounts if a.cpf != cpf]
        if len(remaining) == len(accounts):
            return False
        self.save_all(remaining)
        return True


class SessionRepository:
    """Which admin / regular account is currently signed in."""

    def __init__(self, storage: KeyValueStorage) -> None:
        self._storage = storage

    def start_admin(self) -> None:
        self._storage.set(ADMIN_SESSION_KEY, True)

    def end_admin(self) -> None:
        self._storage.delete(ADMIN_SESSION_KEY)

    def is_admin_active(self) -> bool:
        return self._storage.get(ADMIN_SESSION_KEY) is True

    def start_user(self, cpf: str) -> None:
        self._storage.set(USER_SESSION_KEY, cpf)

    def end_user(self) -> None:
        self._storage.delete(USER_SESSION_KEY)

    def active_user(self) -> str | None:
        return self._storage.get(USER_SESSION_KEY)
