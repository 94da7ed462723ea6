"""Application configuration via environment variables."""

from __future__ import annotations

import logging
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

from showbook.repos.storage import JsonFileStorage, KeyValueStorage, MemoryStorage

log = logging.getLogger("showbook.config")


class Settings(BaseSettings):
    app_title: str = "Show Booking Ledger"

    # Storage: "memory" keeps everything in-process, "json" writes one file
    storage_backend: str = "memory"
    storage_path: Path = Path("./data/showbook.json")

    log_level: str = "INFO"

    model_config = SettingsConfigDict(env_prefix="SHOWBOOK_", env_file=".env", extra="ignore")


def build_storage(config: Settings) -> KeyValueStorage:
    backend = config.storage_backend.lower()
    if backend == "json":
        log.info("Using JSON file storage at %s", config.storage_path)
        return JsonFileStorage(config.storage_path)
    if backend != "memory":
        raise ValueError(f"Unknown storage backend: {config.storage_backend!r}")
    return MemoryStorage()


settings = Settings()
