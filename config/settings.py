from __future__ import annotations

import os
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Dict, Optional

from dotenv import load_dotenv

from config.dispatchers import parse_dispatchers
from errors import ConfigError


REQUIRED_ENV_VARS = (
    "GETTING_ALL_DRIVERS_URL",
    "GETTING_DISPATCHERS_URL",
    "GETTING_TOKEN_URL",
    "DB_HOST",
    "DB_USER",
    "DB_NAME",
    "DB_PASSWORD",
    "DITAT_APPLICATION_ROLE",
    "DITAT_ACCOUNT_ID",
    "DITAT_AUTHORIZATION",
)


def _load_env() -> None:
    # Centralized dotenv loading; safe if .env missing
    load_dotenv()


def _as_bool(value: Optional[str], default: bool) -> bool:
    if value is None or value == "":
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _as_number(name: str, default: str, cast):
    raw = os.getenv(name, default)
    try:
        return cast(raw)
    except ValueError as exc:
        raise ConfigError(f"{name} must be a number, got '{raw}'") from exc


@dataclass(frozen=True)
class Settings:
    # Ditat endpoints
    drivers_url: str
    dispatchers_url: str
    token_url: str

    # Token authority headers
    application_role: str
    account_id: str
    authorization: str

    # Store
    db_name: str
    db_host: str = ""
    db_user: str = ""
    db_password: str = ""
    db_pool_size: int = 4

    # Runtime
    run_env: str = "local"
    log_level: str = "INFO"
    sync_interval_hours: float = 6.0
    http_timeout_seconds: int = 20
    fetch_parallel: bool = True

    dispatchers: Dict[int, str] = field(default_factory=dict)

    @property
    def sync_interval_seconds(self) -> float:
        return self.sync_interval_hours * 60 * 60


def missing_settings() -> list[str]:
    """Return the names of required variables that are unset or empty."""
    return [name for name in REQUIRED_ENV_VARS if not os.getenv(name)]


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    _load_env()
    missing = missing_settings()
    if missing:
        raise ConfigError(f"Missing required environment variable(s): {', '.join(missing)}")

    return Settings(
        drivers_url=os.environ["GETTING_ALL_DRIVERS_URL"],
        dispatchers_url=os.environ["GETTING_DISPATCHERS_URL"].rstrip("/"),
        token_url=os.environ["GETTING_TOKEN_URL"],
        application_role=os.environ["DITAT_APPLICATION_ROLE"],
        account_id=os.environ["DITAT_ACCOUNT_ID"],
        authorization=os.environ["DITAT_AUTHORIZATION"],
        db_name=os.environ["DB_NAME"],
        db_host=os.environ["DB_HOST"],
        db_user=os.environ["DB_USER"],
        db_password=os.environ["DB_PASSWORD"],
        db_pool_size=_as_number("DB_POOL_SIZE", "4", int),
        run_env=os.getenv("RUN_ENV", "local"),
        log_level=os.getenv("LOG_LEVEL", "INFO"),
        sync_interval_hours=_as_number("SYNC_INTERVAL_HOURS", "6", float),
        http_timeout_seconds=_as_number("HTTP_TIMEOUT_SECONDS", "20", int),
        fetch_parallel=_as_bool(os.getenv("FETCH_PARALLEL"), True),
        dispatchers=parse_dispatchers(os.getenv("DISPATCHERS")),
    )
