"""
Runtime configuration for rolewallet.

Values come from environment variables (optionally from a ``.env`` file in the
working directory). Components never read the environment themselves; they
receive a ``Settings`` instance at construction time.
"""

import logging
import os
from dataclasses import dataclass

from dotenv import find_dotenv, load_dotenv

_ENV_PREFIX = "ROLEWALLET_"


def _env(name: str, default: str | None = None) -> str | None:
    return os.getenv(f"{_ENV_PREFIX}{name}", default)


def _env_bool(name: str, default: bool = False) -> bool:
    raw = _env(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class Settings:
    database_url: str = "sqlite+aiosqlite:///./rolewallet.db"
    sql_echo: bool = False
    log_level: int = logging.INFO
    bcrypt_rounds: int = 12

    # Bootstrap Mother Admin, created by the seed step when absent
    mother_admin_email: str | None = None
    mother_admin_username: str = "motheradmin"
    mother_admin_password: str | None = None

    @classmethod
    def from_env(cls, dotenv: bool = True) -> "Settings":
        """Builds settings from ``ROLEWALLET_*`` environment variables."""
        if dotenv:
            load_dotenv(find_dotenv(usecwd=True))

        level_name = (_env("LOG_LEVEL", "INFO") or "INFO").upper()
        level = logging.getLevelName(level_name)
        if not isinstance(level, int):
            raise ValueError(f"Unknown log level: {level_name}")

        rounds = int(_env("BCRYPT_ROUNDS", "12") or 12)
        if not 4 <= rounds <= 31:
            raise ValueError("ROLEWALLET_BCRYPT_ROUNDS must be between 4 and 31.")

        return cls(
            database_url=_env("DATABASE_URL", cls.database_url) or cls.database_url,
            sql_echo=_env_bool("SQL_ECHO"),
            log_level=level,
            bcrypt_rounds=rounds,
            mother_admin_email=_env("MOTHER_ADMIN_EMAIL"),
            mother_admin_username=_env("MOTHER_ADMIN_USERNAME", cls.mother_admin_username)
            or cls.mother_admin_username,
            mother_admin_password=_env("MOTHER_ADMIN_PASSWORD"),
        )
