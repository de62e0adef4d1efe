# backend/sigef/config.py
from __future__ import annotations
import os


def _float_env(name: str, default: float) -> float:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return default
    return float(raw)


def _list_env(name: str, default: str) -> list[str]:
    raw = os.environ.get(name, default)
    return [item.strip() for item in raw.split(",") if item.strip()]


class Config:
    # Optional "SECRET_KEY", with default dev key
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev-secret-key-change-me")

    # SQLite DB stored in backend/instance/sigef.sqlite3
    SQLALCHEMY_DATABASE_URI = os.environ.get(
        "DATABASE_URL", #optional alternative location
        "sqlite:///sigef.sqlite3", #default local location
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Seconds a connection waits on a locked or unreachable database.
    # Retry is handled by services.concurrency, not here.
    DB_TIMEOUT_SECONDS = _float_env("SIGEF_DB_TIMEOUT_SECONDS", 10.0)

    # ISO 4217 code used when the caller does not pick one
    DEFAULT_CURRENCY = os.environ.get("SIGEF_DEFAULT_CURRENCY", "MZN")

    ALLOWED_ORIGINS = _list_env(
        "SIGEF_ALLOWED_ORIGINS",
        "http://localhost:3000,http://127.0.0.1:3000,http://localhost:9002",
    )
