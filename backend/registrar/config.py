"""Application configuration helpers."""

import os

from dotenv import load_dotenv

_BASE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
_DOTENV_PATH = os.path.join(_BASE_DIR, ".env")

if os.path.exists(_DOTENV_PATH):
    load_dotenv(_DOTENV_PATH)


class ConfigError(RuntimeError):
    """Raised when configuration values are missing or invalid."""


def _int_env(name, default):
    raw = os.getenv(name)
    if raw in (None, ""):
        return default
    try:
        return int(raw)
    except ValueError:
        raise ConfigError(f"{name} must be an integer.") from None


def _bool_env(name, default):
    raw = os.getenv(name)
    if raw in (None, ""):
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def _list_env(name, default):
    raw = os.getenv(name)
    if not raw:
        return tuple(default)
    return tuple(part.strip() for part in raw.split(",") if part.strip())


SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

SCHEDULE_DAYS = _list_env(
    "SCHEDULE_DAYS", ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday")
)
SCHEDULE_START_HOUR = _int_env("SCHEDULE_START_HOUR", 8)
SCHEDULE_END_HOUR = _int_env("SCHEDULE_END_HOUR", 18)

if not 0 <= SCHEDULE_START_HOUR < SCHEDULE_END_HOUR <= 24:
    raise ConfigError(
        "SCHEDULE_START_HOUR must be before SCHEDULE_END_HOUR within 0-24."
    )

ACTIVITY_LOG_ENABLED = _bool_env("ACTIVITY_LOG_ENABLED", True)

_MONGO_URI_CACHE = None
_DB_NAME_CACHE = None


def get_mongo_uri():
    """Return the MongoDB connection string from the environment."""

    global _MONGO_URI_CACHE

    if _MONGO_URI_CACHE:
        return _MONGO_URI_CACHE

    uri = os.getenv("MONGODB_URI")
    if not uri:
        raise ConfigError("MONGODB_URI is not set. Define it in backend/.env.")

    _MONGO_URI_CACHE = uri
    return uri


def get_db_name():
    """Return the database name derived from the MongoDB URI or env var."""

    global _DB_NAME_CACHE

    if _DB_NAME_CACHE:
        return _DB_NAME_CACHE

    db_name = os.getenv("MONGODB_DB")
    if db_name:
        _DB_NAME_CACHE = db_name
        return db_name

    uri = get_mongo_uri()
    main = uri.split("?", 1)[0].rstrip("/")
    after_scheme = main.split("://", 1)[1] if "://" in main else main

    if "/" not in after_scheme or not after_scheme.split("/", 1)[1]:
        raise ConfigError(
            "Database name not found. Provide it via MONGODB_URI or MONGODB_DB."
        )

    _DB_NAME_CACHE = after_scheme.split("/", 1)[1]
    return _DB_NAME_CACHE


__all__ = [
    "ConfigError",
    "SECRET_KEY",
    "LOG_LEVEL",
    "SCHEDULE_DAYS",
    "SCHEDULE_START_HOUR",
    "SCHEDULE_END_HOUR",
    "ACTIVITY_LOG_ENABLED",
    "get_mongo_uri",
    "get_db_name",
]
