"""Best-effort audit trail of enrollment actions."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Mapping, Protocol

from pymongo.collection import Collection
from pymongo.database import Database
from pymongo.errors import PyMongoError

from .config import ConfigError
from .db import ensure_activity_indexes, get_db

logger = logging.getLogger(__name__)

ACTIVITY_TYPE = "enrollment"


class ActivityLog(Protocol):
    def log_activity(self, entry: Mapping[str, Any]) -> None: ...


def build_activity(action: str, details: str, user: str | None = None) -> Dict[str, Any]:
    return {
        "type": ACTIVITY_TYPE,
        "action": action,
        "details": details,
        "user": user or "system",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


class NullActivityLog:
    def log_activity(self, entry: Mapping[str, Any]) -> None:
        logger.debug("Activity logging disabled; skipping %s", entry.get("action"))


class MongoActivityLog:
    """Append entries to the ``activity_log`` collection, never raising."""

    def __init__(self, database: Database | None = None):
        self._database = database
        self._collection: Collection | None = None

    def _get_collection(self) -> Collection:
        if self._collection is None:
            database = self._database if self._database is not None else get_db()
            collection = database["activity_log"]
            ensure_activity_indexes(collection)
            self._collection = collection
        return self._collection

    def log_activity(self, entry: Mapping[str, Any]) -> None:
        document = dict(entry)
        document.setdefault("timestamp", datetime.now(timezone.utc).isoformat())
        try:
            self._get_collection().insert_one(document)
        except (ConfigError, PyMongoError):
            logger.warning(
                "Failed to write activity log entry %s", document.get("action"), exc_info=True
            )


__all__ = [
    "ACTIVITY_TYPE",
    "ActivityLog",
    "build_activity",
    "NullActivityLog",
    "MongoActivityLog",
]
