"""MongoDB settings resolution."""

from __future__ import annotations

import os
import sys
import unittest
from pathlib import Path
from unittest import mock

BACKEND_DIR = Path(__file__).resolve().parents[1]
if str(BACKEND_DIR) not in sys.path:
    sys.path.insert(0, str(BACKEND_DIR))

from registrar import config
from registrar.config import ConfigError


class MongoSettingsTestCase(unittest.TestCase):
    def setUp(self) -> None:
        config._MONGO_URI_CACHE = None
        config._DB_NAME_CACHE = None
        self.addCleanup(setattr, config, "_MONGO_URI_CACHE", None)
        self.addCleanup(setattr, config, "_DB_NAME_CACHE", None)

    def test_missing_uri(self) -> None:
        with mock.patch.dict(os.environ, {}, clear=True):
            with self.assertRaises(ConfigError):
                config.get_mongo_uri()

    def test_db_name_from_uri_path(self) -> None:
        env = {"MONGODB_URI": "mongodb://localhost:27017/dashboard?retryWrites=true"}
        with mock.patch.dict(os.environ, env, clear=True):
            self.assertEqual("dashboard", config.get_db_name())

    def test_explicit_db_name_wins(self) -> None:
        env = {"MONGODB_URI": "mongodb://localhost:27017/dashboard", "MONGODB_DB": "other"}
        with mock.patch.dict(os.environ, env, clear=True):
            self.assertEqual("other", config.get_db_name())

    def test_uri_without_database(self) -> None:
        with mock.patch.dict(os.environ, {"MONGODB_URI": "mongodb://localhost:27017/"}, clear=True):
            with self.assertRaises(ConfigError):
                config.get_db_name()


if __name__ == "__main__":
    unittest.main()
