"""Seed helper that loads sample students and courses into MongoDB."""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any, Callable, Dict, List

from dotenv import load_dotenv
from pymongo import MongoClient
from pymongo.collection import Collection
from pymongo.errors import PyMongoError

ROOT_DIR = Path(__file__).resolve().parent.parent
BACKEND_DIR = ROOT_DIR / "backend"
ENV_PATH = BACKEND_DIR / ".env"
SEED_PATH = Path(__file__).resolve().parent / "seed.json"

if str(BACKEND_DIR) not in sys.path:
    sys.path.insert(0, str(BACKEND_DIR))

from registrar.config import ConfigError, get_db_name, get_mongo_uri  # noqa: E402
from registrar.db import ensure_courses_indexes, ensure_students_indexes  # noqa: E402
from registrar.models import Course, Student  # noqa: E402

NORMALIZERS: Dict[str, Callable[[Dict[str, Any]], Dict[str, Any]]] = {
    "courses": lambda document: Course.from_document(document).to_document(),
    "students": lambda document: Student.from_document(document).to_document(),
}

INDEXERS: Dict[str, Callable[[Collection], None]] = {
    "courses": ensure_courses_indexes,
    "students": ensure_students_indexes,
}


def load_env() -> None:
    if ENV_PATH.exists():
        load_dotenv(ENV_PATH)


def read_seed_file() -> Dict[str, List[Dict[str, Any]]]:
    with SEED_PATH.open("r", encoding="utf-8") as seed_file:
        data = json.load(seed_file)
    if not isinstance(data, dict):
        raise ValueError("Seed file must contain an object of collections")
    return data


def normalize_documents(
    collection_name: str, documents: List[Dict[str, Any]]
) -> List[Dict[str, Any]]:
    """Validate seed documents through the record types before inserting them."""

    normalizer = NORMALIZERS.get(collection_name)
    if normalizer is None:
        return documents
    return [normalizer(document) for document in documents]


def main() -> None:
    load_env()
    try:
        uri = get_mongo_uri()
        db_name = get_db_name()
    except ConfigError as exc:  # pragma: no cover - simple CLI utility
        print(f"Configuration error: {exc}")
        raise SystemExit(1)

    client = MongoClient(uri, serverSelectionTimeoutMS=5000)
    database = client[db_name]

    try:
        seed_data = read_seed_file()

        for collection_name, documents in seed_data.items():
            if not isinstance(documents, list):
                raise ValueError(
                    f"Seed data for collection '{collection_name}' must be a list"
                )

            documents = normalize_documents(collection_name, documents)
            collection = database[collection_name]
            collection.delete_many({})
            if documents:
                collection.insert_many(documents)
            if collection_name in INDEXERS:
                INDEXERS[collection_name](collection)

            print(
                f"Loaded {len(documents)} document(s) into '{collection_name}' collection"
            )

        print(f"Seeding complete for database '{db_name}'.")
    except PyMongoError as exc:  # pragma: no cover - requires Mongo connection
        print(f"MongoDB error: {exc}")
        raise SystemExit(1)
    finally:
        client.close()


if __name__ == "__main__":
    main()
