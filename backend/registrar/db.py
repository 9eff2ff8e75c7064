"""MongoDB persistence for students, courses and the activity log."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Protocol

from pymongo import ASCENDING, DESCENDING, IndexModel, MongoClient
from pymongo.collection import Collection
from pymongo.database import Database
from pymongo.errors import PyMongoError

from .config import get_db_name, get_mongo_uri
from .models import Course, Student

logger = logging.getLogger(__name__)

_MONGO_CLIENT = None
_MONGO_DB = None


class PersistenceError(RuntimeError):
    """Raised when the backing store cannot load or save a record."""


def _get_client():
    """Create (or reuse) a MongoDB client using the configured URI."""

    global _MONGO_CLIENT

    if _MONGO_CLIENT is None:
        _MONGO_CLIENT = MongoClient(get_mongo_uri(), serverSelectionTimeoutMS=5000)
    return _MONGO_CLIENT


def get_db():
    """Return the application's MongoDB database instance."""

    global _MONGO_DB

    if _MONGO_DB is None:
        _MONGO_DB = _get_client()[get_db_name()]
    return _MONGO_DB


def ensure_students_indexes(collection: Collection) -> None:
    collection.create_indexes(
        [
            IndexModel("email", name="email_idx", background=True),
            IndexModel(
                [("program", ASCENDING), ("year_level", ASCENDING)],
                name="program_year",
                background=True,
            ),
            IndexModel(
                [("enrollments.enrollment_id", ASCENDING)],
                name="enrollment_id_idx",
                background=True,
            ),
        ]
    )


def ensure_courses_indexes(collection: Collection) -> None:
    collection.create_indexes(
        [
            IndexModel(
                [("code", ASCENDING), ("term", ASCENDING)],
                name="code_term",
                unique=True,
                background=True,
            ),
            IndexModel(
                [("program", ASCENDING), ("year_levels", ASCENDING)],
                name="program_year_levels",
                background=True,
            ),
        ]
    )


def ensure_activity_indexes(collection: Collection) -> None:
    collection.create_index(
        [("timestamp", DESCENDING)], name="timestamp_desc", background=True
    )


class EnrollmentStore(Protocol):
    def load_student(self, student_id: str) -> Student | None: ...

    def load_course(self, course_id: str) -> Course | None: ...

    def list_courses(self, term: str | None = None) -> List[Course]: ...

    def save_student_schedule(self, student: Student) -> None: ...

    def save_course_enrollment(self, course: Course) -> None: ...


class MongoEnrollmentStore:
    """Load and save enrollment aggregates in the ``students``/``courses`` collections.

    The database is resolved lazily so the store can be built before the
    MongoDB settings are known.
    """

    def __init__(self, database: Database | None = None):
        self._database = database
        self._indexes_created = False

    @property
    def database(self) -> Database:
        if self._database is None:
            self._database = get_db()
        return self._database

    def _collection(self, name: str) -> Collection:
        if not self._indexes_created:
            try:
                ensure_students_indexes(self.database["students"])
                ensure_courses_indexes(self.database["courses"])
            except PyMongoError as exc:
                raise PersistenceError("Failed to create indexes") from exc
            self._indexes_created = True
        return self.database[name]

    def load_student(self, student_id: str) -> Student | None:
        try:
            document = self._collection("students").find_one({"_id": student_id})
        except PyMongoError as exc:
            raise PersistenceError(f"Failed to load student {student_id}") from exc
        if not document:
            return None
        try:
            return Student.from_document(document)
        except ValueError as exc:
            raise PersistenceError(f"Student {student_id} record is malformed: {exc}") from exc

    def load_course(self, course_id: str) -> Course | None:
        try:
            document = self._collection("courses").find_one({"_id": course_id})
        except PyMongoError as exc:
            raise PersistenceError(f"Failed to load course {course_id}") from exc
        if not document:
            return None
        try:
            return Course.from_document(document)
        except ValueError as exc:
            raise PersistenceError(f"Course {course_id} record is malformed: {exc}") from exc

    def list_courses(self, term: str | None = None) -> List[Course]:
        filters: Dict[str, Any] = {}
        if term:
            filters["term"] = term
        try:
            cursor = self._collection("courses").find(filters, sort=[("code", ASCENDING)])
            return [Course.from_document(document) for document in cursor]
        except PyMongoError as exc:
            raise PersistenceError("Failed to list courses") from exc
        except ValueError as exc:
            raise PersistenceError(f"Course record is malformed: {exc}") from exc

    def save_student_schedule(self, student: Student) -> None:
        document = student.to_document()
        update = {
            "$set": {
                "schedule": document["schedule"],
                "enrollments": document["enrollments"],
                "enrollment_history": document["enrollment_history"],
            }
        }
        try:
            result = self._collection("students").update_one(
                {"_id": student.student_id}, update
            )
        except PyMongoError as exc:
            raise PersistenceError(
                f"Failed to save schedule for student {student.student_id}"
            ) from exc
        if result.matched_count == 0:
            raise PersistenceError(f"Student {student.student_id} no longer exists")

    def save_course_enrollment(self, course: Course) -> None:
        # Plain $set of the counter; concurrent writers can still overshoot.
        try:
            result = self._collection("courses").update_one(
                {"_id": course.course_id}, {"$set": {"enrolled": course.enrolled}}
            )
        except PyMongoError as exc:
            raise PersistenceError(
                f"Failed to save enrollment count for course {course.code}"
            ) from exc
        if result.matched_count == 0:
            raise PersistenceError(f"Course {course.course_id} no longer exists")


__all__ = [
    "PersistenceError",
    "get_db",
    "ensure_students_indexes",
    "ensure_courses_indexes",
    "ensure_activity_indexes",
    "EnrollmentStore",
    "MongoEnrollmentStore",
]
