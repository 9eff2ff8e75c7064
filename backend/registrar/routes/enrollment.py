"""Enrollment, timetable and catalogue endpoints for a single student."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Tuple

from flask import Blueprint, current_app, jsonify, request

from .. import config
from ..catalog import catalogue_for
from ..config import ConfigError
from ..db import PersistenceError
from ..engine import DropResult, EnrollResult, RejectionReason
from ..grid import grid_to_rows, project_to_grid
from ..service import EnrollmentService, RecordNotFound
from ..timeslots import normalize_day
from ..utils.paging import PagingParamError, paginate, parse_paging_params

enrollment_bp = Blueprint("enrollment", __name__, url_prefix="/api/students")

logger = logging.getLogger(__name__)

EXTENSION_KEY = "registrar"

REJECTIONS: Dict[RejectionReason, Tuple[int, str]] = {
    RejectionReason.ALREADY_ENROLLED: (409, "You are already enrolled in this course."),
    RejectionReason.COURSE_FULL: (409, "This course has reached its enrollment capacity."),
    RejectionReason.SCHEDULE_CONFLICT: (409, "This course conflicts with your current schedule."),
    RejectionReason.MISSING_PREREQUISITES: (422, "Missing prerequisites"),
    RejectionReason.ENROLLMENT_NOT_FOUND: (404, "Enrollment not found."),
}

HISTORY_SORT_FIELDS = {
    "date": "date",
    "course": "course_code",
    "action": "action",
}


def _json_error(message: str, status: int, details: Dict[str, Any] | None = None):
    payload: Dict[str, Any] = {"error": message}
    if details:
        payload["details"] = details
    return jsonify(payload), status


def _clean_string(value: Any) -> str:
    return str(value).strip() if value is not None else ""


def _clean_string_or_none(value: Any) -> str | None:
    cleaned = _clean_string(value)
    return cleaned if cleaned else None


def _service() -> EnrollmentService:
    return current_app.extensions[EXTENSION_KEY]


def _handle_config_error(exc: ConfigError):
    logger.exception("Missing configuration for MongoDB")
    return _json_error(str(exc), 500)


def _handle_db_error(action: str, exc: PersistenceError):
    logger.exception("%s due to storage error", action)
    return _json_error("Database unavailable. Please try again later.", 503)


def _rejection_response(result: EnrollResult | DropResult):
    status, message = REJECTIONS[result.reason]
    details: Dict[str, Any] = {"reason": result.reason.value}

    if isinstance(result, EnrollResult):
        if result.missing_prerequisites:
            message = f"{message}: {', '.join(result.missing_prerequisites)}"
            details["missing_prerequisites"] = result.missing_prerequisites
        if result.conflicts:
            details["conflicts"] = [
                f"{slot.course_code} {slot.time_start}-{slot.time_end}"
                for slot in result.conflicts
            ]

    return _json_error(message, status, details)


def _parse_hour(raw: str | None, default: int, name: str) -> int:
    if raw in (None, ""):
        return default
    try:
        value = int(raw)
    except (TypeError, ValueError):
        raise ValueError(f"{name} must be an integer.") from None
    if not 0 <= value <= 24:
        raise ValueError(f"{name} must be between 0 and 24.")
    return value


def _parse_days(raw: str | None) -> List[str]:
    if not raw:
        return [normalize_day(day) for day in config.SCHEDULE_DAYS]
    return [normalize_day(part) for part in raw.split(",") if part.strip()]


@enrollment_bp.get("/<student_id>/enrollments")
def list_enrollments(student_id: str):
    try:
        student = _service().get_student(_clean_string(student_id))
        return jsonify([e.to_document() for e in student.enrollments])
    except RecordNotFound as exc:
        return _json_error(str(exc), 404)
    except ConfigError as exc:
        return _handle_config_error(exc)
    except PersistenceError as exc:
        return _handle_db_error("Failed to list enrollments", exc)


@enrollment_bp.post("/<student_id>/enrollments")
def enroll(student_id: str):
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        return _json_error("Request body must be JSON.", 400)

    course_id = _clean_string(payload.get("course_id"))
    if not course_id:
        return _json_error("Validation failed.", 400, {"course_id": "Course ID is required."})

    try:
        result = _service().enroll(
            _clean_string(student_id),
            course_id,
            user=_clean_string_or_none(payload.get("user")),
        )
    except RecordNotFound as exc:
        return _json_error(str(exc), 404)
    except ConfigError as exc:
        return _handle_config_error(exc)
    except PersistenceError as exc:
        return _handle_db_error("Failed to save enrollment", exc)

    if not result.ok:
        return _rejection_response(result)

    return (
        jsonify(
            {
                "ok": True,
                "message": f"Successfully enrolled in {result.course.code}: {result.course.name}",
                "enrollment": result.enrollment.to_document(),
                "course": result.course.to_document(),
            }
        ),
        201,
    )


@enrollment_bp.delete("/<student_id>/enrollments/<enrollment_id>")
def drop(student_id: str, enrollment_id: str):
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        payload = {}
    try:
        result = _service().drop(
            _clean_string(student_id),
            _clean_string(enrollment_id),
            user=_clean_string_or_none(payload.get("user")),
        )
    except RecordNotFound as exc:
        return _json_error(str(exc), 404)
    except ConfigError as exc:
        return _handle_config_error(exc)
    except PersistenceError as exc:
        return _handle_db_error("Failed to drop enrollment", exc)

    if not result.ok:
        return _rejection_response(result)

    dropped = result.enrollment
    return jsonify(
        {
            "ok": True,
            "message": f"Successfully dropped {dropped.course_code}: {dropped.course_name}",
            "dropped": dropped.to_document(),
        }
    )


@enrollment_bp.get("/<student_id>/schedule")
def schedule(student_id: str):
    try:
        start_hour = _parse_hour(
            request.args.get("start_hour"), config.SCHEDULE_START_HOUR, "start_hour"
        )
        end_hour = _parse_hour(
            request.args.get("end_hour"), config.SCHEDULE_END_HOUR, "end_hour"
        )
        days = _parse_days(request.args.get("days"))
    except ValueError as exc:
        return _json_error(str(exc), 400)

    if start_hour >= end_hour:
        return _json_error("start_hour must be before end_hour.", 400)

    try:
        student = _service().get_student(_clean_string(student_id))
    except RecordNotFound as exc:
        return _json_error(str(exc), 404)
    except ConfigError as exc:
        return _handle_config_error(exc)
    except PersistenceError as exc:
        return _handle_db_error("Failed to load schedule", exc)

    hours = list(range(start_hour, end_hour))
    grid = project_to_grid(student.schedule, days, hours)
    return jsonify(
        {
            "student_id": student.student_id,
            "days": days,
            "rows": grid_to_rows(grid, hours),
        }
    )


@enrollment_bp.get("/<student_id>/available-courses")
def available_courses(student_id: str):
    term = _clean_string(request.args.get("term")) or None
    try:
        service = _service()
        student = service.get_student(_clean_string(student_id))
        courses = service.store.list_courses(term)
    except RecordNotFound as exc:
        return _json_error(str(exc), 404)
    except ConfigError as exc:
        return _handle_config_error(exc)
    except PersistenceError as exc:
        return _handle_db_error("Failed to list available courses", exc)

    return jsonify([entry.to_document() for entry in catalogue_for(student, courses)])


@enrollment_bp.get("/<student_id>/enrollment-history")
def enrollment_history(student_id: str):
    try:
        params = parse_paging_params(
            request.args,
            default_page_size=20,
            allowed_sort_fields=HISTORY_SORT_FIELDS,
            default_sort="-date",
        )
    except PagingParamError as exc:
        return _json_error(str(exc), 400)

    try:
        student = _service().get_student(_clean_string(student_id))
    except RecordNotFound as exc:
        return _json_error(str(exc), 404)
    except ConfigError as exc:
        return _handle_config_error(exc)
    except PersistenceError as exc:
        return _handle_db_error("Failed to load enrollment history", exc)

    records = [entry.to_document() for entry in student.enrollment_history]
    return jsonify(paginate(records, params))


__all__ = ["enrollment_bp", "EXTENSION_KEY", "REJECTIONS"]
