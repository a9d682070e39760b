"""JSON collection endpoints.

Every response uses the envelope ``{success, data?, error?, message?}``.
"""

from __future__ import annotations

import asyncio
import logging
from functools import wraps
from typing import Any, Optional

from flask import Flask, jsonify, request

from ..container import Container
from ..core.exceptions import ConflictError, DecodeError, NotFoundError, ValidationError
from ..core.enums import MatchStatus
from ..faces.model import decode_face_data, encode_face_data
from ..matching.model import MatchVerdict

logger = logging.getLogger(__name__)


def ok(data: Any = None, *, message: Optional[str] = None, status: int = 200, **extra):
    body: dict[str, Any] = {"success": True}
    if data is not None:
        body["data"] = data
    if message:
        body["message"] = message
    body.update(extra)
    return jsonify(body), status


def fail(error: str, status: int):
    return jsonify({"success": False, "error": error}), status


def json_endpoint(failure_message: str):
    """Map domain errors onto status codes; anything unexpected becomes a logged 500."""

    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            try:
                return view(*args, **kwargs)
            except ValidationError as e:
                return fail(str(e), 400)
            except NotFoundError as e:
                return fail(str(e), 404)
            except ConflictError as e:
                return fail(str(e), 409)
            except Exception:
                logger.exception("Unexpected failure in %s", view.__name__)
                return fail(failure_message, 500)

        return wrapper

    return decorator


def _json_body() -> dict:
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


def _required_id(message: str) -> str:
    value = (request.args.get("id") or "").strip()
    if not value:
        raise ValidationError(message)
    return value


def _optional_str(data: dict, key: str) -> Optional[str]:
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValidationError(f"{key} must be a string")
    return value


def register(app: Flask, container: Container) -> None:
    identities = container.identity_service
    sessions = container.session_service
    store = container.store
    engine = container.match_engine

    # -- employees -----------------------------------------------------------

    @app.route("/api/employees", methods=["GET"], endpoint="list_employees")
    @json_endpoint("Failed to fetch employees")
    def list_employees():
        return ok([i.to_payload() for i in identities.list_all()])

    @app.route("/api/employees", methods=["POST"], endpoint="create_employee")
    @json_endpoint("Failed to create employee")
    def create_employee():
        data = _json_body()
        if not data.get("name") or not data.get("email") or not data.get("department"):
            raise ValidationError("Missing required fields")

        identity = identities.register(
            name=_optional_str(data, "name"),
            email=_optional_str(data, "email"),
            department=_optional_str(data, "department"),
            face_data=_optional_str(data, "faceData"),
            identity_id=_optional_str(data, "id"),
            enrolled_at=_optional_str(data, "createdAt"),
        )
        return ok(identity.to_payload(), message="Employee created successfully")

    @app.route("/api/employees", methods=["PUT"], endpoint="update_employee")
    @json_endpoint("Failed to update employee")
    def update_employee():
        identity_id = _required_id("Employee ID is required")
        identity = identities.update(identity_id, _json_body())
        return ok(identity.to_payload(), message="Employee updated successfully")

    @app.route("/api/employees", methods=["DELETE"], endpoint="delete_employee")
    @json_endpoint("Failed to delete employee")
    def delete_employee():
        identity_id = _required_id("Employee ID is required")
        removed = identities.delete(identity_id)
        return ok(removed.to_payload(), message="Employee deleted successfully")

    # -- attendance ----------------------------------------------------------

    @app.route("/api/attendance", methods=["GET"], endpoint="list_attendance")
    @json_endpoint("Failed to fetch attendance records")
    def list_attendance():
        limit_s = request.args.get("limit")
        limit = None
        if limit_s:
            try:
                limit = int(limit_s)
            except ValueError:
                raise ValidationError("limit must be an integer")
            if limit < 0:
                raise ValidationError("limit must not be negative")

        events = store.list_attendance_events(
            identity_id=request.args.get("employeeId") or None,
            date_prefix=request.args.get("date") or None,
            limit=limit,
        )
        return ok([e.to_payload() for e in events], total=store.count_attendance_events())

    @app.route("/api/attendance", methods=["POST"], endpoint="create_attendance")
    @json_endpoint("Failed to record attendance")
    def create_attendance():
        data = _json_body()
        if not data.get("employeeId") or not data.get("employeeName") or not data.get("type"):
            raise ValidationError("Missing required fields")

        event = sessions.record_manual_event(
            identity_id=_optional_str(data, "employeeId"),
            identity_name=_optional_str(data, "employeeName"),
            kind=_optional_str(data, "type"),
            timestamp=_optional_str(data, "timestamp"),
            location=_optional_str(data, "location"),
            confidence=data.get("confidence"),
            event_id=_optional_str(data, "id"),
        )
        return ok(event.to_payload(), message="Attendance recorded successfully")

    @app.route("/api/attendance", methods=["DELETE"], endpoint="delete_attendance")
    @json_endpoint("Failed to delete attendance record")
    def delete_attendance():
        event_id = _required_id("Record ID is required")
        removed = sessions.delete_event(event_id)
        return ok(removed.to_payload(), message="Attendance record deleted successfully")

    @app.route("/api/attendance/summary", methods=["GET"], endpoint="attendance_summary")
    @json_endpoint("Failed to build attendance summary")
    def attendance_summary():
        events = store.list_attendance_events(
            identity_id=request.args.get("employeeId") or None,
            date_prefix=request.args.get("date") or None,
        )
        return ok([s.to_payload() for s in store.compute_daily_summaries(events)])

    @app.route("/api/attendance/today", methods=["GET"], endpoint="attendance_today")
    @json_endpoint("Failed to fetch today's attendance")
    def attendance_today():
        return ok(sessions.today_stats().to_payload())

    # -- recognition ---------------------------------------------------------

    @app.route("/api/recognition/capture", methods=["POST"], endpoint="recognition_capture")
    @json_endpoint("Failed to capture face data")
    def recognition_capture():
        data = _json_body()
        if not data.get("image"):
            raise ValidationError("image is required")

        vector = asyncio.run(engine.capture_face_data(data["image"]))
        if vector is None:
            return fail("Unable to detect face in the image. Please try again with better lighting and positioning.", 422)
        return ok({"faceData": encode_face_data(vector), "quality": vector.quality})

    @app.route("/api/recognition/verify", methods=["POST"], endpoint="recognition_verify")
    @json_endpoint("Failed to verify face")
    def recognition_verify():
        data = _json_body()
        face_data = _optional_str(data, "faceData")
        image = data.get("image")
        if not face_data and not image:
            raise ValidationError("faceData or image is required")

        gallery = identities.list_all()
        if face_data:
            try:
                captured = decode_face_data(face_data)
            except DecodeError as e:
                logger.warning("Captured face data rejected: %s", e)
                captured = None
        else:
            captured = asyncio.run(engine.capture_face_data(image))
            if captured is None:
                verdict = MatchVerdict(
                    is_match=False,
                    confidence=0.0,
                    status=MatchStatus.REJECTED,
                    reason="Unable to detect face in the image",
                )
                return ok(verdict.to_payload())

        verdict = engine.match_against_gallery(captured, gallery)
        if data.get("record", True):
            outcome = sessions.process_verdict(verdict, location=_optional_str(data, "location"))
            payload = outcome.verdict.to_payload()
            if outcome.event:
                payload["record"] = outcome.event.to_payload()
            return ok(payload)
        return ok(verdict.to_payload())

    # -- demo data -----------------------------------------------------------

    @app.route("/api/demo/reset", methods=["POST"], endpoint="demo_reset")
    @json_endpoint("Failed to reset demo data")
    def demo_reset():
        store.reset_to_seed_data()
        return ok(message="Demo data reset")

    @app.route("/api/demo/clear", methods=["POST"], endpoint="demo_clear")
    @json_endpoint("Failed to clear data")
    def demo_clear():
        store.clear_all()
        return ok(message="All data cleared")
