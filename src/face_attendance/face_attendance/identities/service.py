from __future__ import annotations

import logging
import uuid
from datetime import datetime
from typing import Any, Mapping, Optional, Sequence

from ..common.datetime_utils import now_utc, to_iso
from ..common.validators import require_non_empty
from ..core.exceptions import DecodeError, ValidationError
from ..faces.model import FeatureVector, decode_face_data, encode_face_data
from .model import Identity
from .repository import IdentityRepository

logger = logging.getLogger(__name__)

_EDITABLE_FIELDS = ("name", "email", "department", "faceData")


def new_identity_id(now: datetime) -> str:
    return f"emp_{int(now.timestamp() * 1000)}_{uuid.uuid4().hex[:9]}"


def _checked_face_data(face_data: Optional[str]) -> Optional[str]:
    if not face_data:
        return None
    try:
        vector = decode_face_data(face_data)
    except DecodeError as e:
        raise ValidationError(f"faceData is invalid: {e}") from e
    if not vector.is_enrollable():
        raise ValidationError("Face data quality is too low. Please try again.")
    return face_data


class IdentityService:
    """Use case: enroll, edit and remove employees."""

    def __init__(self, identities: IdentityRepository):
        self._identities = identities

    def list_all(self) -> Sequence[Identity]:
        return self._identities.list_identities()

    def get(self, identity_id: str) -> Identity:
        return self._identities.get_identity(identity_id)

    def register(
        self,
        *,
        name: str,
        email: str,
        department: str,
        face: Optional[FeatureVector] = None,
        face_data: Optional[str] = None,
        identity_id: Optional[str] = None,
        enrolled_at: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> Identity:
        """Create an employee. ``face`` (or already encoded ``face_data``) becomes the reference vector."""

        now = now or now_utc()
        if face is not None:
            if not face.is_enrollable():
                raise ValidationError("Face data quality is too low. Please try again.")
            face_data = encode_face_data(face)

        identity = Identity(
            id=(identity_id or "").strip() or new_identity_id(now),
            name=require_non_empty(name, "name"),
            email=require_non_empty(email, "email").lower(),
            department=require_non_empty(department, "department"),
            face_data=_checked_face_data(face_data),
            enrolled_at=enrolled_at or to_iso(now),
        )
        saved = self._identities.upsert_identity(identity)
        logger.info("Registered employee %s (%s)", saved.id, saved.email)
        return saved

    def update(self, identity_id: str, changes: Mapping[str, Any]) -> Identity:
        """Apply a partial edit; unknown keys are ignored, ``id`` cannot change."""

        current = self._identities.get_identity(identity_id)
        fields: dict[str, Any] = {}
        for key in _EDITABLE_FIELDS:
            if key not in changes:
                continue
            value = changes[key]
            if key == "faceData":
                fields["face_data"] = _checked_face_data(value)
            elif key == "email":
                fields["email"] = require_non_empty(value, "email").lower()
            else:
                fields[key] = require_non_empty(value, key)

        if not fields:
            return current
        return self._identities.upsert_identity(current.with_changes(**fields))

    def delete(self, identity_id: str) -> Identity:
        removed = self._identities.delete_identity(identity_id)
        logger.info("Deleted employee %s", identity_id)
        return removed
