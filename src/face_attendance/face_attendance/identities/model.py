from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Mapping, Optional

from ..faces.model import FeatureVector, decode_face_data


@dataclass(frozen=True)
class Identity:
    """Thực thể miền (domain): nhân viên đã đăng ký khuôn mặt.

    ``face_data`` is the encoded reference vector; it is absent until the
    person has been enrolled.
    """

    id: str
    name: str
    email: str
    department: str
    face_data: Optional[str] = None
    enrolled_at: Optional[str] = None

    def reference_vector(self) -> FeatureVector:
        """Decode the stored reference; raises ``DecodeError``."""

        return decode_face_data(self.face_data)

    def with_changes(self, **changes: Any) -> "Identity":
        return replace(self, **changes)

    def to_payload(self) -> dict:
        payload = {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "department": self.department,
            "createdAt": self.enrolled_at,
        }
        if self.face_data:
            payload["faceData"] = self.face_data
        return payload

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "Identity":
        return cls(
            id=str(payload["id"]),
            name=str(payload.get("name") or ""),
            email=str(payload.get("email") or ""),
            department=str(payload.get("department") or ""),
            face_data=payload.get("faceData") or None,
            enrolled_at=payload.get("createdAt"),
        )
