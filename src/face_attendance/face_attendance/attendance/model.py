from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional

from ..core.enums import EventKind


@dataclass(frozen=True)
class AttendanceEvent:
    """Thực thể miền (domain): một lần chấm công vào/ra.

    Events are immutable; ``identity_name`` is a snapshot taken at write time
    and ``identity_id`` may point at an identity that was deleted since.
    """

    id: str
    identity_id: str
    identity_name: str
    kind: EventKind
    timestamp: str
    location: Optional[str] = None
    confidence: Optional[float] = None

    def to_payload(self) -> dict:
        payload: dict[str, Any] = {
            "id": self.id,
            "employeeId": self.identity_id,
            "employeeName": self.identity_name,
            "type": self.kind.value,
            "timestamp": self.timestamp,
        }
        if self.location is not None:
            payload["location"] = self.location
        if self.confidence is not None:
            payload["confidence"] = self.confidence
        return payload

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "AttendanceEvent":
        confidence = payload.get("confidence")
        return cls(
            id=str(payload["id"]),
            identity_id=str(payload["employeeId"]),
            identity_name=str(payload.get("employeeName") or ""),
            kind=EventKind(payload["type"]),
            timestamp=str(payload["timestamp"]),
            location=payload.get("location"),
            confidence=None if confidence is None else float(confidence),
        )


@dataclass(frozen=True)
class DailySummary:
    """Read-model: latest check-in/check-out of one identity on one day."""

    identity_id: str
    identity_name: str
    date: str
    check_in: Optional[str] = None
    check_out: Optional[str] = None
    total_hours: Optional[float] = None

    def to_payload(self) -> dict:
        return {
            "employeeId": self.identity_id,
            "employeeName": self.identity_name,
            "date": self.date,
            "checkIn": self.check_in,
            "checkOut": self.check_out,
            "totalHours": self.total_hours,
        }
