from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Optional

from ..core.enums import EventKind, MatchStatus


@dataclass(frozen=True)
class MatchedIdentity:
    id: str
    name: str
    department: str


@dataclass(frozen=True)
class MatchVerdict:
    """Kết quả của một lần đối sánh khuôn mặt với gallery."""

    is_match: bool
    confidence: float
    status: MatchStatus
    matched_identity: Optional[MatchedIdentity] = None
    reason: Optional[str] = None
    event_kind: Optional[EventKind] = None

    @property
    def is_accepted(self) -> bool:
        return self.is_match and self.matched_identity is not None

    def with_event(self, kind: EventKind) -> "MatchVerdict":
        return replace(self, event_kind=kind)

    def to_payload(self) -> dict:
        payload: dict = {
            "isMatch": self.is_match,
            "confidence": self.confidence,
            "matchStatus": self.status.value,
        }
        if self.matched_identity:
            payload["employee"] = {
                "id": self.matched_identity.id,
                "name": self.matched_identity.name,
                "department": self.matched_identity.department,
            }
        if self.reason:
            payload["reason"] = self.reason
        if self.event_kind:
            payload["attendanceType"] = self.event_kind.value
        return payload


@dataclass(frozen=True)
class Candidate:
    """Best-scoring gallery identity for one capture."""

    identity_id: str
    name: str
    department: str
    confidence: float
    similarity: float
