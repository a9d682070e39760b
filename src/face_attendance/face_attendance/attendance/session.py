from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, Optional

from ..common.datetime_utils import now_utc, parse_iso, to_iso
from ..common.validators import require_non_empty, require_unit_interval
from ..core.constants import DEFAULT_LOCATION
from ..core.enums import EventKind, MatchStatus
from ..core.exceptions import ValidationError
from ..identities.model import Identity
from ..identities.repository import IdentityRepository
from ..matching.model import MatchVerdict
from .model import AttendanceEvent
from .repository import AttendanceEventRepository

logger = logging.getLogger(__name__)


def new_event_id(now: datetime) -> str:
    return f"att_{int(now.timestamp() * 1000)}_{uuid.uuid4().hex[:9]}"


def decide_event_kind(identity_id: str, recent_events: Iterable[AttendanceEvent]) -> EventKind:
    """Toggle between check-in and check-out.

    An identity with no events, or whose newest event is a check-out, is
    checked out, so the next event is a check-in.
    """

    last: Optional[AttendanceEvent] = None
    for e in recent_events:
        if e.identity_id != identity_id:
            continue
        if last is None or parse_iso(e.timestamp) > parse_iso(last.timestamp):
            last = e

    if last is None or last.kind == EventKind.CHECK_OUT:
        return EventKind.CHECK_IN
    return EventKind.CHECK_OUT


@dataclass(frozen=True)
class AttendanceOutcome:
    verdict: MatchVerdict
    event: Optional[AttendanceEvent] = None


@dataclass(frozen=True)
class TodayStats:
    total_identities: int
    checked_in: int
    checked_out: int

    @property
    def present(self) -> int:
        return self.checked_in - self.checked_out

    def to_payload(self) -> dict:
        return {
            "totalEmployees": self.total_identities,
            "checkedIn": self.checked_in,
            "checkedOut": self.checked_out,
            "present": self.present,
        }


class AttendanceSessionService:
    """Use case: turn an accepted face match into a check-in or check-out event."""

    def __init__(
        self,
        identities: IdentityRepository,
        events: AttendanceEventRepository,
        *,
        accept_unverified: bool = True,
        default_location: Optional[str] = DEFAULT_LOCATION,
    ):
        self._identities = identities
        self._events = events
        self._accept_unverified = bool(accept_unverified)
        self._default_location = default_location

    def record_verified_attendance(
        self,
        identity: Identity,
        confidence: float,
        *,
        now: Optional[datetime] = None,
        location: Optional[str] = None,
    ) -> AttendanceEvent:
        now = now or now_utc()
        confidence = require_unit_interval(confidence, "confidence")

        recent = self._events.list_attendance_events(identity_id=identity.id, limit=1)
        kind = decide_event_kind(identity.id, recent)

        event = AttendanceEvent(
            id=new_event_id(now),
            identity_id=identity.id,
            identity_name=identity.name,
            kind=kind,
            timestamp=to_iso(now),
            location=location or self._default_location,
            confidence=confidence,
        )
        self._events.append_attendance_event(event)
        logger.info("Recorded %s for %s (confidence=%.2f)", kind.value, identity.id, confidence)
        return event

    def accepts(self, verdict: MatchVerdict) -> bool:
        if not verdict.is_accepted:
            return False
        if verdict.status == MatchStatus.VERIFIED:
            return True
        return verdict.status == MatchStatus.UNVERIFIED and self._accept_unverified

    def process_verdict(
        self,
        verdict: MatchVerdict,
        *,
        now: Optional[datetime] = None,
        location: Optional[str] = None,
    ) -> AttendanceOutcome:
        """Record attendance for an accepted verdict; other verdicts pass through unchanged."""

        if not self.accepts(verdict):
            return AttendanceOutcome(verdict=verdict)

        identity = self._identities.get_identity(verdict.matched_identity.id)
        event = self.record_verified_attendance(identity, verdict.confidence, now=now, location=location)
        return AttendanceOutcome(verdict=verdict.with_event(event.kind), event=event)

    def today_stats(self, *, now: Optional[datetime] = None) -> TodayStats:
        today = to_iso(now or now_utc())[:10]
        checked_in: set[str] = set()
        checked_out: set[str] = set()
        for e in self._events.list_attendance_events(date_prefix=today):
            (checked_in if e.kind == EventKind.CHECK_IN else checked_out).add(e.identity_id)

        return TodayStats(
            total_identities=len(self._identities.list_identities()),
            checked_in=len(checked_in),
            checked_out=len(checked_out),
        )

    def record_manual_event(
        self,
        *,
        identity_id: str,
        identity_name: str,
        kind: str,
        timestamp: Optional[str] = None,
        location: Optional[str] = None,
        confidence: Optional[float] = None,
        event_id: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> AttendanceEvent:
        """Append an event entered by hand; the identity is not required to exist."""

        now = now or now_utc()
        try:
            event_kind = EventKind(kind)
        except ValueError:
            raise ValidationError("Invalid attendance type")

        if timestamp:
            try:
                timestamp = to_iso(parse_iso(timestamp))
            except (ValueError, AttributeError):
                raise ValidationError("timestamp must be an ISO-8601 datetime")

        event = AttendanceEvent(
            id=(event_id or "").strip() or new_event_id(now),
            identity_id=require_non_empty(identity_id, "employeeId"),
            identity_name=require_non_empty(identity_name, "employeeName"),
            kind=event_kind,
            timestamp=timestamp or to_iso(now),
            location=location,
            confidence=None if confidence is None else require_unit_interval(confidence, "confidence"),
        )
        return self._events.append_attendance_event(event)

    def delete_event(self, event_id: str) -> AttendanceEvent:
        return self._events.delete_attendance_event(event_id)
