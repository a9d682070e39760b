from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import AttendanceEvent


class AttendanceEventRepository(Protocol):
    def append_attendance_event(self, event: AttendanceEvent) -> AttendanceEvent:
        raise NotImplementedError

    def list_attendance_events(
        self,
        *,
        identity_id: Optional[str] = None,
        date_prefix: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> Sequence[AttendanceEvent]:
        """Events sorted newest first; filters are combined with AND, ``limit`` applies last."""

        raise NotImplementedError

    def delete_attendance_event(self, event_id: str) -> AttendanceEvent:
        raise NotImplementedError
