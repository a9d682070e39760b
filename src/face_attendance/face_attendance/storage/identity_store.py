from __future__ import annotations

import json
import logging
from datetime import datetime
from typing import Iterable, Optional, Sequence

from ..attendance.model import AttendanceEvent, DailySummary
from ..attendance.summary import compute_daily_summaries
from ..common.datetime_utils import now_utc, parse_iso
from ..common.validators import require_non_empty
from ..core.constants import ATTENDANCE_KEY, DEFAULT_SEED_RANDOM_SEED, DEMO_DATA_INITIALIZED_KEY, EMPLOYEES_KEY
from ..core.exceptions import ConflictError, NotFoundError, StorageError
from ..identities.model import Identity
from .blob_store import BlobStore
from .seed import build_demo_events, build_demo_identities

logger = logging.getLogger(__name__)

_TRUE = "true"


class IdentityStore:
    """Enrolled identities and attendance events over a ``BlobStore``.

    Each collection is persisted as a single JSON record and every write
    replaces it whole, so readers never see a half-applied change. Implements
    both ``IdentityRepository`` and ``AttendanceEventRepository``.

    With ``auto_seed`` on, the first read of an empty store writes the demo
    gallery and a week of events; a persisted flag keeps that from happening
    more than once.
    """

    def __init__(
        self,
        blobs: BlobStore,
        *,
        auto_seed: bool = True,
        seed: Optional[int] = DEFAULT_SEED_RANDOM_SEED,
    ):
        self._blobs = blobs
        self._auto_seed = bool(auto_seed)
        self._seed = seed

    # -- persistence helpers -------------------------------------------------

    def _read(self, name: str) -> Optional[str]:
        try:
            return self._blobs.get(name)
        except StorageError:
            raise
        except Exception as e:
            logger.error("Reading %s failed: %s", name, e)
            raise StorageError(f"Cannot read {name}") from e

    def _read_list(self, name: str) -> list[dict]:
        body = self._read(name)
        if not body:
            return []
        try:
            data = json.loads(body)
        except ValueError as e:
            raise StorageError(f"Stored {name} collection is corrupt") from e
        if not isinstance(data, list):
            raise StorageError(f"Stored {name} collection is not a list")
        return data

    def _commit(self, records: dict[str, Optional[str]]) -> None:
        try:
            self._blobs.set_many(records)
        except StorageError:
            logger.error("Write of %s failed", ", ".join(records))
            raise
        except Exception as e:
            logger.error("Write of %s failed: %s", ", ".join(records), e)
            raise StorageError("Cannot write to storage") from e

    @staticmethod
    def _dump_identities(identities: Iterable[Identity]) -> str:
        return json.dumps([i.to_payload() for i in identities], ensure_ascii=False)

    @staticmethod
    def _dump_events(events: Iterable[AttendanceEvent]) -> str:
        return json.dumps([e.to_payload() for e in events], ensure_ascii=False)

    def _load_identities(self) -> list[Identity]:
        return [Identity.from_payload(p) for p in self._read_list(EMPLOYEES_KEY)]

    def _load_events(self) -> list[AttendanceEvent]:
        return [AttendanceEvent.from_payload(p) for p in self._read_list(ATTENDANCE_KEY)]

    # -- demo data -----------------------------------------------------------

    def is_seeded(self) -> bool:
        return self._read(DEMO_DATA_INITIALIZED_KEY) == _TRUE

    def initialize_demo_data(self, *, now: Optional[datetime] = None) -> bool:
        """Seed the demo gallery unless the flag says it already happened. Returns True if it seeded."""

        if self.is_seeded():
            return False

        identities = build_demo_identities()
        events = build_demo_events(identities, now=now or now_utc(), seed=self._seed)
        self._commit(
            {
                EMPLOYEES_KEY: self._dump_identities(identities),
                ATTENDANCE_KEY: self._dump_events(events),
                DEMO_DATA_INITIALIZED_KEY: _TRUE,
            }
        )
        logger.info("Demo data initialized with %d employees and %d attendance records", len(identities), len(events))
        return True

    def _ensure_initialized(self) -> None:
        if self._auto_seed:
            self.initialize_demo_data()

    def reset_to_seed_data(self, *, now: Optional[datetime] = None) -> None:
        """Replace everything with freshly generated demo data."""

        identities = build_demo_identities()
        events = build_demo_events(identities, now=now or now_utc(), seed=self._seed)
        self._commit(
            {
                EMPLOYEES_KEY: self._dump_identities(identities),
                ATTENDANCE_KEY: self._dump_events(events),
                DEMO_DATA_INITIALIZED_KEY: _TRUE,
            }
        )
        logger.info("Demo data reset")

    def clear_all(self) -> None:
        """Remove all identities and events. The seed flag stays set, so nothing is re-seeded."""

        self._commit({EMPLOYEES_KEY: None, ATTENDANCE_KEY: None, DEMO_DATA_INITIALIZED_KEY: _TRUE})
        logger.info("All data cleared")

    # -- identities ----------------------------------------------------------

    def list_identities(self) -> Sequence[Identity]:
        self._ensure_initialized()
        return self._load_identities()

    def find_identity(self, identity_id: str) -> Optional[Identity]:
        for identity in self.list_identities():
            if identity.id == identity_id:
                return identity
        return None

    def get_identity(self, identity_id: str) -> Identity:
        identity = self.find_identity(identity_id)
        if identity is None:
            raise NotFoundError("Employee not found")
        return identity

    def upsert_identity(self, identity: Identity) -> Identity:
        require_non_empty(identity.name, "name")
        email = require_non_empty(identity.email, "email")
        require_non_empty(identity.department, "department")

        identities = list(self.list_identities())
        for other in identities:
            if other.id != identity.id and other.email.strip().lower() == email.lower():
                raise ConflictError("Employee with this email already exists")

        for idx, existing in enumerate(identities):
            if existing.id == identity.id:
                identities[idx] = identity
                break
        else:
            identities.append(identity)

        self._commit({EMPLOYEES_KEY: self._dump_identities(identities)})
        return identity

    def delete_identity(self, identity_id: str) -> Identity:
        identities = list(self.list_identities())
        for idx, existing in enumerate(identities):
            if existing.id == identity_id:
                removed = identities.pop(idx)
                self._commit({EMPLOYEES_KEY: self._dump_identities(identities)})
                return removed
        raise NotFoundError("Employee not found")

    # -- attendance events ---------------------------------------------------

    def append_attendance_event(self, event: AttendanceEvent) -> AttendanceEvent:
        self._ensure_initialized()
        events = self._load_events()
        self._commit({ATTENDANCE_KEY: self._dump_events([event, *events])})
        return event

    def list_attendance_events(
        self,
        *,
        identity_id: Optional[str] = None,
        date_prefix: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> Sequence[AttendanceEvent]:
        self._ensure_initialized()
        events = self._load_events()
        if identity_id:
            events = [e for e in events if e.identity_id == identity_id]
        if date_prefix:
            events = [e for e in events if e.timestamp.startswith(date_prefix)]

        events.sort(key=lambda e: parse_iso(e.timestamp), reverse=True)
        if limit is not None:
            events = events[: max(0, int(limit))]
        return events

    def count_attendance_events(self) -> int:
        self._ensure_initialized()
        return len(self._read_list(ATTENDANCE_KEY))

    def delete_attendance_event(self, event_id: str) -> AttendanceEvent:
        self._ensure_initialized()
        events = self._load_events()
        for idx, existing in enumerate(events):
            if existing.id == event_id:
                removed = events.pop(idx)
                self._commit({ATTENDANCE_KEY: self._dump_events(events)})
                return removed
        raise NotFoundError("Attendance record not found")

    def compute_daily_summaries(self, events: Optional[Iterable[AttendanceEvent]] = None) -> list[DailySummary]:
        if events is None:
            events = self.list_attendance_events()
        return compute_daily_summaries(events)
