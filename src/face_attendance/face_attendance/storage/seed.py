"""Demo gallery and a week of synthetic attendance.

Identities are fixed. Events are drawn from ``random.Random(seed)``: with a
seed, every reset reproduces the same pattern relative to the reset day;
with ``seed=None`` each reset is random.
"""

from __future__ import annotations

import random
from datetime import datetime, timedelta
from typing import Optional, Sequence

from ..common.datetime_utils import to_iso
from ..core.constants import DEFAULT_LOCATION, DEFAULT_SEED_DAYS
from ..core.enums import EventKind
from ..faces.demo import demo_face_key, demo_reference_vector
from ..faces.model import encode_face_data
from ..identities.model import Identity
from ..attendance.model import AttendanceEvent

# (id, name, email, department, enrolled at)
DEMO_PEOPLE = (
    ("emp_001", "Sarah Johnson", "sarah.johnson@company.com", "Engineering", "2024-01-15T08:00:00.000Z"),
    ("emp_002", "Michael Chen", "michael.chen@company.com", "Design", "2024-01-16T09:30:00.000Z"),
    ("emp_003", "Emily Rodriguez", "emily.rodriguez@company.com", "Marketing", "2024-01-17T10:15:00.000Z"),
    ("emp_004", "David Kim", "david.kim@company.com", "Engineering", "2024-01-18T11:00:00.000Z"),
    ("emp_005", "Lisa Thompson", "lisa.thompson@company.com", "HR", "2024-01-19T14:20:00.000Z"),
    ("emp_006", "James Wilson", "james.wilson@company.com", "Sales", "2024-01-20T16:45:00.000Z"),
)


def build_demo_identities() -> list[Identity]:
    return [
        Identity(
            id=pid,
            name=name,
            email=email,
            department=dept,
            face_data=encode_face_data(demo_reference_vector(demo_face_key(pid))),
            enrolled_at=enrolled_at,
        )
        for pid, name, email, dept, enrolled_at in DEMO_PEOPLE
    ]


def _event(identity: Identity, kind: EventKind, at: datetime, confidence: float) -> AttendanceEvent:
    suffix = "in" if kind == EventKind.CHECK_IN else "out"
    return AttendanceEvent(
        id=f"att_{int(at.timestamp() * 1000)}_{identity.id}_{suffix}",
        identity_id=identity.id,
        identity_name=identity.name,
        kind=kind,
        timestamp=to_iso(at),
        location=DEFAULT_LOCATION,
        confidence=round(confidence, 4),
    )


def build_demo_events(
    identities: Sequence[Identity],
    *,
    now: datetime,
    seed: Optional[int] = None,
    days: int = DEFAULT_SEED_DAYS,
) -> list[AttendanceEvent]:
    """Synthetic events for the last ``days`` days, newest first.

    Each identity shows up on a day with probability 0.7 and checks out with
    probability 0.8. Events later than ``now`` are not generated.
    """

    rng = random.Random(seed)
    events: list[AttendanceEvent] = []

    for day in range(days):
        base = (now - timedelta(days=day)).replace(hour=0, minute=0, second=0, microsecond=0)
        present = [i for i in identities if rng.random() > 0.3]

        for identity in present:
            check_in = base.replace(hour=8 + rng.randrange(2), minute=rng.randrange(60))
            check_in_confidence = 0.85 + rng.random() * 0.12
            checks_out = rng.random() > 0.2
            check_out = base.replace(hour=17 + rng.randrange(2), minute=rng.randrange(60))
            check_out_confidence = 0.82 + rng.random() * 0.15

            if check_in > now:
                continue
            events.append(_event(identity, EventKind.CHECK_IN, check_in, check_in_confidence))
            if checks_out and check_out <= now:
                events.append(_event(identity, EventKind.CHECK_OUT, check_out, check_out_confidence))

    events.sort(key=lambda e: e.timestamp, reverse=True)
    return events
