from datetime import timedelta

import pytest

from face_attendance.attendance.model import AttendanceEvent
from face_attendance.attendance.session import AttendanceSessionService, decide_event_kind
from face_attendance.core.enums import EventKind, MatchStatus
from face_attendance.core.exceptions import NotFoundError, ValidationError
from face_attendance.matching.model import MatchedIdentity, MatchVerdict


def _event(identity_id: str, kind: EventKind, timestamp: str, event_id: str = "") -> AttendanceEvent:
    return AttendanceEvent(
        id=event_id or f"att_{identity_id}_{timestamp}",
        identity_id=identity_id,
        identity_name=f"Person {identity_id}",
        kind=kind,
        timestamp=timestamp,
    )


def _verdict(status: MatchStatus, identity_id: str = "emp_1", confidence: float = 0.9) -> MatchVerdict:
    accepted = status in (MatchStatus.VERIFIED, MatchStatus.UNVERIFIED)
    return MatchVerdict(
        is_match=accepted,
        confidence=confidence,
        status=status,
        matched_identity=MatchedIdentity(id=identity_id, name="Ann Lee", department="Engineering") if accepted else None,
    )


@pytest.fixture
def session(empty_store, make_identity, make_vector):
    empty_store.upsert_identity(make_identity("emp_1", name="Ann Lee", vector=make_vector()))
    return AttendanceSessionService(empty_store, empty_store)


def test_no_history_means_check_in():
    assert decide_event_kind("emp_1", []) == EventKind.CHECK_IN


def test_kind_toggles_on_latest_event_only():
    events = [
        _event("emp_1", EventKind.CHECK_IN, "2026-01-30T08:00:00.000Z"),
        _event("emp_1", EventKind.CHECK_OUT, "2026-01-30T17:00:00.000Z"),
        _event("emp_2", EventKind.CHECK_IN, "2026-01-31T08:00:00.000Z"),
    ]
    assert decide_event_kind("emp_1", events) == EventKind.CHECK_IN
    assert decide_event_kind("emp_2", events) == EventKind.CHECK_OUT

    events.append(_event("emp_1", EventKind.CHECK_IN, "2026-01-31T08:05:00.000Z"))
    assert decide_event_kind("emp_1", events) == EventKind.CHECK_OUT


def test_record_verified_attendance_alternates(session, empty_store, fixed_now):
    identity = empty_store.get_identity("emp_1")

    first = session.record_verified_attendance(identity, 0.91, now=fixed_now)
    second = session.record_verified_attendance(identity, 0.9, now=fixed_now + timedelta(hours=8))
    third = session.record_verified_attendance(identity, 0.88, now=fixed_now + timedelta(days=1))

    assert [first.kind, second.kind, third.kind] == [EventKind.CHECK_IN, EventKind.CHECK_OUT, EventKind.CHECK_IN]
    assert first.location == "Main Office"
    assert first.timestamp == "2026-01-31T12:00:00.000Z"
    assert [e.id for e in empty_store.list_attendance_events()] == [third.id, second.id, first.id]


def test_confidence_must_be_in_unit_interval(session, empty_store, fixed_now):
    with pytest.raises(ValidationError):
        session.record_verified_attendance(empty_store.get_identity("emp_1"), 1.5, now=fixed_now)
    assert empty_store.list_attendance_events() == []


def test_verified_verdict_records_event(session, empty_store, fixed_now):
    outcome = session.process_verdict(_verdict(MatchStatus.VERIFIED), now=fixed_now, location="Lobby")

    assert outcome.event is not None
    assert outcome.event.location == "Lobby"
    assert outcome.event.identity_name == "Ann Lee"
    assert outcome.verdict.event_kind == EventKind.CHECK_IN
    assert len(empty_store.list_attendance_events()) == 1


def test_rejected_and_no_match_record_nothing(session, empty_store, fixed_now):
    for status in (MatchStatus.REJECTED, MatchStatus.NO_MATCH):
        outcome = session.process_verdict(_verdict(status, confidence=0.6), now=fixed_now)
        assert outcome.event is None
        assert outcome.verdict.event_kind is None

    assert empty_store.list_attendance_events() == []


def test_unverified_verdict_respects_setting(empty_store, make_identity, make_vector, fixed_now):
    empty_store.upsert_identity(make_identity("emp_1", vector=make_vector()))
    strict = AttendanceSessionService(empty_store, empty_store, accept_unverified=False)
    lenient = AttendanceSessionService(empty_store, empty_store, accept_unverified=True)

    assert strict.process_verdict(_verdict(MatchStatus.UNVERIFIED, confidence=0.75), now=fixed_now).event is None
    assert lenient.process_verdict(_verdict(MatchStatus.UNVERIFIED, confidence=0.75), now=fixed_now).event is not None


def test_verdict_for_deleted_identity_is_not_found(session, empty_store, fixed_now):
    empty_store.delete_identity("emp_1")

    with pytest.raises(NotFoundError):
        session.process_verdict(_verdict(MatchStatus.VERIFIED), now=fixed_now)
    assert empty_store.list_attendance_events() == []


def test_manual_event_rejects_unknown_type(session):
    with pytest.raises(ValidationError, match="Invalid attendance type"):
        session.record_manual_event(identity_id="emp_1", identity_name="Ann Lee", kind="lunch")


def test_manual_event_rejects_bad_timestamp(session):
    with pytest.raises(ValidationError):
        session.record_manual_event(identity_id="emp_1", identity_name="Ann Lee", kind="check-in", timestamp="yesterday")


def test_manual_event_for_unknown_identity_is_allowed(session, empty_store, fixed_now):
    event = session.record_manual_event(
        identity_id="emp_gone",
        identity_name="Former Employee",
        kind="check-out",
        timestamp="2026-01-30T17:45:00Z",
        event_id="att_manual_1",
        now=fixed_now,
    )

    assert event.id == "att_manual_1"
    assert event.kind == EventKind.CHECK_OUT
    assert event.timestamp == "2026-01-30T17:45:00.000Z"
    assert empty_store.list_attendance_events(identity_id="emp_gone") == [event]


def test_today_stats(session, empty_store, make_identity, fixed_now):
    empty_store.upsert_identity(make_identity("emp_2"))
    empty_store.append_attendance_event(_event("emp_1", EventKind.CHECK_IN, "2026-01-31T08:00:00.000Z"))
    empty_store.append_attendance_event(_event("emp_2", EventKind.CHECK_IN, "2026-01-31T08:30:00.000Z"))
    empty_store.append_attendance_event(_event("emp_2", EventKind.CHECK_OUT, "2026-01-31T11:30:00.000Z"))
    empty_store.append_attendance_event(_event("emp_1", EventKind.CHECK_OUT, "2026-01-30T17:00:00.000Z"))

    stats = session.today_stats(now=fixed_now)

    assert stats.to_payload() == {"totalEmployees": 2, "checkedIn": 2, "checkedOut": 1, "present": 1}


def test_delete_event(session, empty_store):
    empty_store.append_attendance_event(_event("emp_1", EventKind.CHECK_IN, "2026-01-31T08:00:00.000Z", "att_x"))

    assert session.delete_event("att_x").id == "att_x"
    with pytest.raises(NotFoundError):
        session.delete_event("att_x")
