import random

import pytest

from face_attendance.core.enums import MatchStatus
from face_attendance.faces.demo import demo_reference_vector
from face_attendance.faces.extractor import DemoFeatureExtractor, StaticFeatureExtractor
from face_attendance.matching import engine as engine_module
from face_attendance.matching.engine import MatchEngine
from face_attendance.storage.seed import build_demo_identities


@pytest.fixture
def engine():
    return MatchEngine(StaticFeatureExtractor(None))


def test_empty_gallery_is_no_match(engine, make_vector):
    for quality in (0.1, 0.9):
        verdict = engine.match_against_gallery(make_vector(quality=quality), [])
        assert verdict.status == MatchStatus.NO_MATCH
        assert verdict.reason == "No employees in database"
        assert verdict.confidence == 0.0


def test_poor_quality_is_rejected_before_scoring(engine, make_vector, make_identity, monkeypatch):
    def _boom(*args, **kwargs):
        raise AssertionError("similarity must not be computed")

    monkeypatch.setattr(engine_module, "descriptor_similarity", _boom)
    monkeypatch.setattr(engine_module, "landmark_similarity", _boom)

    gallery = [make_identity("emp_1", vector=make_vector())]
    verdict = engine.match_against_gallery(make_vector(quality=0.49), gallery)

    assert verdict.status == MatchStatus.REJECTED
    assert verdict.is_match is False
    assert verdict.reason.startswith("Poor image quality")


def test_identical_face_is_verified(engine, make_vector, make_identity):
    vector = make_vector()
    gallery = [make_identity("emp_1", name="Ann Lee", vector=vector)]

    verdict = engine.match_against_gallery(vector, gallery)

    assert verdict.status == MatchStatus.VERIFIED
    assert verdict.is_match is True
    assert verdict.confidence == 1.0
    assert verdict.matched_identity.name == "Ann Lee"


@pytest.mark.parametrize(
    "reference_quality, status",
    [
        (0.85, MatchStatus.VERIFIED),
        (0.8499, MatchStatus.UNVERIFIED),
        (0.70, MatchStatus.UNVERIFIED),
        (0.6999, MatchStatus.REJECTED),
        (0.50, MatchStatus.REJECTED),
        (0.4999, MatchStatus.NO_MATCH),
    ],
)
def test_reference_quality_scales_confidence(engine, make_vector, make_identity, reference_quality, status):
    captured = make_vector(quality=1.0)
    gallery = [make_identity("emp_1", vector=make_vector(quality=reference_quality))]

    verdict = engine.match_against_gallery(captured, gallery)

    assert verdict.status == status
    assert 0.0 <= verdict.confidence <= 1.0
    assert verdict.confidence == round(verdict.confidence, 2)


def test_best_candidate_wins(engine, make_vector, make_identity):
    captured = make_vector(descriptor=0.5, landmark=50.0)
    gallery = [
        make_identity("emp_far", vector=make_vector(descriptors=[0.5] * 128, landmark=90.0)),
        make_identity("emp_near", vector=make_vector(descriptor=0.5, landmark=50.0)),
    ]

    verdict = engine.match_against_gallery(captured, gallery)
    assert verdict.matched_identity.id == "emp_near"


def test_ties_keep_first_identity(engine, make_vector, make_identity):
    vector = make_vector()
    gallery = [make_identity("emp_a", vector=vector), make_identity("emp_b", vector=vector)]

    assert engine.match_against_gallery(vector, gallery).matched_identity.id == "emp_a"


def test_undecodable_references_are_skipped(engine, make_vector, make_identity):
    vector = make_vector()
    gallery = [
        make_identity("emp_bad", face_data="definitely-not-face-data"),
        make_identity("emp_none"),
        make_identity("emp_ok", vector=vector),
    ]

    verdict = engine.match_against_gallery(vector, gallery)
    assert verdict.matched_identity.id == "emp_ok"


def test_gallery_without_face_data_is_no_match(engine, make_vector, make_identity):
    gallery = [make_identity("emp_bad", face_data="@@@"), make_identity("emp_none")]

    verdict = engine.match_against_gallery(make_vector(), gallery)

    assert verdict.status == MatchStatus.NO_MATCH
    assert verdict.reason == "No face data found in database"


def test_invalid_capture_is_rejected(engine, make_vector, make_identity):
    gallery = [make_identity("emp_1", vector=make_vector())]

    assert engine.match_against_gallery(None, gallery).status == MatchStatus.REJECTED
    assert engine.match_against_gallery(make_vector(landmarks=[1.0] * 3), gallery).status == MatchStatus.REJECTED


def test_matching_is_deterministic(engine, make_vector, make_identity):
    gallery = [
        make_identity("emp_1", vector=make_vector(landmark=40.0)),
        make_identity("emp_2", vector=make_vector(descriptor=0.2, landmark=55.0)),
    ]
    captured = make_vector(descriptor=0.3, landmark=52.0, quality=0.9)

    first = engine.match_against_gallery(captured, gallery)
    second = engine.match_against_gallery(captured, gallery)
    assert first == second


def test_demo_capture_matches_its_seeded_identity():
    captured = DemoFeatureExtractor(rng=random.Random(11)).extract("sarah")
    engine = MatchEngine(StaticFeatureExtractor(captured))

    verdict = engine.match_against_gallery(captured, build_demo_identities())

    assert verdict.status == MatchStatus.VERIFIED
    assert verdict.matched_identity.id == "emp_001"
    assert captured.descriptors != demo_reference_vector("sarah").descriptors


def test_reference_without_quality_score_does_not_scale(engine, make_vector, make_identity):
    captured = make_vector(quality=1.0)
    gallery = [make_identity("emp_1", vector=make_vector(quality=0.0))]

    verdict = engine.match_against_gallery(captured, gallery)

    assert verdict.status == MatchStatus.VERIFIED
    assert verdict.confidence == 1.0


def test_demo_capture_by_employee_id_matches_that_employee():
    captured = DemoFeatureExtractor(rng=random.Random(5)).extract("emp_001")
    engine = MatchEngine(StaticFeatureExtractor(captured))

    verdict = engine.match_against_gallery(captured, build_demo_identities())

    assert verdict.status == MatchStatus.VERIFIED
    assert verdict.matched_identity.id == "emp_001"
