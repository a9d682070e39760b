import pytest

from face_attendance.faces.similarity import descriptor_similarity, landmark_similarity


def test_identical_descriptors_are_maximally_similar():
    v = [0.3, -0.7, 0.11, 0.9, -0.25] * 25 + [0.1, 0.2, 0.3]
    assert descriptor_similarity(v, v) == 1.0


def test_identical_landmarks_are_maximally_similar():
    v = [float(i) * 1.3 for i in range(68)]
    assert landmark_similarity(v, v) == 1.0


def test_mismatched_lengths_score_zero():
    assert descriptor_similarity([1.0, 2.0], [1.0, 2.0, 3.0]) == 0
    assert landmark_similarity([1.0, 2.0], [1.0]) == 0


def test_opposite_descriptors_score_zero():
    assert descriptor_similarity([1.0, -2.0, 3.0], [-1.0, 2.0, -3.0]) == pytest.approx(0.0)


def test_orthogonal_descriptors_score_half():
    assert descriptor_similarity([1.0, 0.0], [0.0, 1.0]) == pytest.approx(0.5)


def test_zero_magnitude_descriptor_scores_zero():
    assert descriptor_similarity([0.0, 0.0, 0.0], [1.0, 2.0, 3.0]) == 0


def test_landmark_distance_is_normalized_by_100():
    a = [10.0] * 68
    b = [35.0] * 68
    assert landmark_similarity(a, b) == pytest.approx(0.75)


def test_landmark_similarity_floors_at_zero():
    assert landmark_similarity([0.0] * 4, [250.0] * 4) == 0.0


def test_empty_inputs_score_zero():
    assert descriptor_similarity([], []) == 0
    assert landmark_similarity([], []) == 0
