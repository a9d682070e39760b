import base64
import json

import pytest

from face_attendance.core.exceptions import DecodeError, ValidationError
from face_attendance.faces.demo import demo_face_key, demo_reference_vector, hash_key
from face_attendance.faces.model import (
    BoundingRegion,
    FeatureVector,
    decode_face_data,
    encode_face_data,
    is_valid_face_data,
)


def _b64(payload) -> str:
    return base64.b64encode(json.dumps(payload).encode("utf-8")).decode("ascii")


def test_validate_rejects_wrong_lengths(make_vector):
    bad = make_vector(landmarks=[1.0] * 67)
    with pytest.raises(ValidationError):
        bad.validate()
    assert not bad.is_valid


def test_validate_rejects_quality_out_of_range(make_vector):
    assert not make_vector(quality=1.2).is_valid
    assert not make_vector(quality=-0.1).is_valid


def test_encoded_face_data_decodes_to_same_vector(make_vector):
    vector = make_vector(quality=0.8)
    assert decode_face_data(encode_face_data(vector)) == vector


def test_decode_defaults_missing_quality_to_one():
    payload = {
        "landmarks": [1.0] * 68,
        "descriptors": [0.1] * 128,
        "boundingBox": {"x": 1, "y": 2, "width": 130, "height": 160},
    }
    assert decode_face_data(_b64(payload)).quality == 1.0


@pytest.mark.parametrize(
    "face_data",
    [
        "",
        "%%%not-base64%%%",
        base64.b64encode(b"not json").decode("ascii"),
        _b64([1, 2, 3]),
        _b64({"landmarks": [1.0] * 10, "descriptors": [0.1] * 128}),
        _b64({"landmarks": [1.0] * 68}),
        _b64({"landmarks": ["x"] * 68, "descriptors": [0.1] * 128}),
    ],
)
def test_decode_rejects_malformed_face_data(face_data):
    with pytest.raises(DecodeError):
        decode_face_data(face_data)


def test_enrollable_requires_face_size_and_quality(make_vector):
    good = make_vector(quality=0.9)
    assert good.is_enrollable()

    small = FeatureVector(
        landmarks=good.landmarks,
        descriptors=good.descriptors,
        bounding_region=BoundingRegion(x=0, y=0, width=40, height=170),
        quality=0.9,
    )
    assert not small.is_enrollable()
    assert not make_vector(quality=0.3).is_enrollable()
    assert is_valid_face_data(encode_face_data(good))
    assert not is_valid_face_data("garbage")


def test_demo_reference_vectors_are_stable_per_person():
    assert demo_reference_vector("sarah") == demo_reference_vector("sarah")
    assert demo_reference_vector("sarah") != demo_reference_vector("michael")
    assert demo_reference_vector("sarah").is_enrollable()


def test_hash_key_is_non_negative():
    assert hash_key("") == 0
    assert hash_key("a") == 97
    assert hash_key("sarah") >= 0


def test_demo_face_key_resolves_seeded_employee_ids():
    assert demo_face_key("emp_001") == "sarah"
    assert demo_face_key("emp_006") == "james"
    assert demo_face_key("emp_unknown") is None
