from __future__ import annotations

import base64
import binascii
import json
import math
from dataclasses import dataclass
from typing import Any, Mapping, Optional, Sequence

from ..common.validators import require_length, require_unit_interval
from ..core.constants import DESCRIPTOR_COUNT, LANDMARK_COUNT, MIN_ENROLL_FACE_SIZE, MIN_ENROLL_QUALITY
from ..core.exceptions import DecodeError, ValidationError


@dataclass(frozen=True)
class BoundingRegion:
    x: float
    y: float
    width: float
    height: float

    def to_payload(self) -> dict:
        return {"x": self.x, "y": self.y, "width": self.width, "height": self.height}


@dataclass(frozen=True)
class FeatureVector:
    """Numeric representation of one detected face.

    ``landmarks`` holds the 68 facial geometry values and ``descriptors`` the
    128-value identity embedding. ``quality`` is in [0, 1].
    """

    landmarks: tuple[float, ...]
    descriptors: tuple[float, ...]
    bounding_region: BoundingRegion
    quality: float = 1.0
    captured_at: Optional[str] = None

    def validate(self) -> "FeatureVector":
        require_length(self.landmarks, "landmarks", LANDMARK_COUNT)
        require_length(self.descriptors, "descriptors", DESCRIPTOR_COUNT)
        require_unit_interval(self.quality, "quality")
        if not all(math.isfinite(v) for v in self.landmarks) or not all(math.isfinite(v) for v in self.descriptors):
            raise ValidationError("feature values must be finite numbers")
        return self

    @property
    def is_valid(self) -> bool:
        try:
            self.validate()
        except ValidationError:
            return False
        return True

    def is_enrollable(self) -> bool:
        """Whether this vector is good enough to be stored as a reference."""

        return (
            self.is_valid
            and self.bounding_region.width > MIN_ENROLL_FACE_SIZE
            and self.bounding_region.height > MIN_ENROLL_FACE_SIZE
            and self.quality > MIN_ENROLL_QUALITY
        )

    def to_payload(self) -> dict:
        payload: dict[str, Any] = {
            "landmarks": list(self.landmarks),
            "descriptors": list(self.descriptors),
            "boundingBox": self.bounding_region.to_payload(),
            "quality": self.quality,
        }
        if self.captured_at:
            payload["timestamp"] = self.captured_at
        return payload

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "FeatureVector":
        """Build a vector from its JSON payload, raising ``DecodeError`` on bad shapes.

        Reference vectors written without a quality score get ``1.0``.
        """

        if not isinstance(payload, Mapping):
            raise DecodeError("face data must be a JSON object")
        try:
            box = payload.get("boundingBox") or {}
            vector = cls(
                landmarks=_floats(payload["landmarks"]),
                descriptors=_floats(payload["descriptors"]),
                bounding_region=BoundingRegion(
                    x=float(box.get("x", 0.0)),
                    y=float(box.get("y", 0.0)),
                    width=float(box.get("width", 0.0)),
                    height=float(box.get("height", 0.0)),
                ),
                quality=1.0 if payload.get("quality") is None else float(payload["quality"]),
                captured_at=payload.get("timestamp"),
            )
            return vector.validate()
        except (KeyError, TypeError, ValueError, AttributeError, ValidationError) as e:
            raise DecodeError(f"invalid face data: {e}") from e


def _floats(values: Sequence[Any]) -> tuple[float, ...]:
    if isinstance(values, (str, bytes)):
        raise TypeError("expected a list of numbers")
    return tuple(float(v) for v in values)


def encode_face_data(vector: FeatureVector) -> str:
    """Serialize a vector into the base64 text stored on an identity."""

    body = json.dumps(vector.to_payload(), separators=(",", ":"))
    return base64.b64encode(body.encode("utf-8")).decode("ascii")


def decode_face_data(face_data: Optional[str]) -> FeatureVector:
    if not face_data:
        raise DecodeError("face data is empty")
    try:
        raw = base64.b64decode(face_data, validate=True)
        payload = json.loads(raw.decode("utf-8"))
    except (binascii.Error, UnicodeDecodeError, ValueError) as e:
        raise DecodeError(f"face data is not base64 JSON: {e}") from e
    return FeatureVector.from_payload(payload)


def is_valid_face_data(face_data: Optional[str]) -> bool:
    """True when ``face_data`` decodes to an enrollable reference vector."""

    try:
        return decode_face_data(face_data).is_enrollable()
    except DecodeError:
        return False
