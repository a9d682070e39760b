"""Real feature extractor backed by ``face_recognition`` (dlib) and OpenCV.

Install with the ``vision`` extra.
"""

from __future__ import annotations

import base64
import binascii
import logging
from typing import Any, Optional

import cv2
import face_recognition
import numpy as np

from ..common.datetime_utils import now_utc, to_iso
from ..core.constants import LANDMARK_COUNT
from ..core.exceptions import ValidationError
from .extractor import FeatureExtractor
from .model import BoundingRegion, FeatureVector

logger = logging.getLogger(__name__)

# Laplacian variance treated as perfectly sharp.
SHARPNESS_SCALE = 500.0


def decode_image(raw_image: Any) -> np.ndarray:
    """Decode a base64 (optionally data-URL) image or raw bytes into an RGB array."""

    if isinstance(raw_image, str):
        text = raw_image.split(",", 1)[1] if raw_image.startswith("data:") else raw_image
        try:
            raw_bytes = base64.b64decode(text)
        except (binascii.Error, ValueError) as e:
            raise ValidationError("image is not valid base64") from e
    elif isinstance(raw_image, (bytes, bytearray)):
        raw_bytes = bytes(raw_image)
    else:
        raise ValidationError("image must be base64 text or bytes")

    nparr = np.frombuffer(raw_bytes, np.uint8)
    img = cv2.imdecode(nparr, cv2.IMREAD_UNCHANGED)
    if img is None:
        raise ValidationError("image could not be decoded")

    if len(img.shape) == 3 and img.shape[2] == 4:
        img = cv2.cvtColor(img, cv2.COLOR_BGRA2BGR)
    elif len(img.shape) == 2:
        img = cv2.cvtColor(img, cv2.COLOR_GRAY2BGR)

    rgb = cv2.cvtColor(img, cv2.COLOR_BGR2RGB)
    return np.ascontiguousarray(rgb, dtype=np.uint8)


class FaceRecognitionExtractor(FeatureExtractor):
    """Extract a 128-d dlib encoding plus 68 landmark values from a photo.

    Each landmark value is the point's distance from the face box centre,
    scaled so the half-diagonal of the box equals 100.
    """

    def __init__(self, *, detection_model: str = "hog"):
        self._detection_model = detection_model

    def extract(self, raw_image: Any) -> Optional[FeatureVector]:
        rgb = decode_image(raw_image)

        boxes = face_recognition.face_locations(rgb, model=self._detection_model)
        if not boxes:
            logger.info("No face detected in capture")
            return None
        box = max(boxes, key=lambda b: (b[2] - b[0]) * (b[1] - b[3]))

        encodings = face_recognition.face_encodings(rgb, [box])
        landmark_sets = face_recognition.face_landmarks(rgb, [box], model="large")
        if not encodings or not landmark_sets:
            return None

        top, right, bottom, left = box
        width = float(right - left)
        height = float(bottom - top)
        points = [p for feature in landmark_sets[0].values() for p in feature]
        if len(points) != LANDMARK_COUNT:
            logger.warning("Expected %d landmarks, got %d", LANDMARK_COUNT, len(points))
            return None

        cx, cy = left + width / 2.0, top + height / 2.0
        half_diagonal = max(np.hypot(width, height) / 2.0, 1.0)
        landmarks = tuple(float(np.hypot(x - cx, y - cy) / half_diagonal * 100.0) for x, y in points)

        return FeatureVector(
            landmarks=landmarks,
            descriptors=tuple(float(v) for v in encodings[0]),
            bounding_region=BoundingRegion(x=float(left), y=float(top), width=width, height=height),
            quality=self._quality(rgb, box),
            captured_at=to_iso(now_utc()),
        )

    @staticmethod
    def _quality(rgb: np.ndarray, box) -> float:
        top, right, bottom, left = box
        face = cv2.cvtColor(rgb[top:bottom, left:right], cv2.COLOR_RGB2GRAY)
        if face.size == 0:
            return 0.0
        sharpness = min(1.0, float(cv2.Laplacian(face, cv2.CV_64F).var()) / SHARPNESS_SCALE)
        coverage = min(1.0, (right - left) / max(rgb.shape[1] * 0.25, 1.0))
        return round(float(np.clip(0.5 * sharpness + 0.5 * coverage, 0.0, 1.0)), 4)
