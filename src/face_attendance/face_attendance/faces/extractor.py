from __future__ import annotations

import logging
import random
from abc import ABC, abstractmethod
from typing import Any, Optional

from ..common.datetime_utils import now_utc, to_iso
from ..core.constants import (
    DESCRIPTOR_COUNT,
    LANDMARK_COUNT,
    SIMULATED_DETECTION_RATE,
    SIMULATED_LATENCY_RANGE,
    SIMULATED_QUALITY_RANGE,
)
from .demo import demo_face_key, demo_reference_vector, jitter_vector
from .model import BoundingRegion, FeatureVector

logger = logging.getLogger(__name__)


class FeatureExtractor(ABC):
    """Strategy Pattern: turn a raw capture into a ``FeatureVector``.

    ``latency_range`` is the (min, max) processing delay in seconds the
    extractor models; the match engine awaits it before extracting.
    """

    latency_range: tuple[float, float] = (0.0, 0.0)

    @abstractmethod
    def extract(self, raw_image: Any) -> Optional[FeatureVector]:
        """Return the detected face's features, or ``None`` when no face is found."""
        raise NotImplementedError


class SimulatedFeatureExtractor(FeatureExtractor):
    """Random stand-in for a face detector.

    Detection fails with probability ``1 - detection_rate``; detected faces get
    a quality in ``quality_range``.
    """

    def __init__(
        self,
        *,
        rng: Optional[random.Random] = None,
        detection_rate: float = SIMULATED_DETECTION_RATE,
        quality_range: tuple[float, float] = SIMULATED_QUALITY_RANGE,
        latency_range: tuple[float, float] = SIMULATED_LATENCY_RANGE,
    ):
        self._rng = rng or random.Random()
        self._detection_rate = float(detection_rate)
        self._quality_range = quality_range
        self.latency_range = latency_range

    def extract(self, raw_image: Any) -> Optional[FeatureVector]:
        if self._rng.random() >= self._detection_rate:
            logger.info("Simulated detector found no face")
            return None

        rnd = self._rng.random
        low, high = self._quality_range
        quality = low + rnd() * (high - low)
        return FeatureVector(
            landmarks=tuple(rnd() * 100 for _ in range(LANDMARK_COUNT)),
            descriptors=tuple(rnd() * 2 - 1 for _ in range(DESCRIPTOR_COUNT)),
            bounding_region=BoundingRegion(
                x=50 + rnd() * 20,
                y=60 + rnd() * 20,
                width=120 + rnd() * 40,
                height=150 + rnd() * 40,
            ),
            quality=quality,
            captured_at=to_iso(now_utc()),
        )


class StaticFeatureExtractor(FeatureExtractor):
    """Test double: always returns the same vector (or ``None``)."""

    def __init__(self, vector: Optional[FeatureVector]):
        self._vector = vector
        self.calls: list[Any] = []

    def extract(self, raw_image: Any) -> Optional[FeatureVector]:
        self.calls.append(raw_image)
        return self._vector


class DemoFeatureExtractor(FeatureExtractor):
    """Treats the raw input as a demo employee id (or face key) and returns a jittered copy of their face.

    Used by the demo flow: selecting a seeded employee simulates that person
    standing in front of the camera.
    """

    def __init__(
        self,
        *,
        rng: Optional[random.Random] = None,
        quality: float = 0.95,
        latency_range: tuple[float, float] = (0.0, 0.0),
    ):
        self._rng = rng or random.Random()
        self._quality = float(quality)
        self.latency_range = latency_range

    def extract(self, raw_image: Any) -> Optional[FeatureVector]:
        key = str(raw_image or "").strip()
        if not key:
            return None

        reference = demo_reference_vector(demo_face_key(key) or key)
        captured = jitter_vector(reference, rng=self._rng, captured_at=to_iso(now_utc()))
        return FeatureVector(
            landmarks=captured.landmarks,
            descriptors=captured.descriptors,
            bounding_region=captured.bounding_region,
            quality=self._quality,
            captured_at=captured.captured_at,
        )
