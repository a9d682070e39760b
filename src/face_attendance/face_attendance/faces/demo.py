"""Deterministic demo faces for the seeded gallery.

Each demo person gets a reference vector derived from a hash of their key, so
the same person always produces the same face.
"""

from __future__ import annotations

import math
import random
from typing import Callable, Optional

from ..core.constants import DESCRIPTOR_COUNT, LANDMARK_COUNT
from .model import BoundingRegion, FeatureVector


def hash_key(key: str) -> int:
    h = 0
    for ch in key:
        h = (((h << 5) - h) + ord(ch)) & 0xFFFFFFFF
    if h >= 0x80000000:
        h -= 0x100000000
    return abs(h)


def seeded_random(seed: int) -> Callable[[], float]:
    """Linear congruential generator yielding floats in [0, 1)."""

    state = seed

    def _next() -> float:
        nonlocal state
        state = (state * 1664525 + 1013904223) % 2**32
        return state / 2**32

    return _next


DEMO_FACE_KEYS = {
    "emp_001": "sarah",
    "emp_002": "michael",
    "emp_003": "emily",
    "emp_004": "david",
    "emp_005": "lisa",
    "emp_006": "james",
}


def demo_face_key(identity_id: str) -> Optional[str]:
    """Face key of a seeded demo employee, or None for anyone else."""

    return DEMO_FACE_KEYS.get(identity_id)


def demo_reference_vector(person_key: str) -> FeatureVector:
    """Reference vector for a demo person; it carries no quality score, so matching treats it as 1.0."""

    seed = hash_key(person_key)
    rnd = seeded_random(seed)

    landmarks = tuple(math.sin(seed + i * 0.1) * 50 + 50 + rnd() * 20 for i in range(LANDMARK_COUNT))
    descriptors = tuple(math.cos(seed + i * 0.05) * 0.8 + rnd() * 0.4 - 0.2 for i in range(DESCRIPTOR_COUNT))
    box = BoundingRegion(
        x=45 + rnd() * 10,
        y=55 + rnd() * 10,
        width=130 + rnd() * 20,
        height=160 + rnd() * 20,
    )
    return FeatureVector(landmarks=landmarks, descriptors=descriptors, bounding_region=box, quality=1.0)


def jitter_vector(
    reference: FeatureVector,
    *,
    rng: Optional[random.Random] = None,
    descriptor_spread: float = 0.1,
    landmark_spread: float = 5.0,
    captured_at: Optional[str] = None,
) -> FeatureVector:
    """Small random variation of ``reference``, simulating a fresh capture of the same face."""

    rng = rng or random.Random()
    return FeatureVector(
        landmarks=tuple(v + (rng.random() - 0.5) * landmark_spread for v in reference.landmarks),
        descriptors=tuple(v + (rng.random() - 0.5) * descriptor_spread for v in reference.descriptors),
        bounding_region=reference.bounding_region,
        quality=reference.quality,
        captured_at=captured_at or reference.captured_at,
    )
