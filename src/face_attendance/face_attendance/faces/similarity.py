"""Similarity scores between two feature vectors' components.

Both scores are in [0, 1], deterministic and side-effect free.
"""

from __future__ import annotations

from typing import Sequence

import numpy as np

from ..core.constants import MAX_LANDMARK_DISTANCE


def descriptor_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """Cosine similarity mapped from [-1, 1] to [0, 1].

    Returns 0 for length mismatch or a zero-magnitude vector.
    """

    if len(a) != len(b) or len(a) == 0:
        return 0.0

    va = np.asarray(a, dtype=np.float64)
    vb = np.asarray(b, dtype=np.float64)
    magnitude = float(np.sqrt(np.dot(va, va) * np.dot(vb, vb)))
    if magnitude == 0.0:
        return 0.0

    cosine = float(np.dot(va, vb)) / magnitude
    return float(np.clip((cosine + 1.0) / 2.0, 0.0, 1.0))


def landmark_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """1 minus the mean absolute coordinate distance over ``MAX_LANDMARK_DISTANCE``, floored at 0."""

    if len(a) != len(b) or len(a) == 0:
        return 0.0

    distance = np.abs(np.asarray(a, dtype=np.float64) - np.asarray(b, dtype=np.float64))
    mean_distance = float(distance.mean())
    return max(0.0, 1.0 - mean_distance / MAX_LANDMARK_DISTANCE)
