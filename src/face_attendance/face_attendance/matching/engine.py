from __future__ import annotations

import asyncio
import logging
import random
from typing import Any, Optional, Sequence

from ..core.constants import DESCRIPTOR_WEIGHT, LANDMARK_WEIGHT, MIN_CAPTURE_QUALITY
from ..core.enums import MatchStatus
from ..core.exceptions import DecodeError
from ..faces.extractor import FeatureExtractor
from ..faces.model import FeatureVector
from ..faces.similarity import descriptor_similarity, landmark_similarity
from ..identities.model import Identity
from .model import Candidate, MatchVerdict
from .policy import ThresholdPolicy

logger = logging.getLogger(__name__)

_CONFIDENCE_LEVELS = (
    (0.95, "Excellent"),
    (0.85, "Very High"),
    (0.75, "High"),
    (0.65, "Good"),
    (0.55, "Fair"),
)

_STATUS_DESCRIPTIONS = {
    MatchStatus.VERIFIED: "Verified Match",
    MatchStatus.UNVERIFIED: "Unverified Match",
    MatchStatus.REJECTED: "Match Rejected",
    MatchStatus.NO_MATCH: "No Match Found",
}


def confidence_level(confidence: float) -> str:
    for bound, label in _CONFIDENCE_LEVELS:
        if confidence >= bound:
            return label
    return "Low"


def status_description(status: MatchStatus | str) -> str:
    try:
        return _STATUS_DESCRIPTIONS[MatchStatus(status)]
    except ValueError:
        return "Unknown Status"


def score_pair(captured: FeatureVector, reference: FeatureVector) -> tuple[float, float]:
    """Return ``(overall_similarity, adjusted_confidence)`` for one gallery reference.

    A reference without a quality score (missing or 0) does not scale the result.
    """

    desc_sim = descriptor_similarity(captured.descriptors, reference.descriptors)
    land_sim = landmark_similarity(captured.landmarks, reference.landmarks)
    overall = DESCRIPTOR_WEIGHT * desc_sim + LANDMARK_WEIGHT * land_sim
    quality_factor = min(captured.quality, reference.quality or 1.0)
    return overall, overall * quality_factor


class MatchEngine:
    """Compare a captured face against the enrolled gallery and classify the result.

    ``match_against_gallery`` never raises for recognition failures; they come
    back as ``rejected`` or ``no_match`` verdicts.
    """

    def __init__(
        self,
        extractor: FeatureExtractor,
        *,
        policy: Optional[ThresholdPolicy] = None,
        min_quality: float = MIN_CAPTURE_QUALITY,
        rng: Optional[random.Random] = None,
    ):
        self._extractor = extractor
        self._policy = policy or ThresholdPolicy()
        self._min_quality = float(min_quality)
        self._rng = rng or random.Random()

    @property
    def extractor(self) -> FeatureExtractor:
        return self._extractor

    async def capture_face_data(self, raw_image: Any) -> Optional[FeatureVector]:
        """Run the extractor after its modelled processing delay.

        Returns ``None`` when no face is detected. Once started, the delay is
        not interruptible; callers that lose interest discard the result.
        """

        low, high = self._extractor.latency_range
        delay = low if high <= low else self._rng.uniform(low, high)
        if delay > 0:
            await asyncio.sleep(delay)
        return self._extractor.extract(raw_image)

    def match_against_gallery(self, captured: Optional[FeatureVector], gallery: Sequence[Identity]) -> MatchVerdict:
        if not gallery:
            return MatchVerdict(
                is_match=False,
                confidence=0.0,
                status=MatchStatus.NO_MATCH,
                reason="No employees in database",
            )

        if captured is None or not captured.is_valid:
            return MatchVerdict(
                is_match=False,
                confidence=0.0,
                status=MatchStatus.REJECTED,
                reason="Error processing face data",
            )

        if captured.quality < self._min_quality:
            return MatchVerdict(
                is_match=False,
                confidence=0.0,
                status=MatchStatus.REJECTED,
                reason="Poor image quality - please try again with better lighting",
            )

        best: Optional[Candidate] = None
        for identity in gallery:
            if not identity.face_data:
                continue
            try:
                reference = identity.reference_vector()
            except DecodeError as e:
                logger.warning("Skipping stored face data for %s (%s): %s", identity.name, identity.id, e)
                continue

            overall, adjusted = score_pair(captured, reference)
            if best is None or adjusted > best.confidence:
                best = Candidate(
                    identity_id=identity.id,
                    name=identity.name,
                    department=identity.department,
                    confidence=adjusted,
                    similarity=overall,
                )

        if best is None:
            return MatchVerdict(
                is_match=False,
                confidence=0.0,
                status=MatchStatus.NO_MATCH,
                reason="No face data found in database",
            )

        verdict = self._policy.classify(best)
        logger.info(
            "Match verdict %s (confidence=%.2f, best=%s)", verdict.status.value, verdict.confidence, best.identity_id
        )
        return verdict
