from __future__ import annotations

import math
from dataclasses import dataclass

from ..core.constants import REJECTED_THRESHOLD, UNVERIFIED_THRESHOLD, VERIFIED_THRESHOLD
from ..core.enums import MatchStatus
from .model import Candidate, MatchedIdentity, MatchVerdict


def round_confidence(value: float) -> float:
    """Clamp to [0, 1] and round half up to two decimals."""

    value = min(1.0, max(0.0, float(value)))
    return math.floor(value * 100 + 0.5) / 100


def as_percent(value: float) -> int:
    return int(math.floor(float(value) * 100 + 0.5))


@dataclass(frozen=True)
class ThresholdPolicy:
    """Map the best candidate's adjusted confidence onto a verdict.

    Lower bounds are inclusive and compared against the unrounded confidence.
    """

    verified: float = VERIFIED_THRESHOLD
    unverified: float = UNVERIFIED_THRESHOLD
    rejected: float = REJECTED_THRESHOLD

    def status_for(self, confidence: float) -> MatchStatus:
        if confidence >= self.verified:
            return MatchStatus.VERIFIED
        if confidence >= self.unverified:
            return MatchStatus.UNVERIFIED
        if confidence >= self.rejected:
            return MatchStatus.REJECTED
        return MatchStatus.NO_MATCH

    def classify(self, candidate: Candidate) -> MatchVerdict:
        status = self.status_for(candidate.confidence)
        confidence = round_confidence(candidate.confidence)
        matched = MatchedIdentity(id=candidate.identity_id, name=candidate.name, department=candidate.department)

        if status == MatchStatus.VERIFIED:
            return MatchVerdict(is_match=True, confidence=confidence, status=status, matched_identity=matched)
        if status == MatchStatus.UNVERIFIED:
            return MatchVerdict(
                is_match=True,
                confidence=confidence,
                status=status,
                matched_identity=matched,
                reason="Medium confidence - manual verification recommended",
            )
        if status == MatchStatus.REJECTED:
            return MatchVerdict(
                is_match=False,
                confidence=confidence,
                status=status,
                reason=f"Low confidence match with {candidate.name} ({as_percent(candidate.confidence)}%)",
            )
        return MatchVerdict(
            is_match=False,
            confidence=confidence,
            status=status,
            reason="No matching face found in database",
        )
