"""NB Score: the single headline number shown for a buyer."""

from __future__ import annotations

import math

QUALITY_WEIGHT = 0.5
INTENT_WEIGHT = 0.3
CONFIDENCE_WEIGHT = 0.2

GREEN_MIN = 70
AMBER_MIN = 40


def calculate_nb_score(quality: float = 0, intent: float = 0, confidence: float = 0) -> int:
    """Weighted blend of quality and intent (0-100) with confidence on a 0-10 scale."""
    normalized_confidence = (confidence / 10) * 100
    score = quality * QUALITY_WEIGHT + intent * INTENT_WEIGHT + normalized_confidence * CONFIDENCE_WEIGHT
    # Half-up rounding, not banker's rounding.
    return math.floor(score + 0.5)


def nb_score_band(score: float) -> str:
    if score >= GREEN_MIN:
        return "green"
    if score >= AMBER_MIN:
        return "amber"
    return "red"
