"""Flatten a `ScoreResult` onto the historical `ai_*` field set stored on buyers."""

from __future__ import annotations

from typing import TypedDict

from naybourhood.core.enums import Classification
from naybourhood.scoring.engine import ScoreResult

LEGACY_CLASSIFICATIONS: dict[str, str] = {
    Classification.HOT_LEAD.value: "Hot",
    Classification.QUALIFIED.value: "Warm-Qualified",
    Classification.NEEDS_QUALIFICATION.value: "Nurture-Standard",
    Classification.NURTURE.value: "Nurture-Premium",
    Classification.LOW_PRIORITY.value: "Cold",
    Classification.DISQUALIFIED.value: "Disqualified",
}

LEGACY_PRIORITIES: dict[int, str] = {1: "P1", 2: "P2", 3: "P3", 4: "P4"}


class LegacyScoreFields(TypedDict):
    ai_quality_score: int
    ai_intent_score: int
    ai_confidence: float
    ai_classification: str
    ai_priority: str
    ai_risk_flags: list[str]
    call_priority: int
    call_priority_reason: str
    low_urgency_flag: bool
    is_fake_lead: bool
    fake_lead_flags: list[str]
    is_28_day_buyer: bool


def convert_to_legacy_format(result: ScoreResult) -> LegacyScoreFields:
    return LegacyScoreFields(
        ai_quality_score=result.quality_score.total,
        ai_intent_score=result.intent_score.total,
        ai_confidence=result.confidence_score.total / 10,
        ai_classification=LEGACY_CLASSIFICATIONS.get(result.classification, result.classification),
        ai_priority=LEGACY_PRIORITIES.get(result.call_priority.level, "P4"),
        ai_risk_flags=list(result.risk_flags),
        call_priority=result.call_priority.level,
        call_priority_reason=result.call_priority.description,
        low_urgency_flag=result.low_urgency_flag,
        is_fake_lead=result.fake_lead_check.is_fake,
        fake_lead_flags=list(result.fake_lead_check.flags),
        is_28_day_buyer=result.is_28_day_buyer,
    )
