"""Pure lead normalization and scoring core."""

from naybourhood.scoring.engine import (
    CallPriority,
    ConfidenceScore,
    FakeLeadCheck,
    IntentScore,
    QualityScore,
    ScoreFactor,
    ScoreResult,
    ScoringPolicy,
    score_lead,
    score_lead_naybourhood,
)
from naybourhood.scoring.legacy import LegacyScoreFields, convert_to_legacy_format
from naybourhood.scoring.nb_score import calculate_nb_score, nb_score_band
from naybourhood.scoring.normalizer import FIELD_ALIASES, NormalizedLead, normalize_lead, normalize_leads
from naybourhood.scoring.parsers import BudgetRange, parse_budget_amount, parse_budget_range, parse_date
from naybourhood.scoring.status import STATUS_ALIASES, normalize_status

__all__ = [
    "BudgetRange",
    "CallPriority",
    "ConfidenceScore",
    "FIELD_ALIASES",
    "FakeLeadCheck",
    "IntentScore",
    "LegacyScoreFields",
    "NormalizedLead",
    "QualityScore",
    "STATUS_ALIASES",
    "ScoreFactor",
    "ScoreResult",
    "ScoringPolicy",
    "calculate_nb_score",
    "convert_to_legacy_format",
    "nb_score_band",
    "normalize_lead",
    "normalize_leads",
    "normalize_status",
    "parse_budget_amount",
    "parse_budget_range",
    "parse_date",
    "score_lead",
    "score_lead_naybourhood",
]
