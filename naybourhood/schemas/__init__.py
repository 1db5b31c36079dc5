"""Pydantic schema package for API contracts."""

from naybourhood.schemas.common import ErrorEnvelope
from naybourhood.schemas.leads import (
    ImportedLeadResponse,
    ImportErrorResponse,
    ImportLeadsRequest,
    ImportLeadsResponse,
    WebhookLeadResponse,
)
from naybourhood.schemas.scoring import (
    BatchErrorResponse,
    BatchItemResponse,
    BatchScoreRequest,
    BatchScoreResponse,
    CallPriorityResponse,
    LegacyScoreResponse,
    ScoreBreakdownResponse,
    ScoreFactorResponse,
    ScoreRequest,
    ScoreResponse,
)

__all__ = [
    "BatchErrorResponse",
    "BatchItemResponse",
    "BatchScoreRequest",
    "BatchScoreResponse",
    "CallPriorityResponse",
    "ErrorEnvelope",
    "ImportErrorResponse",
    "ImportLeadsRequest",
    "ImportLeadsResponse",
    "ImportedLeadResponse",
    "LegacyScoreResponse",
    "ScoreBreakdownResponse",
    "ScoreFactorResponse",
    "ScoreRequest",
    "ScoreResponse",
    "WebhookLeadResponse",
]
