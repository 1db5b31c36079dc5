"""Scoring request/response schemas for API contracts."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class ScoreRequest(BaseModel):
    lead: dict[str, Any] | None = None
    buyer_id: int | None = Field(default=None, ge=1)


class BatchScoreRequest(BaseModel):
    leads: list[dict[str, Any]] | None = None
    buyer_ids: list[int] | None = None


class ScoreFactorResponse(BaseModel):
    factor: str
    points: int
    reason: str


class ScoreBreakdownResponse(BaseModel):
    quality: list[ScoreFactorResponse] = Field(default_factory=list)
    intent: list[ScoreFactorResponse] = Field(default_factory=list)
    confidence: list[ScoreFactorResponse] = Field(default_factory=list)


class CallPriorityResponse(BaseModel):
    level: int = Field(ge=1, le=4)
    description: str
    response_time: str


class LegacyScoreResponse(BaseModel):
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


class ScoreResponse(BaseModel):
    buyer_id: int | None = None
    classification: str
    quality_score: int = Field(ge=0, le=100)
    intent_score: int = Field(ge=0, le=100)
    confidence_score: int = Field(ge=0, le=100)
    nb_score: int
    nb_score_band: str
    call_priority: CallPriorityResponse
    is_28_day_buyer: bool
    low_urgency_flag: bool
    is_fake_lead: bool
    fake_lead_flags: list[str]
    is_disqualified: bool
    disqualification_reason: str | None = None
    risk_flags: list[str]
    breakdown: ScoreBreakdownResponse
    legacy: LegacyScoreResponse
    summary: str
    next_action: str
    recommendations: list[str]
    summary_source: str
    lead: dict[str, Any]


class BatchItemResponse(ScoreResponse):
    index: int


class BatchErrorResponse(BaseModel):
    index: int
    buyer_id: int | None = None
    error: str


class BatchScoreResponse(BaseModel):
    total: int
    scored: int
    failed: int
    results: list[BatchItemResponse]
    errors: list[BatchErrorResponse]
