"""Lead ingestion request/response schemas."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class ImportLeadsRequest(BaseModel):
    leads: list[dict[str, Any]] = Field(min_length=1)


class ImportedLeadResponse(BaseModel):
    row: int
    buyer_id: int | None = None
    full_name: str
    classification: str
    call_priority: int
    nb_score: int


class ImportErrorResponse(BaseModel):
    row: int
    error: str


class ImportLeadsResponse(BaseModel):
    total: int
    imported: int
    failed: int
    by_classification: dict[str, int]
    results: list[ImportedLeadResponse]
    errors: list[ImportErrorResponse]


class WebhookLeadResponse(BaseModel):
    status: str = "created"
    buyer_id: int
    classification: str
    call_priority: int
    nb_score: int
    is_28_day_buyer: bool
    risk_flags: list[str]
    summary: str
    next_action: str
