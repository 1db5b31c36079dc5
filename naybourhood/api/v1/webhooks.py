"""Inbound CRM webhooks for API v1."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, status

from naybourhood.api.v1.errors import to_http_exception
from naybourhood.core.exceptions import NaybourhoodException
from naybourhood.schemas.leads import WebhookLeadResponse
from naybourhood.services.scoring_service import ScoringService

router = APIRouter(tags=["webhooks"])


@router.post("/webhook/lead-created", response_model=WebhookLeadResponse, status_code=status.HTTP_201_CREATED)
def lead_created(payload: dict[str, Any] = Body(...)) -> WebhookLeadResponse:
    # CRMs send either the bare lead or {"lead": {...}}.
    lead = payload.get("lead") if isinstance(payload.get("lead"), dict) else payload
    try:
        outcome = ScoringService().ingest_webhook_lead(lead)
    except NaybourhoodException as exc:
        raise to_http_exception(exc) from exc

    result = outcome.result
    return WebhookLeadResponse(
        buyer_id=outcome.buyer_id,
        classification=result.classification,
        call_priority=result.call_priority.level,
        nb_score=outcome.nb_score,
        is_28_day_buyer=result.is_28_day_buyer,
        risk_flags=list(result.risk_flags),
        summary=outcome.summary.summary,
        next_action=outcome.summary.next_action,
    )
