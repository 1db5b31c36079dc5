"""Lead scoring endpoints for API v1."""

from __future__ import annotations

from fastapi import APIRouter

from naybourhood.api.v1.errors import to_http_exception
from naybourhood.core.exceptions import NaybourhoodException
from naybourhood.schemas.scoring import BatchScoreRequest, BatchScoreResponse, ScoreRequest, ScoreResponse
from naybourhood.services.scoring_service import ScoringService

router = APIRouter(tags=["scoring"])


def get_scoring_service() -> ScoringService:
    return ScoringService()


@router.post("/score", response_model=ScoreResponse)
def score(payload: ScoreRequest) -> ScoreResponse:
    try:
        outcome = get_scoring_service().score(lead=payload.lead, buyer_id=payload.buyer_id)
    except NaybourhoodException as exc:
        raise to_http_exception(exc) from exc
    return ScoreResponse(**outcome.to_dict())


@router.post("/score/batch", response_model=BatchScoreResponse)
def score_batch(payload: BatchScoreRequest) -> BatchScoreResponse:
    try:
        result = get_scoring_service().score_batch(leads=payload.leads, buyer_ids=payload.buyer_ids)
    except NaybourhoodException as exc:
        raise to_http_exception(exc) from exc
    return BatchScoreResponse(**result)
