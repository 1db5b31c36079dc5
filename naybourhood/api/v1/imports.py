"""Bulk lead import endpoint for API v1."""

from __future__ import annotations

from fastapi import APIRouter

from naybourhood.api.v1.errors import to_http_exception
from naybourhood.core.exceptions import NaybourhoodException
from naybourhood.schemas.leads import ImportLeadsRequest, ImportLeadsResponse
from naybourhood.services.scoring_service import ScoringService

router = APIRouter(tags=["imports"])


@router.post("/import/leads", response_model=ImportLeadsResponse)
def import_leads(payload: ImportLeadsRequest) -> ImportLeadsResponse:
    try:
        result = ScoringService().import_rows(payload.leads)
    except NaybourhoodException as exc:
        raise to_http_exception(exc) from exc
    return ImportLeadsResponse(**result)
