"""Orchestrates normalize -> score -> legacy mapping -> summary -> persistence."""

from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from naybourhood.core.config import Config, get_config
from naybourhood.core.exceptions import NotFoundError, ValidationError
from naybourhood.database.db import get_db_session
from naybourhood.scoring.engine import ScoreResult, ScoringPolicy, score_lead
from naybourhood.scoring.legacy import LegacyScoreFields, convert_to_legacy_format
from naybourhood.scoring.nb_score import calculate_nb_score, nb_score_band
from naybourhood.scoring.normalizer import FIELD_ALIASES, NormalizedLead, normalize_lead, resolve_field
from naybourhood.services.lead_service import LeadService
from naybourhood.services.summary_service import LeadSummary, SummaryGenerator, get_summary_generator

logger = logging.getLogger(__name__)

WEBHOOK_IDENTITY_FIELDS = ("full_name", "first_name", "email")


@dataclass
class ScoringOutcome:
    lead: NormalizedLead
    result: ScoreResult
    legacy: LegacyScoreFields
    nb_score: int
    summary: LeadSummary
    buyer_id: int | None = None

    def to_dict(self) -> dict[str, Any]:
        result = self.result
        return {
            "buyer_id": self.buyer_id,
            "classification": result.classification,
            "quality_score": result.quality_score.total,
            "intent_score": result.intent_score.total,
            "confidence_score": result.confidence_score.total,
            "nb_score": self.nb_score,
            "nb_score_band": nb_score_band(self.nb_score),
            "call_priority": {
                "level": result.call_priority.level,
                "description": result.call_priority.description,
                "response_time": result.call_priority.response_time,
            },
            "is_28_day_buyer": result.is_28_day_buyer,
            "low_urgency_flag": result.low_urgency_flag,
            "is_fake_lead": result.fake_lead_check.is_fake,
            "fake_lead_flags": list(result.fake_lead_check.flags),
            "is_disqualified": result.quality_score.is_disqualified,
            "disqualification_reason": result.quality_score.disqualification_reason,
            "risk_flags": list(result.risk_flags),
            "breakdown": {
                "quality": [vars(item) for item in result.quality_score.breakdown],
                "intent": [vars(item) for item in result.intent_score.breakdown],
                "confidence": [vars(item) for item in result.confidence_score.breakdown],
            },
            "legacy": dict(self.legacy),
            "summary": self.summary.summary,
            "next_action": self.summary.next_action,
            "recommendations": list(self.summary.recommendations),
            "summary_source": self.summary.source,
            "lead": self.lead.to_dict(),
        }


def policy_from_config(config: Config) -> ScoringPolicy:
    return ScoringPolicy(
        twenty_eight_day_overrides_disqualification=config.SCORING_28_DAY_OVERRIDES_DISQUALIFICATION,
        stale_lead_days=config.STALE_LEAD_DAYS,
    )


class ScoringService:
    """Entry point used by the API routes and the CSV import script."""

    def __init__(
        self,
        config: Config | None = None,
        summary_generator: SummaryGenerator | None = None,
    ) -> None:
        self.config = config or get_config()
        self.policy = policy_from_config(self.config)
        self.summary_generator = summary_generator or get_summary_generator(self.config)

    def evaluate(self, lead: NormalizedLead, now: datetime | None = None) -> ScoringOutcome:
        result = score_lead(lead, policy=self.policy, now=now)
        legacy = convert_to_legacy_format(result)
        nb_score = calculate_nb_score(
            result.quality_score.total,
            result.intent_score.total,
            legacy["ai_confidence"],
        )
        summary = self.summary_generator.generate(lead, result)
        logger.info(
            "lead.scored",
            extra={
                "event": "lead.scored",
                "classification": result.classification,
                "quality": result.quality_score.total,
                "intent": result.intent_score.total,
                "confidence": result.confidence_score.total,
                "is_28_day_buyer": result.is_28_day_buyer,
            },
        )
        return ScoringOutcome(lead=lead, result=result, legacy=legacy, nb_score=nb_score, summary=summary)

    def score_raw(self, raw: Mapping[str, Any], now: datetime | None = None) -> ScoringOutcome:
        """Score a raw lead without persisting it."""
        return self.evaluate(normalize_lead(raw, now=now), now=now)

    def score_buyer(self, buyer_id: int) -> ScoringOutcome:
        """Re-score a stored buyer and write the results back."""
        with get_db_session() as session:
            service = LeadService(session)
            buyer = service.get_buyer(buyer_id)
            if buyer is None:
                raise NotFoundError(f"Buyer {buyer_id} not found")
            outcome = self.evaluate(service.to_normalized(buyer))
            service.apply_score(buyer, outcome.legacy, outcome.summary)
            outcome.buyer_id = buyer.id
        return outcome

    def score(self, lead: Mapping[str, Any] | None = None, buyer_id: int | None = None) -> ScoringOutcome:
        if lead is not None:
            return self.score_raw(lead)
        if buyer_id is not None:
            return self.score_buyer(buyer_id)
        raise ValidationError("Either lead or buyer_id is required")

    def score_batch(
        self,
        leads: list[Mapping[str, Any]] | None = None,
        buyer_ids: list[int] | None = None,
    ) -> dict[str, Any]:
        """Score up to MAX_BATCH_SIZE items sequentially; one failure never aborts the rest."""
        if leads:
            items: list[tuple[str, Any]] = [("lead", item) for item in leads]
        elif buyer_ids:
            items = [("buyer_id", item) for item in buyer_ids]
        else:
            raise ValidationError("Either leads or buyer_ids must be a non-empty list")

        if len(items) > self.config.MAX_BATCH_SIZE:
            raise ValidationError(f"Maximum {self.config.MAX_BATCH_SIZE} items per batch")

        results: list[dict[str, Any]] = []
        errors: list[dict[str, Any]] = []
        for index, (kind, item) in enumerate(items):
            try:
                if kind == "lead":
                    outcome = self.score_raw(item)
                else:
                    outcome = self.score_buyer(item)
            except Exception as exc:
                logger.warning(
                    "score.batch.item_failed",
                    extra={"event": "score.batch.item_failed", "index": index, "kind": kind, "error": str(exc)},
                )
                error = {"index": index, "error": str(exc)}
                if kind == "buyer_id":
                    error["buyer_id"] = item
                errors.append(error)
                continue
            results.append({"index": index, **outcome.to_dict()})

        logger.info(
            "score.batch.completed",
            extra={"event": "score.batch.completed", "total": len(items), "scored": len(results), "failed": len(errors)},
        )
        return {
            "total": len(items),
            "scored": len(results),
            "failed": len(errors),
            "results": results,
            "errors": errors,
        }

    def _persist_and_score(self, raw: Mapping[str, Any]) -> ScoringOutcome:
        lead = normalize_lead(raw)
        outcome = self.evaluate(lead)
        with get_db_session() as session:
            service = LeadService(session)
            buyer = service.create_buyer(lead, outcome.legacy, outcome.summary)
            outcome.buyer_id = buyer.id
        return outcome

    def ingest_webhook_lead(self, raw: Mapping[str, Any]) -> ScoringOutcome:
        """Persist a lead pushed by an external CRM and score it immediately."""
        if not isinstance(raw, Mapping):
            raise ValidationError("Lead payload must be an object")
        has_identity = any(resolve_field(raw, FIELD_ALIASES[name]) is not None for name in WEBHOOK_IDENTITY_FIELDS)
        if not has_identity:
            raise ValidationError("Lead must have at least one of: full_name, first_name, email")

        outcome = self._persist_and_score(raw)
        logger.info(
            "webhook.lead_created",
            extra={"event": "webhook.lead_created", "buyer_id": outcome.buyer_id, "classification": outcome.result.classification},
        )
        return outcome

    def import_rows(self, rows: Iterable[Mapping[str, Any]], persist: bool = True) -> dict[str, Any]:
        """Score each imported row on its own, persisting it unless `persist` is False."""
        results: list[dict[str, Any]] = []
        errors: list[dict[str, Any]] = []
        tally: Counter[str] = Counter()

        for row_number, row in enumerate(rows, start=1):
            try:
                outcome = self._persist_and_score(row) if persist else self.score_raw(row)
            except Exception as exc:
                logger.warning(
                    "import.row_failed",
                    extra={"event": "import.row_failed", "row": row_number, "error": str(exc)},
                )
                errors.append({"row": row_number, "error": str(exc)})
                continue
            tally[outcome.result.classification] += 1
            results.append(
                {
                    "row": row_number,
                    "buyer_id": outcome.buyer_id,
                    "full_name": outcome.lead.full_name,
                    "classification": outcome.result.classification,
                    "call_priority": outcome.result.call_priority.level,
                    "nb_score": outcome.nb_score,
                }
            )

        logger.info(
            "import.completed",
            extra={"event": "import.completed", "imported": len(results), "failed": len(errors)},
        )
        return {
            "total": len(results) + len(errors),
            "imported": len(results),
            "failed": len(errors),
            "by_classification": dict(tally),
            "results": results,
            "errors": errors,
        }
