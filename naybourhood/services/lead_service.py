"""Buyer persistence: create, fetch and stamp score results onto buyers."""

from __future__ import annotations

from dataclasses import fields
from datetime import datetime, timezone

from naybourhood.database.models import Buyer
from naybourhood.scoring.legacy import LegacyScoreFields
from naybourhood.scoring.normalizer import NormalizedLead
from naybourhood.services.base_service import BaseService
from naybourhood.services.summary_service import LeadSummary

_LEAD_FIELDS = tuple(f.name for f in fields(NormalizedLead))


class LeadService(BaseService):
    """Service for buyer CRUD and score persistence."""

    def create_buyer(
        self,
        lead: NormalizedLead,
        legacy: LegacyScoreFields | None = None,
        summary: LeadSummary | None = None,
    ) -> Buyer:
        """Insert a buyer, stamped with its score when one is given, in a single commit."""
        buyer = Buyer(**lead.to_dict())
        if legacy is not None:
            self._stamp(buyer, legacy, summary)
        self.db.add(buyer)
        self.persist(buyer, "create_buyer")
        return buyer

    def get_buyer(self, buyer_id: int) -> Buyer | None:
        return self.db.query(Buyer).filter(Buyer.id == buyer_id).first()

    def apply_score(
        self,
        buyer: Buyer,
        legacy: LegacyScoreFields,
        summary: LeadSummary | None = None,
    ) -> Buyer:
        self._stamp(buyer, legacy, summary)
        self.persist(buyer, "apply_score")
        return buyer

    @staticmethod
    def _stamp(buyer: Buyer, legacy: LegacyScoreFields, summary: LeadSummary | None) -> None:
        for key, value in legacy.items():
            setattr(buyer, key, value)
        if summary is not None:
            buyer.ai_summary = summary.summary
            buyer.ai_next_action = summary.next_action
            buyer.ai_recommendations = list(summary.recommendations)
        buyer.ai_scored_at = datetime.now(timezone.utc).replace(tzinfo=None)

    @staticmethod
    def to_normalized(buyer: Buyer) -> NormalizedLead:
        """Rebuild the canonical lead from a stored buyer row."""
        values = {name: getattr(buyer, name) for name in _LEAD_FIELDS}
        for name in ("ready_within_28_days", "proof_of_funds", "uk_broker", "uk_solicitor",
                     "viewing_intent_confirmed", "viewing_booked", "replied",
                     "stop_agent_communication", "connect_to_broker"):
            values[name] = bool(values[name])
        values["full_name"] = values["full_name"] or "Unknown"
        values["date_added"] = values["date_added"] or (
            buyer.created_at.isoformat() if buyer.created_at else datetime.now().isoformat()
        )
        return NormalizedLead(**values)
