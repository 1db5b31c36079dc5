"""Human-readable buyer summaries for scored leads.

Two interchangeable generators share the `SummaryGenerator` protocol: a
deterministic template generator and an LLM-backed one that falls back to the
templates whenever the model is unavailable or replies with something that is
not the expected JSON.
"""

from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass, field
from typing import Protocol

from naybourhood.core.config import Config, get_config
from naybourhood.core.enums import Classification
from naybourhood.scoring.engine import MORTGAGE_APPROVED_STATUSES, UK_COUNTRIES, ScoreResult
from naybourhood.scoring.normalizer import NormalizedLead
from naybourhood.services.llm_client import call_llm
from naybourhood.utils.text import extract_json_object, sanitize_text

logger = logging.getLogger(__name__)

MAX_RECOMMENDATIONS = 5

CLASSIFICATION_DESCRIPTIONS = {
    Classification.HOT_LEAD.value: "high-priority",
    Classification.QUALIFIED.value: "financially qualified",
    Classification.NEEDS_QUALIFICATION.value: "developing",
    Classification.NURTURE.value: "promising",
    Classification.LOW_PRIORITY.value: "early-stage",
    Classification.DISQUALIFIED.value: "unqualified",
}


@dataclass
class LeadSummary:
    summary: str
    next_action: str
    recommendations: list[str] = field(default_factory=list)
    source: str = "template"

    def to_dict(self) -> dict:
        return asdict(self)


class SummaryGenerator(Protocol):
    def generate(self, lead: NormalizedLead, result: ScoreResult) -> LeadSummary: ...


def _mortgage_approved(lead: NormalizedLead) -> bool:
    return (lead.mortgage_status or "").strip().lower() in MORTGAGE_APPROVED_STATUSES


def _payment(lead: NormalizedLead) -> str:
    return (lead.payment_method or "").strip().lower()


def _is_international(lead: NormalizedLead) -> bool:
    country = (lead.country or "").strip().lower()
    return bool(country) and country not in UK_COUNTRIES


class TemplateSummaryGenerator:
    """Rule-based summary, next action and recommendations."""

    def generate(self, lead: NormalizedLead, result: ScoreResult) -> LeadSummary:
        return LeadSummary(
            summary=self.summary(lead, result),
            next_action=self.next_action(lead, result),
            recommendations=self.recommendations(lead, result),
            source="template",
        )

    @staticmethod
    def summary(lead: NormalizedLead, result: ScoreResult) -> str:
        name = lead.full_name if lead.has_name else "This lead"
        budget = lead.budget_range or "unspecified budget"
        location = lead.preferred_location or "unspecified location"
        timeline = lead.timeline_to_purchase or "unspecified timeline"
        description = CLASSIFICATION_DESCRIPTIONS.get(result.classification, "unscored")

        payment = _payment(lead)
        if payment == "cash":
            financial = "verified cash buyer" if lead.proof_of_funds else "cash buyer (unverified)"
        elif payment == "mortgage":
            financial = "mortgage buyer with AIP" if _mortgage_approved(lead) else "mortgage buyer (pending approval)"
        else:
            financial = f"{lead.payment_method or 'unknown payment method'} buyer"

        if _is_international(lead):
            where = f"based in {lead.country}, interested in {location}"
        else:
            where = f"looking in {location}"

        first = f"{name} is a {description} {financial} {where}."
        second = f"Budget: {budget}. Timeline: {timeline}."

        priority = result.call_priority
        if result.classification in (Classification.HOT_LEAD.value, Classification.QUALIFIED.value):
            third = f'Currently at "{lead.status}" stage. Priority: P{priority.level} ({priority.response_time} response time).'
        elif result.risk_flags:
            third = f"Note: {result.risk_flags[0]}."
        elif result.confidence_score.total < 50:
            third = f"Limited data available - confidence: {result.confidence_score.total / 10:g}/10."
        else:
            third = f"Quality: {result.quality_score.total}/100, Intent: {result.intent_score.total}/100."

        return f"{first} {second} {third}"

    @staticmethod
    def next_action(lead: NormalizedLead, result: ScoreResult) -> str:
        classification = result.classification
        status = lead.status.lower()
        payment = _payment(lead)

        if classification == Classification.DISQUALIFIED.value:
            if result.fake_lead_check.is_fake:
                return "Review and verify lead authenticity before proceeding"
            return "Archive lead - does not meet minimum qualification criteria"

        if classification == Classification.HOT_LEAD.value:
            if not lead.phone and not lead.email:
                return "Obtain contact details through original source"
            if "viewing booked" in status:
                return "Confirm viewing and prepare property presentation"
            if "negotiating" in status:
                return "Follow up on offer status and address objections"
            if not lead.proof_of_funds:
                return "Request proof of funds to progress to viewing stage"
            return f"Call {result.call_priority.response_time.lower()} to book viewing"

        if classification == Classification.QUALIFIED.value:
            if not lead.proof_of_funds and payment == "cash":
                return "Request proof of funds to confirm cash buyer status"
            if payment == "mortgage" and not _mortgage_approved(lead):
                return "Recommend mortgage broker and request AIP within 5 days"
            if not lead.uk_solicitor:
                return "Introduce to panel solicitor to prepare for exchange"
            return "Schedule discovery call to confirm timeline and preferences"

        if classification == Classification.NEEDS_QUALIFICATION.value:
            if not lead.timeline_to_purchase:
                return "Clarify purchase timeline and urgency"
            if lead.preferred_bedrooms is None:
                return "Qualify property requirements - bedrooms, location, features"
            return "Complete buyer profile on the next call"

        if classification == Classification.NURTURE.value:
            if result.quality_score.total > result.intent_score.total:
                return "Re-engage with market update and new property listings"
            return "Add to nurture sequence with educational content about buying process"

        return "Low priority - add to long-term nurture campaign"

    @staticmethod
    def recommendations(lead: NormalizedLead, result: ScoreResult) -> list[str]:
        if result.classification == Classification.DISQUALIFIED.value:
            return ["Review lead data for accuracy", "Consider removing from active pipeline"]

        recommendations: list[str] = []
        quality = result.quality_score.total
        intent = result.intent_score.total

        if not lead.proof_of_funds:
            recommendations.append("Request proof of funds or bank statement")

        if _payment(lead) == "mortgage":
            if not _mortgage_approved(lead):
                recommendations.append("Connect with mortgage advisor for AIP")
            if not lead.uk_broker:
                recommendations.append("Introduce to partner mortgage broker")

        if not lead.uk_solicitor and quality >= 50:
            recommendations.append("Recommend panel solicitor early in process")

        if lead.preferred_location and lead.preferred_bedrooms:
            recommendations.append(f"Prepare {lead.preferred_bedrooms}-bed options in {lead.preferred_location}")
        elif lead.preferred_location:
            recommendations.append(f"Curate properties in {lead.preferred_location} matching budget")

        if _is_international(lead):
            recommendations.append("Discuss currency exchange and international payment options")
            recommendations.append("Clarify UK purchase process for overseas buyers")

        if (lead.budget_max or 0) >= 1_000_000:
            recommendations.append("Offer exclusive/off-market property access")

        if intent < 50 and quality >= 60:
            recommendations.append("Schedule discovery call to understand timeline")
        if quality < 50 and intent >= 60:
            recommendations.append("Complete buyer profile with missing information")

        if "viewing booked" in lead.status.lower():
            recommendations.append("Send viewing confirmation with development details")
            recommendations.append("Prepare comparable market analysis")

        if not lead.timeline_to_purchase:
            recommendations.append("Clarify purchase timeline in next conversation")

        return recommendations[:MAX_RECOMMENDATIONS]


class LLMSummaryGenerator:
    """LLM-written summary with the template generator as the fallback path."""

    def __init__(self, fallback: TemplateSummaryGenerator | None = None) -> None:
        self.fallback = fallback or TemplateSummaryGenerator()

    @staticmethod
    def build_prompt(lead: NormalizedLead, result: ScoreResult) -> str:
        def yes_no(value: bool) -> str:
            return "Yes" if value else "No"

        flags = ", ".join(result.risk_flags) or "None"
        return f"""You are a real estate CRM assistant. Generate a brief buyer summary, next action, and recommendations.

BUYER DATA:
- Name: {sanitize_text(lead.full_name, 200)}
- Email: {sanitize_text(lead.email, 200) or 'Not provided'}
- Phone: {sanitize_text(lead.phone, 50) or 'Not provided'}
- Country: {sanitize_text(lead.country, 100) or 'Not specified'}
- Budget: {sanitize_text(lead.budget_range, 100) or 'Not specified'}
- Payment: {sanitize_text(lead.payment_method, 50) or 'Unknown'}
- Mortgage Status: {sanitize_text(lead.mortgage_status, 50) or 'N/A'}
- Timeline: {sanitize_text(lead.timeline_to_purchase, 100) or 'Not specified'}
- Location Preference: {sanitize_text(lead.preferred_location, 200) or 'Not specified'}
- Bedrooms: {lead.preferred_bedrooms or 'Not specified'}
- Status: {lead.status}
- Proof of Funds: {yes_no(lead.proof_of_funds)}
- UK Broker: {yes_no(lead.uk_broker)}
- UK Solicitor: {yes_no(lead.uk_solicitor)}

SCORES:
- Classification: {result.classification}
- Priority: P{result.call_priority.level} ({result.call_priority.response_time})
- Quality Score: {result.quality_score.total}/100
- Intent Score: {result.intent_score.total}/100
- Confidence: {result.confidence_score.total}/100
- Risk Flags: {sanitize_text(flags, 1000)}

Respond in JSON format:
{{
  "summary": "2-3 sentence buyer summary",
  "next_action": "Single specific next action",
  "recommendations": ["rec1", "rec2", "rec3"]
}}

Keep the summary professional and actionable. Focus on what makes this lead valuable or concerning."""

    def generate(self, lead: NormalizedLead, result: ScoreResult) -> LeadSummary:
        fallback = self.fallback.generate(lead, result)
        response = call_llm(self.build_prompt(lead, result)).strip()
        if not response:
            return fallback

        payload = extract_json_object(response)
        try:
            data = json.loads(payload) if payload else None
        except (ValueError, TypeError):
            data = None
        if not isinstance(data, dict):
            logger.warning("summary.llm_parse_failed", extra={"event": "summary.llm_parse_failed"})
            return fallback

        summary = sanitize_text(data.get("summary"), 2000)
        next_action = sanitize_text(data.get("next_action") or data.get("nextAction"), 500)
        recommendations = data.get("recommendations")
        if isinstance(recommendations, list):
            recommendations = [sanitize_text(str(item), 500) for item in recommendations if item][:MAX_RECOMMENDATIONS]
        else:
            recommendations = fallback.recommendations

        return LeadSummary(
            summary=summary or fallback.summary,
            next_action=next_action or fallback.next_action,
            recommendations=recommendations,
            source="llm",
        )


def get_summary_generator(config: Config | None = None) -> SummaryGenerator:
    config = config or get_config()
    if config.llm_enabled:
        return LLMSummaryGenerator()
    return TemplateSummaryGenerator()
