"""Lead normalization.

Turns a raw lead record from any ingestion path (CSV row, form post, CRM
webhook, Airtable export) into a single canonical `NormalizedLead`. Field
names are resolved through `FIELD_ALIASES`, an ordered table of accepted
source spellings per canonical field: the first present, non-empty value
wins.
"""

from __future__ import annotations

import logging
import math
import re
from collections.abc import Iterable, Mapping
from dataclasses import asdict, dataclass
from datetime import datetime
from typing import Any

from naybourhood.scoring.parsers import parse_budget_amount, parse_budget_range, parse_date
from naybourhood.scoring.status import normalize_status

logger = logging.getLogger(__name__)

UNKNOWN_NAME = "Unknown"

FIELD_ALIASES: dict[str, tuple[str, ...]] = {
    "full_name": ("full_name", "fullName", "name"),
    "first_name": ("first_name", "firstName"),
    "last_name": ("last_name", "lastName"),
    "email": ("email", "email_address", "emailAddress"),
    "phone": ("phone", "phone_number", "phoneNumber", "mobile"),
    "country": ("country",),
    "budget_range": ("budget_range", "budgetRange", "budget"),
    "budget_min": ("budget_min", "budgetMin"),
    "budget_max": ("budget_max", "budgetMax"),
    "preferred_bedrooms": ("preferred_bedrooms", "preferredBedrooms", "bedrooms"),
    "preferred_location": ("preferred_location", "preferredLocation", "location", "area"),
    "timeline_to_purchase": ("timeline_to_purchase", "timelineToPurchase", "timeline"),
    "purchase_purpose": ("purchase_purpose", "purchasePurpose", "purpose"),
    "source_platform": ("source_platform", "sourcePlatform", "source"),
    "source_campaign": ("source_campaign", "sourceCampaign", "campaign"),
    "development_name": ("development_name", "developmentName", "development"),
    "enquiry_type": ("enquiry_type", "enquiryType"),
    "status": ("status",),
    "payment_method": ("payment_method", "paymentMethod"),
    "mortgage_status": ("mortgage_status", "mortgageStatus"),
    "notes": ("notes",),
    "agent_transcript": ("agent_transcript", "agentTranscript", "transcript"),
    "viewing_date": ("viewing_date", "viewingDate"),
    "date_added": ("date_added", "dateAdded", "created_at", "createdAt"),
}

BOOLEAN_ALIASES: dict[str, tuple[str, ...]] = {
    "ready_within_28_days": ("ready_within_28_days", "ready_in_28_days", "readyIn28Days", "readyWithin28Days"),
    "proof_of_funds": ("proof_of_funds", "proofOfFunds"),
    "uk_broker": ("uk_broker", "ukBroker"),
    "uk_solicitor": ("uk_solicitor", "ukSolicitor"),
    "viewing_intent_confirmed": ("viewing_intent_confirmed", "viewingIntentConfirmed"),
    "viewing_booked": ("viewing_booked", "viewingBooked"),
    "replied": ("replied",),
    "stop_agent_communication": ("stop_agent_communication", "stop_comms", "stopComms"),
    "connect_to_broker": ("connect_to_broker", "broker_connected", "brokerConnected"),
}

_LEADING_INT_RE = re.compile(r"^\s*(\d+)")


@dataclass(frozen=True)
class NormalizedLead:
    """Canonical lead record consumed by the scoring engine."""

    full_name: str
    status: str
    date_added: str
    first_name: str | None = None
    last_name: str | None = None
    email: str | None = None
    phone: str | None = None
    country: str | None = None
    budget_range: str | None = None
    budget_min: float | None = None
    budget_max: float | None = None
    preferred_bedrooms: int | None = None
    preferred_location: str | None = None
    timeline_to_purchase: str | None = None
    purchase_purpose: str | None = None
    ready_within_28_days: bool = False
    source_platform: str | None = None
    source_campaign: str | None = None
    development_name: str | None = None
    enquiry_type: str | None = None
    payment_method: str | None = None
    proof_of_funds: bool = False
    mortgage_status: str | None = None
    uk_broker: bool = False
    uk_solicitor: bool = False
    notes: str | None = None
    agent_transcript: str | None = None
    viewing_intent_confirmed: bool = False
    viewing_booked: bool = False
    viewing_date: str | None = None
    replied: bool = False
    stop_agent_communication: bool = False
    connect_to_broker: bool = False

    @property
    def has_name(self) -> bool:
        return bool(self.first_name) or (bool(self.full_name) and self.full_name != UNKNOWN_NAME)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, float) and value != value:  # NaN from spreadsheet imports
        return True
    return isinstance(value, str) and not value.strip()


def resolve_field(raw: Mapping[str, Any], aliases: Iterable[str]) -> Any:
    """Return the first present, non-empty value among `aliases`."""
    for key in aliases:
        value = raw.get(key)
        if not _is_blank(value):
            return value
    return None


def _text(raw: Mapping[str, Any], field: str) -> str | None:
    value = resolve_field(raw, FIELD_ALIASES[field])
    if value is None:
        return None
    return str(value).strip()


def _flag(raw: Mapping[str, Any], field: str) -> bool:
    return any(bool(raw.get(key)) and not _is_blank(raw.get(key)) for key in BOOLEAN_ALIASES[field])


def _bedrooms(value: Any) -> int | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, float) and not math.isfinite(value):
        return None
    if isinstance(value, (int, float)):
        return int(value) if value > 0 else None
    match = _LEADING_INT_RE.match(str(value))
    if not match:
        return None
    bedrooms = int(match.group(1))
    return bedrooms or None


def _full_name(first_name: str | None, last_name: str | None, raw: Mapping[str, Any]) -> str:
    explicit = _text(raw, "full_name")
    if explicit:
        return explicit
    if first_name or last_name:
        return f"{first_name or ''} {last_name or ''}".strip()
    return UNKNOWN_NAME


def normalize_lead(raw: Mapping[str, Any] | None, now: datetime | None = None) -> NormalizedLead:
    """Normalize a raw lead from any source into a `NormalizedLead`.

    Never raises: missing fields come back as ``None``/``False`` and the
    status is always one of the valid pipeline statuses.
    """
    if not isinstance(raw, Mapping):
        if raw is not None:
            logger.warning(
                "lead.normalize.non_mapping",
                extra={"event": "lead.normalize.non_mapping", "input_type": type(raw).__name__},
            )
        raw = {}

    first_name = _text(raw, "first_name")
    last_name = _text(raw, "last_name")

    budget_range = _text(raw, "budget_range")
    parsed_budget = parse_budget_range(budget_range)
    explicit_min = resolve_field(raw, FIELD_ALIASES["budget_min"])
    explicit_max = resolve_field(raw, FIELD_ALIASES["budget_max"])
    budget_min = parse_budget_amount(explicit_min) if explicit_min is not None else parsed_budget.min
    budget_max = parse_budget_amount(explicit_max) if explicit_max is not None else parsed_budget.max

    return NormalizedLead(
        full_name=_full_name(first_name, last_name, raw),
        first_name=first_name,
        last_name=last_name,
        email=_text(raw, "email"),
        phone=_text(raw, "phone"),
        country=_text(raw, "country"),
        budget_range=budget_range,
        budget_min=budget_min,
        budget_max=budget_max,
        preferred_bedrooms=_bedrooms(resolve_field(raw, FIELD_ALIASES["preferred_bedrooms"])),
        preferred_location=_text(raw, "preferred_location"),
        timeline_to_purchase=_text(raw, "timeline_to_purchase"),
        purchase_purpose=_text(raw, "purchase_purpose"),
        ready_within_28_days=_flag(raw, "ready_within_28_days"),
        source_platform=_text(raw, "source_platform"),
        source_campaign=_text(raw, "source_campaign"),
        development_name=_text(raw, "development_name"),
        enquiry_type=_text(raw, "enquiry_type"),
        status=normalize_status(_text(raw, "status")),
        payment_method=_text(raw, "payment_method"),
        proof_of_funds=_flag(raw, "proof_of_funds"),
        mortgage_status=_text(raw, "mortgage_status"),
        uk_broker=_flag(raw, "uk_broker"),
        uk_solicitor=_flag(raw, "uk_solicitor"),
        notes=_text(raw, "notes"),
        agent_transcript=_text(raw, "agent_transcript"),
        viewing_intent_confirmed=_flag(raw, "viewing_intent_confirmed"),
        viewing_booked=_flag(raw, "viewing_booked"),
        viewing_date=_text(raw, "viewing_date"),
        replied=_flag(raw, "replied"),
        stop_agent_communication=_flag(raw, "stop_agent_communication"),
        connect_to_broker=_flag(raw, "connect_to_broker"),
        date_added=parse_date(resolve_field(raw, FIELD_ALIASES["date_added"]), now=now),
    )


def normalize_leads(rows: Iterable[Mapping[str, Any]], now: datetime | None = None) -> list[NormalizedLead]:
    return [normalize_lead(row, now=now) for row in rows]
