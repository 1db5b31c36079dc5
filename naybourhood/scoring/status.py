"""Pipeline status normalization."""

from __future__ import annotations

import logging

from naybourhood.core.enums import STATUS_CONTACT_PENDING, VALID_STATUSES, LeadStatus

logger = logging.getLogger(__name__)

# Keys are lower-cased, trimmed source labels.
STATUS_ALIASES: dict[str, str] = {
    "contact pending": LeadStatus.CONTACT_PENDING.value,
    "contactpending": LeadStatus.CONTACT_PENDING.value,
    "contact-pending": LeadStatus.CONTACT_PENDING.value,
    "follow up": LeadStatus.FOLLOW_UP.value,
    "followup": LeadStatus.FOLLOW_UP.value,
    "follow-up": LeadStatus.FOLLOW_UP.value,
    "viewing booked": LeadStatus.VIEWING_BOOKED.value,
    "viewingbooked": LeadStatus.VIEWING_BOOKED.value,
    "viewing-booked": LeadStatus.VIEWING_BOOKED.value,
    "not proceeding": LeadStatus.NOT_PROCEEDING.value,
    "notproceeding": LeadStatus.NOT_PROCEEDING.value,
    "not-proceeding": LeadStatus.NOT_PROCEEDING.value,
    # Legacy CRM / Airtable labels
    "new": LeadStatus.CONTACT_PENDING.value,
    "new lead": LeadStatus.CONTACT_PENDING.value,
    "newlead": LeadStatus.CONTACT_PENDING.value,
    "warm": LeadStatus.CONTACT_PENDING.value,
    "cold": LeadStatus.CONTACT_PENDING.value,
    "no answer": LeadStatus.CONTACT_PENDING.value,
    "contacted": LeadStatus.FOLLOW_UP.value,
    "qualified": LeadStatus.FOLLOW_UP.value,
    "interested": LeadStatus.FOLLOW_UP.value,
    "hot": LeadStatus.FOLLOW_UP.value,
    "callback": LeadStatus.FOLLOW_UP.value,
    "viewing scheduled": LeadStatus.VIEWING_BOOKED.value,
    "viewing confirmed": LeadStatus.VIEWING_BOOKED.value,
    "offer made": LeadStatus.NEGOTIATING.value,
    "documentation": LeadStatus.NEGOTIATING.value,
    "offer accepted": LeadStatus.RESERVED.value,
    "under offer": LeadStatus.RESERVED.value,
    "exchange": LeadStatus.EXCHANGED.value,
    "exchanging": LeadStatus.EXCHANGED.value,
    "sold": LeadStatus.COMPLETED.value,
    "lost": LeadStatus.NOT_PROCEEDING.value,
    "dead": LeadStatus.NOT_PROCEEDING.value,
    "unqualified": LeadStatus.NOT_PROCEEDING.value,
}

_VALID_BY_LOWER = {status.lower(): status for status in VALID_STATUSES}


def normalize_status(value: str | None) -> str:
    """Map any source status label onto one of the nine pipeline statuses."""
    if value is None:
        return STATUS_CONTACT_PENDING

    key = str(value).strip().lower()
    if not key:
        return STATUS_CONTACT_PENDING

    alias = STATUS_ALIASES.get(key)
    if alias is not None:
        return alias

    valid = _VALID_BY_LOWER.get(key)
    if valid is not None:
        return valid

    logger.warning(
        "status.unknown",
        extra={"event": "status.unknown", "status": str(value), "fallback": STATUS_CONTACT_PENDING},
    )
    return STATUS_CONTACT_PENDING
