"""Enums shared by the normalizer, scoring engine and persistence layer.

Values are the exact strings stored in the `buyers` table and returned over
the API, so they use title case.
"""

from enum import Enum


class LeadStatus(Enum):
    """Pipeline status of a buyer, in pipeline order."""

    CONTACT_PENDING = "Contact Pending"
    FOLLOW_UP = "Follow Up"
    VIEWING_BOOKED = "Viewing Booked"
    NEGOTIATING = "Negotiating"
    RESERVED = "Reserved"
    EXCHANGED = "Exchanged"
    COMPLETED = "Completed"
    NOT_PROCEEDING = "Not Proceeding"
    DUPLICATE = "Duplicate"


class Classification(Enum):
    """Final label assigned by the scoring engine."""

    HOT_LEAD = "Hot Lead"
    QUALIFIED = "Qualified"
    NEEDS_QUALIFICATION = "Needs Qualification"
    NURTURE = "Nurture"
    LOW_PRIORITY = "Low Priority"
    DISQUALIFIED = "Disqualified"


class PurchasePurpose(Enum):
    PRIMARY_RESIDENCE = "primary_residence"
    DEPENDENT_STUDYING = "dependent_studying"
    INVESTMENT = "investment"
    HOLIDAY_HOME = "holiday_home"
    UNKNOWN = "unknown"


class SourceType(Enum):
    FORM = "form"
    WHATSAPP = "whatsapp"
    EMAIL = "email"
    PHONE = "phone"
    REFERRAL = "referral"
    UNKNOWN = "unknown"


VALID_STATUSES: tuple[str, ...] = tuple(status.value for status in LeadStatus)

STATUS_CONTACT_PENDING = LeadStatus.CONTACT_PENDING.value
STATUS_NOT_PROCEEDING = LeadStatus.NOT_PROCEEDING.value
STATUS_DUPLICATE = LeadStatus.DUPLICATE.value
