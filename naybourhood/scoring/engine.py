"""Naybourhood lead scoring engine.

Scoring hierarchy: financial proceedability > commitment signals > realism >
engagement. Every sub-score is an additive points model with an ordered
breakdown trail. Buyers ready to purchase within 28 days are a hard rule for
`Hot Lead`; data mismatches and closed pipeline statuses disqualify.

All functions here are pure: the result depends only on the lead, the policy
and the reference time passed in.
"""

from __future__ import annotations

import re
from dataclasses import asdict, dataclass, field
from datetime import datetime
from typing import Any

from naybourhood.core.enums import (
    STATUS_DUPLICATE,
    STATUS_NOT_PROCEEDING,
    Classification,
    PurchasePurpose,
    SourceType,
)
from naybourhood.scoring.normalizer import NormalizedLead

HOT_QUALITY_MIN = 70
HOT_INTENT_MIN = 70
QUALIFIED_QUALITY_MIN = 60
QUALIFIED_INTENT_MIN = 50
CONFIDENCE_MIN = 50
NURTURE_QUALITY_MIN = 50
NURTURE_INTENT_MAX = 50
LOW_PRIORITY_QUALITY_MAX = 40

FAKE_SCORE_THRESHOLD = 50
MIN_REALISTIC_BUDGET = 10_000
MISMATCH_BUDGET = 2_000_000
MAX_RISK_FLAGS = 5
LONG_HORIZON_MONTHS = 18

UK_COUNTRIES = frozenset({"uk", "united kingdom", "england", "scotland", "wales", "ni", "northern ireland", "gb", "great britain"})
MORTGAGE_APPROVED_STATUSES = frozenset({"approved", "aip"})

FAKE_NAME_PATTERNS = tuple(
    re.compile(pattern, re.IGNORECASE)
    for pattern in (
        r"^test",
        r"^fake",
        r"^asdf",
        r"^qwerty",
        r"^xxx",
        r"^aaa+$",
        r"^123",
        r"^n/a$",
        r"^none$",
        r"^null$",
        r"^demo",
        r"^sample",
        r"^john\s*doe",
        r"^jane\s*doe",
    )
)
FAKE_EMAIL_PATTERNS = tuple(
    re.compile(pattern, re.IGNORECASE)
    for pattern in (
        r"test@",
        r"fake@",
        r"example\.(com|org|net)",
        r"mailinator",
        r"tempmail",
        r"guerrillamail",
        r"@yopmail",
        r"10minutemail",
        r"throwaway",
        r"trash[-_]?mail",
        r"temp[-_]?mail",
        r"disposable",
        r"noreply",
        r"donotreply",
    )
)
FAKE_PHONE_PATTERNS = tuple(
    re.compile(pattern)
    for pattern in (
        r"^0{7,}",
        r"^1{7,}",
        r"123456789",
        r"^(\d)\1{6,}",
        r"^000",
        r"^999999",
    )
)
EMAIL_SHAPE_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[A-Za-z]{2,}$")
SPAM_NOTE_RE = re.compile(r"\bspam\b|\bfake\b|can'?t verify|cannot verify|unable to verify|wrong number", re.IGNORECASE)

TWENTY_EIGHT_DAY_RE = re.compile(r"28\s*days?|immediate|asap|\bnow\b|urgent|ready\s*to\s*(buy|purchase)|next\s*week", re.IGNORECASE)
# Checked in order; the first matching bucket wins.
TIMELINE_BUCKETS: tuple[tuple[int, re.Pattern[str]], ...] = (
    (1, re.compile(r"immediate|asap|\bnow\b|28\s*days?|\b1\s*months?\b|urgent", re.IGNORECASE)),
    (3, re.compile(r"1-3|2-3|\b3\s*months?|soon|short", re.IGNORECASE)),
    (6, re.compile(r"3-6|\b6\s*months?|half\s*(a\s*)?year", re.IGNORECASE)),
    (
        LONG_HORIZON_MONTHS,
        re.compile(
            r"12\s*\+|\+\s*12|over\s*(a|one|1)\s*year|more\s*than\s*(a|one|1|12)|long|flexible|no\s*rush"
            r"|eventually|someday|\b18\b|\b24\b|\b2\s*years?",
            re.IGNORECASE,
        ),
    ),
    (12, re.compile(r"6-12|\b12\s*months?|year", re.IGNORECASE)),
)


@dataclass(frozen=True)
class ScoringPolicy:
    """Tunable precedence and thresholds for one scoring run."""

    twenty_eight_day_overrides_disqualification: bool = True
    stale_lead_days: int = 60


DEFAULT_POLICY = ScoringPolicy()


@dataclass(frozen=True)
class ScoreFactor:
    factor: str
    points: int
    reason: str


@dataclass
class QualityScore:
    total: int
    breakdown: list[ScoreFactor] = field(default_factory=list)
    is_disqualified: bool = False
    disqualification_reason: str | None = None


@dataclass
class IntentScore:
    total: int
    breakdown: list[ScoreFactor] = field(default_factory=list)
    is_28_day_buyer: bool = False


@dataclass
class ConfidenceScore:
    total: int
    breakdown: list[ScoreFactor] = field(default_factory=list)


@dataclass
class FakeLeadCheck:
    is_fake: bool
    flags: list[str] = field(default_factory=list)
    confidence: float = 0.0


@dataclass(frozen=True)
class CallPriority:
    level: int
    description: str
    response_time: str


@dataclass
class ScoreResult:
    fake_lead_check: FakeLeadCheck
    quality_score: QualityScore
    intent_score: IntentScore
    confidence_score: ConfidenceScore
    classification: str
    call_priority: CallPriority
    risk_flags: list[str]
    is_28_day_buyer: bool
    low_urgency_flag: bool

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


class _Tally:
    """Accumulates points and the matching breakdown entries."""

    def __init__(self) -> None:
        self.total = 0
        self.breakdown: list[ScoreFactor] = []

    def add(self, factor: str, points: int, reason: str) -> None:
        self.total += points
        self.breakdown.append(ScoreFactor(factor=factor, points=points, reason=reason))

    def bounded(self) -> int:
        return max(0, min(100, self.total))


def _clean(value: str | None) -> str:
    return (value or "").strip().lower()


def _budget_amount(lead: NormalizedLead) -> float:
    if lead.budget_min is not None:
        return lead.budget_min
    if lead.budget_max is not None:
        return lead.budget_max
    return 0.0


def _has_budget(lead: NormalizedLead) -> bool:
    return bool(lead.budget_range) or lead.budget_min is not None or lead.budget_max is not None


def _display_name(lead: NormalizedLead) -> str:
    if lead.has_name:
        return lead.full_name if lead.full_name else f"{lead.first_name or ''} {lead.last_name or ''}".strip()
    return ""


def purchase_purpose(lead: NormalizedLead) -> PurchasePurpose:
    purpose = _clean(lead.purchase_purpose)
    if any(token in purpose for token in ("primary", "residence", "home")) and not any(
        token in purpose for token in ("holiday", "second home")
    ):
        return PurchasePurpose.PRIMARY_RESIDENCE
    if any(token in purpose for token in ("dependent", "studying", "student")):
        return PurchasePurpose.DEPENDENT_STUDYING
    if any(token in purpose for token in ("investment", "btl", "buy to let")):
        return PurchasePurpose.INVESTMENT
    if any(token in purpose for token in ("holiday", "second", "vacation")):
        return PurchasePurpose.HOLIDAY_HOME
    return PurchasePurpose.UNKNOWN


def source_type(lead: NormalizedLead) -> SourceType:
    source = _clean(lead.source_platform)
    if any(token in source for token in ("form", "website", "landing")):
        return SourceType.FORM
    if "whatsapp" in source or re.search(r"\bwa\b", source):
        return SourceType.WHATSAPP
    if "email" in source:
        return SourceType.EMAIL
    if "phone" in source or "call" in source:
        return SourceType.PHONE
    if "referral" in source:
        return SourceType.REFERRAL
    return SourceType.UNKNOWN


def has_broker(lead: NormalizedLead) -> bool:
    return lead.uk_broker


def wants_broker(lead: NormalizedLead) -> bool:
    return lead.connect_to_broker and not lead.uk_broker


def is_28_day_ready(lead: NormalizedLead) -> bool:
    if lead.ready_within_28_days:
        return True
    return bool(TWENTY_EIGHT_DAY_RE.search(lead.timeline_to_purchase or ""))


def timeline_months(lead: NormalizedLead) -> int | None:
    """Bucket the free-text purchase timeline into an approximate horizon in months."""
    timeline = _clean(lead.timeline_to_purchase)
    if not timeline:
        return None
    for months, pattern in TIMELINE_BUCKETS:
        if pattern.search(timeline):
            return months
    return None


def detect_fake_lead(lead: NormalizedLead) -> FakeLeadCheck:
    """Heuristic check for placeholder, disposable or spam submissions.

    Missing data alone never makes a lead fake: at least one signal has to
    come from a value that was actually supplied.
    """
    flags: list[str] = []
    fake_score = 0
    supplied_signal = False

    name = _display_name(lead)
    email = lead.email or ""
    phone = lead.phone or ""

    if name and any(pattern.search(name) for pattern in FAKE_NAME_PATTERNS):
        flags.append(f'Suspicious name pattern: "{name}"')
        fake_score += 35

    if email:
        if any(pattern.search(email) for pattern in FAKE_EMAIL_PATTERNS):
            flags.append(f'Disposable/fake email: "{email}"')
            fake_score += 40
            supplied_signal = True
        elif not EMAIL_SHAPE_RE.match(email):
            flags.append(f'Malformed email address: "{email}"')
            fake_score += 30
            supplied_signal = True

    if phone:
        digits = re.sub(r"\D", "", phone)
        if any(pattern.search(digits) for pattern in FAKE_PHONE_PATTERNS):
            flags.append(f'Suspicious phone number: "{phone}"')
            fake_score += 30
            supplied_signal = True
        elif len(digits) < 7:
            flags.append(f'Phone number too short: "{phone}"')
            fake_score += 20
            supplied_signal = True

    if not email and not phone:
        flags.append("No contact information provided")
        fake_score += 25

    if len(name) < 3:
        flags.append("Name too short or missing")
        fake_score += 20

    budget = _budget_amount(lead)
    if 0 < budget < MIN_REALISTIC_BUDGET:
        flags.append("Budget unrealistically low for UK property")
        fake_score += 30
        supplied_signal = True

    free_text = " ".join(filter(None, (lead.notes, lead.agent_transcript)))
    if free_text and SPAM_NOTE_RE.search(free_text):
        flags.append("Marked as fake/spam in notes")
        fake_score += 50
        supplied_signal = True

    return FakeLeadCheck(
        is_fake=fake_score >= FAKE_SCORE_THRESHOLD and supplied_signal,
        flags=flags,
        confidence=min(fake_score / 100, 1.0),
    )


def _disqualification(lead: NormalizedLead) -> tuple[str, str] | None:
    if lead.status in (STATUS_NOT_PROCEEDING, STATUS_DUPLICATE):
        return (
            f"Pipeline status is {lead.status}",
            f"Lead marked as {lead.status} in source data",
        )
    bedrooms = lead.preferred_bedrooms
    if _budget_amount(lead) >= MISMATCH_BUDGET and bedrooms is not None and bedrooms <= 1:
        return (
            "£2M+ budget with studio/1-bed preference - mismatch indicates low quality lead",
            "£2M+ budget with studio/1-bed preference is unrealistic",
        )
    return None


def calculate_quality_score(lead: NormalizedLead) -> QualityScore:
    disqualified = _disqualification(lead)
    if disqualified is not None:
        breakdown_reason, reason = disqualified
        return QualityScore(
            total=0,
            breakdown=[ScoreFactor("Auto-Disqualification", -100, breakdown_reason)],
            is_disqualified=True,
            disqualification_reason=reason,
        )

    tally = _Tally()

    payment_method = _clean(lead.payment_method)
    if payment_method == "cash":
        tally.add("Cash Buyer", 30, "Cash buyer - highest financial proceedability")
    elif payment_method == "mortgage":
        if has_broker(lead):
            tally.add("Mortgage + Has Broker", 20, "Mortgage buyer with broker already connected - ready to proceed")
        elif wants_broker(lead):
            tally.add("Mortgage + Wants Broker", 15, "Mortgage buyer who needs broker connection - opportunity for service")
        else:
            tally.add("Mortgage Buyer", 10, "Mortgage buyer - broker status unknown")

    if lead.proof_of_funds:
        tally.add("Proof of Funds", 10, "Proof of funds provided - finances verified")

    budget = _budget_amount(lead)
    if budget >= MIN_REALISTIC_BUDGET:
        tally.add("Budget Specified", 10, f"Budget of £{budget:,.0f} specified")

    purpose = purchase_purpose(lead)
    if purpose is PurchasePurpose.PRIMARY_RESIDENCE:
        tally.add("Primary Residence", 15, "Buying as primary residence - high commitment")
    elif purpose is PurchasePurpose.DEPENDENT_STUDYING:
        tally.add("Dependent Studying", 15, "Buying for dependent studying - specific need and timeline")
    elif purpose is PurchasePurpose.INVESTMENT:
        tally.add("Investment", 10, "Investment purchase")
    elif purpose is PurchasePurpose.HOLIDAY_HOME:
        tally.add("Holiday/Second Home", 5, "Holiday or second home purchase - lower urgency")

    if lead.preferred_location:
        tally.add("Location Specified", 5, f"Knows where to buy: {lead.preferred_location}")

    if lead.uk_solicitor:
        tally.add("Solicitor Instructed", 10, "UK solicitor in place - can move to exchange quickly")

    details = [label for label, present in (("email", lead.email), ("phone", lead.phone)) if present]
    if lead.has_name:
        details.append("name")
    if lead.has_name and len(details) >= 2:
        tally.add("Complete Contact Info", 10, f"Complete contact information provided: {', '.join(details)}")
    else:
        tally.add("Incomplete Contact Info", 0, f"Missing contact information (has: {', '.join(details) or 'none'})")

    return QualityScore(total=tally.bounded(), breakdown=tally.breakdown)


def calculate_intent_score(lead: NormalizedLead) -> IntentScore:
    tally = _Tally()
    is_28_day = is_28_day_ready(lead)

    if is_28_day:
        tally.add(
            "28-Day Purchase Intent",
            40,
            "HARD RULE: Ready to purchase within 28 days - automatically qualifies as Hot Lead",
        )
    else:
        months = timeline_months(lead)
        if months is not None and months <= 3:
            tally.add("Timeline 3 Months", 25, "Looking to purchase within 3 months")
        elif months is not None and months >= 6:
            tally.add("Timeline 6+ Months", 5, "Longer timeline (6+ months)")

    purpose = purchase_purpose(lead)
    if purpose is PurchasePurpose.DEPENDENT_STUDYING:
        tally.add("Dependent Studying", 25, "Buying for dependent studying - specific timeline requirement")
    elif purpose is PurchasePurpose.PRIMARY_RESIDENCE:
        tally.add("Primary Residence", 20, "Primary residence purchase - genuine need")
    elif purpose is PurchasePurpose.INVESTMENT:
        tally.add("Investment", 10, "Investment purchase")
    elif purpose is PurchasePurpose.HOLIDAY_HOME:
        tally.add("Holiday/Second Home", 5, "Holiday or second home - less urgent")

    if wants_broker(lead):
        tally.add("Wants Broker", 10, "Actively seeking broker connection - shows intent to proceed")

    source = source_type(lead)
    if source is SourceType.FORM:
        tally.add("Source: Form", 10, "Inquiry via form submission - deliberate action")
    elif source is SourceType.WHATSAPP:
        tally.add("Source: WhatsApp", 5, "WhatsApp inquiry - engaged but informal")

    return IntentScore(total=tally.bounded(), breakdown=tally.breakdown, is_28_day_buyer=is_28_day)


def calculate_confidence_score(lead: NormalizedLead) -> ConfidenceScore:
    """Data completeness score: how much of the buyer profile we actually hold."""
    tally = _Tally()
    checks = (
        (lead.has_name, "Name", 10, "Name provided"),
        (bool(lead.email), "Email", 15, "Email provided"),
        (bool(lead.phone), "Phone", 15, "Phone provided"),
        (_has_budget(lead), "Budget", 10, "Budget specified"),
        (bool(lead.payment_method), "Payment Method", 10, "Payment method specified"),
        (lead.proof_of_funds, "Proof of Funds", 5, "Proof of funds provided"),
        (bool(lead.timeline_to_purchase), "Timeline", 10, "Timeline specified"),
        (lead.preferred_bedrooms is not None, "Bedrooms", 5, "Bedroom preference specified"),
        (bool(lead.preferred_location), "Location", 5, "Location preference specified"),
        (bool(lead.source_platform), "Source", 10, "Lead source tracked"),
        (bool(lead.purchase_purpose), "Purpose", 5, "Purchase purpose specified"),
    )
    for present, factor, points, reason in checks:
        if present:
            tally.add(factor, points, reason)
    return ConfidenceScore(total=tally.bounded(), breakdown=tally.breakdown)


def detect_low_urgency(lead: NormalizedLead) -> bool:
    months = timeline_months(lead)
    if months is not None and months >= LONG_HORIZON_MONTHS:
        return True
    return purchase_purpose(lead) is PurchasePurpose.HOLIDAY_HOME and not lead.timeline_to_purchase


def determine_classification(
    quality: QualityScore,
    intent: IntentScore,
    confidence: ConfidenceScore,
    fake_check: FakeLeadCheck,
    low_urgency_flag: bool,
    policy: ScoringPolicy = DEFAULT_POLICY,
) -> str:
    """Pick the final classification; the first matching rule wins."""
    hot_override = intent.is_28_day_buyer
    if hot_override and policy.twenty_eight_day_overrides_disqualification:
        return Classification.HOT_LEAD.value
    if fake_check.is_fake or quality.is_disqualified:
        return Classification.DISQUALIFIED.value
    if hot_override:
        return Classification.HOT_LEAD.value

    if quality.total >= HOT_QUALITY_MIN and intent.total >= HOT_INTENT_MIN:
        return Classification.HOT_LEAD.value
    if quality.total >= QUALIFIED_QUALITY_MIN and intent.total >= QUALIFIED_INTENT_MIN:
        return Classification.QUALIFIED.value
    if confidence.total < CONFIDENCE_MIN:
        return Classification.NEEDS_QUALIFICATION.value
    if quality.total >= NURTURE_QUALITY_MIN and intent.total < NURTURE_INTENT_MAX:
        return Classification.NURTURE.value
    if quality.total < LOW_PRIORITY_QUALITY_MAX or low_urgency_flag:
        return Classification.LOW_PRIORITY.value
    return Classification.NEEDS_QUALIFICATION.value


_PRIORITY_BY_CLASSIFICATION: dict[str, CallPriority] = {
    Classification.HOT_LEAD.value: CallPriority(1, "Hot Lead - High Priority", "Within 2 hours"),
    Classification.QUALIFIED.value: CallPriority(2, "Qualified Lead - Same Day", "Within 4 hours"),
    Classification.NEEDS_QUALIFICATION.value: CallPriority(3, "Needs Qualification - Prompt Follow-up", "Within 24 hours"),
    Classification.NURTURE.value: CallPriority(4, "Nurture Lead - Scheduled Follow-up", "Within 48 hours"),
    Classification.LOW_PRIORITY.value: CallPriority(4, "Low Priority - When Available", "Within 1 week"),
    Classification.DISQUALIFIED.value: CallPriority(4, "Disqualified - No Action Required", "N/A"),
}
TWENTY_EIGHT_DAY_PRIORITY = CallPriority(1, "28-Day Buyer - Immediate Priority", "Within 1 hour")
LOW_URGENCY_PRIORITY = CallPriority(4, "Low Urgency - Scheduled Follow-up", "Within 1 week")


def determine_call_priority(classification: str, intent: IntentScore, low_urgency_flag: bool = False) -> CallPriority:
    if classification == Classification.DISQUALIFIED.value:
        return _PRIORITY_BY_CLASSIFICATION[classification]
    if intent.is_28_day_buyer:
        return TWENTY_EIGHT_DAY_PRIORITY
    if classification == Classification.HOT_LEAD.value:
        return _PRIORITY_BY_CLASSIFICATION[classification]
    if low_urgency_flag:
        return LOW_URGENCY_PRIORITY
    return _PRIORITY_BY_CLASSIFICATION.get(classification, LOW_URGENCY_PRIORITY)


def _lead_age_days(date_added: str, now: datetime) -> int | None:
    try:
        added = datetime.fromisoformat(date_added)
        if added.tzinfo is not None:
            added = added.astimezone().replace(tzinfo=None)
        if now.tzinfo is not None:
            now = now.astimezone().replace(tzinfo=None)
        return (now - added).days
    except (TypeError, ValueError, OverflowError):
        return None


def generate_risk_flags(
    lead: NormalizedLead,
    fake_check: FakeLeadCheck,
    quality: QualityScore,
    policy: ScoringPolicy = DEFAULT_POLICY,
    now: datetime | None = None,
) -> list[str]:
    flags: list[str] = list(fake_check.flags[:2])

    if quality.disqualification_reason:
        flags.append(quality.disqualification_reason)

    payment_method = _clean(lead.payment_method)
    if (
        payment_method == "mortgage"
        and not lead.proof_of_funds
        and _clean(lead.mortgage_status) not in MORTGAGE_APPROVED_STATUSES
    ):
        flags.append("Mortgage not yet approved")

    if not lead.timeline_to_purchase and not lead.ready_within_28_days:
        flags.append("Timeline not specified")

    if payment_method == "mortgage" and not has_broker(lead):
        flags.append("Mortgage buyer without broker")

    country = _clean(lead.country)
    if country and country not in UK_COUNTRIES:
        flags.append("International buyer - may need extended timeline")

    age = _lead_age_days(lead.date_added, now or datetime.now())
    if age is not None and age > policy.stale_lead_days:
        flags.append(f"Lead is {age} days old")

    return flags[:MAX_RISK_FLAGS]


def score_lead(
    lead: NormalizedLead,
    policy: ScoringPolicy | None = None,
    now: datetime | None = None,
) -> ScoreResult:
    """Score a normalized lead with the Naybourhood framework."""
    policy = policy or DEFAULT_POLICY

    fake_check = detect_fake_lead(lead)
    low_urgency_flag = detect_low_urgency(lead)
    quality = calculate_quality_score(lead)
    intent = calculate_intent_score(lead)
    confidence = calculate_confidence_score(lead)

    classification = determine_classification(quality, intent, confidence, fake_check, low_urgency_flag, policy)
    call_priority = determine_call_priority(classification, intent, low_urgency_flag)
    risk_flags = generate_risk_flags(lead, fake_check, quality, policy=policy, now=now)

    return ScoreResult(
        fake_lead_check=fake_check,
        quality_score=quality,
        intent_score=intent,
        confidence_score=confidence,
        classification=classification,
        call_priority=call_priority,
        risk_flags=risk_flags,
        is_28_day_buyer=intent.is_28_day_buyer,
        low_urgency_flag=low_urgency_flag,
    )


score_lead_naybourhood = score_lead
