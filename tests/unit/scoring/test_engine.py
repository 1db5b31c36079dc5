from __future__ import annotations

from datetime import datetime

import pytest

from naybourhood.scoring.engine import (
    ScoringPolicy,
    calculate_confidence_score,
    calculate_intent_score,
    calculate_quality_score,
    detect_fake_lead,
    detect_low_urgency,
    determine_call_priority,
    generate_risk_flags,
    score_lead,
    timeline_months,
)
from naybourhood.scoring.normalizer import normalize_lead

NOW = datetime(2026, 3, 1, 9, 0, 0)


def _lead(raw: dict):
    return normalize_lead(raw, now=NOW)


def _score(raw: dict, policy: ScoringPolicy | None = None):
    return score_lead(_lead(raw), policy=policy, now=NOW)


def _factor(score, name: str):
    return next((item for item in score.breakdown if item.factor == name), None)


# Fake-lead detection


def test_fake_signals_combine_into_fake_lead(fake_buyer):
    check = detect_fake_lead(_lead(fake_buyer))

    assert check.is_fake is True
    assert check.confidence == 1.0
    assert any("name" in flag for flag in check.flags)
    assert any("email" in flag for flag in check.flags)
    assert any("phone" in flag for flag in check.flags)
    assert any("Budget" in flag for flag in check.flags)


def test_disposable_email_is_flagged():
    check = detect_fake_lead(_lead({"full_name": "Real Person", "email": "someone@mailinator.com"}))
    assert any("email" in flag for flag in check.flags)


def test_missing_data_alone_is_not_fake():
    check = detect_fake_lead(_lead({"full_name": "Jane Doe", "timeline": "12+ months"}))

    assert any("contact" in flag for flag in check.flags)
    assert check.confidence >= 0.5
    assert check.is_fake is False


def test_spam_notes_mark_lead_fake():
    check = detect_fake_lead(_lead({"full_name": "Mark Evans", "phone": "+447700900777", "notes": "Wrong number, spam"}))
    assert check.is_fake is True


def test_legitimate_and_international_buyers_are_not_fake(hot_cash_buyer, international_buyer):
    assert detect_fake_lead(_lead(hot_cash_buyer)).is_fake is False
    assert detect_fake_lead(_lead(international_buyer)).is_fake is False


# Quality


def test_quality_points_for_cash_primary_residence_and_contact(hot_cash_buyer):
    quality = calculate_quality_score(_lead(hot_cash_buyer))

    assert _factor(quality, "Cash Buyer").points == 30
    assert _factor(quality, "Primary Residence").points == 15
    assert _factor(quality, "Complete Contact Info").points == 10
    assert _factor(quality, "Proof of Funds").points == 10
    assert _factor(quality, "Budget Specified").points == 10
    assert _factor(quality, "Location Specified").points == 5
    assert _factor(quality, "Solicitor Instructed").points == 10
    assert quality.total == 90
    assert quality.is_disqualified is False


def test_quality_mortgage_with_broker_and_investment(mortgage_buyer):
    quality = calculate_quality_score(_lead(mortgage_buyer))

    assert _factor(quality, "Mortgage + Has Broker").points == 20
    assert _factor(quality, "Investment").points == 10


def test_quality_mortgage_wanting_broker():
    quality = calculate_quality_score(_lead({"full_name": "Lena Park", "payment_method": "mortgage", "connect_to_broker": True}))
    assert _factor(quality, "Mortgage + Wants Broker").points == 15


def test_budget_bedroom_mismatch_disqualifies(mismatch_buyer):
    quality = calculate_quality_score(_lead(mismatch_buyer))

    assert quality.is_disqualified is True
    assert quality.total == 0
    assert quality.disqualification_reason


def test_high_budget_with_family_home_is_not_disqualified(mismatch_buyer):
    quality = calculate_quality_score(_lead({**mismatch_buyer, "bedrooms": 3}))
    assert quality.is_disqualified is False


@pytest.mark.parametrize("status", ["Not Proceeding", "duplicate", "lost"])
def test_closed_statuses_disqualify(hot_cash_buyer, status):
    result = _score({**hot_cash_buyer, "ready_within_28_days": False, "timeline_to_purchase": "3 months", "status": status})

    assert result.quality_score.is_disqualified is True
    assert result.quality_score.total == 0
    assert result.classification == "Disqualified"


# Intent


def test_28_day_buyer_intent(hot_cash_buyer):
    intent = calculate_intent_score(_lead(hot_cash_buyer))

    assert intent.is_28_day_buyer is True
    assert _factor(intent, "28-Day Purchase Intent").points == 40
    assert _factor(intent, "Primary Residence").points == 20
    assert _factor(intent, "Source: Form").points == 10
    assert intent.total == 70


@pytest.mark.parametrize("timeline", ["ASAP", "Immediate", "within 28 days", "ready to buy now"])
def test_imminent_timelines_are_28_day(timeline):
    assert calculate_intent_score(_lead({"timeline": timeline})).is_28_day_buyer is True


def test_three_month_buyer_is_not_28_day(mortgage_buyer):
    intent = calculate_intent_score(_lead(mortgage_buyer))

    assert intent.is_28_day_buyer is False
    assert _factor(intent, "Timeline 3 Months").points == 25


@pytest.mark.parametrize(
    ("timeline", "months"),
    [
        ("ASAP", 1),
        ("1-3 months", 3),
        ("3-6 months", 6),
        ("6-12 months", 12),
        ("12+ months", 18),
        ("no rush", 18),
        ("next year", 12),
        ("", None),
        ("whenever the kids finish school", None),
    ],
)
def test_timeline_months(timeline, months):
    assert timeline_months(_lead({"timeline": timeline})) == months


# Confidence and low urgency


def test_confidence_rewards_completeness(hot_cash_buyer):
    complete = calculate_confidence_score(_lead(hot_cash_buyer))
    minimal = calculate_confidence_score(_lead({"full_name": "Sam Ford"}))

    assert complete.total == 100
    assert _factor(complete, "Email").points == 15
    assert _factor(complete, "Phone").points == 15
    assert _factor(complete, "Budget").points == 10
    assert minimal.total == 10
    assert complete.total > minimal.total


def test_low_urgency_flag():
    assert detect_low_urgency(_lead({"timeline": "12+ months"})) is True
    assert detect_low_urgency(_lead({"purchase_purpose": "Holiday home"})) is True
    assert detect_low_urgency(_lead({"timeline": "3 months"})) is False


# Classification and call priority


def test_hot_cash_buyer_end_to_end(hot_cash_buyer):
    result = _score(hot_cash_buyer)

    assert result.classification == "Hot Lead"
    assert result.is_28_day_buyer is True
    assert result.call_priority.level == 1
    assert "1 hour" in result.call_priority.response_time
    assert result.fake_lead_check.is_fake is False
    assert result.risk_flags == []


def test_minimal_28_day_record_is_hot_lead():
    result = _score(
        {
            "full_name": "Sarah Mitchell",
            "payment_method": "Cash",
            "budget": "£1.5M",
            "bedrooms": 3,
            "purpose": "Residence",
            "timeline": "28 days",
            "location": "London",
        }
    )

    assert result.classification == "Hot Lead"
    assert result.is_28_day_buyer is True
    assert result.call_priority.level == 1


def test_sparse_long_horizon_lead_needs_qualification():
    result = _score({"full_name": "Jane Doe", "timeline": "12+ months"})

    assert result.quality_score.total == 0
    assert result.confidence_score.total == 20
    assert result.low_urgency_flag is True
    assert result.classification in {"Needs Qualification", "Low Priority"}
    assert result.call_priority.level == 4


def test_good_quality_low_intent_is_nurture(mortgage_buyer):
    result = _score(mortgage_buyer)

    assert result.quality_score.total == 55
    assert result.intent_score.total == 45
    assert result.classification == "Nurture"
    assert result.call_priority.level == 4
    assert result.call_priority.response_time == "Within 48 hours"


def test_middling_lead_falls_through_to_needs_qualification(nurture_buyer):
    result = _score(nurture_buyer)

    assert result.quality_score.total == 40
    assert result.confidence_score.total == 70
    assert result.low_urgency_flag is False
    assert result.classification == "Needs Qualification"
    assert result.call_priority.level == 3


def test_low_quality_lead_is_low_priority():
    result = _score(
        {
            "full_name": "Owen Price",
            "email": "owen.price@gmail.com",
            "phone": "+447700900111",
            "timeline": "6-12 months",
            "source": "email",
            "purchase_purpose": "Investment",
        }
    )

    assert result.quality_score.total == 20
    assert result.confidence_score.total == 65
    assert result.classification == "Low Priority"
    assert result.call_priority.response_time == "Within 1 week"


def test_international_cash_investor_is_nurture(international_buyer):
    result = _score(international_buyer)

    assert result.quality_score.total == 75
    assert result.intent_score.total == 35
    assert result.classification == "Nurture"
    assert "International buyer - may need extended timeline" in result.risk_flags


def test_qualified_lead():
    result = _score(
        {
            "full_name": "Tom Hughes",
            "email": "tom.hughes@gmail.com",
            "phone": "+447700900321",
            "payment_method": "Cash",
            "purchase_purpose": "Primary residence",
            "timeline": "2-3 months",
            "source": "website form",
            "budget_range": "£600K",
        }
    )

    assert result.quality_score.total == 65
    assert result.intent_score.total == 55
    assert result.classification == "Qualified"
    assert result.call_priority.level == 2


def test_high_scores_make_hot_lead_without_28_day_rule():
    result = _score(
        {
            "full_name": "Nadia Rahman",
            "email": "nadia.rahman@gmail.com",
            "phone": "+447700900654",
            "payment_method": "Cash",
            "proof_of_funds": True,
            "purchase_purpose": "Dependent studying at UCL",
            "timeline": "2-3 months",
            "source": "landing page",
            "budget_range": "£650K",
            "connect_to_broker": True,
        }
    )

    assert result.is_28_day_buyer is False
    assert result.quality_score.total == 75
    assert result.intent_score.total == 70
    assert result.classification == "Hot Lead"
    assert result.call_priority.response_time == "Within 2 hours"


def test_holiday_home_with_no_rush_is_low_urgency(holiday_home_buyer):
    result = _score(holiday_home_buyer)

    assert result.low_urgency_flag is True
    assert result.confidence_score.total == 40
    assert result.classification == "Needs Qualification"
    assert result.call_priority.level == 4


def test_fake_lead_is_disqualified(fake_buyer):
    result = _score(fake_buyer)

    assert result.classification == "Disqualified"
    assert result.call_priority.level == 4
    assert result.call_priority.response_time == "N/A"
    assert len(result.risk_flags) <= 5


def test_mismatch_lead_is_disqualified(mismatch_buyer):
    result = _score(mismatch_buyer)
    assert result.classification == "Disqualified"
    assert result.quality_score.disqualification_reason in result.risk_flags


def test_28_day_override_beats_fake_detection_by_default(fake_buyer):
    result = _score({**fake_buyer, "timeline": "ASAP"})

    assert result.fake_lead_check.is_fake is True
    assert result.classification == "Hot Lead"
    assert result.call_priority.level == 1


def test_disqualification_can_take_precedence_over_28_day_rule(fake_buyer, mismatch_buyer):
    policy = ScoringPolicy(twenty_eight_day_overrides_disqualification=False)

    fake = _score({**fake_buyer, "timeline": "ASAP"}, policy=policy)
    assert fake.classification == "Disqualified"
    assert fake.is_28_day_buyer is True
    assert fake.call_priority.level == 4

    mismatch = _score({**mismatch_buyer, "ready_within_28_days": True}, policy=policy)
    assert mismatch.classification == "Disqualified"


def test_28_day_rule_still_applies_to_clean_leads_when_disqualification_wins(hot_cash_buyer):
    policy = ScoringPolicy(twenty_eight_day_overrides_disqualification=False)
    assert _score(hot_cash_buyer, policy=policy).classification == "Hot Lead"


def test_call_priority_tiers(hot_cash_buyer):
    intent = calculate_intent_score(_lead({"timeline": "1-3 months"}))

    assert determine_call_priority("Hot Lead", intent).level == 1
    assert determine_call_priority("Hot Lead", intent).response_time == "Within 2 hours"
    assert determine_call_priority("Qualified", intent).level == 2
    assert determine_call_priority("Needs Qualification", intent).level == 3
    assert determine_call_priority("Nurture", intent).level == 4
    assert determine_call_priority("Disqualified", intent).level == 4
    assert determine_call_priority("Qualified", intent, low_urgency_flag=True).response_time == "Within 1 week"

    hot_intent = calculate_intent_score(_lead(hot_cash_buyer))
    assert determine_call_priority("Hot Lead", hot_intent).response_time == "Within 1 hour"


# Risk flags


def _flags(raw: dict, stale_days: int = 60):
    lead = _lead(raw)
    return generate_risk_flags(
        lead,
        detect_fake_lead(lead),
        calculate_quality_score(lead),
        policy=ScoringPolicy(stale_lead_days=stale_days),
        now=NOW,
    )


def test_aip_mortgage_is_not_flagged_as_unapproved(mortgage_buyer):
    assert not any("Mortgage not yet approved" in flag for flag in _flags(mortgage_buyer))


def test_mortgage_without_broker_is_flagged(nurture_buyer):
    flags = _flags(nurture_buyer)
    assert "Mortgage not yet approved" in flags
    assert "Mortgage buyer without broker" in flags


def test_missing_timeline_is_flagged():
    assert "Timeline not specified" in _flags({"full_name": "No Timeline", "email": "a@b.com"})


def test_stale_lead_is_flagged():
    flags = _flags({"full_name": "Old Lead", "email": "old.lead@gmail.com", "timeline": "3 months", "date_added": "2025-12-01"})
    assert "Lead is 90 days old" in flags
    assert not any("days old" in flag for flag in _flags({"full_name": "Old Lead", "timeline": "3 months", "date_added": "2025-12-01"}, stale_days=120))


def test_risk_flags_are_capped_at_five():
    flags = _flags(
        {
            "full_name": "Test",
            "email": "fake@tempmail.com",
            "phone": "1111111111",
            "payment_method": "Mortgage",
            "country": "France",
            "date_added": "2024-01-01",
        }
    )
    assert len(flags) == 5


def test_scoring_is_deterministic(hot_cash_buyer):
    assert _score(hot_cash_buyer).to_dict() == _score(hot_cash_buyer).to_dict()


def test_scores_stay_in_range(fake_buyer, hot_cash_buyer, international_buyer):
    for raw in (fake_buyer, hot_cash_buyer, international_buyer, {}):
        result = _score(raw)
        for total in (result.quality_score.total, result.intent_score.total, result.confidence_score.total):
            assert 0 <= total <= 100
        assert 1 <= result.call_priority.level <= 4


@pytest.mark.parametrize("date_added", ["0001-01-01T00:00:00+05:00", "9999-12-31T23:59:59-05:00"])
def test_out_of_range_offset_dates_do_not_break_scoring(date_added):
    result = _score({"full_name": "Amy Ng", "email": "amy@ng.com", "date_added": date_added})

    assert result.classification
    assert result.to_dict()["classification"] == result.classification


def test_nameless_lead_gets_no_suspicious_name_flag():
    check = detect_fake_lead(_lead({"email": "amy@ng.com", "phone": "+447700900123"}))

    assert not any(flag.startswith("Suspicious name") for flag in check.flags)
    assert "Name too short or missing" in check.flags
    assert check.confidence == 0.2
    assert check.is_fake is False
