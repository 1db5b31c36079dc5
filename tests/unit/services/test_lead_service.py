from __future__ import annotations

from datetime import datetime

import pytest
from sqlalchemy import create_engine
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import sessionmaker

from naybourhood.core.exceptions import DatabaseError
from naybourhood.database.models import Base
from naybourhood.scoring.engine import score_lead
from naybourhood.scoring.legacy import convert_to_legacy_format
from naybourhood.scoring.normalizer import normalize_lead
from naybourhood.services.lead_service import LeadService
from naybourhood.services.summary_service import LeadSummary

NOW = datetime(2026, 3, 1, 9, 0, 0)


def _build_session():
    engine = create_engine("sqlite:///:memory:")
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.create_all(bind=engine)
    return TestingSessionLocal()


def test_create_and_fetch_buyer(hot_cash_buyer):
    session = _build_session()
    service = LeadService(db=session)

    created = service.create_buyer(normalize_lead(hot_cash_buyer, now=NOW))
    fetched = service.get_buyer(created.id)

    assert fetched is not None
    assert fetched.full_name == "Sarah Mitchell"
    assert fetched.budget_min == 1_000_000
    assert fetched.status == "Contact Pending"
    assert fetched.ai_classification is None
    assert service.get_buyer(created.id + 100) is None

    session.close()


def test_apply_score_persists_legacy_fields_and_summary(hot_cash_buyer):
    session = _build_session()
    service = LeadService(db=session)
    lead = normalize_lead(hot_cash_buyer, now=NOW)
    buyer = service.create_buyer(lead)

    legacy = convert_to_legacy_format(score_lead(lead, now=NOW))
    summary = LeadSummary(summary="Ready buyer.", next_action="Call", recommendations=["Book viewing"])
    updated = service.apply_score(buyer, legacy, summary)

    assert updated.ai_classification == "Hot"
    assert updated.ai_priority == "P1"
    assert updated.is_28_day_buyer is True
    assert updated.ai_risk_flags == []
    assert updated.ai_summary == "Ready buyer."
    assert updated.ai_recommendations == ["Book viewing"]
    assert updated.ai_scored_at is not None

    session.close()


def test_stored_buyer_round_trips_to_normalized_lead(mortgage_buyer):
    session = _build_session()
    service = LeadService(db=session)
    lead = normalize_lead(mortgage_buyer, now=NOW)

    buyer = service.create_buyer(lead)
    assert service.to_normalized(buyer) == lead

    session.close()


class _FailingSession:
    def __init__(self):
        self.rolled_back = False
        self.closed = False

    def add(self, instance):
        pass

    def commit(self):
        raise OperationalError("INSERT INTO buyers", {}, Exception("disk I/O error"))

    def rollback(self):
        self.rolled_back = True

    def close(self):
        self.closed = True


def test_commit_failure_is_wrapped_and_borrowed_session_left_open(hot_cash_buyer):
    session = _FailingSession()

    with pytest.raises(DatabaseError, match="create_buyer failed"):
        with LeadService(db=session) as service:
            service.create_buyer(normalize_lead(hot_cash_buyer, now=NOW))

    assert session.rolled_back is True
    assert session.closed is False
