from __future__ import annotations

import os
from contextlib import contextmanager
from datetime import datetime

# Keep the suite offline: no key means the template summary generator is used.
os.environ["LLM_API_KEY"] = ""

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

import naybourhood.services.scoring_service as scoring_service
from naybourhood.core.config import get_config
from naybourhood.database.models import Base

get_config.cache_clear()

FIXED_NOW = datetime(2026, 3, 1, 9, 0, 0)


@pytest.fixture
def fixed_now() -> datetime:
    return FIXED_NOW


@pytest.fixture
def isolated_session_factory(monkeypatch, tmp_path):
    engine = create_engine(f"sqlite:///{tmp_path / 'naybourhood_test.db'}")
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.create_all(bind=engine)

    @contextmanager
    def _get_db_session():
        session = TestingSessionLocal()
        try:
            yield session
        finally:
            session.close()

    monkeypatch.setattr(scoring_service, "get_db_session", _get_db_session)
    return TestingSessionLocal


@pytest.fixture
def hot_cash_buyer() -> dict:
    return {
        "full_name": "Sarah Mitchell",
        "first_name": "Sarah",
        "last_name": "Mitchell",
        "email": "sarah.mitchell@protonmail.com",
        "phone": "+447700900123",
        "country": "UK",
        "budget": "£1.5M",
        "budget_range": "£1M-£2M",
        "payment_method": "Cash",
        "bedrooms": 3,
        "location": "London",
        "timeline_to_purchase": "ASAP/28 days",
        "purchase_purpose": "Residence",
        "ready_within_28_days": True,
        "source_platform": "form",
        "status": "Contact Pending",
        "proof_of_funds": True,
        "uk_solicitor": "yes",
    }


@pytest.fixture
def mortgage_buyer() -> dict:
    return {
        "full_name": "James Thompson",
        "email": "james.thompson@gmail.com",
        "phone": "+447700900456",
        "country": "UK",
        "budget_range": "£500k-£750k",
        "payment_method": "Mortgage",
        "mortgage_status": "aip",
        "bedrooms": 2,
        "location": "Manchester",
        "timeline": "1-3 months",
        "purchase_purpose": "Investment",
        "source": "website",
        "status": "Follow Up",
        "uk_broker": "yes",
    }


@pytest.fixture
def nurture_buyer() -> dict:
    return {
        "full_name": "Emily Rogers",
        "email": "emily.rogers@outlook.com",
        "country": "UK",
        "budget_range": "£250k-£500k",
        "payment_method": "Mortgage",
        "timeline": "6-12 months",
        "purchase_purpose": "Investment",
        "source": "email",
        "status": "Contact Pending",
    }


@pytest.fixture
def holiday_home_buyer() -> dict:
    return {
        "full_name": "Michael Davies",
        "email": "michael.d@hotmail.com",
        "timeline": "no rush",
        "purchase_purpose": "holiday home",
        "status": "Contact Pending",
    }


@pytest.fixture
def fake_buyer() -> dict:
    return {
        "full_name": "Test User",
        "email": "test@example.com",
        "phone": "0000000000",
        "budget": "£500",
        "status": "Contact Pending",
    }


@pytest.fixture
def mismatch_buyer() -> dict:
    return {
        "full_name": "Robert Chen",
        "email": "robert.chen@china.com",
        "phone": "+8613800138000",
        "budget": "£3M",
        "bedrooms": 1,
        "payment_method": "Cash",
        "status": "Contact Pending",
    }


@pytest.fixture
def international_buyer() -> dict:
    return {
        "full_name": "Ahmad Al-Rashid",
        "email": "ahmad@dubai-investments.ae",
        "phone": "+971501234567",
        "country": "UAE",
        "budget": "£2M",
        "bedrooms": 4,
        "payment_method": "Cash",
        "location": "Central London",
        "timeline": "1-3 months",
        "purchase_purpose": "Investment",
        "source": "referral",
        "proof_of_funds": True,
        "uk_broker": "introduced",
        "status": "Follow Up",
    }
