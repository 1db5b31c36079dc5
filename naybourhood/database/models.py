from __future__ import annotations

from datetime import datetime

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Float,
    Index,
    Integer,
    JSON,
    String,
    Text,
)

from .db import Base


class Buyer(Base):
    __tablename__ = "buyers"
    __table_args__ = (
        Index("idx_buyers_status", "status"),
        Index("idx_buyers_ai_classification", "ai_classification"),
        Index("idx_buyers_email", "email"),
    )

    id = Column(Integer, primary_key=True, index=True)

    full_name = Column(String, nullable=False, default="Unknown")
    first_name = Column(String)
    last_name = Column(String)
    email = Column(String)
    phone = Column(String)
    country = Column(String)

    budget_range = Column(String)
    budget_min = Column(Float)
    budget_max = Column(Float)
    preferred_bedrooms = Column(Integer)
    preferred_location = Column(String)

    timeline_to_purchase = Column(String)
    purchase_purpose = Column(String)
    ready_within_28_days = Column(Boolean, default=False)

    source_platform = Column(String)
    source_campaign = Column(String)
    development_name = Column(String)
    enquiry_type = Column(String)

    status = Column(String, nullable=False, default="Contact Pending")

    payment_method = Column(String)
    proof_of_funds = Column(Boolean, default=False)
    mortgage_status = Column(String)
    uk_broker = Column(Boolean, default=False)
    uk_solicitor = Column(Boolean, default=False)

    notes = Column(Text)
    agent_transcript = Column(Text)
    viewing_intent_confirmed = Column(Boolean, default=False)
    viewing_booked = Column(Boolean, default=False)
    viewing_date = Column(String)
    replied = Column(Boolean, default=False)
    stop_agent_communication = Column(Boolean, default=False)
    connect_to_broker = Column(Boolean, default=False)
    date_added = Column(String)

    ai_quality_score = Column(Integer)
    ai_intent_score = Column(Integer)
    ai_confidence = Column(Float)
    ai_classification = Column(String)
    ai_priority = Column(String)
    ai_risk_flags = Column(JSON, default=list)
    call_priority = Column(Integer)
    call_priority_reason = Column(String)
    low_urgency_flag = Column(Boolean, default=False)
    is_fake_lead = Column(Boolean, default=False)
    fake_lead_flags = Column(JSON, default=list)
    is_28_day_buyer = Column(Boolean, default=False)
    ai_summary = Column(Text)
    ai_next_action = Column(Text)
    ai_recommendations = Column(JSON, default=list)
    ai_scored_at = Column(DateTime)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
