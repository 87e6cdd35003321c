"""Vendor profile model (activity flags + derived trust signal)"""
from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey

from vendorhub.core.clock import utcnow
from vendorhub.core.database import Base


class VendorProfile(Base):
    __tablename__ = "vendor_profiles"

    id = Column(String(36), primary_key=True)
    user_id = Column(String(36), ForeignKey("users.id"), unique=True, nullable=False, index=True)
    business_name = Column(String(255), nullable=False)
    sourcing_method = Column(String)

    # Derived by the trust tracker, never set directly
    trust_score = Column(Integer, nullable=False, default=0)
    has_trust_badge = Column(Boolean, nullable=False, default=False)

    # Activity flags (only ever go false -> true)
    used_ai_prediction = Column(Boolean, nullable=False, default=False)
    participated_group_buy = Column(Boolean, nullable=False, default=False)
    posted_rescue_item = Column(Boolean, nullable=False, default=False)

    last_activity_date = Column(DateTime, nullable=False, default=utcnow)
