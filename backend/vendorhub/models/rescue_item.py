"""Rescue item model (surplus food listed at a discount)"""
from sqlalchemy import Column, String, Text, Numeric, Boolean, DateTime, ForeignKey, Index

from vendorhub.core.clock import utcnow
from vendorhub.core.database import Base

RESCUE_ITEM_TYPES = ("prepared", "raw")


class RescueItem(Base):
    __tablename__ = "rescue_items"

    id = Column(String(36), primary_key=True)
    vendor_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    type = Column(String(20), nullable=False)  # prepared, raw
    quantity = Column(String(100), nullable=False)  # free text, e.g. "20 plates"
    original_price = Column(Numeric(10, 2), nullable=False)
    rescue_price = Column(Numeric(10, 2), nullable=False)
    city = Column(String(100), nullable=False)
    is_hot = Column(Boolean, nullable=False, default=False)

    # claimed_by is set iff status != available
    status = Column(String(20), nullable=False, default="available")
    claimed_by = Column(String(36), ForeignKey("users.id"))

    created_at = Column(DateTime, nullable=False, default=utcnow)

    __table_args__ = (
        Index("ix_rescue_items_city_status", "city", "status"),
    )
