"""Group buy aggregate and its participant ledger"""
from sqlalchemy import Column, Integer, String, Numeric, DateTime, ForeignKey, Index

from vendorhub.core.clock import utcnow
from vendorhub.core.database import Base

GROUP_BUY_STATUSES = ("active", "completed", "cancelled")


class GroupBuy(Base):
    __tablename__ = "group_buys"

    id = Column(String(36), primary_key=True)
    organizer_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    ingredient = Column(String(255), nullable=False)

    # Quantities in kg
    target_quantity = Column(Numeric(10, 2), nullable=False)
    current_quantity = Column(Numeric(10, 2), nullable=False, default=0)

    price_per_kg = Column(Numeric(10, 2), nullable=False)
    original_price = Column(Numeric(10, 2), nullable=False)
    city = Column(String(100), nullable=False)
    deadline = Column(DateTime, nullable=False)

    status = Column(String(20), nullable=False, default="active")  # active, completed, cancelled
    participant_count = Column(Integer, nullable=False, default=1)  # organizer counts as first

    created_at = Column(DateTime, nullable=False, default=utcnow)

    __table_args__ = (
        Index("ix_group_buys_city_status", "city", "status"),
    )


class GroupBuyParticipant(Base):
    """Append-only join record, never updated."""
    __tablename__ = "group_buy_participants"

    id = Column(String(36), primary_key=True)
    group_buy_id = Column(String(36), ForeignKey("group_buys.id"), nullable=False, index=True)
    vendor_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    quantity = Column(Numeric(10, 2), nullable=False)
    joined_at = Column(DateTime, nullable=False, default=utcnow)
