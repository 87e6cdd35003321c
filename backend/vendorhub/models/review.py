"""Review model (append-only)"""
from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey

from vendorhub.core.clock import utcnow
from vendorhub.core.database import Base


class Review(Base):
    __tablename__ = "reviews"

    id = Column(String(36), primary_key=True)
    vendor_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    buyer_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    rating = Column(Integer, nullable=False)  # 1-5
    comment = Column(Text)
    rescue_item_id = Column(String(36), ForeignKey("rescue_items.id"))
    created_at = Column(DateTime, nullable=False, default=utcnow)
