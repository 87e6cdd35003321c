"""Prediction model (cached recommendation snapshots)"""
from sqlalchemy import Column, String, Numeric, DateTime, ForeignKey, JSON

from vendorhub.core.clock import utcnow
from vendorhub.core.database import Base


class Prediction(Base):
    __tablename__ = "predictions"

    id = Column(String(36), primary_key=True)
    vendor_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    city = Column(String(100), nullable=False)
    weather = Column(String(255))
    temperature = Column(Numeric(4, 1))

    # [{ingredient, quantity, confidence, reasoning}, ...]
    predictions = Column(JSON, nullable=False)
    confidence = Column(Numeric(3, 2))

    date = Column(DateTime, nullable=False, default=utcnow, index=True)
