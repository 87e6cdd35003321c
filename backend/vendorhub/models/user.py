"""User (identity) model"""
from sqlalchemy import Column, Integer, String, Numeric, DateTime

from vendorhub.core.clock import utcnow
from vendorhub.core.database import Base

USER_ROLES = ("vendor", "buyer", "supplier")


class User(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True)
    username = Column(String(100), unique=True, nullable=False, index=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    role = Column(String(20), nullable=False, default="vendor")  # vendor, buyer, supplier
    city = Column(String(100), nullable=False, index=True)
    profile_image = Column(String)

    # Mutated only by review ingestion
    rating = Column(Numeric(2, 1), nullable=False, default=0)
    review_count = Column(Integer, nullable=False, default=0)

    created_at = Column(DateTime, nullable=False, default=utcnow)
