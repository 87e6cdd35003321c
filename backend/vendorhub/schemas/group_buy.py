"""Group buy request/response schemas"""
from typing import List, Literal
from datetime import datetime
from decimal import Decimal
from pydantic import BaseModel, ConfigDict, Field


class GroupBuyCreateRequest(BaseModel):
    ingredient: str = Field(..., min_length=1, max_length=255)
    target_quantity: Decimal = Field(..., max_digits=10, decimal_places=2, description="Target in kg, must be > 0")
    price_per_kg: Decimal = Field(..., max_digits=10, decimal_places=2, description="Bulk price, must be > 0")
    original_price: Decimal = Field(..., max_digits=10, decimal_places=2, gt=0, description="Regular market price per kg")
    city: str = Field(..., min_length=1, max_length=100)
    deadline: datetime = Field(..., description="Must be in the future")


class GroupBuyJoinRequest(BaseModel):
    quantity: Decimal = Field(..., max_digits=10, decimal_places=2, description="Contribution in kg, must be > 0")


class GroupBuyCloseRequest(BaseModel):
    status: Literal['completed', 'cancelled']


class GroupBuyResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    organizer_id: str
    ingredient: str
    target_quantity: float
    current_quantity: float
    price_per_kg: float
    original_price: float
    city: str
    deadline: datetime
    status: Literal['active', 'completed', 'cancelled']
    participant_count: int
    created_at: datetime


class GroupBuyParticipantResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    group_buy_id: str
    vendor_id: str
    quantity: float
    joined_at: datetime


class GroupBuyListResponse(BaseModel):
    group_buys: List[GroupBuyResponse]
    count: int
