"""Rescue item request/response schemas"""
from typing import List, Literal, Optional
from datetime import datetime
from decimal import Decimal
from pydantic import BaseModel, ConfigDict, Field


class RescueItemCreateRequest(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: str = Field(..., max_length=2000)
    type: Literal['prepared', 'raw']
    quantity: str = Field(..., min_length=1, max_length=100, description="Free text, e.g. '20 plates'")
    original_price: Decimal = Field(..., max_digits=10, decimal_places=2, gt=0)
    rescue_price: Decimal = Field(..., max_digits=10, decimal_places=2, description="Must be > 0 and not above original_price")
    city: str = Field(..., min_length=1, max_length=100)
    is_hot: bool = False


class RescueItemResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    vendor_id: str
    title: str
    description: str
    type: Literal['prepared', 'raw']
    quantity: str
    original_price: float
    rescue_price: float
    city: str
    status: Literal['available', 'claimed', 'completed']
    is_hot: bool
    claimed_by: Optional[str] = None
    created_at: datetime


class RescueItemListResponse(BaseModel):
    rescue_items: List[RescueItemResponse]
    count: int
