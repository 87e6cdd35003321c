"""Vendor profile and review schemas"""
from typing import List, Optional
from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field

from vendorhub.schemas.auth import UserResponse


class VendorProfileResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    business_name: str
    sourcing_method: Optional[str] = None
    trust_score: int
    has_trust_badge: bool
    used_ai_prediction: bool
    participated_group_buy: bool
    posted_rescue_item: bool
    last_activity_date: datetime


class VendorProfileUpdateRequest(BaseModel):
    """Only these fields are owner-editable; trust fields are derived"""
    business_name: Optional[str] = Field(None, max_length=255)
    sourcing_method: Optional[str] = Field(None, max_length=500)


class ReviewCreateRequest(BaseModel):
    vendor_id: str
    rating: int = Field(..., description="1 to 5 stars")
    comment: Optional[str] = Field(None, max_length=1000)
    rescue_item_id: Optional[str] = None


class ReviewResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    vendor_id: str
    buyer_id: str
    rating: int
    comment: Optional[str] = None
    rescue_item_id: Optional[str] = None
    created_at: datetime


class VendorProfileDetailResponse(BaseModel):
    user: UserResponse
    profile: VendorProfileResponse
    reviews: List[ReviewResponse]
