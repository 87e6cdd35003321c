"""Vendor profile and review endpoints"""
from fastapi import APIRouter, Depends

from vendorhub.api.deps import get_store
from vendorhub.core.errors import NotFoundError
from vendorhub.core.security import Identity, get_current_identity, require_role
from vendorhub.core.store import EntityStore
from vendorhub.schemas.auth import UserResponse
from vendorhub.schemas.vendor import (
    ReviewCreateRequest,
    ReviewResponse,
    VendorProfileDetailResponse,
    VendorProfileResponse,
    VendorProfileUpdateRequest,
)
from vendorhub.services.review_service import ReviewService
from vendorhub.services.trust_service import TrustService

router = APIRouter()
reviews_router = APIRouter()


def _detail_response(detail: dict) -> VendorProfileDetailResponse:
    return VendorProfileDetailResponse(
        user=UserResponse.model_validate(detail["user"]),
        profile=VendorProfileResponse.model_validate(detail["profile"]),
        reviews=[ReviewResponse.model_validate(r) for r in detail["reviews"]],
    )


@router.get("/me", response_model=VendorProfileDetailResponse)
async def get_own_profile(
    identity: Identity = Depends(require_role("vendor")),
    store: EntityStore = Depends(get_store),
):
    detail = await ReviewService(store).get_vendor_profile(identity.user_id)
    return _detail_response(detail)


@router.put("/me", response_model=VendorProfileResponse)
async def update_own_profile(
    data: VendorProfileUpdateRequest,
    identity: Identity = Depends(require_role("vendor")),
    store: EntityStore = Depends(get_store),
):
    """Edit business name and sourcing method."""
    profile = await TrustService(store).update_details(
        identity.user_id,
        business_name=data.business_name,
        sourcing_method=data.sourcing_method,
    )
    if profile is None:
        raise NotFoundError("Vendor profile not found")
    return VendorProfileResponse.model_validate(profile)


@router.get("/{vendor_id}", response_model=VendorProfileDetailResponse)
async def get_vendor_profile(vendor_id: str, store: EntityStore = Depends(get_store)):
    """Public vendor profile: identity, trust signal and reviews."""
    detail = await ReviewService(store).get_vendor_profile(vendor_id)
    return _detail_response(detail)


@reviews_router.post("/", response_model=ReviewResponse)
async def create_review(
    data: ReviewCreateRequest,
    identity: Identity = Depends(get_current_identity),
    store: EntityStore = Depends(get_store),
):
    review = await ReviewService(store).create_review(
        buyer_id=identity.user_id,
        vendor_id=data.vendor_id,
        rating=data.rating,
        comment=data.comment,
        rescue_item_id=data.rescue_item_id,
    )
    return ReviewResponse.model_validate(review)
