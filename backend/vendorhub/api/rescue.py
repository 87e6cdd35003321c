"""Rescue item endpoints"""
from fastapi import APIRouter, Depends, Query, Request

from vendorhub.api.deps import get_store
from vendorhub.core.config import settings
from vendorhub.core.rate_limit import limiter
from vendorhub.core.security import Identity, get_current_identity, require_role
from vendorhub.core.store import EntityStore
from vendorhub.schemas.rescue import RescueItemCreateRequest, RescueItemListResponse, RescueItemResponse
from vendorhub.services.rescue_service import RescueService

router = APIRouter()


@router.post("/", response_model=RescueItemResponse)
async def create_rescue_item(
    data: RescueItemCreateRequest,
    identity: Identity = Depends(require_role("vendor")),
    store: EntityStore = Depends(get_store),
):
    """List surplus food at a rescue price."""
    item = await RescueService(store).create_rescue_item(
        vendor_id=identity.user_id,
        title=data.title,
        description=data.description,
        type=data.type,
        quantity=data.quantity,
        original_price=data.original_price,
        rescue_price=data.rescue_price,
        city=data.city,
        is_hot=data.is_hot,
    )
    return RescueItemResponse.model_validate(item)


@router.get("/", response_model=RescueItemListResponse)
async def list_rescue_items(
    city: str = Query(..., min_length=1, description="City to list available items for"),
    store: EntityStore = Depends(get_store),
):
    items = await RescueService(store).list_rescue_items(city)
    return RescueItemListResponse(
        rescue_items=[RescueItemResponse.model_validate(i) for i in items],
        count=len(items),
    )


@router.get("/{item_id}", response_model=RescueItemResponse)
async def get_rescue_item(item_id: str, store: EntityStore = Depends(get_store)):
    item = await RescueService(store).get_rescue_item(item_id)
    return RescueItemResponse.model_validate(item)


@router.post("/{item_id}/claim", response_model=RescueItemResponse)
@limiter.limit(f"{settings.RATE_LIMIT_PER_MINUTE}/minute")
async def claim_rescue_item(
    request: Request,
    item_id: str,
    identity: Identity = Depends(get_current_identity),
    store: EntityStore = Depends(get_store),
):
    """
    Claim an available item. Only the first claim succeeds; later claims get
    409 "Item not available".
    """
    item = await RescueService(store).claim_rescue_item(item_id, identity.user_id)
    return RescueItemResponse.model_validate(item)
