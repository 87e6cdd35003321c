"""Group buy endpoints"""
from typing import List
from fastapi import APIRouter, Depends, Query

from vendorhub.api.deps import get_store
from vendorhub.core.security import Identity, get_current_identity, require_role
from vendorhub.core.store import EntityStore
from vendorhub.schemas.group_buy import (
    GroupBuyCloseRequest,
    GroupBuyCreateRequest,
    GroupBuyJoinRequest,
    GroupBuyListResponse,
    GroupBuyParticipantResponse,
    GroupBuyResponse,
)
from vendorhub.services.group_buy_service import GroupBuyService

router = APIRouter()


@router.post("/", response_model=GroupBuyResponse)
async def create_group_buy(
    data: GroupBuyCreateRequest,
    identity: Identity = Depends(require_role("vendor")),
    store: EntityStore = Depends(get_store),
):
    """Open a group buy. The calling vendor becomes organizer and first participant."""
    group_buy = await GroupBuyService(store).create_group_buy(
        organizer_id=identity.user_id,
        ingredient=data.ingredient,
        target_quantity=data.target_quantity,
        price_per_kg=data.price_per_kg,
        original_price=data.original_price,
        city=data.city,
        deadline=data.deadline,
    )
    return GroupBuyResponse.model_validate(group_buy)


@router.get("/", response_model=GroupBuyListResponse)
async def list_group_buys(
    city: str = Query(..., min_length=1, description="City to list active group buys for"),
    store: EntityStore = Depends(get_store),
):
    """Active group buys in a city, newest first."""
    group_buys = await GroupBuyService(store).list_group_buys(city)
    return GroupBuyListResponse(
        group_buys=[GroupBuyResponse.model_validate(g) for g in group_buys],
        count=len(group_buys),
    )


@router.get("/{group_buy_id}", response_model=GroupBuyResponse)
async def get_group_buy(group_buy_id: str, store: EntityStore = Depends(get_store)):
    group_buy = await GroupBuyService(store).get_group_buy(group_buy_id)
    return GroupBuyResponse.model_validate(group_buy)


@router.get("/{group_buy_id}/participants", response_model=List[GroupBuyParticipantResponse])
async def list_participants(group_buy_id: str, store: EntityStore = Depends(get_store)):
    participants = await GroupBuyService(store).get_participants(group_buy_id)
    return [GroupBuyParticipantResponse.model_validate(p) for p in participants]


@router.post("/{group_buy_id}/join", response_model=GroupBuyResponse)
async def join_group_buy(
    group_buy_id: str,
    data: GroupBuyJoinRequest,
    identity: Identity = Depends(get_current_identity),
    store: EntityStore = Depends(get_store),
):
    """Contribute a quantity to an active group buy."""
    group_buy = await GroupBuyService(store).join_group_buy(
        group_buy_id, identity.user_id, data.quantity
    )
    return GroupBuyResponse.model_validate(group_buy)


@router.post("/{group_buy_id}/close", response_model=GroupBuyResponse)
async def close_group_buy(
    group_buy_id: str,
    data: GroupBuyCloseRequest,
    identity: Identity = Depends(get_current_identity),
    store: EntityStore = Depends(get_store),
):
    """Mark an active group buy completed or cancelled (organizer only)."""
    group_buy = await GroupBuyService(store).close_group_buy(
        group_buy_id, identity.user_id, data.status
    )
    return GroupBuyResponse.model_validate(group_buy)
