"""Registration and login endpoints"""
from fastapi import APIRouter, Depends

from vendorhub.api.deps import get_store
from vendorhub.core.security import Identity, get_current_identity
from vendorhub.core.store import EntityStore
from vendorhub.schemas.auth import (
    IdentityResponse,
    LoginRequest,
    RegisterRequest,
    TokenResponse,
    UserResponse,
)
from vendorhub.services.identity_service import IdentityService

router = APIRouter()


@router.post("/register", response_model=TokenResponse)
async def register(data: RegisterRequest, store: EntityStore = Depends(get_store)):
    """Create an account. Vendors also get a vendor profile."""
    user, token = await IdentityService(store).register(
        username=data.username,
        email=data.email,
        password=data.password,
        role=data.role,
        city=data.city,
    )
    return TokenResponse(user=UserResponse.model_validate(user), token=token)


@router.post("/login", response_model=TokenResponse)
async def login(data: LoginRequest, store: EntityStore = Depends(get_store)):
    user, token = await IdentityService(store).login(data.email, data.password)
    return TokenResponse(user=UserResponse.model_validate(user), token=token)


@router.get("/me", response_model=IdentityResponse)
async def me(identity: Identity = Depends(get_current_identity)):
    return IdentityResponse(user_id=identity.user_id, role=identity.role)
