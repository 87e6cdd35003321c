"""Password hashing, bearer tokens and caller identity"""
from dataclasses import dataclass
from datetime import timedelta
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from passlib.context import CryptContext

from vendorhub.core.clock import utcnow
from vendorhub.core.config import settings
from vendorhub.core.errors import AuthenticationError, PermissionDeniedError

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")
bearer_scheme = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class Identity:
    """An authenticated caller as the core sees it"""
    user_id: str
    role: str


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    return pwd_context.verify(password, password_hash)


def create_access_token(user_id: str, role: str, expires_delta: Optional[timedelta] = None) -> str:
    expire = utcnow() + (expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES))
    return jwt.encode(
        {"sub": user_id, "role": role, "exp": expire},
        settings.JWT_SECRET,
        algorithm=settings.JWT_ALGORITHM,
    )


def decode_access_token(token: str) -> Identity:
    try:
        payload = jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
    except JWTError:
        raise AuthenticationError("Invalid or expired token")

    user_id = payload.get("sub")
    role = payload.get("role")
    if not user_id or not role:
        raise AuthenticationError("Invalid token payload")
    return Identity(user_id=user_id, role=role)


async def get_current_identity(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Identity:
    if credentials is None:
        raise AuthenticationError("Access token required")
    return decode_access_token(credentials.credentials)


def require_role(*roles: str):
    """Dependency that only admits callers whose role is in `roles`."""
    async def _guard(identity: Identity = Depends(get_current_identity)) -> Identity:
        if identity.role not in roles:
            raise PermissionDeniedError(f"This action requires role: {', '.join(roles)}")
        return identity
    return _guard
