"""Identity service - registration and login"""
import logging
from typing import Tuple

from sqlalchemy.exc import IntegrityError

from vendorhub.core.errors import AuthenticationError, ConflictError, ValidationError
from vendorhub.core.security import create_access_token, hash_password, verify_password
from vendorhub.core.store import EntityStore
from vendorhub.models.user import USER_ROLES, User
from vendorhub.models.vendor_profile import VendorProfile

logger = logging.getLogger(__name__)


class IdentityService:

    def __init__(self, store: EntityStore):
        self.store = store

    async def register(
        self,
        username: str,
        email: str,
        password: str,
        role: str,
        city: str,
    ) -> Tuple[User, str]:
        """Create a user (plus a vendor profile for vendors) and issue a token."""
        if role not in USER_ROLES:
            raise ValidationError(f"Role must be one of {', '.join(USER_ROLES)}")
        email = email.strip().lower()

        if await self.store.scan(User, limit=1, email=email):
            raise ConflictError("User already exists")
        if await self.store.scan(User, limit=1, username=username):
            raise ConflictError("Username is taken")

        try:
            user = await self.store.create(
                User,
                username=username,
                email=email,
                password_hash=hash_password(password),
                role=role,
                city=city.strip(),
            )
            if role == "vendor":
                await self.store.create(
                    VendorProfile,
                    user_id=user.id,
                    business_name=f"{username}'s Kitchen",
                )
            await self.store.commit()
        except IntegrityError:
            # Lost a race with a concurrent registration for the same email/username
            await self.store.rollback()
            raise ConflictError("User already exists")

        logger.info("Registered %s %s", role, user.id)
        return user, create_access_token(user.id, user.role)

    async def login(self, email: str, password: str) -> Tuple[User, str]:
        users = await self.store.scan(User, limit=1, email=email.strip().lower())
        if not users or not verify_password(password, users[0].password_hash):
            raise AuthenticationError("Invalid credentials")

        user = users[0]
        return user, create_access_token(user.id, user.role)
