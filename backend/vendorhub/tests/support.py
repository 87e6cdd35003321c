"""Shared fixtures: throw-away SQLite databases and seeded identities"""
import os
import tempfile
from contextlib import asynccontextmanager
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.pool import NullPool

from vendorhub.core.database import build_engine, init_db
from vendorhub.core.security import hash_password
from vendorhub.core.store import SqlEntityStore
from vendorhub.models.user import User
from vendorhub.models.vendor_profile import VendorProfile


class TempDatabase:
    """A SQLite file database that lives for one test (or test class)."""

    def __init__(self):
        fd, self.path = tempfile.mkstemp(suffix=".db")
        os.close(fd)
        # NullPool: every session opens its own connection on the running loop
        self.engine = build_engine(f"sqlite+aiosqlite:///{self.path}", poolclass=NullPool)
        self.sessions = async_sessionmaker(self.engine, class_=AsyncSession, expire_on_commit=False)

    async def create(self):
        await init_db(self.engine)

    async def dispose(self):
        await self.engine.dispose()
        if os.path.exists(self.path):
            os.remove(self.path)

    @asynccontextmanager
    async def store(self):
        """A store on its own session, like one request would get."""
        async with self.sessions() as session:
            yield SqlEntityStore(session)

    async def get_db(self):
        async with self.sessions() as session:
            yield session


async def add_user(
    db: TempDatabase,
    username: str,
    role: str = "vendor",
    city: str = "Pune",
    with_profile: Optional[bool] = None,
) -> User:
    """Insert a user directly, plus a vendor profile for vendors unless told otherwise."""
    if with_profile is None:
        with_profile = role == "vendor"

    async with db.store() as store:
        user = await store.create(
            User,
            username=username,
            email=f"{username}@example.com",
            password_hash=hash_password("password123"),
            role=role,
            city=city,
        )
        if with_profile:
            await store.create(VendorProfile, user_id=user.id, business_name=f"{username}'s Kitchen")
        await store.commit()
        return user
