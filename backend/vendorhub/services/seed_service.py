"""Seed service for demo data"""
import logging
from datetime import timedelta
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.ext.asyncio import async_sessionmaker

from vendorhub.core.clock import utcnow
from vendorhub.core.database import AsyncSessionLocal
from vendorhub.core.store import SqlEntityStore
from vendorhub.models.user import User
from vendorhub.services.group_buy_service import GroupBuyService
from vendorhub.services.identity_service import IdentityService
from vendorhub.services.rescue_service import RescueService

logger = logging.getLogger(__name__)

DEMO_PASSWORD = "demo-password"


async def seed_data(session_factory: async_sessionmaker = AsyncSessionLocal) -> bool:
    """Seed demo vendors, a buyer, group buys and rescue items if the database is empty."""
    async with session_factory() as db:
        # Check if already seeded
        result = await db.execute(select(User).limit(1))
        if result.scalar_one_or_none():
            return False

        store = SqlEntityStore(db)
        identities = IdentityService(store)
        group_buys = GroupBuyService(store)
        rescue = RescueService(store)

        ravi, _ = await identities.register("ravi", "ravi@example.com", DEMO_PASSWORD, "vendor", "Pune")
        meena, _ = await identities.register("meena", "meena@example.com", DEMO_PASSWORD, "vendor", "Pune")
        await identities.register("arjun", "arjun@example.com", DEMO_PASSWORD, "buyer", "Pune")

        deadline = utcnow() + timedelta(days=2)
        onions = await group_buys.create_group_buy(
            ravi.id, "Onions", Decimal("50"), Decimal("28"), Decimal("35"), "Pune", deadline,
        )
        await group_buys.join_group_buy(onions.id, meena.id, Decimal("12"))
        await group_buys.create_group_buy(
            meena.id, "Paneer", Decimal("20"), Decimal("240"), Decimal("300"), "Pune", deadline,
        )

        await rescue.create_rescue_item(
            ravi.id, "Veg Biryani", "Freshly cooked this afternoon, serves 10",
            "prepared", "10 plates", Decimal("60"), Decimal("40"), "Pune", is_hot=True,
        )
        await rescue.create_rescue_item(
            meena.id, "Ripe Tomatoes", "Slightly soft, good for gravies",
            "raw", "5 kg", Decimal("150"), Decimal("80"), "Pune",
        )

    logger.info("Database seeded with demo data")
    return True
