"""Request-scoped service wiring"""
from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from vendorhub.core.database import get_db
from vendorhub.core.store import EntityStore, SqlEntityStore
from vendorhub.services.recommendation_service import RecommendationProvider

_provider = None


async def get_store(db: AsyncSession = Depends(get_db)) -> EntityStore:
    return SqlEntityStore(db)


def get_recommendation_provider() -> RecommendationProvider:
    global _provider
    if _provider is None:
        _provider = RecommendationProvider()
    return _provider
