"""Prediction log - stores recommendation snapshots per vendor"""
import logging
from decimal import Decimal
from typing import Optional, Tuple

from vendorhub.core.errors import NotFoundError
from vendorhub.core.store import EntityStore
from vendorhub.models.prediction import Prediction
from vendorhub.models.user import User
from vendorhub.services.recommendation_service import Recommendation, RecommendationProvider
from vendorhub.services.trust_service import USED_AI_PREDICTION, TrustService

logger = logging.getLogger(__name__)

DEFAULT_VENDOR_TYPE = "street food"


class PredictionService:

    def __init__(self, store: EntityStore, provider: RecommendationProvider):
        self.store = store
        self.provider = provider
        self.trust = TrustService(store)

    async def generate(self, vendor_id: str) -> Tuple[Prediction, Recommendation]:
        """Ask the provider for today's forecast, log it and mark the vendor as an AI user."""
        user = await self.store.get(User, vendor_id)
        if user is None:
            raise NotFoundError("User not found")

        profile = await self.trust.get_profile(vendor_id)
        vendor_type = (profile.sourcing_method if profile else None) or DEFAULT_VENDOR_TYPE

        recommendation = await self.provider.predict(user.city, vendor_type)

        prediction = await self.store.create(
            Prediction,
            vendor_id=vendor_id,
            city=user.city,
            weather=recommendation.weather.description,
            temperature=Decimal(str(round(recommendation.weather.temperature, 1))),
            predictions=[
                {
                    "ingredient": s.ingredient,
                    "quantity": s.quantity,
                    "confidence": s.confidence,
                    "reasoning": s.reasoning,
                }
                for s in recommendation.ingredients
            ],
            confidence=Decimal(str(round(recommendation.overall_confidence, 2))),
        )
        await self.trust.mark(vendor_id, USED_AI_PREDICTION)
        await self.store.commit()

        logger.info(
            "Prediction %s generated for %s (%s, %d ingredients)",
            prediction.id, vendor_id, recommendation.source, len(recommendation.ingredients),
        )
        return prediction, recommendation

    async def latest(self, vendor_id: str) -> Optional[Prediction]:
        predictions = await self.store.scan(
            Prediction,
            order_by=Prediction.date.desc(),
            limit=1,
            vendor_id=vendor_id,
        )
        return predictions[0] if predictions else None
