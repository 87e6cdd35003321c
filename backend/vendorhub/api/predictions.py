"""Prediction endpoints"""
from typing import Optional
from fastapi import APIRouter, Depends, Request

from vendorhub.api.deps import get_recommendation_provider, get_store
from vendorhub.core.config import settings
from vendorhub.core.rate_limit import limiter
from vendorhub.core.security import Identity, require_role
from vendorhub.core.store import EntityStore
from vendorhub.models.prediction import Prediction
from vendorhub.schemas.prediction import (
    IngredientPrediction,
    MarketTrends,
    PredictionResponse,
    WeatherResponse,
)
from vendorhub.services.prediction_service import PredictionService
from vendorhub.services.recommendation_service import (
    DEFAULT_MARKET_TRENDS,
    DEFAULT_WEATHER,
    RecommendationProvider,
)

router = APIRouter()


def _stored_response(prediction: Prediction) -> PredictionResponse:
    return PredictionResponse(
        id=prediction.id,
        vendor_id=prediction.vendor_id,
        city=prediction.city,
        date=prediction.date,
        confidence=float(prediction.confidence) if prediction.confidence is not None else None,
        predictions=[IngredientPrediction(**row) for row in prediction.predictions or []],
        weather=WeatherResponse(
            description=prediction.weather or "Clear skies",
            temperature=float(prediction.temperature) if prediction.temperature is not None else 28.0,
            condition=DEFAULT_WEATHER.condition,
        ),
        market_trends=MarketTrends(**DEFAULT_MARKET_TRENDS),
    )


@router.post("/", response_model=PredictionResponse)
@limiter.limit(f"{settings.RATE_LIMIT_PER_MINUTE}/minute")
async def generate_prediction(
    request: Request,
    identity: Identity = Depends(require_role("vendor")),
    store: EntityStore = Depends(get_store),
    provider: RecommendationProvider = Depends(get_recommendation_provider),
):
    """
    Forecast today's ingredient needs for the calling vendor.

    Never fails because of the AI provider: timeouts and errors fall back to a
    deterministic weather-adjusted list.
    """
    prediction, recommendation = await PredictionService(store, provider).generate(identity.user_id)

    response = _stored_response(prediction)
    response.weather = WeatherResponse(**recommendation.to_dict()["weather"])
    response.market_trends = MarketTrends(**recommendation.market_trends)
    response.source = recommendation.source
    return response


@router.get("/latest", response_model=Optional[PredictionResponse])
async def latest_prediction(
    identity: Identity = Depends(require_role("vendor")),
    store: EntityStore = Depends(get_store),
    provider: RecommendationProvider = Depends(get_recommendation_provider),
):
    """Most recent stored prediction, or null if none yet."""
    prediction = await PredictionService(store, provider).latest(identity.user_id)
    if prediction is None:
        return None
    return _stored_response(prediction)
