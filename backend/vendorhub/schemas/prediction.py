"""Prediction schemas"""
from typing import List, Literal, Optional
from datetime import datetime
from pydantic import BaseModel, Field


class IngredientPrediction(BaseModel):
    ingredient: str
    quantity: str
    confidence: float = Field(..., ge=0, le=1)
    reasoning: str


class WeatherResponse(BaseModel):
    description: str
    temperature: float
    humidity: Optional[float] = None
    condition: str


class MarketTrends(BaseModel):
    demand: str = "medium"
    factors: List[str] = Field(default_factory=list)


class PredictionResponse(BaseModel):
    id: str
    vendor_id: str
    city: str
    date: datetime
    confidence: Optional[float] = Field(None, ge=0, le=1)
    predictions: List[IngredientPrediction]
    weather: WeatherResponse
    market_trends: Optional[MarketTrends] = None
    source: Optional[Literal['openai', 'fallback']] = None
