"""Recommendation Provider - AI ingredient forecasts with a deterministic fallback"""
import asyncio
import json
import logging
from dataclasses import dataclass, field, asdict
from typing import Any, List, Optional

from openai import AsyncOpenAI

from vendorhub.core.config import settings

logger = logging.getLogger(__name__)

# Temperature above which a cooling ingredient is suggested (Celsius)
HOT_WEATHER_THRESHOLD_C = 30

WEATHER_CONDITIONS = ("sunny", "cloudy", "rainy", "stormy")


@dataclass
class WeatherData:
    temperature: float
    humidity: float
    description: str
    condition: str  # sunny, cloudy, rainy, stormy


@dataclass
class IngredientSuggestion:
    ingredient: str
    quantity: str  # quantity with unit, e.g. "5 kg"
    confidence: float  # 0.0 to 1.0
    reasoning: str


@dataclass
class Recommendation:
    """Result of a predict() call, whichever path produced it"""
    ingredients: List[IngredientSuggestion]
    weather: WeatherData
    market_trends: dict = field(default_factory=dict)
    source: str = "fallback"  # 'openai' or 'fallback'

    @property
    def overall_confidence(self) -> float:
        if not self.ingredients:
            return 0.0
        return sum(i.confidence for i in self.ingredients) / len(self.ingredients)

    def to_dict(self) -> dict:
        return asdict(self)


# Typical current conditions for cities we serve
CITY_WEATHER = {
    "mumbai": WeatherData(temperature=32, humidity=75, description="Hot and humid", condition="sunny"),
    "delhi": WeatherData(temperature=28, humidity=60, description="Partly cloudy", condition="cloudy"),
    "bangalore": WeatherData(temperature=24, humidity=65, description="Pleasant weather", condition="cloudy"),
    "chennai": WeatherData(temperature=31, humidity=80, description="Hot and coastal", condition="sunny"),
    "kolkata": WeatherData(temperature=29, humidity=70, description="Warm and humid", condition="cloudy"),
    "pune": WeatherData(temperature=26, humidity=55, description="Pleasant", condition="sunny"),
}
DEFAULT_WEATHER = WeatherData(temperature=28, humidity=65, description="Moderate weather", condition="sunny")

DEFAULT_MARKET_TRENDS = {
    "demand": "medium",
    "factors": ["Weather conditions", "Local preferences"],
}

BASE_INGREDIENTS = (
    ("Onions", "5 kg", 0.8, "Essential for most dishes"),
    ("Tomatoes", "3 kg", 0.7, "High demand ingredient"),
    ("Potatoes", "4 kg", 0.9, "Popular base ingredient"),
    ("Oil", "2 liters", 0.85, "Cooking essential"),
    ("Spices Mix", "500g", 0.9, "Flavor enhancement"),
)
COOLING_INGREDIENT = ("Lemons", "2 kg", 0.8, "Hot weather increases demand for refreshing items")
WARMING_INGREDIENT = ("Ginger", "300g", 0.75, "Rainy weather increases demand for hot, spicy food")

WEATHER_PROMPT = (
    "You are a weather API service. Generate realistic current weather data for Indian cities. "
    "Respond with JSON in this format: "
    "{ 'temperature': number, 'humidity': number, 'description': string, 'condition': string }"
)

PREDICTION_PROMPT = """You are an AI expert for Indian street food vendors. Based on weather, location, and vendor type, predict ingredient quantities needed for the day.
Respond with JSON in this format:
{
  "predictions": [
    {"ingredient": "name", "suggestedQuantity": "quantity with unit", "confidence": 0.0, "reasoning": "brief explanation"}
  ],
  "marketTrends": {"demand": "high|medium|low", "factors": ["factor1", "factor2"]}
}"""


def fallback_weather(city: str) -> WeatherData:
    weather = CITY_WEATHER.get(city.strip().lower(), DEFAULT_WEATHER)
    return WeatherData(**asdict(weather))


def fallback_ingredients(weather: WeatherData) -> List[IngredientSuggestion]:
    """
    Fixed suggestion list adjusted by two weather rules:
    above HOT_WEATHER_THRESHOLD_C add a cooling ingredient, rainy adds a warming one.
    """
    rows = list(BASE_INGREDIENTS)
    if weather.temperature > HOT_WEATHER_THRESHOLD_C:
        rows.append(COOLING_INGREDIENT)
    if weather.condition == "rainy":
        rows.append(WARMING_INGREDIENT)
    return [IngredientSuggestion(*row) for row in rows]


def _clamp(value: Any, low: float, high: float, default: float) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    return max(low, min(high, number))


class RecommendationProvider:
    """
    Ingredient forecasts from the OpenAI chat API.

    Every remote call is bounded by a timeout. Any failure (no API key,
    timeout, transport error, unparseable JSON) degrades to the deterministic
    fallback, callers never see a provider error.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        timeout: Optional[float] = None,
        client: Any = None,
    ):
        self.model = model or settings.OPENAI_MODEL
        self.timeout = timeout if timeout is not None else settings.RECOMMENDATION_TIMEOUT_SECONDS

        api_key = api_key or settings.OPENAI_API_KEY
        if client is None and api_key:
            client = AsyncOpenAI(api_key=api_key, timeout=self.timeout, max_retries=0)
        self.client = client

    async def predict(self, city: str, vendor_type: str) -> Recommendation:
        weather = await self.get_weather(city)

        if self.client is None:
            return self._fallback(weather)

        try:
            data = await self._complete_json(
                PREDICTION_PROMPT,
                f"Generate ingredient predictions for:\n"
                f"- City: {city}\n"
                f"- Vendor Type: {vendor_type}\n"
                f"- Current Weather: {weather.description}, {weather.temperature}°C\n"
                f"- Weather Condition: {weather.condition}\n\n"
                f"Predict 5-8 key ingredients with realistic quantities for a day's operation.",
            )
            ingredients = [self._parse_suggestion(row) for row in data.get("predictions") or []]
            ingredients = [i for i in ingredients if i is not None]
            if not ingredients:
                raise ValueError("empty prediction list")
        except Exception as e:
            logger.warning("Recommendation provider failed for %s, using fallback: %s", city, e)
            return self._fallback(weather)

        return Recommendation(
            ingredients=ingredients,
            weather=weather,
            market_trends=self._parse_trends(data.get("marketTrends")),
            source="openai",
        )

    async def get_weather(self, city: str) -> WeatherData:
        if self.client is None:
            return fallback_weather(city)

        try:
            data = await self._complete_json(
                WEATHER_PROMPT,
                f"Generate current weather data for {city}, India. Temperature should be in Celsius, "
                f"humidity as percentage, description should be descriptive, and condition should be "
                f"one of: {', '.join(WEATHER_CONDITIONS)}.",
            )
        except Exception as e:
            logger.warning("Weather lookup failed for %s, using fallback: %s", city, e)
            return fallback_weather(city)

        fallback = fallback_weather(city)
        condition = data.get("condition")
        return WeatherData(
            temperature=_clamp(data.get("temperature"), -30, 60, fallback.temperature),
            humidity=_clamp(data.get("humidity"), 0, 100, fallback.humidity),
            description=data.get("description") or fallback.description,
            condition=condition if condition in WEATHER_CONDITIONS else fallback.condition,
        )

    async def _complete_json(self, system_prompt: str, user_prompt: str) -> dict:
        response = await asyncio.wait_for(
            self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_prompt},
                ],
                response_format={"type": "json_object"},
            ),
            timeout=self.timeout,
        )
        data = json.loads(response.choices[0].message.content or "{}")
        if not isinstance(data, dict):
            raise ValueError("provider returned non-object JSON")
        return data

    @staticmethod
    def _parse_suggestion(row: Any) -> Optional[IngredientSuggestion]:
        if not isinstance(row, dict) or not row.get("ingredient"):
            return None
        return IngredientSuggestion(
            ingredient=str(row["ingredient"]),
            quantity=str(row.get("suggestedQuantity") or row.get("quantity") or ""),
            confidence=_clamp(row.get("confidence"), 0.0, 1.0, 0.5),
            reasoning=str(row.get("reasoning") or ""),
        )

    @staticmethod
    def _parse_trends(trends: Any) -> dict:
        if not isinstance(trends, dict):
            return dict(DEFAULT_MARKET_TRENDS)
        demand = trends.get("demand")
        factors = trends.get("factors")
        return {
            "demand": demand if demand in ("high", "medium", "low") else "medium",
            "factors": [str(f) for f in factors] if isinstance(factors, list) else [],
        }

    @staticmethod
    def _fallback(weather: WeatherData) -> Recommendation:
        return Recommendation(
            ingredients=fallback_ingredients(weather),
            weather=weather,
            market_trends=dict(DEFAULT_MARKET_TRENDS),
            source="fallback",
        )
