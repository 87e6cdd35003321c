import asyncio
import json
import unittest
from types import SimpleNamespace

from vendorhub.services.recommendation_service import (
    RecommendationProvider,
    WeatherData,
    fallback_ingredients,
    fallback_weather,
)


class FakeCompletions:
    """Stands in for client.chat.completions, replaying canned JSON replies."""

    def __init__(self, replies=None, error=None, delay=0.0):
        self.replies = list(replies or [])
        self.error = error
        self.delay = delay
        self.calls = []

    async def create(self, **kwargs):
        self.calls.append(kwargs)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error:
            raise self.error
        content = self.replies.pop(0)
        return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])


def fake_client(completions):
    return SimpleNamespace(chat=SimpleNamespace(completions=completions))


def offline_provider():
    provider = RecommendationProvider(timeout=1)
    provider.client = None
    return provider


def names(recommendation):
    return [i.ingredient for i in recommendation.ingredients]


class TestFallbackRules(unittest.TestCase):

    def test_base_list_for_mild_weather(self):
        rows = fallback_ingredients(WeatherData(temperature=26, humidity=55, description="Pleasant", condition="sunny"))
        self.assertEqual([r.ingredient for r in rows], ["Onions", "Tomatoes", "Potatoes", "Oil", "Spices Mix"])

    def test_hot_weather_adds_cooling_ingredient(self):
        rows = fallback_ingredients(WeatherData(temperature=31, humidity=80, description="Hot", condition="sunny"))
        self.assertIn("Lemons", [r.ingredient for r in rows])

    def test_exactly_thirty_degrees_is_not_hot(self):
        rows = fallback_ingredients(WeatherData(temperature=30, humidity=80, description="Warm", condition="sunny"))
        self.assertNotIn("Lemons", [r.ingredient for r in rows])

    def test_rain_adds_warming_ingredient(self):
        rows = fallback_ingredients(WeatherData(temperature=24, humidity=90, description="Showers", condition="rainy"))
        self.assertEqual(rows[-1].ingredient, "Ginger")

    def test_city_weather_lookup_ignores_case(self):
        self.assertEqual(fallback_weather("MUMBAI").temperature, 32)
        self.assertEqual(fallback_weather("Atlantis").description, "Moderate weather")


class TestRecommendationProvider(unittest.IsolatedAsyncioTestCase):

    async def test_without_client_uses_fallback(self):
        recommendation = await offline_provider().predict("Mumbai", "street food")

        self.assertEqual(recommendation.source, "fallback")
        self.assertEqual(recommendation.weather.temperature, 32)
        self.assertIn("Lemons", names(recommendation))

    async def test_fallback_is_deterministic(self):
        provider = offline_provider()
        first = await provider.predict("Pune", "street food")
        second = await provider.predict("Pune", "chaat")

        self.assertEqual(first.to_dict(), second.to_dict())

    async def test_provider_error_degrades_to_fallback(self):
        completions = FakeCompletions(error=RuntimeError("upstream 500"))
        provider = RecommendationProvider(client=fake_client(completions), timeout=1)

        recommendation = await provider.predict("Chennai", "street food")

        self.assertEqual(recommendation.source, "fallback")
        self.assertEqual(recommendation.weather.temperature, 31)
        self.assertIn("Lemons", names(recommendation))

    async def test_timeout_degrades_to_fallback(self):
        completions = FakeCompletions(replies=["{}", "{}"], delay=1.0)
        provider = RecommendationProvider(client=fake_client(completions), timeout=0.05)

        recommendation = await provider.predict("Pune", "street food")

        self.assertEqual(recommendation.source, "fallback")
        self.assertEqual(len(recommendation.ingredients), 5)

    async def test_malformed_reply_degrades_to_fallback(self):
        weather = json.dumps({"temperature": 22, "humidity": 90, "description": "Drizzle", "condition": "rainy"})
        completions = FakeCompletions(replies=[weather, "not json"])
        provider = RecommendationProvider(client=fake_client(completions), timeout=1)

        recommendation = await provider.predict("Delhi", "street food")

        self.assertEqual(recommendation.source, "fallback")
        self.assertEqual(recommendation.weather.condition, "rainy")
        self.assertIn("Ginger", names(recommendation))

    async def test_provider_reply_is_parsed_and_clamped(self):
        weather = json.dumps({"temperature": 33, "humidity": 70, "description": "Sunny", "condition": "sunny"})
        predictions = json.dumps({
            "predictions": [
                {"ingredient": "Paneer", "suggestedQuantity": "2 kg", "confidence": 1.7, "reasoning": "Weekend"},
                {"ingredient": "Mint", "suggestedQuantity": "200g", "confidence": 0.6, "reasoning": "Chutney"},
                {"suggestedQuantity": "1 kg"},
            ],
            "marketTrends": {"demand": "high", "factors": ["Festival"]},
        })
        completions = FakeCompletions(replies=[weather, predictions])
        provider = RecommendationProvider(client=fake_client(completions), timeout=1)

        recommendation = await provider.predict("Mumbai", "street food")

        self.assertEqual(recommendation.source, "openai")
        self.assertEqual(names(recommendation), ["Paneer", "Mint"])
        self.assertEqual(recommendation.ingredients[0].confidence, 1.0)
        self.assertAlmostEqual(recommendation.overall_confidence, 0.8)
        self.assertEqual(recommendation.market_trends, {"demand": "high", "factors": ["Festival"]})
        self.assertEqual(len(completions.calls), 2)


if __name__ == "__main__":
    unittest.main()
