import asyncio
import unittest
from datetime import timedelta

from fastapi.testclient import TestClient

from vendorhub.api.deps import get_recommendation_provider
from vendorhub.core.clock import utcnow
from vendorhub.core.database import get_db
from vendorhub.main import app
from vendorhub.services.recommendation_service import RecommendationProvider
from vendorhub.tests.support import TempDatabase


def offline_provider():
    provider = RecommendationProvider(timeout=1)
    provider.client = None
    return provider


class TestMarketplaceAPI(unittest.TestCase):

    @classmethod
    def setUpClass(cls):
        cls.db = TempDatabase()
        asyncio.run(cls.db.create())
        app.dependency_overrides[get_db] = cls.db.get_db
        app.dependency_overrides[get_recommendation_provider] = offline_provider
        cls.client = TestClient(app)

        cls.vendor = cls.register("ravi", "vendor")
        cls.other_vendor = cls.register("meena", "vendor")
        cls.buyer = cls.register("arjun", "buyer")
        cls.other_buyer = cls.register("kavya", "buyer")

    @classmethod
    def tearDownClass(cls):
        app.dependency_overrides.clear()
        asyncio.run(cls.db.dispose())

    @classmethod
    def register(cls, username, role):
        resp = cls.client.post('/api/v1/auth/register', json={
            'username': username,
            'email': f'{username}@example.com',
            'password': 'password123',
            'role': role,
            'city': 'Pune',
        })
        assert resp.status_code == 200, resp.text
        data = resp.json()
        return {'id': data['user']['id'], 'headers': {'Authorization': f"Bearer {data['token']}"}}

    def create_group_buy(self, headers=None, **overrides):
        payload = {
            'ingredient': 'Onions',
            'target_quantity': 25,
            'price_per_kg': 28,
            'original_price': 35,
            'city': 'Pune',
            'deadline': (utcnow() + timedelta(hours=1)).isoformat(),
        }
        payload.update(overrides)
        return self.client.post('/api/v1/group-buys/', json=payload, headers=headers or self.vendor['headers'])

    def create_rescue_item(self, headers=None, **overrides):
        payload = {
            'title': 'Veg Biryani',
            'description': 'Cooked this afternoon',
            'type': 'prepared',
            'quantity': '10 plates',
            'original_price': 60,
            'rescue_price': 40,
            'city': 'Pune',
            'is_hot': True,
        }
        payload.update(overrides)
        return self.client.post('/api/v1/rescue/', json=payload, headers=headers or self.vendor['headers'])

    def test_health(self):
        resp = self.client.get('/health')
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()['status'], 'ok')

    def test_login_and_me(self):
        resp = self.client.post('/api/v1/auth/login', json={
            'email': 'ravi@example.com', 'password': 'password123',
        })
        self.assertEqual(resp.status_code, 200)
        self.assertNotIn('password_hash', resp.json()['user'])

        me = self.client.get('/api/v1/auth/me', headers=self.vendor['headers'])
        self.assertEqual(me.json(), {'user_id': self.vendor['id'], 'role': 'vendor'})

    def test_bad_login(self):
        resp = self.client.post('/api/v1/auth/login', json={
            'email': 'ravi@example.com', 'password': 'not-the-password',
        })
        self.assertEqual(resp.status_code, 401)
        self.assertEqual(resp.json()['detail']['error'], 'not_authenticated')

    def test_mutations_need_a_token(self):
        resp = self.create_group_buy(headers={'Authorization': 'Bearer nonsense'})
        self.assertEqual(resp.status_code, 401)

        resp = self.client.post('/api/v1/rescue/some-id/claim')
        self.assertEqual(resp.status_code, 401)

    def test_only_vendors_create(self):
        self.assertEqual(self.create_group_buy(headers=self.buyer['headers']).status_code, 403)
        self.assertEqual(self.create_rescue_item(headers=self.buyer['headers']).status_code, 403)

    def test_group_buy_validation_errors(self):
        resp = self.create_group_buy(target_quantity=0)
        self.assertEqual(resp.status_code, 422)
        self.assertEqual(resp.json()['detail']['error'], 'validation_error')

        resp = self.create_group_buy(deadline=(utcnow() - timedelta(seconds=1)).isoformat())
        self.assertEqual(resp.status_code, 422)

    def test_sub_cent_amounts_are_rejected(self):
        self.assertEqual(self.create_group_buy(target_quantity=0.001).status_code, 422)
        self.assertEqual(self.create_rescue_item(rescue_price=0.004).status_code, 422)

        group_buy = self.create_group_buy().json()
        resp = self.client.post(f"/api/v1/group-buys/{group_buy['id']}/join", json={'quantity': 0.004},
                                headers=self.buyer['headers'])
        self.assertEqual(resp.status_code, 422)
        fetched = self.client.get(f"/api/v1/group-buys/{group_buy['id']}").json()
        self.assertEqual(fetched['participant_count'], 1)

    def test_group_buy_flow(self):
        created = self.create_group_buy(ingredient='Tomatoes')
        self.assertEqual(created.status_code, 200)
        group_buy = created.json()
        self.assertEqual(group_buy['current_quantity'], 0)
        self.assertEqual(group_buy['participant_count'], 1)

        join_url = f"/api/v1/group-buys/{group_buy['id']}/join"
        first = self.client.post(join_url, json={'quantity': 10}, headers=self.other_vendor['headers'])
        second = self.client.post(join_url, json={'quantity': 16}, headers=self.buyer['headers'])
        self.assertEqual(first.status_code, 200)
        self.assertEqual(second.status_code, 200)
        self.assertEqual(second.json()['current_quantity'], 26)
        self.assertEqual(second.json()['participant_count'], 3)
        self.assertEqual(second.json()['status'], 'active')

        bad = self.client.post(join_url, json={'quantity': 0}, headers=self.buyer['headers'])
        self.assertEqual(bad.status_code, 422)

        ledger = self.client.get(f"/api/v1/group-buys/{group_buy['id']}/participants")
        self.assertEqual([p['quantity'] for p in ledger.json()], [10, 16])

        listed = self.client.get('/api/v1/group-buys/', params={'city': 'Pune'}).json()
        self.assertIn(group_buy['id'], [g['id'] for g in listed['group_buys']])
        self.assertEqual(listed['count'], len(listed['group_buys']))

        not_organizer = self.client.post(
            f"/api/v1/group-buys/{group_buy['id']}/close",
            json={'status': 'completed'}, headers=self.other_vendor['headers'],
        )
        self.assertEqual(not_organizer.status_code, 403)

        closed = self.client.post(
            f"/api/v1/group-buys/{group_buy['id']}/close",
            json={'status': 'completed'}, headers=self.vendor['headers'],
        )
        self.assertEqual(closed.json()['status'], 'completed')

        late = self.client.post(join_url, json={'quantity': 1}, headers=self.buyer['headers'])
        self.assertEqual(late.status_code, 409)

        again = self.client.post(
            f"/api/v1/group-buys/{group_buy['id']}/close",
            json={'status': 'cancelled'}, headers=self.vendor['headers'],
        )
        self.assertEqual(again.status_code, 409)
        self.assertEqual(again.json()['detail'], {
            'error': 'conflict', 'message': 'Group buy is already completed',
        })

    def test_join_unknown_group_buy(self):
        resp = self.client.post('/api/v1/group-buys/missing-id/join', json={'quantity': 5},
                                headers=self.buyer['headers'])
        self.assertEqual(resp.status_code, 404)

    def test_list_requires_city(self):
        self.assertEqual(self.client.get('/api/v1/group-buys/').status_code, 422)
        self.assertEqual(self.client.get('/api/v1/rescue/').status_code, 422)

    def test_rescue_claim_flow(self):
        created = self.create_rescue_item()
        self.assertEqual(created.status_code, 200)
        item = created.json()
        self.assertEqual(item['status'], 'available')
        self.assertIsNone(item['claimed_by'])

        claim_url = f"/api/v1/rescue/{item['id']}/claim"
        won = self.client.post(claim_url, headers=self.buyer['headers'])
        self.assertEqual(won.status_code, 200)
        self.assertEqual(won.json()['claimed_by'], self.buyer['id'])

        lost = self.client.post(claim_url, headers=self.other_buyer['headers'])
        self.assertEqual(lost.status_code, 409)
        self.assertEqual(lost.json()['detail']['message'], 'Item not available')

        fetched = self.client.get(f"/api/v1/rescue/{item['id']}").json()
        self.assertEqual(fetched['claimed_by'], self.buyer['id'])

        listed = self.client.get('/api/v1/rescue/', params={'city': 'Pune'}).json()
        self.assertNotIn(item['id'], [i['id'] for i in listed['rescue_items']])

    def test_rescue_price_sanity(self):
        resp = self.create_rescue_item(rescue_price=80, original_price=60)
        self.assertEqual(resp.status_code, 422)

    def test_claim_unknown_item(self):
        resp = self.client.post('/api/v1/rescue/missing-id/claim', headers=self.buyer['headers'])
        self.assertEqual(resp.status_code, 404)

    def test_unknown_vendor_profile(self):
        self.assertEqual(self.client.get('/api/v1/vendors/missing-id').status_code, 404)


class TestTrustBadgeAPI(unittest.TestCase):
    """A vendor earns the badge by predicting, joining a group buy and posting a rescue item."""

    @classmethod
    def setUpClass(cls):
        cls.db = TempDatabase()
        asyncio.run(cls.db.create())
        app.dependency_overrides[get_db] = cls.db.get_db
        app.dependency_overrides[get_recommendation_provider] = offline_provider
        cls.client = TestClient(app)

    @classmethod
    def tearDownClass(cls):
        app.dependency_overrides.clear()
        asyncio.run(cls.db.dispose())

    def test_badge_and_reviews(self):
        reg = self.client.post('/api/v1/auth/register', json={
            'username': 'sunita', 'email': 'sunita@example.com', 'password': 'password123',
            'role': 'vendor', 'city': 'Mumbai',
        }).json()
        vendor_id = reg['user']['id']
        headers = {'Authorization': f"Bearer {reg['token']}"}

        self.assertIsNone(self.client.get('/api/v1/predictions/latest', headers=headers).json())

        prediction = self.client.post('/api/v1/predictions/', headers=headers)
        self.assertEqual(prediction.status_code, 200)
        body = prediction.json()
        self.assertEqual(body['source'], 'fallback')
        self.assertIn('Lemons', [p['ingredient'] for p in body['predictions']])

        latest = self.client.get('/api/v1/predictions/latest', headers=headers).json()
        self.assertEqual(latest['id'], body['id'])
        self.assertEqual(latest['weather']['condition'], 'sunny')
        self.assertEqual(latest['market_trends'], {
            'demand': 'medium', 'factors': ['Weather conditions', 'Local preferences'],
        })

        self.client.post('/api/v1/group-buys/', headers=headers, json={
            'ingredient': 'Rice', 'target_quantity': 50, 'price_per_kg': 40, 'original_price': 52,
            'city': 'Mumbai', 'deadline': (utcnow() + timedelta(days=1)).isoformat(),
        })
        profile = self.client.get(f'/api/v1/vendors/{vendor_id}').json()['profile']
        self.assertTrue(profile['used_ai_prediction'])
        self.assertTrue(profile['participated_group_buy'])
        self.assertFalse(profile['has_trust_badge'])

        self.client.post('/api/v1/rescue/', headers=headers, json={
            'title': 'Pav Bhaji', 'description': 'Lunch surplus', 'type': 'prepared',
            'quantity': '8 plates', 'original_price': 80, 'rescue_price': 50, 'city': 'Mumbai',
        })
        profile = self.client.get(f'/api/v1/vendors/{vendor_id}').json()['profile']
        self.assertTrue(profile['has_trust_badge'])

        updated = self.client.put('/api/v1/vendors/me', headers=headers, json={
            'business_name': "Sunita's Pav Bhaji", 'sourcing_method': 'Crawford Market',
        })
        self.assertEqual(updated.json()['business_name'], "Sunita's Pav Bhaji")
        self.assertTrue(updated.json()['has_trust_badge'])

        buyer = self.client.post('/api/v1/auth/register', json={
            'username': 'rahul', 'email': 'rahul@example.com', 'password': 'password123',
            'role': 'buyer', 'city': 'Mumbai',
        }).json()
        review = self.client.post('/api/v1/reviews/', headers={'Authorization': f"Bearer {buyer['token']}"},
                                  json={'vendor_id': vendor_id, 'rating': 5, 'comment': 'Great bhaji'})
        self.assertEqual(review.status_code, 200)

        detail = self.client.get('/api/v1/vendors/me', headers=headers).json()
        self.assertEqual(detail['user']['review_count'], 1)
        self.assertEqual(detail['user']['rating'], 5.0)
        self.assertEqual([r['comment'] for r in detail['reviews']], ['Great bhaji'])


if __name__ == "__main__":
    unittest.main()
