# tests/integration/test_market_flow.py
"""End-to-end market lifecycle over HTTP against the in-memory store.

create (liquidity 1000) -> bob buys 100 YES for 125 -> resolve YES ->
bob claims 100 * 1025 / 600 = 170.
"""

from datetime import UTC, datetime, timedelta

import pytest

pytestmark = pytest.mark.asyncio


def _market_body(**overrides) -> dict:
    body = {
        "question": "Will it rain tomorrow?",
        "categories": ["weather"],
        "end_time": (datetime.now(UTC) + timedelta(days=30)).isoformat(),
        "initial_liquidity": "1000",
    }
    body.update(overrides)
    return body


async def _create_market(client, headers, **overrides) -> int:
    resp = await client.post("/api/v1/markets", json=_market_body(**overrides), headers=headers)
    assert resp.status_code == 201, resp.text
    return resp.json()["data"]["market_id"]


class TestUnauthenticated:
    async def test_missing_token(self, client):
        resp = await client.get("/api/v1/markets")
        assert resp.status_code == 401
        body = resp.json()
        assert body["code"] == 1001
        assert body["data"] is None

    async def test_invalid_token(self, client):
        resp = await client.post(
            "/api/v1/markets",
            json=_market_body(),
            headers={"Authorization": "Bearer not-a-token"},
        )
        assert resp.status_code == 401


class TestLifecycle:
    async def test_full_flow(self, client, auth_headers):
        alice = auth_headers("alice")
        bob = auth_headers("bob")
        market_id = await _create_market(client, alice)
        assert market_id == 0

        buy = await client.post(
            f"/api/v1/markets/{market_id}/buy",
            json={"is_yes": True, "shares": "100", "max_cost": "200"},
            headers=bob,
        )
        assert buy.status_code == 200, buy.text
        assert buy.json()["data"] == {"kind": "shares_purchased", "cost": "125"}

        detail = (await client.get(f"/api/v1/markets/{market_id}", headers=bob)).json()["data"]
        assert detail["yes_pool"] == "400"
        assert detail["no_pool"] == "625"
        assert detail["total_yes_shares"] == "600"
        assert detail["volume"] == "125"

        position = await client.get(f"/api/v1/positions/{market_id}", headers=bob)
        assert position.json()["data"]["yes_shares"] == "100"

        resolve = await client.post(
            f"/api/v1/markets/{market_id}/resolve", json={"outcome": True}, headers=alice
        )
        assert resolve.json()["data"]["combos_updated"] == 0

        claim = await client.post(f"/api/v1/markets/{market_id}/claim", headers=bob)
        assert claim.status_code == 200
        assert claim.json()["data"]["payout"] == "170"

        again = await client.post(f"/api/v1/markets/{market_id}/claim", headers=bob)
        assert again.status_code == 409
        assert again.json()["code"] == 5003

        stats = (await client.get("/api/v1/stats", headers=bob)).json()["data"]
        assert stats["total_volume"] == "125"
        assert stats["market_count"] == 1

    async def test_sell_back(self, client, auth_headers):
        bob = auth_headers("bob")
        market_id = await _create_market(client, auth_headers("alice"))
        await client.post(
            f"/api/v1/markets/{market_id}/buy",
            json={"is_yes": True, "shares": "100", "max_cost": "200"},
            headers=bob,
        )
        sell = await client.post(
            f"/api/v1/markets/{market_id}/sell",
            json={"is_yes": True, "shares": "100"},
            headers=bob,
        )
        assert sell.status_code == 200
        assert 0 < int(sell.json()["data"]["proceeds"]) <= 125

        positions = (await client.get("/api/v1/positions", headers=bob)).json()["data"]
        assert positions["items"][0]["yes_shares"] == "0"


class TestRejections:
    async def test_cost_exceeds_limit(self, client, auth_headers):
        bob = auth_headers("bob")
        market_id = await _create_market(client, auth_headers("alice"))
        resp = await client.post(
            f"/api/v1/markets/{market_id}/buy",
            json={"is_yes": True, "shares": "100", "max_cost": "124"},
            headers=bob,
        )
        assert resp.status_code == 422
        assert resp.json()["code"] == 3102

        detail = (await client.get(f"/api/v1/markets/{market_id}", headers=bob)).json()["data"]
        assert detail["yes_pool"] == "500"

    async def test_only_creator_resolves(self, client, auth_headers):
        market_id = await _create_market(client, auth_headers("alice"))
        resp = await client.post(
            f"/api/v1/markets/{market_id}/resolve",
            json={"outcome": False},
            headers=auth_headers("mallory"),
        )
        assert resp.status_code == 403
        assert resp.json()["code"] == 1002

    async def test_unknown_market(self, client, auth_headers):
        resp = await client.get("/api/v1/markets/99", headers=auth_headers("bob"))
        assert resp.status_code == 404
        assert resp.json()["code"] == 3001

    async def test_sell_without_shares(self, client, auth_headers):
        market_id = await _create_market(client, auth_headers("alice"))
        resp = await client.post(
            f"/api/v1/markets/{market_id}/sell",
            json={"is_yes": False, "shares": "1"},
            headers=auth_headers("bob"),
        )
        assert resp.status_code == 422
        assert resp.json()["code"] == 5002


class TestListing:
    async def test_status_and_category(self, client, auth_headers):
        alice = auth_headers("alice")
        rain = await _create_market(client, alice)
        cup = await _create_market(client, alice, question="Cup final?", categories=["sports"])
        await client.post(f"/api/v1/markets/{rain}/resolve", json={"outcome": True}, headers=alice)

        active = (await client.get("/api/v1/markets", headers=alice)).json()["data"]
        assert [m["id"] for m in active["items"]] == [cup]

        resolved = await client.get("/api/v1/markets?status=resolved", headers=alice)
        assert [m["id"] for m in resolved.json()["data"]["items"]] == [rain]

        sports = await client.get("/api/v1/markets?status=all&category=sports", headers=alice)
        assert sports.json()["data"]["total"] == 1


async def test_health(client):
    resp = await client.get("/health")
    assert resp.status_code == 200
    assert resp.json()["backend"] == "memory"


async def test_request_id_echoed(client, auth_headers):
    resp = await client.get("/api/v1/markets", headers=auth_headers("alice"))
    assert resp.headers["X-Request-ID"] == resp.json()["request_id"]


async def test_request_id_on_error(client):
    resp = await client.get("/api/v1/markets")
    assert resp.headers["X-Request-ID"] == resp.json()["request_id"]
