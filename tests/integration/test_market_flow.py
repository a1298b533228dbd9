# tests/integration/test_market_flow.py
"""HTTP flow over the full app: create -> bet -> resolve/cancel -> claim, plus reads."""

from datetime import UTC, datetime, timedelta

import pytest

pytestmark = pytest.mark.asyncio

API = "/api/v1"


def _end_time(**delta) -> str:
    return (datetime.now(UTC) + timedelta(**(delta or {"hours": 1}))).isoformat()


async def _create_market(client, headers, **overrides) -> int:
    body = {
        "question": "Will the home team win on Sunday?",
        "category": {
            "kind": "Sports", "event_id": "evt-9", "sport_type": "football",
            "home_team": "Home", "away_team": "Away",
        },
        "end_time": _end_time(),
    }
    body.update(overrides)
    resp = await client.post(f"{API}/markets", json=body, headers=headers)
    assert resp.status_code == 201, resp.text
    return resp.json()["data"]["market_id"]


class TestAuth:
    async def test_create_requires_token(self, client):
        resp = await client.post(f"{API}/markets", json={})
        assert resp.status_code == 401

    async def test_garbage_token(self, client):
        resp = await client.post(
            f"{API}/markets/1/claim", headers={"Authorization": "Bearer nope"}
        )
        assert resp.status_code == 401

    async def test_positions_require_token(self, client):
        resp = await client.get(f"{API}/positions")
        assert resp.status_code == 401


class TestCreate:
    async def test_create_and_get(self, client, oracle_headers):
        mid = await _create_market(client, oracle_headers)
        assert mid == 1

        resp = await client.get(f"{API}/markets/{mid}")
        assert resp.status_code == 200
        data = resp.json()["data"]
        assert data["status"] == "Active"
        assert data["creator"] == "oracle"
        assert data["oracle_address"] == "oracle"
        assert data["category"]["kind"] == "Sports"
        assert (data["yes_odds"], data["no_odds"]) == (0.5, 0.5)

    async def test_short_question(self, client, oracle_headers):
        resp = await client.post(f"{API}/markets", headers=oracle_headers, json={
            "question": "Too short", "category": {"kind": "Binary"}, "end_time": _end_time(),
        })
        assert resp.status_code == 400
        assert resp.json()["code"] == 9001

    async def test_end_time_in_past(self, client, oracle_headers):
        resp = await client.post(f"{API}/markets", headers=oracle_headers, json={
            "question": "Did this already happen?", "category": {"kind": "Binary"},
            "end_time": _end_time(hours=-1),
        })
        assert resp.status_code == 422
        assert resp.json()["code"] == 3004

    async def test_malformed_body_uses_envelope(self, client, oracle_headers):
        resp = await client.post(f"{API}/markets", headers=oracle_headers, json={
            "question": "Will it rain tomorrow?", "category": {"kind": "Weather"},
            "end_time": _end_time(),
        })
        assert resp.status_code == 400
        body = resp.json()
        assert body["code"] == 9001
        assert body["data"] is None


class TestFullScenario:
    async def test_winner_takes_pool(self, client, oracle_headers, alice_headers, bob_headers):
        mid = await _create_market(client, oracle_headers)

        resp = await client.post(f"{API}/markets/{mid}/bets", headers=alice_headers,
                                 json={"outcome": "Yes", "amount": 100})
        assert resp.status_code == 201
        assert resp.json()["data"]["shares"] == 100_000

        resp = await client.post(f"{API}/markets/{mid}/bets", headers=bob_headers,
                                 json={"outcome": "No", "amount": 300})
        assert resp.json()["data"]["shares"] == 300_000

        odds = (await client.get(f"{API}/markets/{mid}/odds")).json()["data"]
        assert (odds["yes_odds"], odds["no_odds"]) == (0.25, 0.75)

        resp = await client.get(f"{API}/positions/{mid}/potential-payout",
                                headers=alice_headers, params={"outcome": "Yes"})
        assert resp.json()["data"]["potential_payout"] == 400

        resp = await client.post(f"{API}/markets/{mid}/resolve", headers=alice_headers,
                                 json={"outcome": "No"})
        assert resp.status_code == 403
        assert resp.json()["code"] == 1001

        resp = await client.post(f"{API}/markets/{mid}/resolve", headers=oracle_headers,
                                 json={"outcome": "Yes"})
        assert resp.status_code == 200
        assert resp.json()["data"]["winning_outcome"] == "Yes"

        resp = await client.post(f"{API}/markets/{mid}/bets", headers=bob_headers,
                                 json={"outcome": "Yes", "amount": 10})
        assert resp.json()["code"] == 3002

        resp = await client.post(f"{API}/markets/{mid}/claim", headers=alice_headers)
        assert resp.json()["data"] == {"market_id": mid, "payout": 400}

        resp = await client.post(f"{API}/markets/{mid}/claim", headers=alice_headers)
        assert resp.status_code == 409
        assert resp.json()["code"] == 5002

        resp = await client.post(f"{API}/markets/{mid}/claim", headers=bob_headers)
        assert resp.json()["data"]["payout"] == 0

        positions = (await client.get(f"{API}/positions", headers=alice_headers)).json()["data"]
        assert positions["total"] == 1
        assert positions["items"][0]["claimed"] is True

    async def test_cancel_and_refund(self, client, alice_headers, bob_headers, oracle_headers):
        mid = await _create_market(client, alice_headers, oracle="oracle")
        await client.post(f"{API}/markets/{mid}/bets", headers=bob_headers,
                          json={"outcome": "No", "amount": 42})

        resp = await client.post(f"{API}/markets/{mid}/cancel", headers=bob_headers)
        assert resp.json()["code"] == 1001

        resp = await client.post(f"{API}/markets/{mid}/cancel", headers=alice_headers)
        assert resp.json()["data"]["status"] == "Cancelled"

        resp = await client.post(f"{API}/markets/{mid}/claim", headers=bob_headers)
        assert resp.json()["data"]["payout"] == 42

    async def test_bet_too_small(self, client, oracle_headers, alice_headers):
        mid = await _create_market(client, oracle_headers)
        resp = await client.post(f"{API}/markets/{mid}/bets", headers=alice_headers,
                                 json={"outcome": "Yes", "amount": 0})
        assert resp.status_code == 422
        assert resp.json()["code"] == 4001


class TestReads:
    async def test_unknown_market(self, client):
        resp = await client.get(f"{API}/markets/404")
        assert resp.status_code == 404
        assert resp.json()["code"] == 3001

    @pytest.mark.parametrize("market_id", ["0", "-1", str(2**63), str(2**64 + 5)])
    async def test_market_id_out_of_range(self, client, alice_headers, market_id):
        calls = [
            ("GET", f"/markets/{market_id}", {}),
            ("GET", f"/markets/{market_id}/odds", {}),
            ("GET", f"/positions/{market_id}", {"headers": alice_headers}),
            ("POST", f"/markets/{market_id}/bets",
             {"headers": alice_headers, "json": {"outcome": "Yes", "amount": 1}}),
            ("POST", f"/markets/{market_id}/claim", {"headers": alice_headers}),
        ]
        for method, path, kwargs in calls:
            resp = await client.request(method, f"{API}{path}", **kwargs)
            assert resp.status_code == 400, path
            assert resp.json()["code"] == 9001

    async def test_largest_market_id_is_not_found(self, client):
        resp = await client.get(f"{API}/markets/{2**63 - 1}")
        assert resp.status_code == 404
        assert resp.json()["code"] == 3001

    async def test_position_of_other_user(self, client, oracle_headers, alice_headers, bob_headers):
        mid = await _create_market(client, oracle_headers)
        await client.post(f"{API}/markets/{mid}/bets", headers=alice_headers,
                          json={"outcome": "Yes", "amount": 7})

        resp = await client.get(f"{API}/positions/{mid}", headers=bob_headers,
                                params={"user": "alice"})
        assert resp.json()["data"]["yes_amount"] == 7

        resp = await client.get(f"{API}/positions/{mid}", headers=bob_headers)
        assert resp.status_code == 404
        assert resp.json()["code"] == 5001

    async def test_list_filter_sort_and_page(self, client, oracle_headers, alice_headers):
        first = await _create_market(client, oracle_headers, end_time=_end_time(hours=3))
        second = await _create_market(client, oracle_headers, end_time=_end_time(hours=2))
        third = await _create_market(
            client, oracle_headers, question="Will BTC close above 100k?",
            category={"kind": "Crypto", "symbol": "BTC", "threshold": 100000.0},
            end_time=_end_time(hours=1),
        )
        await client.post(f"{API}/markets/{first}/bets", headers=alice_headers,
                          json={"outcome": "No", "amount": 50})
        await client.post(f"{API}/markets/{second}/cancel", headers=oracle_headers)

        data = (await client.get(f"{API}/markets")).json()["data"]
        assert [m["id"] for m in data["items"]] == [third, second, first]
        assert data["total"] == 3

        data = (await client.get(f"{API}/markets", params={"status": "Active"})).json()["data"]
        assert {m["id"] for m in data["items"]} == {first, third}

        data = (await client.get(f"{API}/markets", params={"category": "Crypto"})).json()["data"]
        assert [m["id"] for m in data["items"]] == [third]

        data = (await client.get(f"{API}/markets", params={"sort": "popular"})).json()["data"]
        assert data["items"][0]["id"] == first

        data = (await client.get(f"{API}/markets", params={"limit": 1, "offset": 1})).json()["data"]
        assert [m["id"] for m in data["items"]] == [second]
        assert (data["total"], data["limit"], data["offset"]) == (3, 1, 1)

    async def test_quote(self, client, oracle_headers):
        mid = await _create_market(client, oracle_headers)
        resp = await client.get(f"{API}/markets/{mid}/quote",
                                params={"outcome": "Yes", "amount": 100})
        data = resp.json()["data"]
        assert (data["shares"], data["potential_payout"]) == (100_000, 100)

    async def test_request_id_echoed(self, client):
        resp = await client.get(f"{API}/markets", headers={"X-Request-ID": "req_fixed"})
        assert resp.headers["X-Request-ID"] == "req_fixed"
        assert resp.json()["request_id"] == "req_fixed"

    async def test_health(self, client):
        resp = await client.get("/health")
        assert resp.status_code == 200
        assert resp.json()["status"] == "ok"
