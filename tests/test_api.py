import sqlite3

import pytest
from starlette.testclient import TestClient

from stashtrade.tradeapi.api import QueryResponse, create_app
from stashtrade.tradeapi.metrics import ApiMetricStore
from stashtrade.tradeapi.store import Store

ROWS = [
    ("i1", "s1", "alice", 10, "Divine Orb", "Chaos Orb", 0.5, "2024-01-01 10:00:00"),
    ("i2", "s2", "bob", 2, "Mirror", "Divine Orb", 2.0, "2024-01-01 11:00:00"),
]


@pytest.fixture
def metrics():
    return ApiMetricStore()


@pytest.fixture
def client(metrics):
    conn = sqlite3.connect(":memory:", check_same_thread=False)
    conn.execute(
        "CREATE TABLE challenge (item_id TEXT, stash_id TEXT, seller_account TEXT,"
        " stock INTEGER, sell TEXT, buy TEXT, conversion_rate REAL, created_at TEXT)"
    )
    conn.executemany("INSERT INTO challenge VALUES (?, ?, ?, ?, ?, ?, ?, ?)", ROWS)
    conn.commit()
    store = Store(conn, placeholder="?")
    with TestClient(create_app(store, metrics)) as test_client:
        yield test_client
    conn.close()


def test_healthcheck(client):
    response = client.get("/healthcheck")
    assert response.status_code == 200
    assert response.text == "Ok"


def test_search_returns_offers(client, metrics):
    response = client.post("/trade", json={"league": "challenge", "seller_account": "alice"})
    assert response.status_code == 200
    assert response.json() == {
        "count": 1,
        "offers": [
            {
                "item_id": "i1",
                "stash_id": "s1",
                "sell": "Divine Orb",
                "buy": "Chaos Orb",
                "seller_account": "alice",
                "stock": 10,
                "conversion_rate": 0.5,
                "created_at": "2024-01-01T10:00:00",
            }
        ],
    }
    assert metrics.search_requests == 1


def test_count_matches_offers(client):
    body = client.post("/trade", json={"league": "challenge"}).json()
    assert body["count"] == len(body["offers"])
    assert [offer["item_id"] for offer in body["offers"]] == ["i2", "i1"]


def test_missing_league_is_not_found_but_counted(client, metrics):
    response = client.post("/trade", json={"sell": "Mirror"})
    assert response.status_code == 404
    assert metrics.search_requests == 1


def test_store_failure_is_not_found(client):
    response = client.post("/trade", json={"league": "unknownleague"})
    assert response.status_code == 404


def test_invalid_json_is_rejected_uncounted(client, metrics):
    response = client.post(
        "/trade", content=b"{not json", headers={"content-type": "application/json"}
    )
    assert response.status_code == 400
    assert metrics.search_requests == 0


@pytest.mark.parametrize(
    "body", [{"league": "challenge", "limit": "x"}, {"league": 5}, [1, 2], {"limit": -1}]
)
def test_wrong_field_types_are_unprocessable(client, body):
    assert client.post("/trade", json=body).status_code == 422


def test_missing_content_type_is_unsupported(client):
    response = client.post("/trade", content=b'{"league": "challenge"}')
    assert response.status_code == 415


def test_get_on_trade_is_not_allowed(client):
    assert client.get("/trade").status_code == 405


def test_query_response_of_no_offers():
    assert QueryResponse([]).to_json() == {"count": 0, "offers": []}