"""HTTP tests for minting, trading and burning tokens."""

from __future__ import annotations

from fastapi.testclient import TestClient
from sqlalchemy import select

from marketplace.core.database import session_scope
from marketplace.models.fund_transfer import FundTransfer

DEPOSIT = 10**9


def _headers(account_id: str, deposit: int = DEPOSIT) -> dict:
    return {"X-Account-Id": account_id, "X-Attached-Deposit": str(deposit)}


def _mint(client: TestClient, **overrides) -> dict:
    payload = {
        "metadata": {"title": "Sunset", "media": "ipfs://sunset.png"},
        "receiver_id": "alice.near",
        "count": 3,
        "price": 100,
        "royalty": {"artist.near": 1000},
    }
    payload.update(overrides)
    response = client.post("/api/v1/tokens/mint", json=payload, headers=_headers("alice.near"))
    response.raise_for_status()
    return response.json()


def test_healthz(client: TestClient) -> None:
    response = client.get("/healthz")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_mint_batch_and_views(client: TestClient) -> None:
    minted = _mint(client)
    assert minted["token_ids"] == [0, 1, 2]
    assert minted["last_id"] == 2

    owner_resp = client.get("/api/v1/tokens/owners/alice.near")
    owner_resp.raise_for_status()
    assert owner_resp.json() == {"owner_id": "alice.near", "token_ids": [0, 1, 2]}

    token_resp = client.get("/api/v1/tokens/1")
    token_resp.raise_for_status()
    token = token_resp.json()
    assert token["owner_id"] == "alice.near"
    assert token["price"] == 100
    assert token["royalty"] == {"artist.near": 1000}
    assert token["metadata"]["title"] == "Sunset"

    supply_resp = client.get("/api/v1/tokens/supply")
    supply_resp.raise_for_status()
    assert supply_resp.json() == {"total_supply": 3, "tokens_minted": 3}


def test_mint_unique_returns_metadata(client: TestClient) -> None:
    response = client.post(
        "/api/v1/tokens/mint-unique",
        json={
            "metadata": [{"title": "One"}, {"title": "Two", "rarity": "legendary"}],
            "receiver_id": "alice.near",
            "count": 2,
            "prices": [10, None],
        },
        headers=_headers("alice.near"),
    )
    assert response.status_code == 201
    body = response.json()
    assert body["token_ids"] == [0, 1]
    assert body["metadata"][1] == {"title": "Two", "rarity": "legendary"}


def test_royalty_cap_rejected_without_side_effects(client: TestClient) -> None:
    response = client.post(
        "/api/v1/tokens/mint",
        json={
            "metadata": {"title": "Too greedy"},
            "receiver_id": "alice.near",
            "count": 1,
            "royalty": {"artist.near": 6000},
        },
        headers=_headers("alice.near"),
    )
    assert response.status_code == 400
    assert response.json()["error"] == "validation_error"

    supply = client.get("/api/v1/tokens/supply").json()
    assert supply == {"total_supply": 0, "tokens_minted": 0}


def test_buy_records_transfers(client: TestClient) -> None:
    _mint(client)
    fee_resp = client.put("/api/v1/fees/transaction", json={"fee_bps": 250}, headers=_headers("market.near", 1))
    fee_resp.raise_for_status()

    response = client.post(
        "/api/v1/tokens/0/buy",
        json={"memo": "gift", "art_id": "art-42"},
        headers=_headers("bob.near", 100),
    )
    response.raise_for_status()
    assert response.json() == {"token_id": 0, "new_owner": "bob.near", "art_id": "art-42"}

    with session_scope() as session:
        rows = session.scalars(select(FundTransfer).where(FundTransfer.operation == "buy")).all()
        payouts = {(row.receiver_id, row.kind): row.amount for row in rows}
    assert payouts == {
        ("market.near", "commission"): 2,
        ("artist.near", "royalty"): 10,
        ("alice.near", "seller"): 88,
    }

    assert client.get("/api/v1/tokens/owners/alice.near").json()["token_ids"] == [1, 2]
    assert client.get("/api/v1/tokens/owners/bob.near").json()["token_ids"] == [0]


def test_buy_error_codes(client: TestClient) -> None:
    _mint(client, price=None, count=1)

    own = client.post("/api/v1/tokens/0/buy", headers=_headers("alice.near", 100))
    assert own.status_code == 409
    assert own.json()["error"] == "invalid_state"

    unlisted = client.post("/api/v1/tokens/0/buy", headers=_headers("bob.near", 100))
    assert unlisted.status_code == 409

    missing = client.post("/api/v1/tokens/9/buy", headers=_headers("bob.near", 100))
    assert missing.status_code == 404
    assert missing.json()["error"] == "not_found"

    client.put("/api/v1/tokens/0/price", json={"price": 100}, headers=_headers("alice.near", 1)).raise_for_status()
    underpaid = client.post("/api/v1/tokens/0/buy", headers=_headers("bob.near", 50))
    assert underpaid.status_code == 402
    assert underpaid.json()["error"] == "insufficient_funds"


def test_burn_lifecycle(client: TestClient) -> None:
    _mint(client, count=1)

    stranger = client.post("/api/v1/tokens/0/burn", headers=_headers("bob.near", 1))
    assert stranger.status_code == 403
    assert client.get("/api/v1/tokens/0").status_code == 200

    burned = client.post("/api/v1/tokens/0/burn", json={"art_id": "art-1"}, headers=_headers("alice.near", 1))
    burned.raise_for_status()
    assert burned.json() == {"token_id": 0, "art_id": "art-1", "status": "burned"}

    again = client.post("/api/v1/tokens/0/burn", headers=_headers("alice.near", 1))
    assert again.status_code == 404
    assert client.get("/api/v1/tokens/owners/alice.near").json()["token_ids"] == []


def test_update_price(client: TestClient) -> None:
    _mint(client, count=1)

    response = client.put("/api/v1/tokens/0/price", json={"price": 250, "art_id": "a"}, headers=_headers("alice.near", 1))
    response.raise_for_status()
    assert response.json() == {"token_id": 0, "new_price": 250, "art_id": "a"}
    assert client.get("/api/v1/tokens/0").json()["price"] == 250


def test_missing_caller_header_is_rejected(client: TestClient) -> None:
    response = client.post("/api/v1/tokens/0/burn")
    assert response.status_code == 422


def test_mint_emits_events(client: TestClient, event_dispatcher_stub) -> None:
    _mint(client, count=2)
    envelopes = event_dispatcher_stub.stub_publisher.envelopes
    assert [envelope.event_type for envelope in envelopes] == ["nft_mint", "nft_mint"]
    assert envelopes[0].payload["data"][0] == {"owner_id": "alice.near", "token_ids": ["0"]}


def test_readyz_reports_ledger_state(client: TestClient) -> None:
    _mint(client, count=2)
    response = client.get("/readyz")
    assert response.status_code == 200
    assert response.json() == {"status": "ready", "tokens_minted": 2}
