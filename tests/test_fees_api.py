from __future__ import annotations

from fastapi.testclient import TestClient


def _headers(account_id: str, deposit: int = 0) -> dict:
    return {"X-Account-Id": account_id, "X-Attached-Deposit": str(deposit)}


def test_transaction_fee_roundtrip(client: TestClient) -> None:
    initial = client.get("/api/v1/fees/transaction", headers=_headers("market.near"))
    initial.raise_for_status()
    assert initial.json() == {"fee_bps": 0}

    update = client.put("/api/v1/fees/transaction", json={"fee_bps": 500}, headers=_headers("market.near", 1))
    update.raise_for_status()
    assert update.json() == {"fee_bps": 500}

    assert client.get("/api/v1/fees/transaction", headers=_headers("market.near")).json() == {"fee_bps": 500}


def test_transaction_fee_guards(client: TestClient) -> None:
    stranger = client.put("/api/v1/fees/transaction", json={"fee_bps": 100}, headers=_headers("alice.near", 1))
    assert stranger.status_code == 403
    assert stranger.json()["error"] == "unauthorized"

    no_intent = client.put("/api/v1/fees/transaction", json={"fee_bps": 100}, headers=_headers("market.near"))
    assert no_intent.status_code == 402

    too_high = client.put("/api/v1/fees/transaction", json={"fee_bps": 10_000}, headers=_headers("market.near", 1))
    assert too_high.status_code == 400

    read_by_stranger = client.get("/api/v1/fees/transaction", headers=_headers("alice.near"))
    assert read_by_stranger.status_code == 403

    assert client.get("/api/v1/fees/transaction", headers=_headers("market.near")).json() == {"fee_bps": 0}
