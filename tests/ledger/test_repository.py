from __future__ import annotations

import threading

import pytest

from marketplace.ledger import InMemoryTokenRepository
from marketplace.ledger.types import TokenRecord


def test_readers_wait_for_open_transaction() -> None:
    repository = InMemoryTokenRepository(owner_id="market.near")
    seen = []
    reader = threading.Thread(
        target=lambda: seen.append((repository.tokens_for_owner("alice.near"), repository.get_token(0)))
    )

    with pytest.raises(RuntimeError):
        with repository.transaction():
            repository.put_token(TokenRecord(token_id=0, owner_id="alice.near"))
            repository.add_owner_token("alice.near", 0)
            reader.start()
            reader.join(timeout=0.2)
            assert reader.is_alive()
            raise RuntimeError("abort")

    reader.join(timeout=5)
    assert not reader.is_alive()
    assert seen == [([], None)]


def test_rollback_restores_state() -> None:
    repository = InMemoryTokenRepository(owner_id="market.near")
    with pytest.raises(RuntimeError):
        with repository.transaction():
            state = repository.load_state()
            state.tokens_minted = 5
            repository.save_state(state)
            raise RuntimeError("abort")

    assert repository.load_state().tokens_minted == 0
    assert repository.count_tokens() == 0
