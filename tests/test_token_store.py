"""Ledger operations persisted through the SQLAlchemy repository."""

from __future__ import annotations

import pytest
from sqlalchemy import func, select

from marketplace.core.database import session_scope
from marketplace.ledger import CallContext, InsufficientFundsError, Ledger, UnauthorizedError
from marketplace.models.token import OwnerToken, Token, TokenMetadataRecord
from marketplace.services.token_store import SqlAlchemyTokenRepository

DEPOSIT = 10**9


def _ledger(session) -> Ledger:
    return Ledger(SqlAlchemyTokenRepository(session, owner_id="market.near"), storage_byte_cost=1)


def test_state_persists_between_sessions() -> None:
    with session_scope() as session:
        _ledger(session).mint_batch(
            CallContext("alice.near", DEPOSIT),
            metadata={"title": "Persisted"},
            receiver_id="alice.near",
            count=2,
            price=2**100,
        )

    with session_scope() as session:
        ledger = _ledger(session)
        record, metadata = ledger.get_token(1)
        assert record.price == 2**100
        assert metadata == {"title": "Persisted"}
        assert ledger.supply() == (2, 2)
        ledger.buy(CallContext("bob.near", 2**100), 1)

    with session_scope() as session:
        ledger = _ledger(session)
        assert ledger.tokens_for_owner("alice.near") == [0]
        assert ledger.tokens_for_owner("bob.near") == [1]


def test_failed_mint_leaves_no_rows() -> None:
    with session_scope() as session:
        with pytest.raises(InsufficientFundsError):
            _ledger(session).mint_batch(
                CallContext("alice.near", 1),
                metadata={"title": "Unpaid"},
                receiver_id="alice.near",
                count=3,
            )

    with session_scope() as session:
        for model in (Token, TokenMetadataRecord, OwnerToken):
            assert session.scalar(select(func.count()).select_from(model)) == 0
        assert _ledger(session).supply() == (0, 0)


def test_failed_burn_keeps_token() -> None:
    with session_scope() as session:
        _ledger(session).mint_batch(
            CallContext("alice.near", DEPOSIT), metadata={"title": "Kept"}, receiver_id="alice.near", count=1
        )

    with session_scope() as session:
        with pytest.raises(UnauthorizedError):
            _ledger(session).burn(CallContext("bob.near", 1), 0)

    with session_scope() as session:
        ledger = _ledger(session)
        assert ledger.get_token(0)[0].owner_id == "alice.near"
        assert ledger.tokens_for_owner("alice.near") == [0]


def test_burn_deletes_rows() -> None:
    with session_scope() as session:
        ledger = _ledger(session)
        ledger.mint_batch(CallContext("alice.near", DEPOSIT), metadata={"title": "Gone"}, receiver_id="alice.near", count=1)
        ledger.burn(CallContext("alice.near", 1), 0)

    with session_scope() as session:
        assert session.get(Token, 0) is None
        assert session.get(TokenMetadataRecord, 0) is None
        assert session.scalar(select(func.count()).select_from(OwnerToken)) == 0
        assert _ledger(session).state().storage_usage == 0
