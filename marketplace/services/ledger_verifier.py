"""Utilities for verifying the persisted ledger is internally consistent."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass

from sqlalchemy import select
from sqlalchemy.orm import Session

from marketplace.ledger.registry import metadata_storage_bytes, owner_entry_storage_bytes, token_storage_bytes
from marketplace.models.ledger_state import LEDGER_STATE_ID, LedgerStateRecord
from marketplace.models.token import OwnerToken, Token, TokenMetadataRecord
from marketplace.services.token_store import SqlAlchemyTokenRepository


class LedgerVerificationError(RuntimeError):
    """Raised when ledger verification fails."""


@dataclass
class VerificationResult:
    """Result metadata returned after verification."""

    checked: int
    tokens_minted: int
    storage_usage: int


class LedgerVerifier:
    """Cross-checks tokens, metadata, the owner index and the ledger counters."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def verify(self) -> VerificationResult:
        state = self._session.get(LedgerStateRecord, LEDGER_STATE_ID)
        if state is None:
            raise LedgerVerificationError("Ledger state row is missing")

        repository = SqlAlchemyTokenRepository(self._session, owner_id=state.owner_id)
        token_ids = list(self._session.scalars(select(Token.token_id).order_by(Token.token_id)))
        metadata_ids = set(self._session.scalars(select(TokenMetadataRecord.token_id)))
        index_rows = list(self._session.execute(select(OwnerToken.owner_id, OwnerToken.token_id)))
        index_counts = Counter(token_id for _owner_id, token_id in index_rows)
        index_owner = {token_id: owner_id for owner_id, token_id in index_rows}

        expected_usage = 0
        for token_id in token_ids:
            if token_id >= state.tokens_minted:
                raise LedgerVerificationError(
                    f"Token {token_id} is beyond the minted counter {state.tokens_minted}"
                )
            if token_id not in metadata_ids:
                raise LedgerVerificationError(f"Token {token_id} has no metadata")
            if index_counts[token_id] != 1:
                raise LedgerVerificationError(
                    f"Token {token_id} has {index_counts[token_id]} owner index entries, expected 1"
                )

            record = repository.get_token(token_id)
            if index_owner[token_id] != record.owner_id:
                raise LedgerVerificationError(
                    f"Token {token_id} is indexed under {index_owner[token_id]} but owned by {record.owner_id}"
                )
            expected_usage += (
                token_storage_bytes(record)
                + metadata_storage_bytes(repository.get_metadata(token_id))
                + owner_entry_storage_bytes(record.owner_id)
            )

        live = set(token_ids)
        orphan_metadata = sorted(metadata_ids - live)
        if orphan_metadata:
            raise LedgerVerificationError(f"Metadata without a token: {orphan_metadata}")
        orphan_index = sorted(set(index_counts) - live)
        if orphan_index:
            raise LedgerVerificationError(f"Owner index entries without a token: {orphan_index}")

        if expected_usage != state.storage_usage:
            raise LedgerVerificationError(
                f"Storage meter mismatch: recorded {state.storage_usage}, recomputed {expected_usage}"
            )

        return VerificationResult(
            checked=len(token_ids),
            tokens_minted=state.tokens_minted,
            storage_usage=state.storage_usage,
        )
