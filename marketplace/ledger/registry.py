"""Token registry: token and metadata records plus the owner index."""

from __future__ import annotations

import json
import logging
from typing import Any, List

from marketplace.ledger.errors import TokenNotFoundError
from marketplace.ledger.repository import TokenRepository
from marketplace.ledger.types import LedgerState, Metadata, TokenId, TokenRecord

# Bytes charged for a u64 storage key.
TOKEN_KEY_BYTES = 8

logger = logging.getLogger("marketplace.ledger.registry")


def _encoded_size(payload: Any) -> int:
    return len(json.dumps(payload, sort_keys=True, separators=(",", ":"), default=str).encode("utf-8"))


def token_storage_bytes(record: TokenRecord) -> int:
    return TOKEN_KEY_BYTES + _encoded_size(record.to_storage())


def metadata_storage_bytes(metadata: Metadata) -> int:
    return TOKEN_KEY_BYTES + _encoded_size(metadata)


def owner_entry_storage_bytes(owner_id: str) -> int:
    return TOKEN_KEY_BYTES + len(owner_id.encode("utf-8"))


class TokenRegistry:
    """
    Keeps token records, metadata and the owner index consistent.

    Every write goes through this class so that ``state.storage_usage`` tracks
    the bytes of persistent token state, which the deposit governor uses to
    price a call.
    """

    def __init__(self, repository: TokenRepository, state: LedgerState) -> None:
        self._repository = repository
        self._state = state

    def get(self, token_id: TokenId) -> TokenRecord:
        record = self._repository.get_token(token_id)
        if record is None:
            raise TokenNotFoundError(f"Token {token_id} does not exist")
        return record

    def metadata(self, token_id: TokenId) -> Metadata:
        metadata = self._repository.get_metadata(token_id)
        if metadata is None:
            raise TokenNotFoundError(f"Metadata for token {token_id} does not exist")
        return metadata

    def tokens_for_owner(self, owner_id: str) -> List[TokenId]:
        return self._repository.tokens_for_owner(owner_id)

    def insert(self, record: TokenRecord, metadata: Metadata) -> None:
        """Store a freshly minted token, its metadata and its index entry."""

        self._repository.put_token(record)
        self._repository.put_metadata(record.token_id, metadata)
        self._repository.add_owner_token(record.owner_id, record.token_id)
        self._state.storage_usage += (
            token_storage_bytes(record)
            + metadata_storage_bytes(metadata)
            + owner_entry_storage_bytes(record.owner_id)
        )

    def replace(self, previous: TokenRecord, record: TokenRecord) -> None:
        """Overwrite a token record, moving its index entry if the owner changed."""

        self._repository.put_token(record)
        self._state.storage_usage += token_storage_bytes(record) - token_storage_bytes(previous)

        if previous.owner_id != record.owner_id:
            self._repository.remove_owner_token(previous.owner_id, record.token_id)
            self._repository.add_owner_token(record.owner_id, record.token_id)
            self._state.storage_usage += owner_entry_storage_bytes(record.owner_id) - owner_entry_storage_bytes(
                previous.owner_id
            )
            logger.debug(
                "registry_owner_moved",
                extra={"token_id": record.token_id, "old_owner_id": previous.owner_id, "new_owner_id": record.owner_id},
            )

    def delete(self, record: TokenRecord) -> None:
        """Remove a token, its metadata and its index entry."""

        metadata = self._repository.get_metadata(record.token_id)
        self._repository.remove_owner_token(record.owner_id, record.token_id)
        self._repository.remove_metadata(record.token_id)
        self._repository.remove_token(record.token_id)

        released = token_storage_bytes(record) + owner_entry_storage_bytes(record.owner_id)
        if metadata is not None:
            released += metadata_storage_bytes(metadata)
        self._state.storage_usage = max(self._state.storage_usage - released, 0)
