"""Storage contract for the token registry and its in-memory implementation."""

from __future__ import annotations

import copy
from contextlib import contextmanager
from dataclasses import dataclass
from threading import RLock
from typing import Dict, Iterator, List, Optional, Protocol, Set

from marketplace.ledger.types import LedgerState, Metadata, TokenId, TokenRecord


class TokenRepository(Protocol):
    """Persistent key-value maps backing the ledger.

    Three maps are kept: token-by-id, metadata-by-id and owner -> token ids,
    plus the single ledger-state record. Implementations must make
    ``transaction()`` all-or-nothing: if the body raises, every write made
    inside it is discarded.
    """

    def get_token(self, token_id: TokenId) -> Optional[TokenRecord]:
        ...

    def put_token(self, record: TokenRecord) -> None:
        ...

    def remove_token(self, token_id: TokenId) -> None:
        ...

    def get_metadata(self, token_id: TokenId) -> Optional[Metadata]:
        ...

    def put_metadata(self, token_id: TokenId, metadata: Metadata) -> None:
        ...

    def remove_metadata(self, token_id: TokenId) -> None:
        ...

    def tokens_for_owner(self, owner_id: str) -> List[TokenId]:
        ...

    def add_owner_token(self, owner_id: str, token_id: TokenId) -> None:
        ...

    def remove_owner_token(self, owner_id: str, token_id: TokenId) -> None:
        ...

    def count_tokens(self) -> int:
        ...

    def load_state(self) -> LedgerState:
        ...

    def save_state(self, state: LedgerState) -> None:
        ...

    def transaction(self):  # pragma: no cover - protocol signature
        ...


@dataclass
class InMemoryTokenRepository(TokenRepository):
    """Thread-safe in-memory repository with snapshot rollback.

    Readers take the transaction lock, so other threads never observe writes
    of a transaction that may still be rolled back.
    """

    owner_id: str
    transaction_fee_bps: int = 0

    def __post_init__(self) -> None:
        self._tokens: Dict[TokenId, TokenRecord] = {}
        self._metadata: Dict[TokenId, Metadata] = {}
        self._owners: Dict[str, Set[TokenId]] = {}
        self._state = LedgerState(owner_id=self.owner_id, transaction_fee_bps=self.transaction_fee_bps)
        self._lock = RLock()

    def get_token(self, token_id: TokenId) -> Optional[TokenRecord]:
        with self._lock:
            record = self._tokens.get(token_id)
            return copy.deepcopy(record) if record is not None else None

    def put_token(self, record: TokenRecord) -> None:
        self._tokens[record.token_id] = copy.deepcopy(record)

    def remove_token(self, token_id: TokenId) -> None:
        self._tokens.pop(token_id, None)

    def get_metadata(self, token_id: TokenId) -> Optional[Metadata]:
        with self._lock:
            metadata = self._metadata.get(token_id)
            return copy.deepcopy(metadata) if metadata is not None else None

    def put_metadata(self, token_id: TokenId, metadata: Metadata) -> None:
        self._metadata[token_id] = copy.deepcopy(metadata)

    def remove_metadata(self, token_id: TokenId) -> None:
        self._metadata.pop(token_id, None)

    def tokens_for_owner(self, owner_id: str) -> List[TokenId]:
        with self._lock:
            return sorted(self._owners.get(owner_id, set()))

    def add_owner_token(self, owner_id: str, token_id: TokenId) -> None:
        self._owners.setdefault(owner_id, set()).add(token_id)

    def remove_owner_token(self, owner_id: str, token_id: TokenId) -> None:
        owned = self._owners.get(owner_id)
        if owned is None:
            return
        owned.discard(token_id)
        if not owned:
            del self._owners[owner_id]

    def count_tokens(self) -> int:
        with self._lock:
            return len(self._tokens)

    def load_state(self) -> LedgerState:
        with self._lock:
            return copy.deepcopy(self._state)

    def save_state(self, state: LedgerState) -> None:
        self._state = copy.deepcopy(state)

    @contextmanager
    def transaction(self) -> Iterator[None]:
        with self._lock:
            snapshot = copy.deepcopy((self._tokens, self._metadata, self._owners, self._state))
            try:
                yield
            except Exception:
                self._tokens, self._metadata, self._owners, self._state = snapshot
                raise
