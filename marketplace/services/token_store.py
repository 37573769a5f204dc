"""SQLAlchemy-backed token repository."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator, List, Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from marketplace.ledger.repository import TokenRepository
from marketplace.ledger.types import LedgerState, Metadata, TokenId, TokenRecord
from marketplace.models.ledger_state import LEDGER_STATE_ID, LedgerStateRecord
from marketplace.models.token import OwnerToken, Token, TokenMetadataRecord

logger = logging.getLogger("marketplace.services.token_store")


class SqlAlchemyTokenRepository(TokenRepository):
    """
    Token repository persisting into the ``tokens``, ``token_metadata``,
    ``owner_tokens`` and ``ledger_state`` tables.

    Writes are flushed but not committed; the owner of the session commits.
    A failing ledger call rolls the whole session back.
    """

    def __init__(self, session: Session, *, owner_id: str, transaction_fee_bps: int = 0) -> None:
        self._session = session
        self._owner_id = owner_id
        self._transaction_fee_bps = transaction_fee_bps

    def get_token(self, token_id: TokenId) -> Optional[TokenRecord]:
        row = self._session.get(Token, token_id)
        if row is None:
            return None
        return TokenRecord(
            token_id=row.token_id,
            owner_id=row.owner_id,
            price=row.price,
            royalty={key: int(value) for key, value in (row.royalty or {}).items()},
            splitpayments={key: int(value) for key, value in (row.splitpayments or {}).items()},
            approved_account_ids={key: int(value) for key, value in (row.approved_account_ids or {}).items()},
            next_approval_id=row.next_approval_id,
        )

    def put_token(self, record: TokenRecord) -> None:
        row = self._session.get(Token, record.token_id)
        if row is None:
            row = Token(token_id=record.token_id)
        row.owner_id = record.owner_id
        row.price = record.price
        row.royalty = dict(record.royalty)
        row.splitpayments = dict(record.splitpayments)
        row.approved_account_ids = dict(record.approved_account_ids)
        row.next_approval_id = record.next_approval_id
        self._session.add(row)
        self._session.flush()

    def remove_token(self, token_id: TokenId) -> None:
        row = self._session.get(Token, token_id)
        if row is not None:
            self._session.delete(row)
            self._session.flush()

    def get_metadata(self, token_id: TokenId) -> Optional[Metadata]:
        row = self._session.get(TokenMetadataRecord, token_id)
        return dict(row.content) if row is not None else None

    def put_metadata(self, token_id: TokenId, metadata: Metadata) -> None:
        row = self._session.get(TokenMetadataRecord, token_id)
        if row is None:
            row = TokenMetadataRecord(token_id=token_id)
        row.content = dict(metadata)
        self._session.add(row)
        self._session.flush()

    def remove_metadata(self, token_id: TokenId) -> None:
        row = self._session.get(TokenMetadataRecord, token_id)
        if row is not None:
            self._session.delete(row)
            self._session.flush()

    def tokens_for_owner(self, owner_id: str) -> List[TokenId]:
        stmt = select(OwnerToken.token_id).where(OwnerToken.owner_id == owner_id).order_by(OwnerToken.token_id)
        return list(self._session.scalars(stmt).all())

    def add_owner_token(self, owner_id: str, token_id: TokenId) -> None:
        self._session.add(OwnerToken(owner_id=owner_id, token_id=token_id))
        self._session.flush()

    def remove_owner_token(self, owner_id: str, token_id: TokenId) -> None:
        stmt = select(OwnerToken).where(OwnerToken.owner_id == owner_id, OwnerToken.token_id == token_id)
        for row in self._session.scalars(stmt).all():
            self._session.delete(row)
        self._session.flush()

    def count_tokens(self) -> int:
        return int(self._session.scalar(select(func.count()).select_from(Token)) or 0)

    def load_state(self) -> LedgerState:
        row = self._lock_state()
        return LedgerState(
            owner_id=row.owner_id,
            tokens_minted=row.tokens_minted,
            transaction_fee_bps=row.transaction_fee_bps,
            storage_usage=row.storage_usage,
        )

    def save_state(self, state: LedgerState) -> None:
        row = self._lock_state()
        row.owner_id = state.owner_id
        row.tokens_minted = state.tokens_minted
        row.transaction_fee_bps = state.transaction_fee_bps
        row.storage_usage = state.storage_usage
        self._session.add(row)
        self._session.flush()

    def ensure_state(self) -> LedgerState:
        """Create the ledger-state row from the configured defaults if missing."""

        return self.load_state()

    @contextmanager
    def transaction(self) -> Iterator[None]:
        try:
            yield
            self._session.flush()
        except Exception:
            self._session.rollback()
            raise

    def _lock_state(self) -> LedgerStateRecord:
        stmt = select(LedgerStateRecord).where(LedgerStateRecord.id == LEDGER_STATE_ID)
        if self._session.get_bind().dialect.name != "sqlite":
            stmt = stmt.with_for_update(nowait=False)
        row = self._session.scalars(stmt).first()
        if row is None:
            row = LedgerStateRecord(
                id=LEDGER_STATE_ID,
                owner_id=self._owner_id,
                tokens_minted=0,
                transaction_fee_bps=self._transaction_fee_bps,
                storage_usage=0,
            )
            self._session.add(row)
            self._session.flush()
            logger.info(
                "ledger_state_initialized",
                extra={"owner_id": self._owner_id, "transaction_fee_bps": self._transaction_fee_bps},
            )
        return row
