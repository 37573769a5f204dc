"""Outbox of funds transfers ordered by the ledger."""

from __future__ import annotations

import uuid
from typing import Optional

from sqlalchemy import BigInteger, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from marketplace.models.base import Base, TimestampMixin
from marketplace.models.types import GUID, Amount


class FundTransfer(TimestampMixin, Base):
    """A single transfer of funds to an account."""

    __tablename__ = "fund_transfers"
    __table_args__ = (
        Index("ix_fund_transfers_receiver", "receiver_id"),
        Index("ix_fund_transfers_token", "token_id"),
    )

    id: Mapped[uuid.UUID] = mapped_column(GUID(), primary_key=True, default=uuid.uuid4)
    transfer_ref: Mapped[str] = mapped_column(String(length=64), unique=True, nullable=False)
    operation: Mapped[str] = mapped_column(String(length=32), nullable=False)
    token_id: Mapped[Optional[int]] = mapped_column(BigInteger, nullable=True)
    receiver_id: Mapped[str] = mapped_column(String(length=64), nullable=False)
    kind: Mapped[str] = mapped_column(String(length=32), nullable=False)
    amount: Mapped[int] = mapped_column(Amount(), nullable=False)
