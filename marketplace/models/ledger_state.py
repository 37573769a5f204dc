"""Single-row table holding the ledger counters."""

from __future__ import annotations

from sqlalchemy import BigInteger, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from marketplace.models.base import Base, TimestampMixin

LEDGER_STATE_ID = 1


class LedgerStateRecord(TimestampMixin, Base):
    """Marketplace owner, ID counter, commission and storage meter."""

    __tablename__ = "ledger_state"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, default=LEDGER_STATE_ID)
    owner_id: Mapped[str] = mapped_column(String(length=64), nullable=False)
    tokens_minted: Mapped[int] = mapped_column(BigInteger, default=0, nullable=False)
    transaction_fee_bps: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    storage_usage: Mapped[int] = mapped_column(BigInteger, default=0, nullable=False)
