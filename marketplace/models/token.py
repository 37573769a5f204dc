"""Token ownership records, their metadata and the owner index."""

from __future__ import annotations

from typing import Optional

from sqlalchemy import BigInteger, ForeignKey, Index, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from marketplace.models.base import Base, TimestampMixin
from marketplace.models.types import Amount, JSONType


class Token(TimestampMixin, Base):
    """One minted token; the row is deleted when the token is burned."""

    __tablename__ = "tokens"
    __table_args__ = (Index("ix_tokens_owner", "owner_id"),)

    token_id: Mapped[int] = mapped_column(BigInteger, primary_key=True, autoincrement=False)
    owner_id: Mapped[str] = mapped_column(String(length=64), nullable=False)
    price: Mapped[Optional[int]] = mapped_column(Amount(), nullable=True)
    royalty: Mapped[dict] = mapped_column(JSONType, default=dict, nullable=False)
    splitpayments: Mapped[dict] = mapped_column(JSONType, default=dict, nullable=False)
    approved_account_ids: Mapped[dict] = mapped_column(JSONType, default=dict, nullable=False)
    next_approval_id: Mapped[int] = mapped_column(Integer, default=0, nullable=False)


class TokenMetadataRecord(TimestampMixin, Base):
    """Opaque descriptive record of a token."""

    __tablename__ = "token_metadata"

    token_id: Mapped[int] = mapped_column(BigInteger, primary_key=True, autoincrement=False)
    content: Mapped[dict] = mapped_column(JSONType, default=dict, nullable=False)


class OwnerToken(Base):
    """Owner index entry; a token appears under exactly one owner."""

    __tablename__ = "owner_tokens"
    __table_args__ = (
        UniqueConstraint("token_id", name="uq_owner_tokens_token"),
        Index("ix_owner_tokens_owner", "owner_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    owner_id: Mapped[str] = mapped_column(String(length=64), nullable=False)
    token_id: Mapped[int] = mapped_column(BigInteger, nullable=False)
