"""Initial schema for tokens, owner index, ledger state and outboxes."""

from __future__ import annotations
from typing import Union, Sequence

from alembic import op
import sqlalchemy as sa
from marketplace.models.types import GUID, JSONType, Amount

# revision identifiers, used by Alembic.
revision: str = "0001_initial_schema"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

DELIVERY_STATE_ENUM = sa.Enum(
    "pending",
    "succeeded",
    "failed",
    name="platform_event_delivery_state",
    native_enum=False,
)


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(), server_default=sa.text("now()"), nullable=False),
        sa.Column("updated_at", sa.DateTime(), server_default=sa.text("now()"), nullable=False),
    ]


def upgrade() -> None:
    """Initial schema for tokens, owner index, ledger state and outboxes."""
    op.create_table(
        "tokens",
        sa.Column("token_id", sa.BigInteger(), autoincrement=False, nullable=False),
        sa.Column("owner_id", sa.String(length=64), nullable=False),
        sa.Column("price", Amount(), nullable=True),
        sa.Column("royalty", JSONType(), nullable=False),
        sa.Column("splitpayments", JSONType(), nullable=False),
        sa.Column("approved_account_ids", JSONType(), nullable=False),
        sa.Column("next_approval_id", sa.Integer(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("token_id", name=op.f("pk_tokens")),
    )
    op.create_index(op.f("ix_tokens_owner"), "tokens", ["owner_id"], unique=False)

    op.create_table(
        "token_metadata",
        sa.Column("token_id", sa.BigInteger(), autoincrement=False, nullable=False),
        sa.Column("content", JSONType(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("token_id", name=op.f("pk_token_metadata")),
    )

    op.create_table(
        "owner_tokens",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("owner_id", sa.String(length=64), nullable=False),
        sa.Column("token_id", sa.BigInteger(), nullable=False),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_owner_tokens")),
        sa.UniqueConstraint("token_id", name="uq_owner_tokens_token"),
    )
    op.create_index(op.f("ix_owner_tokens_owner"), "owner_tokens", ["owner_id"], unique=False)

    op.create_table(
        "ledger_state",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("owner_id", sa.String(length=64), nullable=False),
        sa.Column("tokens_minted", sa.BigInteger(), nullable=False),
        sa.Column("transaction_fee_bps", sa.Integer(), nullable=False),
        sa.Column("storage_usage", sa.BigInteger(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_ledger_state")),
    )

    op.create_table(
        "fund_transfers",
        sa.Column("id", GUID(), nullable=False),
        sa.Column("transfer_ref", sa.String(length=64), nullable=False),
        sa.Column("operation", sa.String(length=32), nullable=False),
        sa.Column("token_id", sa.BigInteger(), nullable=True),
        sa.Column("receiver_id", sa.String(length=64), nullable=False),
        sa.Column("kind", sa.String(length=32), nullable=False),
        sa.Column("amount", Amount(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_fund_transfers")),
        sa.UniqueConstraint("transfer_ref", name=op.f("uq_fund_transfers_transfer_ref")),
    )
    op.create_index(op.f("ix_fund_transfers_receiver"), "fund_transfers", ["receiver_id"], unique=False)
    op.create_index(op.f("ix_fund_transfers_token"), "fund_transfers", ["token_id"], unique=False)

    op.create_table(
        "platform_events",
        sa.Column("id", GUID(), nullable=False),
        sa.Column("event_id", sa.String(length=128), nullable=False),
        sa.Column("event_type", sa.String(length=128), nullable=False),
        sa.Column("source", sa.String(length=128), nullable=False),
        sa.Column("occurred_at", sa.DateTime(), nullable=False),
        sa.Column("correlation_id", sa.String(length=128), nullable=True),
        sa.Column("schema_version", sa.String(length=16), nullable=False),
        sa.Column("payload", JSONType(), nullable=False),
        sa.Column("context", JSONType(), nullable=False),
        sa.Column("delivery_state", DELIVERY_STATE_ENUM, nullable=False),
        sa.Column("delivery_attempts", sa.Integer(), nullable=False),
        sa.Column("last_error", sa.String(length=1024), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_platform_events")),
        sa.UniqueConstraint("event_id", name=op.f("uq_platform_events_event_id")),
    )
    op.create_index(op.f("ix_platform_events_event_type"), "platform_events", ["event_type"], unique=False)
    op.create_index(op.f("ix_platform_events_occurred_at"), "platform_events", ["occurred_at"], unique=False)
    op.create_index(op.f("ix_platform_events_delivery_state"), "platform_events", ["delivery_state"], unique=False)
    op.create_index(op.f("ix_platform_events_correlation"), "platform_events", ["correlation_id"], unique=False)


def downgrade() -> None:
    op.drop_index(op.f("ix_platform_events_correlation"), table_name="platform_events")
    op.drop_index(op.f("ix_platform_events_delivery_state"), table_name="platform_events")
    op.drop_index(op.f("ix_platform_events_occurred_at"), table_name="platform_events")
    op.drop_index(op.f("ix_platform_events_event_type"), table_name="platform_events")
    op.drop_table("platform_events")
    op.drop_index(op.f("ix_fund_transfers_token"), table_name="fund_transfers")
    op.drop_index(op.f("ix_fund_transfers_receiver"), table_name="fund_transfers")
    op.drop_table("fund_transfers")
    op.drop_table("ledger_state")
    op.drop_index(op.f("ix_owner_tokens_owner"), table_name="owner_tokens")
    op.drop_table("owner_tokens")
    op.drop_table("token_metadata")
    op.drop_index(op.f("ix_tokens_owner"), table_name="tokens")
    op.drop_table("tokens")
