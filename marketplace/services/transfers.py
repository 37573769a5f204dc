"""Funds transfer execution."""

from __future__ import annotations

import logging
import uuid
from typing import List, Optional, Protocol, Sequence

from sqlalchemy.orm import Session

from marketplace.ledger.types import TransferInstruction
from marketplace.models.fund_transfer import FundTransfer

logger = logging.getLogger("marketplace.services.transfers")


class TransferExecutor(Protocol):
    """Moves funds as ordered by the ledger."""

    def execute(
        self,
        instructions: Sequence[TransferInstruction],
        *,
        operation: str,
        token_id: Optional[int] = None,
    ) -> List[FundTransfer]:
        ...


class RecordingTransferExecutor(TransferExecutor):
    """
    Records each transfer in the ``fund_transfers`` outbox.

    The rows are written in the same session as the ledger change, so they
    commit or roll back together with it. A settlement worker on the host
    side picks them up and moves the actual balances.
    """

    def __init__(self, session: Session) -> None:
        self._session = session

    def execute(
        self,
        instructions: Sequence[TransferInstruction],
        *,
        operation: str,
        token_id: Optional[int] = None,
    ) -> List[FundTransfer]:
        records: List[FundTransfer] = []
        for instruction in instructions:
            if instruction.amount <= 0:
                logger.debug(
                    "transfer_skipped_zero_amount",
                    extra={"receiver_id": instruction.receiver_id, "kind": instruction.kind.value},
                )
                continue
            record = FundTransfer(
                transfer_ref=f"xfer_{uuid.uuid4().hex[:16]}",
                operation=operation,
                token_id=token_id,
                receiver_id=instruction.receiver_id,
                kind=instruction.kind.value,
                amount=instruction.amount,
            )
            self._session.add(record)
            records.append(record)

        self._session.flush()
        logger.info(
            "transfers_recorded",
            extra={
                "operation": operation,
                "token_id": token_id,
                "count": len(records),
                "total": str(sum(record.amount for record in records)),
            },
        )
        return records
