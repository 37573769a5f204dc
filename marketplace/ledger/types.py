"""Plain data types shared by the ledger components."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Generic, List, Optional, TypeVar

NFT_STANDARD_NAME = "nep171"
NFT_METADATA_SPEC = "nft-1.0.0"

TokenId = int
Metadata = Dict[str, Any]


@dataclass
class TokenRecord:
    """Ownership record of a single minted token."""

    token_id: TokenId
    owner_id: str
    price: Optional[int] = None
    royalty: Dict[str, int] = field(default_factory=dict)
    splitpayments: Dict[str, int] = field(default_factory=dict)
    approved_account_ids: Dict[str, int] = field(default_factory=dict)
    next_approval_id: int = 0

    def to_storage(self) -> Dict[str, Any]:
        """Serializable form; amounts are kept as decimal strings."""

        return {
            "token_id": self.token_id,
            "owner_id": self.owner_id,
            "price": str(self.price) if self.price is not None else None,
            "royalty": dict(self.royalty),
            "splitpayments": dict(self.splitpayments),
            "approved_account_ids": dict(self.approved_account_ids),
            "next_approval_id": self.next_approval_id,
        }


@dataclass
class LedgerState:
    """Process-wide counters of the ledger, persisted between calls."""

    owner_id: str
    tokens_minted: int = 0
    transaction_fee_bps: int = 0
    storage_usage: int = 0


@dataclass(frozen=True)
class CallContext:
    """Who is calling and how much they attached to the call."""

    caller_id: str
    attached_deposit: int = 0


class EventKind(str, Enum):
    MINT = "nft_mint"
    TRANSFER = "nft_transfer"
    BURN = "nft_burn"


@dataclass(frozen=True)
class NftEvent:
    """Domain event describing one mint, transfer or burn."""

    kind: EventKind
    token_ids: List[TokenId]
    owner_id: Optional[str] = None
    old_owner_id: Optional[str] = None
    new_owner_id: Optional[str] = None
    memo: Optional[str] = None

    def to_log(self) -> Dict[str, Any]:
        """Render the event in the nep171 event log format."""

        if self.kind is EventKind.TRANSFER:
            data: Dict[str, Any] = {
                "old_owner_id": self.old_owner_id,
                "new_owner_id": self.new_owner_id,
            }
        else:
            data = {"owner_id": self.owner_id}
        data["token_ids"] = [str(token_id) for token_id in self.token_ids]
        if self.memo is not None:
            data["memo"] = self.memo
        return {
            "standard": NFT_STANDARD_NAME,
            "version": NFT_METADATA_SPEC,
            "event": self.kind.value,
            "data": [data],
        }


class TransferKind(str, Enum):
    COMMISSION = "commission"
    ROYALTY = "royalty"
    SPLIT_PAYMENT = "split_payment"
    SELLER = "seller"
    REFUND = "refund"


@dataclass(frozen=True)
class TransferInstruction:
    receiver_id: str
    amount: int
    kind: TransferKind


@dataclass(frozen=True)
class MintResult:
    last_id: TokenId
    ids: List[TokenId]
    owner_id: str
    metadata: Optional[List[Metadata]] = None


@dataclass(frozen=True)
class BuyResult:
    token_id: TokenId
    new_owner: str
    art_id: Optional[str] = None


@dataclass(frozen=True)
class BurnResult:
    token_id: TokenId
    art_id: Optional[str] = None


@dataclass(frozen=True)
class PriceResult:
    token_id: TokenId
    new_price: int
    art_id: Optional[str] = None


ResultT = TypeVar("ResultT")


@dataclass
class LedgerOutcome(Generic[ResultT]):
    """What a ledger call produced: its result, events to emit, funds to move."""

    result: ResultT
    events: List[NftEvent] = field(default_factory=list)
    transfers: List[TransferInstruction] = field(default_factory=list)
