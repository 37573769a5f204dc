"""Pydantic models describing normalized events."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field, field_validator

from marketplace.ledger.types import NFT_METADATA_SPEC, NFT_STANDARD_NAME


class EventEnvelope(BaseModel):
    """Canonical event payload used for SNS fan-out and storage.

    ``payload`` carries the nep171 event log exactly as the ledger rendered it.
    """

    event_id: UUID = Field(default_factory=uuid4)
    event_type: str = Field(..., min_length=3, max_length=128)
    source: str = Field(..., min_length=3, max_length=128)
    occurred_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="UTC timestamp for when the ledger call completed.",
    )
    correlation_id: Optional[str] = Field(default=None, max_length=128)
    schema_version: str = Field(default=NFT_METADATA_SPEC, max_length=16)
    payload: Dict[str, Any] = Field(default_factory=dict)
    metadata: Dict[str, Any] = Field(default_factory=dict)

    @field_validator("occurred_at")
    @classmethod
    def _ensure_utc(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)

    @property
    def standard(self) -> str:
        return str(self.payload.get("standard", NFT_STANDARD_NAME))

    @property
    def token_ids(self) -> List[str]:
        ids: List[str] = []
        for entry in self.payload.get("data", []):
            ids.extend(str(token_id) for token_id in entry.get("token_ids", []))
        return ids

    @property
    def ordering_key(self) -> str:
        """Events of one token share a key so subscribers see them in order."""

        token_ids = self.token_ids
        return f"token-{token_ids[0]}" if token_ids else self.event_type
