"""Application configuration using Pydantic settings."""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# One yoctoNEAR-style unit per byte is 10**19; callers attach deposits in the
# smallest currency unit.
DEFAULT_STORAGE_BYTE_COST = 10**19


class AppSettings(BaseSettings):
    """Service configuration loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="NFTM_",
        extra="ignore",
    )

    environment: Literal["local", "test", "staging", "production"] = Field(default="local")
    service_name: str = Field(default="nft-marketplace-ledger")
    database_url: str = Field(default="sqlite:///./data/marketplace.db")
    sql_echo: bool = Field(default=False)
    log_level: str = Field(default="INFO")
    log_json: bool = Field(default=True)
    marketplace_owner_id: str = Field(default="marketplace.near")
    initial_transaction_fee_bps: int = Field(default=0, ge=0, lt=10_000)
    storage_byte_cost: int = Field(default=DEFAULT_STORAGE_BYTE_COST, ge=0)
    event_topic_arn: str | None = Field(default=None)
    event_source: str = Field(default="nft_marketplace_ledger")
    event_region: str | None = Field(default=None, description="AWS region of the event topic")

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, value: str) -> str:
        return value.upper()

    @field_validator("event_topic_arn", "event_region", mode="before")
    @classmethod
    def empty_string_to_none(cls, value: str | None) -> str | None:
        if value == "":
            return None
        return value

    @field_validator("storage_byte_cost", mode="before")
    @classmethod
    def ensure_int_byte_cost(cls, value: int | str | None) -> int | str | None:
        if value in (None, ""):
            return DEFAULT_STORAGE_BYTE_COST
        return value


@lru_cache
def get_settings() -> AppSettings:
    """Return cached application settings instance."""

    return AppSettings()
