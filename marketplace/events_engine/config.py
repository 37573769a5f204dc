"""Configuration helpers for the events engine."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

from marketplace.core.config import AppSettings, get_settings

DEFAULT_REGION = "us-east-1"


@dataclass
class EventEngineConfig:
    """Resolved configuration values for the events engine."""

    topic_arn: Optional[str]
    source: str
    region: str

    @property
    def fifo(self) -> bool:
        return bool(self.topic_arn) and self.topic_arn.endswith(".fifo")


def _region_from_arn(topic_arn: Optional[str]) -> Optional[str]:
    # arn:aws:sns:<region>:<account>:<topic>
    if not topic_arn:
        return None
    parts = topic_arn.split(":")
    return parts[3] if len(parts) > 5 and parts[3] else None


def get_event_engine_config(settings: Optional[AppSettings] = None) -> EventEngineConfig:
    """Resolve the topic, source and region; an explicit region setting wins over the ARN."""

    settings = settings or get_settings()
    region = (
        settings.event_region
        or _region_from_arn(settings.event_topic_arn)
        or os.getenv("AWS_REGION")
        or os.getenv("AWS_DEFAULT_REGION")
        or DEFAULT_REGION
    )
    return EventEngineConfig(topic_arn=settings.event_topic_arn, source=settings.event_source, region=region)
