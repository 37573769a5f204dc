"""Event dispatcher that normalizes, stores, and publishes events."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Dict, Optional

from sqlalchemy.orm import Session

from marketplace.events_engine.config import get_event_engine_config
from marketplace.events_engine.publisher import EventPublisher, NullEventPublisher, SnsEventPublisher
from marketplace.events_engine.schemas import EventEnvelope
from marketplace.ledger.types import NftEvent
from marketplace.models.platform_event import DeliveryState, PlatformEvent

_dispatcher: Optional["EventDispatcher"] = None

LOGGER = logging.getLogger("marketplace.events_engine.dispatcher")


class EventDispatcher:
    """Coordinates persistence and delivery of ledger events."""

    def __init__(
        self,
        *,
        publisher: EventPublisher,
        default_source: str,
    ) -> None:
        self._publisher = publisher
        self._default_source = default_source

    def publish_nft_event(
        self,
        session: Session,
        event: NftEvent,
        *,
        correlation_id: Optional[str] = None,
    ) -> PlatformEvent:
        """Store and emit one nep171 event log."""

        log = event.to_log()
        return self.publish_event(
            session,
            event_type=event.kind.value,
            payload=log,
            correlation_id=correlation_id,
            schema_version=log["version"],
            metadata={"token_ids": list(event.token_ids)},
        )

    def publish_event(
        self,
        session: Session,
        *,
        event_type: str,
        payload: Dict[str, object],
        source: Optional[str] = None,
        correlation_id: Optional[str] = None,
        occurred_at: Optional[datetime] = None,
        schema_version: str = "nft-1.0.0",
        metadata: Optional[Dict[str, object]] = None,
    ) -> PlatformEvent:
        """Persist an event record and emit it through the configured publisher.

        A failed delivery does not undo the ledger call: the record stays in
        the outbox marked as failed.
        """

        envelope = EventEnvelope(
            event_type=event_type,
            payload=payload,
            source=source or self._default_source,
            correlation_id=correlation_id,
            occurred_at=occurred_at or datetime.now(timezone.utc),
            schema_version=schema_version,
            metadata=metadata or {},
        )

        record = PlatformEvent(
            event_id=str(envelope.event_id),
            event_type=envelope.event_type,
            source=envelope.source,
            occurred_at=envelope.occurred_at,
            correlation_id=envelope.correlation_id,
            schema_version=envelope.schema_version,
            payload=envelope.payload,
            context=envelope.metadata,
        )
        session.add(record)
        session.flush()

        record.delivery_attempts += 1
        try:
            self._publisher.publish(envelope)
        except Exception as exc:
            record.delivery_state = DeliveryState.FAILED
            record.last_error = str(exc)[:1024]
            session.flush()
            LOGGER.exception(
                "events_engine_delivery_failed",
                extra={"event_id": str(envelope.event_id), "event_type": envelope.event_type},
            )
            return record

        record.delivery_state = DeliveryState.SUCCEEDED
        session.flush()

        LOGGER.info(
            "events_engine_published",
            extra={
                "event_id": str(envelope.event_id),
                "event_type": envelope.event_type,
                "source": envelope.source,
            },
        )
        return record


def get_event_dispatcher() -> EventDispatcher:
    """Return the singleton event dispatcher for the application."""

    global _dispatcher
    if _dispatcher is not None:
        return _dispatcher

    config = get_event_engine_config()
    if config.topic_arn:
        publisher: EventPublisher = SnsEventPublisher(topic_arn=config.topic_arn, region_name=config.region)
    else:
        publisher = NullEventPublisher()

    _dispatcher = EventDispatcher(publisher=publisher, default_source=config.source)
    return _dispatcher


def set_event_dispatcher(dispatcher: Optional[EventDispatcher]) -> None:
    """Override the cached dispatcher (primarily for tests)."""

    global _dispatcher
    _dispatcher = dispatcher
