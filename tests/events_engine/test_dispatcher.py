from __future__ import annotations

from sqlalchemy import select

from marketplace.core.database import session_scope
from marketplace.events_engine.dispatcher import EventDispatcher
from marketplace.ledger.types import EventKind, NftEvent
from marketplace.models.platform_event import DeliveryState, PlatformEvent


class StubPublisher:
    def __init__(self) -> None:
        self.envelopes = []

    def publish(self, envelope):
        self.envelopes.append(envelope)


class FailingPublisher:
    def publish(self, envelope):
        raise RuntimeError("topic unavailable")


def test_dispatcher_persists_and_publishes() -> None:
    publisher = StubPublisher()
    dispatcher = EventDispatcher(publisher=publisher, default_source="test-service")
    event = NftEvent(kind=EventKind.TRANSFER, token_ids=[4], old_owner_id="alice.near", new_owner_id="bob.near")

    with session_scope() as session:
        dispatcher.publish_nft_event(session, event, correlation_id="buy:bob.near")

        records = session.execute(select(PlatformEvent)).scalars().all()
        assert len(records) == 1
        record = records[0]
        assert record.event_type == "nft_transfer"
        assert record.schema_version == "nft-1.0.0"
        assert record.correlation_id == "buy:bob.near"
        assert record.payload["data"][0]["token_ids"] == ["4"]
        assert record.context == {"token_ids": [4]}
        assert record.delivery_state == DeliveryState.SUCCEEDED
        assert record.delivery_attempts == 1

    assert len(publisher.envelopes) == 1
    assert publisher.envelopes[0].source == "test-service"


def test_failed_delivery_is_recorded_not_raised() -> None:
    dispatcher = EventDispatcher(publisher=FailingPublisher(), default_source="test-service")
    event = NftEvent(kind=EventKind.BURN, token_ids=[1], owner_id="alice.near")

    with session_scope() as session:
        record = dispatcher.publish_nft_event(session, event)
        assert record.delivery_state == DeliveryState.FAILED
        assert record.last_error == "topic unavailable"

    with session_scope() as session:
        stored = session.execute(select(PlatformEvent)).scalars().one()
        assert stored.delivery_state == DeliveryState.FAILED
