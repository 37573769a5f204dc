import os
import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

os.environ.setdefault("NFTM_ENVIRONMENT", "test")
os.environ.setdefault("NFTM_DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("NFTM_MARKETPLACE_OWNER_ID", "market.near")
os.environ.setdefault("NFTM_STORAGE_BYTE_COST", "1")
os.environ.setdefault("NFTM_EVENT_TOPIC_ARN", "")
os.environ.setdefault("NFTM_LOG_JSON", "false")

PROJECT_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(PROJECT_ROOT))

from marketplace.core.config import get_settings

get_settings.cache_clear()

from marketplace.core.database import engine  # noqa: E402
from marketplace.events_engine.dispatcher import EventDispatcher, set_event_dispatcher  # noqa: E402
from marketplace.events_engine.publisher import NullEventPublisher  # noqa: E402
from marketplace.ledger import InMemoryTokenRepository, Ledger  # noqa: E402
from marketplace.main import create_app  # noqa: E402
from marketplace.models import Base  # noqa: E402


@pytest.fixture(autouse=True)
def reset_database():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    set_event_dispatcher(EventDispatcher(publisher=NullEventPublisher(), default_source="nft_marketplace_ledger"))
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def client() -> TestClient:  # noqa: ANN001
    app = create_app()
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture()
def event_dispatcher_stub(monkeypatch):
    from marketplace.events_engine import dispatcher as dispatcher_module

    class StubPublisher:
        def __init__(self) -> None:
            self.envelopes = []

        def publish(self, envelope):
            self.envelopes.append(envelope)

    publisher = StubPublisher()
    dispatcher = EventDispatcher(publisher=publisher, default_source="nft_marketplace_ledger")
    dispatcher.stub_publisher = publisher  # type: ignore[attr-defined]
    dispatcher_module.set_event_dispatcher(dispatcher)
    yield dispatcher
    dispatcher_module.set_event_dispatcher(
        EventDispatcher(publisher=NullEventPublisher(), default_source="nft_marketplace_ledger")
    )


@pytest.fixture()
def ledger() -> Ledger:
    return Ledger(InMemoryTokenRepository(owner_id="market.near"), storage_byte_cost=1)

