"""Events engine persisting and publishing ledger notifications."""

from .dispatcher import EventDispatcher, get_event_dispatcher  # noqa: F401
from .schemas import EventEnvelope  # noqa: F401
