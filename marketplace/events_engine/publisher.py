"""Publishers responsible for delivering events to external transports."""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, Protocol

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from marketplace.events_engine.schemas import EventEnvelope

LOGGER = logging.getLogger("marketplace.events_engine.publisher")


class EventPublisher(Protocol):
    """Transport abstraction for event delivery."""

    def publish(self, envelope: EventEnvelope) -> None:
        ...


class NullEventPublisher(EventPublisher):
    """No-op publisher used when no topic is configured."""

    def publish(self, envelope: EventEnvelope) -> None:  # noqa: D401
        LOGGER.debug(
            "events_engine_publish_skipped",
            extra={"event_id": str(envelope.event_id), "event_type": envelope.event_type},
        )


class SnsEventPublisher(EventPublisher):
    """Publishes nep171 event logs to an AWS SNS topic.

    On a FIFO topic every token gets its own message group, so mint, transfer
    and burn notifications of one token are delivered in ledger order.
    """

    def __init__(self, *, topic_arn: str, region_name: str, client: Any = None) -> None:
        self._topic_arn = topic_arn
        self._fifo = topic_arn.endswith(".fifo")
        self._client = client or boto3.client("sns", region_name=region_name)

    def build_request(self, envelope: EventEnvelope) -> Dict[str, Any]:
        request: Dict[str, Any] = {
            "TopicArn": self._topic_arn,
            "Message": json.dumps(envelope.model_dump(mode="json")),
            "MessageAttributes": {
                "event_type": {"DataType": "String", "StringValue": envelope.event_type},
                "standard": {"DataType": "String", "StringValue": envelope.standard},
                "token_ids": {"DataType": "String.Array", "StringValue": json.dumps(envelope.token_ids)},
            },
        }
        if self._fifo:
            request["MessageGroupId"] = envelope.ordering_key
            request["MessageDeduplicationId"] = str(envelope.event_id)
        return request

    def publish(self, envelope: EventEnvelope) -> None:
        try:
            self._client.publish(**self.build_request(envelope))
        except (BotoCoreError, ClientError):
            LOGGER.exception(
                "events_engine_publish_failed",
                extra={
                    "event_id": str(envelope.event_id),
                    "event_type": envelope.event_type,
                    "topic_arn": self._topic_arn,
                },
            )
            raise
