"""SourceBridge: drains an SQS queue into log records.

A message is only deleted from the queue once commit() is called for the
record built from it. Anything not committed is redelivered by SQS after its
visibility timeout, which is the at-least-once guarantee.
"""

from __future__ import annotations

from sqsbridge.bridges.base import BaseBridge, BridgeState
from sqsbridge.core.config import SourceConfig
from sqsbridge.core.exceptions import IllegalArgumentError
from sqsbridge.models.messages import LogRecord, QueueMessage, RecordHeader, SourcePosition


def derive_key(message: QueueMessage, config: SourceConfig) -> str:
    """Partition key: the configured string attribute, else the message id."""
    if config.partition_by_attribute:
        value = message.string_attributes().get(config.message_attribute_partition_key)
        if value is not None:
            return value
    return message.message_id


def to_headers(message: QueueMessage, config: SourceConfig) -> list[RecordHeader]:
    if not config.message_attributes_enabled:
        return []
    return [RecordHeader(key=name, value=value) for name, value in message.string_attributes().items()]


def to_record(message: QueueMessage, config: SourceConfig) -> LogRecord:
    return LogRecord(
        topic=config.topics,
        key=derive_key(message, config),
        value=message.body,
        headers=to_headers(message, config),
        position=SourcePosition(
            queue_url=config.queue_url,
            message_id=message.message_id,
            receipt_handle=message.receipt_handle,
        ),
    )


class SourceBridge(BaseBridge[SourceConfig]):
    """Queue -> log direction."""

    config_class = SourceConfig

    def poll(self) -> list[LogRecord]:
        """Receive one batch and convert it, preserving receive order."""
        config, transport = self._require_started()
        self.state = BridgeState.POLLING

        messages = transport.receive(
            config.queue_url,
            config.max_messages,
            config.wait_time_seconds,
            config.message_attributes_enabled,
            config.attribute_names,
        )
        self._log.debug(".poll: url=%s, max=%s, wait=%s, size=%d", config.queue_url,
                        config.max_messages, config.wait_time_seconds, len(messages))

        records = [to_record(message, config) for message in messages]
        self.state = BridgeState.EMITTING
        return records

    def commit(self, record: LogRecord) -> None:
        """Delete the queue message behind ``record``."""
        _, transport = self._require_started()
        if record is None or record.position is None:
            raise IllegalArgumentError("record carries no source position")

        self.state = BridgeState.COMMITTING
        position = record.position
        self._log.debug(".commit-record: url=%s, message-id=%s", position.queue_url, position.message_id)
        transport.delete(position.queue_url, position.receipt_handle)
