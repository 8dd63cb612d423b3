"""SinkBridge: sends log records to an SQS queue."""

from __future__ import annotations

import re
from typing import Iterable, Optional

from sqsbridge.bridges.base import BaseBridge
from sqsbridge.core import guard
from sqsbridge.core.config import SinkConfig
from sqsbridge.core.exceptions import TransportError, ValidationError
from sqsbridge.models.messages import AttributeValue, HeaderType, LogRecord, StringAttribute


def dedup_id(record: LogRecord) -> Optional[str]:
    """``topic-partition-offset``; None when the record has no log coordinates."""
    if record.partition is None or record.offset is None:
        return None
    return f"{record.topic}-{record.partition}-{record.offset}"


def group_id(record: LogRecord) -> str:
    return record.key if not guard.is_blank(record.key) else record.topic  # type: ignore[return-value]


def header_attributes(record: LogRecord, include: list[str]) -> dict[str, AttributeValue]:
    """String headers as String attributes; other header types are skipped."""
    out: dict[str, AttributeValue] = {}
    for header in record.headers:
        if include and header.key not in include:
            continue
        if header.value_type != HeaderType.STRING or not isinstance(header.value, str):
            continue
        out[header.key] = StringAttribute(value=header.value)
    return out


class SinkBridge(BaseBridge[SinkConfig]):
    """Log -> queue direction.

    A record whose send fails is logged and dropped unless
    ``raise_on_send_error`` is set, in which case the error propagates and
    the caller is expected to redeliver the batch.
    """

    config_class = SinkConfig

    @property
    def subscription(self) -> list[str] | re.Pattern[str]:
        """Topics to consume: an explicit list or a compiled pattern."""
        config, _ = self._require_started()
        if config.topics_regex:
            return re.compile(config.topics_regex)
        return [t.strip() for t in config.topics.split(",") if t.strip()]

    def put(self, records: Iterable[LogRecord]) -> None:
        records = list(records)
        if not records:
            return
        config, transport = self._require_started()

        self._log.debug(".put: record_count=%d", len(records))
        for record in records:
            mid = dedup_id(record)
            gid = group_id(record)
            body = record.value or ""

            if guard.is_blank(body):
                self._log.warning("Skipping empty message: key=%s, dedup_id=%s", record.key, mid)
                continue

            attributes = None
            if config.message_attributes_enabled:
                attributes = header_attributes(record, config.attribute_names)

            try:
                sid = transport.send(config.queue_url, body, gid, mid, attributes)
            except (ValidationError, TransportError):
                self._log.exception("Failed to send message %s to %s", mid, config.queue_url)
                if config.raise_on_send_error:
                    raise
                continue

            self._log.debug(".put.OK: group-id=%s, dedup-id=%s, queue.url=%s, sqs-id=%s",
                            gid, mid, config.queue_url, sid)
