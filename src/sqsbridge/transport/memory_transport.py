"""In-memory QueueTransport for unit tests and local runs."""

from __future__ import annotations

import uuid
from collections import deque
from dataclasses import dataclass, field
from typing import Mapping, Optional

from sqsbridge.core.exceptions import IllegalStateError, TransportError
from sqsbridge.models.messages import AttributeValue, QueueMessage
from sqsbridge.transport import checks


@dataclass
class _Stored:
    message_id: str
    body: str
    attributes: dict[str, AttributeValue]
    group_id: Optional[str] = None
    sequence_number: Optional[str] = None
    receive_count: int = 0


@dataclass
class _Queue:
    visible: deque[_Stored] = field(default_factory=deque)
    in_flight: dict[str, _Stored] = field(default_factory=dict)
    dedup: dict[str, str] = field(default_factory=dict)


class MemoryQueueTransport:
    """Dict-backed IQueueTransport.

    Queues are created on first use. Received messages stay in flight until
    deleted or until expire_in_flight() makes them visible again, which is how
    tests simulate a visibility-timeout redelivery. Receives never block.
    """

    def __init__(self) -> None:
        self._queues: dict[str, _Queue] = {}
        self._sequence = 0
        self.close_count = 0
        self.sent: list[tuple[str, str, Optional[str], Optional[str]]] = []

    def _queue(self, url: str) -> _Queue:
        return self._queues.setdefault(url, _Queue())

    def _check_open(self) -> None:
        if self.close_count:
            raise IllegalStateError("SQS client is closed")

    def send(self, url: str, body: str, group_id: Optional[str] = None,
             dedup_id: Optional[str] = None,
             attributes: Optional[Mapping[str, AttributeValue]] = None) -> str:
        fifo = checks.check_send(url, group_id, dedup_id)
        self._check_open()
        queue = self._queue(url)

        if fifo and dedup_id in queue.dedup:
            return queue.dedup[dedup_id]  # type: ignore[index]

        stored = _Stored(message_id=str(uuid.uuid4()), body=body,
                         attributes=dict(attributes or {}), group_id=group_id)
        if fifo:
            self._sequence += 1
            stored.sequence_number = f"{self._sequence:020d}"
            queue.dedup[dedup_id] = stored.sequence_number  # type: ignore[index]
        queue.visible.append(stored)
        self.sent.append((url, body, group_id, dedup_id))
        return stored.sequence_number if fifo else stored.message_id  # type: ignore[return-value]

    def receive(self, url: str, max_messages: int, wait_time_seconds: int,
                attributes_enabled: bool = False,
                attribute_names: Optional[list[str]] = None) -> list[QueueMessage]:
        checks.check_receive(url, max_messages, wait_time_seconds)
        self._check_open()
        queue = self._queue(url)

        out: list[QueueMessage] = []
        while queue.visible and len(out) < max_messages:
            stored = queue.visible.popleft()
            stored.receive_count += 1
            handle = f"{stored.message_id}#{uuid.uuid4().hex}"
            queue.in_flight[handle] = stored
            out.append(QueueMessage(
                message_id=stored.message_id,
                body=stored.body,
                receipt_handle=handle,
                attributes=_select(stored.attributes, attributes_enabled, attribute_names),
            ))
        return out

    def delete(self, url: str, receipt_handle: str) -> None:
        checks.check_delete(url, receipt_handle)
        self._check_open()
        if self._queue(url).in_flight.pop(receipt_handle, None) is None:
            raise TransportError("DeleteMessage", url, "ReceiptHandleIsInvalid")

    def close(self) -> None:
        if self.close_count:
            return
        self.close_count += 1

    # ---- test helpers ----

    def expire_in_flight(self, url: str) -> int:
        """Return every in-flight message to the front of the queue."""
        queue = self._queue(url)
        expired = list(queue.in_flight.values())
        queue.in_flight.clear()
        queue.visible.extendleft(reversed(expired))
        return len(expired)

    def visible_count(self, url: str) -> int:
        return len(self._queue(url).visible)

    def in_flight_count(self, url: str) -> int:
        return len(self._queue(url).in_flight)


def _select(attributes: dict[str, AttributeValue], enabled: bool,
            names: Optional[list[str]]) -> dict[str, AttributeValue]:
    if not enabled:
        return {}
    if not names:
        return dict(attributes)
    return {k: v for k, v in attributes.items() if k in names}
