"""Argument checks shared by every QueueTransport implementation."""

from __future__ import annotations

from sqsbridge.core import guard
from sqsbridge.models.messages import is_fifo_url

MAX_RECEIVE_MESSAGES = 10


def check_send(url: str, group_id: str | None, dedup_id: str | None) -> bool:
    """Validate send arguments; returns whether ``url`` is a FIFO queue."""
    guard.verify_valid_url(url)
    fifo = is_fifo_url(url)
    if fifo:
        guard.verify_not_null_or_empty(group_id, "groupId")
        guard.verify_not_null_or_empty(dedup_id, "dedupId")
    return fifo


def check_receive(url: str, max_messages: int, wait_time_seconds: int) -> None:
    guard.verify_valid_url(url)
    guard.verify_non_negative(wait_time_seconds, "waitTimeSeconds")
    guard.verify_in_range(max_messages, 0, MAX_RECEIVE_MESSAGES, "maxMessages")


def check_delete(url: str, receipt_handle: str) -> None:
    guard.verify_valid_url(url)
    guard.verify_not_null_or_empty(receipt_handle, "receiptHandle")
