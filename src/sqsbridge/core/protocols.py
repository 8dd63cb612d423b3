"""Protocol interfaces for sqsbridge seams.

Structural typing, no inheritance required; the in-memory transport and test
providers satisfy these without importing them.
"""

from __future__ import annotations

from typing import Mapping, Optional, Protocol, runtime_checkable

from sqsbridge.models.messages import AttributeValue, Credentials, QueueMessage


# ---------------------------------------------------------------------------
# Credentials
# ---------------------------------------------------------------------------

@runtime_checkable
class ICredentialsProvider(Protocol):
    """Produces AWS credentials on demand."""

    def resolve(self) -> Credentials: ...


@runtime_checkable
class IConfigurable(Protocol):
    """Provider that takes its settings after zero-argument construction."""

    def configure(self, options: Mapping[str, str]) -> None: ...


# ---------------------------------------------------------------------------
# Queue transport
# ---------------------------------------------------------------------------

@runtime_checkable
class IQueueTransport(Protocol):
    """send / receive / delete against a queue service."""

    def send(
        self,
        url: str,
        body: str,
        group_id: Optional[str] = None,
        dedup_id: Optional[str] = None,
        attributes: Optional[Mapping[str, AttributeValue]] = None,
    ) -> str: ...

    def receive(
        self,
        url: str,
        max_messages: int,
        wait_time_seconds: int,
        attributes_enabled: bool = False,
        attribute_names: Optional[list[str]] = None,
    ) -> list[QueueMessage]: ...

    def delete(self, url: str, receipt_handle: str) -> None: ...

    def close(self) -> None: ...
