"""boto3-backed QueueTransport."""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

import boto3
import botocore.session
from botocore.credentials import DeferredRefreshableCredentials
from botocore.exceptions import BotoCoreError, ClientError

from sqsbridge.auth.resolver import CredentialResolver
from sqsbridge.core.config import CredentialsConfig
from sqsbridge.core.exceptions import ConfigurationError, IllegalStateError, ProviderLoadError, TransportError
from sqsbridge.models.messages import AttributeValue, QueueEndpoint, QueueMessage
from sqsbridge.transport import checks
from sqsbridge.transport.attributes import attributes_from_wire, attributes_to_wire

_logger = logging.getLogger(__name__)


class SqsQueueTransport:
    """Validated send / receive / delete against one SQS client."""

    def __init__(self, endpoint: QueueEndpoint, credentials: CredentialsConfig | None = None,
                 endpoint_url: str | None = None, resolver: CredentialResolver | None = None,
                 logger: logging.Logger | None = None) -> None:
        self._endpoint = endpoint
        self._log = logger or _logger
        self._resolver = resolver or CredentialResolver(logger=self._log)
        self._closed = False

        if credentials is None:
            credentials = CredentialsConfig(region=endpoint.region)
        session = self._build_session(credentials)

        kwargs: dict = {"region_name": endpoint.region}
        if endpoint_url:
            kwargs["endpoint_url"] = endpoint_url
        try:
            self._client = session.client("sqs", **kwargs)
        except (BotoCoreError, ValueError) as exc:
            raise ConfigurationError(
                f"Cannot build SQS client for region={endpoint.region!r}, "
                f"endpoint_url={endpoint_url!r}: {exc}"
            ) from exc

    def _build_session(self, credentials: CredentialsConfig) -> boto3.session.Session:
        region = self._endpoint.region
        if self._resolver.uses_default_chain(credentials):
            return boto3.session.Session(region_name=region)

        try:
            provider = self._resolver.provider_for(credentials)
        except ProviderLoadError as exc:
            self._log.error(
                "Problem initializing credentials provider, falling back to the default chain: %s", exc,
            )
            return boto3.session.Session(region_name=region)

        core = botocore.session.get_session()
        core._credentials = DeferredRefreshableCredentials(
            refresh_using=lambda: provider.resolve().as_metadata(),
            method=f"sqsbridge-{credentials.provider}",
        )
        return boto3.session.Session(botocore_session=core, region_name=region)

    @property
    def endpoint(self) -> QueueEndpoint:
        return self._endpoint

    @property
    def closed(self) -> bool:
        return self._closed

    def _check_open(self) -> None:
        if self._closed:
            raise IllegalStateError("SQS client is closed")

    def send(self, url: str, body: str, group_id: Optional[str] = None,
             dedup_id: Optional[str] = None,
             attributes: Optional[Mapping[str, AttributeValue]] = None) -> str:
        """Send one message.

        Returns:
            The sequence number for FIFO queues, otherwise the message id.
        """
        self._log.debug(".send: queue=%s, gid=%s, mid=%s", url, group_id, dedup_id)
        fifo = checks.check_send(url, group_id, dedup_id)
        self._check_open()

        request: dict[str, Any] = {"QueueUrl": url, "MessageBody": body}
        if attributes:
            request["MessageAttributes"] = attributes_to_wire(attributes)
        if fifo:
            request["MessageGroupId"] = group_id
            request["MessageDeduplicationId"] = dedup_id

        try:
            resp = self._client.send_message(**request)
        except (ClientError, BotoCoreError) as exc:
            raise TransportError("SendMessage", url, str(exc)) from exc

        self._log.debug(".send-message.OK: queue=%s, message_id=%s", url, resp.get("MessageId"))
        return resp["SequenceNumber"] if fifo else resp["MessageId"]

    def receive(self, url: str, max_messages: int, wait_time_seconds: int,
                attributes_enabled: bool = False,
                attribute_names: Optional[list[str]] = None) -> list[QueueMessage]:
        """Long-poll for up to ``max_messages`` messages.

        Blocks for at most ``wait_time_seconds`` when the queue is empty.
        An empty ``attribute_names`` with attributes enabled asks for all of them.
        """
        self._log.debug(".receive: queue=%s, max=%s, wait=%s", url, max_messages, wait_time_seconds)
        checks.check_receive(url, max_messages, wait_time_seconds)
        self._check_open()
        if max_messages == 0:
            return []

        request: dict[str, Any] = {
            "QueueUrl": url,
            "MaxNumberOfMessages": max_messages,
            "WaitTimeSeconds": wait_time_seconds,
        }
        if attributes_enabled:
            request["MessageAttributeNames"] = list(attribute_names) if attribute_names else ["All"]

        try:
            resp = self._client.receive_message(**request)
        except (ClientError, BotoCoreError) as exc:
            raise TransportError("ReceiveMessage", url, str(exc)) from exc

        messages = [
            QueueMessage(
                message_id=m["MessageId"],
                body=m.get("Body", ""),
                receipt_handle=m["ReceiptHandle"],
                attributes=attributes_from_wire(m.get("MessageAttributes")),
            )
            for m in resp.get("Messages", [])
        ]
        self._log.debug(".receive: %d messages, queue=%s", len(messages), url)
        return messages

    def delete(self, url: str, receipt_handle: str) -> None:
        checks.check_delete(url, receipt_handle)
        self._check_open()
        try:
            self._client.delete_message(QueueUrl=url, ReceiptHandle=receipt_handle)
        except (ClientError, BotoCoreError) as exc:
            raise TransportError("DeleteMessage", url, str(exc)) from exc
        self._log.debug(".delete: receipt-handle=%s", receipt_handle)

    def close(self) -> None:
        """Release the client. Later calls do nothing."""
        if self._closed:
            return
        self._closed = True
        self._client.close()
        self._log.info("SQS client closed")

    def __enter__(self) -> SqsQueueTransport:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()
