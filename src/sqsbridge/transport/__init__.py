"""Queue transports behind the IQueueTransport protocol."""

from __future__ import annotations

import logging

from sqsbridge.auth.resolver import CredentialResolver
from sqsbridge.core.config import QueueConfig
from sqsbridge.transport.memory_transport import MemoryQueueTransport
from sqsbridge.transport.sqs_transport import SqsQueueTransport


def create_transport(config: QueueConfig, resolver: CredentialResolver | None = None,
                     logger: logging.Logger | None = None) -> SqsQueueTransport:
    """Build the boto3 transport for a source or sink configuration.

    The credentials region follows the queue region unless set explicitly.
    """
    credentials = config.credentials
    if "region" not in credentials.model_fields_set:
        credentials = credentials.model_copy(update={"region": config.region})
    return SqsQueueTransport(
        endpoint=config.endpoint(),
        credentials=credentials,
        endpoint_url=config.endpoint_url,
        resolver=resolver,
        logger=logger,
    )


__all__ = ["MemoryQueueTransport", "SqsQueueTransport", "create_transport"]
