"""Integration test fixtures: SQS queues on LocalStack."""

from __future__ import annotations

import os
import sys
import uuid

import boto3
import pytest

# Default LocalStack endpoint
LOCALSTACK_URL = os.environ.get("LOCALSTACK_URL", "http://localhost:4566")
REGION = "us-east-1"


def _localstack_available() -> bool:
    """Check if LocalStack is reachable."""
    try:
        client = boto3.client("sqs", region_name=REGION, endpoint_url=LOCALSTACK_URL)
        client.list_queues()
        return True
    except Exception:
        return False


skip_no_localstack = pytest.mark.skipif(
    not _localstack_available(),
    reason="LocalStack not available",
)


@pytest.fixture(scope="session")
def localstack_sqs():
    """SQS client pointing at LocalStack."""
    return boto3.client("sqs", region_name=REGION, endpoint_url=LOCALSTACK_URL)


@pytest.fixture(scope="session")
def bridge_queues(localstack_sqs):
    """Create a uniquely prefixed set of queues via the bootstrap script."""
    sys.path.insert(0, str(os.path.join(os.path.dirname(__file__), "..", "..", "scripts")))
    from create_queues import create_queues

    prefix = f"it-{uuid.uuid4().hex[:8]}-"
    urls = create_queues(localstack_sqs, prefix=prefix)
    yield {name[len(prefix):]: url for name, url in urls.items()}
    for url in urls.values():
        localstack_sqs.delete_queue(QueueUrl=url)
