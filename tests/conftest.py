"""Shared fixtures: moto-backed SQS queues and URLs."""

from __future__ import annotations

import boto3
import pytest
from moto import mock_aws

REGION = "us-east-1"
STANDARD_URL = "https://sqs.us-east-1.amazonaws.com/123456789012/orders"
FIFO_URL = "https://sqs.us-east-1.amazonaws.com/123456789012/orders.fifo"


@pytest.fixture
def aws():
    with mock_aws():
        yield boto3.client("sqs", region_name=REGION)


@pytest.fixture
def queue_url(aws):
    return aws.create_queue(QueueName="bridge-test")["QueueUrl"]


@pytest.fixture
def fifo_queue_url(aws):
    return aws.create_queue(
        QueueName="bridge-test.fifo", Attributes={"FifoQueue": "true"},
    )["QueueUrl"]
