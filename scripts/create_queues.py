"""Create the standard and FIFO queues the bridges use in local runs.

Usage:
    python scripts/create_queues.py --endpoint-url http://localhost:4566
"""

from __future__ import annotations

import argparse
from typing import Any

import boto3

QUEUE_DEFINITIONS: list[dict[str, Any]] = [
    {"name": "sqsbridge-source"},
    {"name": "sqsbridge-sink"},
    {"name": "sqsbridge-source.fifo", "fifo": True},
    {"name": "sqsbridge-sink.fifo", "fifo": True},
]


def create_queues(sqs: Any, prefix: str = "") -> dict[str, str]:
    """Create every queue in QUEUE_DEFINITIONS. Existing queues are reused.

    Returns:
        Mapping of queue name to queue URL.
    """
    urls: dict[str, str] = {}
    for defn in QUEUE_DEFINITIONS:
        name = f"{prefix}{defn['name']}"
        attributes: dict[str, str] = {"VisibilityTimeout": "30"}
        if defn.get("fifo"):
            attributes["FifoQueue"] = "true"
        # CreateQueue is idempotent when the attributes match.
        resp = sqs.create_queue(QueueName=name, Attributes=attributes)
        urls[name] = resp["QueueUrl"]
        print(f"  Queue {name}: {resp['QueueUrl']}")
    return urls


def main() -> None:
    parser = argparse.ArgumentParser(description="Create SQS queues for sqsbridge")
    parser.add_argument("--endpoint-url", default=None, help="SQS endpoint (e.g. http://localhost:4566)")
    parser.add_argument("--prefix", default="", help="Queue name prefix (e.g. dev-)")
    parser.add_argument("--region", default="us-east-1", help="AWS region")
    args = parser.parse_args()

    kwargs: dict[str, Any] = {"region_name": args.region}
    if args.endpoint_url:
        kwargs["endpoint_url"] = args.endpoint_url

    sqs = boto3.client("sqs", **kwargs)

    print("Creating queues...")
    create_queues(sqs, prefix=args.prefix)

    print("Done!")


if __name__ == "__main__":
    main()
