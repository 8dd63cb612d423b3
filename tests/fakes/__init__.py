"""Shared test doubles: the in-memory transport plus STS and transport fakes."""

from __future__ import annotations

import threading
from datetime import datetime, timedelta, timezone
from typing import Any

from sqsbridge.core.exceptions import TransportError
from sqsbridge.transport.memory_transport import MemoryQueueTransport


class FakeStsClient:
    """Records AssumeRole requests and hands back numbered credentials."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self.requests: list[dict[str, Any]] = []

    def assume_role(self, **request: Any) -> dict[str, Any]:
        with self._lock:
            self.requests.append(request)
            n = len(self.requests)
        return {
            "Credentials": {
                "AccessKeyId": f"ASIAFAKE{n:04d}",
                "SecretAccessKey": f"secret-{n}",
                "SessionToken": f"token-{n}",
                "Expiration": datetime.now(timezone.utc) + timedelta(hours=1),
            }
        }


class FailingTransport(MemoryQueueTransport):
    """MemoryQueueTransport whose send() fails for bodies listed in ``fail_bodies``."""

    def __init__(self, fail_bodies: set[str]) -> None:
        super().__init__()
        self.fail_bodies = fail_bodies

    def send(self, url, body, group_id=None, dedup_id=None, attributes=None):
        if body in self.fail_bodies:
            raise TransportError("SendMessage", url, "ServiceUnavailable")
        return super().send(url, body, group_id, dedup_id, attributes)


__all__ = ["FailingTransport", "FakeStsClient", "MemoryQueueTransport"]
