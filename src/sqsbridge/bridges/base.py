"""Lifecycle shared by the source and sink bridges."""

from __future__ import annotations

import logging
from enum import StrEnum
from typing import Any, Callable, ClassVar, Generic, Mapping, TypeVar

from pydantic import ValidationError as PydanticValidationError

from sqsbridge import __version__
from sqsbridge.auth.resolver import CredentialResolver
from sqsbridge.core.config import QueueConfig
from sqsbridge.core.exceptions import ConfigurationError, IllegalStateError, ValidationError
from sqsbridge.core.protocols import IQueueTransport
from sqsbridge.transport import create_transport

C = TypeVar("C", bound=QueueConfig)

TransportFactory = Callable[[QueueConfig], IQueueTransport]


class BridgeState(StrEnum):
    STOPPED = "STOPPED"
    STARTED = "STARTED"
    POLLING = "POLLING"
    EMITTING = "EMITTING"
    COMMITTING = "COMMITTING"


class BaseBridge(Generic[C]):
    """Common start/stop handling and dependency wiring.

    The transport factory, credentials resolver, version string, and logger
    are injected at construction time. A bridge is driven by one scheduler
    thread and is not reentrant.
    """

    config_class: ClassVar[type[QueueConfig]] = QueueConfig

    def __init__(
        self,
        *,
        transport_factory: TransportFactory | None = None,
        resolver: CredentialResolver | None = None,
        version: str = __version__,
        logger: logging.Logger | None = None,
    ) -> None:
        self._transport_factory = transport_factory
        self._resolver = resolver
        self.version = version
        self._log = logger or logging.getLogger(type(self).__module__)
        self._config: C | None = None
        self._transport: IQueueTransport | None = None
        self.state = BridgeState.STOPPED

    @property
    def config(self) -> C | None:
        return self._config

    @property
    def transport(self) -> IQueueTransport | None:
        return self._transport

    def _parse_config(self, config: C | Mapping[str, Any] | None) -> C:
        if config is None:
            raise ValidationError("Task properties should not be null")
        if isinstance(config, self.config_class):
            return config  # type: ignore[return-value]
        if isinstance(config, Mapping):
            try:
                return self.config_class(**config)  # type: ignore[return-value]
            except PydanticValidationError as exc:
                raise ConfigurationError(
                    f"Invalid {self.config_class.__name__}: {exc}"
                ) from exc
        raise ValidationError(
            f"Expected {self.config_class.__name__} or a mapping, got {type(config).__name__}"
        )

    def start(self, config: C | Mapping[str, Any] | None) -> None:
        self._log.info("task.start")
        parsed = self._parse_config(config)
        if self._transport is not None:
            self._transport.close()
            self._transport = None
            self.state = BridgeState.STOPPED

        factory = self._transport_factory
        if factory is None:
            transport = create_transport(parsed, resolver=self._resolver, logger=self._log)
        else:
            transport = factory(parsed)

        self._config = parsed
        self._transport = transport
        self.state = BridgeState.STARTED
        self._log.info("task.start.OK, sqs.queue.url=%s, topics=%s", parsed.queue_url,
                       parsed.topics or getattr(parsed, "topics_regex", ""))

    def _require_started(self) -> tuple[C, IQueueTransport]:
        if self._config is None or self._transport is None:
            raise IllegalStateError("Task is not properly initialized")
        return self._config, self._transport

    def stop(self) -> None:
        if self._transport is None:
            return
        self._transport.close()
        self._transport = None
        self.state = BridgeState.STOPPED
        self._log.info("task.stop:OK")
