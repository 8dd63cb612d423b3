"""sqsbridge exception hierarchy."""

from __future__ import annotations


class BridgeError(Exception):
    """Base exception for all sqsbridge errors."""


class ValidationError(BridgeError, ValueError):
    """Malformed URL, missing field, or out-of-range argument."""


class IllegalArgumentError(ValidationError):
    """Argument is structurally unusable for the requested operation."""


class ConfigurationError(BridgeError):
    """Configuration is incomplete or cannot be used to build a component."""


class ProviderLoadError(ConfigurationError):
    """Credentials provider could not be located, instantiated, or configured."""

    def __init__(self, provider: str, message: str) -> None:
        self.provider = provider
        super().__init__(f"Invalid credentials provider {provider!r}: {message}")


class IllegalStateError(BridgeError, RuntimeError):
    """Operation invoked before start() or after stop()."""


class TransportError(BridgeError):
    """An AWS call (SQS or STS) was rejected or failed on the network."""

    def __init__(self, operation: str, resource: str, message: str) -> None:
        self.operation = operation
        self.resource = resource
        super().__init__(f"{operation} failed for {resource!r}: {message}")
