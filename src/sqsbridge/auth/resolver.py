"""CredentialResolver: turns a CredentialsConfig into a working provider."""

from __future__ import annotations

import logging
import threading
from typing import Mapping

from sqsbridge.auth.providers import PROVIDERS, DefaultChainProvider, ProviderFactory, canonical_name
from sqsbridge.core.config import CredentialsConfig
from sqsbridge.core.exceptions import ProviderLoadError
from sqsbridge.core.lazy import OnceCell
from sqsbridge.core.protocols import IConfigurable, ICredentialsProvider
from sqsbridge.models.messages import Credentials

_logger = logging.getLogger(__name__)

_CacheKey = tuple[str, tuple[tuple[str, str], ...]]


class CredentialResolver:
    """Loads, configures, and caches credentials providers.

    One provider is kept per distinct configuration for the lifetime of the
    resolver, so an assume-role provider (and the STS client it holds) is
    built once no matter how many threads ask for it first.
    """

    def __init__(self, registry: Mapping[str, ProviderFactory] | None = None,
                 logger: logging.Logger | None = None) -> None:
        self._registry = registry if registry is not None else PROVIDERS
        self._log = logger or _logger
        self._lock = threading.Lock()
        self._providers: dict[_CacheKey, OnceCell[ICredentialsProvider]] = {}

    def uses_default_chain(self, config: CredentialsConfig) -> bool:
        return canonical_name(config.provider) == "default"

    def load_provider(self, config: CredentialsConfig) -> ICredentialsProvider:
        """Build and configure a fresh provider. Raises ProviderLoadError."""
        name = canonical_name(config.provider)
        factory = self._registry.get(name)
        if factory is None:
            raise ProviderLoadError(config.provider, "no provider registered under this name")

        try:
            provider = factory()
        except Exception as exc:
            raise ProviderLoadError(config.provider, f"could not instantiate: {exc}") from exc

        if isinstance(provider, IConfigurable):
            try:
                provider.configure(config.provider_options())
            except Exception as exc:
                raise ProviderLoadError(config.provider, f"could not configure: {exc}") from exc

        if not isinstance(provider, ICredentialsProvider):
            raise ProviderLoadError(config.provider, "object does not implement resolve()")

        self._log.info("Loaded credentials provider %s", name)
        return provider

    def provider_for(self, config: CredentialsConfig) -> ICredentialsProvider:
        """Cached provider for ``config``; built on first use."""
        key: _CacheKey = (
            canonical_name(config.provider),
            tuple(sorted(config.provider_options().items())),
        )
        with self._lock:
            cell = self._providers.setdefault(key, OnceCell())
        return cell.get_or_init(lambda: self.load_provider(config))

    def resolve(self, config: CredentialsConfig) -> Credentials:
        """Return fresh credentials for ``config``."""
        if self.uses_default_chain(config):
            provider = DefaultChainProvider()
            provider.configure({"region": config.region})
            return provider.resolve()
        return self.provider_for(config).resolve()

    def clear(self) -> None:
        """Drop every cached provider."""
        with self._lock:
            self._providers.clear()
