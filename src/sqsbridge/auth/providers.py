"""Credentials providers and the name -> factory registry.

Providers are built with no arguments and then handed their settings through
``configure(options)``. The registry replaces loading provider classes by
name at runtime.
"""

from __future__ import annotations

from typing import Any, Callable, Mapping

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from sqsbridge.core import guard
from sqsbridge.core.exceptions import ConfigurationError, TransportError
from sqsbridge.core.lazy import OnceCell
from sqsbridge.core.protocols import ICredentialsProvider
from sqsbridge.models.messages import Credentials


def _required(options: Mapping[str, Any], name: str) -> str:
    value = options.get(name)
    if value is None or guard.is_blank(str(value)):
        raise ConfigurationError(f"The field '{name}' should not be null or empty")
    return str(value)


def _optional(options: Mapping[str, Any], name: str) -> str | None:
    value = options.get(name)
    if value is None or guard.is_blank(str(value)):
        return None
    return str(value)


class DefaultChainProvider:
    """Environment, shared config files, container and instance roles."""

    def __init__(self) -> None:
        self._region: str | None = None

    def configure(self, options: Mapping[str, str]) -> None:
        self._region = _optional(options, "region")

    def resolve(self) -> Credentials:
        creds = boto3.session.Session(region_name=self._region).get_credentials()
        if creds is None:
            raise ConfigurationError("No credentials found in the default AWS credential chain")
        frozen = creds.get_frozen_credentials()
        return Credentials(
            access_key=frozen.access_key,
            secret_key=frozen.secret_key,
            session_token=frozen.token,
        )


class StaticCredentialsProvider:
    """Fixed access key / secret taken from configuration."""

    def __init__(self) -> None:
        self._credentials: Credentials | None = None

    def configure(self, options: Mapping[str, str]) -> None:
        self._credentials = Credentials(
            access_key=_required(options, "access_key_id"),
            secret_key=_required(options, "secret_access_key"),
        )

    def resolve(self) -> Credentials:
        if self._credentials is None:
            raise ConfigurationError("StaticCredentialsProvider used before configure()")
        return self._credentials


def _sts_client(options: Mapping[str, str]) -> Any:
    kwargs: dict = {"region_name": options["region"]}
    if options.get("endpoint_url"):
        kwargs["endpoint_url"] = options["endpoint_url"]
    return boto3.client("sts", **kwargs)


class AssumeRoleCredentialsProvider:
    """Temporary credentials from STS AssumeRole.

    The STS client is built once, on first resolve(), and shared by every
    later call. Credentials are not cached: each resolve() issues a new
    AssumeRole request.
    """

    def __init__(self, client_factory: Callable[[Mapping[str, str]], Any] | None = None) -> None:
        self._client_factory = client_factory or _sts_client
        self._client: OnceCell[Any] = OnceCell()
        self._options: dict[str, str] = {}
        self._role_arn: str | None = None
        self._session_name: str | None = None
        self._external_id: str | None = None

    def configure(self, options: Mapping[str, str]) -> None:
        self._role_arn = _required(options, "role_arn")
        self._session_name = _required(options, "session_name")
        _required(options, "region")
        self._external_id = _optional(options, "external_id")
        self._options = dict(options)

    @property
    def client(self) -> Any:
        return self._client.get_or_init(lambda: self._client_factory(self._options))

    def resolve(self) -> Credentials:
        if self._role_arn is None or self._session_name is None:
            raise ConfigurationError("AssumeRoleCredentialsProvider used before configure()")

        request: dict[str, str] = {
            "RoleArn": self._role_arn,
            "RoleSessionName": self._session_name,
        }
        if self._external_id:
            request["ExternalId"] = self._external_id

        try:
            resp = self.client.assume_role(**request)
        except (ClientError, BotoCoreError) as exc:
            raise TransportError("AssumeRole", self._role_arn, str(exc)) from exc

        creds = resp["Credentials"]
        return Credentials(
            access_key=creds["AccessKeyId"],
            secret_key=creds["SecretAccessKey"],
            session_token=creds.get("SessionToken"),
            expiration=creds.get("Expiration"),
        )


ProviderFactory = Callable[[], ICredentialsProvider]

PROVIDERS: dict[str, ProviderFactory] = {
    "default": DefaultChainProvider,
    "static": StaticCredentialsProvider,
    "assume_role": AssumeRoleCredentialsProvider,
}

# Names carried over from older connector configurations.
ALIASES: dict[str, str] = {
    "com.amazonaws.auth.DefaultAWSCredentialsProviderChain": "default",
    "software.amazon.awssdk.auth.credentials.DefaultCredentialsProvider": "default",
}


def canonical_name(name: str | None) -> str:
    if guard.is_blank(name):
        return "default"
    name = name.strip()  # type: ignore[union-attr]
    return ALIASES.get(name, name)


def register_provider(name: str, factory: ProviderFactory) -> None:
    PROVIDERS[name] = factory
