"""Bridge configuration using pydantic-settings with grouped env prefixes."""

from __future__ import annotations

from typing import Any

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings

from sqsbridge.core import guard
from sqsbridge.models.messages import QueueEndpoint

DEFAULT_PROVIDER = "default"


class CredentialsConfig(BaseSettings):
    """Credentials provider selection and its sub-configuration."""

    model_config = {"env_prefix": "SQSBRIDGE_CREDENTIALS_", "frozen": True}

    provider: str = DEFAULT_PROVIDER
    role_arn: str | None = None
    session_name: str | None = None
    external_id: str | None = None
    access_key_id: str | None = None
    secret_access_key: str | None = None
    region: str = "us-east-1"
    endpoint_url: str | None = None  # STS override (LocalStack)
    options: dict[str, str] = Field(default_factory=dict)

    def provider_options(self) -> dict[str, str]:
        """Flatten into the key/value map handed to provider.configure()."""
        opts: dict[str, str] = dict(self.options)
        for name in ("role_arn", "session_name", "external_id",
                     "access_key_id", "secret_access_key", "region", "endpoint_url"):
            value = getattr(self, name)
            if value is not None:
                opts[name] = value
        return opts


class LoggingConfig(BaseSettings):
    """Log output configuration."""

    model_config = {"env_prefix": "SQSBRIDGE_LOG_"}

    level: str = "INFO"
    json_format: bool = True


class QueueConfig(BaseSettings):
    """Settings shared by the source and sink directions."""

    model_config = {"env_prefix": "SQSBRIDGE_", "frozen": True}

    queue_url: str
    topics: str = ""
    region: str = "us-east-1"
    endpoint_url: str | None = None  # LocalStack override, not the queue URL
    message_attributes_enabled: bool = False
    message_attributes_include_list: str = ""
    credentials: CredentialsConfig = Field(default_factory=CredentialsConfig)

    @field_validator("queue_url")
    @classmethod
    def _check_queue_url(cls, value: str) -> str:
        guard.verify_valid_url(value)
        return value

    @field_validator("message_attributes_include_list", mode="before")
    @classmethod
    def _join_include_list(cls, value: Any) -> Any:
        if isinstance(value, (list, tuple)):
            return ",".join(value)
        return value

    @property
    def attribute_names(self) -> list[str]:
        """Include-list entries; always empty when attribute mapping is off."""
        if not self.message_attributes_enabled:
            return []
        return [n.strip() for n in self.message_attributes_include_list.split(",") if n.strip()]

    def endpoint(self) -> QueueEndpoint:
        return QueueEndpoint(url=self.queue_url, region=self.region)


class SourceConfig(QueueConfig):
    """Queue -> log direction."""

    model_config = {"env_prefix": "SQSBRIDGE_SOURCE_", "frozen": True}

    max_messages: int = Field(default=1, ge=0, le=10)
    wait_time_seconds: int = Field(default=1, ge=0)
    message_attribute_partition_key: str = ""

    @field_validator("topics")
    @classmethod
    def _require_topic(cls, value: str) -> str:
        guard.verify_not_null_or_empty(value, "topics")
        return value

    @property
    def partition_by_attribute(self) -> bool:
        return self.message_attributes_enabled and not guard.is_blank(
            self.message_attribute_partition_key
        )


class SinkConfig(QueueConfig):
    """Log -> queue direction."""

    model_config = {"env_prefix": "SQSBRIDGE_SINK_", "frozen": True}

    topics_regex: str = ""
    raise_on_send_error: bool = False

    @model_validator(mode="after")
    def _one_topic_selector(self) -> SinkConfig:
        if bool(self.topics) == bool(self.topics_regex):
            raise ValueError("exactly one of 'topics' or 'topics_regex' must be set")
        return self
