"""Queue messages, log records, and the values that flow between them.

QueueMessage is what the transport hands out; LogRecord is what the bridges
exchange with the log. SourcePosition is the checkpoint that ties a record
back to the queue delivery it came from.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from enum import StrEnum
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, Field, field_validator

from sqsbridge.core import guard

FIFO_SUFFIX = ".fifo"
STRING_DATA_TYPE = "String"


def is_fifo_url(url: str) -> bool:
    return url.endswith(FIFO_SUFFIX)


class QueueEndpoint(BaseModel):
    """An SQS queue URL plus the region it lives in."""

    model_config = {"frozen": True}

    url: str
    region: str

    @field_validator("url")
    @classmethod
    def _check_url(cls, value: str) -> str:
        guard.verify_valid_url(value)
        return value

    @property
    def is_fifo(self) -> bool:
        return is_fifo_url(self.url)


# ---------------------------------------------------------------------------
# Message attribute values
# ---------------------------------------------------------------------------

class StringAttribute(BaseModel):
    model_config = {"frozen": True}

    kind: Literal["string"] = "string"
    data_type: str = STRING_DATA_TYPE  # String, Number, String.<custom>, ...
    value: str

    @property
    def is_plain_string(self) -> bool:
        """True for String and String.<custom> data types (not Number)."""
        return self.data_type.split(".", 1)[0] == STRING_DATA_TYPE


class BinaryAttribute(BaseModel):
    model_config = {"frozen": True}

    kind: Literal["binary"] = "binary"
    data_type: str = "Binary"
    value: bytes


class StringListAttribute(BaseModel):
    model_config = {"frozen": True}

    kind: Literal["string_list"] = "string_list"
    data_type: str
    values: list[str] = Field(default_factory=list)


class BinaryListAttribute(BaseModel):
    model_config = {"frozen": True}

    kind: Literal["binary_list"] = "binary_list"
    data_type: str
    values: list[bytes] = Field(default_factory=list)


AttributeValue = Annotated[
    Union[StringAttribute, BinaryAttribute, StringListAttribute, BinaryListAttribute],
    Field(discriminator="kind"),
]


class QueueMessage(BaseModel):
    """A single delivery received from a queue."""

    model_config = {"frozen": True}

    message_id: str
    body: str
    receipt_handle: str
    attributes: dict[str, AttributeValue] = Field(default_factory=dict)

    def string_attributes(self) -> dict[str, str]:
        """String-typed attributes in receive order."""
        return {
            name: attr.value
            for name, attr in self.attributes.items()
            if isinstance(attr, StringAttribute) and attr.is_plain_string
        }


# ---------------------------------------------------------------------------
# Log records
# ---------------------------------------------------------------------------

class HeaderType(StrEnum):
    STRING = "STRING"
    BYTES = "BYTES"
    INT = "INT"
    FLOAT = "FLOAT"
    BOOLEAN = "BOOLEAN"
    NULL = "NULL"


class RecordHeader(BaseModel):
    model_config = {"frozen": True}

    key: str
    value: Any = None
    value_type: HeaderType = HeaderType.STRING


class SourcePosition(BaseModel):
    """Everything needed to acknowledge the queue delivery behind a record."""

    model_config = {"frozen": True}

    queue_url: str
    message_id: str
    receipt_handle: str


class LogRecord(BaseModel):
    """A record written to, or read from, a log topic partition."""

    model_config = {"frozen": True}

    topic: str
    partition: Optional[int] = None
    offset: Optional[int] = None
    key: Optional[str] = None
    value: Optional[str] = None
    headers: list[RecordHeader] = Field(default_factory=list)
    position: Optional[SourcePosition] = None

    def string_headers(self) -> dict[str, str]:
        return {
            h.key: h.value
            for h in self.headers
            if h.value_type == HeaderType.STRING and isinstance(h.value, str)
        }


# ---------------------------------------------------------------------------
# Credentials
# ---------------------------------------------------------------------------

class Credentials(BaseModel):
    """Resolved AWS credentials. Held in memory only."""

    model_config = {"frozen": True}

    access_key: str
    secret_key: str = Field(repr=False)
    session_token: Optional[str] = Field(default=None, repr=False)
    expiration: Optional[datetime] = None

    def as_metadata(self, default_ttl: timedelta = timedelta(hours=1)) -> dict[str, Any]:
        """Render in the shape botocore's RefreshableCredentials expects.

        Non-expiring credentials are given ``default_ttl`` so the provider is
        simply consulted again later.
        """
        expiry = self.expiration or datetime.now(timezone.utc) + default_ttl
        return {
            "access_key": self.access_key,
            "secret_key": self.secret_key,
            "token": self.session_token,
            "expiry_time": expiry.isoformat(),
        }
