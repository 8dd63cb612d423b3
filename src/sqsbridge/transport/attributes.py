"""Conversion between AttributeValue and the SQS MessageAttributes wire shape."""

from __future__ import annotations

from typing import Any, Mapping, assert_never

from sqsbridge.models.messages import (
    AttributeValue,
    BinaryAttribute,
    BinaryListAttribute,
    StringAttribute,
    StringListAttribute,
)


def to_wire(value: AttributeValue) -> dict[str, Any]:
    """DataType is always set; payloads only when present and non-empty."""
    wire: dict[str, Any] = {"DataType": value.data_type}
    match value:
        case StringAttribute():
            if value.value:
                wire["StringValue"] = value.value
        case BinaryAttribute():
            if value.value:
                wire["BinaryValue"] = value.value
        case StringListAttribute():
            if value.values:
                wire["StringListValues"] = list(value.values)
        case BinaryListAttribute():
            if value.values:
                wire["BinaryListValues"] = list(value.values)
        case _:
            assert_never(value)
    return wire


def attributes_to_wire(attributes: Mapping[str, AttributeValue]) -> dict[str, dict[str, Any]]:
    return {name: to_wire(value) for name, value in attributes.items()}


def from_wire(raw: Mapping[str, Any]) -> AttributeValue:
    data_type = raw.get("DataType", "String")
    if raw.get("StringValue") is not None:
        return StringAttribute(data_type=data_type, value=raw["StringValue"])
    if raw.get("BinaryValue") is not None:
        return BinaryAttribute(data_type=data_type, value=raw["BinaryValue"])
    if raw.get("BinaryListValues"):
        return BinaryListAttribute(data_type=data_type, values=raw["BinaryListValues"])
    return StringListAttribute(data_type=data_type, values=raw.get("StringListValues", []))


def attributes_from_wire(raw: Mapping[str, Mapping[str, Any]] | None) -> dict[str, AttributeValue]:
    if not raw:
        return {}
    return {name: from_wire(value) for name, value in raw.items()}
