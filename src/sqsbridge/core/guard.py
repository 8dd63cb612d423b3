"""Argument checks that raise ValidationError when they fail."""

from __future__ import annotations

from typing import Any
from urllib.parse import urlsplit

from sqsbridge.core.exceptions import ValidationError


def is_blank(value: str | None) -> bool:
    return value is None or not value.strip()


def verify_not_null(value: Any, name: str) -> None:
    if value is None:
        raise ValidationError(f"{name} should not be null")


def verify_not_null_or_empty(value: str | None, name: str) -> None:
    if is_blank(value):
        raise ValidationError(f"{name} should not be null or empty")


def verify_valid_url(url: str | None) -> None:
    """Require an absolute URL with a scheme and a host."""
    verify_not_null_or_empty(url, "url")
    try:
        parts = urlsplit(url)
        parts.port  # noqa: B018 - raises on a malformed port
    except ValueError as exc:
        raise ValidationError(f"Invalid Url: {url}") from exc
    if not parts.scheme or not parts.netloc:
        raise ValidationError(f"Invalid Url: {url}")


def verify_non_negative(value: int, name: str) -> None:
    if value < 0:
        raise ValidationError(f"{name} should not be negative, got {value}")


def verify_in_range(value: int, low: int, high: int, name: str) -> None:
    if value < low or value > high:
        raise ValidationError(f"{name} must be in range {low}..{high}, got {value}")
