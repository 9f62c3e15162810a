"""Validation of the JSON request bodies accepted by the service."""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

MAX_DIMENSION = 50000
MAX_TREE_HEIGHT = 30


class ValidationError(ValueError):
    """Raised when a request body is malformed or out of range."""


@dataclass(frozen=True)
class EstateRequest:
    length: int
    width: int


@dataclass(frozen=True)
class TreeRequest:
    x: int
    y: int
    height: int


def _decode(payload: Any) -> Mapping[str, Any]:
    if isinstance(payload, (bytes, bytearray, str)):
        try:
            payload = json.loads(payload)
        except (ValueError, UnicodeDecodeError) as exc:
            raise ValidationError(f"malformed JSON body: {exc}") from exc
    if payload is None:
        return {}
    if not isinstance(payload, Mapping):
        raise ValidationError("request body must be a JSON object")
    return payload


def _bounded_int(body: Mapping[str, Any], key: str, upper: int) -> int:
    value = body.get(key)
    if value is None:
        raise ValidationError(f"{key} is required")
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(f"{key} must be an integer")
    if not 1 <= value <= upper:
        raise ValidationError(f"{key} must be between 1 and {upper}")
    return value


def validate_estate_request(payload: Any) -> EstateRequest:
    """Check an estate creation body (raw JSON or decoded mapping)."""
    body = _decode(payload)
    return EstateRequest(
        length=_bounded_int(body, "length", MAX_DIMENSION),
        width=_bounded_int(body, "width", MAX_DIMENSION),
    )


def validate_tree_request(payload: Any) -> TreeRequest:
    """Check a tree planting body (raw JSON or decoded mapping)."""
    body = _decode(payload)
    return TreeRequest(
        x=_bounded_int(body, "x", MAX_DIMENSION),
        y=_bounded_int(body, "y", MAX_DIMENSION),
        height=_bounded_int(body, "height", MAX_TREE_HEIGHT),
    )