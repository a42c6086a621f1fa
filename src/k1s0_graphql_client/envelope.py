"""Request/response envelope codec."""

from __future__ import annotations

import dataclasses
import json
from enum import Enum
from typing import Any

from .exceptions import EncodeError, EnvelopeDecodeError
from .types import GraphQlError, GraphQlQuery, GraphQlResponse, TypedValue


def to_json_value(value: Any) -> Any:
    """Convert a variable value into plain JSON types."""
    if isinstance(value, TypedValue):
        return to_json_value(value.value)
    if value is None or isinstance(value, (bool, int, float, str)):
        return value
    if isinstance(value, Enum):
        return to_json_value(value.value)
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {f.name: to_json_value(getattr(value, f.name)) for f in dataclasses.fields(value)}
    if isinstance(value, dict):
        return {str(k): to_json_value(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_json_value(v) for v in value]
    raise TypeError(f"value of type {type(value).__name__} is not JSON serializable")


def encode_request(query: str, variables: dict[str, Any] | None = None) -> bytes:
    """Serialize ``{query, variables}``; ``variables`` is omitted when empty."""
    payload: dict[str, Any] = {"query": query}
    try:
        if variables:
            payload["variables"] = to_json_value(variables)
        return json.dumps(payload).encode("utf-8")
    except (TypeError, ValueError) as e:
        raise EncodeError(f"Failed to encode request: {e}", cause=e) from e


def decode_request(body: bytes) -> GraphQlQuery:
    """Parse a request body produced by :func:`encode_request`."""
    try:
        payload = json.loads(body)
    except ValueError as e:
        raise EnvelopeDecodeError(f"Failed to decode request: {e}", cause=e) from e
    if not isinstance(payload, dict) or not isinstance(payload.get("query"), str):
        raise EnvelopeDecodeError("Failed to decode request: missing query")
    return GraphQlQuery(query=payload["query"], variables=payload.get("variables"))


def decode_envelope(body: bytes) -> GraphQlResponse[Any]:
    """Parse the top-level ``{data, errors}`` response.

    Absent and null ``data`` both decode to ``None``.
    """
    try:
        payload = json.loads(body)
    except ValueError as e:
        raise EnvelopeDecodeError(f"Failed to decode response: {e}", cause=e) from e
    if not isinstance(payload, dict):
        raise EnvelopeDecodeError(
            f"Failed to decode response: expected JSON object, got {type(payload).__name__}"
        )

    raw_errors = payload.get("errors")
    errors: list[GraphQlError] | None = None
    if raw_errors is not None:
        if not isinstance(raw_errors, list):
            raise EnvelopeDecodeError("Failed to decode response: errors is not an array")
        try:
            errors = [GraphQlError.from_dict(e) for e in raw_errors] or None
        except (AttributeError, TypeError, ValueError) as e:
            raise EnvelopeDecodeError(f"Failed to decode errors: {e}", cause=e) from e

    return GraphQlResponse(data=payload.get("data"), errors=errors)
