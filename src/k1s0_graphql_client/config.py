"""GraphQL client configuration."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass
class GraphQlClientConfig:
    """Configuration for the HTTP GraphQL client.

    ``strict`` restricts decoding to ``graphql`` tags. ``headers`` are sent
    with every request. ``timeout_seconds=None`` disables the per-call deadline.
    """

    url: str
    timeout_seconds: float | None = 10.0
    strict: bool = False
    headers: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> GraphQlClientConfig:
        return cls(
            url=data["url"],
            timeout_seconds=data.get("timeout_seconds", 10.0),
            strict=bool(data.get("strict", False)),
            headers={str(k): str(v) for k, v in (data.get("headers") or {}).items()},
        )
