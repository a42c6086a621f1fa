"""GraphQL types."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Generic, TypeVar

T = TypeVar("T")


class OperationType(str, Enum):
    """Root operation kind."""

    QUERY = "query"
    MUTATION = "mutation"


class ID(str):
    """GraphQL ``ID`` scalar."""


@dataclass(frozen=True)
class TypedValue:
    """Variable value with an explicit GraphQL type, e.g. ``TypedValue("DateTime", None)``."""

    graphql_type: str
    value: Any


@dataclass
class GraphQlQuery:
    """GraphQL query or mutation as sent on the wire."""

    query: str
    variables: dict[str, Any] | None = None


@dataclass
class ErrorLocation:
    """Error location in a GraphQL document."""

    line: int
    column: int

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ErrorLocation:
        return cls(line=int(data.get("line") or 0), column=int(data.get("column") or 0))


@dataclass
class GraphQlError:
    """GraphQL error."""

    message: str
    locations: list[ErrorLocation] | None = None
    path: list[Any] | None = None
    extensions: Any = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> GraphQlError:
        locations = data.get("locations")
        return cls(
            message=str(data.get("message", "")),
            locations=(
                [ErrorLocation.from_dict(loc) for loc in locations]
                if locations is not None
                else None
            ),
            path=data.get("path"),
            extensions=data.get("extensions"),
        )


@dataclass
class GraphQlResponse(Generic[T]):
    """GraphQL response envelope."""

    data: T | None = None
    errors: list[GraphQlError] | None = None

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)


@dataclass
class ManualRequest:
    """Hand-written document, its variables, and where to decode the result.

    ``result`` is the decode target; the request itself is never decoded into.
    """

    query: str
    variables: dict[str, Any] = field(default_factory=dict)
    result: Any = None


@dataclass
class ShapedRequest:
    """Typed shape whose structure implies the document."""

    target: Any
