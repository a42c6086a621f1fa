"""GraphQL client exceptions."""

from __future__ import annotations

import json
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from enum import Enum, auto
from typing import Any

from .types import GraphQlError


class GraphQlClientError(Exception):
    """GraphQL client error."""

    class Code(Enum):
        TRANSPORT = auto()
        TIMEOUT = auto()
        HTTP_STATUS = auto()
        ENCODE = auto()
        ENVELOPE_DECODE = auto()
        STRUCTURAL_DECODE = auto()
        GRAPHQL_ERRORS = auto()
        QUERY_BUILD = auto()

    def __init__(
        self,
        message: str,
        code: GraphQlClientError.Code,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        if cause is not None:
            self.__cause__ = cause


class TransportError(GraphQlClientError):
    """Network failure or expired deadline."""


class HttpStatusError(GraphQlClientError):
    """Server answered with a status other than 200 OK.

    The body is kept as raw text and never parsed as an envelope.
    """

    def __init__(self, status_code: int, reason_phrase: str, body: bytes) -> None:
        self.status_code = status_code
        self.reason_phrase = reason_phrase
        self.body = body
        text = body.decode("utf-8", errors="replace")
        super().__init__(
            f"non-200 OK status code: {status_code} {reason_phrase} body: {json.dumps(text, ensure_ascii=False)}",
            GraphQlClientError.Code.HTTP_STATUS,
        )


class EncodeError(GraphQlClientError):
    """Request envelope could not be serialized."""

    def __init__(self, message: str, cause: Exception | None = None) -> None:
        super().__init__(message, GraphQlClientError.Code.ENCODE, cause)


class EnvelopeDecodeError(GraphQlClientError):
    """Response body is not a valid GraphQL envelope."""

    def __init__(self, message: str, cause: Exception | None = None) -> None:
        super().__init__(message, GraphQlClientError.Code.ENVELOPE_DECODE, cause)


class QueryBuildError(GraphQlClientError):
    """Shape or variables cannot be rendered into a document."""

    def __init__(self, message: str) -> None:
        super().__init__(message, GraphQlClientError.Code.QUERY_BUILD)


@dataclass
class DecodeProblem:
    """Single mismatch found while decoding ``data``."""

    path: str
    description: str

    def __str__(self) -> str:
        return f"{self.path or '<root>'}: {self.description}"


class StructuralDecodeError(GraphQlClientError):
    """``data`` does not fit the target type.

    Every mismatch in the tree is reported; fields that decoded cleanly
    stay populated on the target.
    """

    def __init__(self, problems: Sequence[DecodeProblem]) -> None:
        self.problems = list(problems)
        super().__init__(
            "struct field decode failed: " + "; ".join(str(p) for p in self.problems),
            GraphQlClientError.Code.STRUCTURAL_DECODE,
        )


class GraphQlErrors(GraphQlClientError):
    """Aggregated ``errors`` entries from a GraphQL response.

    ``data`` holds the raw response data that arrived alongside the errors,
    which may already have been decoded into the caller's target.
    """

    def __init__(self, errors: Sequence[GraphQlError], data: Any = None) -> None:
        if not errors:
            raise ValueError("GraphQlErrors requires at least one error entry")
        self.errors = list(errors)
        self.data = data
        super().__init__(format_errors(self.errors), GraphQlClientError.Code.GRAPHQL_ERRORS)

    @classmethod
    def from_entries(
        cls, errors: Sequence[GraphQlError] | None, data: Any = None
    ) -> GraphQlErrors | None:
        if not errors:
            return None
        return cls(errors, data)


def format_errors(errors: Iterable[GraphQlError]) -> str:
    """Concatenate error entries with no separator between them."""
    parts = []
    for err in errors:
        locations = " ".join(
            f"{{Line:{loc.line} Column:{loc.column}}}" for loc in err.locations or []
        )
        parts.append(f"Message: {err.message}, Locations: [{locations}]")
    return "".join(parts)
