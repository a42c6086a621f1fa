"""k1s0 GraphQL client library."""

from .types import (
    ID,
    ErrorLocation,
    GraphQlError,
    GraphQlQuery,
    GraphQlResponse,
    ManualRequest,
    OperationType,
    ShapedRequest,
    TypedValue,
)
from .exceptions import (
    DecodeProblem,
    EncodeError,
    EnvelopeDecodeError,
    GraphQlClientError,
    GraphQlErrors,
    HttpStatusError,
    QueryBuildError,
    StructuralDecodeError,
    TransportError,
)
from .config import GraphQlClientConfig
from .decoder import decode_value, graphql_field, unmarshal_graphql
from .envelope import decode_envelope, decode_request, encode_request
from .query import construct_mutation, construct_query
from .transport import HttpxTransport, InMemoryTransport, Transport, TransportResponse
from .client import GraphQlClient
from .http_client import HttpGraphQlClient

__all__ = [
    "DecodeProblem",
    "EncodeError",
    "EnvelopeDecodeError",
    "ErrorLocation",
    "GraphQlClient",
    "GraphQlClientConfig",
    "GraphQlClientError",
    "GraphQlError",
    "GraphQlErrors",
    "GraphQlQuery",
    "GraphQlResponse",
    "HttpGraphQlClient",
    "HttpStatusError",
    "HttpxTransport",
    "ID",
    "InMemoryTransport",
    "ManualRequest",
    "OperationType",
    "QueryBuildError",
    "ShapedRequest",
    "StructuralDecodeError",
    "Transport",
    "TransportError",
    "TransportResponse",
    "TypedValue",
    "construct_mutation",
    "construct_query",
    "decode_envelope",
    "decode_request",
    "decode_value",
    "encode_request",
    "graphql_field",
    "unmarshal_graphql",
]
