"""GraphQL HTTP client implementation."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from .client import GraphQlClient
from .config import GraphQlClientConfig
from .decoder import new_record, unmarshal_graphql
from .envelope import decode_envelope, encode_request
from .exceptions import GraphQlErrors, HttpStatusError
from .query import construct_operation
from .transport import HttpxTransport, Transport
from .types import GraphQlResponse, ManualRequest, OperationType, ShapedRequest

logger = logging.getLogger(__name__)

_UNSET: Any = object()


class HttpGraphQlClient(GraphQlClient):
    """GraphQL client that POSTs JSON envelopes over HTTP.

    ``strict`` and ``headers`` may be changed between calls. ``headers`` is
    read on every call without copying, so it must not be mutated while
    calls are in flight.
    """

    def __init__(self, config: GraphQlClientConfig, transport: Transport | None = None) -> None:
        self._config = config
        self.url = config.url
        self.strict = config.strict
        self.headers = config.headers
        self._transport: Transport = transport or HttpxTransport()

    @classmethod
    def create(
        cls,
        url: str,
        http_client: httpx.AsyncClient | None = None,
        *,
        strict: bool = False,
        headers: dict[str, str] | None = None,
    ) -> HttpGraphQlClient:
        """Build a client for ``url``; without ``http_client`` a default httpx client is used."""
        config = GraphQlClientConfig(url=url, strict=strict, headers=dict(headers or {}))
        return cls(config, HttpxTransport(http_client))

    async def execute_query(
        self,
        request: Any,
        variables: dict[str, Any] | None = None,
        *,
        operation_name: str = "",
        timeout: float | None = _UNSET,
    ) -> Any:
        return await self._do(OperationType.QUERY, request, variables, operation_name, timeout)

    async def execute_mutation(
        self,
        request: Any,
        variables: dict[str, Any] | None = None,
        *,
        operation_name: str = "",
        timeout: float | None = _UNSET,
    ) -> Any:
        return await self._do(OperationType.MUTATION, request, variables, operation_name, timeout)

    async def execute_query_raw(
        self,
        request: Any,
        variables: dict[str, Any] | None = None,
        *,
        operation_name: str = "",
        timeout: float | None = _UNSET,
    ) -> Any:
        return await self._do_raw(OperationType.QUERY, request, variables, operation_name, timeout)

    async def execute_mutation_raw(
        self,
        request: Any,
        variables: dict[str, Any] | None = None,
        *,
        operation_name: str = "",
        timeout: float | None = _UNSET,
    ) -> Any:
        return await self._do_raw(
            OperationType.MUTATION, request, variables, operation_name, timeout
        )

    async def execute_manual(self, request: ManualRequest, *, timeout: float | None = _UNSET) -> Any:
        if not isinstance(request, ManualRequest):
            raise TypeError(f"expected ManualRequest, got {type(request).__name__}")
        return await self._do(OperationType.QUERY, request, None, "", timeout)

    def _prepare(
        self,
        op: OperationType,
        request: Any,
        variables: dict[str, Any] | None,
        name: str,
    ) -> tuple[str, dict[str, Any] | None, Any]:
        """Return the document, its variables and the decode target."""
        if isinstance(request, ManualRequest):
            if variables:
                raise ValueError("pass variables on the ManualRequest, not alongside it")
            return request.query, request.variables, request.result

        target = request.target if isinstance(request, ShapedRequest) else request
        if isinstance(target, type):
            target = new_record(target)
        return construct_operation(op, target, variables, name), variables, target

    async def _round_trip(
        self,
        document: str,
        variables: dict[str, Any] | None,
        timeout: float | None,
    ) -> GraphQlResponse[Any]:
        if timeout is _UNSET:
            timeout = self._config.timeout_seconds
        body = encode_request(document, variables)
        logger.debug("Sending GraphQL operation", extra={"url": self.url, "size": len(body)})
        resp = await self._transport.send(self.url, self.headers, body, timeout)
        if resp.status_code != 200:
            logger.warning(
                "GraphQL endpoint returned non-200 status",
                extra={"url": self.url, "status_code": resp.status_code},
            )
            raise HttpStatusError(resp.status_code, resp.reason_phrase, resp.body)
        return decode_envelope(resp.body)

    async def _do(
        self,
        op: OperationType,
        request: Any,
        variables: dict[str, Any] | None,
        name: str,
        timeout: float | None,
    ) -> Any:
        document, variables, target = self._prepare(op, request, variables, name)
        if target is None:
            raise ValueError("ManualRequest.result must be set; use the raw variants for undecoded data")
        response = await self._round_trip(document, variables, timeout)
        if response.data is not None:
            unmarshal_graphql(response.data, target, self.strict)
        errors = GraphQlErrors.from_entries(response.errors, response.data)
        if errors is not None:
            logger.debug("GraphQL response carried errors", extra={"count": len(errors.errors)})
            raise errors
        return target

    async def _do_raw(
        self,
        op: OperationType,
        request: Any,
        variables: dict[str, Any] | None,
        name: str,
        timeout: float | None,
    ) -> Any:
        document, variables, _ = self._prepare(op, request, variables, name)
        response = await self._round_trip(document, variables, timeout)
        errors = GraphQlErrors.from_entries(response.errors, response.data)
        if errors is not None:
            raise errors
        return response.data
