"""HTTP transport adapters."""

from __future__ import annotations

import asyncio
import json
from collections.abc import Mapping
from dataclasses import dataclass
from http import HTTPStatus
from typing import Protocol

import httpx

from .envelope import decode_request
from .exceptions import GraphQlClientError, TransportError


@dataclass
class TransportResponse:
    """Status and raw body of one HTTP round trip."""

    status_code: int
    reason_phrase: str
    body: bytes


class Transport(Protocol):
    """Sends one POST and returns the raw response."""

    async def send(
        self,
        url: str,
        headers: Mapping[str, str],
        body: bytes,
        timeout: float | None = None,
    ) -> TransportResponse: ...


class HttpxTransport:
    """httpx-based transport.

    An injected ``httpx.AsyncClient`` is reused across calls and left open;
    without one, a client is created and closed per call.
    """

    def __init__(self, http_client: httpx.AsyncClient | None = None) -> None:
        self._http_client = http_client

    async def send(
        self,
        url: str,
        headers: Mapping[str, str],
        body: bytes,
        timeout: float | None = None,
    ) -> TransportResponse:
        request_headers = {"Content-Type": "application/json", **headers}
        try:
            async with asyncio.timeout(timeout):
                if self._http_client is not None:
                    resp = await self._http_client.post(url, content=body, headers=request_headers)
                else:
                    async with httpx.AsyncClient() as client:
                        resp = await client.post(url, content=body, headers=request_headers)
        except TimeoutError as e:
            raise TransportError(
                f"Request to {url} timed out after {timeout}s",
                GraphQlClientError.Code.TIMEOUT,
                cause=e,
            ) from e
        except httpx.TimeoutException as e:
            raise TransportError(
                f"Request to {url} timed out: {e}",
                GraphQlClientError.Code.TIMEOUT,
                cause=e,
            ) from e
        except httpx.HTTPError as e:
            raise TransportError(
                f"Request to {url} failed: {e}",
                GraphQlClientError.Code.TRANSPORT,
                cause=e,
            ) from e
        return TransportResponse(
            status_code=resp.status_code,
            reason_phrase=resp.reason_phrase,
            body=resp.content,
        )


@dataclass
class RecordedRequest:
    url: str
    headers: dict[str, str]
    body: bytes


class InMemoryTransport:
    """In-memory transport for testing.

    Responses queued with ``add_response`` are served in order; once the
    queue is empty the last one is repeated. With ``echo=True`` every request
    is answered with ``{"data": {"query": ..., "variables": ...}}``.
    """

    def __init__(self, echo: bool = False) -> None:
        self._echo = echo
        self._responses: list[TransportResponse] = []
        self.requests: list[RecordedRequest] = []

    def add_response(self, status_code: int, body: str | bytes, reason_phrase: str = "") -> None:
        if isinstance(body, str):
            body = body.encode("utf-8")
        if not reason_phrase:
            try:
                reason_phrase = HTTPStatus(status_code).phrase
            except ValueError:
                reason_phrase = ""
        self._responses.append(TransportResponse(status_code, reason_phrase, body))

    def add_json_response(self, payload: object, status_code: int = 200) -> None:
        self.add_response(status_code, json.dumps(payload))

    async def send(
        self,
        url: str,
        headers: Mapping[str, str],
        body: bytes,
        timeout: float | None = None,
    ) -> TransportResponse:
        self.requests.append(RecordedRequest(url=url, headers=dict(headers), body=body))
        if self._echo:
            sent = decode_request(body)
            payload = {"data": {"query": sent.query, "variables": sent.variables}}
            return TransportResponse(200, "OK", json.dumps(payload).encode("utf-8"))
        if not self._responses:
            raise TransportError(
                f"No response registered for {url}",
                GraphQlClientError.Code.TRANSPORT,
            )
        if len(self._responses) > 1:
            return self._responses.pop(0)
        return self._responses[0]
