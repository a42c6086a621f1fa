"""GraphQL client abstraction."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from .types import ManualRequest


class GraphQlClient(ABC):
    """Abstract GraphQL client.

    ``request`` is either a ``ManualRequest``, a ``ShapedRequest`` or a bare
    dataclass shape (instance or type), which is treated as a shaped request.
    """

    @abstractmethod
    async def execute_query(
        self,
        request: Any,
        variables: dict[str, Any] | None = None,
        *,
        operation_name: str = "",
        timeout: float | None = None,
    ) -> Any: ...

    @abstractmethod
    async def execute_mutation(
        self,
        request: Any,
        variables: dict[str, Any] | None = None,
        *,
        operation_name: str = "",
        timeout: float | None = None,
    ) -> Any: ...

    @abstractmethod
    async def execute_query_raw(
        self,
        request: Any,
        variables: dict[str, Any] | None = None,
        *,
        operation_name: str = "",
        timeout: float | None = None,
    ) -> Any: ...

    @abstractmethod
    async def execute_mutation_raw(
        self,
        request: Any,
        variables: dict[str, Any] | None = None,
        *,
        operation_name: str = "",
        timeout: float | None = None,
    ) -> Any: ...

    async def execute_manual(self, request: ManualRequest, *, timeout: float | None = None) -> Any:
        """Send a hand-written document and decode into ``request.result``."""
        return await self.execute_query(request, timeout=timeout)
