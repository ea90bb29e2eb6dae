"""
Pagewire HTTP client

Thin async wrapper over the two wire operations: fetch the schema once,
invoke actions any number of times.
"""

from __future__ import annotations

from types import TracebackType
from typing import Any

import httpx
from pydantic import ValidationError

from pagewire.errors import TransportDecodeError
from pagewire.schema import ActionInvocation, ActionResponse, Schema


class PagewireClient:
    """
    HTTP client for a pagewire server.

    No retries and no request coalescing: every ``invoke`` is one request.
    """

    def __init__(
        self,
        base_url: str = "",
        *,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """
        Initialize client.

        Args:
            base_url: Server root, e.g. ``http://127.0.0.1:7860``
            timeout: Optional request timeout in seconds (None waits forever)
            transport: Optional httpx transport, e.g. ``httpx.ASGITransport``
        """
        self.base_url = base_url.rstrip("/")
        self._http = httpx.AsyncClient(
            base_url=self.base_url or "http://pagewire",
            timeout=timeout,
            transport=transport,
        )

    async def __aenter__(self) -> PagewireClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    async def fetch_schema(self) -> Schema:
        """
        Fetch the application schema.

        Raises:
            httpx.HTTPStatusError: The server answered with a non-2xx status
            TransportDecodeError: The body is not a valid schema
        """
        response = await self._http.get("/schema")
        response.raise_for_status()
        return _decode(Schema, response)

    async def invoke(self, invocation: ActionInvocation) -> ActionResponse:
        """
        Send one action invocation.

        Not-found and server-error answers carry an ActionResponse body and are
        returned as such (``success`` is False).

        Raises:
            httpx.HTTPError: Transport failure, or an error status without an
                ActionResponse body
            TransportDecodeError: A 2xx body is not a valid ActionResponse
        """
        response = await self._http.post(
            "/action", json=invocation.model_dump(mode="json")
        )
        if response.is_success:
            return _decode(ActionResponse, response)

        try:
            return ActionResponse.model_validate_json(response.content)
        except ValidationError:
            response.raise_for_status()
            raise


def _decode(model: Any, response: httpx.Response) -> Any:
    try:
        return model.model_validate_json(response.content)
    except ValidationError as e:
        raise TransportDecodeError(
            f"Invalid {model.__name__} body from {response.request.url}: {e.error_count()} error(s)"
        ) from e
