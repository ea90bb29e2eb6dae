from __future__ import annotations

import asyncio
import logging

import httpx

from pagewire.client.renderer import PageBindings, render_schema
from pagewire.client.transport import PagewireClient
from pagewire.errors import ClientBindingError, TransportDecodeError
from pagewire.schema import ActionInvocation, ActionResponse, Schema

logger = logging.getLogger(__name__)


class ClientSession:
    """Mounts one schema and dispatches its actions.

    Dispatches are independent tasks; overlapping responses are applied in
    completion order, so the last applied update for an id wins.
    """

    def __init__(self, client: PagewireClient) -> None:
        self._client = client
        self._bindings: PageBindings | None = None
        self._tasks: set[asyncio.Task[ActionResponse | None]] = set()

    @property
    def bindings(self) -> PageBindings:
        if self._bindings is None:
            raise ClientBindingError(None, "No page is mounted")
        return self._bindings

    async def mount(self, schema: Schema | None = None) -> PageBindings:
        if schema is None:
            schema = await self._client.fetch_schema()
        self._bindings = render_schema(schema, on_action=self.trigger)
        logger.info("Mounted page '%s'", schema.pages[0].title)
        return self._bindings

    def trigger(self, action_id: str) -> asyncio.Task[ActionResponse | None]:
        """Snapshot inputs now and schedule the dispatch without waiting for it."""

        invocation = ActionInvocation(id=action_id, inputs=self.bindings.snapshot_inputs())
        task = asyncio.create_task(self._send(invocation), name=f"pagewire-action-{action_id}")
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def dispatch(self, action_id: str) -> ActionResponse | None:
        invocation = ActionInvocation(id=action_id, inputs=self.bindings.snapshot_inputs())
        return await self._send(invocation)

    async def drain(self) -> None:
        """Wait for every dispatch scheduled so far."""

        if self._tasks:
            await asyncio.gather(*list(self._tasks))

    async def _send(self, invocation: ActionInvocation) -> ActionResponse | None:
        try:
            response = await self._client.invoke(invocation)
        except (httpx.HTTPError, TransportDecodeError) as e:
            logger.warning("Failed to dispatch action '%s': %s", invocation.id, e)
            return None

        if not response.success:
            logger.warning("Action '%s' failed: %s", invocation.id, response.error)
            return response

        self.bindings.apply(response.updates)
        return response
