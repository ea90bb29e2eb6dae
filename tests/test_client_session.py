from __future__ import annotations

import asyncio

import httpx

from pagewire import ActionInvocation, PagewireApp, build_app
from pagewire.app import create_app
from pagewire.client import ClientSession, PagewireClient


def _client(app: PagewireApp) -> PagewireClient:
    return PagewireClient(transport=httpx.ASGITransport(app=create_app(app)))


def test_fetch_schema_and_invoke(greeter_app: PagewireApp) -> None:
    async def scenario():
        async with _client(greeter_app) as client:
            schema = await client.fetch_schema()
            ok = await client.invoke(ActionInvocation(id="greet-action", inputs={"name": "Ada"}))
            missing = await client.invoke(ActionInvocation(id="missing"))
            failed = await client.invoke(ActionInvocation(id="explode"))
            return schema, ok, missing, failed

    schema, ok, missing, failed = asyncio.run(scenario())
    assert schema == greeter_app.schema
    assert ok.success is True
    assert ok.updates["greet"].value == "Hello, Ada!"
    assert missing.success is False
    assert failed.success is False
    assert failed.error == "boom"


def test_session_mount_trigger_and_apply(greeter_app: PagewireApp) -> None:
    async def scenario():
        async with _client(greeter_app) as client:
            session = ClientSession(client)
            bindings = await session.mount()
            bindings.set_input("name", "Ada")
            task = bindings.click("greet-action")
            # Snapshot was taken at trigger time.
            bindings.set_input("name", "Changed")
            response = await task
            return bindings, response

    bindings, response = asyncio.run(scenario())
    assert response is not None and response.success
    html = bindings.root.to_html()
    assert "Hello, Ada!" in html
    assert "Hello, Changed!" not in html


def test_concurrent_triggers_are_independent(greeter_app: PagewireApp) -> None:
    async def scenario():
        async with _client(greeter_app) as client:
            session = ClientSession(client)
            bindings = await session.mount()
            bindings.set_input("name", "one two")
            session.trigger("greet-action")
            session.trigger("split")
            session.trigger("explode")
            await session.drain()
            return bindings

    bindings = asyncio.run(scenario())
    html = bindings.root.to_html()
    assert "Hello, one two!" in html
    assert "<li>one</li><li>two</li>" in html


def test_failed_dispatch_is_reported_not_raised() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("down", request=request)

    async def scenario():
        async with PagewireClient(transport=httpx.MockTransport(handler)) as client:
            session = ClientSession(client)
            app = build_app(lambda b: b.page("P").action("Go", "go", lambda ctx: None))
            await session.mount(app.schema)
            return await session.dispatch("go")

    assert asyncio.run(scenario()) is None
