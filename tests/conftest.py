from __future__ import annotations

import pytest

from pagewire import AppBuilder, PagewireApp
from pagewire.runtime import ActionContext


def build_greeter() -> PagewireApp:
    builder = AppBuilder()
    page = builder.page("Greeter")
    name = page.text_input("Your Name", "name")
    greet = page.text_output("greet", "Greeting")

    @page.action("Greet", "greet-action")
    def greet_action(ctx: ActionContext) -> None:
        ctx.update(greet, "Hello, " + ctx.read(name) + "!")

    items = page.list_output("items")

    @page.action("Split", "split")
    async def split(ctx: ActionContext) -> None:
        ctx.update(items, ctx.read(name).split())

    @page.action("Explode", "explode")
    def explode(ctx: ActionContext) -> None:
        raise RuntimeError("boom")

    return builder.build()


@pytest.fixture()
def greeter_app() -> PagewireApp:
    return build_greeter()
