from __future__ import annotations

import pytest

from pagewire import AppBuilder, ClientBindingError, ComponentUpdate, PagewireApp, UpdateType
from pagewire.client.renderer import PageRenderer, render_schema
from pagewire.schema import Schema


def _full_page_app() -> PagewireApp:
    builder = AppBuilder()
    page = builder.page("Everything")
    page.heading("Title", level=1, id="h")
    page.text("Some <text>", id="t")
    page.code("print('x')", id="c")
    page.divider(id="d")
    page.html("<ul><li>raw</li></ul>", id="raw")
    page.text_input("Name", "name")
    page.file_input("Upload", accepts=["image/png", "image/jpeg"], id="upload")
    page.text_output("out", "Result", monospace=True)
    page.list_output("items", "Items")
    page.action("Go", "go", lambda ctx: None)
    builder.page("Ignored").text("never rendered")
    return builder.build()


def test_one_node_per_component_in_order() -> None:
    app = _full_page_app()
    bindings = render_schema(app.schema)

    host = bindings.root.children[1]
    assert host.attrs["class"] == "pagewire-components"
    page = app.schema.pages[0]
    assert len(host.children) == len(page.components)
    assert [n.tag for n in host.children] == [
        "h1",
        "p",
        "pre",
        "hr",
        "div",
        "label",
        "label",
        "div",
        "div",
        "button",
    ]


def test_only_first_page_is_rendered() -> None:
    bindings = render_schema(_full_page_app().schema)
    assert bindings.root.children[0].text == "Everything"
    assert "never rendered" not in bindings.root.to_html()


def test_empty_schema_cannot_be_rendered() -> None:
    with pytest.raises(ClientBindingError):
        render_schema(Schema(pages=()))


def test_html_escaping_and_raw_html() -> None:
    html = render_schema(_full_page_app().schema).root.to_html()
    assert "Some &lt;text&gt;" in html
    assert "<ul><li>raw</li></ul>" in html
    assert 'class="language-python"' in html
    assert 'accept="image/png,image/jpeg"' in html


def test_outputs_hidden_until_updated() -> None:
    bindings = render_schema(_full_page_app().schema)
    out_container = bindings.root.children[1].children[7]
    assert out_container.hidden is True

    bindings.update_text("out", "hello")
    assert out_container.hidden is False
    assert out_container.text_content().endswith("hello")


def test_snapshot_inputs_includes_file_name_only() -> None:
    bindings = render_schema(_full_page_app().schema)
    assert bindings.snapshot_inputs() == {"name": "", "upload": ""}

    bindings.set_input("name", "Ada")
    bindings.select_file("upload", "photo.png")
    assert bindings.snapshot_inputs() == {"name": "Ada", "upload": "photo.png"}


def test_text_update_is_idempotent() -> None:
    bindings = render_schema(_full_page_app().schema)
    update = {"out": ComponentUpdate(type=UpdateType.TEXT, value="same")}

    bindings.apply(update)
    first = bindings.root.to_html()
    bindings.apply(update)
    assert bindings.root.to_html() == first


def test_list_update_rebuilds_items() -> None:
    bindings = render_schema(_full_page_app().schema)
    bindings.apply({"items": ComponentUpdate(type=UpdateType.LIST, value='["a","b",{"k":1}]')})
    bindings.apply({"items": ComponentUpdate(type=UpdateType.LIST, value='["c"]')})

    items = bindings.root.children[1].children[8].children[1]
    assert items.tag == "ul"
    assert [li.text for li in items.children] == ["c"]

    bindings.apply({"items": ComponentUpdate(type=UpdateType.LIST, value='["a",{"k":1}]')})
    assert [li.text for li in items.children] == ["a", '{"k": 1}']


def test_unbound_update_is_reported_and_siblings_still_apply() -> None:
    bindings = render_schema(_full_page_app().schema)
    errors = bindings.apply(
        {
            "ghost": ComponentUpdate(type=UpdateType.TEXT, value="?"),
            "items": ComponentUpdate(type=UpdateType.LIST, value='{"not": "a list"}'),
            "out": ComponentUpdate(type=UpdateType.TEXT, value="applied"),
        }
    )
    assert [e.component_id for e in errors] == ["ghost", "items"]
    assert "applied" in bindings.root.to_html()


def test_unbound_input_fails() -> None:
    bindings = render_schema(_full_page_app().schema)
    with pytest.raises(ClientBindingError):
        bindings.set_input("out", "x")
    with pytest.raises(ClientBindingError):
        bindings.update_list("out", ["x"])


def test_click_fires_attached_trigger() -> None:
    fired: list[str] = []
    bindings = PageRenderer(on_action=fired.append).render(_full_page_app().schema.pages[0])

    bindings.click("go")
    assert fired == ["go"]
    with pytest.raises(ClientBindingError):
        bindings.click("nope")
