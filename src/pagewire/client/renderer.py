from __future__ import annotations

import json
import logging
from collections.abc import Callable, Mapping
from typing import Any

from jsonschema import Draft202012Validator
from jsonschema.exceptions import ValidationError as JsonSchemaValidationError

from pagewire.client.view import ViewNode, element
from pagewire.errors import ClientBindingError
from pagewire.schema import (
    ComponentRole,
    ComponentSchema,
    ComponentUpdate,
    PageSchema,
    Schema,
    UpdateType,
)

logger = logging.getLogger(__name__)

_LIST_VALUE_VALIDATOR = Draft202012Validator({"type": "array"})

ActionTrigger = Callable[[str], Any]

# Form field names; inputs post under ``input:<id>``.
ACTION_FIELD = "__pagewire_action__"


def input_field(component_id: str) -> str:
    return f"input:{component_id}"


def _list_entries(component_id: str, raw: str) -> list[str]:
    try:
        items = json.loads(raw)
    except json.JSONDecodeError as e:
        raise ClientBindingError(
            component_id, f"List update for '{component_id}' is not JSON: {e}"
        ) from e
    try:
        _LIST_VALUE_VALIDATOR.validate(items)
    except JsonSchemaValidationError as e:
        raise ClientBindingError(
            component_id, f"List update for '{component_id}' is not an array: {e.message}"
        ) from e
    return [
        item if isinstance(item, str) else json.dumps(item, ensure_ascii=False) for item in items
    ]


class PageBindings:
    """Identifier -> live element tables for one mounted page.

    Created once per mount; updates mutate the bound nodes in place.
    """

    def __init__(
        self,
        root: ViewNode,
        *,
        text_inputs: Mapping[str, ViewNode],
        file_inputs: Mapping[str, ViewNode],
        text_outputs: Mapping[str, ViewNode],
        list_outputs: Mapping[str, ViewNode],
        actions: Mapping[str, ViewNode],
        on_action: ActionTrigger | None = None,
    ) -> None:
        self.root = root
        self._on_action = on_action
        self._text_inputs = dict(text_inputs)
        self._file_inputs = dict(file_inputs)
        self._text_outputs = dict(text_outputs)
        self._list_outputs = dict(list_outputs)
        self._actions = dict(actions)

    @property
    def text_input_ids(self) -> list[str]:
        return list(self._text_inputs)

    @property
    def file_input_ids(self) -> list[str]:
        return list(self._file_inputs)

    def action_node(self, action_id: str) -> ViewNode:
        node = self._actions.get(action_id)
        if node is None:
            raise ClientBindingError(
                action_id, f"No action component with id '{action_id}' is mounted"
            )
        return node

    def click(self, action_id: str) -> Any:
        """Fire the trigger wired to an action component."""

        self.action_node(action_id)
        if self._on_action is None:
            raise ClientBindingError(action_id, "No action dispatcher is attached to this page")
        return self._on_action(action_id)

    # Read path

    def set_input(self, component_id: str, value: str) -> None:
        node = self._text_inputs.get(component_id)
        if node is None:
            raise ClientBindingError(
                component_id, f"No text input component with id '{component_id}' is mounted"
            )
        node.value = value

    def select_file(self, component_id: str, filename: str | None) -> None:
        node = self._file_inputs.get(component_id)
        if node is None:
            raise ClientBindingError(
                component_id, f"No file input component with id '{component_id}' is mounted"
            )
        # Only the name is kept; content never leaves the client.
        node.value = filename

    def snapshot_inputs(self) -> dict[str, str]:
        values: dict[str, str] = {}
        for component_id, node in self._text_inputs.items():
            values[component_id] = node.value or ""
        for component_id, node in self._file_inputs.items():
            values[component_id] = node.value or ""
        return values

    # Write path

    def update_text(self, component_id: str, value: str) -> None:
        node = self._text_outputs.get(component_id)
        if node is None:
            raise ClientBindingError(
                component_id, f"No text output component with id '{component_id}' is mounted"
            )
        node.text = value
        _reveal(node)

    def update_list(self, component_id: str, entries: list[str]) -> None:
        node = self._list_outputs.get(component_id)
        if node is None:
            raise ClientBindingError(
                component_id, f"No list output component with id '{component_id}' is mounted"
            )
        node.clear()
        for entry in entries:
            node.append(element("li", text=entry))
        _reveal(node)

    def apply_update(self, component_id: str, update: ComponentUpdate) -> None:
        if update.type == UpdateType.TEXT:
            self.update_text(component_id, update.value)
        else:
            self.update_list(component_id, _list_entries(component_id, update.value))

    def apply(self, updates: Mapping[str, ComponentUpdate]) -> list[ClientBindingError]:
        """Apply every update; a failing one is reported and the rest still apply."""

        errors: list[ClientBindingError] = []
        for component_id, update in updates.items():
            try:
                self.apply_update(component_id, update)
            except ClientBindingError as e:
                logger.warning("Skipping update: %s", e)
                errors.append(e)
        return errors


def _reveal(node: ViewNode) -> None:
    container = node.parent
    if container is not None:
        container.hidden = False


class PageRenderer:
    """Single-pass translation of a page schema into a view tree plus bindings."""

    def __init__(self, on_action: ActionTrigger | None = None) -> None:
        self._on_action = on_action
        self._text_inputs: dict[str, ViewNode] = {}
        self._file_inputs: dict[str, ViewNode] = {}
        self._text_outputs: dict[str, ViewNode] = {}
        self._list_outputs: dict[str, ViewNode] = {}
        self._actions: dict[str, ViewNode] = {}

    def render(self, page: PageSchema) -> PageBindings:
        wrapper = element("div", cls="pagewire-page")
        wrapper.append(element("h2", text=page.title))
        host = wrapper.append(element("div", cls="pagewire-components"))

        for component in page.components:
            host.append(self._render_component(component))

        return PageBindings(
            wrapper,
            text_inputs=self._text_inputs,
            file_inputs=self._file_inputs,
            text_outputs=self._text_outputs,
            list_outputs=self._list_outputs,
            actions=self._actions,
            on_action=self._on_action,
        )

    def _render_component(self, component: ComponentSchema) -> ViewNode:
        match component.role:
            case ComponentRole.TEXT_INPUT:
                return self._render_input(component, "text", self._text_inputs)
            case ComponentRole.FILE_INPUT:
                return self._render_input(component, "file", self._file_inputs)
            case ComponentRole.TEXT_OUTPUT:
                return self._render_text_output(component)
            case ComponentRole.LIST_OUTPUT:
                return self._render_list_output(component)
            case ComponentRole.ACTION:
                return self._render_action(component)
            case ComponentRole.HEADING:
                return element(f"h{component.level or 2}", text=component.content or "")
            case ComponentRole.TEXT:
                return element("p", text=component.content or "")
            case ComponentRole.CODE:
                pre = element("pre")
                lang = f"language-{component.language}" if component.language else None
                pre.append(element("code", cls=lang, text=component.content or ""))
                return pre
            case ComponentRole.DIVIDER:
                return element("hr")
            case ComponentRole.HTML:
                node = element("div")
                node.raw_html = component.content or ""
                return node
        raise ClientBindingError(component.id, f"Unknown component role '{component.role}'")

    def _label(self, container: ViewNode, component: ComponentSchema, cls: str | None) -> None:
        if component.label is not None:
            container.append(element("span", cls=cls, text=component.label))

    def _render_input(
        self, component: ComponentSchema, kind: str, table: dict[str, ViewNode]
    ) -> ViewNode:
        container = element("label", cls="pagewire-input")
        self._label(container, component, None)
        node = element(
            "input",
            cls=f"pagewire-{kind}-input",
            type_=kind,
            name=input_field(component.id),
        )
        if kind == "file" and component.accepts:
            node.attrs["accept"] = ",".join(component.accepts)
        container.append(node)
        table[component.id] = node
        return container

    def _render_text_output(self, component: ComponentSchema) -> ViewNode:
        container = element("div", cls="pagewire-output pagewire-text-output")
        container.hidden = True
        self._label(container, component, "pagewire-output-label")
        cls = "pagewire-output-value"
        if component.monospace:
            cls += " pagewire-monospace"
        value = container.append(element("div", cls=cls, id=component.id))
        self._text_outputs[component.id] = value
        return container

    def _render_list_output(self, component: ComponentSchema) -> ViewNode:
        container = element("div", cls="pagewire-output pagewire-list-output")
        container.hidden = True
        self._label(container, component, "pagewire-output-label")
        items = container.append(element("ul", id=component.id))
        self._list_outputs[component.id] = items
        return container

    def _render_action(self, component: ComponentSchema) -> ViewNode:
        action_id = component.action_id or component.id
        button = element(
            "button",
            cls="pagewire-action",
            text=component.label or "Action",
            type_="submit",
            name=ACTION_FIELD,
            value=action_id,
        )
        self._actions[action_id] = button
        return button


def render_schema(schema: Schema, on_action: ActionTrigger | None = None) -> PageBindings:
    """Render the first page of ``schema``; other pages are ignored."""

    if not schema.pages:
        raise ClientBindingError(None, "Schema must contain at least one page to render")
    return PageRenderer(on_action).render(schema.pages[0])
