from __future__ import annotations

import logging
import textwrap
from collections.abc import Callable, Iterable
from types import MappingProxyType
from typing import Any

from pagewire.errors import ConfigurationError
from pagewire.handles import InputHandle, OutputHandle
from pagewire.ids import IdGenerator
from pagewire.schema import (
    ActionDefinition,
    ActionHandler,
    ActionSchema,
    ComponentRole,
    ComponentSchema,
    FileReference,
    PageSchema,
    PagewireApp,
    Schema,
)

logger = logging.getLogger(__name__)


def _normalize_label(label: str | None) -> str | None:
    if label is None or not label.strip():
        return None
    return label


def _trim_indent(content: str) -> str:
    lines = textwrap.dedent(content).splitlines()
    while lines and not lines[0].strip():
        lines.pop(0)
    while lines and not lines[-1].strip():
        lines.pop()
    return "\n".join(lines)


class PageBuilder:
    """Accumulates the components and actions of one page, in declaration order."""

    def __init__(self, title: str, *, ids: IdGenerator) -> None:
        self.title = title
        self._ids = ids
        self._components: list[ComponentSchema] = []
        self._actions: list[ActionDefinition] = []
        self._sealed = False

    @property
    def actions(self) -> tuple[ActionDefinition, ...]:
        return tuple(self._actions)

    # Interactive components

    def text_input(
        self, label: str = "", id: str | None = None, *, value_type: Any = str
    ) -> InputHandle[Any]:
        identifier = self._claim(id, "text-input")
        self._push(
            ComponentSchema(
                id=identifier, role=ComponentRole.TEXT_INPUT, label=_normalize_label(label)
            )
        )
        return InputHandle(identifier, value_type)

    def file_input(
        self,
        label: str = "",
        accepts: Iterable[str] = ("*/*",),
        id: str | None = None,
    ) -> InputHandle[FileReference]:
        identifier = self._claim(id, "file-input")
        self._push(
            ComponentSchema(
                id=identifier,
                role=ComponentRole.FILE_INPUT,
                label=_normalize_label(label),
                accepts=tuple(accepts),
            )
        )
        return InputHandle(identifier, FileReference)

    def text_output(
        self, id: str | None = None, label: str = "", *, monospace: bool = False
    ) -> OutputHandle[str]:
        identifier = self._claim(id, "text-output")
        self._push(
            ComponentSchema(
                id=identifier,
                role=ComponentRole.TEXT_OUTPUT,
                label=_normalize_label(label),
                monospace=monospace,
            )
        )
        return OutputHandle(identifier, str)

    def list_output(self, id: str | None = None, label: str = "") -> OutputHandle[list[Any]]:
        identifier = self._claim(id, "list-output")
        self._push(
            ComponentSchema(
                id=identifier, role=ComponentRole.LIST_OUTPUT, label=_normalize_label(label)
            )
        )
        return OutputHandle(identifier, list)

    def action(
        self,
        label: str,
        id: str | None = None,
        handler: ActionHandler | None = None,
    ) -> Any:
        """Declare an action rendered inline at the current position.

        Without ``handler`` this returns a decorator::

            @page.action("Greet", id="greet")
            def greet(ctx): ...
        """

        if handler is None:

            def decorator(fn: ActionHandler) -> ActionHandler:
                self.action(label, id, fn)
                return fn

            return decorator

        identifier = self._claim(id, "action")
        display = _normalize_label(label) or label
        self._actions.append(ActionDefinition(ActionSchema(id=identifier, label=display), handler))
        self._push(
            ComponentSchema(
                id=identifier,
                role=ComponentRole.ACTION,
                label=display,
                action_id=identifier,
            )
        )
        return handler

    # Static content components

    def heading(self, text: str, level: int = 2, id: str | None = None) -> None:
        identifier = self._claim(id, "heading")
        if not 1 <= level <= 6:
            raise ConfigurationError(
                f"Heading level must be between 1 and 6 (got {level} for '{identifier}')"
            )
        self._push(
            ComponentSchema(id=identifier, role=ComponentRole.HEADING, content=text, level=level)
        )

    def text(self, content: str, id: str | None = None) -> None:
        identifier = self._claim(id, "text")
        self._push(ComponentSchema(id=identifier, role=ComponentRole.TEXT, content=content))

    def code(self, content: str, language: str = "python", id: str | None = None) -> None:
        identifier = self._claim(id, "code")
        self._push(
            ComponentSchema(
                id=identifier,
                role=ComponentRole.CODE,
                content=_trim_indent(content),
                language=language,
            )
        )

    def divider(self, id: str | None = None) -> None:
        identifier = self._claim(id, "divider")
        self._push(ComponentSchema(id=identifier, role=ComponentRole.DIVIDER))

    def html(self, content: str, id: str | None = None) -> None:
        identifier = self._claim(id, "html")
        self._push(ComponentSchema(id=identifier, role=ComponentRole.HTML, content=content))

    def to_schema(self) -> PageSchema:
        return PageSchema(
            title=self.title,
            components=tuple(self._components),
            actions=tuple(a.schema for a in self._actions),
        )

    def seal(self) -> None:
        self._sealed = True

    def _claim(self, id: str | None, prefix: str) -> str:
        if self._sealed:
            raise ConfigurationError(f"Page '{self.title}' was already built")
        identifier = id if id is not None else self._ids.next(prefix)
        if not identifier:
            raise ConfigurationError(f"Empty component id on page '{self.title}'")
        exists = any(c.id == identifier for c in self._components) or any(
            a.schema.id == identifier for a in self._actions
        )
        if exists:
            raise ConfigurationError(
                f"Duplicate component id '{identifier}' on page '{self.title}'"
            )
        return identifier

    def _push(self, component: ComponentSchema) -> None:
        self._components.append(component)


class AppBuilder:
    def __init__(self) -> None:
        self._ids = IdGenerator()
        self._pages: list[PageBuilder] = []
        self._built = False

    def page(self, title: str) -> PageBuilder:
        if self._built:
            raise ConfigurationError("AppBuilder was already built")
        page = PageBuilder(title, ids=self._ids)
        self._pages.append(page)
        return page

    def build(self) -> PagewireApp:
        if self._built:
            raise ConfigurationError("AppBuilder was already built")

        actions: dict[str, ActionDefinition] = {}
        for page in self._pages:
            for definition in page.actions:
                action_id = definition.schema.id
                if action_id in actions:
                    raise ConfigurationError(
                        f"Duplicate action id '{action_id}' across pages (page '{page.title}')"
                    )
                actions[action_id] = definition

        schema = Schema(pages=tuple(p.to_schema() for p in self._pages))
        for page in self._pages:
            page.seal()
        self._built = True

        logger.debug("Built schema with %d page(s), %d action(s)", len(schema.pages), len(actions))
        return PagewireApp(schema=schema, actions=MappingProxyType(actions))


def build_app(configure: Callable[[AppBuilder], None]) -> PagewireApp:
    builder = AppBuilder()
    configure(builder)
    return builder.build()
