from __future__ import annotations

from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field

if TYPE_CHECKING:
    from pagewire.runtime import ActionContext


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)


class ComponentRole(StrEnum):
    # Interactive components
    TEXT_INPUT = "TEXT_INPUT"
    FILE_INPUT = "FILE_INPUT"
    TEXT_OUTPUT = "TEXT_OUTPUT"
    LIST_OUTPUT = "LIST_OUTPUT"
    ACTION = "ACTION"
    # Static content components
    HEADING = "HEADING"
    TEXT = "TEXT"
    CODE = "CODE"
    DIVIDER = "DIVIDER"
    HTML = "HTML"


class ComponentSchema(_Frozen):
    id: str
    role: ComponentRole
    label: str | None = None
    accepts: tuple[str, ...] = ()
    # Static content
    content: str | None = None
    level: int | None = Field(default=None, ge=1, le=6)
    language: str | None = None
    # Links an ACTION component to its handler
    action_id: str | None = Field(default=None, alias="actionId")
    monospace: bool = False


class ActionSchema(_Frozen):
    id: str
    label: str


class PageSchema(_Frozen):
    title: str
    components: tuple[ComponentSchema, ...] = ()
    actions: tuple[ActionSchema, ...] = ()


class Schema(_Frozen):
    pages: tuple[PageSchema, ...] = ()


class UpdateType(StrEnum):
    TEXT = "TEXT"
    LIST = "LIST"


class ComponentUpdate(_Frozen):
    type: UpdateType
    value: str


class ActionInvocation(_Frozen):
    id: str
    inputs: dict[str, str] = Field(default_factory=dict)


class ActionResponse(_Frozen):
    success: bool
    updates: dict[str, ComponentUpdate] = Field(default_factory=dict)
    error: str | None = None


class FileReference(_Frozen):
    """Decoded value of a file input. Only the filename travels over the wire."""

    name: str
    size_bytes: int | None = None


@dataclass(frozen=True)
class JsonFragment:
    """An already-serialized JSON value, embedded verbatim in list updates."""

    json: str

    @classmethod
    def from_model(cls, model: BaseModel) -> JsonFragment:
        return cls(model.model_dump_json(by_alias=True))


ActionHandler = Callable[["ActionContext"], Awaitable[None] | None]


@dataclass(frozen=True)
class ActionDefinition:
    schema: ActionSchema
    handler: ActionHandler


@dataclass(frozen=True)
class PagewireApp:
    """A built application: the immutable Schema plus its handler registry."""

    schema: Schema
    actions: Mapping[str, ActionDefinition]
