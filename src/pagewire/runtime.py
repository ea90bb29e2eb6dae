from __future__ import annotations

import inspect
import json
import logging
from collections.abc import Mapping, Sequence
from typing import Any

from pydantic import TypeAdapter, ValidationError
from starlette.concurrency import run_in_threadpool

from pagewire.errors import (
    HandlerError,
    InputTypeError,
    MissingInputError,
    UnknownActionError,
    UnsupportedOutputTypeError,
)
from pagewire.handles import InputHandle, OutputHandle
from pagewire.schema import (
    ActionDefinition,
    ActionInvocation,
    ComponentUpdate,
    FileReference,
    JsonFragment,
    PagewireApp,
    Schema,
    UpdateType,
)

logger = logging.getLogger(__name__)

_ADAPTERS: dict[Any, TypeAdapter[Any]] = {}


def _adapter(value_type: Any) -> TypeAdapter[Any]:
    adapter = _ADAPTERS.get(value_type)
    if adapter is None:
        adapter = TypeAdapter(value_type)
        _ADAPTERS[value_type] = adapter
    return adapter


def _type_name(value_type: Any) -> str:
    return getattr(value_type, "__name__", None) or repr(value_type)


def _decode(handle: InputHandle[Any], raw: Any) -> Any:
    if not isinstance(raw, str):
        raise InputTypeError(handle.id, "str", f"raw value is {type(raw).__name__}")
    if handle.value_type is str:
        return raw
    if handle.value_type is FileReference:
        return FileReference(name=raw)
    try:
        return _adapter(handle.value_type).validate_python(raw)
    except ValidationError as e:
        errors = e.errors()
        detail = errors[0]["msg"] if errors else str(e)
        raise InputTypeError(handle.id, _type_name(handle.value_type), detail) from e


def _list_item_json(item: Any) -> str:
    if isinstance(item, JsonFragment):
        return item.json
    if isinstance(item, str):
        return json.dumps(item, ensure_ascii=False)
    # Entries are strings on the wire; other values show as their JSON text.
    text = json.dumps(item, ensure_ascii=False, default=str)
    return json.dumps(text, ensure_ascii=False)


def encode_update(handle: OutputHandle[Any], value: Any) -> ComponentUpdate:
    if isinstance(value, str) and handle.value_type is not list:
        return ComponentUpdate(type=UpdateType.TEXT, value=value)
    if (
        isinstance(value, Sequence)
        and not isinstance(value, (str, bytes, bytearray))
        and handle.value_type is not str
    ):
        items = ",".join(_list_item_json(item) for item in value)
        return ComponentUpdate(type=UpdateType.LIST, value=f"[{items}]")
    raise UnsupportedOutputTypeError(handle.id, type(value).__name__)


class ActionContext:
    """Per-invocation view of the inputs plus the queue of output updates.

    A context is created for exactly one invocation and discarded afterwards.
    """

    def __init__(self, inputs: Mapping[str, str], *, schema: Schema | None = None) -> None:
        self._inputs = dict(inputs)
        self._updates: dict[str, ComponentUpdate] = {}
        self._schema = schema

    def read[T](self, handle: InputHandle[T]) -> T:
        if handle.id not in self._inputs:
            raise MissingInputError(handle.id)
        return _decode(handle, self._inputs[handle.id])

    def update[T](self, handle: OutputHandle[T], value: T) -> None:
        # Last write wins per output id.
        self._updates[handle.id] = encode_update(handle, value)

    def collect_updates(self) -> dict[str, ComponentUpdate]:
        return dict(self._updates)

    def schema_json(self) -> str:
        if self._schema is None:
            return "{}"
        return self._schema.model_dump_json(by_alias=True, indent=2)


def lookup_action(app: PagewireApp, action_id: str) -> ActionDefinition:
    definition = app.actions.get(action_id)
    if definition is None:
        raise UnknownActionError(action_id)
    return definition


async def run_handler(definition: ActionDefinition, context: ActionContext) -> None:
    handler = definition.handler
    if inspect.iscoroutinefunction(handler):
        await handler(context)
        return
    result = await run_in_threadpool(handler, context)
    if inspect.isawaitable(result):
        await result


async def execute_action(
    app: PagewireApp, invocation: ActionInvocation
) -> dict[str, ComponentUpdate]:
    """Run one invocation against a fresh context and return its updates.

    Raises:
        UnknownActionError: no handler is registered under ``invocation.id``.
        HandlerError: the handler (or the context on its behalf) raised.
    """

    definition = lookup_action(app, invocation.id)
    context = ActionContext(invocation.inputs, schema=app.schema)
    try:
        await run_handler(definition, context)
    except Exception as e:
        raise HandlerError(invocation.id, e) from e
    return context.collect_updates()
