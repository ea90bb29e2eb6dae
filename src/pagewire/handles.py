from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class InputHandle[T]:
    """Typed name of an input component.

    Handles are created by the builder and resolved against the invocation's
    inputs by :meth:`pagewire.runtime.ActionContext.read`. ``value_type`` is
    the tag used to decode the raw string.
    """

    id: str
    value_type: Any = str


@dataclass(frozen=True)
class OutputHandle[T]:
    """Typed name of an output component, written through ``ActionContext.update``."""

    id: str
    value_type: Any = str
