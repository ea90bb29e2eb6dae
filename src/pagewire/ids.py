from __future__ import annotations

import itertools
import threading


class IdGenerator:
    """Generates component identifiers of the form ``<prefix>-<n>``.

    One counter is shared by every component kind and every page of the owning
    builder, so two apps built in the same process never influence each
    other's identifiers.
    """

    def __init__(self, start: int = 0) -> None:
        self._counter = itertools.count(start)
        self._lock = threading.Lock()

    def next(self, prefix: str) -> str:
        with self._lock:
            n = next(self._counter)
        return f"{prefix}-{n}".replace(" ", "-")
