from __future__ import annotations

from pagewire.ids import IdGenerator


def test_ids_increment_across_prefixes() -> None:
    ids = IdGenerator()
    assert ids.next("text-input") == "text-input-0"
    assert ids.next("action") == "action-1"


def test_spaces_are_replaced() -> None:
    assert IdGenerator(start=5).next("my action") == "my-action-5"
