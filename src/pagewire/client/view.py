from __future__ import annotations

from dataclasses import dataclass, field

from markupsafe import Markup, escape

_VOID_TAGS = frozenset({"hr", "input", "br", "img"})


@dataclass(eq=False)
class ViewNode:
    """A live element of the rendered view.

    Nodes are mutated in place when updates arrive. ``raw_html`` is trusted
    markup (HTML components) emitted without escaping.
    """

    tag: str
    attrs: dict[str, str] = field(default_factory=dict)
    text: str | None = None
    raw_html: str | None = None
    value: str | None = None
    hidden: bool = False
    children: list[ViewNode] = field(default_factory=list)
    parent: ViewNode | None = field(default=None, repr=False)

    def append(self, child: ViewNode) -> ViewNode:
        child.parent = self
        self.children.append(child)
        return child

    def clear(self) -> None:
        for child in self.children:
            child.parent = None
        self.children = []
        self.text = None

    def text_content(self) -> str:
        parts = [self.text or ""]
        parts.extend(child.text_content() for child in self.children)
        return "".join(parts)

    def to_html(self) -> str:
        return str(self._markup())

    def _markup(self) -> Markup:
        attrs = dict(self.attrs)
        if self.value is not None:
            attrs["value"] = self.value
        rendered = "".join(
            f' {escape(k)}="{escape(v)}"' for k, v in attrs.items() if v is not None
        )
        if self.hidden:
            rendered += " hidden"
        open_tag = Markup(f"<{self.tag}{rendered}>")
        if self.tag in _VOID_TAGS:
            return open_tag

        body = Markup("")
        if self.text is not None:
            body += escape(self.text)
        if self.raw_html is not None:
            body += Markup(self.raw_html)
        for child in self.children:
            body += child._markup()
        return open_tag + body + Markup(f"</{self.tag}>")


def element(tag: str, *, cls: str | None = None, text: str | None = None, **attrs: str) -> ViewNode:
    node = ViewNode(tag=tag, text=text)
    if cls:
        node.attrs["class"] = cls
    for key, val in attrs.items():
        node.attrs[key.rstrip("_").replace("_", "-")] = val
    return node
