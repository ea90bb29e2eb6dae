from pagewire.client.renderer import PageBindings, PageRenderer, render_schema
from pagewire.client.session import ClientSession
from pagewire.client.transport import PagewireClient
from pagewire.client.view import ViewNode

__all__ = [
    "ClientSession",
    "PageBindings",
    "PageRenderer",
    "PagewireClient",
    "ViewNode",
    "render_schema",
]
