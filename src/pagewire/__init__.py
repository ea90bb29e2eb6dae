from pagewire.builder import AppBuilder, PageBuilder, build_app
from pagewire.errors import (
    ClientBindingError,
    ConfigurationError,
    HandlerError,
    InputTypeError,
    MissingInputError,
    PagewireError,
    TransportDecodeError,
    UnknownActionError,
    UnsupportedOutputTypeError,
)
from pagewire.handles import InputHandle, OutputHandle
from pagewire.runtime import ActionContext, execute_action
from pagewire.schema import (
    ActionInvocation,
    ActionResponse,
    ComponentRole,
    ComponentUpdate,
    FileReference,
    JsonFragment,
    PagewireApp,
    Schema,
    UpdateType,
)

__version__ = "0.1.0"

__all__ = [
    "ActionContext",
    "ActionInvocation",
    "ActionResponse",
    "AppBuilder",
    "ClientBindingError",
    "ComponentRole",
    "ComponentUpdate",
    "ConfigurationError",
    "FileReference",
    "HandlerError",
    "InputHandle",
    "InputTypeError",
    "JsonFragment",
    "MissingInputError",
    "OutputHandle",
    "PageBuilder",
    "PagewireApp",
    "PagewireError",
    "Schema",
    "TransportDecodeError",
    "UnknownActionError",
    "UnsupportedOutputTypeError",
    "UpdateType",
    "__version__",
    "build_app",
    "execute_action",
]
