from __future__ import annotations


class PagewireError(Exception):
    """Base class for every error raised by pagewire."""


class ConfigurationError(PagewireError):
    """Raised while declaring or building an app; aborts startup."""


class MissingInputError(PagewireError):
    def __init__(self, component_id: str) -> None:
        self.component_id = component_id
        super().__init__(f"No input value provided for '{component_id}'.")


class InputTypeError(PagewireError):
    def __init__(self, component_id: str, expected: str, detail: str | None = None) -> None:
        self.component_id = component_id
        self.expected = expected
        message = f"Input '{component_id}' cannot be read as {expected}"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)


class UnsupportedOutputTypeError(PagewireError):
    def __init__(self, component_id: str, value_type: str) -> None:
        self.component_id = component_id
        self.value_type = value_type
        super().__init__(f"Unsupported output type for handle '{component_id}': {value_type}")


class UnknownActionError(PagewireError):
    def __init__(self, action_id: str) -> None:
        self.action_id = action_id
        super().__init__(f"Action '{action_id}' not found")


class HandlerError(PagewireError):
    """Wraps any exception raised while an action handler runs."""

    def __init__(self, action_id: str, cause: BaseException) -> None:
        self.action_id = action_id
        self.cause = cause
        super().__init__(str(cause) or "Unknown error occurred")


class TransportDecodeError(PagewireError):
    """A request or response body could not be decoded into a wire shape."""


class ClientBindingError(PagewireError):
    def __init__(self, component_id: str | None, message: str) -> None:
        self.component_id = component_id
        super().__init__(message)
