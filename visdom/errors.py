"""Exceptions raised while parsing documents, selecting and mutating nodes."""

from __future__ import annotations


class VisdomError(Exception):
    """Base class of every error raised by the package."""


class InvalidSelector(VisdomError):
    """A selector string could not be parsed."""

    def __init__(self, context: str, reason: str) -> None:
        self.context = context
        self.reason = reason
        super().__init__(f"Invalid selector:'{context}'<{reason}>")


class MethodOnInvalidSelector(VisdomError):
    """A collection method was called with a selector that is not valid."""

    def __init__(self, method: str, error: str) -> None:
        self.method = method
        self.error = error
        super().__init__(f"Call method '{method}' with {error}")


class InvalidTraitMethodCall(VisdomError):
    """A node method was called in a situation where it cannot work."""

    def __init__(self, method: str, message: str) -> None:
        self.method = method
        self.message = message
        super().__init__(f"Call method '{method}' cause an error: {message}")


class HtmlParseError(VisdomError):
    """The html source could not be parsed with the given options."""

    def __init__(self, message: str, position: int | None = None) -> None:
        self.message = message
        self.position = position
        if position is None:
            text = message
        else:
            text = f"{message} (at position {position})"
        super().__init__(text)