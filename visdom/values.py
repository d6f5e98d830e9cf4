"""Value types returned by element attribute and form accessors."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Iterator

_ASCII_WHITESPACE = re.compile(r"[ \t\n\f\r]+")


@dataclass(frozen=True)
class AttrValue:
    """The value of an attribute.

    ``value`` is ``None`` for a flag attribute written without a value,
    such as ``<input readonly>``; ``quote`` is the quote character the
    value is rendered with, if any.
    """

    value: str | None = None
    quote: str | None = None

    def is_true(self) -> bool:
        """True when the attribute is a bare flag without a value."""
        return self.value is None

    def is_str(self, value: str) -> bool:
        """Compare with a string; a flag attribute equals the empty string."""
        if self.value is None:
            return value == ""
        return self.value == value

    def to_list(self) -> list[str]:
        """Split the value on ASCII whitespace, as class lists are split."""
        if self.value is None:
            return []
        return [part for part in _ASCII_WHITESPACE.split(self.value) if part]

    def __str__(self) -> str:
        return "" if self.value is None else self.value


@dataclass(frozen=True)
class FormValue:
    """The value of a form control.

    A single-valued control holds a string; a ``<select multiple>`` holds
    a tuple of the selected option values.
    """

    value: str | tuple[str, ...] = ""

    def __post_init__(self) -> None:
        if isinstance(self.value, list):
            object.__setattr__(self, "value", tuple(self.value))

    def is_multiple(self) -> bool:
        """True when the value comes from a multiple select."""
        return isinstance(self.value, tuple)

    def __str__(self) -> str:
        if isinstance(self.value, tuple):
            return ",".join(self.value)
        return self.value

    def __iter__(self) -> Iterator[str]:
        """Iterate the selected values; a single value yields nothing."""
        if isinstance(self.value, tuple):
            return iter(self.value)
        return iter(())


class InsertPosition(Enum):
    """Where a node is inserted relative to a target element."""

    BEFORE_BEGIN = "beforebegin"
    AFTER_BEGIN = "afterbegin"
    BEFORE_END = "beforeend"
    AFTER_END = "afterend"

    def action(self) -> str:
        """The name of the operation, used in error messages."""
        return _ACTIONS[self]


_ACTIONS = {
    InsertPosition.BEFORE_BEGIN: "insert before",
    InsertPosition.AFTER_BEGIN: "prepend",
    InsertPosition.BEFORE_END: "append",
    InsertPosition.AFTER_END: "insert after",
}