"""Host boundary — the narrow slice of a text widget the engine talks to.

A real GUI widget implements ``EditableTextHost``; ``InMemoryHost`` is the
headless implementation used by tests and the CLI.
"""

from __future__ import annotations
from typing import Protocol, runtime_checkable


@runtime_checkable
class EditableTextHost(Protocol):
    """Text, caret/selection and clipboard of one input field."""

    def get_text(self) -> str:
        ...

    def set_text(self, text: str) -> None:
        ...

    def get_selection(self) -> tuple[int, int]:
        """Current selection as (start, length); length 0 is a caret."""
        ...

    def set_selection(self, start: int, length: int = 0) -> None:
        ...

    def is_editing_active(self) -> bool:
        ...

    def read_clipboard_text(self) -> str | None:
        """Clipboard string, or None when the clipboard holds no text."""
        ...


class InMemoryHost:
    """Headless text field."""

    __slots__ = ("_text", "_selection", "_editing", "clipboard")

    def __init__(self, text: str = "", *, clipboard: str | None = None) -> None:
        self._text = text
        self._selection = (len(text), 0)
        self._editing = False
        self.clipboard = clipboard

    def get_text(self) -> str:
        return self._text

    def set_text(self, text: str) -> None:
        self._text = text
        start, length = self._selection
        start = min(start, len(text))
        self._selection = (start, min(length, len(text) - start))

    def get_selection(self) -> tuple[int, int]:
        return self._selection

    def set_selection(self, start: int, length: int = 0) -> None:
        if start < 0 or length < 0 or start + length > len(self._text):
            raise ValueError(f"selection {start}+{length} outside text of length {len(self._text)}")
        self._selection = (start, length)

    def is_editing_active(self) -> bool:
        return self._editing

    def set_editing(self, active: bool) -> None:
        self._editing = active

    def read_clipboard_text(self) -> str | None:
        return self.clipboard

    def __repr__(self) -> str:
        return f"InMemoryHost(text={self._text!r}, selection={self._selection})"
