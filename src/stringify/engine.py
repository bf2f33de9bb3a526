"""MaskEngine — the per-field coordinator.

Takes edits reported by the host, asks the field's formatter for a verdict,
writes the result back to the host and raises lifecycle events.

Usage:
    from stringify import MaskEngine, InMemoryHost, TextType, FieldEvents

    field = MaskEngine(InMemoryHost(), TextType.CREDIT_CARD,
                       events=FieldEvents(did_filled=lambda f: print("filled")))
    field.type_text("1234567890123456")    # prints "filled" once
    print(field.text)                      # "1234 5678 9012 3456"
    print(field.plain_value)               # "1234567890123456"
"""

from __future__ import annotations
import logging
from dataclasses import replace
from typing import Any

from .error_timer import ErrorState, ErrorTimer, Scheduler, ThreadingScheduler
from .events import FieldEvents
from .formatters import Formatter, get_formatter
from .host import EditableTextHost, InMemoryHost
from .paste import PASTE_DISABLED, paste_result, paste_text, replaces_whole_field
from .types import EditRequest, FormatResult, TextType, TextTypeConfig

logger = logging.getLogger(__name__)


class MaskEngine:
    """Masks one text field.

    Owns the field's config and error state; the formatter is a shared,
    stateless object resolved once per text type.
    """

    def __init__(
        self,
        host: EditableTextHost | None = None,
        text_type: TextType | str = TextType.AMOUNT,
        config: TextTypeConfig | None = None,
        *,
        events: FieldEvents | None = None,
        scheduler: Scheduler | None = None,
    ) -> None:
        self.host: EditableTextHost = host if host is not None else InMemoryHost()
        self._text_type = TextType.parse(text_type)
        self._formatter = get_formatter(self._text_type)
        self._config = config or TextTypeConfig()
        self.events = events or FieldEvents()
        self._errors = ErrorTimer(
            scheduler or ThreadingScheduler(),
            on_show=lambda message: self.events.emit("did_show_error", self, message),
            on_hide=lambda: self.events.emit("did_hide_error", self),
        )
        self._closed = False

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def text(self) -> str:
        return self.host.get_text()

    @property
    def text_type(self) -> TextType:
        return self._text_type

    @text_type.setter
    def text_type(self, value: TextType | str) -> None:
        """Switch grammar; the displayed text is cleared."""
        self._text_type = TextType.parse(value)
        self._formatter = get_formatter(self._text_type)
        self._set_host_text("", 0)

    @property
    def formatter(self) -> Formatter:
        return self._formatter

    @property
    def config(self) -> TextTypeConfig:
        return self._config

    def update_config(self, **changes: Any) -> TextTypeConfig:
        """Replace config options between edits."""
        self._config = replace(self._config, **changes)
        return self._config

    @property
    def plain_value(self) -> str:
        return self._formatter.plain_value(self.text, self._config)

    # ------------------------------------------------------------------
    # Edits
    # ------------------------------------------------------------------

    def handle_edit(self, request: EditRequest) -> FormatResult:
        """Format one host-reported edit and apply it."""
        self.events.emit(
            "did_start_changing", self,
            request.range_start, request.range_length, request.replacement,
        )
        result = self._formatter.handle_edit(request, self._config)
        self._apply(result)
        return result

    def edit(self, start: int, length: int, replacement: str) -> FormatResult:
        return self.handle_edit(EditRequest(self.text, start, length, replacement))

    def insert_text(self, text: str) -> FormatResult:
        """Type ``text`` over the current selection as a single edit."""
        start, length = self.host.get_selection()
        return self.edit(start, length, text)

    def type_text(self, text: str) -> list[FormatResult]:
        """Type ``text`` one keystroke at a time."""
        return [self.insert_text(ch) for ch in text]

    def delete_backward(self) -> FormatResult:
        """Backspace: erase the selection, or the character before the caret."""
        start, length = self.host.get_selection()
        if length == 0 and start > 0:
            start, length = start - 1, 1
        return self.edit(start, length, "")

    def paste(self) -> FormatResult | None:
        """Paste the host clipboard over the selection. None if ignored."""
        if not self.host.is_editing_active():
            logger.debug("paste ignored: field is not being edited")
            return None
        clipboard = self.host.read_clipboard_text()
        if not clipboard:
            return None

        start, length = self.host.get_selection()
        if self._text_type in PASTE_DISABLED:
            logger.debug("paste disabled for %s", self._text_type.value)
            return None
        if not replaces_whole_field(self._text_type):
            text = paste_text(self._text_type, clipboard)
            return self.handle_edit(EditRequest(self.text, start, length, text)) if text else None

        # Card/IBAN: a rejected paste emits no events
        request = EditRequest(self.text, start, length, clipboard)
        result = paste_result(self._text_type, clipboard, request, self._config)
        if result is None:
            return None
        self.events.emit("did_start_changing", self, start, length, clipboard)
        self._apply(result)
        return result

    def _apply(self, result: FormatResult) -> None:
        try:
            if result.accept and result.new_text is not None:
                cursor = len(result.new_text) if result.cursor is None else result.cursor
                self._set_host_text(result.new_text, cursor)
            if result.rejected:
                logger.debug("%s edit rejected, text kept as %r", self._text_type.value, self.text)
            if result.filled:
                self.events.emit("did_filled", self)
        finally:
            self.events.emit("did_end_changing", self)

    def _set_host_text(self, text: str, cursor: int) -> None:
        self.host.set_text(text)
        self.host.set_selection(max(0, min(cursor, len(text))), 0)

    # ------------------------------------------------------------------
    # Session
    # ------------------------------------------------------------------

    def begin_editing(self) -> None:
        text = self.text
        if text:
            normalized = self._formatter.begin_editing(text, self._config)
            if normalized != text:
                self._set_host_text(normalized, len(normalized))
        self.events.emit("did_begin_editing", self)

    def end_editing(self) -> None:
        text = self.text
        if text:
            normalized = self._formatter.end_editing(text, self._config)
            if normalized != text:
                self._set_host_text(normalized, len(normalized))
        self.events.emit("did_end_editing", self)

    def clear(self) -> None:
        """The host's clear button was pressed."""
        self._set_host_text("", 0)
        self.events.emit("text_field_cleared", self)

    def tap_trailing(self) -> None:
        self.events.emit("did_tap_trailing", self)

    # ------------------------------------------------------------------
    # Errors
    # ------------------------------------------------------------------

    @property
    def error_state(self) -> ErrorState | None:
        return self._errors.state

    def show_error(self, message: str, duration: float | None = None) -> bool:
        """Show ``message`` for ``duration`` seconds (config default).
        No-op while another error is showing."""
        if self._closed:
            return False
        if duration is None:
            duration = self._config.error_display_duration
        return self._errors.show_error(message, duration)

    def hide_error(self) -> None:
        self._errors.hide_error()

    def close(self) -> None:
        """The field is going away: drop any pending error timer."""
        self._errors.cancel()
        self._closed = True

    def __repr__(self) -> str:
        return f"MaskEngine(type={self._text_type.value}, text={self.text!r})"
