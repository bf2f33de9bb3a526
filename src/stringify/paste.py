"""Clipboard paste — sanitize, then validate against the field's grammar."""

from __future__ import annotations
import logging

from .formatters import GroupedFormatter, get_formatter
from .types import EditRequest, FormatResult, TextType, TextTypeConfig

logger = logging.getLogger(__name__)

# Types whose fields disable cut/paste entirely
PASTE_DISABLED = frozenset({TextType.AMOUNT, TextType.EXP_DATE})


def sanitize_clipboard(text: str) -> str:
    """Strip spaces and non-breaking spaces."""
    return text.replace(" ", "").replace("\u00a0", "")


def paste_text(text_type: TextType | str, clipboard: str) -> str:
    """Clipboard text as it reaches the grammar. Free text keeps its spaces."""
    if TextType.parse(text_type) is TextType.FREE_TEXT:
        return clipboard
    return sanitize_clipboard(clipboard)


def replaces_whole_field(text_type: TextType | str) -> bool:
    return isinstance(get_formatter(text_type), GroupedFormatter)


def paste_result(
    text_type: TextType | str,
    clipboard: str,
    request: EditRequest,
    config: TextTypeConfig,
) -> FormatResult | None:
    """Verdict on pasting ``clipboard`` over ``request``'s range.

    Returns None when the paste is ignored. Card and IBAN pastes replace the
    whole field; CVV and free text paste like any other insertion.
    """
    text_type = TextType.parse(text_type)
    if text_type in PASTE_DISABLED:
        logger.debug("paste disabled for %s", text_type.value)
        return None

    text = paste_text(text_type, clipboard)
    formatter = get_formatter(text_type)
    if isinstance(formatter, GroupedFormatter):
        result = formatter.paste(text, request.current_text)
        if result is None:
            logger.debug("clipboard rejected for %s", text_type.value)
        return result

    if not text:
        return None
    pasted = EditRequest(request.current_text, request.range_start, request.range_length, text)
    return formatter.handle_edit(pasted, config)
