"""stringify — keystroke-level text masking for amount, card, IBAN, expiry date, CVV and free-text fields."""

from .types import TextType, TextTypeConfig, EditRequest, FormatResult
from .formatters import (
    Formatter, AmountFormatter, CardFormatter, IBANFormatter,
    ExpDateFormatter, CVVFormatter, PatternFormatter,
    format_edit, get_formatter, display_value,
)
from .plain import extract_plain_value
from .host import EditableTextHost, InMemoryHost
from .events import FieldEvents
from .error_timer import ErrorTimer, ErrorState, ThreadingScheduler, AsyncioScheduler
from .paste import sanitize_clipboard, paste_result, paste_text
from .engine import MaskEngine
from .config import create_engine, load_config, load_from_yaml

__all__ = [
    "TextType", "TextTypeConfig", "EditRequest", "FormatResult",
    "Formatter", "AmountFormatter", "CardFormatter", "IBANFormatter",
    "ExpDateFormatter", "CVVFormatter", "PatternFormatter",
    "format_edit", "get_formatter", "display_value", "extract_plain_value",
    "EditableTextHost", "InMemoryHost",
    "FieldEvents",
    "ErrorTimer", "ErrorState", "ThreadingScheduler", "AsyncioScheduler",
    "sanitize_clipboard", "paste_result", "paste_text",
    "MaskEngine",
    "create_engine", "load_config", "load_from_yaml",
]
__version__ = "0.1.0"
