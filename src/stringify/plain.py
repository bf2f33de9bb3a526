"""Plain values — canonical, separator-free values derived from display text.

Extraction is a pure function of (text, type, config) and never raises for
user text: anything that cannot be interpreted comes back as ``""``.
"""

from __future__ import annotations
import logging
import re
from datetime import date, datetime

from .grouping import collapse_leading_zeros
from .types import TextType, TextTypeConfig

logger = logging.getLogger(__name__)

EXP_DATE_FORMAT = "MM/yy"

_DIGITS = re.compile(r"[0-9]*")
_ICU_TOKEN = re.compile(r"([A-Za-z])\1*")
_NBSP = "\u00a0"


# ── Amount ───────────────────────────────────────────────────────────

def strip_currency(text: str, config: TextTypeConfig) -> str:
    if config.currency_mark:
        text = text.replace(config.currency_mark, "")
    return text.strip()


def split_amount(text: str, config: TextTypeConfig) -> tuple[str, str] | None:
    """Split display text into (integer digits, fraction digits).

    Returns None when the text is empty or holds anything besides digits,
    separators and the currency mark.
    """
    body = strip_currency(text, config)
    body = body.replace(config.grouping_separator, "").replace(" ", "").replace(_NBSP, "")
    integer, _, fraction = body.partition(config.decimal_separator)
    if not integer and not fraction:
        return None
    if not _DIGITS.fullmatch(integer) or not _DIGITS.fullmatch(fraction):
        return None
    return collapse_leading_zeros(integer) or "0", fraction


def fixed_fraction(fraction: str, width: int) -> str:
    """Pad with zeros or truncate (never round) to exactly ``width`` digits."""
    return fraction[:width].ljust(width, "0")


def amount_plain_value(text: str, config: TextTypeConfig) -> str:
    if not config.decimal:
        return strip_currency(text, config).replace(config.grouping_separator, "")
    parts = split_amount(text, config)
    if parts is None:
        return ""
    integer, fraction = parts
    if config.max_fraction_digits == 0:
        return integer
    return f"{integer}.{fixed_fraction(fraction, config.max_fraction_digits)}"


# ── Dates ────────────────────────────────────────────────────────────

def _tokens(fmt: str):
    """Yield (is_field, chunk) pairs for an ICU-style date pattern."""
    pos = 0
    for m in _ICU_TOKEN.finditer(fmt):
        if m.start() > pos:
            yield False, fmt[pos:m.start()]
        yield True, m.group()
        pos = m.end()
    if pos < len(fmt):
        yield False, fmt[pos:]


def _strptime_format(fmt: str) -> str:
    out: list[str] = []
    for is_field, chunk in _tokens(fmt):
        if not is_field:
            out.append(chunk.replace("%", "%%"))
        elif chunk[0] == "y":
            out.append("%y" if len(chunk) == 2 else "%Y")
        elif chunk[0] == "M" and len(chunk) <= 2:
            out.append("%m")
        elif chunk[0] == "d" and len(chunk) <= 2:
            out.append("%d")
        else:
            raise ValueError(f"unsupported date field {chunk!r} in {fmt!r}")
    return "".join(out)


def _render(value: date, fmt: str) -> str:
    out: list[str] = []
    for is_field, chunk in _tokens(fmt):
        if not is_field:
            out.append(chunk)
        elif chunk == "yy":
            out.append(f"{value.year % 100:02d}")
        elif chunk[0] == "y":
            out.append(f"{value.year:0{max(len(chunk), 4)}d}")
        elif chunk == "MM":
            out.append(f"{value.month:02d}")
        elif chunk == "M":
            out.append(str(value.month))
        elif chunk == "dd":
            out.append(f"{value.day:02d}")
        elif chunk == "d":
            out.append(str(value.day))
        else:
            raise ValueError(f"unsupported date field {chunk!r} in {fmt!r}")
    return "".join(out)


def convert_date(text: str, source_format: str, target_format: str) -> str | None:
    """Re-express ``text`` (written in ``source_format``) in ``target_format``.

    Formats use ICU field letters (``yyyy``, ``yy``, ``MM``, ``M``, ``dd``,
    ``d``). Returns None if the text doesn't parse or a format is unsupported.
    """
    try:
        parsed = datetime.strptime(text.strip(), _strptime_format(source_format))
        return _render(parsed.date(), target_format)
    except ValueError as e:
        logger.debug("cannot convert %r from %r to %r: %s", text, source_format, target_format, e)
        return None


def exp_date_plain_value(text: str, config: TextTypeConfig) -> str:
    return convert_date(text, EXP_DATE_FORMAT, config.date_format) or ""


# ── Dispatch ─────────────────────────────────────────────────────────

def extract_plain_value(text: str, text_type: TextType | str, config: TextTypeConfig) -> str:
    """Canonical value of ``text`` for the given field type."""
    text_type = TextType.parse(text_type)
    text = text or ""
    if text_type is TextType.AMOUNT:
        return amount_plain_value(text, config)
    if text_type is TextType.CREDIT_CARD:
        return text.replace(" ", "").strip()
    if text_type is TextType.IBAN:
        return text.replace(" ", "").strip().upper()
    if text_type is TextType.EXP_DATE:
        return exp_date_plain_value(text, config)
    if text_type is TextType.CVV:
        return text.strip()
    return text
