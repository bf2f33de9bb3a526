"""Formatters — one grammar per text type.

Every formatter is a stateless object: ``handle_edit(request, config)`` is a
pure function of its arguments, so a single instance per type is shared by
all fields (see ``FORMATTERS``).

Usage:
    from stringify.formatters import format_edit
    from stringify.types import EditRequest, TextType, TextTypeConfig

    result = format_edit(EditRequest("1234", 4, 0, "5"), TextType.CREDIT_CARD, TextTypeConfig())
    print(result.new_text, result.cursor)   # "1234 5" 6
"""

from __future__ import annotations
import logging
import re
from typing import ClassVar

from .grouping import caret_after, group_integer, is_ascii_digits, only_digits, separate
from .plain import (
    EXP_DATE_FORMAT,
    convert_date,
    extract_plain_value,
    fixed_fraction,
    split_amount,
    strip_currency,
)
from .types import EditRequest, FormatResult, TextType, TextTypeConfig

logger = logging.getLogger(__name__)


class Formatter:
    """Shared edit dispatch: no-op, deletion or insertion."""

    text_type: ClassVar[TextType]
    max_length: ClassVar[int | None] = None   # longest accepted display text

    def handle_edit(self, request: EditRequest, config: TextTypeConfig) -> FormatResult:
        if request.is_noop:
            return FormatResult.apply(request.current_text, request.range_start)
        if request.is_deletion:
            return self.delete(request, config)
        return self.insert(request, config)

    def delete(self, request: EditRequest, config: TextTypeConfig) -> FormatResult:
        """Remove the range verbatim, caret where the range began."""
        return FormatResult.apply(request.spliced(), request.range_start)

    def insert(self, request: EditRequest, config: TextTypeConfig) -> FormatResult:
        raise NotImplementedError

    def plain_value(self, text: str, config: TextTypeConfig) -> str:
        return extract_plain_value(text, self.text_type, config)

    def display(self, value: str, config: TextTypeConfig) -> str:
        """Display text for a plain value."""
        return value

    def begin_editing(self, text: str, config: TextTypeConfig) -> str:
        return text

    def end_editing(self, text: str, config: TextTypeConfig) -> str:
        return text

    def _reject(self, request: EditRequest, reason: str) -> FormatResult:
        logger.debug(
            "%s rejected %r at %d+%d: %s",
            self.text_type.value, request.replacement,
            request.range_start, request.range_length, reason,
        )
        return FormatResult.reject(request)


# ── Amount ───────────────────────────────────────────────────────────

# Keys treated as "the decimal separator" whatever the configured one is
SEPARATOR_KEYS = (".", ",")


class AmountFormatter(Formatter):
    """Decimal amounts: ``"1 200,99"``.

    All state lives in the text. Grouping is a string transform over the
    integer digits; fraction digits are never touched.
    """

    text_type = TextType.AMOUNT

    def handle_edit(self, request: EditRequest, config: TextTypeConfig) -> FormatResult:
        mark = config.currency_mark
        if mark and mark in request.current_text and not request.is_noop:
            # Field edited without begin_editing(); work on the bare number
            text = strip_currency(request.current_text, config)
            if request.replacement:
                start = min(request.range_start, len(text))
                length = min(request.range_length, len(text) - start)
            else:
                start, length = max(len(text) - 1, 0), min(len(text), 1)
            request = EditRequest(text, start, length, request.replacement)
        return super().handle_edit(request, config)

    def delete(self, request: EditRequest, config: TextTypeConfig) -> FormatResult:
        text = request.current_text
        if len(text) <= 1:
            return FormatResult.apply("", 0)

        remainder = text[:-1]
        if remainder.endswith(config.decimal_separator):
            new_text = remainder
        elif self._is_zero(remainder, config):
            new_text = remainder    # "0,0" must not collapse
        else:
            new_text = self._regroup(remainder, config)
        return FormatResult.apply(new_text, len(new_text))

    def insert(self, request: EditRequest, config: TextTypeConfig) -> FormatResult:
        replacement = request.replacement
        if replacement in SEPARATOR_KEYS or replacement == config.decimal_separator:
            return self._insert_separator(request, config)
        if not is_ascii_digits(replacement):
            return self._reject(request, "not a digit")

        prospective = request.spliced()
        parts = split_amount(prospective, config)
        if parts is None:
            return self._reject(request, "unparsable amount")
        integer, fraction = parts
        has_separator = config.decimal_separator in prospective

        if has_separator and len(fraction) > config.max_fraction_digits:
            return self._reject(request, "too many fraction digits")
        if len(integer) > config.max_integer_digits:
            return self._reject(request, "too many integer digits")

        new_text = self._compose(integer, fraction, has_separator, config)

        def keep(ch: str) -> bool:
            return ch not in config.grouping_separator

        typed = prospective[:request.range_start + len(replacement)]
        raw_integer = prospective.partition(config.decimal_separator)[0]
        collapsed = sum(map(keep, raw_integer)) - len(integer)
        cursor = caret_after(new_text, sum(map(keep, typed)) - collapsed, keep)
        return FormatResult.apply(new_text, cursor)

    def begin_editing(self, text: str, config: TextTypeConfig) -> str:
        return strip_currency(text, config)

    def end_editing(self, text: str, config: TextTypeConfig) -> str:
        """Fix the fraction width, regroup and append the currency mark."""
        bare = strip_currency(text, config)
        if not bare:
            return ""
        parts = split_amount(bare, config)
        if parts is None:
            return text
        integer, fraction = parts
        if config.fraction_enabled:
            fraction = fixed_fraction(fraction, config.max_fraction_digits)
            number = self._compose(integer, fraction, True, config)
        else:
            number = self._compose(integer, "", False, config)
        return f"{number} {config.currency_mark}".strip()

    def display(self, value: str, config: TextTypeConfig) -> str:
        integer, _, fraction = value.strip().partition(".")
        if not is_ascii_digits(integer) or (fraction and not is_ascii_digits(fraction)):
            return ""
        return self.end_editing(self._compose(integer, fraction, bool(fraction), config), config)

    def _insert_separator(self, request: EditRequest, config: TextTypeConfig) -> FormatResult:
        text = request.current_text
        if not config.fraction_enabled:
            return self._reject(request, "fraction disabled")
        if config.decimal_separator in text:
            return self._reject(request, "separator already present")
        new_text = (text or "0") + config.decimal_separator
        return FormatResult.apply(new_text, len(new_text))

    @staticmethod
    def _compose(integer: str, fraction: str, has_separator: bool, config: TextTypeConfig) -> str:
        integer = integer.lstrip("0") or "0"
        if config.use_grouping:
            integer = group_integer(integer, config.grouping_separator)
        if has_separator:
            return integer + config.decimal_separator + fraction
        return integer

    def _regroup(self, text: str, config: TextTypeConfig) -> str:
        parts = split_amount(text, config)
        if parts is None:
            return text
        integer, fraction = parts
        return self._compose(integer, fraction, config.decimal_separator in text, config)

    @staticmethod
    def _is_zero(text: str, config: TextTypeConfig) -> bool:
        parts = split_amount(text, config)
        return parts is not None and not "".join(parts).strip("0")


# ── Card / IBAN ──────────────────────────────────────────────────────

class GroupedFormatter(Formatter):
    """Alphanumeric blocks of 4 separated by a single space."""

    raw_max: ClassVar[int]
    group_size: ClassVar[int] = 4
    separator: ClassVar[str] = " "

    def accepts(self, raw: str) -> bool:
        raise NotImplementedError

    def insert(self, request: EditRequest, config: TextTypeConfig) -> FormatResult:
        typed = request.replacement.replace(self.separator, "")
        if not typed or not self.accepts(typed):
            return self._reject(request, "invalid characters")

        text = request.current_text
        head = text[:request.range_start].replace(self.separator, "")
        tail = text[request.range_end:].replace(self.separator, "")
        raw = head + typed + tail
        if len(raw) > self.raw_max:
            return self._reject(request, "too long")

        new_text = separate(raw, self.group_size, self.separator)
        cursor = caret_after(new_text, len(head) + len(typed), lambda ch: ch != self.separator)
        return FormatResult.apply(new_text, cursor, filled=self._fills(text, raw))

    def paste(self, raw: str, current_text: str) -> FormatResult | None:
        """Replace the whole field with sanitized clipboard text, or None
        if the clipboard doesn't fit this grammar."""
        if not raw or len(raw) > self.raw_max or not self.accepts(raw):
            return None
        new_text = separate(raw, self.group_size, self.separator)
        return FormatResult.apply(new_text, len(new_text), filled=self._fills(current_text, raw))

    def display(self, value: str, config: TextTypeConfig) -> str:
        return separate(value.replace(self.separator, ""), self.group_size, self.separator)

    def _fills(self, before: str, raw_after: str) -> bool:
        return (
            len(raw_after) == self.raw_max
            and len(before.replace(self.separator, "")) < self.raw_max
        )


class CardFormatter(GroupedFormatter):
    text_type = TextType.CREDIT_CARD
    raw_max = 16
    max_length = 19

    def accepts(self, raw: str) -> bool:
        return is_ascii_digits(raw)


class IBANFormatter(GroupedFormatter):
    text_type = TextType.IBAN
    raw_max = 34
    max_length = 42

    def accepts(self, raw: str) -> bool:
        return raw.isascii() and raw.isalnum()


# ── Expiry date ──────────────────────────────────────────────────────

class ExpDateFormatter(Formatter):
    """``MM/YY`` with the slash inserted automatically."""

    text_type = TextType.EXP_DATE
    max_length = 5

    def insert(self, request: EditRequest, config: TextTypeConfig) -> FormatResult:
        if not is_ascii_digits(request.replacement):
            return self._reject(request, "not a digit")

        text = request.current_text
        head = text[:request.range_start].replace("/", "")
        tail = text[request.range_end:].replace("/", "")
        digits = head + request.replacement + tail
        if len(digits) > 4:
            return self._reject(request, "too long")

        new_text = separate(digits, 2, "/")
        if len(digits) == 2:
            new_text += "/"
        cursor = caret_after(new_text, len(head) + len(request.replacement), str.isdigit)
        if new_text[cursor:] == "/":
            cursor += 1
        filled = len(new_text) == self.max_length and len(only_digits(text)) < 4
        return FormatResult.apply(new_text, cursor, filled=filled)

    def display(self, value: str, config: TextTypeConfig) -> str:
        return convert_date(value, config.date_format, EXP_DATE_FORMAT) or ""


# ── CVV ──────────────────────────────────────────────────────────────

class CVVFormatter(Formatter):
    text_type = TextType.CVV
    max_length = 3

    def insert(self, request: EditRequest, config: TextTypeConfig) -> FormatResult:
        if not is_ascii_digits(request.replacement):
            return self._reject(request, "not a digit")
        prospective = request.spliced()
        if len(prospective) > self.max_length:
            return self._reject(request, "too long")
        filled = len(prospective) == self.max_length and len(request.current_text) < self.max_length
        return FormatResult.apply(
            prospective, request.range_start + len(request.replacement), filled=filled,
        )


# ── Free text ────────────────────────────────────────────────────────

class PatternFormatter(Formatter):
    """Free text limited by length and an optional regex."""

    text_type = TextType.FREE_TEXT

    def insert(self, request: EditRequest, config: TextTypeConfig) -> FormatResult:
        if config.pattern and not self.matches(config.pattern, request.replacement):
            return self._reject(request, f"does not match {config.pattern!r}")
        prospective = request.spliced()
        limit = config.max_free_text_length
        if len(prospective) > limit:
            return self._reject(request, "too long")
        filled = len(prospective) == limit and len(request.current_text) < limit
        return FormatResult.apply(
            prospective, request.range_start + len(request.replacement), filled=filled,
        )

    @staticmethod
    def matches(pattern: str, replacement: str) -> bool:
        """Whole replacement matches, or each of its characters does."""
        compiled = re.compile(pattern)
        if compiled.fullmatch(replacement):
            return True
        return all(compiled.fullmatch(ch) for ch in replacement)


# ── Registry ─────────────────────────────────────────────────────────

FORMATTERS: dict[TextType, Formatter] = {
    TextType.AMOUNT: AmountFormatter(),
    TextType.CREDIT_CARD: CardFormatter(),
    TextType.IBAN: IBANFormatter(),
    TextType.EXP_DATE: ExpDateFormatter(),
    TextType.CVV: CVVFormatter(),
    TextType.FREE_TEXT: PatternFormatter(),
}


def get_formatter(text_type: TextType | str) -> Formatter:
    return FORMATTERS[TextType.parse(text_type)]


def format_edit(request: EditRequest, text_type: TextType | str, config: TextTypeConfig) -> FormatResult:
    """Stateless entry point: the verdict on one edit for one grammar."""
    return get_formatter(text_type).handle_edit(request, config)


def display_value(value: str, text_type: TextType | str, config: TextTypeConfig) -> str:
    """Inverse of ``extract_plain_value``: display text for a plain value."""
    return get_formatter(text_type).display(value, config)
