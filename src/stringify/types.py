"""Core types."""

from __future__ import annotations
import re
from dataclasses import dataclass
from enum import Enum


class TextType(str, Enum):
    """Grammar governing how a field formats its text."""
    AMOUNT = "amount"            # "1 200,99"
    CREDIT_CARD = "creditCard"   # "1234 5678 9012 3456"
    IBAN = "iban"                # "BY12 BLBB 1234 5678 0000 1234 5678"
    EXP_DATE = "expDate"         # "03/22"
    CVV = "cvv"                  # "123"
    FREE_TEXT = "freeText"

    @classmethod
    def parse(cls, name: str | TextType) -> TextType:
        """Resolve a type from its value ("creditCard"), member name
        ("credit_card") or the legacy "none" alias for free text."""
        if isinstance(name, TextType):
            return name
        key = name.strip().replace("-", "_").lower()
        if key == "none":
            return cls.FREE_TEXT
        for member in cls:
            if key in (member.value.lower(), member.name.lower()):
                return member
        raise ValueError(f"unknown text type: {name!r}")


@dataclass(frozen=True, slots=True)
class TextTypeConfig:
    """Per-field formatting options. Replace (don't mutate) between edits."""
    currency_mark: str = ""
    max_integer_digits: int = 10
    decimal: bool = True              # allow a fraction part (amount only)
    use_grouping: bool = True
    max_fraction_digits: int = 2
    decimal_separator: str = ","
    grouping_separator: str = " "
    date_format: str = "MMyy"         # plain value format for exp dates
    max_free_text_length: int = 100
    pattern: str | None = None        # regex every free-text insertion must match
    error_display_duration: float = 1.0

    def __post_init__(self) -> None:
        if not self.decimal_separator:
            raise ValueError("decimal_separator must not be empty")
        if not self.grouping_separator:
            raise ValueError("grouping_separator must not be empty")
        if self.decimal_separator == self.grouping_separator:
            raise ValueError("decimal and grouping separators must differ")
        if self.max_integer_digits < 1:
            raise ValueError("max_integer_digits must be at least 1")
        if self.max_fraction_digits < 0 or self.max_free_text_length < 0:
            raise ValueError("digit and length limits must be non-negative")
        if self.error_display_duration < 0:
            raise ValueError("error_display_duration must be non-negative")
        if self.pattern is not None:
            try:
                re.compile(self.pattern)
            except re.error as e:
                raise ValueError(f"invalid pattern {self.pattern!r}: {e}") from e

    @property
    def fraction_enabled(self) -> bool:
        return self.decimal and self.max_fraction_digits > 0


@dataclass(frozen=True, slots=True)
class EditRequest:
    """One atomic insert/delete/replace reported by the host field."""
    current_text: str
    range_start: int
    range_length: int
    replacement: str

    def __post_init__(self) -> None:
        if self.range_start < 0 or self.range_length < 0:
            raise ValueError("edit range must be non-negative")
        if self.range_start + self.range_length > len(self.current_text):
            raise ValueError(
                f"edit range {self.range_start}+{self.range_length} exceeds "
                f"text length {len(self.current_text)}"
            )

    @property
    def range_end(self) -> int:
        return self.range_start + self.range_length

    @property
    def is_noop(self) -> bool:
        return self.range_length == 0 and not self.replacement

    @property
    def is_deletion(self) -> bool:
        return not self.replacement and not self.is_noop

    def spliced(self) -> str:
        """The text a plain host would show after this edit."""
        t = self.current_text
        return t[:self.range_start] + self.replacement + t[self.range_end:]


@dataclass(frozen=True, slots=True)
class FormatResult:
    """The verdict on an EditRequest."""
    accept: bool
    new_text: str | None = None
    cursor: int | None = None
    filled: bool = False
    rejected: bool = False     # grammar violation, text left unchanged

    @classmethod
    def apply(cls, text: str, cursor: int, *, filled: bool = False) -> FormatResult:
        return cls(accept=True, new_text=text, cursor=cursor, filled=filled)

    @classmethod
    def reject(cls, request: EditRequest) -> FormatResult:
        return cls(
            accept=True,
            new_text=request.current_text,
            cursor=request.range_end,
            rejected=True,
        )

    @classmethod
    def passthrough(cls) -> FormatResult:
        """Let the host perform its own default edit."""
        return cls(accept=False)
