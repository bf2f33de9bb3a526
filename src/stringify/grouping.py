"""Pure string helpers for digit grouping and caret placement.

Nothing here holds state: every helper is a function of its arguments, so
formatters built on top of them can be shared between fields.
"""

from __future__ import annotations
import re
from typing import Callable

_NON_DIGITS = re.compile(r"\D+")


def only_digits(s: str) -> str:
    return _NON_DIGITS.sub("", s or "")


def is_ascii_digits(s: str) -> bool:
    return bool(s) and s.isascii() and s.isdigit()


def separate(s: str, every: int, sep: str) -> str:
    """Insert ``sep`` after every ``every`` characters, left to right.

    >>> separate("1234567890", 4, " ")
    '1234 5678 90'
    """
    return sep.join(s[i:i + every] for i in range(0, len(s), every))


def group_integer(digits: str, sep: str) -> str:
    """Insert ``sep`` every 3 digits counted from the right.

    >>> group_integer("1234567", " ")
    '1 234 567'
    """
    head = len(digits) % 3 or 3
    parts = [digits[:head]]
    parts.extend(digits[i:i + 3] for i in range(head, len(digits), 3))
    return sep.join(p for p in parts if p)


def collapse_leading_zeros(digits: str) -> str:
    """``"007"`` -> ``"7"``; a lone ``"0"`` survives."""
    stripped = digits.lstrip("0")
    if not stripped and digits:
        return "0"
    return stripped


def caret_after(text: str, count: int, keep: Callable[[str], bool]) -> int:
    """Index just past the ``count``-th character of ``text`` for which
    ``keep`` is true. Separators (``keep`` false) are never counted, so a
    caret expressed in kept characters survives regrouping."""
    if count <= 0:
        return 0
    seen = 0
    for i, ch in enumerate(text):
        if keep(ch):
            seen += 1
            if seen == count:
                return i + 1
    return len(text)
