"""CLI interface for stringify — drive a headless masked field from a shell.

Usage:
    # Type characters one by one (stdout: JSON with text, caret, plain value)
    python -m stringify.cli --type creditCard type 1234567890123456

    # Same, then run end-of-editing normalisation
    python -m stringify.cli --type amount --currency-mark BYN type 1200,5 --end

    # Paste clipboard text into an empty field
    python -m stringify.cli --type iban paste "by12 blbb 1234"

    # Plain value of an already formatted display string
    python -m stringify.cli --type expDate --date-format MMyyyy plain 03/22
"""

from __future__ import annotations
import argparse
import json
import logging
import sys
from dataclasses import asdict
from typing import Any

from .config import load_config, load_from_yaml
from .engine import MaskEngine
from .events import FieldEvents
from .host import InMemoryHost
from .types import TextType, TextTypeConfig

logger = logging.getLogger(__name__)


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        stream=sys.stderr,
    )


def _build_config(args: argparse.Namespace) -> tuple[TextType, TextTypeConfig]:
    data: dict[str, Any] = {}
    if args.config:
        text_type, config = load_from_yaml(args.config)
        data = {"textType": text_type.value}
        data.update(asdict(config))
    overrides = {
        "textType": args.type,
        "currencyMark": args.currency_mark,
        "decimalSeparator": args.decimal_separator,
        "maxFractionDigits": args.max_fraction_digits,
        "maxIntegerDigits": args.max_integer_digits,
        "dateFormat": args.date_format,
        "pattern": args.pattern,
    }
    data.update({k: v for k, v in overrides.items() if v is not None})
    if args.no_decimal:
        data["decimal"] = False
    return load_config(data)


def _build_field(args: argparse.Namespace, fills: list[str]) -> MaskEngine:
    text_type, config = _build_config(args)
    events = FieldEvents(did_filled=lambda field: fills.append(field.text))
    return MaskEngine(InMemoryHost(), text_type, config, events=events)


def _report(field: MaskEngine, fills: list[str], **extra: Any) -> None:
    output = {
        "type": field.text_type.value,
        "text": field.text,
        "cursor": field.host.get_selection()[0],
        "plain_value": field.plain_value,
        "filled": len(fills),
        **extra,
    }
    json.dump(output, sys.stdout, ensure_ascii=False)
    sys.stdout.write("\n")


def cmd_type(args: argparse.Namespace) -> None:
    """Type characters into a fresh field, one keystroke each."""
    fills: list[str] = []
    field = _build_field(args, fills)
    field.begin_editing()
    results = field.type_text(args.text)
    if args.end:
        field.end_editing()
    _report(field, fills, rejected=sum(r.rejected for r in results))


def cmd_paste(args: argparse.Namespace) -> None:
    """Paste text into a fresh field."""
    fills: list[str] = []
    field = _build_field(args, fills)
    host = field.host
    host.clipboard = args.text
    host.set_editing(True)
    field.begin_editing()
    result = field.paste()
    _report(field, fills, ignored=result is None)


def cmd_plain(args: argparse.Namespace) -> None:
    """Print the plain value of a display string."""
    text_type, config = _build_config(args)
    field = MaskEngine(InMemoryHost(args.text), text_type, config)
    sys.stdout.write(field.plain_value + "\n")


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        prog="stringify",
        description="Keystroke-level text masking for input fields",
    )
    parser.add_argument("--type", default=None, help="amount, creditCard, iban, expDate, cvv, freeText")
    parser.add_argument("--config", default=None, help="YAML config file")
    parser.add_argument("--currency-mark", default=None, help="Currency mark for amounts")
    parser.add_argument("--decimal-separator", default=None, help="Decimal separator for amounts")
    parser.add_argument("--max-fraction-digits", type=int, default=None)
    parser.add_argument("--max-integer-digits", type=int, default=None)
    parser.add_argument("--no-decimal", action="store_true", help="Integer amounts only")
    parser.add_argument("--date-format", default=None, help="Plain value format for exp dates")
    parser.add_argument("--pattern", default=None, help="Regex for free text insertions")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging to stderr")

    sub = parser.add_subparsers(dest="command", required=True)
    p_type = sub.add_parser("type", help="Simulate keystrokes")
    p_type.add_argument("text")
    p_type.add_argument("--end", action="store_true", help="Finish editing afterwards")
    p_paste = sub.add_parser("paste", help="Simulate a clipboard paste")
    p_paste.add_argument("text")
    p_plain = sub.add_parser("plain", help="Plain value of display text")
    p_plain.add_argument("text")

    args = parser.parse_args(argv)
    configure_logging(args.verbose)

    cmds = {
        "type": cmd_type,
        "paste": cmd_paste,
        "plain": cmd_plain,
    }
    try:
        cmds[args.command](args)
    except ValueError as e:
        parser.exit(2, f"stringify: error: {e}\n")


if __name__ == "__main__":
    main()
