"""YAML/dict config loader for stringify fields.

Supports loading from a YAML file or a plain dict (for embedding in a
larger app config). Option names may be camelCase or snake_case.

Example YAML:

    stringify:
      textType: amount
      currencyMark: BYN
      maxIntegerDigits: 8
      maxFractionDigits: 2
      decimalSeparator: ","
      useGrouping: true
      errorDisplayDuration: 1.5
"""

from __future__ import annotations
import logging
import re
from dataclasses import fields
from pathlib import Path
from typing import Any

from .engine import MaskEngine
from .error_timer import Scheduler
from .events import FieldEvents
from .host import EditableTextHost
from .types import TextType, TextTypeConfig

logger = logging.getLogger(__name__)

_CONFIG_FIELDS = {f.name for f in fields(TextTypeConfig)}
_TYPE_KEYS = ("text_type", "type")
# Accepted spellings that don't map by simple case conversion
_ALIASES = {
    "need_grouping_separator": "use_grouping",
}


def _snake(key: str) -> str:
    return re.sub(r"(?<=[a-z0-9])([A-Z])", r"_\1", key).lower()


def load_config(data: dict[str, Any]) -> tuple[TextType, TextTypeConfig]:
    """Normalize a config dict (from YAML or inline) into a text type and
    a validated ``TextTypeConfig``."""
    # Support nested under "stringify" key or flat
    if "stringify" in data:
        data = data["stringify"] or {}

    text_type = TextType.AMOUNT
    options: dict[str, Any] = {}
    for key, value in data.items():
        name = _snake(key)
        name = _ALIASES.get(name, name)
        if name in _TYPE_KEYS:
            text_type = TextType.parse(value)
        elif name in _CONFIG_FIELDS:
            options[name] = value
        else:
            logger.warning("ignoring unknown config option %r", key)

    for name in ("max_integer_digits", "max_fraction_digits", "max_free_text_length"):
        if name in options:
            options[name] = int(options[name])
    if "error_display_duration" in options:
        options["error_display_duration"] = float(options["error_display_duration"])
    for name in ("currency_mark", "decimal_separator", "grouping_separator", "date_format"):
        if name in options and options[name] is not None:
            options[name] = str(options[name])

    return text_type, TextTypeConfig(**options)


def load_from_yaml(path: str | Path) -> tuple[TextType, TextTypeConfig]:
    """Load config from a YAML file."""
    import yaml  # optional dependency
    with open(path) as f:
        return load_config(yaml.safe_load(f) or {})


def create_engine(
    config: dict[str, Any],
    *,
    host: EditableTextHost | None = None,
    events: FieldEvents | None = None,
    scheduler: Scheduler | None = None,
) -> MaskEngine:
    """Create a fully configured field from a config dict."""
    text_type, field_config = load_config(config)
    return MaskEngine(host, text_type, field_config, events=events, scheduler=scheduler)
