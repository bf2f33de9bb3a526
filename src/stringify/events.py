"""Field lifecycle events.

Every slot is optional: bind any subset and the engine calls only those.

    events = FieldEvents(did_filled=lambda field: print("done", field.text))
"""

from __future__ import annotations
import logging
from dataclasses import dataclass, fields
from typing import Any, Callable, Optional

logger = logging.getLogger(__name__)

FieldCallback = Callable[[Any], None]
# (field, range_start, range_length, replacement)
ChangeCallback = Callable[[Any, int, int, str], None]
# (field, message)
ErrorCallback = Callable[[Any, str], None]


@dataclass
class FieldEvents:
    """Callback slots for one field."""
    did_begin_editing: Optional[FieldCallback] = None
    did_start_changing: Optional[ChangeCallback] = None
    did_end_changing: Optional[FieldCallback] = None
    did_filled: Optional[FieldCallback] = None
    did_end_editing: Optional[FieldCallback] = None
    text_field_cleared: Optional[FieldCallback] = None
    did_tap_trailing: Optional[FieldCallback] = None
    did_show_error: Optional[ErrorCallback] = None
    did_hide_error: Optional[FieldCallback] = None

    @classmethod
    def names(cls) -> list[str]:
        return [f.name for f in fields(cls)]

    def emit(self, name: str, *args: Any) -> None:
        """Invoke slot ``name`` if bound. Subscriber failures are logged,
        never propagated into the edit."""
        callback = getattr(self, name)
        if callback is None:
            return
        try:
            callback(*args)
        except Exception:
            logger.exception("%s callback failed", name)
