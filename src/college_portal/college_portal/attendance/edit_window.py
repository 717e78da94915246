"""Edit window for submitted attendance.

A session stays editable for a fixed time after it was submitted and is
locked afterwards; nothing unlocks it again.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Optional

from ..core.constants import DEFAULT_EDIT_WINDOW_MINUTES
from ..core.enums import EditWindowState
from ..core.exceptions import EditWindowClosedError

DEFAULT_EDIT_WINDOW = timedelta(minutes=DEFAULT_EDIT_WINDOW_MINUTES)


def edit_state(created_at: Optional[datetime], now: datetime, window: timedelta = DEFAULT_EDIT_WINDOW) -> EditWindowState:
    # The boundary itself (exactly ``window`` after submission) is still editable.
    if created_at is None:
        return EditWindowState.LOCKED
    if now - created_at <= window:
        return EditWindowState.EDITABLE
    return EditWindowState.LOCKED


def can_edit(created_at: Optional[datetime], now: datetime, window: timedelta = DEFAULT_EDIT_WINDOW) -> bool:
    return edit_state(created_at, now, window) is EditWindowState.EDITABLE


def ensure_editable(created_at: Optional[datetime], now: datetime, window: timedelta = DEFAULT_EDIT_WINDOW) -> None:
    if not can_edit(created_at, now, window):
        hours = window.total_seconds() / 3600
        label = f"{hours:g} hours" if hours != 1 else "1 hour"
        raise EditWindowClosedError(
            f"This attendance record is older than {label} and can no longer be edited."
        )
