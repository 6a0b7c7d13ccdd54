"""
Alert message rendering.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from config import DEFAULT_MESSAGE

NOW_TOKEN = "{now}"
STALETIME_TOKEN = "{staletime}"

__all__ = ["DEFAULT_MESSAGE", "format_timestamp", "render_alert"]


def format_timestamp(timestamp_ms: int, time_format: Optional[str] = None) -> str:
    """Render epoch milliseconds as a local-time string."""
    moment = datetime.fromtimestamp(timestamp_ms / 1000, tz=timezone.utc).astimezone()
    if time_format:
        return moment.strftime(time_format)
    return moment.isoformat(sep=" ", timespec="milliseconds")


def render_alert(template: str, now: int, seen: int, time_format: Optional[str] = None) -> str:
    # {staletime} goes first so a rendered {now} can never be re-substituted.
    message = template.replace(STALETIME_TOKEN, format_timestamp(seen, time_format))
    return message.replace(NOW_TOKEN, format_timestamp(now, time_format))
