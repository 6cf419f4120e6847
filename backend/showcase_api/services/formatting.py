from datetime import datetime, timezone
from typing import Optional

import markdown

MARKDOWN_EXTENSIONS = ["tables", "fenced_code", "sane_lists"]


def render_markdown(text: str) -> str:
    return markdown.markdown(text, extensions=MARKDOWN_EXTENSIONS)


def _plural(count: int, unit: str, single: str) -> str:
    if count <= 1:
        return f"{single} {unit} ago"
    return f"{count} {unit}s ago"


def time_ago(timestamp: str, now: Optional[datetime] = None) -> str:
    """Humanize an ISO-8601 timestamp relative to ``now`` (UTC)."""
    then = datetime.fromisoformat(timestamp.replace("Z", "+00:00")).astimezone(timezone.utc)
    now = now or datetime.now(timezone.utc)
    seconds = int((now - then).total_seconds())
    if seconds < 45:
        return "just now"
    minutes = round(seconds / 60)
    if minutes < 45:
        return _plural(minutes, "minute", "a")
    hours = round(seconds / 3600)
    if hours < 22:
        return _plural(hours, "hour", "an")
    days = round(seconds / 86400)
    if days < 26:
        return _plural(days, "day", "a")
    if days < 320:
        return _plural(max(round(days / 30), 1), "month", "a")
    return _plural(max(round(days / 365), 1), "year", "a")
