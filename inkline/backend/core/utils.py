"""
Helpers shared by the backend and the client core.

Timestamps are naive UTC everywhere, in the database and on the wire.
"""

import re
from datetime import datetime, timezone

_TAG_RE = re.compile(r"<[^>]+>")
_WS_RE = re.compile(r"\s+")

UNTITLED = "Untitled"


def utc_now() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def display_title(title: str | None) -> str:
    """Trimmed title, or "Untitled" when blank."""
    stripped = (title or "").strip()
    return stripped or UNTITLED


def strip_markup(html: str | None) -> str:
    """Note body as plain text with tags removed and whitespace collapsed."""
    return _WS_RE.sub(" ", _TAG_RE.sub(" ", html or "")).strip()


def word_count(html: str | None) -> int:
    text = strip_markup(html)
    return len(text.split(" ")) if text else 0
