"""Calendar-date helpers for journal entries.

Entries are keyed by ``YYYY-MM-DD`` strings. These helpers build those
strings and turn them back into something readable.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta

DATE_FORMAT = "%Y-%m-%d"

_MOOD_EMOJIS = {
    "happy": "😊",
    "sad": "😢",
    "neutral": "😐",
    "excited": "🤩",
    "tired": "😴",
    "angry": "😠",
    "anxious": "😰",
    "calm": "😌",
    "surprised": "😲",
    "proud": "😄",
    "grateful": "🙏",
}


def format_date(value: date | datetime | None = None) -> str:
    """Return ``YYYY-MM-DD`` for *value* (defaults to today)."""
    value = value or date.today()
    if isinstance(value, datetime):
        value = value.date()
    return value.strftime(DATE_FORMAT)


def parse_date(value: str | date | None) -> date | None:
    """Parse a ``YYYY-MM-DD`` string. Returns None for blank or invalid input."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return datetime.strptime(str(value).strip()[:10], DATE_FORMAT).date()
    except ValueError:
        return None


def today_string(today: date | None = None) -> str:
    return format_date(today or date.today())


def yesterday_string(today: date | None = None) -> str:
    return format_date((today or date.today()) - timedelta(days=1))


def is_today(date_string: str, today: date | None = None) -> bool:
    return date_string == today_string(today)


def is_yesterday(date_string: str, today: date | None = None) -> bool:
    return date_string == yesterday_string(today)


def format_display_date(date_string: str) -> str:
    """``2025-05-10`` -> ``Saturday, May 10, 2025``. Invalid input is returned unchanged."""
    if not date_string:
        return ""
    parsed = parse_date(date_string)
    if parsed is None:
        return date_string
    return f"{parsed:%A, %B} {parsed.day}, {parsed.year}"


def format_short_date(date_string: str) -> str:
    """``2025-05-10`` -> ``May 10``. Invalid input is returned unchanged."""
    if not date_string:
        return ""
    parsed = parse_date(date_string)
    if parsed is None:
        return date_string
    return f"{parsed:%b} {parsed.day}"


def relative_date_string(date_string: str, today: date | None = None) -> str:
    """``Today``, ``Yesterday``, or the long display date."""
    if is_today(date_string, today):
        return "Today"
    if is_yesterday(date_string, today):
        return "Yesterday"
    return format_display_date(date_string)


def mood_emoji(mood: str | None) -> str:
    return _MOOD_EMOJIS.get(mood or "", _MOOD_EMOJIS["neutral"])
