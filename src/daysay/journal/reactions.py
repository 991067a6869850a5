"""Companion-character reactions to journal activity.

The core only *describes* a reaction (an expression, how long to hold it
and whether to follow up); whoever renders the character subscribes to the
bus. Nothing here waits on timers.
"""

from __future__ import annotations

from typing import Any

from loguru import logger

from daysay.core.events import (
    JOURNAL_ENTRY_REACTION,
    JOURNAL_EXPRESSION,
    JOURNAL_MOOD_REACTION,
    JOURNAL_THINKING,
    Event,
    EventBus,
)

DEFAULT_EXPRESSION_MS = 2000
MOOD_EXPRESSION_MS = 4000
THINKING_MS = 5000

MOOD_EXPRESSIONS: dict[str, str] = {
    "happy": "happy",
    "sad": "sad",
    "neutral": "neutral",
    "excited": "excited",
    "tired": "thinking",
    "angry": "sad",
    "anxious": "thinking",
    "calm": "smile",
    "surprised": "excited",
    "proud": "happy",
    "grateful": "smile",
}

STRONG_MOODS = frozenset({"happy", "excited", "proud"})


def expression_for_mood(mood: str | None) -> str:
    return MOOD_EXPRESSIONS.get((mood or "").strip().lower(), "neutral")


def entry_reaction(length: int) -> dict[str, Any]:
    """Describe how to react to an entry of *length* characters."""
    if length > 500:
        return {"expression": "excited", "duration_ms": 3000, "follow_up": True, "then": None}
    if length > 200:
        return {"expression": "happy", "duration_ms": 2500, "follow_up": True, "then": None}
    if length > 50:
        return {"expression": "smile", "duration_ms": 2000, "follow_up": False, "then": None}
    return {"expression": "thinking", "duration_ms": 2000, "follow_up": False, "then": "neutral"}


class ReactionNotifier:
    """Publishes reaction events on an :class:`EventBus`."""

    def __init__(self, bus: EventBus | None = None) -> None:
        self.bus = bus or EventBus()

    def _publish(self, name: str, payload: dict[str, Any]) -> None:
        logger.debug(f"Reaction {name}: {payload}")
        self.bus.emit_sync(Event(name=name, payload=payload, source="journal"))

    def react_to_entry(self, length: int) -> None:
        self._publish(JOURNAL_ENTRY_REACTION, {"length": length, **entry_reaction(length)})

    def react_to_mood(self, mood: str | None) -> None:
        key = (mood or "").strip().lower()
        self._publish(
            JOURNAL_MOOD_REACTION,
            {
                "mood": key,
                "expression": expression_for_mood(key),
                "duration_ms": MOOD_EXPRESSION_MS,
                "follow_up": key in STRONG_MOODS,
            },
        )

    def set_expression(self, expression: str, duration_ms: int = DEFAULT_EXPRESSION_MS) -> None:
        self._publish(JOURNAL_EXPRESSION, {"expression": expression, "duration_ms": duration_ms})

    def show_thinking(self) -> None:
        self._publish(JOURNAL_THINKING, {"expression": "thinking", "duration_ms": THINKING_MS})
