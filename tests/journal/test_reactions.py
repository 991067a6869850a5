"""Tests for daysay.journal.reactions."""

import pytest

from daysay.core.events import (
    JOURNAL_ENTRY_REACTION,
    JOURNAL_EXPRESSION,
    JOURNAL_MOOD_REACTION,
    JOURNAL_THINKING,
    Event,
    EventBus,
)
from daysay.journal.reactions import ReactionNotifier, entry_reaction, expression_for_mood


@pytest.fixture
def captured():
    bus = EventBus()
    events: list[Event] = []
    bus.on_all(events.append)
    return ReactionNotifier(bus), events


@pytest.mark.parametrize(
    "length, expression, duration, follow_up, then",
    [
        (501, "excited", 3000, True, None),
        (500, "happy", 2500, True, None),
        (201, "happy", 2500, True, None),
        (200, "smile", 2000, False, None),
        (51, "smile", 2000, False, None),
        (50, "thinking", 2000, False, "neutral"),
        (0, "thinking", 2000, False, "neutral"),
    ],
)
def test_entry_reaction_thresholds(length, expression, duration, follow_up, then):
    assert entry_reaction(length) == {
        "expression": expression,
        "duration_ms": duration,
        "follow_up": follow_up,
        "then": then,
    }


@pytest.mark.parametrize(
    "mood, expression",
    [
        ("happy", "happy"),
        ("tired", "thinking"),
        ("angry", "sad"),
        ("calm", "smile"),
        ("surprised", "excited"),
        ("proud", "happy"),
        ("grateful", "smile"),
        ("Anxious", "thinking"),
        ("bewildered", "neutral"),
        (None, "neutral"),
    ],
)
def test_mood_expressions(mood, expression):
    assert expression_for_mood(mood) == expression


def test_react_to_entry_publishes(captured):
    notifier, events = captured
    notifier.react_to_entry(600)
    assert events[0].name == JOURNAL_ENTRY_REACTION
    assert events[0].payload["length"] == 600
    assert events[0].payload["expression"] == "excited"
    assert events[0].source == "journal"


def test_react_to_mood_strong_moods_follow_up(captured):
    notifier, events = captured
    notifier.react_to_mood("proud")
    notifier.react_to_mood("calm")

    assert [e.name for e in events] == [JOURNAL_MOOD_REACTION, JOURNAL_MOOD_REACTION]
    assert events[0].payload == {"mood": "proud", "expression": "happy", "duration_ms": 4000, "follow_up": True}
    assert events[1].payload["follow_up"] is False


def test_set_expression_and_thinking(captured):
    notifier, events = captured
    notifier.set_expression("smile")
    notifier.set_expression("sad", duration_ms=500)
    notifier.show_thinking()

    assert events[0].payload == {"expression": "smile", "duration_ms": 2000}
    assert events[1].payload == {"expression": "sad", "duration_ms": 500}
    assert events[2].name == JOURNAL_THINKING
    assert {e.name for e in events[:2]} == {JOURNAL_EXPRESSION}


def test_failing_hook_does_not_reach_caller():
    bus = EventBus()

    def broken(event: Event) -> None:
        raise RuntimeError("no face to animate")

    bus.on(JOURNAL_MOOD_REACTION, broken)
    ReactionNotifier(bus).react_to_mood("happy")
