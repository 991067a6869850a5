"""Event bus for presentation notifications and store observers.

The journal core never waits on its listeners: reaction hooks (ghost
expressions, toasts, screen-reader messages) and store observers subscribe
here, and a failing hook is logged without touching the caller.

Usage::

    from daysay.core.events import EventBus, Event, JOURNAL_MOOD_REACTION

    bus = EventBus()

    def on_mood(event: Event) -> None:
        print(f"Mood reaction: {event.payload['expression']}")

    bus.on(JOURNAL_MOOD_REACTION, on_mood)
    bus.emit_sync(Event(name=JOURNAL_MOOD_REACTION, payload={"expression": "smile"}, source="journal"))
"""

from __future__ import annotations

import asyncio
import inspect
from collections import defaultdict
from dataclasses import dataclass, field
from time import time
from typing import Any

from loguru import logger

# ---------------------------------------------------------------------------
# Well-known event names
# ---------------------------------------------------------------------------

STORE_CHANGED = "journal.store.changed"
JOURNAL_ENTRY_REACTION = "journal.reaction.entry"
JOURNAL_MOOD_REACTION = "journal.reaction.mood"
JOURNAL_EXPRESSION = "journal.reaction.expression"
JOURNAL_THINKING = "journal.reaction.thinking"
TRANSCRIPTION_STARTED = "transcription.started"
TRANSCRIPTION_PROGRESS = "transcription.progress"
TRANSCRIPTION_COMPLETED = "transcription.completed"
TRANSCRIPTION_ERROR = "transcription.error"
TRANSCRIPTION_COPIED = "transcription.copied"
TRANSCRIPTION_SHARED = "transcription.shared"

# Type alias for hook callables (sync or async)
Hook = Any  # Callable[[Event], None] | Callable[[Event], Awaitable[None]]


# ---------------------------------------------------------------------------
# Event model
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Event:
    """An immutable event that flows through the bus."""

    name: str
    payload: dict[str, Any] = field(default_factory=dict)
    timestamp: float = field(default_factory=time)
    source: str = ""


# ---------------------------------------------------------------------------
# EventBus
# ---------------------------------------------------------------------------


class EventBus:
    """Simple pub/sub event bus supporting sync and async hooks."""

    def __init__(self) -> None:
        self._hooks: dict[str, list[Hook]] = defaultdict(list)
        self._wildcard_hooks: list[Hook] = []
        self._background_tasks: set[asyncio.Task] = set()  # keeps scheduled hooks alive until done

    def on(self, event_name: str, hook: Hook) -> None:
        """Register *hook* for a specific event name."""
        self._hooks[event_name].append(hook)

    def on_all(self, hook: Hook) -> None:
        """Register *hook* for all events (wildcard)."""
        self._wildcard_hooks.append(hook)

    def off(self, event_name: str, hook: Hook) -> None:
        """Unregister *hook* from a specific event name."""
        try:
            self._hooks[event_name].remove(hook)
        except ValueError:
            pass

    def has_listeners(self, event_name: str) -> bool:
        return bool(self._hooks.get(event_name)) or bool(self._wildcard_hooks)

    def _hooks_for(self, event_name: str) -> list[Hook]:
        hooks = list(self._hooks.get(event_name, []))
        hooks.extend(self._wildcard_hooks)
        return hooks

    async def emit(self, event: Event) -> None:
        """Emit an event, awaiting every matching hook in registration order."""
        for hook in self._hooks_for(event.name):
            try:
                if inspect.iscoroutinefunction(hook):
                    await hook(event)
                else:
                    hook(event)
            except Exception as exc:
                logger.warning(f"Event hook failed for {event.name}: {exc}")

    def emit_sync(self, event: Event) -> None:
        """Fire-and-forget emit.

        Sync hooks run inline. Async hooks are scheduled as tasks on the
        running loop; without one they are skipped. Nothing propagates back
        to the emitter.
        """
        loop: asyncio.AbstractEventLoop | None = None
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            pass

        for hook in self._hooks_for(event.name):
            try:
                if inspect.iscoroutinefunction(hook):
                    if loop is not None:
                        task = loop.create_task(self._run_async_hook(hook, event))
                        self._background_tasks.add(task)
                        task.add_done_callback(self._background_tasks.discard)
                    else:
                        logger.debug(f"Skipping async hook {hook!r}: no running event loop")
                else:
                    hook(event)
            except Exception as exc:
                logger.warning(f"Event hook failed for {event.name}: {exc}")

    @staticmethod
    async def _run_async_hook(hook: Hook, event: Event) -> None:
        try:
            await hook(event)
        except Exception as exc:
            logger.warning(f"Event hook failed for {event.name}: {exc}")
