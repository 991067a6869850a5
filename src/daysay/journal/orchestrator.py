"""Glue between transcription results and the entry store.

``JournalOrchestrator.process_transcription`` is the single place where a
spoken note turns into store mutations::

    store = EntryStore(persistence)
    store.initialize()
    orchestrator = JournalOrchestrator(store, reactions=ReactionNotifier(bus))
    await orchestrator.process_transcription(parser.parse("new entry. I feel calm. #walk"))
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import date
from typing import Any

from loguru import logger

from .models import CommandKind, JournalEntry, ParseResult, TranscriptionResult
from .reactions import ReactionNotifier
from .store import EntryStore
from .transcription import TranscriptionService
from .views import active_entry


class JournalOrchestrator:
    """Apply transcription results to an :class:`EntryStore`.

    Args:
        store: The entry store to mutate. Initialized on first use if needed.
        reactions: Notified after each processed note; never awaited.
        transcription: Needed only for :meth:`record`.
    """

    def __init__(
        self,
        store: EntryStore,
        *,
        reactions: ReactionNotifier | None = None,
        transcription: TranscriptionService | None = None,
    ):
        self.store = store
        self.reactions = reactions
        self.transcription = transcription

    # -- Processing -----------------------------------------------------------

    async def process_transcription(self, result: ParseResult | Mapping[str, Any]) -> None:
        """Apply commands, append text, then mood and tags, then notify.

        Blank text is a logged no-op: commands riding along with it are
        dropped too.
        """
        if isinstance(result, Mapping):
            result = ParseResult.from_mapping(result)

        text = (result.text or "").strip()
        if not text:
            logger.info("No text content to process for journal entry")
            return

        self._ensure_ready()

        for command in result.commands:
            if command.kind in (CommandKind.NEW_ENTRY, CommandKind.TODAY_ENTRY):
                self.store.add_today_entry()
            elif command.kind is CommandKind.YESTERDAY_ENTRY:
                self.store.add_yesterday_entry()
            elif command.kind is CommandKind.SET_MOOD and command.param:
                self.store.set_entry_mood(command.param)
            elif command.kind is CommandKind.ADD_TAG and command.param:
                self.store.add_entry_tag(command.param)

        if active_entry(self.store) is None:
            self.store.add_today_entry()
        self.store.add_content(text)

        if result.mood:
            self.store.set_entry_mood(result.mood)
        for tag in result.tags:
            self.store.add_entry_tag(tag)

        self._notify(text, result.mood)

    async def record(self, audio: Any) -> TranscriptionResult | None:
        """Transcribe *audio* and process the result.

        Returns None for invalid audio. Transcription failures propagate.
        """
        if self.transcription is None:
            raise RuntimeError("JournalOrchestrator.record needs a TranscriptionService")

        if self.reactions is not None:
            self.reactions.show_thinking()
        result = await self.transcription.transcribe(audio)
        if result is None:
            return None
        await self.process_transcription(result)
        return result

    def _ensure_ready(self) -> None:
        if not self.store.is_initialized:
            self.store.initialize()

    def _notify(self, text: str, mood: str | None) -> None:
        if self.reactions is None:
            return
        try:
            self.reactions.react_to_entry(len(text))
            if mood:
                self.reactions.react_to_mood(mood)
        except Exception as e:
            logger.warning(f"Reaction notification failed: {e}")

    # -- Passthroughs ---------------------------------------------------------

    def create_entry(self, entry_date: str | date | None = None, title: str | None = None) -> str:
        self._ensure_ready()
        return self.store.add_entry(entry_date, title)

    def create_today_entry(self) -> str:
        self._ensure_ready()
        return self.store.add_today_entry()

    def create_yesterday_entry(self) -> str:
        self._ensure_ready()
        return self.store.add_yesterday_entry()

    def add_content_to_entry(self, text: str, entry_id: str | None = None) -> None:
        """Append *text*; with no active entry, today's entry is created first."""
        self._ensure_ready()
        if entry_id is None and active_entry(self.store) is None:
            self.store.add_today_entry()
        self.store.add_content(text, entry_id)

    def get_all_entries(self) -> list[JournalEntry]:
        return self.store.entries

    def get_entries_by_date(self, start: str | date, end: str | date) -> list[JournalEntry]:
        return self.store.get_entries_by_date_range(start, end)

    def get_active_entry(self) -> JournalEntry | None:
        return active_entry(self.store)
