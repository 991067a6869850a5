"""Transcription wrapper around an injected speech-to-text backend.

The backend is a black box: it takes raw audio bytes and returns either a
structured result (text, commands, mood, tags) or plain text. Plain text is
run through :class:`TextCommandParser` so callers always get a
:class:`TranscriptionResult`.

While the backend call is outstanding a :class:`ProgressTracker` creeps
forward on the injected clock; the animation is cosmetic and never
reflects real backend progress.
"""

from __future__ import annotations

import asyncio
import contextlib
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Protocol

from loguru import logger

from daysay.core.events import (
    TRANSCRIPTION_COMPLETED,
    TRANSCRIPTION_ERROR,
    TRANSCRIPTION_PROGRESS,
    TRANSCRIPTION_STARTED,
    Event,
    EventBus,
)
from daysay.core.exceptions import TranscriptionError

from .models import ParsedCommand, TranscriptionResult
from .parser import TextCommandParser
from .progress import AsyncioClock, Clock, ProgressTracker

_STRUCTURED_FIELDS = ("commands", "mood", "tags")


class Transcriber(Protocol):
    """Speech-to-text backend."""

    async def transcribe(self, audio: bytes) -> TranscriptionResult | Mapping[str, Any] | str: ...


@dataclass
class TranscriptionState:
    """What a UI would bind to while a recording is being transcribed."""

    in_progress: bool = False
    progress: float = 0.0
    text: str = ""
    commands: list[ParsedCommand] = field(default_factory=list)
    error: str | None = None


class TranscriptionService:
    """Run one transcription at a time and normalize the result.

    Args:
        transcriber: The speech-to-text backend.
        parser: Used when the backend returns plain text.
        clock: Drives the progress animation; real asyncio sleeps by default.
        bus: Optional event bus for started/progress/completed/error events.
        tick_interval: Seconds between progress ticks.
    """

    def __init__(
        self,
        transcriber: Transcriber,
        parser: TextCommandParser | None = None,
        *,
        clock: Clock | None = None,
        bus: EventBus | None = None,
        tick_interval: float = 0.05,
    ):
        self.transcriber = transcriber
        self.parser = parser or TextCommandParser()
        self.clock = clock or AsyncioClock()
        self.bus = bus
        self.tick_interval = tick_interval
        self.state = TranscriptionState()
        self.tracker = ProgressTracker(is_active=lambda: self.state.in_progress)
        self._busy = False
        self.tracker.on_progress(self._on_progress)

    # -- Queries --------------------------------------------------------------

    @property
    def is_transcribing(self) -> bool:
        return self.state.in_progress

    @property
    def current_transcript(self) -> str:
        return self.state.text

    def clear_transcript(self) -> None:
        self.state.text = ""
        self.state.commands = []

    # -- Transcription --------------------------------------------------------

    async def transcribe(self, audio: Any) -> TranscriptionResult | None:
        """Transcribe *audio* and return the normalized result.

        Invalid audio (None, not bytes, empty) is logged and ignored, as is
        audio arriving while another transcription is still pending.
        Backend failures are recorded in ``state.error`` and re-raised.
        """
        if not isinstance(audio, (bytes, bytearray)) or not audio:
            logger.warning("Invalid audio data provided; skipping transcription")
            return None
        if self._busy:
            logger.warning("Transcription already in progress; ignoring new audio")
            return None

        self._busy = True
        try:
            return await self._transcribe(bytes(audio))
        finally:
            self._busy = False

    async def _transcribe(self, audio: bytes) -> TranscriptionResult:
        self.state.in_progress = True
        self.state.error = None
        self._emit(TRANSCRIPTION_STARTED, {"bytes": len(audio)})
        self.tracker.start()

        animation = asyncio.create_task(self.tracker.run(self.clock, self.tick_interval))
        try:
            payload = await self.transcriber.transcribe(audio)
            result = self._normalize(payload)
        except Exception as exc:
            await self._stop_animation(animation)
            self.state.error = str(exc) or "Unknown transcription error"
            logger.error(f"Transcription error: {self.state.error}")
            self._emit(TRANSCRIPTION_ERROR, {"error": self.state.error})
            raise
        finally:
            await self._stop_animation(animation)

        await self.tracker.finish(self.clock)

        self.state.text = result.text
        self.state.commands = list(result.commands)
        logger.info(f"Transcribed {len(result.text)} characters, {len(result.commands)} commands")
        self._emit(TRANSCRIPTION_COMPLETED, result.to_dict())
        return result

    def _normalize(self, payload: Any) -> TranscriptionResult:
        if isinstance(payload, TranscriptionResult):
            return payload
        if isinstance(payload, str):
            return self.parser.parse(payload)
        if isinstance(payload, Mapping):
            if any(key in payload for key in _STRUCTURED_FIELDS):
                return TranscriptionResult.from_mapping(payload)
            return self.parser.parse(payload.get("text"))
        raise TranscriptionError(f"Unexpected transcription payload: {type(payload).__name__}")

    async def _stop_animation(self, animation: asyncio.Task) -> None:
        """Idempotent: safe to call from both the error path and cleanup."""
        self.tracker.stop()
        self.state.in_progress = False
        animation.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await animation

    def _on_progress(self, value: float) -> None:
        self.state.progress = value
        self._emit(TRANSCRIPTION_PROGRESS, {"progress": value})

    def _emit(self, name: str, payload: dict[str, Any]) -> None:
        if self.bus is not None:
            self.bus.emit_sync(Event(name=name, payload=payload, source="transcription"))
