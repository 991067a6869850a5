"""Tests for daysay.journal.transcription."""

import asyncio

import pytest

from daysay.core.events import (
    TRANSCRIPTION_COMPLETED,
    TRANSCRIPTION_ERROR,
    TRANSCRIPTION_PROGRESS,
    TRANSCRIPTION_STARTED,
    EventBus,
)
from daysay.core.exceptions import TranscriptionError
from daysay.journal.models import CommandKind, ParsedCommand, TranscriptionResult
from daysay.journal.progress import ProgressState
from daysay.journal.transcription import TranscriptionService

AUDIO = b"RIFF....WAVEfmt "


class FakeTranscriber:
    """Returns a canned payload after yielding to the loop a few times."""

    def __init__(self, payload=None, error: Exception | None = None, yields: int = 5):
        self.payload = payload
        self.error = error
        self.yields = yields
        self.calls: list[bytes] = []
        self.seen_in_progress: list[bool] = []
        self.service: TranscriptionService | None = None

    async def transcribe(self, audio: bytes):
        self.calls.append(audio)
        if self.service is not None:
            self.seen_in_progress.append(self.service.is_transcribing)
        for _ in range(self.yields):
            await asyncio.sleep(0)
        if self.error is not None:
            raise self.error
        return self.payload


class GatedTranscriber:
    """Holds every call open until ``gate`` is set."""

    def __init__(self, payload="done"):
        self.payload = payload
        self.gate = asyncio.Event()
        self.calls = 0

    async def transcribe(self, audio: bytes):
        self.calls += 1
        await self.gate.wait()
        return self.payload


async def wait_until(predicate, limit: int = 1000):
    for _ in range(limit):
        if predicate():
            return
        await asyncio.sleep(0)
    raise AssertionError("condition never became true")


@pytest.fixture
def bus_events():
    bus = EventBus()
    names: list[str] = []
    bus.on_all(lambda event: names.append(event.name))
    return bus, names


class TestInvalidAudio:
    @pytest.mark.parametrize("audio", [None, b"", bytearray(), "not bytes", 123])
    async def test_invalid_audio_is_ignored(self, audio, instant_clock):
        transcriber = FakeTranscriber(payload="hello")
        service = TranscriptionService(transcriber, clock=instant_clock)

        assert await service.transcribe(audio) is None
        assert transcriber.calls == []
        assert service.state.in_progress is False
        assert service.state.error is None
        assert service.tracker.state is ProgressState.IDLE


class TestNormalization:
    async def test_structured_mapping(self, instant_clock):
        payload = {
            "text": "Walked the dog",
            "commands": [{"command": "NEW_ENTRY", "params": []}],
            "mood": "calm",
            "tags": ["dog"],
        }
        service = TranscriptionService(FakeTranscriber(payload), clock=instant_clock)

        result = await service.transcribe(AUDIO)
        assert result.text == "Walked the dog"
        assert result.commands[0].kind is CommandKind.NEW_ENTRY
        assert result.mood == "calm"
        assert result.tags == ["dog"]

    async def test_plain_text_is_parsed(self, instant_clock):
        service = TranscriptionService(FakeTranscriber("new entry. I feel calm today #tea"), clock=instant_clock)
        result = await service.transcribe(AUDIO)
        assert result.commands[0].kind is CommandKind.NEW_ENTRY
        assert result.mood == "calm"
        assert result.tags == ["tea"]
        assert "#tea" not in result.text

    async def test_text_only_mapping_is_parsed(self, instant_clock):
        service = TranscriptionService(FakeTranscriber({"text": "So grateful #family"}), clock=instant_clock)
        result = await service.transcribe(AUDIO)
        assert result.mood == "grateful"
        assert result.tags == ["family"]

    async def test_result_object_passes_through(self, instant_clock):
        payload = TranscriptionResult(text="as is", commands=[ParsedCommand(CommandKind.ADD_TAG, ["x"])])
        service = TranscriptionService(FakeTranscriber(payload), clock=instant_clock)
        assert await service.transcribe(AUDIO) is payload

    async def test_unexpected_payload(self, instant_clock):
        service = TranscriptionService(FakeTranscriber(42), clock=instant_clock)
        with pytest.raises(TranscriptionError):
            await service.transcribe(AUDIO)
        assert service.state.error.startswith("Unexpected transcription payload")


class TestLifecycle:
    async def test_success_updates_state_and_progress(self, instant_clock, bus_events):
        bus, names = bus_events
        transcriber = FakeTranscriber("A calm morning")
        service = TranscriptionService(transcriber, clock=instant_clock, bus=bus)
        transcriber.service = service

        await service.transcribe(AUDIO)

        assert transcriber.seen_in_progress == [True]
        assert service.is_transcribing is False
        assert service.current_transcript == "A calm morning"
        assert service.state.progress == 100.0
        assert service.tracker.state is ProgressState.DONE
        assert names[0] == TRANSCRIPTION_STARTED
        assert TRANSCRIPTION_PROGRESS in names
        assert names[-1] == TRANSCRIPTION_COMPLETED

    async def test_progress_moves_while_waiting(self, instant_clock):
        transcriber = FakeTranscriber("slow", yields=40)
        service = TranscriptionService(transcriber, clock=instant_clock)
        seen: list[float] = []
        service.tracker.on_progress(seen.append)

        await service.transcribe(AUDIO)

        creeping = [v for v in seen if 0 < v <= 95]
        assert creeping
        assert seen == sorted(seen)

    async def test_failure_records_error_and_reraises(self, instant_clock, bus_events):
        bus, names = bus_events
        service = TranscriptionService(
            FakeTranscriber(error=RuntimeError("backend unavailable")), clock=instant_clock, bus=bus
        )

        with pytest.raises(RuntimeError, match="backend unavailable"):
            await service.transcribe(AUDIO)

        assert service.state.error == "backend unavailable"
        assert service.state.in_progress is False
        assert service.tracker.in_progress is False
        assert service.state.progress < 100.0
        assert names[-1] == TRANSCRIPTION_ERROR

    async def test_error_cleared_on_next_attempt(self, instant_clock):
        transcriber = FakeTranscriber(error=RuntimeError("flaky"))
        service = TranscriptionService(transcriber, clock=instant_clock)
        with pytest.raises(RuntimeError):
            await service.transcribe(AUDIO)

        transcriber.error = None
        transcriber.payload = "second try"
        await service.transcribe(AUDIO)
        assert service.state.error is None
        assert service.current_transcript == "second try"

    async def test_clear_transcript(self, instant_clock):
        service = TranscriptionService(FakeTranscriber("remember this"), clock=instant_clock)
        await service.transcribe(AUDIO)
        service.clear_transcript()
        assert service.current_transcript == ""
        assert service.state.commands == []


class TestPendingCall:
    async def test_second_call_while_pending_is_ignored(self, instant_clock):
        transcriber = GatedTranscriber("first")
        service = TranscriptionService(transcriber, clock=instant_clock)
        seen: list[float] = []
        service.tracker.on_progress(seen.append)

        first = asyncio.create_task(service.transcribe(AUDIO))
        await wait_until(lambda: service.state.progress >= 10)
        before = service.state.progress

        assert await service.transcribe(AUDIO) is None
        assert transcriber.calls == 1
        assert service.state.progress >= before
        assert service.is_transcribing is True

        transcriber.gate.set()
        result = await first
        assert result.text == "first"
        assert seen == sorted(seen)
        assert service.is_transcribing is False

    async def test_next_call_accepted_after_completion(self, instant_clock):
        transcriber = GatedTranscriber("again")
        transcriber.gate.set()
        service = TranscriptionService(transcriber, clock=instant_clock)

        await service.transcribe(AUDIO)
        result = await service.transcribe(AUDIO)
        assert result.text == "again"
        assert transcriber.calls == 2

    async def test_clearing_flag_freezes_progress(self, instant_clock):
        transcriber = GatedTranscriber("late")
        service = TranscriptionService(transcriber, clock=instant_clock)

        pending = asyncio.create_task(service.transcribe(AUDIO))
        await wait_until(lambda: service.state.progress >= 8)
        service.state.in_progress = False
        frozen = service.state.progress

        for _ in range(50):
            await asyncio.sleep(0)
        assert service.state.progress == frozen
        assert service.tracker.state is ProgressState.RUNNING

        transcriber.gate.set()
        result = await pending
        assert result.text == "late"
        assert service.state.progress == 100.0

    async def test_cancelled_call_resets_state(self, instant_clock):
        transcriber = GatedTranscriber("after cancel")
        service = TranscriptionService(transcriber, clock=instant_clock)

        pending = asyncio.create_task(service.transcribe(AUDIO))
        await wait_until(lambda: service.state.progress > 0)
        pending.cancel()
        with pytest.raises(asyncio.CancelledError):
            await pending

        assert service.is_transcribing is False
        assert service.tracker.in_progress is False
        frozen = service.state.progress
        for _ in range(20):
            await asyncio.sleep(0)
        assert service.state.progress == frozen

        transcriber.gate.set()
        result = await service.transcribe(AUDIO)
        assert result.text == "after cancel"
