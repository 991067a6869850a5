"""Tests for daysay.journal.sharing."""

import pytest

from daysay.core.events import TRANSCRIPTION_COPIED, TRANSCRIPTION_SHARED, EventBus
from daysay.core.exceptions import ShareCancelledError, ShareUnsupportedError
from daysay.journal.sharing import (
    MSG_COPIED,
    MSG_COPY_UNAVAILABLE,
    MSG_NOTHING_TO_COPY,
    MSG_NOTHING_TO_SHARE,
    MSG_SHARED,
    ShareService,
)


class FakeClipboard:
    def __init__(self, result=True, error: Exception | None = None):
        self.result = result
        self.error = error
        self.written: list[str] = []

    async def write_text(self, text: str):
        if self.error:
            raise self.error
        self.written.append(text)
        return self.result


class FakeShareTarget:
    def __init__(self, error: Exception | None = None):
        self.error = error
        self.shared: list[tuple[str, str]] = []

    async def share(self, title: str, text: str) -> None:
        if self.error:
            raise self.error
        self.shared.append((title, text))


class TestCopy:
    async def test_copy_appends_attribution(self):
        clipboard = FakeClipboard()
        service = ShareService(clipboard, attribution="Recorded with DaySay")

        assert await service.copy_to_clipboard("Walked by the river") is True
        assert clipboard.written == ["Walked by the river\n\nRecorded with DaySay"]
        assert service.status.screen_reader_message == MSG_COPIED
        assert service.status.clipboard_success is True
        assert service.status.error_message is None

    @pytest.mark.parametrize("text", ["", "   ", None])
    async def test_copy_blank(self, text):
        service = ShareService(FakeClipboard())
        assert await service.copy_to_clipboard(text) is False
        assert service.status.error_message == MSG_NOTHING_TO_COPY

    async def test_copy_failure_never_raises(self):
        service = ShareService(FakeClipboard(error=OSError("clipboard locked")))
        assert await service.copy_to_clipboard("text") is False
        assert service.status.error_message == "Copy failed: clipboard locked"
        assert service.status.screen_reader_message == MSG_COPY_UNAVAILABLE

    async def test_copy_without_clipboard(self):
        service = ShareService()
        assert await service.copy_to_clipboard("text") is False
        assert service.status.error_message.startswith("Copy failed")

    async def test_copy_silently_refused(self):
        service = ShareService(FakeClipboard(result=False))
        assert await service.copy_to_clipboard("text") is False
        assert service.status.screen_reader_message == MSG_COPY_UNAVAILABLE
        assert service.status.error_message is None

    async def test_copy_event(self):
        bus = EventBus()
        seen: list[str] = []
        bus.on(TRANSCRIPTION_COPIED, lambda event: seen.append(event.payload["text"]))
        service = ShareService(FakeClipboard(), attribution="sig", bus=bus)
        await service.copy_to_clipboard("hi")
        assert seen == ["hi\n\nsig"]


class TestShare:
    async def test_share_success(self):
        target = FakeShareTarget()
        bus = EventBus()
        seen: list[str] = []
        bus.on(TRANSCRIPTION_SHARED, lambda event: seen.append(event.name))
        service = ShareService(share_target=target, share_postfix=" -- DaySay", bus=bus)

        assert service.is_share_supported
        assert await service.share("Sunny day") is True
        assert target.shared == [("DaySay Journal Entry", "Sunny day -- DaySay")]
        assert service.status.screen_reader_message == MSG_SHARED
        assert seen == [TRANSCRIPTION_SHARED]

    async def test_share_blank(self):
        service = ShareService(share_target=FakeShareTarget())
        assert await service.share("  ") is False
        assert service.status.error_message == MSG_NOTHING_TO_SHARE

    async def test_unsupported_falls_back_to_copy(self):
        clipboard = FakeClipboard()
        service = ShareService(clipboard, attribution="sig")
        assert not service.is_share_supported
        assert await service.share("text") is True
        assert clipboard.written == ["text\n\nsig"]

    async def test_unsupported_error_from_target_falls_back(self):
        clipboard = FakeClipboard()
        service = ShareService(clipboard, FakeShareTarget(error=ShareUnsupportedError("no share sheet")))
        assert await service.share("text") is True
        assert len(clipboard.written) == 1

    async def test_cancel_is_not_an_error(self):
        clipboard = FakeClipboard()
        service = ShareService(clipboard, FakeShareTarget(error=ShareCancelledError()))
        assert await service.share("text") is False
        assert service.status.error_message is None
        assert clipboard.written == []

    async def test_other_failures_report_error(self):
        service = ShareService(FakeClipboard(), FakeShareTarget(error=RuntimeError("bridge died")))
        assert await service.share("text") is False
        assert service.status.error_message == "Share failed: bridge died"


def test_status_reset():
    service = ShareService()
    service.status.error_message = "x"
    service.status.clipboard_success = True
    service.status.reset()
    assert service.status.error_message is None
    assert service.status.clipboard_success is False


async def test_from_config_uses_sharing_section(tmp_config_file):
    from daysay.core.config import Config

    clipboard = FakeClipboard()
    service = ShareService.from_config(Config(config_file=tmp_config_file), clipboard)
    assert service.share_title == "DaySay Journal Entry"
    await service.copy_to_clipboard("note")
    assert clipboard.written == ["note\n\nvia tests"]
