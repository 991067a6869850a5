"""Copy and share journal text with an attribution line.

Clipboard and share targets are injected, so the service works the same
behind a desktop clipboard, a browser bridge or a test double. Neither
operation raises: outcomes land in :class:`StatusMessages` and the return
value.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from loguru import logger

from daysay.core.config import DEFAULT_ATTRIBUTION, DEFAULT_SHARE_POSTFIX
from daysay.core.events import TRANSCRIPTION_COPIED, TRANSCRIPTION_SHARED, Event, EventBus
from daysay.core.exceptions import ShareCancelledError, ShareUnsupportedError

SHARE_TITLE = "DaySay Journal Entry"

MSG_NOTHING_TO_COPY = "No text available to copy"
MSG_COPIED = "Journal entry copied to clipboard"
MSG_COPY_UNAVAILABLE = "Unable to copy. Please try clicking in the window first."
MSG_NOTHING_TO_SHARE = "No journal entry available to share"
MSG_SHARED = "Journal entry shared successfully"


class Clipboard(Protocol):
    async def write_text(self, text: str) -> bool | None:
        """Write *text*. Returning ``False`` means the copy silently did not happen."""
        ...


class ShareTarget(Protocol):
    async def share(self, title: str, text: str) -> None:
        """Raise ShareCancelledError if the user backs out."""
        ...


@dataclass
class StatusMessages:
    """User-facing feedback from the last copy/share attempt."""

    error_message: str | None = None
    screen_reader_message: str | None = None
    clipboard_success: bool = False

    def reset(self) -> None:
        self.error_message = None
        self.screen_reader_message = None
        self.clipboard_success = False


class ShareService:
    def __init__(
        self,
        clipboard: Clipboard | None = None,
        share_target: ShareTarget | None = None,
        *,
        attribution: str = DEFAULT_ATTRIBUTION,
        share_postfix: str = DEFAULT_SHARE_POSTFIX,
        share_title: str = SHARE_TITLE,
        bus: EventBus | None = None,
    ) -> None:
        self.clipboard = clipboard
        self.share_target = share_target
        self.attribution = attribution
        self.share_postfix = share_postfix
        self.share_title = share_title
        self.bus = bus
        self.status = StatusMessages()

    @classmethod
    def from_config(
        cls,
        config,
        clipboard: Clipboard | None = None,
        share_target: ShareTarget | None = None,
        bus: EventBus | None = None,
    ) -> ShareService:
        """Build with the attribution settings from the ``sharing`` config section."""
        sharing = config.validated().sharing
        return cls(
            clipboard,
            share_target,
            attribution=sharing.attribution,
            share_postfix=sharing.share_postfix,
            share_title=sharing.share_title,
            bus=bus,
        )

    @property
    def is_share_supported(self) -> bool:
        return self.share_target is not None

    def _notify(self, name: str, text: str) -> None:
        if self.bus is not None:
            self.bus.emit_sync(Event(name=name, payload={"text": text}, source="sharing"))

    async def copy_to_clipboard(self, text: str | None) -> bool:
        if not text or not text.strip():
            self.status.error_message = MSG_NOTHING_TO_COPY
            return False

        payload = f"{text}\n\n{self.attribution}"
        try:
            if self.clipboard is None:
                raise RuntimeError("No clipboard available")
            written = await self.clipboard.write_text(payload)
        except Exception as exc:
            logger.error(f"Clipboard copy error: {exc}")
            self.status.error_message = f"Copy failed: {str(exc) or 'Unknown error'}"
            self.status.screen_reader_message = MSG_COPY_UNAVAILABLE
            return False

        if written is False:
            self.status.screen_reader_message = MSG_COPY_UNAVAILABLE
            return False

        self.status.clipboard_success = True
        self.status.screen_reader_message = MSG_COPIED
        self._notify(TRANSCRIPTION_COPIED, payload)
        return True

    async def share(self, text: str | None) -> bool:
        if not text or not text.strip():
            self.status.error_message = MSG_NOTHING_TO_SHARE
            return False

        payload = f"{text}{self.share_postfix}"
        try:
            if self.share_target is None:
                raise ShareUnsupportedError("Sharing is not supported here")
            await self.share_target.share(self.share_title, payload)
        except ShareCancelledError:
            logger.debug("Share cancelled by user")
            return False
        except ShareUnsupportedError as exc:
            logger.info(f"{exc}; falling back to clipboard")
            return await self.copy_to_clipboard(text)
        except Exception as exc:
            logger.error(f"Share error: {exc}")
            self.status.error_message = f"Share failed: {str(exc) or 'Unknown error'}"
            return False

        self.status.clipboard_success = True
        self.status.screen_reader_message = MSG_SHARED
        self._notify(TRANSCRIPTION_SHARED, payload)
        return True
