"""
DaySay exception hierarchy.

All daysay exceptions inherit from DaySayError, making it easy for consumers
to catch library-level errors while still distinguishing specific failure modes.

The parser and entry store never raise these for bad input; they degrade to
empty results or no-ops. Transcription and sharing failures are the ones a
caller actually sees.
"""


class DaySayError(Exception):
    """Base exception class for all daysay errors."""


class ConfigurationError(DaySayError):
    """Raised for configuration errors (missing keys, invalid values)."""


class StorageError(DaySayError):
    """Base exception for storage errors."""


class StoragePermissionError(StorageError):
    """Raised when storage operation is not permitted."""


class TranscriptionError(DaySayError):
    """Raised when the transcription collaborator fails."""


class ShareError(DaySayError):
    """Raised by share targets and clipboards for failed operations."""


class ShareUnsupportedError(ShareError):
    """Raised when no platform share capability is available."""


class ShareCancelledError(ShareError):
    """Raised when the user dismisses the share sheet."""
