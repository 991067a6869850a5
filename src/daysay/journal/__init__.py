"""Voice-journal core.

Provides the spoken-command parser, the persisted entry store with its
read-only views, the orchestration that applies transcription results,
and the transcription, progress, reaction and sharing services around it.
"""

from .config import CommandLexicon, StorageKeys
from .models import (
    CommandKind,
    JournalEntry,
    Paragraph,
    ParsedCommand,
    ParseResult,
    StoreState,
    TranscriptionResult,
)
from .orchestrator import JournalOrchestrator
from .parser import TextCommandParser
from .progress import ProgressState, ProgressTracker
from .reactions import ReactionNotifier
from .sharing import ShareService, StatusMessages
from .store import EntryPersistence, EntryStore, KeyValueEntryPersistence
from .transcription import Transcriber, TranscriptionService, TranscriptionState

__all__ = [
    "CommandKind",
    "CommandLexicon",
    "EntryPersistence",
    "EntryStore",
    "JournalEntry",
    "JournalOrchestrator",
    "KeyValueEntryPersistence",
    "Paragraph",
    "ParseResult",
    "ParsedCommand",
    "ProgressState",
    "ProgressTracker",
    "ReactionNotifier",
    "ShareService",
    "StatusMessages",
    "StorageKeys",
    "StoreState",
    "TextCommandParser",
    "Transcriber",
    "TranscriptionResult",
    "TranscriptionService",
    "TranscriptionState",
]
