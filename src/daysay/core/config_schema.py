"""Pydantic models for config validation.

Opt-in schema validation for ``Config.config_data``.  Call
``Config.validated()`` to obtain a typed, validated ``DaySayConfig``
instance.  Existing dict-based access continues to work unchanged.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator


class PathsConfig(BaseModel):
    """File-system paths used by the application."""

    data_dir: Path
    journal_dir: Path | None = None
    log_dir: Path | None = None

    @field_validator("data_dir", "journal_dir", "log_dir", mode="before")
    @classmethod
    def _expand_user(cls, v: Any) -> Any:
        if isinstance(v, str):
            return Path(v).expanduser() if v else None
        if isinstance(v, Path):
            return v.expanduser()
        return v


class StorageKeysConfig(BaseModel):
    """Key names the journal state is persisted under."""

    entries: str = "daysay_journal_entries"
    active_entry_id: str = "daysay_active_entry_id"
    version: str = "daysay_journal_version"

    @field_validator("entries", "active_entry_id", "version")
    @classmethod
    def _non_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("storage key must not be empty")
        return v


class JournalConfig(BaseModel):
    """Parser and store settings."""

    lexicon_file: Path | None = None
    debug: bool = False
    storage_keys: StorageKeysConfig = StorageKeysConfig()

    @field_validator("lexicon_file", mode="before")
    @classmethod
    def _blank_is_none(cls, v: Any) -> Any:
        if isinstance(v, str):
            return Path(v).expanduser() if v.strip() else None
        return v


class SharingConfig(BaseModel):
    """Attribution text appended to copied and shared entries."""

    attribution: str = "Recorded with DaySay"
    share_postfix: str = "\n\nRecorded with DaySay"
    share_title: str = "DaySay Journal Entry"


class LoggingConfig(BaseModel):
    level: str = "WARNING"
    log_file: str = ""

    @field_validator("level")
    @classmethod
    def _known_level(cls, v: str) -> str:
        level = v.upper()
        if level not in {"TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"unknown log level {v!r}")
        return level


class DaySayConfig(BaseModel):
    """Root configuration model.

    Uses ``extra="allow"`` so consumers can bolt on custom sections
    without touching this schema.
    """

    model_config = ConfigDict(extra="allow")

    paths: PathsConfig = PathsConfig(data_dir=Path("~/.daysay-data"))
    journal: JournalConfig = JournalConfig()
    sharing: SharingConfig = SharingConfig()
    logging: LoggingConfig = LoggingConfig()
