"""Configuration dataclasses for the journal parser and store.

These are pure data containers with sensible defaults.
Override them from YAML config, env vars, or constructor args.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any

import yaml

from daysay.core.exceptions import ConfigurationError


def _default_mood_indicators() -> dict[str, list[str]]:
    return {
        "happy": ["happy", "glad", "excited", "joyful", "pleased", "delighted", "content", "cheerful"],
        "sad": ["sad", "unhappy", "depressed", "down", "blue", "gloomy", "miserable", "upset"],
        "angry": ["angry", "mad", "frustrated", "annoyed", "irritated", "furious", "enraged"],
        "anxious": ["anxious", "nervous", "worried", "uneasy", "stressed", "concerned", "scared", "fearful"],
        "tired": ["tired", "exhausted", "sleepy", "fatigued", "drained", "weary"],
        "calm": ["calm", "peaceful", "relaxed", "serene", "tranquil", "at ease", "chill"],
        "neutral": ["neutral", "okay", "fine", "so-so", "average", "normal", "neither good nor bad"],
        "surprised": ["surprised", "shocked", "astonished", "amazed", "startled", "stunned"],
        "proud": ["proud", "accomplished", "satisfied", "confident", "successful"],
        "grateful": ["grateful", "thankful", "appreciative", "blessed", "fortunate"],
    }


@dataclass
class CommandLexicon:
    """Keyword phrases and mood synonyms the parser matches against.

    Attributes:
        new_entry_keywords: Phrases that start a new entry.
        today_entry_keywords: Phrases that select today's entry.
        yesterday_entry_keywords: Phrases that select yesterday's entry.
        continue_entry_keywords: Phrases that keep writing to the active entry.
        set_mood_keywords: Phrases followed by a mood word ("i feel happy").
        add_tag_keywords: Phrases followed by a tag token ("add tag work").
        anchored_commands: Phrases recognized as a leading command when the
            text starts with them and runs to sentence punctuation.
        mood_indicators: Canonical mood -> synonyms. Insertion order breaks
            frequency ties, so keep the preferred mood first.
        debug: Trace every parse stage at DEBUG level.
    """

    new_entry_keywords: list[str] = field(
        default_factory=lambda: ["new entry", "start new entry", "create new entry", "begin new entry"]
    )
    today_entry_keywords: list[str] = field(
        default_factory=lambda: ["today's entry", "entry for today", "write about today"]
    )
    yesterday_entry_keywords: list[str] = field(
        default_factory=lambda: ["yesterday's entry", "entry for yesterday", "write about yesterday"]
    )
    continue_entry_keywords: list[str] = field(
        default_factory=lambda: ["continue entry", "continue this entry", "add to entry", "add to current entry"]
    )
    set_mood_keywords: list[str] = field(default_factory=lambda: ["set mood to", "my mood is", "i feel", "feeling"])
    add_tag_keywords: list[str] = field(
        default_factory=lambda: ["add tag", "new tag", "create tag", "tag this", "tag as", "hashtag"]
    )
    anchored_commands: list[str] = field(
        default_factory=lambda: [
            "new entry",
            "today's entry",
            "yesterday's entry",
            "continue entry",
            "set mood to",
            "add tag",
        ]
    )
    mood_indicators: dict[str, list[str]] = field(default_factory=_default_mood_indicators)
    debug: bool = False

    @property
    def moods(self) -> list[str]:
        """Canonical mood keys, in tie-break order."""
        return list(self.mood_indicators)

    def entry_keywords(self) -> list[list[str]]:
        """Entry-type keyword lists, in the order cleanup strips them."""
        return [
            self.new_entry_keywords,
            self.today_entry_keywords,
            self.yesterday_entry_keywords,
            self.continue_entry_keywords,
        ]

    def canonical_mood(self, word: str) -> str | None:
        """Map a mood key or synonym to its canonical mood, or None."""
        word = word.lower()
        if word in self.mood_indicators:
            return word
        for mood, indicators in self.mood_indicators.items():
            if word in indicators:
                return mood
        return None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> CommandLexicon:
        """Build a lexicon, overriding defaults with the keys present in *data*.

        Raises:
            ConfigurationError: On unknown keys or wrongly-shaped values.
        """
        if not isinstance(data, dict):
            raise ConfigurationError("Lexicon must be a mapping")
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigurationError(f"Unknown lexicon keys: {', '.join(unknown)}")

        kwargs: dict[str, Any] = {}
        for key, value in data.items():
            if key == "debug":
                kwargs[key] = bool(value)
            elif key == "mood_indicators":
                if not isinstance(value, dict):
                    raise ConfigurationError("mood_indicators must map moods to lists of words")
                kwargs[key] = {
                    str(mood).lower(): _word_list(words, f"mood_indicators.{mood}") for mood, words in value.items()
                }
            else:
                kwargs[key] = _word_list(value, key)
        return cls(**kwargs)

    @classmethod
    def from_yaml(cls, path: str | Path) -> CommandLexicon:
        """Load a lexicon from a YAML file (missing keys keep their defaults)."""
        path = Path(path).expanduser()
        try:
            data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
        except (OSError, yaml.YAMLError) as e:
            raise ConfigurationError(f"Cannot load lexicon from {path}: {e}") from e
        return cls.from_dict(data)


def _word_list(value: Any, key: str) -> list[str]:
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ConfigurationError(f"{key} must be a list of strings")
    return [v.strip().lower() for v in value if v.strip()]


@dataclass
class StorageKeys:
    """Key names for the three persisted values.

    Attributes:
        entries: JSON array of serialized entries.
        active_entry_id: Plain id string ("" when unset).
        version: Schema version as a decimal string.
    """

    entries: str = "daysay_journal_entries"
    active_entry_id: str = "daysay_active_entry_id"
    version: str = "daysay_journal_version"
