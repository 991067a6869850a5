"""Command, mood and tag extraction from transcribed speech.

A best-effort heuristic extractor, not a grammar. Stages run in a fixed
order, each on the output of the one before:

1. commands: a leading anchored command is stripped, then every
   sentence is classified (embedded commands stay in the prose)
2. tags: ``#hashtags`` and "add tag X" phrases are collected and removed
3. mood: an explicit "i feel X" wins, otherwise synonym frequency
4. the detected mood and tags are appended as commands
5. cleanup: leading entry keywords and mood phrases are stripped

Ambiguity is resolved by keyword precedence, never by scoring.
"""

from __future__ import annotations

import re

from loguru import logger

from .config import CommandLexicon
from .models import CommandKind, ParsedCommand, ParseResult

_HASHTAG_RE = re.compile(r"#([a-zA-Z0-9_]+)")
_SENTENCE_SPLIT_RE = re.compile(r"[.!?]\s+")
_WHITESPACE_RE = re.compile(r"\s+")


def _alternation(keywords: list[str]) -> str:
    # Longest first so a phrase is never shadowed by one of its own prefixes.
    return "|".join(re.escape(k) for k in sorted(keywords, key=len, reverse=True))


class TextCommandParser:
    """Turn free-form transcribed text into directives plus cleaned prose.

    Deterministic for a given lexicon and input, with no side effects.
    ``parse`` never raises.

    Example::

        parser = TextCommandParser()
        result = parser.parse("new entry. Today I feel happy. #sunny")
        result.text       # "Today"
        result.mood       # "happy"
        result.tags       # ["sunny"]
    """

    def __init__(self, lexicon: CommandLexicon | None = None):
        self.lexicon = lexicon or CommandLexicon()
        self._compile()

    def _compile(self) -> None:
        lex = self.lexicon
        flags = re.IGNORECASE

        if lex.anchored_commands:
            self._anchored_re: re.Pattern | None = re.compile(
                rf"^(?:{_alternation(lex.anchored_commands)}).*?[.!?]\s*", flags
            )
        else:
            self._anchored_re = None

        self._entry_keywords: list[tuple[CommandKind, list[str]]] = [
            (CommandKind.NEW_ENTRY, [k.lower() for k in lex.new_entry_keywords]),
            (CommandKind.TODAY_ENTRY, [k.lower() for k in lex.today_entry_keywords]),
            (CommandKind.YESTERDAY_ENTRY, [k.lower() for k in lex.yesterday_entry_keywords]),
            (CommandKind.CONTINUE_ENTRY, [k.lower() for k in lex.continue_entry_keywords]),
        ]
        self._mood_res = [re.compile(rf"{re.escape(k)}\s+([a-zA-Z]+)", flags) for k in lex.set_mood_keywords]
        self._mood_strip_res = [
            re.compile(rf"{re.escape(k)}\s+[a-zA-Z]+[.!?]?\s*", flags) for k in lex.set_mood_keywords
        ]
        self._tag_res = [re.compile(rf"{re.escape(k)}\s+([a-zA-Z0-9_]+)", flags) for k in lex.add_tag_keywords]
        self._leading_res = [
            re.compile(rf"^{re.escape(k)}\s*", flags) for keywords in lex.entry_keywords() for k in keywords
        ]
        self._indicator_res: list[tuple[str, list[re.Pattern]]] = [
            (mood, [re.compile(rf"\b{re.escape(word)}\b", flags) for word in words])
            for mood, words in lex.mood_indicators.items()
        ]

    def _trace(self, message: str) -> None:
        if self.lexicon.debug:
            logger.debug(f"[parser] {message}")

    # -- Public API -----------------------------------------------------------

    def parse(self, raw_text: str | None) -> ParseResult:
        """Parse transcribed text into cleaned text, commands, mood and tags.

        Args:
            raw_text: Text from the transcription collaborator.

        Returns:
            ParseResult. Empty or whitespace-only input yields an empty result.
        """
        if not isinstance(raw_text, str) or not raw_text.strip():
            return ParseResult()

        self._trace(f'Parsing text: "{raw_text}"')

        text, commands = self._extract_commands(raw_text)
        text, tags = self._extract_tags(text)
        mood = self._detect_mood(text)

        if mood:
            commands.append(ParsedCommand(CommandKind.SET_MOOD, [mood], f"Detected mood: {mood}"))
        for tag in tags:
            commands.append(ParsedCommand(CommandKind.ADD_TAG, [tag], f"Add tag: {tag}"))

        text = self._clean_text(text)

        kinds = [c.kind.value for c in commands]
        self._trace(f'Processed text: "{text}", commands={kinds}, mood={mood}, tags={tags}')
        return ParseResult(text=text, commands=commands, mood=mood, tags=tags)

    def identify_command(self, text: str) -> ParsedCommand | None:
        """Classify one segment; the first matching kind wins."""
        lower = text.lower()

        for kind, keywords in self._entry_keywords:
            if any(keyword in lower for keyword in keywords):
                self._trace(f'Identified command: {kind.value} from "{text}"')
                return ParsedCommand(kind, [], text)

        for pattern in self._mood_res:
            match = pattern.search(lower)
            if match:
                mood = match.group(1).lower()
                self._trace(f'Identified command: SET_MOOD from "{text}" with param "{mood}"')
                return ParsedCommand(CommandKind.SET_MOOD, [mood], text)

        for pattern in self._tag_res:
            match = pattern.search(lower)
            if match:
                tag = match.group(1).lower()
                self._trace(f'Identified command: ADD_TAG from "{text}" with param "{tag}"')
                return ParsedCommand(CommandKind.ADD_TAG, [tag], text)

        return None

    # -- Stages ---------------------------------------------------------------

    def _extract_commands(self, text: str) -> tuple[str, list[ParsedCommand]]:
        commands: list[ParsedCommand] = []
        remaining = text

        if self._anchored_re is not None:
            match = self._anchored_re.match(remaining)
            if match:
                command = self.identify_command(match.group(0))
                if command is not None:
                    commands.append(command)
                    remaining = remaining[match.end() :].strip()

        sentences = _SENTENCE_SPLIT_RE.split(remaining)
        for sentence in sentences:
            command = self.identify_command(sentence)
            if command is not None:
                commands.append(command)

        # Splitting drops the original punctuation; sentences rejoin with ". ".
        processed = ". ".join(sentences)
        return processed or remaining, commands

    def _extract_tags(self, text: str) -> tuple[str, list[str]]:
        tags = [m.group(1).lower() for m in _HASHTAG_RE.finditer(text)]
        updated = _HASHTAG_RE.sub("", text)

        for pattern in self._tag_res:
            for match in pattern.finditer(text):
                tags.append(match.group(1).lower())
                updated = updated.replace(match.group(0), "", 1)

        return updated.strip(), list(dict.fromkeys(tags))

    def _detect_mood(self, text: str) -> str | None:
        lower = text.lower()

        for pattern in self._mood_res:
            match = pattern.search(lower)
            if match:
                mood = self.lexicon.canonical_mood(match.group(1))
                if mood:
                    return mood

        best_mood: str | None = None
        best_count = 0
        for mood, patterns in self._indicator_res:
            count = sum(len(p.findall(lower)) for p in patterns)
            if count > best_count:
                best_mood, best_count = mood, count
        return best_mood

    def _clean_text(self, text: str) -> str:
        cleaned = text
        for pattern in self._leading_res:
            cleaned = pattern.sub("", cleaned, count=1)
        for pattern in self._mood_strip_res:
            cleaned = pattern.sub("", cleaned, count=1)
        return _WHITESPACE_RE.sub(" ", cleaned).strip()
