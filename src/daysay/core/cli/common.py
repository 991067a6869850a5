"""Shared setup logic for CLI commands."""

from __future__ import annotations

import sys
from pathlib import Path

import click

DAYSAY_DIR = Path.home() / ".daysay"
CONFIG_PATH = DAYSAY_DIR / "config.yaml"


def load_config(config_file: str | None = None):
    """Load config from *config_file*, falling back to ~/.daysay/config.yaml."""
    from daysay.core.config import Config
    from daysay.core.exceptions import ConfigurationError

    path = config_file or (str(CONFIG_PATH) if CONFIG_PATH.exists() else None)
    try:
        config = Config(config_file=path)
        config.validated()
        return config
    except ConfigurationError as e:
        click.echo(f"Configuration error: {e}", err=True)
        sys.exit(1)


def build_parser(config):
    """Create a TextCommandParser, using the configured lexicon file if any."""
    from daysay.journal.config import CommandLexicon
    from daysay.journal.parser import TextCommandParser

    settings = config.validated()
    lexicon_file = settings.journal.lexicon_file
    lexicon = CommandLexicon.from_yaml(lexicon_file) if lexicon_file else CommandLexicon()
    if settings.journal.debug:
        lexicon.debug = True
    return TextCommandParser(lexicon)


def build_store(config):
    """Create and initialize an EntryStore backed by the journal directory."""
    from daysay.core.storage import LocalStorage
    from daysay.journal.config import StorageKeys
    from daysay.journal.store import EntryStore, KeyValueEntryPersistence

    settings = config.validated()
    keys = StorageKeys(**settings.journal.storage_keys.model_dump())
    storage = LocalStorage(base_path=config.get_journal_dir())
    store = EntryStore(KeyValueEntryPersistence(storage, keys))
    store.initialize()
    return store
