"""Shared infrastructure: configuration, events, storage, logging, CLI."""
