"""daysay journal commands — parse notes and manage entries."""

from __future__ import annotations

import asyncio
import json
import sys
from datetime import date

import click

from daysay.core.utils.dates import mood_emoji, parse_date, relative_date_string


def _store(ctx: click.Context):
    from daysay.core.cli.common import build_store

    return build_store(ctx.obj)


def _parser(ctx: click.Context):
    from daysay.core.cli.common import build_parser
    from daysay.core.exceptions import ConfigurationError

    try:
        return build_parser(ctx.obj)
    except ConfigurationError as e:
        click.echo(f"Configuration error: {e}", err=True)
        sys.exit(1)


def _require_entry(store, entry_id: str) -> None:
    if store.get_entry_by_id(entry_id) is None:
        click.echo(f"No entry with id '{entry_id}'.", err=True)
        sys.exit(1)


def _date_option(value: str | None, flag: str) -> date | None:
    if value is None:
        return None
    parsed = parse_date(value)
    if parsed is None:
        raise click.BadParameter(f"expected YYYY-MM-DD, got '{value}'", param_hint=flag)
    return parsed


def _entry_line(entry, active_id: str | None) -> str:
    marker = "*" if entry.id == active_id else " "
    tags = f"  #{' #'.join(entry.tags)}" if entry.tags else ""
    return (
        f"{marker} {entry.id}  {entry.date}  {mood_emoji(entry.mood)} {entry.mood:<9}  "
        f"{entry.title} ({len(entry.content)} paragraphs){tags}"
    )


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------


@click.command()
@click.argument("text")
@click.pass_context
def parse(ctx: click.Context, text: str) -> None:
    """Show what TEXT would do, as JSON, without touching the journal."""
    result = _parser(ctx).parse(text)
    click.echo(json.dumps(result.to_dict(), indent=2))


@click.command()
@click.argument("text")
@click.pass_context
def add(ctx: click.Context, text: str) -> None:
    """Parse TEXT as a spoken note and apply it to the journal."""
    from daysay.journal.orchestrator import JournalOrchestrator
    from daysay.journal.views import active_entry

    result = _parser(ctx).parse(text)
    if not result.text:
        click.echo("Nothing to add.")
        return

    store = _store(ctx)
    asyncio.run(JournalOrchestrator(store).process_transcription(result))

    entry = active_entry(store)
    if entry is not None:
        click.echo(f"Added to {entry.id} ({relative_date_string(entry.date)}), mood {entry.mood}.")


# ---------------------------------------------------------------------------
# Entries
# ---------------------------------------------------------------------------


@click.command()
@click.option("--date", "entry_date", help="Entry date (YYYY-MM-DD). Defaults to today.")
@click.option("--yesterday", is_flag=True, help="Create yesterday's entry.")
@click.option("--title", help="Title for a newly created entry.")
@click.pass_context
def new(ctx: click.Context, entry_date: str | None, yesterday: bool, title: str | None) -> None:
    """Create (or switch to) the entry for a date."""
    if entry_date and yesterday:
        raise click.UsageError("--date and --yesterday are mutually exclusive.")

    store = _store(ctx)
    if yesterday:
        entry_id = store.add_yesterday_entry()
        if title:
            store.set_entry_title(title, entry_id)
    else:
        entry_id = store.add_entry(_date_option(entry_date, "--date"), title)
    click.echo(f"Active entry: {entry_id}")


@click.command("list")
@click.option("--mood", help="Only entries with this mood.")
@click.option("--tag", help="Only entries with this tag.")
@click.option("--from", "start", help="Earliest date (YYYY-MM-DD).")
@click.option("--to", "end", help="Latest date (YYYY-MM-DD).")
@click.pass_context
def list_entries(ctx: click.Context, mood: str | None, tag: str | None, start: str | None, end: str | None) -> None:
    """List entries, newest first."""
    from daysay.journal.views import entries_by_date

    start_date = _date_option(start, "--from")
    end_date = _date_option(end, "--to")

    store = _store(ctx)
    entries = entries_by_date(store)
    if start_date or end_date:
        in_range = {e.id for e in store.get_entries_by_date_range(start_date or date.min, end_date or date.max)}
        entries = [e for e in entries if e.id in in_range]
    if mood:
        entries = [e for e in entries if e.mood == mood]
    if tag:
        wanted = tag.strip().lower()
        entries = [e for e in entries if wanted in e.tags]

    if not entries:
        click.echo("No entries found.")
        return
    for entry in entries:
        click.echo(_entry_line(entry, store.active_entry_id))


@click.command()
@click.argument("entry_id", required=False)
@click.pass_context
def show(ctx: click.Context, entry_id: str | None) -> None:
    """Print an entry (default: the active one)."""
    from daysay.journal.views import active_entry

    store = _store(ctx)
    if entry_id:
        _require_entry(store, entry_id)
        entry = store.get_entry_by_id(entry_id)
    else:
        entry = active_entry(store)
    if entry is None:
        click.echo("No active entry.")
        return

    click.echo(f"{entry.title}")
    click.echo(f"{relative_date_string(entry.date)} | {mood_emoji(entry.mood)} {entry.mood} | {entry.id}")
    if entry.tags:
        click.echo(" ".join(f"#{t}" for t in entry.tags))
    click.echo("")
    click.echo(entry.text or "(empty)")


@click.command()
@click.argument("entry_id")
@click.pass_context
def activate(ctx: click.Context, entry_id: str) -> None:
    """Make ENTRY_ID the active entry."""
    store = _store(ctx)
    _require_entry(store, entry_id)
    store.set_active_entry(entry_id)
    click.echo(f"Active entry: {entry_id}")


@click.command()
@click.argument("entry_id")
@click.confirmation_option(prompt="Delete this entry?")
@click.pass_context
def delete(ctx: click.Context, entry_id: str) -> None:
    """Delete ENTRY_ID."""
    store = _store(ctx)
    _require_entry(store, entry_id)
    store.delete_entry(entry_id)
    click.echo(f"Deleted {entry_id}. Active entry: {store.active_entry_id}")


# ---------------------------------------------------------------------------
# Fields
# ---------------------------------------------------------------------------

_entry_option = click.option("--entry", "entry_id", help="Target entry id (default: active entry).")


@click.command()
@click.argument("value")
@_entry_option
@click.pass_context
def mood(ctx: click.Context, value: str, entry_id: str | None) -> None:
    """Set the mood of an entry."""
    store = _store(ctx)
    if entry_id:
        _require_entry(store, entry_id)
    store.set_entry_mood(value, entry_id)
    click.echo(f"Mood set to {value.strip()} {mood_emoji(value.strip())}")


@click.command()
@click.argument("value")
@click.option("--remove", is_flag=True, help="Remove the tag instead of adding it.")
@_entry_option
@click.pass_context
def tag(ctx: click.Context, value: str, remove: bool, entry_id: str | None) -> None:
    """Add (or remove) a tag on an entry."""
    store = _store(ctx)
    if entry_id:
        _require_entry(store, entry_id)
    if remove:
        store.remove_entry_tag(value, entry_id)
        click.echo(f"Removed tag #{value.strip().lower()}")
    else:
        store.add_entry_tag(value, entry_id)
        click.echo(f"Added tag #{value.strip().lower()}")


@click.command()
@click.argument("value")
@_entry_option
@click.pass_context
def title(ctx: click.Context, value: str, entry_id: str | None) -> None:
    """Set the title of an entry."""
    store = _store(ctx)
    if entry_id:
        _require_entry(store, entry_id)
    store.set_entry_title(value, entry_id)
    click.echo(f"Title set to '{value.strip()}'")


@click.command()
@click.pass_context
def tags(ctx: click.Context) -> None:
    """List every tag in use."""
    from daysay.journal.views import all_tags

    found = all_tags(_store(ctx))
    click.echo("\n".join(f"#{t}" for t in found) if found else "No tags yet.")


@click.command()
@click.pass_context
def moods(ctx: click.Context) -> None:
    """Count entries per mood."""
    from daysay.journal.views import mood_counts

    counts = mood_counts(_store(ctx))
    for name, count in sorted(counts.items(), key=lambda item: (-item[1], item[0])):
        click.echo(f"{mood_emoji(name)} {name:<9} {count}")
