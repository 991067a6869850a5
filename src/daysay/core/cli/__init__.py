"""DaySay CLI — parse spoken notes and manage journal entries."""

import click

from daysay import __version__


@click.group()
@click.version_option(version=__version__, package_name="daysay")
@click.option("--config", "config_file", type=click.Path(dir_okay=False), help="Path to a YAML or JSON config file.")
@click.option("--verbose", "-v", is_flag=True, help="Log at DEBUG level.")
@click.pass_context
def main(ctx: click.Context, config_file: str | None, verbose: bool) -> None:
    """DaySay — a voice journal you can also drive from the terminal."""
    from daysay.core.cli.common import load_config
    from daysay.core.utils.logging import setup_logging

    config = load_config(config_file)
    settings = config.validated()
    setup_logging(level="DEBUG" if verbose else settings.logging.level, log_file=settings.logging.log_file or None)
    ctx.obj = config


# Register subcommands
from .journal_cmd import activate, add, delete, list_entries, moods, mood, new, parse, show, tag, tags, title

main.add_command(parse)
main.add_command(add)
main.add_command(new)
main.add_command(list_entries)
main.add_command(show)
main.add_command(activate)
main.add_command(delete)
main.add_command(mood)
main.add_command(tag)
main.add_command(title)
main.add_command(tags)
main.add_command(moods)
