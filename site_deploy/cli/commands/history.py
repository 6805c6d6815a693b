"""Deploy history command"""

import sys

import click
from rich.prompt import Confirm

from ..decorators import with_deployer
from ..utils.output import console, format_history, format_json, print_error
from ...api.exceptions import StorageError
from ...constants import EMOJI_SUCCESS


@click.command()
@click.option('--limit', '-n', type=click.IntRange(min=1), default=10, show_default=True,
              help='Number of entries to show')
@click.option('--clear', is_flag=True, help='Delete all history entries')
@click.option('--yes', '-y', is_flag=True, help='Do not ask for confirmation')
@click.option('--json', 'as_json', is_flag=True, help='Output as JSON')
@with_deployer
def history(deployer, limit, clear, yes, as_json):
    """Show recent deployments of this project"""
    if clear:
        if not yes and not Confirm.ask("Delete the whole deploy history?", default=False):
            return
        try:
            deployer.clear_history()
        except StorageError as e:
            print_error("Failed to clear history", e)
            sys.exit(1)
        console.print(f"{EMOJI_SUCCESS} Deploy history cleared")
        return

    entries = deployer.history(limit)
    if as_json:
        format_json([entry.to_dict() for entry in entries])
    else:
        format_history(entries)
