"""Saved deploy config management commands"""

import sys

import click
from rich.prompt import Confirm

from ..decorators import with_deployer
from ..utils.output import console, format_json, format_saved_configs, format_yaml
from ...constants import EMOJI_ERROR, EMOJI_SUCCESS, EMOJI_WARNING


@click.group()
def config():
    """Manage saved deploy configs"""
    pass


@config.command(name='list')
@click.option('--json', 'as_json', is_flag=True, help='Output as JSON')
@with_deployer
def list_configs(deployer, as_json):
    """List saved deploy configs"""
    configs = deployer.config_store.get_saved_configs()

    if as_json:
        format_json([saved.to_dict() for saved in configs])
    else:
        format_saved_configs(configs)


@config.command()
@click.argument('name')
@with_deployer
def show(deployer, name):
    """Show a saved config, secrets masked"""
    saved = next((c for c in deployer.config_store.get_saved_configs() if c.name == name), None)
    if saved is None:
        console.print(f"{EMOJI_ERROR} No saved config named '{name}'")
        sys.exit(1)

    data = saved.to_dict()
    format_yaml(data, title=f"{name} ({saved.platform})")


@config.command()
@click.argument('name')
@click.option('--yes', '-y', is_flag=True, help='Do not ask for confirmation')
@with_deployer
def delete(deployer, name, yes):
    """Delete a saved config"""
    if not yes and not Confirm.ask(f"Delete saved config '{name}'?", default=False):
        return

    if deployer.config_store.delete_config(name):
        console.print(f"{EMOJI_SUCCESS} Deleted '{name}'")
    else:
        console.print(f"{EMOJI_WARNING} No saved config named '{name}'")
        sys.exit(1)


@config.command(name='set-default')
@click.argument('name')
@with_deployer
def set_default(deployer, name):
    """Make NAME the default saved config"""
    if deployer.config_store.set_default_config(name):
        console.print(f"{EMOJI_SUCCESS} '{name}' is now the default deploy config")
    else:
        console.print(f"{EMOJI_ERROR} No saved config named '{name}'")
        sys.exit(1)
