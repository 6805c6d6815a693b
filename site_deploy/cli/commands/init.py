"""Initialize command for creating the project settings file"""

import sys
from pathlib import Path

import click

from ..utils.output import console, print_error
from ...api.exceptions import ConfigError
from ...constants import EMOJI_SUCCESS
from ...services.config_service import ConfigService


@click.command()
@click.option('--force', '-f', is_flag=True, help='Overwrite an existing settings file')
@click.pass_context
def init(ctx, force):
    """Create a starter .site-deploy.yaml in the project root

    Examples:
        site-deploy init
        site-deploy --project-root ./web init --force
    """
    config_service = ConfigService(ctx.obj.project_root or Path.cwd())

    try:
        path = config_service.create_default(force=force)
    except (ConfigError, OSError) as e:
        print_error("Cannot create settings file", e)
        sys.exit(1)

    console.print(f"{EMOJI_SUCCESS} Created {path}")
    console.print("Edit the [cyan]deploy:[/cyan] section, then run [bold]site-deploy deploy[/bold]")
