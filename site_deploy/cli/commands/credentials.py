"""Environment credential detection command"""

import click
from rich.table import Table

from ..decorators import with_deployer
from ..utils.output import console
from ...constants import EMOJI_WARNING, PLATFORM_ENV_VARS, SECRET_MASK


@click.command()
@click.argument('platform', type=click.Choice(sorted(PLATFORM_ENV_VARS)))
@with_deployer
def credentials(deployer, platform):
    """Show which credential variables for PLATFORM are set

    Values are never printed.
    """
    names = PLATFORM_ENV_VARS[platform]
    if not names:
        console.print(f"{EMOJI_WARNING} {platform} does not read credentials from the environment")
        return

    found = deployer.config_store.detect_env_credentials(platform)

    table = Table(title=f"{platform} credentials")
    table.add_column("Variable", style="cyan")
    table.add_column("Status")

    for name in names:
        status = f"[green]set[/green] ({SECRET_MASK})" if name in found else "[dim]not set[/dim]"
        table.add_row(name, status)

    console.print(table)
