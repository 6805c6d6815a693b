# site_deploy/cli/commands/doctor.py
"""System diagnostic command"""

import click
from rich import box
from rich.table import Table

from ..decorators import with_deployer
from ..utils.output import console
from ...api.exceptions import UnsupportedPlatformError
from ...constants import PLATFORM_ENV_VARS, PROJECT_CONFIG_FILE


@click.command()
@click.argument('platforms', nargs=-1)
@with_deployer
def doctor(deployer, platforms):
    """Check local tooling and credentials for deploy platforms

    Missing tools are reported but never block a deploy.

    Examples:

        # Check every platform
        site-deploy doctor

        # Check specific platforms
        site-deploy doctor netlify ssh
    """
    console.print("[bold]Site Deploy Diagnostics[/bold]\n")

    settings_file = deployer.settings.project_root / PROJECT_CONFIG_FILE
    if settings_file.exists():
        console.print(f"[green]✓[/green] Settings: {settings_file}")
    else:
        console.print(f"[yellow]⚠[/yellow] No {PROJECT_CONFIG_FILE} in {deployer.settings.project_root}")
    console.print(f"[dim]History: {deployer.settings.get_history_path()}[/dim]\n")

    registry = deployer.service.registry
    keys = list(platforms) or registry.platforms()

    table = Table(title="Platform Checks", box=box.ROUNDED)
    table.add_column("Platform", style="cyan")
    table.add_column("Adapter", justify="center")
    table.add_column("Tools")
    table.add_column("Credentials")

    for key in keys:
        try:
            adapter = registry.get(key)
        except UnsupportedPlatformError as e:
            table.add_row(key, "[red]✗[/red]", str(e), "-")
            continue

        warnings = adapter.check_dependencies()
        tools = "[yellow]" + "; ".join(warnings) + "[/yellow]" if warnings else "[green]ok[/green]"

        env_names = PLATFORM_ENV_VARS.get(key, [])
        found = deployer.config_store.detect_env_credentials(key)
        if not env_names:
            credentials = "-"
        elif found:
            credentials = f"[green]{', '.join(found)}[/green]"
        else:
            credentials = "[dim]none in environment[/dim]"

        table.add_row(key, "[green]✓[/green]", tools, credentials)

    console.print(table)
