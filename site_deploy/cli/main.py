# site_deploy/cli/main.py
"""Main CLI entry point for site-deploy"""

import logging
import sys
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.logging import RichHandler

from ..__version__ import __version__
from ..constants import APP_NAME, LOG_FORMAT

# Import all commands
from .commands import (
    config,
    credentials,
    deploy,
    doctor,
    history,
    init,
    platforms,
)

console = Console()


def resolve_log_level(verbose: bool, debug: bool, quiet: bool) -> int:
    """Map the global flags onto a logging level"""
    if debug:
        return logging.DEBUG
    if quiet:
        return logging.ERROR
    if verbose:
        return logging.INFO
    return logging.WARNING


def setup_logging(level: int, debug: bool = False) -> None:
    """Route log records through rich"""
    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        handlers=[
            RichHandler(
                console=console,
                show_time=debug,
                show_path=debug,
                rich_tracebacks=True,
                tracebacks_suppress=[click]
            )
        ]
    )

    # Adjust third-party loggers
    logging.getLogger("asyncio").setLevel(logging.WARNING)
    logging.getLogger("paramiko").setLevel(logging.WARNING)

    # Deployment logs are already shown by the progress display
    logging.getLogger("site_deploy.deploy").setLevel(logging.DEBUG if debug else logging.ERROR + 1)


class Context:
    """CLI context object shared by all commands"""

    def __init__(self, project_root: Optional[Path] = None):
        self.project_root = project_root
        self.verbose: bool = False
        self.debug: bool = False


@click.group(name=APP_NAME)
@click.option('-v', '--verbose', is_flag=True, help='Enable verbose output')
@click.option('-d', '--debug', is_flag=True, help='Enable debug output')
@click.option('-q', '--quiet', is_flag=True, help='Suppress all output except errors')
@click.option('--project-root', type=click.Path(exists=True, file_okay=False, path_type=Path),
              help='Project directory (default: nearest directory with .site-deploy.yaml)')
@click.version_option(__version__, prog_name=APP_NAME)
@click.pass_context
def cli(ctx, verbose, debug, quiet, project_root):
    """Site Deploy - Ship static site builds

    Builds the project and uploads its output directory to Netlify, Vercel,
    Cloudflare Pages, GitHub Pages, Surge, an FTP/SFTP/SSH server or
    through a command of your own.
    """
    setup_logging(resolve_log_level(verbose, debug, quiet), debug=debug)

    ctx.obj = Context(project_root.resolve() if project_root else None)
    ctx.obj.verbose = verbose
    ctx.obj.debug = debug


# Register commands
cli.add_command(init.init)
cli.add_command(platforms.platforms)
cli.add_command(deploy.deploy)
cli.add_command(history.history)
cli.add_command(config.config)
cli.add_command(credentials.credentials)
cli.add_command(doctor.doctor)


def main():
    """Main entry point for the CLI application

    This function handles:
    - Keyboard interrupts
    - Unexpected exceptions with proper error display
    """
    try:
        cli(prog_name=APP_NAME)

    except KeyboardInterrupt:
        console.print("\n[yellow]Operation cancelled by user[/yellow]")
        sys.exit(130)

    except Exception as e:
        console.print(f"[red]Unexpected error: {e}[/red]")
        if '--debug' in sys.argv or '-d' in sys.argv:
            console.print_exception()
        sys.exit(1)


if __name__ == "__main__":
    main()
