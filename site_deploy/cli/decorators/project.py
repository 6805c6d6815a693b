"""Project context decorator for CLI commands"""

from functools import wraps
from pathlib import Path
from typing import Callable, Optional

import click

from ..utils.output import console
from ...api.deployer import Deployer
from ...api.exceptions import SiteDeployError
from ...constants import DEFAULT_STATE_DIR, EMOJI_ERROR, PROJECT_CONFIG_FILE


def find_project_root(start_path: Optional[Path] = None) -> Optional[Path]:
    """Find the project root directory by looking for marker files

    Args:
        start_path: Starting directory (defaults to current directory)

    Returns:
        Project root path or None if not found
    """
    current = Path(start_path).resolve() if start_path else Path.cwd()

    for candidate in [current, *current.parents]:
        if (candidate / PROJECT_CONFIG_FILE).exists():
            return candidate
        if (candidate / DEFAULT_STATE_DIR).is_dir():
            return candidate

    return None


def with_deployer(func: Callable) -> Callable:
    """Decorator that loads project settings and passes a ``Deployer``

    The project root is ``--project-root`` when given, else the nearest
    directory holding a settings file or state directory, else the
    current directory.

    Args:
        func: Command function to decorate; receives the deployer first

    Returns:
        Decorated function
    """
    @wraps(func)
    def wrapper(*args, **kwargs):
        ctx = click.get_current_context()
        cli_context = ctx.obj

        project_root = cli_context.project_root or find_project_root() or Path.cwd()

        try:
            deployer = Deployer(project_root)
        except SiteDeployError as e:
            console.print(f"{EMOJI_ERROR} Failed to load project settings: {e}")
            ctx.exit(1)

        if cli_context.debug:
            console.print(f"[dim]Project root: {deployer.settings.project_root}[/dim]")

        return func(deployer, *args, **kwargs)

    return wrapper
