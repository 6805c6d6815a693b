"""Deploy command implementation"""

import sys
from typing import Any, Dict, Sequence

import click
import yaml

from ..decorators import with_deployer
from ..utils.output import (
    console,
    format_deploy_result,
    print_error,
    print_success,
    print_warning,
)
from ..utils.progress import DeployProgressDisplay
from ...api.exceptions import SiteDeployError
from ...constants import EMOJI_ERROR, EMOJI_ROCKET, EMOJI_SUCCESS, DeployEnvironment, DeployLogLevel

EXIT_FAILED = 1
EXIT_CANCELLED = 130


def parse_options(options: Sequence[str]) -> Dict[str, Any]:
    """
    Parse ``key=value`` pairs given with ``-o``

    Values are read as YAML scalars, so ``true``, ``22`` and ``[a, b]``
    become a bool, an int and a list. Dashes in keys become underscores.

    Raises:
        click.BadParameter: If a pair has no ``=``
    """
    parsed = {}
    for option in options:
        key, sep, raw = option.partition("=")
        if not sep or not key.strip():
            raise click.BadParameter(f"expected KEY=VALUE, got '{option}'", param_hint="'-o'")
        try:
            value = yaml.safe_load(raw) if raw else ""
        except yaml.YAMLError:
            value = raw
        parsed[key.strip().replace("-", "_")] = value
    return parsed


@click.command()
@click.argument('platform', required=False)
@click.option('-o', '--option', 'options', multiple=True, metavar='KEY=VALUE',
              help='Deploy config value, may be repeated')
@click.option('--dist-dir', help='Build output directory')
@click.option('--no-build', is_flag=True, help='Skip the build step')
@click.option('--prod', is_flag=True, help='Deploy to production')
@click.option('--use', 'use_saved', metavar='NAME', help='Start from a saved deploy config')
@click.option('--save', 'save_as', metavar='NAME', help='Save the config after a successful deploy')
@click.option('--default', 'make_default', is_flag=True, help='Make the saved config the default')
@click.option('--open', 'open_after', is_flag=True, help='Open the deployed URL')
@click.option('--timeout', type=float, help='Upload timeout in seconds')
@click.option('--retries', type=click.IntRange(min=0), help='Retry a failed upload this many times')
@click.option('--dry-run', is_flag=True, help='Validate the config without deploying')
@click.pass_context
@with_deployer
def deploy(deployer, ctx, platform, options, dist_dir, no_build, prod, use_saved,
           save_as, make_default, open_after, timeout, retries, dry_run):
    """Build and deploy the project to PLATFORM

    PLATFORM defaults to the `deploy.platform` of .site-deploy.yaml, or to
    the platform of the saved config given with --use.

    Examples:

        # Deploy to Netlify production
        site-deploy deploy netlify --prod -o site_id=abc123

        # Upload over SSH without building
        site-deploy deploy ssh --no-build -o host=example.com \\
            -o username=deploy -o remote_path=/var/www/site

        # Reuse a saved config
        site-deploy deploy --use staging
    """
    overrides = parse_options(options)
    if dist_dir:
        overrides["dist_dir"] = dist_dir
    if no_build:
        overrides["build_before_deploy"] = False
    if prod:
        overrides["environment"] = DeployEnvironment.PRODUCTION.value
        overrides["prod"] = True
    if open_after:
        overrides["open_after_deploy"] = True
    if timeout is not None:
        overrides["timeout"] = timeout
    if retries is not None:
        overrides["retries"] = retries

    if not platform and not use_saved and not deployer.settings.deploy.get("platform"):
        default = deployer.config_store.get_default_config()
        if default is not None:
            use_saved = default.name
            console.print(f"Using default deploy config [cyan]{use_saved}[/cyan]")

    try:
        config = deployer.resolve_config(platform, saved=use_saved, **overrides)
    except (SiteDeployError, ValueError) as e:
        print_error("Invalid deploy configuration", e)
        sys.exit(EXIT_FAILED)

    validation = deployer.validate(config)
    for warning in validation.warnings:
        print_warning(warning)

    if not validation.is_valid:
        console.print(f"{EMOJI_ERROR} [red]Configuration for {config.platform_key} is invalid:[/red]")
        for error in validation.errors:
            console.print(f"  • {error}")
        sys.exit(EXIT_FAILED)

    if dry_run:
        console.print(f"{EMOJI_SUCCESS} Configuration for [cyan]{config.platform_key}[/cyan] is valid")
        return

    min_level = DeployLogLevel.DEBUG if ctx.obj.debug else DeployLogLevel.INFO
    console.print(f"{EMOJI_ROCKET} Deploying to [bold cyan]{config.platform_key}[/bold cyan]")

    with DeployProgressDisplay(console, min_level=min_level) as display:
        deployer.service.callbacks = display.callbacks()
        result = deployer.deploy(config, saved_name=use_saved)

    format_deploy_result(result)

    if result.success and save_as:
        deployer.config_store.save_config(save_as, config.platform_key, config.to_dict(),
                                          is_default=make_default)
        deployer.config_store.update_last_deploy_time(save_as)
        print_success(f"Deploy config saved as '{save_as}'")

    if result.cancelled:
        sys.exit(EXIT_CANCELLED)
    if not result.success:
        sys.exit(EXIT_FAILED)
