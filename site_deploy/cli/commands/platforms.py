"""Platform listing command"""

import click

from ..decorators import with_deployer
from ..utils.output import format_json, format_platform_list


@click.command()
@click.option('--json', 'as_json', is_flag=True, help='Output as JSON')
@with_deployer
def platforms(deployer, as_json):
    """List supported deploy platforms and their required fields"""
    infos = deployer.platforms()

    if as_json:
        format_json([info.to_dict() for info in infos])
    else:
        format_platform_list(infos)
