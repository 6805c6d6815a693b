"""CLI utility functions"""

from .output import (
    console,
    format_deploy_result,
    format_history,
    format_platform_list,
    format_saved_configs,
    print_error,
    print_success,
    print_warning,
)
from .progress import DeployProgressDisplay

__all__ = [
    # Output utilities
    'console',
    'format_deploy_result',
    'format_history',
    'format_platform_list',
    'format_saved_configs',
    'print_error',
    'print_success',
    'print_warning',

    # Progress utilities
    'DeployProgressDisplay',
]
