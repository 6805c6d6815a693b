"""CLI decorators"""

from .project import find_project_root, with_deployer

__all__ = [
    'find_project_root',
    'with_deployer',
]
