# site_deploy/cli/commands/__init__.py
"""CLI commands"""

from . import config
from . import credentials
from . import deploy
from . import doctor
from . import history
from . import init
from . import platforms

__all__ = [
    "config",
    "credentials",
    "deploy",
    "doctor",
    "history",
    "init",
    "platforms",
]
