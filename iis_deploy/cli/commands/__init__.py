# iis_deploy/cli/commands/__init__.py
"""CLI commands"""

from . import deploy
from . import backups
from . import build
from . import config

__all__ = [
    "deploy",
    "backups",
    "build",
    "config",
]
