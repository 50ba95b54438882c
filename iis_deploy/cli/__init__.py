"""Command line interface for iis-deploy"""

from .main import cli, main

__all__ = ["cli", "main"]
