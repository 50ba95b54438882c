"""Shared console for step-level messages"""

from rich.console import Console

console = Console()


def set_quiet(quiet: bool) -> None:
    """Silence step messages (errors are still reported by the CLI)"""
    console.quiet = quiet
