"""Configuration commands"""

import sys
from pathlib import Path

import click

from ..context import Context
from ..decorators import config_required
from ..utils.output import format_yaml, print_error
from ...utils.output import console


@click.group()
def config():
    """Show or create configuration"""
    pass


@config.command()
@config_required
def show(config):
    """Show the effective configuration"""
    source = click.get_current_context().ensure_object(Context).config_service.config_path
    format_yaml(config.to_dict(), title=str(source) if source else "defaults")


@config.command()
@click.option('--path', type=click.Path(dir_okay=False), help='File to write (default: ./.iis-deploy.yaml)')
@click.option('--force', is_flag=True, help='Overwrite an existing file')
@click.pass_obj
def init(obj, path, force):
    """Write a default configuration file"""
    service = (obj or Context()).config_service
    result = service.init_config(Path(path) if path else None, force=force)

    if result.is_failed:
        print_error(result.error)
        sys.exit(1)

    console.print("[dim]Edit paths.wwwroot_base and source.repository before deploying[/dim]")
