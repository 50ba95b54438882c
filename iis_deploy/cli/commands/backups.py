"""Backup listing and restore commands"""

import sys

import click
from rich.prompt import Confirm

from ..decorators import config_required
from ..utils.output import format_backups, format_restore_result
from ...api import Deployer
from ...utils.output import console


@click.group()
def backups():
    """Inspect retained deployment backups"""
    pass


@backups.command('list')
@click.option('--dir-name', required=True, help='Live directory name')
@config_required
def list_backups(config, dir_name):
    """List backups of a deployment directory, newest first"""
    records = Deployer(config).list_backups(dir_name)

    if not records:
        console.print(f"[yellow]No backups found for {dir_name}[/yellow]")
        return

    console.print(format_backups(records, title=f"Backups of {dir_name}"))


@click.command()
@click.option('--env', 'env_name', required=True, help='Environment name')
@click.option('--dir-name', required=True, help='Live directory name')
@click.option('--app-pool', required=True, help='Base application pool name')
@click.option('--backup', 'backup_name', default='latest', show_default=True,
              help='Backup folder name, or "latest"')
@click.option('--web-only', is_flag=True, help='Restore the web site only')
@click.option('--skip-items', help='Comma separated live entries to keep')
@click.option('-y', '--yes', is_flag=True, help='Skip confirmation prompt')
@config_required
def restore(config, env_name, dir_name, app_pool, backup_name, web_only, skip_items, yes):
    """Restore a backup into the live directories

    The application pools are stopped while files are replaced and started
    again afterwards. Nothing is restored automatically after a failed
    deployment; this command is the manual way back.
    """
    if not yes:
        console.print(f"Restore backup [bold]{backup_name}[/bold] of "
                      f"[cyan]{dir_name}[/cyan] in [yellow]{env_name}[/yellow]")
        if not Confirm.ask("Proceed?", default=False):
            console.print("[yellow]Restore cancelled[/yellow]")
            return

    result = Deployer(config).restore(
        env_name, dir_name, app_pool, backup_name, web_only, skip_items
    )
    format_restore_result(result)

    if result.is_failed:
        sys.exit(1)
