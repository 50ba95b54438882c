# iis_deploy/cli/utils/output.py
"""Output formatting utilities"""

from typing import Any, Dict, List, Optional, Tuple

from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table
from rich import box

from ...models import DeployResult, PackResult, RestoreResult, BackupRecord, ValidationResult
from ...utils.file_utils import format_size
from ...utils.output import console


def print_error(message: str) -> None:
    """Print an error, even in quiet mode"""
    quiet = console.quiet
    console.quiet = False
    console.print(f"[red]✗ {message}[/red]")
    console.quiet = quiet


def format_rows(rows: List[Tuple[str, str]], title: Optional[str] = None) -> Table:
    """Two-column key/value table"""
    table = Table(title=title, box=box.ROUNDED, show_header=False)
    table.add_column("Key", style="bold")
    table.add_column("Value", style="cyan")
    for key, value in rows:
        table.add_row(key, str(value))
    return table


def _findings(result) -> List[str]:
    lines = []
    for warning in result.warnings:
        lines.append(f"  [yellow]⚠ {warning.message}[/yellow] [dim]({warning.code})[/dim]")
    for error in result.errors:
        lines.append(f"  [red]✗ {error.message}[/red] [dim]({error.code})[/dim]")
    return lines


def format_deploy_result(result: DeployResult) -> None:
    """Format and display deploy operation result"""
    if result.dry_run and not result.is_failed:
        console.print(format_rows(result.metadata.get("plan", []), title="Deployment plan"))
        console.print("[dim]Dry run: no changes made[/dim]")
        return

    if result.is_failed:
        lines = [f"[red]✗ Deploy failed:[/red] {result.error}"]
        border, title = "red", "Deploy Error"
    elif result.warnings:
        lines = ["[yellow]⚠[/yellow] Deployment completed with warnings"]
        border, title = "yellow", "Deploy Result"
    else:
        lines = ["[green]✓[/green] Deployment completed successfully!"]
        border, title = "green", "Deploy Result"

    lines.append("")
    if result.app_name:
        lines.append(f"[bold]Application:[/bold] {result.app_name}")
        lines.append(f"[bold]Version:[/bold] {result.version}")
        lines.append(f"[bold]Environment:[/bold] {result.environment}")
    if result.web_path:
        lines.append(f"[bold]Web:[/bold] {result.web_path}")
    if result.api_path:
        lines.append(f"[bold]API:[/bold] {result.api_path}")
    if result.backup_path:
        lines.append(f"[bold]Backup:[/bold] {result.backup_path}")
    if result.release_url:
        lines.append(f"[bold]Release:[/bold] {result.release_url}")
    if result.duration is not None:
        lines.append(f"[bold]Duration:[/bold] {result.duration:.1f}s")

    findings = _findings(result)
    if findings:
        lines.append("")
        lines.extend(findings)

    console.print(Panel("\n".join(lines), title=title, border_style=border))


def format_restore_result(result: RestoreResult) -> None:
    """Format and display restore operation result"""
    if result.is_failed:
        lines = [f"[red]✗ Restore failed:[/red] {result.error}"]
        border = "red"
    else:
        lines = [f"[green]✓[/green] Restored backup {result.backup_name}"]
        lines.extend(f"  • {path}" for path in result.restored)
        border = "yellow" if result.warnings else "green"

    findings = _findings(result)
    if findings:
        lines.append("")
        lines.extend(findings)

    console.print(Panel("\n".join(lines), title="Restore Result", border_style=border))


def format_pack_result(result: PackResult) -> None:
    """Format and display pack or publish result"""
    lines = [
        "[green]✓[/green] Package ready!",
        "",
        f"[bold]Application:[/bold] {result.app_name}",
        f"[bold]Version:[/bold] {result.version}",
        f"[bold]Archive:[/bold] {result.package_path}",
    ]
    if result.package_size is not None:
        lines.append(f"[bold]Size:[/bold] {format_size(result.package_size)}")
    if result.checksum:
        lines.append(f"[bold]SHA256:[/bold] {result.checksum}")
    if result.components:
        lines.append(f"[bold]Components:[/bold] {', '.join(result.components)}")
    if result.release_url:
        lines.append(f"[bold]Release:[/bold] {result.release_url}")

    console.print(Panel("\n".join(lines), title="Pack Result", border_style="green"))


def format_backups(records: List[BackupRecord], title: Optional[str] = None) -> Table:
    """Table of backups, newest first"""
    table = Table(title=title, box=box.ROUNDED)
    table.add_column("#", justify="right")
    table.add_column("Name", style="cyan")
    table.add_column("Modified")
    table.add_column("Contents")

    for index, record in enumerate(records, 1):
        table.add_row(
            str(index),
            record.name,
            record.timestamp.strftime("%Y-%m-%d %H:%M:%S"),
            ", ".join(record.contents())
        )

    return table


def format_validation(result: ValidationResult) -> None:
    """Display validation findings"""
    for message in result.info:
        console.print(f"[dim]ℹ {message}[/dim]")
    for message in result.warnings:
        console.print(f"[yellow]⚠ {message}[/yellow]")
    for message in result.errors:
        console.print(f"[red]✗ {message}[/red]")

    if result.is_valid:
        console.print("[green]✓ Parameters are valid[/green]")


def format_yaml(data: Dict[str, Any], title: Optional[str] = None) -> None:
    """Display data as highlighted YAML"""
    import yaml

    text = yaml.dump(data, default_flow_style=False, sort_keys=False)
    syntax = Syntax(text, "yaml", theme="monokai", line_numbers=False)
    if title:
        console.print(Panel(syntax, title=title))
    else:
        console.print(syntax)
