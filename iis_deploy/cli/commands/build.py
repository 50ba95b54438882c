"""Build-side commands: version, stamp, pack and publish"""

import sys
from pathlib import Path

import click

from ..decorators import config_required
from ..utils.output import format_pack_result, print_error
from ...api import Packer
from ...api.exceptions import IisDeployError
from ...utils.output import console
from ...utils.version_utils import generate_build_version, stamp_assembly_versions, to_tag


@click.command()
@click.option('--run-number', type=click.IntRange(min=0), required=True,
              help='CI run number')
@click.option('--tag', is_flag=True, help='Print the release tag (v-prefixed)')
def version(run_number, tag):
    """Print the build version for a CI run (YY.MM.DD.NNNN)"""
    value = generate_build_version(run_number)
    click.echo(to_tag(value) if tag else value)


@click.command()
@click.option('--version', 'version_', required=True, help='Version to stamp')
@click.argument('root', type=click.Path(exists=True, file_okay=False), default='.')
def stamp(version_, root):
    """Stamp a version into every AssemblyInfo.cs under ROOT"""
    changed = stamp_assembly_versions(Path(root), version_)

    if not changed:
        console.print("[yellow]No AssemblyInfo.cs files were changed[/yellow]")
        return

    for path in changed:
        console.print(f"[green]✓[/green] {path}")


@click.command()
@click.option('--app-name', required=True, help='Application name')
@click.option('--version', 'version_', required=True, help='Build version')
@click.option('--web-name', default='web', show_default=True, help='Web folder name in the package')
@click.option('--web-source', type=click.Path(), required=True, help='Web publish output')
@click.option('--api-name', help='API folder name in the package (omit for web only)')
@click.option('--api-source', type=click.Path(), help='API publish output')
@click.option('-o', '--out-dir', type=click.Path(file_okay=False), default='.',
              show_default=True, help='Directory receiving the archive')
@click.option('--keep-web-config', is_flag=True, help='Ship web.config inside the package')
@config_required
def pack(config, app_name, version_, web_name, web_source, api_name, api_source,
         out_dir, keep_web_config):
    """Package publish output into <app>.<version>.zip

    Examples:

        iis-deploy pack --app-name Shop --version 24.03.10.1042 \\
            --web-source publish/web --api-name webapi --api-source publish/api
    """
    try:
        result = Packer(config).pack(
            app_name, version_, web_name, web_source,
            api_name=api_name, api_source=api_source,
            out_dir=out_dir, keep_web_config=keep_web_config
        )
    except IisDeployError as e:
        print_error(str(e))
        sys.exit(1)

    format_pack_result(result)


@click.command()
@click.option('--app-name', required=True, help='Application name')
@click.option('--version', 'version_', required=True, help='Build version')
@click.option('--archive', type=click.Path(exists=True, dir_okay=False), required=True,
              help='Package created by pack')
@click.option('--notes', default='', help='Release notes')
@config_required
def publish(config, app_name, version_, archive, notes):
    """Publish a package as release v<version>"""
    try:
        result = Packer(config).publish(app_name, version_, archive, notes)
    except IisDeployError as e:
        print_error(str(e))
        sys.exit(1)

    format_pack_result(result)
