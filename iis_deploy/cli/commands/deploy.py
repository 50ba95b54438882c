"""Deploy and validate command implementations"""

import sys

import click

from ..decorators import config_required, request_options
from ..utils.output import format_deploy_result, format_validation, print_error
from ...api import Deployer
from ...core.validation_engine import ValidationEngine


@click.command()
@request_options
@click.option('--retention', type=click.IntRange(min=1),
              help='Number of backups to keep (default from configuration)')
@click.option('--dry-run', is_flag=True, help='Validate and show the plan without changing anything')
@config_required
def deploy(config, params, retention, dry_run):
    """Deploy a release to IIS

    Downloads the release archive, backs up the live site, stops the
    application pools, replaces the files and starts the pools again.
    Entries listed in --skip-items and the assets folder survive the swap.

    Examples:

        # Deploy with a JSON parameter document
        iis-deploy deploy --params @deploy.json

        # Deploy with individual options
        iis-deploy deploy --app-name Shop --web-name web --api-name webapi \\
            --env dev --version v24.03.10.1042 --dir-name shop --app-pool Shop \\
            --skip-items "logs,web.config"
    """
    deployer = Deployer(config)
    result = deployer.deploy(params, dry_run=dry_run, retention=retention)

    format_deploy_result(result)

    if result.is_failed:
        sys.exit(1)


@click.command()
@request_options
def validate(params):
    """Validate deployment parameters without deploying

    Reports every missing parameter, malformed names and unusual version
    tags.

    Examples:

        iis-deploy validate --params '{"app_name": "Shop", "web_only": true}'
    """
    result = ValidationEngine().check_params(params)
    format_validation(result)

    if not result.is_valid:
        print_error("Validation failed")
        sys.exit(1)
