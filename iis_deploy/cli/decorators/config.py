"""Configuration loading decorator for CLI commands"""

from functools import wraps
from typing import Callable

import click

from ..context import Context
from ..utils.output import print_error
from ...api.exceptions import ConfigError


def config_required(func: Callable) -> Callable:
    """Decorator that adds ``--config`` and passes the loaded Config as ``config``

    Lookup order when the option is omitted: ``IIS_DEPLOY_CONFIG``, then
    ``./.iis-deploy.yaml``, then built-in defaults.

    Args:
        func: Command function to decorate

    Returns:
        Decorated function
    """
    @click.option('-c', '--config', 'config_path', type=click.Path(dir_okay=False),
                  help='Configuration file (default: ./.iis-deploy.yaml)')
    @wraps(func)
    def wrapper(*args, config_path=None, **kwargs):
        ctx = click.get_current_context()

        try:
            config = ctx.ensure_object(Context).load_config(config_path)
        except ConfigError as e:
            print_error(str(e))
            ctx.exit(1)

        return func(*args, config=config, **kwargs)

    return wrapper
