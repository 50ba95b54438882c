"""Deployment parameter options shared by deploy and validate"""

import json
from functools import wraps
from pathlib import Path
from typing import Any, Callable, Dict, Optional

import click

from ..utils.output import print_error

# (option name, params key, help)
PARAM_OPTIONS = [
    ('--app-name', 'app_name', 'Application name (archive prefix)'),
    ('--web-name', 'web_name', 'Web folder name inside the package'),
    ('--api-name', 'api_name', 'API folder name inside the package'),
    ('--env', 'env_name', 'Environment name (e.g. dev, prod)'),
    ('--version', 'ver_number', 'Release tag, e.g. v24.03.10.1042'),
    ('--dir-name', 'dir_name', 'Live directory name'),
    ('--app-pool', 'app_pool', 'Base application pool name'),
    ('--skip-items', 'skip_items', 'Comma separated live entries to keep'),
]


def load_params(raw: Optional[str]) -> Dict[str, Any]:
    """Parse ``--params``: inline JSON, or ``@path`` to a JSON file

    Raises:
        click.BadParameter: If the document is not a JSON object
    """
    if not raw:
        return {}

    if raw.startswith("@"):
        path = Path(raw[1:])
        try:
            raw = path.read_text(encoding="utf-8-sig")
        except OSError as e:
            raise click.BadParameter(f"Cannot read {path}: {e}", param_hint="--params")

    try:
        params = json.loads(raw)
    except json.JSONDecodeError as e:
        raise click.BadParameter(f"Invalid JSON: {e}", param_hint="--params")

    if not isinstance(params, dict):
        raise click.BadParameter("Parameters must be a JSON object", param_hint="--params")

    return params


def request_options(func: Callable) -> Callable:
    """Decorator adding deployment parameter options

    The options are merged over ``--params`` and handed to the command as a
    single ``params`` dict.
    """
    @wraps(func)
    def wrapper(*args, **kwargs):
        raw = kwargs.pop('params_json', None)
        web_only = kwargs.pop('web_only', False)

        try:
            params = load_params(raw)
        except click.BadParameter as e:
            print_error(e.format_message())
            click.get_current_context().exit(2)

        for _, key, _ in PARAM_OPTIONS:
            value = kwargs.pop(key, None)
            if value is not None:
                params[key] = value

        if web_only:
            params['web_only'] = True

        return func(*args, params=params, **kwargs)

    for option, key, help_text in reversed(PARAM_OPTIONS):
        wrapper = click.option(option, key, help=help_text)(wrapper)

    wrapper = click.option('--web-only', is_flag=True, help='Deploy the web site only')(wrapper)
    wrapper = click.option('-p', '--params', 'params_json',
                           help='Parameters as JSON, or @file.json')(wrapper)
    return wrapper
