"""CLI decorators"""

from .config import config_required
from .params import request_options, load_params

__all__ = [
    "config_required",
    "request_options",
    "load_params",
]
