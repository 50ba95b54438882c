"""Core functionality for iis-deploy"""

from .path_resolver import PathResolver
from .validation_engine import ValidationEngine

__all__ = [
    "PathResolver",
    "ValidationEngine",
]
