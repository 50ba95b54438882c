"""CLI utilities"""

from .output import (
    print_error,
    format_rows,
    format_deploy_result,
    format_restore_result,
    format_pack_result,
    format_backups,
    format_validation,
    format_yaml,
)

__all__ = [
    "print_error",
    "format_rows",
    "format_deploy_result",
    "format_restore_result",
    "format_pack_result",
    "format_backups",
    "format_validation",
    "format_yaml",
]
