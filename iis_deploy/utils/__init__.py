# iis_deploy/utils/__init__.py
"""Utility functions for iis-deploy"""

from .file_utils import (
    calculate_file_checksum,
    format_size,
    list_entries,
    remove_path,
    empty_directory,
    copy_tree,
    move_entry,
    merge_contents,
    create_archive,
    extract_archive,
    find_files,
)

from .version_utils import (
    parse_version,
    strip_tag,
    to_tag,
    generate_build_version,
    stamp_assembly_versions,
)

from .async_utils import (
    run_async,
    run_command,
    CommandOutput,
)

__all__ = [
    # File utilities
    "calculate_file_checksum",
    "format_size",
    "list_entries",
    "remove_path",
    "empty_directory",
    "copy_tree",
    "move_entry",
    "merge_contents",
    "create_archive",
    "extract_archive",
    "find_files",

    # Version utilities
    "parse_version",
    "strip_tag",
    "to_tag",
    "generate_build_version",
    "stamp_assembly_versions",

    # Async utilities
    "run_async",
    "run_command",
    "CommandOutput",
]
