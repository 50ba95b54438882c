"""Version management utilities"""

import logging
from datetime import datetime
from pathlib import Path
from typing import List, Optional

from packaging.version import parse, Version, InvalidVersion

from ..constants import (
    ASSEMBLY_FILE_VERSION_PATTERN,
    ASSEMBLY_INFO_FILE,
    ASSEMBLY_VERSION_PATTERN,
    BUILD_NUMBER_OFFSET,
)
from .file_utils import find_files

logger = logging.getLogger(__name__)


def parse_version(version_str: str) -> Optional[Version]:
    """
    Parse version string

    Args:
        version_str: Version string, with or without a leading ``v``

    Returns:
        Version object or None if invalid
    """
    try:
        return parse(strip_tag(version_str))
    except InvalidVersion:
        return None


def strip_tag(version: str) -> str:
    """Remove the leading ``v`` of a release tag"""
    return version.strip().lstrip("v")


def to_tag(version: str) -> str:
    """Release tag for a build version"""
    return f"v{strip_tag(version)}"


def generate_build_version(run_number: int, now: Optional[datetime] = None) -> str:
    """
    Generate a date based build version

    The build number is the CI run number offset by 1000 and padded to
    four digits, e.g. run 42 on 2024-03-10 gives ``24.03.10.1042``.

    Args:
        run_number: CI run number
        now: Build time (defaults to current time)

    Returns:
        Version string without tag prefix
    """
    if run_number < 0:
        raise ValueError("Run number cannot be negative")

    now = now or datetime.now()
    return f"{now:%y.%m.%d}.{run_number + BUILD_NUMBER_OFFSET:04d}"


def stamp_assembly_versions(root: Path, version: str) -> List[Path]:
    """
    Write a version into every AssemblyInfo.cs below a directory

    Both ``AssemblyVersion("...")`` and ``AssemblyFileVersion("...")`` are
    replaced.

    Args:
        root: Source tree root
        version: Version to stamp

    Returns:
        Files whose content changed
    """
    version = strip_tag(version)
    changed = []

    for path in find_files(root, ASSEMBLY_INFO_FILE):
        content = path.read_text(encoding="utf-8-sig")
        updated = ASSEMBLY_VERSION_PATTERN.sub(f'AssemblyVersion("{version}")', content)
        updated = ASSEMBLY_FILE_VERSION_PATTERN.sub(f'AssemblyFileVersion("{version}")', updated)

        if updated != content:
            path.write_text(updated, encoding="utf-8")
            changed.append(path)
            logger.info("Updated %s", path)

    return changed
