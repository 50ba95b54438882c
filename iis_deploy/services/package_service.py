# iis_deploy/services/package_service.py
"""Package service implementation"""

import logging
from pathlib import Path
from typing import List, Optional, Tuple

from ..api.exceptions import PackError, StorageError
from ..models.result import PackResult, OperationStatus
from ..storage.base import ReleaseSource
from ..utils.file_utils import (
    calculate_file_checksum,
    copy_tree,
    create_archive,
    empty_directory,
    list_entries,
    remove_path,
)
from ..utils.output import console
from ..utils.version_utils import strip_tag, to_tag
from ..constants import (
    ErrorCode,
    ARCHIVE_FILE_PATTERN,
    PACKAGE_TEMP_DIR,
    VERSION_FILE,
    WEB_CONFIG_FILE,
    RELEASE_TITLE_TEMPLATE,
    EMOJI_PACKAGE,
    EMOJI_SUCCESS,
    EMOJI_WARNING,
)

logger = logging.getLogger(__name__)


class PackageService:
    """Builds release archives from compiled publish output"""

    def __init__(self, source: Optional[ReleaseSource] = None):
        """
        Initialize package service

        Args:
            source: Release source used by publish
        """
        self.source = source

    def pack(self,
             app_name: str,
             version: str,
             components: List[Tuple[str, Path]],
             out_dir: Path,
             keep_web_config: bool = False) -> PackResult:
        """
        Create ``<out_dir>/<app>.<version>.zip``

        Every component is copied into the archive under its folder name,
        with a ``version.txt`` added and ``web.config`` left out unless
        asked to keep it.

        Args:
            app_name: Application name
            version: Build version (a leading ``v`` is dropped)
            components: (folder name, publish output directory) pairs
            out_dir: Directory receiving the archive
            keep_web_config: Ship web.config inside the package

        Returns:
            PackResult

        Raises:
            PackError: If a publish output is missing or archiving fails
        """
        version = strip_tag(version)
        result = PackResult(app_name=app_name, version=version)

        if not components:
            raise PackError("No components to package")

        for name, source in components:
            if not source.is_dir():
                raise PackError(f"Publish output for '{name}' not found: {source}")

        archive = out_dir / ARCHIVE_FILE_PATTERN.format(app=app_name, version=version)
        temp_dir = out_dir / PACKAGE_TEMP_DIR

        console.print(f"{EMOJI_PACKAGE} Packaging {app_name} {version}...")

        try:
            empty_directory(temp_dir)

            for name, source in components:
                target = copy_tree(source, temp_dir / name)
                (target / VERSION_FILE).write_text(version, encoding="utf-8")

                if not keep_web_config:
                    for entry in list_entries(target):
                        if entry.is_file() and entry.name.lower() == WEB_CONFIG_FILE.lower():
                            entry.unlink()
                            logger.debug("Removed %s from package", entry)

                result.components.append(name)

            if archive.exists():
                archive.unlink()
            create_archive(temp_dir, archive)
        except OSError as e:
            raise PackError(f"Packaging failed: {e}") from e
        finally:
            try:
                if temp_dir.exists():
                    remove_path(temp_dir)
            except OSError as e:
                result.add_warning(ErrorCode.CLEANUP_FAILED, f"Could not remove {temp_dir}: {e}")
                console.print(f"{EMOJI_WARNING} Could not remove {temp_dir}: {e}")

        result.package_path = archive
        result.package_size = archive.stat().st_size
        result.checksum = calculate_file_checksum(archive)
        result.message = f"{EMOJI_SUCCESS} Package created: {archive}"
        result.complete(OperationStatus.SUCCESS)
        console.print(result.message)
        return result

    async def publish(self,
                      app_name: str,
                      version: str,
                      archive: Path,
                      notes: str = "") -> PackResult:
        """
        Publish an archive as release ``v<version>``

        Args:
            app_name: Application name
            version: Build version
            archive: Package created by pack
            notes: Release notes

        Returns:
            PackResult with the release location

        Raises:
            PackError: If no source is configured
            StorageError: If publishing fails
        """
        if self.source is None:
            raise PackError("No release source configured for publishing")

        version = strip_tag(version)
        tag = to_tag(version)
        title = RELEASE_TITLE_TEMPLATE.format(app=app_name, version=version)
        result = PackResult(app_name=app_name, version=version, package_path=archive)

        if not archive.is_file():
            raise StorageError(f"Archive not found: {archive}")

        result.package_size = archive.stat().st_size
        result.release_url = await self.source.publish(tag, archive, title, notes)
        result.message = f"{EMOJI_SUCCESS} Published {title}"
        result.complete(OperationStatus.SUCCESS)
        console.print(result.message)
        return result
