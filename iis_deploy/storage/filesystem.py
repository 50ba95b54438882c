"""Filesystem release source implementation"""

import logging
from pathlib import Path
from typing import List, Optional, Dict, Any

import aiofiles

from .base import ReleaseSource
from ..api.exceptions import StorageError
from ..constants import ARCHIVE_GLOB, DEFAULT_CHUNK_SIZE

logger = logging.getLogger(__name__)


class FilesystemSource(ReleaseSource):
    """Releases kept in a directory, one sub-folder per tag

    Layout: ``<path>/<tag>/<asset>.zip``
    """

    def __init__(self, config: Dict[str, Any] = None):
        """
        Initialize filesystem source

        Args:
            config: Configuration including:
                - path: Directory holding the releases
        """
        super().__init__(config)

        base_path = self.config.get('path')
        if not base_path:
            raise ValueError("Filesystem release source requires 'path'")
        self.base_path = Path(base_path)

    def release_dir(self, tag: str) -> Path:
        return self.base_path / tag

    async def download(self,
                       tag: str,
                       dest_dir: Path,
                       pattern: str = ARCHIVE_GLOB) -> List[Path]:
        """Copy the matching assets of a release into dest_dir"""
        await self.initialize()

        source_dir = self.release_dir(tag)
        if not source_dir.is_dir():
            raise StorageError(f"Release {tag} not found in {self.base_path}")

        downloaded = []
        for source in sorted(source_dir.glob(pattern)):
            if not source.is_file():
                continue
            target = dest_dir / source.name
            try:
                await self._copy(source, target)
            except OSError as e:
                raise StorageError(f"Failed to copy {source.name}: {e}") from e
            downloaded.append(target)

        logger.info("Fetched %d asset(s) of %s from %s", len(downloaded), tag, source_dir)
        return downloaded

    async def publish(self,
                      tag: str,
                      archive: Path,
                      title: str,
                      notes: str = "") -> Optional[str]:
        """Copy an archive into the release folder of a tag"""
        await self.initialize()

        if not archive.is_file():
            raise StorageError(f"Archive not found: {archive}")

        target_dir = self.release_dir(tag)
        target = target_dir / archive.name
        try:
            target_dir.mkdir(parents=True, exist_ok=True)
            await self._copy(archive, target)
            if notes:
                async with aiofiles.open(target_dir / "RELEASE_NOTES.md", 'w') as f:
                    await f.write(f"# {title}\n\n{notes}\n")
        except OSError as e:
            raise StorageError(f"Failed to publish {archive.name}: {e}") from e

        logger.info("Published %s as %s", archive.name, tag)
        return str(target_dir)

    @staticmethod
    async def _copy(source: Path, target: Path) -> None:
        async with aiofiles.open(source, 'rb') as src:
            async with aiofiles.open(target, 'wb') as dst:
                while True:
                    chunk = await src.read(DEFAULT_CHUNK_SIZE)
                    if not chunk:
                        break
                    await dst.write(chunk)
