# iis_deploy/storage/base.py
"""Release source abstract base class"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import List, Optional, Dict, Any

from ..constants import ARCHIVE_GLOB


class ReleaseSource(ABC):
    """Abstract base class for places release archives live"""

    def __init__(self, config: Dict[str, Any] = None):
        """
        Initialize release source

        Args:
            config: Source-specific configuration
        """
        self.config = config or {}
        self._initialized = False

    async def initialize(self) -> None:
        """Initialize the source (e.g., check tooling or directories)"""
        if not self._initialized:
            await self._do_initialize()
            self._initialized = True

    async def _do_initialize(self) -> None:
        """Actual initialization logic for subclasses that need one"""
        pass

    @abstractmethod
    async def download(self,
                       tag: str,
                       dest_dir: Path,
                       pattern: str = ARCHIVE_GLOB) -> List[Path]:
        """
        Download the assets of a release

        Args:
            tag: Release tag (e.g. v24.03.10.1042)
            dest_dir: Directory to download into (must exist)
            pattern: Glob selecting the assets to fetch

        Returns:
            Downloaded files

        Raises:
            StorageError: If the release cannot be fetched
        """
        pass

    @abstractmethod
    async def publish(self,
                      tag: str,
                      archive: Path,
                      title: str,
                      notes: str = "") -> Optional[str]:
        """
        Publish an archive as a new release

        Args:
            tag: Release tag
            archive: Archive file to attach
            title: Release title
            notes: Release notes

        Returns:
            Release location (URL or path), if known

        Raises:
            StorageError: If publishing fails
        """
        pass

    def release_url(self, tag: str) -> Optional[str]:
        """Human facing location of a release, if the source has one"""
        return None

    async def close(self) -> None:
        """Release resources held by the source"""
        if self._initialized:
            await self._do_close()
            self._initialized = False

    async def _do_close(self) -> None:
        pass

    async def __aenter__(self):
        """Async context manager entry"""
        await self.initialize()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit"""
        await self.close()
