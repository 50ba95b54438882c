"""GitHub releases source, driven through the gh CLI"""

import logging
import os
from pathlib import Path
from typing import List, Optional, Dict, Any

from .base import ReleaseSource
from ..api.exceptions import StorageError
from ..constants import ARCHIVE_GLOB, DEFAULT_TOKEN_ENV, RELEASE_URL_TEMPLATE
from ..utils.async_utils import run_command, CommandOutput

logger = logging.getLogger(__name__)


class GitHubSource(ReleaseSource):
    """Release assets attached to GitHub releases"""

    def __init__(self, config: Dict[str, Any] = None):
        """
        Initialize GitHub source

        Args:
            config: Configuration including:
                - repository: owner/name (optional, gh falls back to the current repo)
                - token: Access token (optional)
                - token_env: Environment variable holding the token
                - executable: gh binary (default: gh)
        """
        super().__init__(config)
        self.repository = self.config.get('repository')
        self.executable = self.config.get('executable', 'gh')

        token_env = self.config.get('token_env') or DEFAULT_TOKEN_ENV
        self.token = self.config.get('token') or os.environ.get(token_env)

    def _repo_args(self) -> List[str]:
        return ["--repo", self.repository] if self.repository else []

    async def _gh(self, *args: str) -> CommandOutput:
        env = {"GH_TOKEN": self.token} if self.token else None
        try:
            output = await run_command([self.executable, *args], env=env)
        except FileNotFoundError as e:
            raise StorageError(f"GitHub CLI not found: {self.executable}") from e

        if not output.ok:
            detail = output.stderr or output.stdout or f"exit code {output.returncode}"
            raise StorageError(f"gh {args[0]} {args[1]} failed: {detail}")

        return output

    async def download(self,
                       tag: str,
                       dest_dir: Path,
                       pattern: str = ARCHIVE_GLOB) -> List[Path]:
        """Download matching release assets with ``gh release download``"""
        await self._gh(
            "release", "download", tag,
            *self._repo_args(),
            "--pattern", pattern,
            "--dir", str(dest_dir),
            "--clobber"
        )

        downloaded = sorted(p for p in dest_dir.glob(pattern) if p.is_file())
        logger.info("Downloaded %d asset(s) of release %s", len(downloaded), tag)
        return downloaded

    async def publish(self,
                      tag: str,
                      archive: Path,
                      title: str,
                      notes: str = "") -> Optional[str]:
        """Create a release with ``gh release create`` and attach the archive"""
        if not archive.is_file():
            raise StorageError(f"Archive not found: {archive}")

        output = await self._gh(
            "release", "create", tag,
            str(archive),
            *self._repo_args(),
            "--title", title,
            "--notes", notes or title
        )

        # gh prints the URL of the new release
        return output.stdout.splitlines()[-1] if output.stdout else self.release_url(tag)

    def release_url(self, tag: str) -> Optional[str]:
        if not self.repository:
            return None
        return RELEASE_URL_TEMPLATE.format(repository=self.repository, tag=tag)
