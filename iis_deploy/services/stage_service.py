"""Release staging service: download, extract and prepare a package"""

import logging
import shutil
import zipfile
from pathlib import Path
from typing import Awaitable, Callable, List, Optional, Sequence

from ..api.exceptions import ArtifactNotFoundError, ExtractionError, StagingError
from ..core.path_resolver import PathResolver
from ..models.config import Config
from ..models.package import StagedPackage
from ..models.request import DeploymentRequest
from ..models.result import Result, StageResult, OperationStatus
from ..storage.base import ReleaseSource
from ..storage.factory import ReleaseSourceFactory
from ..utils.async_utils import run_command, CommandOutput
from ..utils.file_utils import empty_directory, extract_archive, remove_path
from ..utils.output import console
from ..constants import (
    ErrorCode,
    ARCHIVE_GLOB,
    WEB_CONFIG_FILE,
    WEB_CONFIG_TRANSFORM_PATTERN,
    WEB_CONFIG_OUTPUT_FILE,
    MSG_STAGE_SUCCESS,
    MSG_CLEANUP_DONE,
    EMOJI_WARNING,
    EMOJI_ARROW,
)

logger = logging.getLogger(__name__)

CommandRunner = Callable[[Sequence[str]], Awaitable[CommandOutput]]


def _find_entry(directory: Path, name: str) -> Optional[Path]:
    """Look up a directory entry by name, ignoring case"""
    exact = directory / name
    if exact.exists():
        return exact

    lowered = name.lower()
    for entry in directory.iterdir():
        if entry.name.lower() == lowered:
            return entry
    return None


class StageService:
    """Fetches a release archive and extracts it into the staging area"""

    def __init__(self,
                 config: Config,
                 source: Optional[ReleaseSource] = None,
                 path_resolver: Optional[PathResolver] = None,
                 runner: Optional[CommandRunner] = None):
        """Initialize stage service

        Args:
            config: Configuration
            source: Release source (created from config if omitted)
            path_resolver: Path resolver (created from config if omitted)
            runner: Command runner used for the Web.config transform
        """
        self.config = config
        self.source = source or ReleaseSourceFactory.create_from_config(config.source)
        self.path_resolver = path_resolver or PathResolver(
            config.paths.wwwroot_base, config.paths.deploy_dir
        )
        self.runner = runner or run_command

    @property
    def deploy_dir(self) -> Path:
        return self.path_resolver.deploy_dir

    async def stage(self, request: DeploymentRequest) -> StageResult:
        """Download and extract the release of a request

        Args:
            request: Deployment request

        Returns:
            StageResult holding the StagedPackage

        Raises:
            StorageError: If the release cannot be downloaded
            ArtifactNotFoundError: If the expected archive is missing or ambiguous
            ExtractionError: If extraction fails or a component folder is missing
        """
        result = StageResult(version=request.version)

        try:
            empty_directory(self.deploy_dir)
        except OSError as e:
            raise StagingError(
                f"Cannot prepare working directory {self.deploy_dir}: {e}",
                ErrorCode.EXTRACTION_FAILED
            ) from e

        console.print(f"{EMOJI_ARROW} Downloading release {request.version}...")
        downloaded = await self.source.download(request.version, self.deploy_dir, ARCHIVE_GLOB)
        archive = self.select_archive(request, downloaded)

        staging_path = self.path_resolver.get_staging_path(request.dir_name)
        self._extract(archive, staging_path)

        web_path = self._require_component(staging_path, request.web_name)
        api_path = None
        if request.deploys_api:
            api_path = self._require_component(staging_path, request.api_name)

        if self.config.transform.enabled:
            for component in filter(None, (web_path, api_path)):
                await self.transform_web_config(component, request.env_name, result)

        result.package = StagedPackage(
            root=staging_path,
            web_path=web_path,
            api_path=api_path,
            archive_path=archive
        )
        result.message = MSG_STAGE_SUCCESS.format(version=request.version, path=staging_path)
        result.complete(OperationStatus.SUCCESS)
        console.print(result.message)
        return result

    @staticmethod
    def select_archive(request: DeploymentRequest, downloaded: List[Path]) -> Path:
        """Pick the one archive belonging to the request

        Raises:
            ArtifactNotFoundError: If the exact archive is absent or ambiguous
        """
        expected = request.archive_name.lower()
        matches = [p for p in downloaded if p.name.lower() == expected]

        if len(matches) == 1:
            return matches[0]

        if len(matches) > 1:
            raise ArtifactNotFoundError(
                request.version,
                f"ambiguous, {len(matches)} archives named {request.archive_name}"
            )

        if not downloaded:
            raise ArtifactNotFoundError(request.version, "no zip archives in release")

        names = ", ".join(sorted(p.name for p in downloaded))
        raise ArtifactNotFoundError(
            request.version,
            f"expected {request.archive_name}, found {names}"
        )

    @staticmethod
    def _extract(archive: Path, staging_path: Path) -> None:
        try:
            empty_directory(staging_path)
            extract_archive(archive, staging_path)
        except (shutil.ReadError, zipfile.BadZipFile) as e:
            raise ExtractionError(f"Cannot extract {archive.name}: {e}") from e
        except OSError as e:
            raise ExtractionError(f"Extraction of {archive.name} failed: {e}") from e

        logger.info("Extracted %s to %s", archive, staging_path)

    @staticmethod
    def _require_component(staging_path: Path, name: str) -> Path:
        component = staging_path / name
        if not component.is_dir():
            raise ExtractionError(
                f"Package does not contain the '{name}' folder (looked in {staging_path})"
            )
        return component

    async def transform_web_config(self, component: Path, env_name: str,
                                   result: Result) -> bool:
        """Apply the environment's Web.config transform to a component

        Args:
            component: Extracted component folder
            env_name: Environment whose transform file is applied
            result: Result receiving a warning when the transform is skipped

        Returns:
            True if Web.config was replaced

        Raises:
            ExtractionError: If Web.config is missing or the transform fails
        """
        web_config = _find_entry(component, WEB_CONFIG_FILE)
        if web_config is None:
            raise ExtractionError(f"{WEB_CONFIG_FILE} not found in {component}")

        transform_name = WEB_CONFIG_TRANSFORM_PATTERN.format(env=env_name)
        transform = _find_entry(component, transform_name)
        if transform is None:
            message = f"{transform_name} not found in {component.name}, skipping transformation"
            result.add_warning(ErrorCode.TRANSFORM_SKIPPED, message, component=component.name)
            console.print(f"{EMOJI_WARNING} {message}")
            return False

        output = component / WEB_CONFIG_OUTPUT_FILE
        args = [
            token.format(source=web_config, transform=transform, output=output)
            for token in self.config.transform.command.split()
        ]

        try:
            completed = await self.runner(args)
        except FileNotFoundError as e:
            raise ExtractionError(f"Transform tool not found: {args[0]}") from e

        if not completed.ok:
            raise ExtractionError(
                f"Transform of {component.name} failed: {completed.stderr or completed.stdout}"
            )

        if not output.exists():
            raise ExtractionError(f"Transform produced no output file: {output}")

        output.replace(web_config)
        logger.info("Transformed %s with %s", web_config, transform.name)
        return True

    def cleanup(self) -> Result:
        """Remove the working directory

        Failures are reported as a warning, never raised.
        """
        result = Result()
        try:
            if self.deploy_dir.exists():
                remove_path(self.deploy_dir)
        except OSError as e:
            result.add_warning(
                ErrorCode.CLEANUP_FAILED,
                f"Could not remove {self.deploy_dir}: {e}",
                path=str(self.deploy_dir)
            )
            console.print(f"{EMOJI_WARNING} {result.warnings[-1].message}")
            result.complete(OperationStatus.SUCCESS)
            return result

        result.message = MSG_CLEANUP_DONE
        console.print(MSG_CLEANUP_DONE)
        result.complete(OperationStatus.SUCCESS)
        return result
