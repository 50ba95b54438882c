"""Deployment orchestration service"""

import logging
from datetime import datetime
from typing import Callable, List, Optional, Tuple

from ..api.exceptions import IisDeployError, ValidationError
from ..core.path_resolver import PathResolver
from ..core.validation_engine import ValidationEngine
from ..models.backup import BackupRecord
from ..models.config import Config
from ..models.request import DeploymentRequest
from ..models.result import DeployResult, RestoreResult, OperationStatus
from ..pools.base import PoolBackend
from ..pools.factory import PoolBackendFactory
from ..storage.base import ReleaseSource
from .backup_service import BackupService, LATEST_BACKUP
from .pool_service import PoolService, Sleep
from .stage_service import StageService, CommandRunner
from .swap_service import SwapService
from ..utils.output import console
from ..constants import (
    ErrorCode,
    EMOJI_ERROR,
    EMOJI_ROCKET,
    MSG_DEPLOY_SUCCESS,
)

logger = logging.getLogger(__name__)


class DeployService:
    """Runs Validate, Stage, Backup, Stop, Swap, Start and Cleanup in order

    Expected failures are reported on the returned result, never raised.
    Once a pool stop was attempted the pools are always started again, and
    the working directory is always removed.
    """

    def __init__(self,
                 config: Config,
                 source: Optional[ReleaseSource] = None,
                 pool_backend: Optional[PoolBackend] = None,
                 sleep: Optional[Sleep] = None,
                 clock: Optional[Callable[[], datetime]] = None,
                 runner: Optional[CommandRunner] = None):
        """Initialize deploy service

        Args:
            config: Configuration
            source: Release source (created from config if omitted)
            pool_backend: Pool backend (created from config if omitted)
            sleep: Async sleep used while polling pools
            clock: Clock used for backup timestamps
            runner: Command runner for the Web.config transform
        """
        self.config = config
        self.path_resolver = PathResolver(config.paths.wwwroot_base, config.paths.deploy_dir)
        self.validation_engine = ValidationEngine()
        self.stage_service = StageService(config, source, self.path_resolver, runner)
        self.backup_service = BackupService(clock)
        self.pool_service = PoolService(
            pool_backend or PoolBackendFactory.create_from_config(config.pools),
            config.pools.retry_policy,
            sleep
        )
        self.swap_service = SwapService()

    @property
    def source(self) -> ReleaseSource:
        return self.stage_service.source

    def plan(self, request: DeploymentRequest) -> List[Tuple[str, str]]:
        """Describe what a deployment would touch"""
        rows = list(request.describe())
        rows.append(("Archive", request.archive_name))
        rows.append(("Source", self.config.source.get_display_info()))
        rows.append(("Web path", str(self.path_resolver.get_live_path(request.env_name, request.dir_name))))
        if request.deploys_api:
            rows.append(("API path", str(self.path_resolver.get_api_path(request.env_name, request.dir_name))))
        rows.append(("Backup root", str(self.path_resolver.get_backup_root(request.dir_name))))
        rows.append(("Retention", str(self.config.backup.retention_count)))
        rows.append(("Pools", ", ".join(t.name for t in self.pool_service.targets(request))))
        return rows

    async def deploy(self,
                     request: DeploymentRequest,
                     dry_run: bool = False,
                     retention: Optional[int] = None) -> DeployResult:
        """Deploy a release

        Args:
            request: Deployment request
            dry_run: Only validate and report the plan
            retention: Backups to keep (overrides configuration)

        Returns:
            DeployResult
        """
        result = DeployResult(
            app_name=request.app_name,
            version=request.version,
            environment=request.env_name,
            dry_run=dry_run
        )
        retention = retention or self.config.backup.retention_count

        result.web_path = self.path_resolver.get_live_path(request.env_name, request.dir_name)
        if request.deploys_api:
            result.api_path = self.path_resolver.get_api_path(request.env_name, request.dir_name)
        backup_root = self.path_resolver.get_backup_root(request.dir_name)
        result.release_url = self.source.release_url(request.version)

        if dry_run:
            try:
                self.validation_engine.validate_request(request)
            except IisDeployError as e:
                result.add_error(e.error_code or ErrorCode.VALIDATION_FAILED, str(e))
                result.finalize()
                return result

            result.metadata["plan"] = self.plan(request)
            result.message = "Dry run: no changes made"
            result.complete(OperationStatus.SKIPPED)
            return result

        console.print(f"{EMOJI_ROCKET} Deploying {request.app_name} {request.version} to {request.env_name}")
        stop_attempted = False

        try:
            self.validation_engine.validate_request(request)

            stage = await self.stage_service.stage(request)
            result.add_step("stage", stage)
            package = stage.package

            backup = self.backup_service.backup(
                result.web_path, result.api_path, backup_root, retention, request.dir_name
            )
            result.add_step("backup", backup)
            result.backup_path = backup.backup_path

            stop_attempted = True
            stops = await self.pool_service.stop_pools(request)
            for pool_result in stops:
                result.add_step(f"stop:{pool_result.pool_name}", pool_result)

            # Files of a pool we could not control may still be locked
            if not any(r.is_failed for r in stops):
                result.add_step("swap:web", self.swap_service.swap(
                    package.web_path, result.web_path, request.skip_items, "Web"
                ))
                if request.deploys_api:
                    result.add_step("swap:api", self.swap_service.swap(
                        package.api_path, result.api_path, request.skip_items, "API"
                    ))

        except IisDeployError as e:
            result.add_error(e.error_code or ErrorCode.UNEXPECTED_ERROR, str(e))
            console.print(f"[red]{EMOJI_ERROR} {e}[/red]")
        except Exception as e:
            logger.exception("Unexpected error during deployment")
            result.add_error(ErrorCode.UNEXPECTED_ERROR, f"Unexpected error: {e}")
            console.print(f"[red]{EMOJI_ERROR} Unexpected error: {e}[/red]")
        finally:
            if stop_attempted:
                for pool_result in await self.pool_service.start_pools(request):
                    result.add_step(f"start:{pool_result.pool_name}", pool_result)

            result.add_step("cleanup", self.stage_service.cleanup())

        result.finalize()
        if not result.is_failed:
            result.message = MSG_DEPLOY_SUCCESS.format(
                app=request.app_name, version=request.version, env=request.env_name
            )
        else:
            result.message = result.error

        return result

    def list_backups(self, dir_name: str) -> List[BackupRecord]:
        """List the backups of a deployment directory, newest first"""
        return self.backup_service.list_backups(self.path_resolver.get_backup_root(dir_name))

    async def restore(self,
                      env_name: str,
                      dir_name: str,
                      app_pool: str,
                      backup_name: str = LATEST_BACKUP,
                      web_only: bool = False,
                      skip_items: frozenset = frozenset()) -> RestoreResult:
        """Restore a backup into the live directories

        Pools are stopped around the file replacement and always started again.

        Args:
            env_name: Environment name
            dir_name: Deployment directory name
            app_pool: Base application pool name
            backup_name: Backup folder name or ``latest``
            web_only: Leave the API untouched
            skip_items: Live entries to keep

        Returns:
            RestoreResult
        """
        result = RestoreResult(backup_name=backup_name)
        web_path = self.path_resolver.get_live_path(env_name, dir_name)
        api_path = None if web_only else self.path_resolver.get_api_path(env_name, dir_name)
        targets = PathResolver.get_pool_targets(env_name, app_pool, web_only)
        stop_attempted = False

        try:
            invalid = [
                label for label, value in (("env_name", env_name), ("dir_name", dir_name), ("app_pool", app_pool))
                if not self.validation_engine.validate_name(label, value).is_valid
            ]
            if invalid:
                raise ValidationError.malformed(invalid)

            record = self.backup_service.find_backup(self.path_resolver.get_backup_root(dir_name), backup_name)
            result.backup_name = record.name

            stop_attempted = True
            stops = await self.pool_service.stop_targets(targets)
            for pool_result in stops:
                result.add_step(f"stop:{pool_result.pool_name}", pool_result)

            if not any(r.is_failed for r in stops):
                restored = self.backup_service.restore(
                    record, web_path, api_path, dir_name, skip_items, self.swap_service
                )
                result.merge(restored)
                result.steps.update(restored.steps)
                result.restored = restored.restored
        except IisDeployError as e:
            result.add_error(e.error_code or ErrorCode.UNEXPECTED_ERROR, str(e))
            console.print(f"[red]{EMOJI_ERROR} {e}[/red]")
        finally:
            if stop_attempted:
                for pool_result in await self.pool_service.start_targets(targets):
                    result.add_step(f"start:{pool_result.pool_name}", pool_result)

        if result.errors:
            result.complete(OperationStatus.FAILED)
        else:
            result.message = f"Restored {result.backup_name}"
            result.complete(OperationStatus.PARTIAL if result.warnings else OperationStatus.SUCCESS)

        return result
