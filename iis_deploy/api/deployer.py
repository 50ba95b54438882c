"""Deployer API for deployment operations"""

from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from ..models.backup import BackupRecord
from ..models.config import Config
from ..models.request import DeploymentRequest, parse_skip_items
from ..models.result import DeployResult, RestoreResult
from ..services.config_service import ConfigService
from ..services.deploy_service import DeployService
from ..utils.async_utils import run_async
from .exceptions import ValidationError


class Deployer:
    """Deployer class for deployment operations"""

    def __init__(self,
                 config: Optional[Config] = None,
                 config_path: Optional[Union[str, Path]] = None,
                 **services: Any):
        """
        Initialize deployer

        Args:
            config: Configuration (loaded from config_path or defaults if omitted)
            config_path: Configuration file
            **services: Collaborators passed to DeployService
                (source, pool_backend, sleep, clock, runner)
        """
        self.config = config or ConfigService(config_path).load_config()
        self.service = DeployService(self.config, **services)

    def deploy(self,
               params: Union[str, Dict[str, Any], DeploymentRequest],
               dry_run: bool = False,
               retention: Optional[int] = None) -> DeployResult:
        """
        Deploy a release

        Args:
            params: JSON params document, its parsed dict, or a request
            dry_run: Only validate and report the plan
            retention: Backups to keep (overrides configuration)

        Returns:
            DeployResult: Deployment result; parameter errors are reported
            on the result, never raised
        """
        if isinstance(params, DeploymentRequest):
            request = params
        else:
            try:
                request = DeploymentRequest.from_params(params)
            except ValidationError as e:
                result = DeployResult(dry_run=dry_run)
                result.add_error(e.error_code, str(e), fields=e.fields)
                result.finalize()
                return result

        return run_async(self.service.deploy(request, dry_run=dry_run, retention=retention))

    def list_backups(self, dir_name: str) -> List[BackupRecord]:
        """List retained backups of a deployment directory, newest first"""
        return self.service.list_backups(dir_name)

    def restore(self,
                env_name: str,
                dir_name: str,
                app_pool: str,
                backup_name: str = "latest",
                web_only: bool = False,
                skip_items: Union[str, List[str], None] = None) -> RestoreResult:
        """
        Restore a backup into the live directories

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
        return run_async(self.service.restore(
            env_name, dir_name, app_pool, backup_name, web_only, parse_skip_items(skip_items)
        ))


def deploy(params: Union[str, Dict[str, Any]],
           config_path: Optional[str] = None,
           dry_run: bool = False,
           retention: Optional[int] = None) -> DeployResult:
    """
    Convenience deploy function

    Args:
        params: JSON params document or dict
        config_path: Configuration file
        dry_run: Only validate and report the plan
        retention: Backups to keep

    Returns:
        DeployResult
    """
    return Deployer(config_path=config_path).deploy(params, dry_run=dry_run, retention=retention)
