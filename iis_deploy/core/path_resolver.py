"""Path resolution module for iis-deploy"""

from pathlib import Path
from typing import List, Union

from ..constants import (
    API_POOL_SUFFIX,
    API_SUFFIX,
    BACKUP_DIR,
    DEFAULT_DEPLOY_DIR,
    PROD_ENVIRONMENT,
    TEMP_EXTRACT_DIR,
)
from ..models.pool import PoolTarget


class PathResolver:
    """Resolves live, backup and staging locations of a deployment"""

    def __init__(self,
                 wwwroot_base: Union[str, Path],
                 deploy_dir: Union[str, Path] = DEFAULT_DEPLOY_DIR):
        """Initialize path resolver

        Args:
            wwwroot_base: Root directory holding all IIS sites
            deploy_dir: Working directory for downloads and extraction
        """
        self.wwwroot_base = Path(wwwroot_base)
        self.deploy_dir = Path(deploy_dir)

    @staticmethod
    def is_prod(env_name: str) -> bool:
        return env_name.lower() == PROD_ENVIRONMENT

    def get_live_path(self, env_name: str, dir_name: str) -> Path:
        """Get the live web directory

        Production sites live directly under the root as ``<env>-<dir>``,
        every other environment gets its own folder.

        Args:
            env_name: Environment name
            dir_name: Deployment directory name

        Returns:
            Path to the live web directory
        """
        if self.is_prod(env_name):
            return self.wwwroot_base / f"{env_name}-{dir_name}"
        return self.wwwroot_base / env_name / dir_name

    def get_api_path(self, env_name: str, dir_name: str) -> Path:
        """Get the live API directory (web directory name plus ``api``)"""
        web_path = self.get_live_path(env_name, dir_name)
        return web_path.with_name(web_path.name + API_SUFFIX)

    def get_backup_root(self, dir_name: str) -> Path:
        """Get the folder holding all backups of one deployment directory"""
        return self.wwwroot_base / BACKUP_DIR / dir_name

    def get_staging_root(self) -> Path:
        return self.deploy_dir / TEMP_EXTRACT_DIR

    def get_staging_path(self, dir_name: str) -> Path:
        """Get the extraction folder for a deployment directory"""
        return self.get_staging_root() / dir_name

    @staticmethod
    def get_pool_name(env_name: str, app_pool: str, api: bool = False) -> str:
        name = f"{env_name}-{app_pool}"
        if api:
            name += API_POOL_SUFFIX
        return name

    @classmethod
    def get_pool_targets(cls, env_name: str, app_pool: str,
                         web_only: bool = False) -> List[PoolTarget]:
        """Get the pools serving a deployment

        Args:
            env_name: Environment name
            app_pool: Base application pool name
            web_only: Skip the API pool

        Returns:
            Web pool target, followed by the API pool target unless web only
        """
        targets = [PoolTarget(cls.get_pool_name(env_name, app_pool), "Web")]
        if not web_only:
            targets.append(PoolTarget(cls.get_pool_name(env_name, app_pool, api=True), "API"))
        return targets
