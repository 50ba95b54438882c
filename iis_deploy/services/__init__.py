# iis_deploy/services/__init__.py
"""Business logic services for iis-deploy"""

from .config_service import ConfigService
from .stage_service import StageService
from .backup_service import BackupService
from .pool_service import PoolService
from .swap_service import SwapService
from .deploy_service import DeployService
from .package_service import PackageService

__all__ = [
    "ConfigService",
    "StageService",
    "BackupService",
    "PoolService",
    "SwapService",
    "DeployService",
    "PackageService",
]
