# iis_deploy/models/__init__.py
"""Data models for iis-deploy"""

from .request import DeploymentRequest, parse_skip_items, parse_flag
from .backup import BackupRecord
from .pool import PoolState, RetryPolicy, PoolTarget
from .package import StagedPackage
from .result import (
    OperationStatus,
    ErrorDetail,
    Result,
    StageResult,
    BackupResult,
    PoolResult,
    SwapResult,
    DeployResult,
    RestoreResult,
    PackResult,
    ValidationResult,
)
from .config import (
    Config,
    PathsConfig,
    BackupConfig,
    PoolConfig,
    SourceConfig,
    TransformConfig,
)

__all__ = [
    # Request models
    "DeploymentRequest",
    "parse_skip_items",
    "parse_flag",

    # Deployment state models
    "BackupRecord",
    "PoolState",
    "RetryPolicy",
    "PoolTarget",
    "StagedPackage",

    # Result models
    "OperationStatus",
    "ErrorDetail",
    "Result",
    "StageResult",
    "BackupResult",
    "PoolResult",
    "SwapResult",
    "DeployResult",
    "RestoreResult",
    "PackResult",
    "ValidationResult",

    # Config models
    "Config",
    "PathsConfig",
    "BackupConfig",
    "PoolConfig",
    "SourceConfig",
    "TransformConfig",
]
