# iis_deploy/api/__init__.py
"""API layer for iis-deploy"""

from .exceptions import (
    IisDeployError,
    ValidationError,
    ConfigError,
    StagingError,
    ArtifactNotFoundError,
    ExtractionError,
    BackupError,
    BackupCopyError,
    BackupNotFoundError,
    PoolError,
    PoolControlError,
    SwapError,
    SourceNotFoundError,
    PermissionError,
    StorageError,
    PackError,
)
from .deployer import Deployer, deploy
from .packer import Packer, pack

__all__ = [
    # Main classes
    "Deployer",
    "Packer",

    # Convenience functions
    "deploy",
    "pack",

    # Exceptions
    "IisDeployError",
    "ValidationError",
    "ConfigError",
    "StagingError",
    "ArtifactNotFoundError",
    "ExtractionError",
    "BackupError",
    "BackupCopyError",
    "BackupNotFoundError",
    "PoolError",
    "PoolControlError",
    "SwapError",
    "SourceNotFoundError",
    "PermissionError",
    "StorageError",
    "PackError",
]
