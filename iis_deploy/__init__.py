"""IIS Deploy - release tooling for IIS-hosted web applications.

Packages compiled publish output into versioned release archives and deploys
them to IIS: staging, backups with retention, application pool control and
file swapping that preserves protected content.
"""

from .__version__ import __version__, __version_info__, __author__, __email__, __license__

# Core API
from .api.deployer import Deployer, deploy
from .api.packer import Packer, pack

# Data models
from .models.request import DeploymentRequest
from .models.result import DeployResult, PackResult, RestoreResult
from .models.config import Config

# Exceptions
from .api.exceptions import (
    IisDeployError,
    ValidationError,
    ConfigError,
    StagingError,
    BackupError,
    PoolError,
    SwapError,
    StorageError,
    PackError,
)

__all__ = [
    # Version information
    "__version__",
    "__version_info__",
    "__author__",
    "__email__",
    "__license__",

    # Main classes
    "Deployer",
    "Packer",

    # Core API functions
    "deploy",
    "pack",

    # Data models
    "DeploymentRequest",
    "DeployResult",
    "PackResult",
    "RestoreResult",
    "Config",

    # Exceptions
    "IisDeployError",
    "ValidationError",
    "ConfigError",
    "StagingError",
    "BackupError",
    "PoolError",
    "SwapError",
    "StorageError",
    "PackError",
]
