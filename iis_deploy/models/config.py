"""Configuration data models"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Optional, Any

from ..constants import (
    SourceType,
    PoolBackendType,
    DEFAULT_WWWROOT_BASE,
    DEFAULT_DEPLOY_DIR,
    DEFAULT_RETENTION_COUNT,
    DEFAULT_POLL_INTERVAL,
    DEFAULT_POLL_ATTEMPTS,
    DEFAULT_POOL_BACKEND,
    DEFAULT_SOURCE_TYPE,
    DEFAULT_TOKEN_ENV,
    DEFAULT_TRANSFORM_COMMAND,
    CONFIG_VERSION,
)
from .pool import RetryPolicy


@dataclass
class PathsConfig:
    """Filesystem roots"""

    wwwroot_base: str = DEFAULT_WWWROOT_BASE
    deploy_dir: str = DEFAULT_DEPLOY_DIR

    def to_dict(self) -> Dict[str, Any]:
        return {
            "wwwroot_base": self.wwwroot_base,
            "deploy_dir": self.deploy_dir
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'PathsConfig':
        return cls(
            wwwroot_base=data.get("wwwroot_base", DEFAULT_WWWROOT_BASE),
            deploy_dir=data.get("deploy_dir", DEFAULT_DEPLOY_DIR)
        )


@dataclass
class BackupConfig:
    """Backup retention configuration"""

    retention_count: int = DEFAULT_RETENTION_COUNT

    def __post_init__(self):
        if self.retention_count < 1:
            raise ValueError("Backup retention count must be at least 1")

    def to_dict(self) -> Dict[str, Any]:
        return {"retention_count": self.retention_count}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'BackupConfig':
        return cls(**data)


@dataclass
class PoolConfig:
    """Application pool control configuration"""

    backend: str = DEFAULT_POOL_BACKEND
    poll_interval: float = DEFAULT_POLL_INTERVAL
    max_attempts: int = DEFAULT_POLL_ATTEMPTS
    appcmd_path: Optional[str] = None

    def __post_init__(self):
        # Raises ValueError on unknown backends
        PoolBackendType(self.backend)

    @property
    def backend_type(self) -> PoolBackendType:
        return PoolBackendType(self.backend)

    @property
    def retry_policy(self) -> RetryPolicy:
        return RetryPolicy(interval=self.poll_interval, max_attempts=self.max_attempts)

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "backend": self.backend,
            "poll_interval": self.poll_interval,
            "max_attempts": self.max_attempts
        }
        if self.appcmd_path:
            data["appcmd_path"] = self.appcmd_path
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'PoolConfig':
        return cls(**data)


@dataclass
class SourceConfig:
    """Where release archives are downloaded from and published to"""

    type: str = DEFAULT_SOURCE_TYPE
    repository: Optional[str] = None
    token_env: str = DEFAULT_TOKEN_ENV
    token: Optional[str] = None
    path: Optional[str] = None

    def __post_init__(self):
        """Validate source configuration"""
        source_type = SourceType(self.type)

        if source_type == SourceType.FILESYSTEM and not self.path:
            raise ValueError("Filesystem source requires 'path'")

    @property
    def source_type(self) -> SourceType:
        return SourceType(self.type)

    def get_display_info(self) -> str:
        """Get display information for the source"""
        if self.source_type == SourceType.FILESYSTEM:
            return f"Filesystem: {self.path}"
        return f"GitHub: {self.repository or '(current repository)'}"

    def to_dict(self) -> Dict[str, Any]:
        data = {"type": self.type, "token_env": self.token_env}
        if self.repository:
            data["repository"] = self.repository
        if self.path:
            data["path"] = self.path
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'SourceConfig':
        return cls(
            type=data.get("type", DEFAULT_SOURCE_TYPE),
            repository=data.get("repository"),
            token_env=data.get("token_env", DEFAULT_TOKEN_ENV),
            token=data.get("token"),
            path=data.get("path")
        )


@dataclass
class TransformConfig:
    """Web.config transformation settings"""

    enabled: bool = False
    command: str = DEFAULT_TRANSFORM_COMMAND

    def to_dict(self) -> Dict[str, Any]:
        return {"enabled": self.enabled, "command": self.command}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'TransformConfig':
        return cls(**data)


@dataclass
class Config:
    """Complete configuration"""

    version: str = CONFIG_VERSION
    paths: PathsConfig = field(default_factory=PathsConfig)
    backup: BackupConfig = field(default_factory=BackupConfig)
    pools: PoolConfig = field(default_factory=PoolConfig)
    source: SourceConfig = field(default_factory=SourceConfig)
    transform: TransformConfig = field(default_factory=TransformConfig)
    logging: Dict[str, Any] = field(default_factory=dict)

    @property
    def wwwroot(self) -> Path:
        return Path(self.paths.wwwroot_base)

    @property
    def deploy_dir(self) -> Path:
        return Path(self.paths.deploy_dir)

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> 'Config':
        """Create from dictionary"""
        data = data or {}
        return cls(
            version=str(data.get("version", CONFIG_VERSION)),
            paths=PathsConfig.from_dict(data.get("paths") or {}),
            backup=BackupConfig.from_dict(data.get("backup") or {}),
            pools=PoolConfig.from_dict(data.get("pools") or {}),
            source=SourceConfig.from_dict(data.get("source") or {}),
            transform=TransformConfig.from_dict(data.get("transform") or {}),
            logging=data.get("logging") or {}
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            "version": self.version,
            "paths": self.paths.to_dict(),
            "backup": self.backup.to_dict(),
            "pools": self.pools.to_dict(),
            "source": self.source.to_dict(),
            "transform": self.transform.to_dict(),
            "logging": self.logging
        }
