"""Pool backend factory"""

from typing import Dict, Type

from .base import PoolBackend
from .powershell import PowerShellPoolBackend
from .appcmd import AppCmdPoolBackend
from ..constants import PoolBackendType
from ..models.config import PoolConfig


class PoolBackendFactory:
    """Factory for creating pool backend instances"""

    _backends: Dict[PoolBackendType, Type[PoolBackend]] = {
        PoolBackendType.POWERSHELL: PowerShellPoolBackend,
        PoolBackendType.APPCMD: AppCmdPoolBackend,
    }

    @classmethod
    def create_from_config(cls, pools: PoolConfig) -> PoolBackend:
        """Create pool backend from configuration

        Args:
            pools: Pool configuration

        Returns:
            Pool backend instance

        Raises:
            ValueError: If backend type is not supported
        """
        backend_type = pools.backend_type

        if backend_type not in cls._backends:
            raise ValueError(f"Unsupported pool backend: {backend_type.value}")

        config = {}
        if backend_type == PoolBackendType.APPCMD and pools.appcmd_path:
            config["executable"] = pools.appcmd_path

        return cls._backends[backend_type](config)

    @classmethod
    def register_backend(cls, backend_type: PoolBackendType, backend_class: Type[PoolBackend]):
        """Register a new pool backend type"""
        cls._backends[backend_type] = backend_class
