"""Application pool backends for iis-deploy"""

from .base import PoolBackend
from .powershell import PowerShellPoolBackend
from .appcmd import AppCmdPoolBackend
from .factory import PoolBackendFactory

__all__ = [
    'PoolBackend',
    'PowerShellPoolBackend',
    'AppCmdPoolBackend',
    'PoolBackendFactory',
]
