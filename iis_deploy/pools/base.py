# iis_deploy/pools/base.py
"""Application pool backend abstract base class"""

from abc import ABC, abstractmethod
from typing import Optional, Dict, Any

from ..models.pool import PoolState


class PoolBackend(ABC):
    """Abstract base class for IIS process management adapters"""

    def __init__(self, config: Dict[str, Any] = None):
        """
        Initialize pool backend

        Args:
            config: Backend-specific configuration
        """
        self.config = config or {}

    @abstractmethod
    async def get_state(self, name: str) -> Optional[PoolState]:
        """
        Query the state of a pool

        Args:
            name: Application pool name

        Returns:
            Current state, or None if the pool does not exist

        Raises:
            PoolControlError: If the management command fails
        """
        pass

    @abstractmethod
    async def start(self, name: str) -> None:
        """
        Issue a start request (does not wait for completion)

        Raises:
            PoolControlError: If the management command fails
        """
        pass

    @abstractmethod
    async def stop(self, name: str) -> None:
        """
        Issue a stop request (does not wait for completion)

        Raises:
            PoolControlError: If the management command fails
        """
        pass
