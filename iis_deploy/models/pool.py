"""Application pool models"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from ..constants import DEFAULT_POLL_ATTEMPTS, DEFAULT_POLL_INTERVAL


class PoolState(Enum):
    """Observed state of an application pool"""
    RUNNING = "running"
    STOPPED = "stopped"
    TRANSITIONING = "transitioning"
    UNKNOWN = "unknown"

    @classmethod
    def from_iis(cls, value: Optional[str]) -> 'PoolState':
        """Map an IIS state name (Started, Stopping, ...) to a PoolState"""
        mapping = {
            "started": cls.RUNNING,
            "stopped": cls.STOPPED,
            "starting": cls.TRANSITIONING,
            "stopping": cls.TRANSITIONING,
        }
        return mapping.get((value or "").strip().lower(), cls.UNKNOWN)


@dataclass(frozen=True)
class RetryPolicy:
    """Bounded polling policy for pool state transitions"""

    interval: float = DEFAULT_POLL_INTERVAL
    max_attempts: int = DEFAULT_POLL_ATTEMPTS

    def __post_init__(self):
        if self.interval < 0:
            raise ValueError("Poll interval cannot be negative")
        if self.max_attempts < 1:
            raise ValueError("At least one poll attempt is required")

    @property
    def timeout(self) -> float:
        return self.interval * self.max_attempts


@dataclass(frozen=True)
class PoolTarget:
    """A named pool together with the component it serves"""

    name: str
    kind: str  # Web / API
