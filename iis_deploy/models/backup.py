"""Backup models"""

from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

from ..constants import BACKUP_PREFIX, BACKUP_TIMESTAMP_FORMAT


@dataclass(frozen=True)
class BackupRecord:
    """One retained backup folder"""

    timestamp: datetime
    path: Path

    @property
    def name(self) -> str:
        return self.path.name

    @property
    def created_at(self) -> Optional[datetime]:
        """Creation time encoded in the folder name, if parseable"""
        stamp = self.name[len(BACKUP_PREFIX):]
        try:
            return datetime.strptime(stamp, BACKUP_TIMESTAMP_FORMAT)
        except ValueError:
            return None

    def sort_key(self) -> tuple:
        """Newest first when sorted in reverse; ties broken by folder name"""
        return (self.timestamp, self.name)

    def contents(self) -> List[str]:
        if not self.path.is_dir():
            return []
        return sorted(p.name for p in self.path.iterdir())

    @classmethod
    def from_path(cls, path: Path) -> 'BackupRecord':
        mtime = path.stat().st_mtime
        return cls(timestamp=datetime.fromtimestamp(mtime), path=path)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "path": str(self.path),
            "timestamp": self.timestamp.isoformat(),
            "contents": self.contents()
        }
