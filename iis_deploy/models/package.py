"""Staged release package model"""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional


@dataclass(frozen=True)
class StagedPackage:
    """Extracted contents of a release archive"""

    root: Path
    web_path: Path
    api_path: Optional[Path] = None
    archive_path: Optional[Path] = None

    def component_path(self, name: str) -> Path:
        """Address a component subtree by its folder name"""
        return self.root / name

    @property
    def has_api(self) -> bool:
        return self.api_path is not None
