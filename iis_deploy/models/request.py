"""Deployment request model"""

import json
from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, Iterable, List, Optional, Union

from ..constants import ARCHIVE_FILE_PATTERN, ASSETS_DIR


def parse_skip_items(value: Union[str, Iterable[str], None]) -> FrozenSet[str]:
    """Parse a comma separated skip list into a set of names

    Items are trimmed and empty entries dropped.
    """
    if not value:
        return frozenset()

    if isinstance(value, str):
        items = value.split(',')
    else:
        items = list(value)

    return frozenset(item.strip() for item in items if item and item.strip())


def parse_flag(value: Any) -> bool:
    """Interpret a JSON/CLI flag: only True or "true" (any case) count"""
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.strip().lower() == "true"
    return False


def _text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


@dataclass(frozen=True)
class DeploymentRequest:
    """Immutable description of one deployment invocation"""

    app_name: str
    web_name: str
    env_name: str
    version: str
    dir_name: str
    app_pool: str
    api_name: Optional[str] = None
    skip_items: FrozenSet[str] = field(default_factory=frozenset)
    web_only: bool = False

    @property
    def clean_version(self) -> str:
        """Version without the leading tag prefix"""
        return self.version.lstrip("v")

    @property
    def archive_name(self) -> str:
        return ARCHIVE_FILE_PATTERN.format(app=self.app_name, version=self.clean_version)

    @property
    def deploys_api(self) -> bool:
        return not self.web_only

    @staticmethod
    def is_assets(name: str) -> bool:
        return name.lower() == ASSETS_DIR

    @classmethod
    def from_params(cls, params: Union[str, Dict[str, Any]]) -> 'DeploymentRequest':
        """Create a request from the JSON params document

        Raises:
            ValidationError: If required parameters are missing
        """
        from ..core.validation_engine import ValidationEngine

        if isinstance(params, str):
            try:
                params = json.loads(params)
            except json.JSONDecodeError as e:
                from ..api.exceptions import ValidationError
                raise ValidationError(f"Parameters are not valid JSON: {e}")

        ValidationEngine().validate_params(params)

        return cls(
            app_name=_text(params.get("app_name")),
            web_name=_text(params.get("web_name")),
            api_name=_text(params.get("api_name")) or None,
            env_name=_text(params.get("env_name")),
            version=_text(params.get("ver_number")),
            dir_name=_text(params.get("dir_name")),
            app_pool=_text(params.get("app_pool")),
            skip_items=parse_skip_items(params.get("skip_items")),
            web_only=parse_flag(params.get("web_only"))
        )

    def to_params(self) -> Dict[str, Any]:
        """Convert back to the params document shape"""
        return {
            "app_name": self.app_name,
            "web_name": self.web_name,
            "api_name": self.api_name or "",
            "env_name": self.env_name,
            "ver_number": self.version,
            "dir_name": self.dir_name,
            "app_pool": self.app_pool,
            "skip_items": ",".join(sorted(self.skip_items)),
            "web_only": self.web_only
        }

    def describe(self) -> List[tuple]:
        """Rows for displaying the deployment context"""
        rows = [
            ("Application", self.app_name),
            ("Version", self.version),
            ("Environment", self.env_name),
            ("Web", self.web_name),
        ]
        if self.deploys_api:
            rows.append(("API", self.api_name or ""))
        rows.extend([
            ("Directory", self.dir_name),
            ("Pool", self.app_pool),
            ("Skip items", ", ".join(sorted(self.skip_items)) or "-"),
            ("Web only", str(self.web_only)),
        ])
        return rows
