"""Operation result models"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional, Any

from ..constants import ErrorCode


class OperationStatus(Enum):
    """Operation status"""
    SUCCESS = "success"
    FAILED = "failed"
    PARTIAL = "partial"
    SKIPPED = "skipped"
    IN_PROGRESS = "in_progress"


@dataclass
class ErrorDetail:
    """Detailed error or warning information"""

    code: str
    message: str
    context: Dict[str, Any] = field(default_factory=dict)
    timestamp: datetime = field(default_factory=datetime.utcnow)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            "code": self.code,
            "message": self.message,
            "context": self.context,
            "timestamp": self.timestamp.isoformat()
        }


@dataclass
class Result:
    """Base result class"""

    status: OperationStatus = OperationStatus.IN_PROGRESS
    message: str = ""
    errors: List[ErrorDetail] = field(default_factory=list)
    warnings: List[ErrorDetail] = field(default_factory=list)
    metadata: Dict[str, Any] = field(default_factory=dict)
    start_time: datetime = field(default_factory=datetime.utcnow)
    end_time: Optional[datetime] = None

    @property
    def is_success(self) -> bool:
        """Check if operation was successful"""
        return self.status == OperationStatus.SUCCESS

    @property
    def is_failed(self) -> bool:
        """Check if operation failed"""
        return self.status == OperationStatus.FAILED

    @property
    def duration(self) -> Optional[float]:
        """Get operation duration in seconds"""
        if self.end_time:
            return (self.end_time - self.start_time).total_seconds()
        return None

    @property
    def error(self) -> Optional[str]:
        """First error message, if any"""
        return self.errors[0].message if self.errors else None

    @property
    def warning_codes(self) -> List[str]:
        return [w.code for w in self.warnings]

    @property
    def error_codes(self) -> List[str]:
        return [e.code for e in self.errors]

    def add_error(self, code: str, message: str, **context) -> None:
        """Add an error"""
        self.errors.append(ErrorDetail(code=code, message=message, context=context))

    def add_warning(self, code: str, message: str, **context) -> None:
        """Add a non-fatal warning"""
        self.warnings.append(ErrorDetail(code=code, message=message, context=context))

    def merge(self, other: 'Result') -> None:
        """Carry errors and warnings of a step result into this one"""
        self.errors.extend(other.errors)
        self.warnings.extend(other.warnings)

    def complete(self, status: Optional[OperationStatus] = None) -> None:
        """Mark operation as complete"""
        self.end_time = datetime.utcnow()
        if status:
            self.status = status

    def _base_dict(self) -> Dict[str, Any]:
        return {
            "status": self.status.value,
            "message": self.message,
            "errors": [e.to_dict() for e in self.errors],
            "warnings": [w.to_dict() for w in self.warnings],
            "duration": self.duration
        }


@dataclass
class StageResult(Result):
    """Result of staging a release package"""

    version: Optional[str] = None
    package: Optional[Any] = None  # StagedPackage

    def to_dict(self) -> Dict[str, Any]:
        data = self._base_dict()
        data["version"] = self.version
        data["staging_path"] = str(self.package.root) if self.package else None
        return data


@dataclass
class BackupResult(Result):
    """Result of a backup and prune cycle"""

    backup_path: Optional[Path] = None
    pruned: List[Path] = field(default_factory=list)
    retained: int = 0

    def to_dict(self) -> Dict[str, Any]:
        data = self._base_dict()
        data["backup_path"] = str(self.backup_path) if self.backup_path else None
        data["pruned"] = [str(p) for p in self.pruned]
        data["retained"] = self.retained
        return data


@dataclass
class PoolResult(Result):
    """Result of a single pool state change"""

    pool_name: str = ""
    action: str = ""  # stop / start
    final_state: Optional[Any] = None  # PoolState
    attempts: int = 0
    changed: bool = False

    @property
    def timed_out(self) -> bool:
        return ErrorCode.POOL_TIMEOUT in self.warning_codes

    @property
    def not_found(self) -> bool:
        return ErrorCode.POOL_NOT_FOUND in self.warning_codes

    def to_dict(self) -> Dict[str, Any]:
        data = self._base_dict()
        data.update({
            "pool_name": self.pool_name,
            "action": self.action,
            "final_state": self.final_state.value if self.final_state else None,
            "attempts": self.attempts,
            "changed": self.changed
        })
        return data


@dataclass
class SwapResult(Result):
    """Result of replacing the files of one live directory"""

    live_path: Optional[Path] = None
    removed: List[str] = field(default_factory=list)
    moved: List[str] = field(default_factory=list)
    assets_merged: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        data = self._base_dict()
        data.update({
            "live_path": str(self.live_path) if self.live_path else None,
            "removed": self.removed,
            "moved": self.moved,
            "assets_merged": self.assets_merged
        })
        return data


@dataclass
class DeployResult(Result):
    """Result of a full deployment run"""

    app_name: Optional[str] = None
    version: Optional[str] = None
    environment: Optional[str] = None
    steps: Dict[str, Result] = field(default_factory=dict)
    backup_path: Optional[Path] = None
    web_path: Optional[Path] = None
    api_path: Optional[Path] = None
    release_url: Optional[str] = None
    dry_run: bool = False

    def add_step(self, name: str, result: Result) -> None:
        """Record a step result and carry over its findings"""
        self.steps[name] = result
        self.merge(result)

    @property
    def pool_results(self) -> List[PoolResult]:
        return [r for r in self.steps.values() if isinstance(r, PoolResult)]

    def finalize(self) -> None:
        """Derive the overall status from the collected findings"""
        if self.errors:
            self.complete(OperationStatus.FAILED)
        elif self.warnings:
            self.complete(OperationStatus.PARTIAL)
        else:
            self.complete(OperationStatus.SUCCESS)

    def to_dict(self) -> Dict[str, Any]:
        data = self._base_dict()
        data.update({
            "app_name": self.app_name,
            "version": self.version,
            "environment": self.environment,
            "steps": {name: r.to_dict() for name, r in self.steps.items()},
            "backup_path": str(self.backup_path) if self.backup_path else None,
            "web_path": str(self.web_path) if self.web_path else None,
            "api_path": str(self.api_path) if self.api_path else None,
            "release_url": self.release_url,
            "dry_run": self.dry_run
        })
        return data


@dataclass
class RestoreResult(Result):
    """Result of restoring a backup into the live paths"""

    backup_name: Optional[str] = None
    restored: List[Path] = field(default_factory=list)
    steps: Dict[str, Result] = field(default_factory=dict)

    def add_step(self, name: str, result: Result) -> None:
        self.steps[name] = result
        self.merge(result)

    def to_dict(self) -> Dict[str, Any]:
        data = self._base_dict()
        data["backup_name"] = self.backup_name
        data["restored"] = [str(p) for p in self.restored]
        data["steps"] = {name: r.to_dict() for name, r in self.steps.items()}
        return data


@dataclass
class PackResult(Result):
    """Result of pack operation"""

    app_name: Optional[str] = None
    version: Optional[str] = None
    package_path: Optional[Path] = None
    package_size: Optional[int] = None
    checksum: Optional[str] = None
    components: List[str] = field(default_factory=list)
    release_url: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data = self._base_dict()
        data.update({
            "app_name": self.app_name,
            "version": self.version,
            "package_path": str(self.package_path) if self.package_path else None,
            "package_size": self.package_size,
            "checksum": self.checksum,
            "components": self.components,
            "release_url": self.release_url
        })
        return data


@dataclass
class ValidationResult:
    """Validation result with detailed findings"""
    is_valid: bool = True
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    info: List[str] = field(default_factory=list)

    def add_error(self, message: str) -> None:
        """Add error message"""
        self.errors.append(message)
        self.is_valid = False

    def add_warning(self, message: str) -> None:
        """Add warning message"""
        self.warnings.append(message)

    def add_info(self, message: str) -> None:
        """Add info message"""
        self.info.append(message)

    def merge(self, other: 'ValidationResult') -> None:
        """Merge another result into this one"""
        self.errors.extend(other.errors)
        self.warnings.extend(other.warnings)
        self.info.extend(other.info)
        if not other.is_valid:
            self.is_valid = False

    def __bool__(self) -> bool:
        """Boolean evaluation returns is_valid"""
        return self.is_valid

    def __str__(self) -> str:
        lines = []

        if self.errors:
            lines.append("Errors:")
            for error in self.errors:
                lines.append(f"  ✗ {error}")

        if self.warnings:
            lines.append("Warnings:")
            for warning in self.warnings:
                lines.append(f"  ⚠ {warning}")

        if self.info:
            lines.append("Info:")
            for info in self.info:
                lines.append(f"  {info}")

        if self.is_valid and not self.errors and not self.warnings:
            lines.append("✓ All validations passed")

        return '\n'.join(lines)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            'is_valid': self.is_valid,
            'errors': self.errors,
            'warnings': self.warnings,
            'info': self.info
        }
