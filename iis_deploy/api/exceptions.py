"""Exception definitions for iis-deploy API"""

from typing import List


class IisDeployError(Exception):
    """Base exception for iis-deploy"""

    def __init__(self, message: str, error_code: str = None):
        super().__init__(message)
        self.error_code = error_code


class ValidationError(IisDeployError):
    """Deployment parameters are missing or malformed

    Carries every missing field, not only the first one found.
    """

    def __init__(self, message: str, fields: List[str] = None):
        super().__init__(message, "DT007")
        self.fields = list(fields or [])

    @classmethod
    def missing(cls, fields: List[str]) -> 'ValidationError':
        """Build an error reporting all missing required parameters"""
        names = ", ".join(fields)
        return cls(f"Missing required parameters: {names}", fields)

    @classmethod
    def malformed(cls, fields: List[str]) -> 'ValidationError':
        """Build an error reporting all names unusable as a path segment or pool name"""
        names = ", ".join(fields)
        return cls(f"Invalid parameters (path separators, reserved characters, . or ..): {names}", fields)


class ConfigError(IisDeployError):
    """Configuration error"""

    def __init__(self, message: str):
        super().__init__(message, "DT001")


class StagingError(IisDeployError):
    """Release package could not be staged"""
    pass


class ArtifactNotFoundError(StagingError):
    """Zero or ambiguous release archives after download"""

    def __init__(self, version: str, detail: str):
        super().__init__(f"Release artifact for {version}: {detail}", "DT010")
        self.version = version


class ExtractionError(StagingError):
    """Archive extraction or component layout error"""

    def __init__(self, message: str):
        super().__init__(message, "DT022")


class BackupError(IisDeployError):
    """Backup operation error"""
    pass


class BackupCopyError(BackupError):
    """Copying the live deployment into a backup failed"""

    def __init__(self, message: str):
        super().__init__(message, "DT023")


class BackupNotFoundError(BackupError):
    """Requested backup does not exist"""

    def __init__(self, name: str):
        super().__init__(f"Backup not found: {name}", "DT011")
        self.name = name


class PoolError(IisDeployError):
    """Application pool error"""
    pass


class PoolControlError(PoolError):
    """Pool management command failed"""

    def __init__(self, pool_name: str, message: str):
        super().__init__(f"Pool {pool_name}: {message}", "DT024")
        self.pool_name = pool_name


class SwapError(IisDeployError):
    """Replacing live files failed"""

    def __init__(self, message: str, error_code: str = "DT025"):
        super().__init__(message, error_code)


class SourceNotFoundError(SwapError):
    """Staged component folder is missing"""

    def __init__(self, path: str):
        super().__init__(f"Source folder not found: {path}", "DT002")
        self.path = path


class PermissionError(SwapError):
    """Permission denied, typically a file locked by a running process"""

    def __init__(self, message: str):
        super().__init__(message, "DT005")


class StorageError(IisDeployError):
    """Release source operation error"""

    def __init__(self, message: str):
        super().__init__(message, "DT004")


class PackError(IisDeployError):
    """Packing operation error"""

    def __init__(self, message: str):
        super().__init__(message, "DT020")
