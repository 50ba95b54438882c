"""Backup service: snapshot live deployments and enforce retention"""

import logging
import tempfile
from datetime import datetime
from pathlib import Path
from typing import Callable, Iterable, List, Optional

from ..api.exceptions import BackupCopyError, BackupNotFoundError
from ..models.backup import BackupRecord
from ..models.result import BackupResult, RestoreResult, OperationStatus
from ..utils.file_utils import copy_tree, remove_path
from ..utils.output import console
from .swap_service import SwapService
from ..constants import (
    ErrorCode,
    API_SUFFIX,
    BACKUP_PREFIX,
    BACKUP_TIMESTAMP_FORMAT,
    DEFAULT_RETENTION_COUNT,
    MSG_BACKUP_SUCCESS,
    MSG_BACKUP_SKIPPED,
    MSG_BACKUP_PRUNED,
    EMOJI_WARNING,
)

logger = logging.getLogger(__name__)

LATEST_BACKUP = "latest"


class BackupService:
    """Creates, prunes, lists and restores deployment backups

    Backups live under ``<backup_root>/backup-<YYYYMMDD-HHmmss>/`` with one
    folder per component: ``<dir>`` for the web site and ``<dir>api`` for
    the API.
    """

    def __init__(self, clock: Optional[Callable[[], datetime]] = None):
        """Initialize backup service

        Args:
            clock: Returns the current time (injectable for tests)
        """
        self.clock = clock or datetime.now

    def backup(self,
               live_web_path: Path,
               live_api_path: Optional[Path],
               backup_root: Path,
               retention_count: int = DEFAULT_RETENTION_COUNT,
               dir_name: Optional[str] = None) -> BackupResult:
        """Copy the live deployment into a new timestamped backup, then prune

        Args:
            live_web_path: Live web directory
            live_api_path: Live API directory, None for web-only deployments
            backup_root: Folder holding the backups of this deployment
            retention_count: Number of backups to keep
            dir_name: Component folder name (defaults to the backup root's name)

        Returns:
            BackupResult, SKIPPED when there is nothing deployed yet

        Raises:
            BackupCopyError: If the backup cannot be written
        """
        result = BackupResult()
        dir_name = dir_name or backup_root.name

        if not live_web_path.exists():
            result.message = MSG_BACKUP_SKIPPED
            result.complete(OperationStatus.SKIPPED)
            console.print(MSG_BACKUP_SKIPPED)
            return result

        backup_path = backup_root / f"{BACKUP_PREFIX}{self.clock().strftime(BACKUP_TIMESTAMP_FORMAT)}"
        if backup_path.exists():
            raise BackupCopyError(f"Backup folder already exists: {backup_path}")

        try:
            backup_path.mkdir(parents=True)
            copy_tree(live_web_path, backup_path / dir_name)
            logger.info("Backed up %s", live_web_path)

            if live_api_path is not None:
                if live_api_path.exists():
                    copy_tree(live_api_path, backup_path / f"{dir_name}{API_SUFFIX}")
                    logger.info("Backed up %s", live_api_path)
                else:
                    message = f"API path not found, skipping API backup: {live_api_path}"
                    result.add_warning(ErrorCode.API_SOURCE_MISSING, message, path=str(live_api_path))
                    console.print(f"{EMOJI_WARNING} {message}")
        except OSError as e:
            try:
                remove_path(backup_path)
            except OSError as cleanup_error:
                logger.warning("Could not remove incomplete backup %s: %s", backup_path, cleanup_error)
            raise BackupCopyError(f"Backup to {backup_path} failed: {e}") from e

        result.backup_path = backup_path
        console.print(MSG_BACKUP_SUCCESS.format(path=backup_path))

        self.prune(backup_root, retention_count, result)

        result.message = MSG_BACKUP_SUCCESS.format(path=backup_path)
        result.complete(OperationStatus.SUCCESS)
        return result

    def prune(self,
              backup_root: Path,
              retention_count: int = DEFAULT_RETENTION_COUNT,
              result: Optional[BackupResult] = None) -> BackupResult:
        """Delete all but the newest backups

        Listing and deletion failures become BACKUP_PRUNE_FAILED warnings.

        Args:
            backup_root: Folder holding the backups
            retention_count: Number of backups to keep
            result: Result to record into (a new one if omitted)

        Returns:
            The result holding pruned paths and the retained count
        """
        if retention_count < 1:
            raise ValueError("Retention count must be at least 1")

        result = result if result is not None else BackupResult()
        try:
            records = self.list_backups(backup_root)
        except OSError as e:
            message = f"Failed to list backups in {backup_root}: {e}"
            result.add_warning(ErrorCode.BACKUP_PRUNE_FAILED, message, path=str(backup_root))
            console.print(f"{EMOJI_WARNING} {message}")
            return result

        failed = 0

        for record in records[retention_count:]:
            try:
                remove_path(record.path)
                result.pruned.append(record.path)
                logger.info("Removed old backup %s", record.path)
            except OSError as e:
                failed += 1
                message = f"Failed to remove old backup {record.name}: {e}"
                result.add_warning(ErrorCode.BACKUP_PRUNE_FAILED, message, path=str(record.path))
                console.print(f"{EMOJI_WARNING} {message}")

        result.retained = min(len(records), retention_count) + failed
        if result.pruned:
            console.print(MSG_BACKUP_PRUNED.format(count=retention_count))

        return result

    def list_backups(self, backup_root: Path) -> List[BackupRecord]:
        """List backups, newest first

        Ordered by modification time, ties broken by folder name.
        """
        if not backup_root.is_dir():
            return []

        records = [
            BackupRecord.from_path(path)
            for path in backup_root.glob(f"{BACKUP_PREFIX}*")
            if path.is_dir()
        ]
        return sorted(records, key=lambda r: r.sort_key(), reverse=True)

    def find_backup(self, backup_root: Path, name: str) -> BackupRecord:
        """Look up a backup by folder name, or ``latest``

        Raises:
            BackupNotFoundError: If no such backup exists
        """
        records = self.list_backups(backup_root)

        if name == LATEST_BACKUP:
            if records:
                return records[0]
        else:
            for record in records:
                if record.name == name:
                    return record

        raise BackupNotFoundError(name)

    def restore(self,
                record: BackupRecord,
                live_web_path: Path,
                live_api_path: Optional[Path],
                dir_name: str,
                skip_names: Optional[Iterable[str]] = None,
                swap_service: Optional[SwapService] = None) -> RestoreResult:
        """Put a backup back into the live directories

        The backup itself is left untouched; its components are copied to a
        scratch folder first and swapped in from there.

        Args:
            record: Backup to restore
            live_web_path: Live web directory
            live_api_path: Live API directory, None to restore the web site only
            dir_name: Component folder name used inside the backup
            skip_names: Entry names kept in the live directories
            swap_service: Swap service used for the replacement

        Returns:
            RestoreResult

        Raises:
            BackupNotFoundError: If the backup lacks the web component
            SwapError: If replacing live files fails
        """
        swap_service = swap_service or SwapService()
        result = RestoreResult(backup_name=record.name)

        components = [("Web", record.path / dir_name, live_web_path)]
        if live_api_path is not None:
            components.append(("API", record.path / f"{dir_name}{API_SUFFIX}", live_api_path))

        if not components[0][1].is_dir():
            raise BackupNotFoundError(f"{record.name}/{dir_name}")

        with tempfile.TemporaryDirectory(prefix=".restore-", dir=record.path.parent) as scratch:
            for kind, source, live_path in components:
                if not source.is_dir():
                    message = f"{kind} component missing in backup {record.name}"
                    result.add_warning(ErrorCode.API_SOURCE_MISSING, message, path=str(source))
                    console.print(f"{EMOJI_WARNING} {message}")
                    continue

                staged = copy_tree(source, Path(scratch) / source.name)
                result.add_step(kind.lower(), swap_service.swap(staged, live_path, skip_names, kind))
                result.restored.append(live_path)

        result.message = f"Restored {record.name}"
        result.complete(OperationStatus.SUCCESS)
        return result
