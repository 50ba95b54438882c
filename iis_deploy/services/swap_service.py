"""Live directory replacement service"""

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Iterable, List, Optional, Tuple

from ..api.exceptions import (
    SwapError,
    SourceNotFoundError,
    PermissionError as AccessDeniedError,
)
from ..models.request import DeploymentRequest
from ..models.result import SwapResult, OperationStatus
from ..utils.file_utils import list_entries, remove_path, move_entry, merge_contents
from ..utils.output import console
from ..constants import ASSETS_DIR, MSG_SWAP_SUCCESS

logger = logging.getLogger(__name__)


@contextmanager
def _translate_os_errors(action: str, path: Path):
    """Map OS failures to swap exceptions"""
    try:
        yield
    except PermissionError as e:
        raise AccessDeniedError(
            f"Permission denied while {action} {path}: {e}. "
            "Is a process still holding files open?"
        ) from e
    except OSError as e:
        raise SwapError(f"Failed {action} {path}: {e}") from e


def _normalize(names: Optional[Iterable[str]]) -> frozenset:
    return frozenset(n.lower() for n in (names or ()))


class SwapService:
    """Replaces the contents of live directories with staged files

    Entries named in the skip list are never deleted and the ``assets``
    folder itself always survives; only its contents are replaced.
    """

    def clear(self, live_path: Path, skip_names: Optional[Iterable[str]] = None) -> List[str]:
        """Remove the live entries that the new release replaces

        Args:
            live_path: Live directory (created when missing)
            skip_names: Entry names to keep (case-insensitive)

        Returns:
            Names of removed entries; emptied assets content is listed as ``assets/<name>``
        """
        skip = _normalize(skip_names)
        removed = []

        with _translate_os_errors("clearing", live_path):
            if not live_path.exists():
                live_path.mkdir(parents=True)
                logger.info("Created live directory %s", live_path)
                return removed

            for entry in list_entries(live_path):
                if DeploymentRequest.is_assets(entry.name):
                    if entry.is_dir():
                        for item in list_entries(entry):
                            remove_path(item)
                            removed.append(f"{entry.name}/{item.name}")
                    continue

                if entry.name.lower() in skip:
                    logger.debug("Keeping %s", entry)
                    continue

                remove_path(entry)
                removed.append(entry.name)

        return removed

    def deploy(self,
               staged_path: Path,
               live_path: Path,
               skip_names: Optional[Iterable[str]] = None) -> Tuple[List[str], List[str]]:
        """Move staged entries into the live directory

        A staged entry named in the skip list is left behind when the live
        directory already holds an entry of that name.

        Args:
            staged_path: Extracted component folder
            live_path: Live directory
            skip_names: Entry names whose live copy is kept (case-insensitive)

        Returns:
            (moved entry names, merged assets entry names)

        Raises:
            SourceNotFoundError: If the staged folder is missing
        """
        if not staged_path.is_dir():
            raise SourceNotFoundError(str(staged_path))

        skip = _normalize(skip_names)
        moved = []
        merged = []
        staged_assets = None

        with _translate_os_errors("deploying to", live_path):
            live_path.mkdir(parents=True, exist_ok=True)
            kept = {entry.name.lower() for entry in list_entries(live_path)} & skip

            for entry in list_entries(staged_path):
                if DeploymentRequest.is_assets(entry.name) and entry.is_dir():
                    staged_assets = entry
                    continue
                if entry.name.lower() in kept:
                    logger.info("Keeping live %s, not deploying the packaged copy", entry.name)
                    continue
                move_entry(entry, live_path)
                moved.append(entry.name)

            if staged_assets is not None:
                live_assets = self._find_assets(live_path) or live_path / ASSETS_DIR
                merged = merge_contents(staged_assets, live_assets)

        return moved, merged

    def swap(self,
             staged_path: Path,
             live_path: Path,
             skip_names: Optional[Iterable[str]] = None,
             kind: str = "Web") -> SwapResult:
        """Clear a live directory and deploy staged files into it

        Args:
            staged_path: Extracted component folder
            live_path: Live directory
            skip_names: Entry names to keep
            kind: Component label for messages

        Returns:
            SwapResult

        Raises:
            SwapError: If any file operation fails
        """
        result = SwapResult(live_path=live_path)

        if not staged_path.is_dir():
            raise SourceNotFoundError(str(staged_path))

        result.removed = self.clear(live_path, skip_names)
        result.moved, result.assets_merged = self.deploy(staged_path, live_path, skip_names)

        result.message = MSG_SWAP_SUCCESS.format(kind=kind, path=live_path)
        result.complete(OperationStatus.SUCCESS)
        console.print(result.message)
        return result

    @staticmethod
    def _find_assets(live_path: Path) -> Optional[Path]:
        for entry in list_entries(live_path):
            if DeploymentRequest.is_assets(entry.name) and entry.is_dir():
                return entry
        return None
