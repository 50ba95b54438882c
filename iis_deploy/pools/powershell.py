"""PowerShell WebAdministration pool backend"""

import logging
from typing import Optional, Dict, Any

from .base import PoolBackend
from ..api.exceptions import PoolControlError
from ..models.pool import PoolState
from ..utils.async_utils import run_command, CommandOutput

logger = logging.getLogger(__name__)

NOT_FOUND_MARKER = "NotFound"


def _quote(value: str) -> str:
    """Quote a value as a single-quoted PowerShell string"""
    return "'" + value.replace("'", "''") + "'"


class PowerShellPoolBackend(PoolBackend):
    """Controls pools with the WebAdministration PowerShell module"""

    def __init__(self, config: Dict[str, Any] = None):
        """
        Initialize PowerShell backend

        Args:
            config: Configuration including:
                - executable: PowerShell binary (default: powershell)
        """
        super().__init__(config)
        self.executable = self.config.get('executable', 'powershell')

    async def _invoke(self, name: str, script: str) -> CommandOutput:
        command = f"Import-Module WebAdministration; {script}"
        try:
            output = await run_command([
                self.executable, "-NoProfile", "-NonInteractive", "-Command", command
            ])
        except FileNotFoundError as e:
            raise PoolControlError(name, f"{self.executable} not found") from e

        if not output.ok:
            raise PoolControlError(name, output.stderr or f"exit code {output.returncode}")

        return output

    async def get_state(self, name: str) -> Optional[PoolState]:
        pool = _quote(name)
        output = await self._invoke(
            name,
            f"if (Test-Path ('IIS:\\AppPools\\' + {pool})) "
            f"{{ (Get-WebAppPoolState -Name {pool}).Value }} "
            f"else {{ '{NOT_FOUND_MARKER}' }}"
        )

        if output.stdout == NOT_FOUND_MARKER:
            return None

        return PoolState.from_iis(output.stdout)

    async def start(self, name: str) -> None:
        logger.debug("Starting pool %s", name)
        await self._invoke(name, f"Start-WebAppPool -Name {_quote(name)}")

    async def stop(self, name: str) -> None:
        logger.debug("Stopping pool %s", name)
        await self._invoke(name, f"Stop-WebAppPool -Name {_quote(name)}")
