"""appcmd.exe pool backend"""

import logging
import os
from typing import Optional, Dict, Any

from .base import PoolBackend
from ..api.exceptions import PoolControlError
from ..models.pool import PoolState
from ..utils.async_utils import run_command, CommandOutput

logger = logging.getLogger(__name__)

DEFAULT_APPCMD_PATH = "%windir%\\system32\\inetsrv\\appcmd.exe"


class AppCmdPoolBackend(PoolBackend):
    """Controls pools through IIS's appcmd command line tool"""

    def __init__(self, config: Dict[str, Any] = None):
        """
        Initialize appcmd backend

        Args:
            config: Configuration including:
                - executable: Path to appcmd.exe (environment variables expanded)
        """
        super().__init__(config)
        self.executable = os.path.expandvars(self.config.get('executable') or DEFAULT_APPCMD_PATH)

    async def _appcmd(self, name: str, *args: str) -> CommandOutput:
        try:
            return await run_command([self.executable, *args])
        except FileNotFoundError as e:
            raise PoolControlError(name, f"appcmd not found at {self.executable}") from e

    async def get_state(self, name: str) -> Optional[PoolState]:
        output = await self._appcmd(name, "list", "apppool", f"/name:{name}", "/text:state")

        # appcmd reports errors on stdout, and prints nothing for unknown pools
        if output.stdout.startswith("ERROR"):
            if "cannot find" in output.stdout.lower():
                return None
            raise PoolControlError(name, output.stdout)

        if not output.stdout:
            if output.ok or output.returncode == 1:
                return None
            raise PoolControlError(name, output.stderr or f"exit code {output.returncode}")

        return PoolState.from_iis(output.stdout.splitlines()[0])

    async def _change(self, name: str, action: str) -> None:
        output = await self._appcmd(name, action, "apppool", f"/apppool.name:{name}")
        if not output.ok:
            raise PoolControlError(name, output.stdout or output.stderr or f"exit code {output.returncode}")

    async def start(self, name: str) -> None:
        logger.debug("Starting pool %s", name)
        await self._change(name, "start")

    async def stop(self, name: str) -> None:
        logger.debug("Stopping pool %s", name)
        await self._change(name, "stop")
