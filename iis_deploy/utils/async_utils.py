# iis_deploy/utils/async_utils.py
"""Asynchronous operation utilities"""

import asyncio
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Coroutine, Dict, Optional, Sequence, TypeVar

T = TypeVar('T')

logger = logging.getLogger(__name__)


@dataclass
class CommandOutput:
    """Outcome of an external command"""
    returncode: int
    stdout: str
    stderr: str

    @property
    def ok(self) -> bool:
        return self.returncode == 0


def run_async(coro: Coroutine[Any, Any, T]) -> T:
    """
    Run async coroutine in sync context

    Args:
        coro: Coroutine to run

    Returns:
        Coroutine result
    """
    loop = None
    try:
        loop = asyncio.get_running_loop()
    except RuntimeError:
        # No running loop
        pass

    if loop and loop.is_running():
        # Already in async context, create new thread
        import threading

        result = None
        exception = None

        def run_in_thread():
            nonlocal result, exception
            try:
                new_loop = asyncio.new_event_loop()
                asyncio.set_event_loop(new_loop)
                result = new_loop.run_until_complete(coro)
                new_loop.close()
            except Exception as e:
                exception = e

        thread = threading.Thread(target=run_in_thread)
        thread.start()
        thread.join()

        if exception:
            raise exception
        return result
    else:
        return asyncio.run(coro)


async def run_command(args: Sequence[str],
                      cwd: Optional[Path] = None,
                      env: Optional[Dict[str, str]] = None) -> CommandOutput:
    """
    Run an external command and capture its output

    Args:
        args: Program and arguments
        cwd: Working directory
        env: Extra environment variables merged into the current environment

    Returns:
        CommandOutput with decoded stdout/stderr

    Raises:
        FileNotFoundError: If the program does not exist
    """
    full_env = None
    if env:
        full_env = dict(os.environ)
        full_env.update(env)

    logger.debug("Running: %s", " ".join(args))

    process = await asyncio.create_subprocess_exec(
        *args,
        cwd=str(cwd) if cwd else None,
        env=full_env,
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.PIPE
    )
    stdout, stderr = await process.communicate()

    output = CommandOutput(
        returncode=process.returncode,
        stdout=stdout.decode(errors="replace").strip(),
        stderr=stderr.decode(errors="replace").strip()
    )

    if not output.ok:
        logger.debug("Command exited with %d: %s", output.returncode, output.stderr)

    return output
