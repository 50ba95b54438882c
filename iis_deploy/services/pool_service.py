"""Application pool control service"""

import asyncio
import logging
from typing import Awaitable, Callable, List, Optional

from ..api.exceptions import PoolControlError
from ..core.path_resolver import PathResolver
from ..models.pool import PoolState, RetryPolicy, PoolTarget
from ..models.request import DeploymentRequest
from ..models.result import PoolResult, OperationStatus
from ..pools.base import PoolBackend
from ..utils.output import console
from ..constants import (
    ErrorCode,
    EMOJI_ERROR,
    MSG_POOL_STOPPED,
    MSG_POOL_STARTED,
    MSG_POOL_ALREADY_STOPPED,
    MSG_POOL_ALREADY_RUNNING,
    MSG_POOL_TIMEOUT,
    MSG_POOL_NOT_FOUND,
    MSG_POOL_UNKNOWN,
    MSG_POOL_NOT_STARTED,
)

logger = logging.getLogger(__name__)

Sleep = Callable[[float], Awaitable[None]]


class PoolService:
    """Stops and starts application pools with bounded polling

    Timeouts, missing pools and pools in an unknown state are recorded as
    warnings so the deployment can continue; only a failing management
    command is an error.
    """

    def __init__(self,
                 backend: PoolBackend,
                 policy: Optional[RetryPolicy] = None,
                 sleep: Optional[Sleep] = None):
        """Initialize pool service

        Args:
            backend: Pool management backend
            policy: Polling interval and attempt limit
            sleep: Async sleep used between polls (injectable for tests)
        """
        self.backend = backend
        self.policy = policy or RetryPolicy()
        self.sleep = sleep or asyncio.sleep

    async def stop_pool(self, name: str, kind: str = "Web") -> PoolResult:
        """Stop a pool and wait until it reports Stopped

        A pool that is missing or reports an unknown state gets no command.
        """
        result = PoolResult(pool_name=name, action="stop")

        try:
            state = await self.backend.get_state(name)

            if state is None:
                self._not_found(result, kind)
            elif state == PoolState.UNKNOWN:
                self._unknown(result, kind)
            elif state == PoolState.STOPPED:
                result.final_state = state
                result.message = MSG_POOL_ALREADY_STOPPED.format(kind=kind, name=name)
                console.print(result.message)
            else:
                await self.backend.stop(name)
                result.changed = True
                if await self._wait_for(name, PoolState.STOPPED, result):
                    result.message = MSG_POOL_STOPPED.format(kind=kind, name=name)
                    console.print(result.message)
        except PoolControlError as e:
            return self._command_failed(result, e)

        result.complete(OperationStatus.SUCCESS)
        return result

    async def start_pool(self, name: str, kind: str = "Web") -> PoolResult:
        """Start a stopped pool and wait until it reports Started

        A pool still changing state is polled until it settles first. A pool
        left in any state other than Stopped or Running is reported with a
        warning and not started.
        """
        result = PoolResult(pool_name=name, action="start")

        try:
            state = await self.backend.get_state(name)
            if state == PoolState.TRANSITIONING:
                state = await self._settle(name, result)

            if state is None:
                self._not_found(result, kind)
            elif state == PoolState.UNKNOWN:
                self._unknown(result, kind)
            elif state == PoolState.STOPPED:
                await self.backend.start(name)
                result.changed = True
                if await self._wait_for(name, PoolState.RUNNING, result):
                    result.message = MSG_POOL_STARTED.format(kind=kind, name=name)
                    console.print(result.message)
            elif state == PoolState.RUNNING:
                result.final_state = state
                result.message = MSG_POOL_ALREADY_RUNNING.format(kind=kind, name=name)
                console.print(result.message)
            else:
                result.final_state = state
                message = MSG_POOL_NOT_STARTED.format(kind=kind, name=name, state=state.value)
                result.add_warning(ErrorCode.POOL_NOT_STARTED, message, pool=name, attempts=result.attempts)
                result.message = message
                console.print(message)
        except PoolControlError as e:
            return self._command_failed(result, e)

        result.complete(OperationStatus.SUCCESS)
        return result

    async def _settle(self, name: str, result: PoolResult) -> Optional[PoolState]:
        """Poll a transitioning pool until it reports another state or attempts run out"""
        state = PoolState.TRANSITIONING
        for attempt in range(1, self.policy.max_attempts + 1):
            await self.sleep(self.policy.interval)
            state = await self.backend.get_state(name)
            result.attempts = attempt
            logger.debug("Pool %s is %s while settling (attempt %d)", name, state, attempt)

            if state != PoolState.TRANSITIONING:
                break

        return state

    async def _wait_for(self, name: str, target: PoolState, result: PoolResult) -> bool:
        """Poll until the pool reaches a state or attempts run out

        Returns:
            True if the state was reached, False on timeout (warning recorded)
        """
        state = None
        for attempt in range(1, self.policy.max_attempts + 1):
            await self.sleep(self.policy.interval)
            state = await self.backend.get_state(name)
            result.attempts = attempt
            logger.debug("Pool %s is %s (attempt %d)", name, state, attempt)

            if state == target:
                result.final_state = state
                return True

        result.final_state = state
        message = MSG_POOL_TIMEOUT.format(name=name, state=target.value)
        result.add_warning(
            ErrorCode.POOL_TIMEOUT, message,
            pool=name, attempts=result.attempts, state=state.value if state else None
        )
        result.message = message
        console.print(message)
        return False

    @staticmethod
    def _not_found(result: PoolResult, kind: str) -> None:
        message = MSG_POOL_NOT_FOUND.format(kind=kind, name=result.pool_name)
        result.add_warning(ErrorCode.POOL_NOT_FOUND, message, pool=result.pool_name)
        result.message = message
        console.print(message)

    @staticmethod
    def _unknown(result: PoolResult, kind: str) -> None:
        result.final_state = PoolState.UNKNOWN
        message = MSG_POOL_UNKNOWN.format(kind=kind, name=result.pool_name)
        result.add_warning(ErrorCode.POOL_STATE_UNKNOWN, message, pool=result.pool_name)
        result.message = message
        console.print(message)

    @staticmethod
    def _command_failed(result: PoolResult, error: PoolControlError) -> PoolResult:
        result.add_error(ErrorCode.POOL_COMMAND_FAILED, str(error), pool=result.pool_name)
        result.complete(OperationStatus.FAILED)
        console.print(f"{EMOJI_ERROR} {error}")
        return result

    @staticmethod
    def targets(request: DeploymentRequest) -> List[PoolTarget]:
        return PathResolver.get_pool_targets(request.env_name, request.app_pool, request.web_only)

    async def stop_pools(self, request: DeploymentRequest) -> List[PoolResult]:
        """Stop the web pool and, unless web only, the API pool

        Each pool is attempted regardless of the other's outcome.
        """
        return await self.stop_targets(self.targets(request))

    async def start_pools(self, request: DeploymentRequest) -> List[PoolResult]:
        """Start the web pool and, unless web only, the API pool"""
        return await self.start_targets(self.targets(request))

    async def stop_targets(self, targets: List[PoolTarget]) -> List[PoolResult]:
        return [await self.stop_pool(t.name, t.kind) for t in targets]

    async def start_targets(self, targets: List[PoolTarget]) -> List[PoolResult]:
        return [await self.start_pool(t.name, t.kind) for t in targets]
