"""Tests for PoolService"""

import pytest

from iis_deploy.constants import ErrorCode
from iis_deploy.models.pool import PoolState, RetryPolicy
from iis_deploy.models.request import DeploymentRequest
from iis_deploy.models.result import OperationStatus
from iis_deploy.services.pool_service import PoolService

from ..conftest import FakePoolBackend


class SettlingPoolBackend(FakePoolBackend):
    """Reports Transitioning for a number of polls, then a settled state"""

    def __init__(self, name, polls, settled):
        super().__init__({name: PoolState.TRANSITIONING})
        self.name = name
        self.polls = polls
        self.settled = settled

    async def get_state(self, name):
        state = await super().get_state(name)
        if name == self.name and state == PoolState.TRANSITIONING:
            self.polls -= 1
            if self.polls < 0:
                self.states[name] = self.settled
                return self.settled
        return state


@pytest.fixture
def policy():
    return RetryPolicy(interval=1.0, max_attempts=30)


class TestStopPool:
    """Test stopping pools"""

    @pytest.mark.asyncio
    async def test_running_pool_is_stopped(self, policy, fake_sleep):
        backend = FakePoolBackend({"dev-Shop": PoolState.RUNNING})
        result = await PoolService(backend, policy, fake_sleep).stop_pool("dev-Shop")

        assert result.is_success
        assert result.changed
        assert result.final_state == PoolState.STOPPED
        assert result.attempts == 1
        assert backend.actions == [("stop", "dev-Shop")]
        assert fake_sleep.intervals == [1.0]

    @pytest.mark.asyncio
    async def test_already_stopped_pool_untouched(self, policy, fake_sleep):
        backend = FakePoolBackend({"dev-Shop": PoolState.STOPPED})
        result = await PoolService(backend, policy, fake_sleep).stop_pool("dev-Shop")

        assert result.is_success
        assert not result.changed
        assert backend.actions == []
        assert fake_sleep.intervals == []

    @pytest.mark.asyncio
    async def test_timeout_is_a_warning(self, policy, fake_sleep):
        backend = FakePoolBackend({"dev-Shop": PoolState.RUNNING}, stuck={"dev-Shop"})
        result = await PoolService(backend, policy, fake_sleep).stop_pool("dev-Shop")

        assert result.is_success
        assert result.timed_out
        assert result.attempts == 30
        assert fake_sleep.intervals == [1.0] * 30
        assert result.final_state == PoolState.RUNNING

    @pytest.mark.asyncio
    async def test_missing_pool_is_a_warning(self, policy, fake_sleep):
        backend = FakePoolBackend()
        result = await PoolService(backend, policy, fake_sleep).stop_pool("dev-Missing")

        assert result.is_success
        assert result.not_found
        assert backend.actions == []

    @pytest.mark.asyncio
    async def test_unknown_state_is_skipped(self, policy, fake_sleep):
        backend = FakePoolBackend({"dev-Shop": PoolState.UNKNOWN})
        result = await PoolService(backend, policy, fake_sleep).stop_pool("dev-Shop")

        assert result.is_success
        assert result.warning_codes == [ErrorCode.POOL_STATE_UNKNOWN]
        assert result.final_state == PoolState.UNKNOWN
        assert not result.timed_out
        assert backend.actions == []
        assert fake_sleep.intervals == []

    @pytest.mark.asyncio
    async def test_command_failure_is_an_error(self, policy, fake_sleep):
        backend = FakePoolBackend({"dev-Shop": PoolState.RUNNING}, failing={("stop", "dev-Shop")})
        result = await PoolService(backend, policy, fake_sleep).stop_pool("dev-Shop")

        assert result.is_failed
        assert result.error_codes == [ErrorCode.POOL_COMMAND_FAILED]
        assert "access denied" in result.error


class TestStartPool:
    """Test starting pools"""

    @pytest.mark.asyncio
    async def test_stopped_pool_is_started(self, policy, fake_sleep):
        backend = FakePoolBackend({"dev-Shop": PoolState.STOPPED})
        result = await PoolService(backend, policy, fake_sleep).start_pool("dev-Shop")

        assert result.is_success
        assert result.changed
        assert result.final_state == PoolState.RUNNING
        assert backend.actions == [("start", "dev-Shop")]

    @pytest.mark.asyncio
    async def test_running_pool_left_alone(self, policy, fake_sleep):
        backend = FakePoolBackend({"dev-Shop": PoolState.RUNNING})
        result = await PoolService(backend, policy, fake_sleep).start_pool("dev-Shop")

        assert result.is_success
        assert not result.changed
        assert result.final_state == PoolState.RUNNING
        assert not result.warnings
        assert backend.actions == []

    @pytest.mark.asyncio
    async def test_transitioning_pool_started_once_it_settles(self, policy, fake_sleep):
        backend = SettlingPoolBackend("dev-Shop", polls=3, settled=PoolState.STOPPED)
        result = await PoolService(backend, policy, fake_sleep).start_pool("dev-Shop")

        assert result.is_success
        assert result.changed
        assert result.final_state == PoolState.RUNNING
        assert not result.warnings
        assert backend.actions == [("start", "dev-Shop")]

    @pytest.mark.asyncio
    async def test_stuck_transitioning_pool_is_a_warning(self, fake_sleep):
        backend = FakePoolBackend({"dev-Shop": PoolState.TRANSITIONING})
        service = PoolService(backend, RetryPolicy(interval=1.0, max_attempts=5), fake_sleep)

        result = await service.start_pool("dev-Shop")

        assert result.is_success
        assert not result.changed
        assert result.final_state == PoolState.TRANSITIONING
        assert result.warning_codes == [ErrorCode.POOL_NOT_STARTED]
        assert fake_sleep.intervals == [1.0] * 5
        assert backend.actions == []

    @pytest.mark.asyncio
    async def test_unknown_state_is_skipped(self, policy, fake_sleep):
        backend = FakePoolBackend({"dev-Shop": PoolState.UNKNOWN})
        result = await PoolService(backend, policy, fake_sleep).start_pool("dev-Shop")

        assert result.is_success
        assert result.warning_codes == [ErrorCode.POOL_STATE_UNKNOWN]
        assert backend.actions == []
        assert fake_sleep.intervals == []

    @pytest.mark.asyncio
    async def test_start_timeout(self, fake_sleep):
        backend = FakePoolBackend({"dev-Shop": PoolState.STOPPED}, stuck={"dev-Shop"})
        service = PoolService(backend, RetryPolicy(interval=0.5, max_attempts=4), fake_sleep)

        result = await service.start_pool("dev-Shop")

        assert result.timed_out
        assert fake_sleep.intervals == [0.5] * 4

    @pytest.mark.asyncio
    async def test_state_query_failure(self, policy, fake_sleep):
        backend = FakePoolBackend(failing={("get_state", "dev-Shop")})
        result = await PoolService(backend, policy, fake_sleep).start_pool("dev-Shop")

        assert result.status == OperationStatus.FAILED


class TestPoolTargets:
    """Test request-level pool handling"""

    @pytest.mark.asyncio
    async def test_both_pools_attempted_independently(self, policy, fake_sleep, deploy_params):
        request = DeploymentRequest.from_params(deploy_params)
        backend = FakePoolBackend(
            {"dev-Shop": PoolState.RUNNING, "dev-ShopAPI": PoolState.RUNNING},
            failing={("stop", "dev-Shop")}
        )

        results = await PoolService(backend, policy, fake_sleep).stop_pools(request)

        assert [r.pool_name for r in results] == ["dev-Shop", "dev-ShopAPI"]
        assert results[0].is_failed
        assert results[1].is_success
        assert backend.states["dev-ShopAPI"] == PoolState.STOPPED

    @pytest.mark.asyncio
    async def test_web_only_touches_web_pool(self, policy, fake_sleep, deploy_params):
        deploy_params["web_only"] = "true"
        request = DeploymentRequest.from_params(deploy_params)
        backend = FakePoolBackend({"dev-Shop": PoolState.RUNNING, "dev-ShopAPI": PoolState.RUNNING})

        await PoolService(backend, policy, fake_sleep).stop_pools(request)

        assert backend.actions == [("stop", "dev-Shop")]
