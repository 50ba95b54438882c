"""
Pytest configuration and fixtures for iis-deploy tests.
Provides fake pool backends and release sources so no IIS, PowerShell or
gh binary is needed.
"""

import shutil
import zipfile
from datetime import datetime, timedelta
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Optional, Tuple

import pytest

from iis_deploy.api.exceptions import PoolControlError, StorageError
from iis_deploy.models.config import Config, PathsConfig, BackupConfig, PoolConfig
from iis_deploy.models.pool import PoolState
from iis_deploy.pools.base import PoolBackend
from iis_deploy.storage.base import ReleaseSource
from iis_deploy.utils.output import set_quiet


class FakePoolBackend(PoolBackend):
    """In-memory pool backend

    Stop and start requests take effect immediately unless the pool is
    listed as stuck. Actions listed in ``failing`` raise PoolControlError.
    """

    def __init__(self,
                 states: Optional[Dict[str, PoolState]] = None,
                 stuck: Iterable[str] = (),
                 failing: Iterable[Tuple[str, str]] = ()):
        super().__init__()
        self.states = dict(states or {})
        self.stuck = set(stuck)
        self.failing = set(failing)
        self.calls: List[Tuple[str, str]] = []

    def _record(self, action: str, name: str) -> None:
        self.calls.append((action, name))
        if (action, name) in self.failing:
            raise PoolControlError(name, f"{action} failed: access denied")

    async def get_state(self, name: str) -> Optional[PoolState]:
        self._record("get_state", name)
        return self.states.get(name)

    async def stop(self, name: str) -> None:
        self._record("stop", name)
        if name not in self.stuck:
            self.states[name] = PoolState.STOPPED

    async def start(self, name: str) -> None:
        self._record("start", name)
        if name not in self.stuck:
            self.states[name] = PoolState.RUNNING

    @property
    def actions(self) -> List[Tuple[str, str]]:
        """Recorded stop/start requests, without state queries"""
        return [call for call in self.calls if call[0] != "get_state"]


class FakeReleaseSource(ReleaseSource):
    """Release source serving prepared archives per tag"""

    def __init__(self, releases: Optional[Dict[str, List[Path]]] = None):
        super().__init__()
        self.releases = dict(releases or {})
        self.downloads: List[str] = []
        self.published: List[Tuple[str, Path, str, str]] = []

    async def download(self, tag: str, dest_dir: Path, pattern: str = "*.zip") -> List[Path]:
        self.downloads.append(tag)
        if tag not in self.releases:
            raise StorageError(f"release not found: {tag}")

        downloaded = []
        for archive in self.releases[tag]:
            target = dest_dir / archive.name
            shutil.copy2(archive, target)
            downloaded.append(target)
        return downloaded

    async def publish(self, tag: str, archive: Path, title: str, notes: str = "") -> Optional[str]:
        self.published.append((tag, archive, title, notes))
        return f"fake://{tag}"

    def release_url(self, tag: str) -> Optional[str]:
        return f"fake://{tag}"


class RecordingSleep:
    """Async sleep replacement that records the requested intervals"""

    def __init__(self):
        self.intervals: List[float] = []

    async def __call__(self, seconds: float) -> None:
        self.intervals.append(seconds)


class SteppingClock:
    """Clock returning a fixed start time, advancing one minute per call"""

    def __init__(self, start: datetime = datetime(2024, 3, 10, 14, 30, 0),
                 step: timedelta = timedelta(minutes=1)):
        self.current = start
        self.step = step

    def __call__(self) -> datetime:
        now = self.current
        self.current += self.step
        return now


def write_tree(root: Path, files: Dict[str, str]) -> Path:
    """Create files (relative path -> content) below root"""
    root.mkdir(parents=True, exist_ok=True)
    for relative, content in files.items():
        path = root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
    return root


@pytest.fixture(autouse=True)
def quiet_console():
    """Keep step messages out of the test output"""
    set_quiet(True)
    yield
    set_quiet(False)


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch):
    """Prevent the host environment from leaking into configuration lookup"""
    for name in ("IIS_DEPLOY_CONFIG", "IIS_DEPLOY_WWWROOT", "IIS_DEPLOY_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def temp_dir(tmp_path) -> Path:
    """Per-test working directory"""
    return tmp_path


@pytest.fixture
def wwwroot(temp_dir) -> Path:
    path = temp_dir / "wwwroot"
    path.mkdir()
    return path


@pytest.fixture
def config(temp_dir, wwwroot) -> Config:
    """Configuration rooted in the temporary directory"""
    return Config(
        paths=PathsConfig(wwwroot_base=str(wwwroot), deploy_dir=str(temp_dir / "deploy")),
        backup=BackupConfig(retention_count=3),
        pools=PoolConfig(poll_interval=1.0, max_attempts=30),
    )


@pytest.fixture
def pool_backend() -> FakePoolBackend:
    return FakePoolBackend()


@pytest.fixture
def fake_sleep() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture
def clock() -> SteppingClock:
    return SteppingClock()


@pytest.fixture
def make_tree() -> Callable[[Path, Dict[str, str]], Path]:
    return write_tree


@pytest.fixture
def make_archive(temp_dir) -> Callable[..., Path]:
    """Factory building release archives from {component: {path: content}}"""

    def _make(name: str, components: Dict[str, Dict[str, str]]) -> Path:
        archive = temp_dir / "releases" / name
        archive.parent.mkdir(parents=True, exist_ok=True)
        with zipfile.ZipFile(archive, "w") as zf:
            for component, files in components.items():
                for relative, content in files.items():
                    zf.writestr(f"{component}/{relative}", content)
        return archive

    return _make


@pytest.fixture
def deploy_params() -> Dict[str, str]:
    """A complete web + API parameter document"""
    return {
        "app_name": "MyApp",
        "web_name": "web",
        "api_name": "webapi",
        "env_name": "dev",
        "ver_number": "v24.03.10.1042",
        "dir_name": "shop",
        "app_pool": "Shop",
        "skip_items": "logs,web.config",
    }
