"""Tests for release sources"""

import pytest

from iis_deploy.api.exceptions import StorageError
from iis_deploy.models.config import SourceConfig
from iis_deploy.storage import github as github_module
from iis_deploy.storage.factory import ReleaseSourceFactory
from iis_deploy.storage.filesystem import FilesystemSource
from iis_deploy.storage.github import GitHubSource
from iis_deploy.utils.async_utils import CommandOutput


class TestFilesystemSource:
    """Test directory-backed releases"""

    @pytest.fixture
    def releases(self, temp_dir, make_tree):
        return make_tree(temp_dir / "releases", {
            "v1.0/MyApp.1.0.zip": "zip",
            "v1.0/notes.txt": "notes",
        })

    @pytest.mark.asyncio
    async def test_download_matching_assets(self, releases, temp_dir):
        dest = temp_dir / "dest"
        dest.mkdir()

        async with FilesystemSource({"path": str(releases)}) as source:
            downloaded = await source.download("v1.0", dest)

        assert downloaded == [dest / "MyApp.1.0.zip"]
        assert (dest / "MyApp.1.0.zip").read_text() == "zip"

    @pytest.mark.asyncio
    async def test_unknown_release(self, releases, temp_dir):
        with pytest.raises(StorageError, match="not found"):
            await FilesystemSource({"path": str(releases)}).download("v9.9", temp_dir)

    @pytest.mark.asyncio
    async def test_publish(self, releases, temp_dir):
        archive = temp_dir / "MyApp.2.0.zip"
        archive.write_bytes(b"new")
        source = FilesystemSource({"path": str(releases)})

        location = await source.publish("v2.0", archive, "MyApp Package v2.0", "first release")

        assert location == str(releases / "v2.0")
        assert (releases / "v2.0" / "MyApp.2.0.zip").read_bytes() == b"new"
        assert "first release" in (releases / "v2.0" / "RELEASE_NOTES.md").read_text()

    def test_requires_path(self):
        with pytest.raises(ValueError):
            FilesystemSource({})


class TestGitHubSource:
    """Test gh CLI invocation"""

    @pytest.fixture
    def commands(self, monkeypatch):
        calls = []

        async def fake_run(args, cwd=None, env=None):
            calls.append((list(args), env))
            return CommandOutput(0, "https://github.com/acme/shop/releases/tag/v1.0", "")

        monkeypatch.setattr(github_module, "run_command", fake_run)
        return calls

    @pytest.mark.asyncio
    async def test_download_arguments(self, commands, temp_dir):
        (temp_dir / "MyApp.1.0.zip").write_bytes(b"zip")
        source = GitHubSource({"repository": "acme/shop", "token": "secret"})

        downloaded = await source.download("v1.0", temp_dir)

        args, env = commands[0]
        assert args == [
            "gh", "release", "download", "v1.0", "--repo", "acme/shop",
            "--pattern", "*.zip", "--dir", str(temp_dir), "--clobber"
        ]
        assert env == {"GH_TOKEN": "secret"}
        assert downloaded == [temp_dir / "MyApp.1.0.zip"]

    @pytest.mark.asyncio
    async def test_token_from_environment(self, commands, temp_dir, monkeypatch):
        monkeypatch.setenv("DEPLOY_TOKEN", "from-env")
        source = GitHubSource({"token_env": "DEPLOY_TOKEN"})

        await source.download("v1.0", temp_dir)

        args, env = commands[0]
        assert "--repo" not in args
        assert env == {"GH_TOKEN": "from-env"}

    @pytest.mark.asyncio
    async def test_publish_returns_url(self, commands, temp_dir):
        archive = temp_dir / "MyApp.1.0.zip"
        archive.write_bytes(b"zip")

        url = await GitHubSource({"repository": "acme/shop"}).publish(
            "v1.0", archive, "MyApp Package v1.0"
        )

        args, _ = commands[0]
        assert args[:5] == ["gh", "release", "create", "v1.0", str(archive)]
        assert args[-2:] == ["--notes", "MyApp Package v1.0"]
        assert url == "https://github.com/acme/shop/releases/tag/v1.0"

    @pytest.mark.asyncio
    async def test_failure_raises_storage_error(self, monkeypatch, temp_dir):
        async def failing(args, cwd=None, env=None):
            return CommandOutput(1, "", "release not found")

        monkeypatch.setattr(github_module, "run_command", failing)

        with pytest.raises(StorageError, match="release not found"):
            await GitHubSource({}).download("v1.0", temp_dir)

    @pytest.mark.asyncio
    async def test_missing_gh(self, monkeypatch, temp_dir):
        async def missing(args, cwd=None, env=None):
            raise FileNotFoundError(args[0])

        monkeypatch.setattr(github_module, "run_command", missing)

        with pytest.raises(StorageError, match="GitHub CLI not found"):
            await GitHubSource({}).download("v1.0", temp_dir)

    def test_release_url(self):
        assert GitHubSource({"repository": "acme/shop"}).release_url("v1.0") == \
            "https://github.com/acme/shop/releases/tag/v1.0"
        assert GitHubSource({}).release_url("v1.0") is None


class TestReleaseSourceFactory:
    """Test source creation from configuration"""

    def test_filesystem(self, temp_dir):
        source = ReleaseSourceFactory.create_from_config(
            SourceConfig(type="filesystem", path=str(temp_dir))
        )
        assert isinstance(source, FilesystemSource)
        assert source.base_path == temp_dir

    def test_github(self):
        source = ReleaseSourceFactory.create_from_config(SourceConfig(repository="acme/shop"))
        assert isinstance(source, GitHubSource)
        assert source.repository == "acme/shop"

    def test_supported_types(self):
        assert set(ReleaseSourceFactory.get_supported_types()) >= {"filesystem", "github"}

    def test_register_source(self, monkeypatch):
        from iis_deploy.constants import SourceType
        from ..conftest import FakeReleaseSource

        monkeypatch.setattr(ReleaseSourceFactory, "_sources", dict(ReleaseSourceFactory._sources))
        ReleaseSourceFactory.register_source(SourceType.GITHUB, FakeReleaseSource)

        assert isinstance(ReleaseSourceFactory.create_from_config(SourceConfig()), FakeReleaseSource)
