"""Tests for StageService"""

from pathlib import Path

import pytest

from iis_deploy.api.exceptions import ArtifactNotFoundError, ExtractionError, StorageError
from iis_deploy.constants import ErrorCode
from iis_deploy.models.request import DeploymentRequest
from iis_deploy.services.stage_service import StageService
from iis_deploy.utils.async_utils import CommandOutput

from ..conftest import FakeReleaseSource

VERSION = "v24.03.10.1042"


@pytest.fixture
def request_(deploy_params):
    return DeploymentRequest.from_params(deploy_params)


@pytest.fixture
def release(make_archive):
    return make_archive("MyApp.24.03.10.1042.zip", {
        "web": {"index.html": "web", "Web.config": "<web/>", "Web.dev.config": "<dev/>"},
        "webapi": {"api.dll": "api", "Web.config": "<api/>"},
    })


class TestSelectArchive:
    """Test archive selection"""

    def test_exact_match(self, request_):
        downloaded = [Path("Other.24.03.10.1042.zip"), Path("MyApp.24.03.10.1042.zip")]
        assert StageService.select_archive(request_, downloaded).name == "MyApp.24.03.10.1042.zip"

    def test_match_ignores_case(self, request_):
        downloaded = [Path("myapp.24.03.10.1042.ZIP")]
        assert StageService.select_archive(request_, downloaded) == downloaded[0]

    def test_none_downloaded(self, request_):
        with pytest.raises(ArtifactNotFoundError, match="no zip archives"):
            StageService.select_archive(request_, [])

    def test_wrong_name(self, request_):
        with pytest.raises(ArtifactNotFoundError, match="Other.24.03.10.1042.zip") as exc_info:
            StageService.select_archive(request_, [Path("Other.24.03.10.1042.zip")])

        assert exc_info.value.error_code == ErrorCode.ARTIFACT_NOT_FOUND

    def test_ambiguous(self, request_):
        downloaded = [Path("a/MyApp.24.03.10.1042.zip"), Path("b/myapp.24.03.10.1042.zip")]
        with pytest.raises(ArtifactNotFoundError, match="ambiguous"):
            StageService.select_archive(request_, downloaded)


class TestStage:
    """Test download and extraction"""

    @pytest.mark.asyncio
    async def test_stage_extracts_components(self, config, request_, release, temp_dir):
        source = FakeReleaseSource({VERSION: [release]})
        service = StageService(config, source)

        result = await service.stage(request_)

        package = result.package
        assert result.is_success
        assert package.root == temp_dir / "deploy" / "temp-extract" / "shop"
        assert (package.web_path / "index.html").read_text() == "web"
        assert (package.api_path / "api.dll").read_text() == "api"
        assert package.component_path("webapi") == package.api_path
        assert source.downloads == [VERSION]

    @pytest.mark.asyncio
    async def test_working_directory_is_emptied_first(self, config, request_, release, temp_dir, make_tree):
        make_tree(temp_dir / "deploy", {"stale.zip": "old", "temp-extract/other/x.txt": "x"})
        service = StageService(config, FakeReleaseSource({VERSION: [release]}))

        await service.stage(request_)

        assert not (temp_dir / "deploy" / "stale.zip").exists()
        assert not (temp_dir / "deploy" / "temp-extract" / "other").exists()

    @pytest.mark.asyncio
    async def test_missing_api_component(self, config, request_, make_archive):
        archive = make_archive("MyApp.24.03.10.1042.zip", {"web": {"index.html": "web"}})
        service = StageService(config, FakeReleaseSource({VERSION: [archive]}))

        with pytest.raises(ExtractionError, match="webapi"):
            await service.stage(request_)

    @pytest.mark.asyncio
    async def test_web_only_ignores_api_component(self, config, deploy_params, make_archive):
        deploy_params["web_only"] = True
        archive = make_archive("MyApp.24.03.10.1042.zip", {"web": {"index.html": "web"}})
        service = StageService(config, FakeReleaseSource({VERSION: [archive]}))

        result = await service.stage(DeploymentRequest.from_params(deploy_params))

        assert result.package.api_path is None

    @pytest.mark.asyncio
    async def test_corrupt_archive(self, config, request_, temp_dir):
        archive = temp_dir / "releases" / "MyApp.24.03.10.1042.zip"
        archive.parent.mkdir(parents=True)
        archive.write_bytes(b"not a zip file")
        service = StageService(config, FakeReleaseSource({VERSION: [archive]}))

        with pytest.raises(ExtractionError):
            await service.stage(request_)

    @pytest.mark.asyncio
    async def test_download_failure_propagates(self, config, request_):
        service = StageService(config, FakeReleaseSource())

        with pytest.raises(StorageError):
            await service.stage(request_)

    def test_cleanup_removes_working_directory(self, config, temp_dir, make_tree):
        make_tree(temp_dir / "deploy", {"temp-extract/shop/web/index.html": "x"})
        service = StageService(config, FakeReleaseSource())

        result = service.cleanup()

        assert result.is_success
        assert not (temp_dir / "deploy").exists()

    def test_cleanup_failure_is_a_warning(self, config, temp_dir, make_tree, monkeypatch):
        from iis_deploy.services import stage_service as stage_module

        make_tree(temp_dir / "deploy", {"a.txt": "x"})

        def locked(path):
            raise OSError(32, "The process cannot access the file")

        monkeypatch.setattr(stage_module, "remove_path", locked)
        result = StageService(config, FakeReleaseSource()).cleanup()

        assert result.is_success
        assert result.warning_codes == [ErrorCode.CLEANUP_FAILED]


class TestWebConfigTransform:
    """Test the optional Web.config transformation"""

    @pytest.fixture
    def transform_config(self, config):
        config.transform.enabled = True
        config.transform.command = "ctt s:{source} t:{transform} d:{output}"
        return config

    @pytest.mark.asyncio
    async def test_transform_replaces_web_config(self, transform_config, request_, release):
        calls = []

        async def runner(args):
            calls.append(args)
            output = Path(args[3][2:])
            output.write_text("<transformed/>")
            return CommandOutput(0, "", "")

        service = StageService(transform_config, FakeReleaseSource({VERSION: [release]}), runner=runner)
        result = await service.stage(request_)

        web = result.package.web_path
        assert (web / "Web.config").read_text() == "<transformed/>"
        assert not (web / "Web.transformed.config").exists()
        assert calls[0][0] == "ctt"
        assert calls[0][2] == f"t:{web / 'Web.dev.config'}"
        # The API component has no Web.dev.config
        assert result.warning_codes == [ErrorCode.TRANSFORM_SKIPPED]

    @pytest.mark.asyncio
    async def test_transform_failure(self, transform_config, request_, release):
        async def runner(args):
            return CommandOutput(1, "", "bad transform")

        service = StageService(transform_config, FakeReleaseSource({VERSION: [release]}), runner=runner)

        with pytest.raises(ExtractionError, match="bad transform"):
            await service.stage(request_)

    @pytest.mark.asyncio
    async def test_missing_web_config(self, transform_config, request_, make_archive):
        archive = make_archive("MyApp.24.03.10.1042.zip", {
            "web": {"index.html": "web"},
            "webapi": {"api.dll": "api"},
        })
        service = StageService(transform_config, FakeReleaseSource({VERSION: [archive]}))

        with pytest.raises(ExtractionError, match="Web.config"):
            await service.stage(request_)
