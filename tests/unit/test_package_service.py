"""Tests for PackageService and the Packer API"""

import zipfile
from datetime import datetime

import pytest

from iis_deploy.api.exceptions import PackError, StorageError
from iis_deploy.api.packer import Packer
from iis_deploy.models.config import Config
from iis_deploy.services.package_service import PackageService
from iis_deploy.utils.file_utils import calculate_file_checksum

from ..conftest import FakeReleaseSource


@pytest.fixture
def publish_output(temp_dir, make_tree):
    web = make_tree(temp_dir / "publish" / "web", {
        "index.html": "web",
        "web.config": "<web/>",
        "bin/app.dll": "dll",
    })
    api = make_tree(temp_dir / "publish" / "api", {"api.dll": "api", "Web.config": "<api/>"})
    return web, api


class TestPack:
    """Test archive creation"""

    def test_archive_layout(self, temp_dir, publish_output):
        web, api = publish_output
        out_dir = temp_dir / "dist"

        result = PackageService().pack(
            "MyApp", "v24.03.10.1042", [("web", web), ("webapi", api)], out_dir
        )

        assert result.is_success
        assert result.package_path == out_dir / "MyApp.24.03.10.1042.zip"
        assert result.components == ["web", "webapi"]
        with zipfile.ZipFile(result.package_path) as zf:
            names = set(zf.namelist())
            assert "web/index.html" in names
            assert "web/bin/app.dll" in names
            assert "webapi/api.dll" in names
            assert zf.read("web/version.txt").decode() == "24.03.10.1042"
            assert zf.read("webapi/version.txt").decode() == "24.03.10.1042"

    def test_web_config_removed_by_default(self, temp_dir, publish_output):
        web, api = publish_output
        result = PackageService().pack("MyApp", "24.03.10.1042", [("web", web), ("webapi", api)], temp_dir)

        with zipfile.ZipFile(result.package_path) as zf:
            lowered = {n.lower() for n in zf.namelist()}
        assert "web/web.config" not in lowered
        assert "webapi/web.config" not in lowered
        # Publish output itself is untouched
        assert (web / "web.config").exists()

    def test_keep_web_config(self, temp_dir, publish_output):
        web, _ = publish_output
        result = PackageService().pack("MyApp", "1.0", [("web", web)], temp_dir, keep_web_config=True)

        with zipfile.ZipFile(result.package_path) as zf:
            assert "web/web.config" in zf.namelist()

    def test_temp_dir_removed(self, temp_dir, publish_output):
        web, api = publish_output
        PackageService().pack("MyApp", "1.0", [("web", web)], temp_dir / "dist")

        assert not (temp_dir / "dist" / "_package_temp").exists()

    def test_checksum_and_size(self, temp_dir, publish_output):
        web, _ = publish_output
        result = PackageService().pack("MyApp", "1.0", [("web", web)], temp_dir)

        assert result.checksum == calculate_file_checksum(result.package_path)
        assert result.package_size == result.package_path.stat().st_size

    def test_missing_publish_output(self, temp_dir):
        with pytest.raises(PackError, match="not found"):
            PackageService().pack("MyApp", "1.0", [("web", temp_dir / "nope")], temp_dir)

    def test_no_components(self, temp_dir):
        with pytest.raises(PackError):
            PackageService().pack("MyApp", "1.0", [], temp_dir)


class TestPublish:
    """Test release publishing"""

    @pytest.mark.asyncio
    async def test_publish_uses_tag_and_title(self, temp_dir):
        archive = temp_dir / "MyApp.24.03.10.1042.zip"
        archive.write_bytes(b"zip")
        source = FakeReleaseSource()

        result = await PackageService(source).publish("MyApp", "24.03.10.1042", archive, "notes")

        assert source.published == [
            ("v24.03.10.1042", archive, "MyApp Package v24.03.10.1042", "notes")
        ]
        assert result.release_url == "fake://v24.03.10.1042"

    @pytest.mark.asyncio
    async def test_publish_without_source(self, temp_dir):
        with pytest.raises(PackError):
            await PackageService().publish("MyApp", "1.0", temp_dir / "a.zip")

    @pytest.mark.asyncio
    async def test_publish_missing_archive(self, temp_dir):
        with pytest.raises(StorageError):
            await PackageService(FakeReleaseSource()).publish("MyApp", "1.0", temp_dir / "a.zip")


class TestPacker:
    """Test the Packer API"""

    def test_version(self):
        assert Packer.version(42, datetime(2024, 3, 10)) == "24.03.10.1042"

    def test_pack_web_only(self, temp_dir, publish_output):
        web, _ = publish_output
        result = Packer(Config()).pack("MyApp", "1.0", "web", web, out_dir=temp_dir / "dist")

        assert result.components == ["web"]
        assert result.package_path.exists()

    def test_publish_through_injected_source(self, temp_dir):
        archive = temp_dir / "MyApp.1.0.zip"
        archive.write_bytes(b"zip")
        source = FakeReleaseSource()

        result = Packer(Config(), source).publish("MyApp", "1.0", archive)

        assert result.is_success
        assert source.published[0][0] == "v1.0"
