"""Tests for ConfigService"""

import pytest
import yaml

from iis_deploy.api.exceptions import ConfigError
from iis_deploy.services.config_service import ConfigService

CONFIG_YAML = """
version: "1.0"
paths:
  wwwroot_base: ${SITES_ROOT}/wwwroot
  deploy_dir: C:\\deploy
backup:
  retention_count: 5
pools:
  backend: appcmd
  poll_interval: 0.5
  max_attempts: 10
source:
  type: github
  repository: acme/shop
"""


class TestConfigLookup:
    """Test configuration file discovery"""

    def test_explicit_path_wins(self, temp_dir, monkeypatch):
        monkeypatch.setenv("IIS_DEPLOY_CONFIG", str(temp_dir / "env.yaml"))
        assert ConfigService.find_config_path(temp_dir / "cli.yaml") == temp_dir / "cli.yaml"

    def test_environment_variable(self, temp_dir, monkeypatch):
        monkeypatch.setenv("IIS_DEPLOY_CONFIG", str(temp_dir / "env.yaml"))
        assert ConfigService.find_config_path() == temp_dir / "env.yaml"

    def test_local_file(self, temp_dir, monkeypatch):
        monkeypatch.chdir(temp_dir)
        (temp_dir / ".iis-deploy.yaml").write_text("version: '1.0'\n")
        assert ConfigService.find_config_path() == temp_dir / ".iis-deploy.yaml"

    def test_defaults_when_nothing_found(self, temp_dir, monkeypatch):
        monkeypatch.chdir(temp_dir)
        service = ConfigService()

        assert service.config_path is None
        assert service.load_config().backup.retention_count == 3


class TestLoadConfig:
    """Test configuration parsing"""

    def test_load_yaml(self, temp_dir, monkeypatch):
        monkeypatch.setenv("SITES_ROOT", "D:")
        path = temp_dir / "deploy.yaml"
        path.write_text(CONFIG_YAML)

        config = ConfigService(path).load_config()

        assert config.paths.wwwroot_base == "D:/wwwroot"
        assert config.backup.retention_count == 5
        assert config.pools.backend == "appcmd"
        assert config.pools.retry_policy.interval == 0.5
        assert config.source.repository == "acme/shop"

    def test_wwwroot_override(self, temp_dir, monkeypatch):
        path = temp_dir / "deploy.yaml"
        path.write_text(CONFIG_YAML)
        monkeypatch.setenv("IIS_DEPLOY_WWWROOT", "E:\\sites")
        monkeypatch.setenv("IIS_DEPLOY_LOG_LEVEL", "debug")

        config = ConfigService(path).load_config()

        assert config.paths.wwwroot_base == "E:\\sites"
        assert config.logging["level"] == "DEBUG"

    def test_missing_file(self, temp_dir):
        with pytest.raises(ConfigError, match="not found"):
            ConfigService(temp_dir / "missing.yaml").load_config()

    def test_invalid_yaml(self, temp_dir):
        path = temp_dir / "bad.yaml"
        path.write_text("paths: [unclosed\n")

        with pytest.raises(ConfigError, match="Invalid YAML"):
            ConfigService(path).load_config()

    def test_not_a_mapping(self, temp_dir):
        path = temp_dir / "list.yaml"
        path.write_text("- a\n- b\n")

        with pytest.raises(ConfigError, match="mapping"):
            ConfigService(path).load_config()

    @pytest.mark.parametrize("content", [
        "backup:\n  retention_count: 0\n",
        "pools:\n  backend: wmi\n",
        "source:\n  type: filesystem\n",
        "backup:\n  keep: 3\n",
    ])
    def test_invalid_values(self, temp_dir, content):
        path = temp_dir / "invalid.yaml"
        path.write_text(content)

        with pytest.raises(ConfigError, match="Invalid configuration"):
            ConfigService(path).load_config()


class TestInitConfig:
    """Test writing default configuration"""

    def test_init_writes_defaults(self, temp_dir):
        path = temp_dir / ".iis-deploy.yaml"
        result = ConfigService().init_config(path)

        assert result.is_success
        data = yaml.safe_load(path.read_text())
        assert data["backup"]["retention_count"] == 3
        assert data["pools"]["backend"] == "powershell"

    def test_init_refuses_to_overwrite(self, temp_dir):
        path = temp_dir / ".iis-deploy.yaml"
        path.write_text("version: '1.0'\n")

        result = ConfigService().init_config(path)

        assert result.is_failed
        assert path.read_text() == "version: '1.0'\n"

    def test_init_force_keeps_backup(self, temp_dir):
        path = temp_dir / ".iis-deploy.yaml"
        path.write_text("version: '0.9'\n")

        result = ConfigService().init_config(path, force=True)

        assert result.is_success
        assert (temp_dir / ".iis-deploy.yaml.bak").read_text() == "version: '0.9'\n"
