"""Configuration management service"""

import logging
import os
import shutil
from pathlib import Path
from typing import Optional, Union

import yaml

from ..api.exceptions import ConfigError
from ..models.config import Config
from ..models.result import Result, OperationStatus
from ..utils.output import console
from ..constants import (
    ErrorCode,
    PROJECT_CONFIG_FILE,
    ENV_CONFIG_PATH,
    ENV_LOG_LEVEL,
    ENV_WWWROOT,
    EMOJI_SUCCESS,
)

logger = logging.getLogger(__name__)


class ConfigService:
    """Service for locating, loading and writing configuration"""

    def __init__(self, config_path: Optional[Union[str, Path]] = None):
        """Initialize config service

        Args:
            config_path: Explicit configuration file (``--config``)
        """
        self.config_path = self.find_config_path(config_path)
        self._config: Optional[Config] = None

    @staticmethod
    def find_config_path(explicit: Optional[Union[str, Path]] = None) -> Optional[Path]:
        """Locate the configuration file

        Lookup order: explicit path, ``IIS_DEPLOY_CONFIG``, ``./.iis-deploy.yaml``.

        Returns:
            Path to use, or None to run on defaults
        """
        if explicit:
            return Path(explicit)

        env_path = os.environ.get(ENV_CONFIG_PATH)
        if env_path:
            return Path(env_path)

        local = Path.cwd() / PROJECT_CONFIG_FILE
        if local.exists():
            return local

        return None

    @property
    def config(self) -> Config:
        """Get current configuration (lazy load)"""
        if self._config is None:
            self.load_config()
        return self._config

    def load_config(self) -> Config:
        """Load configuration from file, falling back to defaults

        Returns:
            Loaded configuration

        Raises:
            ConfigError: If the file is missing, unreadable or malformed
        """
        if self.config_path is None:
            logger.debug("No configuration file found, using defaults")
            data = {}
        else:
            if not self.config_path.exists():
                raise ConfigError(f"Configuration file not found: {self.config_path}")

            with open(self.config_path, 'r', encoding='utf-8') as f:
                content = f.read()

            content = os.path.expandvars(content)

            try:
                data = yaml.safe_load(content) or {}
            except yaml.YAMLError as e:
                raise ConfigError(f"Invalid YAML in {self.config_path}: {e}") from e

            if not isinstance(data, dict):
                raise ConfigError(f"Configuration must be a mapping: {self.config_path}")

            logger.debug("Loaded configuration from %s", self.config_path)

        try:
            config = Config.from_dict(data)
        except (TypeError, ValueError) as e:
            raise ConfigError(f"Invalid configuration: {e}") from e

        self._apply_env_overrides(config)
        self._config = config
        return config

    @staticmethod
    def _apply_env_overrides(config: Config) -> None:
        wwwroot = os.environ.get(ENV_WWWROOT)
        if wwwroot:
            config.paths.wwwroot_base = wwwroot

        level = os.environ.get(ENV_LOG_LEVEL)
        if level:
            config.logging["level"] = level.upper()

    def save_config(self, config: Optional[Config] = None,
                    path: Optional[Path] = None) -> Path:
        """Save configuration to file

        Args:
            config: Configuration to save (uses current if not provided)
            path: Target file (uses the located file or ./.iis-deploy.yaml)

        Returns:
            Path written
        """
        if config:
            self._config = config

        if not self._config:
            raise ValueError("No configuration to save")

        target = path or self.config_path or Path.cwd() / PROJECT_CONFIG_FILE

        if target.exists():
            backup_path = target.with_suffix(target.suffix + '.bak')
            shutil.copy2(target, backup_path)

        target.parent.mkdir(parents=True, exist_ok=True)
        with open(target, 'w', encoding='utf-8') as f:
            yaml.dump(self._config.to_dict(), f, default_flow_style=False, sort_keys=False)

        self.config_path = target
        console.print(f"{EMOJI_SUCCESS} Configuration saved to {target}")
        return target

    def init_config(self, path: Optional[Path] = None, force: bool = False) -> Result:
        """Write a default configuration file

        Args:
            path: Target file (default ./.iis-deploy.yaml)
            force: Overwrite an existing file

        Returns:
            Result of the operation
        """
        result = Result()
        target = path or Path.cwd() / PROJECT_CONFIG_FILE

        if target.exists() and not force:
            result.add_error(
                ErrorCode.CONFIG_FORMAT_ERROR,
                f"Configuration already exists: {target} (use --force to overwrite)"
            )
            result.complete(OperationStatus.FAILED)
            return result

        self.save_config(Config(), target)
        result.message = f"Created {target}"
        result.complete(OperationStatus.SUCCESS)
        return result
