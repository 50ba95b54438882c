"""CLI context object"""

import logging
from pathlib import Path
from typing import Optional, Union

from ..models.config import Config
from ..services.config_service import ConfigService


class Context:
    """CLI context object with lazy configuration loading

    The configuration is only read when a command that needs it runs, so
    commands like ``version`` work without a configuration file.
    """

    def __init__(self):
        """Initialize CLI context"""
        self.verbose: bool = False
        self.debug: bool = False
        self.quiet: bool = False
        self._config: Optional[Config] = None
        self._config_service: Optional[ConfigService] = None

    def load_config(self, config_path: Optional[Union[str, Path]] = None) -> Config:
        """Load (once) and return the configuration

        Args:
            config_path: Explicit configuration file

        Raises:
            ConfigError: If the configuration cannot be loaded
        """
        if self._config is None:
            self._config_service = ConfigService(config_path)
            self._config = self._config_service.load_config()

            # -v/-d on the command line take precedence over the file
            level = logging.getLevelName(str(self._config.logging.get("level", "")).upper())
            if isinstance(level, int) and not (self.verbose or self.debug or self.quiet):
                logging.getLogger().setLevel(level)
        return self._config

    @property
    def config_service(self) -> ConfigService:
        if self._config_service is None:
            self._config_service = ConfigService()
        return self._config_service
