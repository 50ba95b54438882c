"""Packer API for build-side operations"""

from datetime import datetime
from pathlib import Path
from typing import List, Optional, Union

from ..models.config import Config
from ..models.result import PackResult
from ..services.config_service import ConfigService
from ..services.package_service import PackageService
from ..storage.base import ReleaseSource
from ..storage.factory import ReleaseSourceFactory
from ..utils.async_utils import run_async
from ..utils.version_utils import generate_build_version, stamp_assembly_versions


class Packer:
    """Packer class for versioning, packaging and publishing"""

    def __init__(self,
                 config: Optional[Config] = None,
                 source: Optional[ReleaseSource] = None):
        """
        Initialize packer

        Args:
            config: Configuration (defaults loaded if omitted)
            source: Release source for publishing (from config if omitted)
        """
        self.config = config or ConfigService().load_config()
        self._source = source
        self.package_service = PackageService(source)

    @property
    def source(self) -> ReleaseSource:
        if self._source is None:
            self._source = ReleaseSourceFactory.create_from_config(self.config.source)
        return self._source

    @staticmethod
    def version(run_number: int, now: Optional[datetime] = None) -> str:
        """Generate the build version for a CI run"""
        return generate_build_version(run_number, now)

    @staticmethod
    def stamp(root: Union[str, Path], version: str) -> List[Path]:
        """Stamp a version into every AssemblyInfo.cs below root"""
        return stamp_assembly_versions(Path(root), version)

    def pack(self,
             app_name: str,
             version: str,
             web_name: str,
             web_source: Union[str, Path],
             api_name: Optional[str] = None,
             api_source: Union[str, Path, None] = None,
             out_dir: Union[str, Path] = ".",
             keep_web_config: bool = False) -> PackResult:
        """
        Package publish output into ``<app>.<version>.zip``

        Args:
            app_name: Application name
            version: Build version
            web_name: Folder name of the web component inside the package
            web_source: Web publish output directory
            api_name: Folder name of the API component (omit for web only)
            api_source: API publish output directory
            out_dir: Directory receiving the archive
            keep_web_config: Ship web.config inside the package

        Returns:
            PackResult

        Raises:
            PackError: If packaging fails
        """
        components = [(web_name, Path(web_source))]
        if api_name:
            components.append((api_name, Path(api_source or api_name)))

        return self.package_service.pack(
            app_name, version, components, Path(out_dir), keep_web_config
        )

    def publish(self,
                app_name: str,
                version: str,
                archive: Union[str, Path],
                notes: str = "") -> PackResult:
        """
        Publish a package as release ``v<version>``

        Raises:
            StorageError: If publishing fails
        """
        self.package_service.source = self.source
        return run_async(self.package_service.publish(app_name, version, Path(archive), notes))


def pack(app_name: str,
         version: str,
         web_name: str,
         web_source: Union[str, Path],
         **options) -> PackResult:
    """
    Convenience pack function

    Args:
        app_name: Application name
        version: Build version
        web_name: Web component folder name
        web_source: Web publish output directory
        **options: api_name, api_source, out_dir, keep_web_config

    Returns:
        PackResult
    """
    return Packer(Config()).pack(app_name, version, web_name, web_source, **options)
