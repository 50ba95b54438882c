"""Release source factory"""

from typing import Dict, Type

from .base import ReleaseSource
from .filesystem import FilesystemSource
from .github import GitHubSource
from ..constants import SourceType
from ..models.config import SourceConfig


class ReleaseSourceFactory:
    """Factory for creating release source instances"""

    # Registry of release sources
    _sources: Dict[SourceType, Type[ReleaseSource]] = {
        SourceType.FILESYSTEM: FilesystemSource,
        SourceType.GITHUB: GitHubSource,
    }

    @classmethod
    def create_from_config(cls, source: SourceConfig) -> ReleaseSource:
        """Create release source from configuration

        Args:
            source: Source configuration

        Returns:
            Release source instance

        Raises:
            ValueError: If source type is not supported
        """
        source_type = source.source_type

        if source_type not in cls._sources:
            raise ValueError(f"Unsupported source type: {source_type.value}")

        if source_type == SourceType.FILESYSTEM:
            config = {"path": source.path}
        else:
            config = {
                "repository": source.repository,
                "token": source.token,
                "token_env": source.token_env
            }

        return cls._sources[source_type](config)

    @classmethod
    def register_source(cls, source_type: SourceType, source_class: Type[ReleaseSource]):
        """Register a new release source type

        Args:
            source_type: Source type enum
            source_class: Source class
        """
        cls._sources[source_type] = source_class

    @classmethod
    def get_supported_types(cls) -> list[str]:
        return [st.value for st in cls._sources.keys()]
