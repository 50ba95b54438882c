# iis_deploy/storage/__init__.py
"""Release sources for iis-deploy"""

from .base import ReleaseSource
from .filesystem import FilesystemSource
from .github import GitHubSource
from .factory import ReleaseSourceFactory

__all__ = [
    'ReleaseSource',
    'FilesystemSource',
    'GitHubSource',
    'ReleaseSourceFactory',
]
