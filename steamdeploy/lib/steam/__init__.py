"""Steam module for SteamPipe credentials, app manifests and uploads."""

from .auth import SteamAuthTask
from .builder import AppManifestParams, SteamVDFBuilder
from .context import TaskContext
from .uploader import SteamUploader

__all__ = [
    'AppManifestParams',
    'SteamAuthTask',
    'SteamVDFBuilder',
    'SteamUploader',
    'TaskContext',
]
