"""Steam build automation tasks: credentials, app manifests and SteamPipe uploads."""

__version__ = "0.1.0"
