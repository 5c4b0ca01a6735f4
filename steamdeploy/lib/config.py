"""Environment-derived configuration shared by the Steam build tasks."""

import os
import platform as platform_module
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Optional, Union
from .errors import ConfigurationError


# Location of the SteamPipe content builder inside an AutoSDK checkout
CONTENT_BUILDER_SUBDIR = "HostWin64/Win64/steam/tools/ContentBuilder/builder"

STEAMCMD_EXE_NAMES = {
    "Windows": "steamcmd.exe",
    "Linux": "steamcmd.sh",
    "Darwin": "steamcmd.sh",
}


@dataclass
class SteamConfig:
    """Configuration populated once at process start and handed to each task.

    Holds the AutoSDK root that every builder path is derived from, the
    directory relative task paths are resolved against, and the Valkey and
    webhook settings used for logging and notifications.
    """

    sdk_root: Path
    root_dir: Path = field(default_factory=Path.cwd)
    platform: str = field(default_factory=platform_module.system)
    valkey_host: str = "valkey"
    valkey_port: int = 6379
    valkey_password: Optional[str] = None
    valkey_use_ssl: bool = False
    slack_webhook: str = ""
    discord_webhook: str = ""

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None, root_dir: Optional[Union[str, Path]] = None) -> "SteamConfig":
        """Build the configuration from environment variables.

        Args:
            environ: Mapping to read from (defaults to os.environ)
            root_dir: Base directory for relative task paths (defaults to cwd)

        Raises:
            ConfigurationError: If UE_SDKS_ROOT is unset or empty
        """
        env = os.environ if environ is None else environ

        sdk_root = env.get("UE_SDKS_ROOT", "")
        if not sdk_root:
            raise ConfigurationError("Environment variable UE_SDKS_ROOT not set")

        try:
            valkey_port = int(env.get("VALKEY_PORT", 6379))
        except ValueError:
            raise ConfigurationError(f"VALKEY_PORT must be an integer, got '{env.get('VALKEY_PORT')}'")

        return cls(
            sdk_root=Path(sdk_root),
            root_dir=Path(root_dir) if root_dir else Path.cwd(),
            valkey_host=env.get("VALKEY_HOST", "valkey"),
            valkey_port=valkey_port,
            valkey_password=env.get("VALKEY_PASSWORD") or None,
            valkey_use_ssl=env.get("VALKEY_USE_SSL", "false").lower() == "true",
            slack_webhook=(env.get("SLACK_WEBHOOK_URL", "") or "").strip(),
            discord_webhook=(env.get("DISCORD_WEBHOOK_URL", "") or "").strip(),
        )

    @property
    def content_builder_dir(self) -> Path:
        return self.sdk_root / CONTENT_BUILDER_SUBDIR

    @property
    def config_dir(self) -> Path:
        return self.content_builder_dir / "config"

    @property
    def logs_dir(self) -> Path:
        return self.content_builder_dir / "logs"

    @property
    def steamcmd_path(self) -> Path:
        # Unknown platforms fall back to the Win64 layout the builder dir is named for
        exe_name = STEAMCMD_EXE_NAMES.get(self.platform, "steamcmd.exe")
        return self.content_builder_dir / exe_name

    def resolve_file(self, path: Union[str, Path]) -> Path:
        """Resolve a task file path, joining relative paths to root_dir."""
        candidate = Path(path)
        if candidate.is_absolute():
            return candidate
        return self.root_dir / candidate
