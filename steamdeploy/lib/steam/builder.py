"""Steam VDF app build manifest builder for SteamPipe uploads."""

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Union
from ..config import SteamConfig
from ..errors import ConfigurationError, InputValidationError
from ..streams import LogStream
from . import vdf
from .context import TaskContext, find_tag_names_from_list


@dataclass
class AppManifestParams:
    """Parameters of a single-depot app build manifest."""

    app_id: int
    content_root_dir: Union[str, Path]
    depot1_local_dir: str
    release_branch: str
    manifest_output_file: str
    build_description: str = ""
    depot1_depot_path: str = ""
    build_output_dir: str = "BuildOutput"
    tag: str = ""


# ===============================================================
# VDF Manifest Builder
# ===============================================================

class SteamVDFBuilder:
    """Builds the SteamPipe app build VDF for one app and its first depot."""

    def __init__(self, params: AppManifestParams, config: SteamConfig, stream: LogStream):
        """Initialize VDF builder.

        Args:
            params: Manifest parameters
            config: Shared SteamConfig, used to resolve the output path
            stream: LogStream instance for logging
        """
        self.params = params
        self.config = config
        self.stream = stream

    @property
    def depot_id(self) -> int:
        # The first depot of an app is numbered one after the app itself
        return self.params.app_id + 1

    @property
    def depot_path(self) -> str:
        return self.params.depot1_depot_path or "."

    @property
    def local_path(self) -> str:
        # Same separator handling as ContentRoot, so Windows-style input is not escaped
        return self.params.depot1_local_dir.replace("\\", "/")

    def build_document(self) -> Dict[str, Any]:
        """Return the app build script as a KeyValues tree."""
        params = self.params
        return {
            "AppBuild": {
                "AppID": params.app_id,
                "Desc": params.build_description,
                "SetLive": params.release_branch,
                "ContentRoot": Path(params.content_root_dir),
                "BuildOutput": params.build_output_dir,
                "Depots": {
                    str(self.depot_id): {
                        "FileMapping": {
                            "LocalPath": f"{self.local_path}/*",
                            "DepotPath": self.depot_path,
                            "Recursive": "1",
                        }
                    }
                },
            }
        }

    def _validate(self) -> None:
        params = self.params

        if isinstance(params.app_id, bool) or not isinstance(params.app_id, int) or params.app_id <= 0:
            raise ConfigurationError(f"AppId must be a positive integer, got '{params.app_id}'")
        if not params.release_branch:
            raise ConfigurationError("ReleaseBranch parameter not set")
        if not params.manifest_output_file:
            raise ConfigurationError("ManifestOutputFile parameter not set")

        content_root = Path(params.content_root_dir)
        if not content_root.is_dir():
            raise InputValidationError(f"ContentRootDir must exist: {content_root}")

        local_dir = content_root / self.local_path
        if not params.depot1_local_dir or not local_dir.resolve().is_relative_to(content_root.resolve()):
            raise InputValidationError(
                f"Depot1LocalDir must be a subdirectory of ContentRootDir: {local_dir}")
        if not local_dir.is_dir():
            raise InputValidationError(
                f"Depot1LocalDir must be relative to ContentRootDir, and must exist: {local_dir}")

    def build_vdf(self, context: TaskContext) -> Path:
        """Validate the parameters and write the app build VDF.

        Registers the written file as a build product and adds it to every
        tag named in the tag list.

        Returns:
            Path of the written manifest

        Raises:
            ConfigurationError: If a required parameter is missing or invalid
            InputValidationError: If the content directories do not exist or the tag list is malformed
        """
        self.stream.log(f"Generating SteamPipe VDF for app {self.params.app_id}...")

        try:
            self._validate()
            tag_names = find_tag_names_from_list(self.params.tag)
        except (ConfigurationError, InputValidationError) as e:
            self.stream.log(f"Error generating VDF: {str(e)}", level="error")
            raise

        if not self.params.depot1_depot_path:
            self.stream.log("Depot1DepotPath parameter not set. Defaulting to root directory ('.')")

        document = self.build_document()
        manifest_file = self.config.resolve_file(self.params.manifest_output_file)
        vdf.dump(document, manifest_file)

        context.add_build_product(manifest_file, tag_names)

        self.stream.log(f"VDF file generated: {manifest_file}")
        return manifest_file
