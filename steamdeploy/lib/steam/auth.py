"""Materialize the steamcmd config.vdf credential bundle from the environment."""

import base64
import binascii
import os
from pathlib import Path
from typing import List, Mapping, Optional
from ..config import SteamConfig
from ..errors import ConfigurationError, ExtractionError
from ..streams import LogStream
from ..zip import extract_archive_bytes
from .context import TaskContext


DEFAULT_CONFIG_VDF_ENV_VAR = "SteamConfigVdf"


class SteamAuthTask:
    """Loads the build account's steamcmd config from a base64 encoded zip.

    The zip holds the config.vdf authenticated for the build account, so
    steamcmd can log in without an interactive Steam Guard prompt.
    """

    def __init__(self, config: SteamConfig, stream: LogStream,
                 config_vdf_env_var: str = DEFAULT_CONFIG_VDF_ENV_VAR,
                 environ: Optional[Mapping[str, str]] = None):
        """Initialize the auth task.

        Args:
            config: Shared SteamConfig with the content builder location
            stream: LogStream instance for logging
            config_vdf_env_var: Name of the variable holding the base64 zip
            environ: Mapping to read the variable from (default: os.environ)
        """
        self.config = config
        self.stream = stream
        self.config_vdf_env_var = config_vdf_env_var or DEFAULT_CONFIG_VDF_ENV_VAR
        self.environ = os.environ if environ is None else environ

    def execute(self, context: TaskContext) -> List[Path]:
        """Decode the bundle and extract it into the builder config directory.

        Returns:
            Paths of the extracted files

        Raises:
            ConfigurationError: If the environment variable is unset or empty
            ExtractionError: If decoding or extraction fails
        """
        self.stream.log("Creating SteamCmd config.vdf from environment")

        # Line-wrapped values (base64 tool output, MIME) are accepted
        encoded = "".join(self.environ.get(self.config_vdf_env_var, "").split())
        if not encoded:
            raise ConfigurationError(f"Environment variable {self.config_vdf_env_var} not set")

        try:
            data = base64.b64decode(encoded, validate=True)
        except (binascii.Error, ValueError) as e:
            self.stream.log(f"Error decoding {self.config_vdf_env_var}: {str(e)}", level="error")
            raise ExtractionError(f"Failed extracting steam config.vdf: {str(e)}") from e

        try:
            output_files = extract_archive_bytes(data, self.config.config_dir, self.stream)
        except Exception as e:
            self.stream.log(f"Error extracting config bundle: {str(e)}", level="error")
            raise ExtractionError(f"Failed extracting steam config.vdf: {str(e)}") from e

        for output_file in output_files:
            context.add_build_product(output_file)

        self.stream.log(f"Extracted {len(output_files)} file(s) to {self.config.config_dir}")
        return output_files
