"""SteamCMD integration for uploading builds to Steam."""

import re
import shutil
from pathlib import Path
from typing import Any, Dict, Optional, Union
from ..config import SteamConfig
from ..errors import ConfigurationError, InputValidationError, SteamCmdMissingError, UploadFailedError
from ..streams import LogStream
from .process import ProcessRunner, SubprocessRunner


def clear_directory(directory: Path) -> None:
    """Force-delete everything inside directory, keeping the directory itself."""
    if not directory.is_dir():
        return
    for child in directory.iterdir():
        if child.is_dir() and not child.is_symlink():
            shutil.rmtree(child)
        else:
            child.unlink()


# ===============================================================
# SteamCMD Integration
# ===============================================================

class SteamUploader:
    """Handles uploading builds to Steam using SteamPipe."""

    def __init__(self, username: str, app_manifest_file: Union[str, Path], config: SteamConfig,
                 stream: LogStream, runner: Optional[ProcessRunner] = None):
        """Initialize Steam uploader.

        Args:
            username: Steam username of the build account
            app_manifest_file: Path to the app build VDF, relative to config.root_dir if not absolute
            config: Shared SteamConfig with the content builder location
            stream: LogStream instance for logging
            runner: ProcessRunner used to spawn steamcmd (default: SubprocessRunner)

        Raises:
            ConfigurationError: If username is empty

        Note:
            Login relies on the cached config.vdf extracted by SteamAuthTask.
        """
        if not username:
            raise ConfigurationError("Steam build username not set")

        self.username = username
        self.app_manifest_file = app_manifest_file
        self.config = config
        self.stream = stream
        self.runner: ProcessRunner = runner or SubprocessRunner()

    def build_arguments(self, manifest_path: Path) -> str:
        """Build the steamcmd argument string: login, run the build, then quit."""
        return f'+login "{self.username}" +run_app_build "{manifest_path}" +quit'

    def _extract_build_id(self, output: str) -> Optional[str]:
        """Extract build ID from SteamCMD output.

        SteamCMD reports the assigned build as "BuildID 12345".

        Args:
            output: SteamCMD output text

        Returns:
            Build ID if found, None otherwise
        """
        match = re.search(r'BuildID\s+(\d+)', output)
        if match:
            return match.group(1)
        return None

    def upload_build(self) -> Dict[str, Any]:
        """Upload the build described by the app manifest.

        Clears the steamcmd logs, runs steamcmd to completion and maps its
        exit code to success or failure. Nothing is retried.

        Returns:
            dict with keys: app_manifest, build_id, return_code, success, message

        Raises:
            InputValidationError: If the app manifest does not exist
            SteamCmdMissingError: If steamcmd is missing from the SDK or cannot be started
            UploadFailedError: If steamcmd exits with a non-zero code
        """
        app_manifest = self.config.resolve_file(self.app_manifest_file)
        if not app_manifest.is_file():
            raise InputValidationError(f"AppManifest file not found: {app_manifest}")

        try:
            # Stale logs from a previous run make failures hard to read
            logs_dir = self.config.logs_dir
            self.stream.log(f"Clearing steamcmd logs in {logs_dir}")
            clear_directory(logs_dir)

            steamcmd_exe = self.config.steamcmd_path
            if not steamcmd_exe.is_file():
                raise SteamCmdMissingError(
                    f"SteamCmd is missing from deployment. Check AutoSDK. Searched {steamcmd_exe}")

            self.stream.log(f"Starting SteamPipe upload of {app_manifest}...")

            # Log command (no credentials are passed on the command line)
            self.stream.log(f"Executing: {steamcmd_exe.name} {self.build_arguments(app_manifest)}")
            try:
                result = self.runner.run(
                    steamcmd_exe,
                    self.build_arguments(app_manifest),
                    steamcmd_exe.parent,
                    on_line=self.stream.log,
                )
            except OSError as e:
                # Typically a steamcmd that lost its exec bit or a broken SDK checkout
                raise SteamCmdMissingError(
                    f"SteamCmd could not be started. Check AutoSDK. Tried {steamcmd_exe}: {str(e)}") from e

            # Handle upload failure
            if result.return_code != 0:
                error_msg = (f"SteamPipe upload failed with code {result.return_code}. "
                             f"Check the steamcmd logs in {logs_dir}")
                raise UploadFailedError(error_msg, result.return_code)

            build_id = self._extract_build_id('\n'.join(result.output))
            if build_id:
                self.stream.log(f"Extracted Build ID: {build_id}")
            else:
                self.stream.log("Warning: Could not extract Build ID from output", level="warning")

            self.stream.log("SteamPipe upload completed successfully")

            return {
                'app_manifest': str(app_manifest),
                'build_id': build_id,
                'return_code': result.return_code,
                'success': True,
                'message': 'Build successfully uploaded to Steam'
            }

        except Exception as e:
            self.stream.log(f"Steam upload error: {str(e)}", level="error")
            raise
