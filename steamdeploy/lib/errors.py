"""Error types raised by the Steam build tasks."""

from enum import IntEnum
from typing import Optional


class ExitCode(IntEnum):
    """Process exit codes reported by the command line entry point."""

    SUCCESS = 0
    ERROR_UNKNOWN = 1
    ERROR_ARGUMENTS = 2
    ERROR_SDK_NOT_FOUND = 10
    ERROR_UNKNOWN_DEPLOY_FAILURE = 25


class TaskError(Exception):
    """Base class for task failures. Carries the exit code to report."""

    exit_code: ExitCode = ExitCode.ERROR_UNKNOWN

    def __init__(self, message: str, exit_code: Optional[ExitCode] = None) -> None:
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class ConfigurationError(TaskError):
    """A required environment variable or parameter is missing or empty."""

    exit_code = ExitCode.ERROR_ARGUMENTS


class InputValidationError(TaskError):
    """A required file or directory does not exist or is malformed."""

    exit_code = ExitCode.ERROR_ARGUMENTS


class ExtractionError(TaskError):
    """The credential bundle could not be decoded or extracted."""

    exit_code = ExitCode.ERROR_UNKNOWN_DEPLOY_FAILURE


class SteamCmdMissingError(TaskError):
    """The steamcmd executable is not present in the SDK installation."""

    exit_code = ExitCode.ERROR_SDK_NOT_FOUND


class UploadFailedError(TaskError):
    """steamcmd ran but exited with a non-zero code."""

    exit_code = ExitCode.ERROR_UNKNOWN_DEPLOY_FAILURE

    def __init__(self, message: str, return_code: int) -> None:
        super().__init__(message)
        self.return_code = return_code
