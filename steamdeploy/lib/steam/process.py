"""Running steamcmd as a child process."""

import re
import shlex
import subprocess
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, List, Optional, Protocol, Union


ANSI_ESCAPE = re.compile(r'\x1B(?:[@-Z\\-_]|\[[0-?]*[ -/]*[@-~])')


def strip_ansi(text: str) -> str:
    """Remove ANSI escape codes (colors, cursor moves) from steamcmd output."""
    return ANSI_ESCAPE.sub('', text)


@dataclass
class ProcessResult:
    return_code: int
    output: List[str] = field(default_factory=list)


class ProcessRunner(Protocol):
    """Runs an executable with a single argument string and reports its exit code."""

    def run(self, executable: Path, arguments: str, working_dir: Path,
            on_line: Optional[Callable[[str], None]] = None) -> ProcessResult:
        ...


class SubprocessRunner:
    """ProcessRunner backed by subprocess.Popen with real-time output."""

    def __init__(self, platform: Optional[str] = None) -> None:
        self.platform = platform or sys.platform

    def build_command(self, executable: Path, arguments: str) -> Union[str, List[str]]:
        # Windows takes the argument string verbatim as part of the command line
        if self.platform.startswith("win"):
            return f'"{executable}" {arguments}'
        return [str(executable)] + shlex.split(arguments)

    def run(self, executable: Path, arguments: str, working_dir: Path,
            on_line: Optional[Callable[[str], None]] = None) -> ProcessResult:
        process = subprocess.Popen(
            self.build_command(executable, arguments),
            cwd=str(working_dir),
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            text=True,
            errors="replace",
            bufsize=1
        )

        # Stream output in real-time and keep it for build ID extraction
        output_lines: List[str] = []
        for line in iter(process.stdout.readline, ''):
            if line:
                clean_line = strip_ansi(line.rstrip())
                if on_line:
                    on_line(clean_line)
                output_lines.append(clean_line)
        process.stdout.close()

        # No timeout, steamcmd decides how long an upload takes
        return_code = process.wait()
        return ProcessResult(return_code=return_code, output=output_lines)
