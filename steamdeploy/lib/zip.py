import io
import zipfile
from pathlib import Path
from typing import List, Union
from .streams import LogStream


def extract_archive_bytes(data: bytes, destination: Union[str, Path], stream: LogStream) -> List[Path]:
    """
    Extract an in-memory zip archive into a directory.

    Directory entries are skipped, every file entry is written to
    destination joined with its stored name, overwriting existing files.
    Files written before a failing entry are left in place.

    Args:
        data: Raw bytes of the zip archive
        destination: Directory to extract into
        stream: LogStream instance for logging progress

    Returns:
        Paths of the extracted files, in archive order

    Raises:
        zipfile.BadZipFile: If the bytes are not a readable zip archive
        ValueError: If an entry name points outside destination
        OSError: If a file cannot be written
    """
    base = Path(destination)
    written: List[Path] = []

    with zipfile.ZipFile(io.BytesIO(data), 'r') as zip_ref:
        for entry in zip_ref.infolist():
            # ignore directories
            if entry.filename.endswith('/'):
                continue

            output_file = base / entry.filename
            if not output_file.resolve().is_relative_to(base.resolve()):
                raise ValueError(f"Archive entry escapes {base}: {entry.filename}")

            stream.log(f"Extracting {entry.filename} to {output_file}")
            output_file.parent.mkdir(parents=True, exist_ok=True)
            output_file.write_bytes(zip_ref.read(entry))
            written.append(output_file)

    return written
