"""KeyValues (VDF) serializer for SteamPipe build scripts.

SteamPipe app build scripts are nested ``"Key" "Value"`` pairs and
``"Key" { ... }`` blocks. Documents are built as plain nested dicts and
rendered here, so values are always quoted and escaped consistently.
"""

from pathlib import Path, PurePath
from typing import Any, Dict, List, Union


VdfValue = Union[str, int, PurePath]
VdfBlock = Dict[str, Any]

_ESCAPES = {
    "\\": "\\\\",
    "\"": "\\\"",
    "\n": "\\n",
    "\t": "\\t",
}


def quote(value: VdfValue) -> str:
    """Render a scalar as a double-quoted, escaped KeyValues token."""
    # Forward slashes keep Windows paths free of backslash escapes
    text = value.as_posix() if isinstance(value, PurePath) else str(value)
    return '"' + "".join(_ESCAPES.get(ch, ch) for ch in text) + '"'


def _render_block(block: VdfBlock, depth: int, indent: str, lines: List[str]) -> None:
    pad = indent * depth
    for key, value in block.items():
        if isinstance(value, dict):
            lines.append(f"{pad}{quote(key)}")
            lines.append(f"{pad}{{")
            _render_block(value, depth + 1, indent, lines)
            lines.append(f"{pad}}}")
        elif isinstance(value, (str, int, PurePath)) and not isinstance(value, bool):
            lines.append(f"{pad}{quote(key)} {quote(value)}")
        else:
            raise TypeError(f"Unsupported VDF value for key '{key}': {type(value).__name__}")


def dumps(document: VdfBlock, indent: str = "\t") -> str:
    """Render a nested dict as KeyValues text.

    Args:
        document: Ordered mapping of keys to scalars or nested dicts
        indent: String used for one level of indentation

    Returns:
        The rendered document, terminated by a newline

    Raises:
        TypeError: If a value is neither a scalar nor a dict
    """
    lines: List[str] = []
    _render_block(document, 0, indent, lines)
    return "\n".join(lines) + "\n"


def dump(document: VdfBlock, path: Union[str, Path], indent: str = "\t") -> Path:
    """Render a document and write it to path, creating parent directories."""
    output = Path(path)
    text = dumps(document, indent=indent)
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(text, encoding="utf-8")
    return output
