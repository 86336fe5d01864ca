"""Best-effort file and JSON helpers.

Readers never raise for missing or malformed input. Decoders return either the
decoded value or a ``ParseError`` so callers pick their fallback explicitly
with ``or_default``.
"""

import json
import os
import tempfile
from pathlib import Path
from typing import Any, TypeVar

from cc_wrap.errors import ParseError

T = TypeVar("T")


def or_default(result: T | ParseError, default: T) -> T:
    """Return ``default`` when ``result`` is a parse error."""
    if isinstance(result, ParseError):
        return default
    return result


def read_text(path: Path | str | None, errors: str = "strict") -> str:
    """Read a whole file, returning "" if it is absent or unreadable."""
    if not path:
        return ""
    try:
        return Path(path).read_text(encoding="utf-8", errors=errors)
    except (OSError, UnicodeDecodeError):
        return ""


def decode_json(text: str, source: str = "<string>") -> Any | ParseError:
    """Decode a JSON document."""
    try:
        return json.loads(text)
    except (json.JSONDecodeError, TypeError) as e:
        return ParseError(source, str(e))


def decode_object(text: str, source: str = "<string>") -> dict[str, Any] | ParseError:
    """Decode a JSON document that must be an object."""
    result = decode_json(text, source)
    if isinstance(result, ParseError):
        return result
    if not isinstance(result, dict):
        return ParseError(source, f"expected a JSON object, got {type(result).__name__}")
    return result


def read_json(path: Path) -> Any | ParseError:
    """Read and decode a JSON file.

    Unlike ``read_text`` this reports I/O failures as a ``ParseError`` so a
    caller that writes the file back can tell "empty" apart from "broken".
    """
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        return ParseError(str(path), str(e))
    return decode_json(text, str(path))


def write_json(path: Path, data: Any) -> None:
    """Write ``data`` as indented JSON. Raises ``OSError`` on failure.

    The content goes to a sibling temp file first and is renamed over
    ``path``, so a failed write never leaves a truncated file behind.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_path = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(json.dumps(data, indent=2) + "\n")
        os.replace(tmp_path, path)
    except BaseException:
        try:
            os.unlink(tmp_path)
        except OSError:
            pass
        raise
