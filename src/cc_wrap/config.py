"""Layer the user's override config onto the runtime's global config."""

import logging
from pathlib import Path
from typing import Any

from cc_wrap.errors import ParseError
from cc_wrap.jsonio import read_json, write_json

logger = logging.getLogger(__name__)


def merge_config(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Shallow merge: override's top-level keys replace base's wholesale.

    Nested objects and arrays are never merged, so an override of
    ``mcpServers`` replaces the whole map.
    """
    return {**base, **override}


def _load_object(path: Path) -> dict[str, Any]:
    data = read_json(path)
    if isinstance(data, ParseError):
        raise data
    if not isinstance(data, dict):
        raise ParseError(str(path), "expected a JSON object")
    return data


def merge_config_files(base_path: Path, override_path: Path) -> dict[str, Any] | None:
    """Merge ``override_path`` into ``base_path`` and write the result back.

    Returns the merged config, or None when there was nothing to merge or the
    merge failed. Failures are logged and never abort a launch.
    """
    if not override_path.exists():
        logger.debug("No override config at %s", override_path)
        return None
    try:
        base = _load_object(base_path) if base_path.exists() else {}
        override = _load_object(override_path)
        merged = merge_config(base, override)
        write_json(base_path, merged)
    except (ParseError, OSError) as e:
        logger.warning("Config merge failed: %s", e)
        return None
    logger.debug("Merged %s into %s", override_path, base_path)
    return merged
