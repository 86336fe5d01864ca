"""Copy shared agent instructions into place for the length of a session."""

import logging
import shutil
from pathlib import Path

logger = logging.getLogger(__name__)


def sync_instructions(source: Path, target: Path) -> bool:
    """Copy ``source`` to ``target``. Returns True if this call created ``target``.

    An existing ``target`` is never overwritten: it may be the user's own
    file, and the caller deletes whatever this returns True for.
    """
    if not source.is_file():
        return False
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        with source.open("rb") as src:
            with target.open("xb") as dst:
                try:
                    shutil.copyfileobj(src, dst)
                except OSError:
                    target.unlink(missing_ok=True)
                    raise
    except FileExistsError:
        logger.debug("Keeping existing %s", target)
        return False
    except OSError as e:
        logger.warning("Instructions sync failed: %s", e)
        return False
    return True


def cleanup_instructions(target: Path) -> None:
    try:
        target.unlink(missing_ok=True)
    except OSError as e:
        logger.warning("Could not remove %s: %s", target, e)
