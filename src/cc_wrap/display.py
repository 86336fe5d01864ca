"""Git-aware display paths."""

import asyncio
import logging
import os
from collections.abc import Awaitable, Callable
from pathlib import Path, PurePosixPath

logger = logging.getLogger(__name__)

RootProbe = Callable[[str], Awaitable[str | None]]


async def find_repo_root(path: str) -> str | None:
    """Return the enclosing git work tree root, or None.

    Any failure (no git binary, not a repository, unreadable directory)
    counts as "no root".
    """
    try:
        proc = await asyncio.create_subprocess_exec(
            "git",
            "rev-parse",
            "--show-toplevel",
            cwd=path,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.DEVNULL,
        )
        stdout, _ = await proc.communicate()
    except (OSError, ValueError) as e:
        logger.debug("git root probe failed for %s: %s", path, e)
        return None
    if proc.returncode != 0:
        return None
    root = stdout.decode("utf-8", errors="replace").strip()
    return root or None


def repo_relative(path: str, root: str) -> str | None:
    """Display ``path`` as ``<root name>/<relative>``, or None if outside root."""
    candidate = Path(os.path.realpath(path))
    repo = Path(os.path.realpath(root))
    try:
        rel = candidate.relative_to(repo)
    except ValueError:
        return None
    name = Path(root).name
    rel_str = rel.as_posix()
    if rel_str in ("", "."):
        return name
    return f"{name}/{rel_str}"


def home_relative(path: str, home: str) -> str | None:
    """Display ``path`` as ``~/...`` when it lies under ``home``."""
    if not home:
        return None
    candidate = PurePosixPath(path)
    home_path = PurePosixPath(home)
    if not candidate.is_relative_to(home_path):
        return None
    rest = candidate.relative_to(home_path).as_posix()
    if rest in ("", "."):
        return "~"
    return f"~/{rest}"


def last_segments(path: str, count: int = 2) -> str:
    return "/".join(path.rstrip("/").split("/")[-count:]) or path


async def get_display_path(
    path: str | None = None,
    *,
    home: str | None = None,
    probe: RootProbe = find_repo_root,
) -> str:
    """Short display form of a working directory.

    Prefers ``repo/sub/dir`` inside a git work tree, then ``~/...`` under
    the home directory, then the last two path segments.
    """
    path = path or os.getcwd()
    if not path:
        return ""
    if home is None:
        home = str(Path.home())

    try:
        root = await probe(path)
    except Exception as e:
        logger.debug("repository probe raised for %s: %s", path, e)
        root = None
    if root:
        shown = repo_relative(path, root)
        if shown is not None:
            return shown

    return home_relative(path, home) or last_segments(path)
