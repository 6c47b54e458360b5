"""Filesystem walking and file classification.

Walks each mock root recursively and yields every regular file together
with the root it was found under.  Directory exclusion is an explicit
set passed in by the caller; ``DEFAULT_EXCLUDED_DIRS`` covers VCS and
bytecode directories.
"""

import logging
from collections.abc import Iterable, Iterator
from pathlib import Path

from mockingbird.routing.constants import (
    CONFIG_EXTENSIONS,
    CONFIG_STEM,
    DECLARATION_SUFFIX,
    DEFAULT_EXCLUDED_DIRS,
    SUPPORTED_EXTENSIONS,
)
from mockingbird.scanning.types import CandidateFile

logger = logging.getLogger("mockingbird.scanner")


def walk_files(
    directory: Path,
    *,
    exclude_dirs: Iterable[str] = DEFAULT_EXCLUDED_DIRS,
) -> Iterator[Path]:
    """Recursively yield regular files under *directory*, sorted by name.

    Subdirectories named in *exclude_dirs* and symlinked directories are
    not descended into.  Unreadable directories are logged and contribute nothing.
    """
    excluded = frozenset(exclude_dirs)
    try:
        entries = sorted(directory.iterdir())
    except OSError as exc:
        logger.warning("Cannot list %s: %s", directory, exc)
        return

    for entry in entries:
        if entry.is_dir():
            # Symlinked directories are not followed
            if entry.name in excluded or entry.is_symlink():
                continue
            yield from walk_files(entry, exclude_dirs=excluded)
        elif entry.is_file():
            yield entry


def collect_files(
    dirs: Iterable[str | Path],
    *,
    exclude_dirs: Iterable[str] = DEFAULT_EXCLUDED_DIRS,
) -> list[CandidateFile]:
    """Collect every file under the given roots.

    A missing root yields zero files.  A root listed twice is walked once.

    Args:
        dirs: Mock root directories.
        exclude_dirs: Directory names never descended into.

    Returns:
        Candidate files in walk order, grouped by root.
    """
    files: list[CandidateFile] = []
    seen: set[Path] = set()
    for entry in dirs:
        root = Path(entry).absolute()
        if root in seen:
            continue
        seen.add(root)
        if not root.is_dir():
            logger.debug("Mock directory not found: %s", root)
            continue
        files.extend(
            CandidateFile(file=path, root=root)
            for path in walk_files(root, exclude_dirs=exclude_dirs)
        )
    return files


def is_config_file(path: str | Path) -> bool:
    """True for ``index.config.<ext>`` files."""
    name = Path(path).name
    if name.endswith(DECLARATION_SUFFIX):
        return False
    return any(name == f"{CONFIG_STEM}{ext}" for ext in CONFIG_EXTENSIONS)


def is_supported_file(path: str | Path) -> bool:
    """True when the file can become a mock route."""
    name = Path(path).name
    if name.endswith(DECLARATION_SUFFIX) or is_config_file(path):
        return False
    return Path(name).suffix.lower() in SUPPORTED_EXTENSIONS
