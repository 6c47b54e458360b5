"""Directory config resolution.

For a mock file, walk from its directory up to the scan root, pick up
every ``index.config.py`` on the way and merge them root to leaf:

- ``status``, ``delay``, ``enabled``, ``ignore_prefix``, ``include``
  and ``exclude``: the deepest directory that sets a field wins.
- ``headers``: shallow union, deeper keys win.
- middleware: concatenated in chain order, grouped ``pre`` -> ``normal``
  (including the legacy ``middleware`` field) -> ``post``.

Loaded configs and config-file lookups are memoized in a ``ScanCaches``
that lives for exactly one scan cycle.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from mockingbird.routing.constants import CONFIG_EXTENSIONS, CONFIG_STEM
from mockingbird.routing.route import MiddlewarePosition, ResolvedMiddleware
from mockingbird.scanning.loader import load_directory_config
from mockingbird.scanning.types import DirectoryConfig, EffectiveConfig

logger = logging.getLogger("mockingbird.config")

# Fields merged last-writer-wins
_SCALAR_FIELDS = ("status", "delay", "enabled", "ignore_prefix", "include", "exclude")


@dataclass(slots=True)
class ScanCaches:
    """Per-cycle memo tables. Build a new one for every scan."""

    configs: dict[Path, DirectoryConfig | None] = field(default_factory=dict)
    config_files: dict[Path, Path | None] = field(default_factory=dict)


def build_ancestor_chain(file: str | Path, root: str | Path) -> list[Path]:
    """Directories from *root* down to the file's own directory.

    Stops early at the filesystem root when *file* is not under *root*.
    """
    resolved_root = Path(root).absolute()
    current = Path(file).absolute().parent
    chain = [current]
    while current != resolved_root:
        parent = current.parent
        if parent == current:
            break
        current = parent
        chain.append(current)
    chain.reverse()
    return chain


def find_config_file(directory: Path, cache: dict[Path, Path | None]) -> Path | None:
    """Return the first existing ``index.config.<ext>`` in *directory*."""
    if directory in cache:
        return cache[directory]
    found: Path | None = None
    for ext in CONFIG_EXTENSIONS:
        candidate = directory / f"{CONFIG_STEM}{ext}"
        if candidate.is_file():
            found = candidate
            break
    cache[directory] = found
    return found


def _get_config(path: Path, caches: ScanCaches) -> DirectoryConfig | None:
    if path not in caches.configs:
        config = load_directory_config(path)
        if config is None:
            logger.warning("Invalid config in %s", path)
        caches.configs[path] = config
    return caches.configs[path]


def normalize_middlewares(
    value: Any,
    source: str,
    position: MiddlewarePosition,
) -> list[ResolvedMiddleware]:
    """Tag each middleware with its source and position.

    Non-callable entries are dropped with a warning; the remaining
    entries keep their original index.
    """
    if not value:
        return []
    entries = list(value) if isinstance(value, (list, tuple)) else [value]
    middlewares: list[ResolvedMiddleware] = []
    for index, entry in enumerate(entries):
        if not callable(entry):
            logger.warning("Invalid middleware in %s", source)
            continue
        middlewares.append(
            ResolvedMiddleware(handle=entry, source=source, index=index, position=position)
        )
    return middlewares


def resolve_directory_config(
    file: str | Path,
    root: str | Path,
    caches: ScanCaches,
) -> EffectiveConfig:
    """Merge the config chain that applies to *file*.

    Args:
        file: Mock file (or config file) path.
        root: Scan root the file was found under.
        caches: Memo tables for the current scan cycle.

    Returns:
        The merged config with its ``config_chain`` and per-field
        ``config_sources``.
    """
    merged: dict[str, Any] = {}
    headers: dict[str, str] | None = None
    buckets: dict[MiddlewarePosition, list[ResolvedMiddleware]] = {
        "pre": [],
        "normal": [],
        "post": [],
    }
    config_chain: list[str] = []
    sources: dict[str, str] = {}

    for directory in build_ancestor_chain(file, root):
        config_path = find_config_file(directory, caches.config_files)
        if config_path is None:
            continue
        config = _get_config(config_path, caches)
        if config is None:
            continue

        source = str(config_path)
        config_chain.append(source)
        if config.headers:
            headers = {**(headers or {}), **config.headers}
            sources["headers"] = source
        for name in _SCALAR_FIELDS:
            value = getattr(config, name)
            if value is not None:
                merged[name] = value
                sources[name] = source

        buckets["pre"].extend(normalize_middlewares(config.pre, source, "pre"))
        buckets["normal"].extend(normalize_middlewares(config.normal, source, "normal"))
        buckets["normal"].extend(normalize_middlewares(config.middleware, source, "normal"))
        buckets["post"].extend(normalize_middlewares(config.post, source, "post"))

    return EffectiveConfig(
        headers=headers,
        middlewares=(*buckets["pre"], *buckets["normal"], *buckets["post"]),
        config_chain=tuple(config_chain),
        config_sources=sources,
        **merged,
    )
