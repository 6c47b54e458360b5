"""Server configuration.

ServerConfig is a frozen dataclass: immutable after creation,
IDE-autocompletable, no string-key dict lookups.
"""

import logging
import re
from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path

from mockingbird.errors import ConfigurationError
from mockingbird.routing.constants import DEFAULT_EXCLUDED_DIRS
from mockingbird.routing.derive import normalize_prefix

logger = logging.getLogger("mockingbird.config")

LOG_LEVELS = ("critical", "error", "warning", "info", "debug")

type PatternSetting = re.Pattern[str] | str | Sequence[re.Pattern[str] | str] | None


@dataclass(frozen=True, slots=True)
class ServerConfig:
    """Mock server configuration. Immutable after creation.

    All fields have defaults; override what you need::

        config = ServerConfig(dirs=("mock", "fixtures"), prefix="/api", watch=True)
    """

    # Scanning
    dirs: tuple[str | Path, ...] = ("mock",)
    root: str | Path | None = None  # Base for relative dirs (default: cwd)
    prefix: str = ""
    include: PatternSetting = None
    exclude: PatternSetting = None
    ignore_prefix: str | tuple[str, ...] | None = None  # None = "."
    exclude_dirs: frozenset[str] = field(default=DEFAULT_EXCLUDED_DIRS)

    # Server
    host: str = "127.0.0.1"
    port: int = 8080
    debug: bool = False
    log_level: str = "info"

    # Watch mode
    watch: bool = False
    watch_interval: float = 0.5  # Seconds between polls
    debounce: float = 0.1  # Quiet period before a refresh

    def resolved_dirs(self) -> tuple[Path, ...]:
        """Absolute mock roots, relative ones resolved against ``root``."""
        base = Path(self.root) if self.root is not None else Path.cwd()
        return tuple(
            (path if path.is_absolute() else base / path).absolute()
            for path in (Path(entry) for entry in self.dirs)
        )

    @property
    def normalized_prefix(self) -> str:
        return normalize_prefix(self.prefix)

    def validate(self) -> None:
        """Raise ``ConfigurationError`` for settings that cannot work."""
        if not self.dirs:
            raise ConfigurationError("At least one mock directory is required")
        if not 0 <= self.port <= 65535:
            raise ConfigurationError(f"Invalid port {self.port}")
        if self.log_level.lower() not in LOG_LEVELS:
            raise ConfigurationError(
                f"Unsupported log level {self.log_level!r}; expected one of {', '.join(LOG_LEVELS)}"
            )
        if self.watch_interval <= 0:
            raise ConfigurationError("watch_interval must be positive")
        if self.debounce < 0:
            raise ConfigurationError("debounce must not be negative")
        for label, value in (("include", self.include), ("exclude", self.exclude)):
            for entry in _pattern_entries(value):
                if isinstance(entry, str):
                    try:
                        re.compile(entry)
                    except re.error as exc:
                        raise ConfigurationError(f"Invalid {label} pattern {entry!r}: {exc}") from exc
        missing = [str(path) for path in self.resolved_dirs() if not path.is_dir()]
        if missing:
            logger.warning("Mock directory not found: %s", ", ".join(missing))


def _pattern_entries(value: PatternSetting) -> list[re.Pattern[str] | str]:
    if value is None:
        return []
    if isinstance(value, (str, re.Pattern)):
        return [value]
    return list(value)
