"""Load mock route files and directory config files.

Python files are imported from their path with
``importlib.util.spec_from_file_location``; every scan cycle imports
them afresh so edits are picked up on refresh.  ``.json`` files are read
with :mod:`json`, ``.jsonc`` files (comments, trailing commas) with
``json5``.

Loading never raises for a broken file: the problem is logged and the
file contributes nothing.
"""

import importlib.util
import itertools
import json
import logging
import sys
from collections.abc import Mapping
from pathlib import Path
from types import ModuleType
from typing import Any

import json5

from mockingbird.routing.constants import DATA_EXTENSIONS
from mockingbird.scanning.types import DirectoryConfig, MockRule

logger = logging.getLogger("mockingbird.scanner")

_counter = itertools.count()

# Sentinel for "file could not be read"; JSON ``null`` is a valid value
_INVALID = object()


def load_module(file: str | Path) -> ModuleType | None:
    """Import a Python file under a unique, throwaway module name.

    The module is registered in ``sys.modules`` only while it executes,
    so dataclasses and relative lookups inside mock files resolve.
    """
    path = Path(file)
    module_name = f"_mockingbird_{path.stem.replace('.', '_')}_{next(_counter)}"
    spec = importlib.util.spec_from_file_location(module_name, path)
    if spec is None or spec.loader is None:
        logger.warning("Cannot import %s", path)
        return None

    module = importlib.util.module_from_spec(spec)
    sys.modules[module_name] = module
    try:
        spec.loader.exec_module(module)
    except Exception as exc:
        logger.warning("Failed to load %s: %s", path, exc)
        return None
    finally:
        sys.modules.pop(module_name, None)
    return module


def read_json_file(file: str | Path) -> Any:
    """Parse a ``.json`` or ``.jsonc`` file; returns ``_INVALID`` on failure."""
    path = Path(file)
    try:
        content = path.read_text(encoding="utf-8")
    except OSError as exc:
        logger.warning("Failed to read %s: %s", path, exc)
        return _INVALID

    try:
        if path.suffix.lower() == ".jsonc":
            return json5.loads(content)
        return json.loads(content)
    except ValueError:
        logger.warning("Invalid JSON in %s", path)
        return _INVALID


def load_rules(file: str | Path) -> list[Any]:
    """Load the raw rule declarations exported by a mock file.

    Data files yield one static rule whose handler is the parsed value.
    Python files are looked up for ``rules`` (a list), then ``rule``,
    then ``handler``; a bare callable counts as one rule's handler.
    Entries are returned unvalidated; the scanner checks their shape.
    """
    path = Path(file)
    if path.suffix.lower() in DATA_EXTENSIONS:
        value = read_json_file(path)
        if value is _INVALID:
            return []
        return [MockRule(handler=value)]

    module = load_module(path)
    if module is None:
        return []

    if (rules := getattr(module, "rules", None)) is not None:
        if isinstance(rules, (list, tuple)):
            return [_as_rule(entry) for entry in rules]
        return [_as_rule(rules)]
    if (rule := getattr(module, "rule", None)) is not None:
        return [_as_rule(rule)]
    if (handler := getattr(module, "handler", None)) is not None:
        return [MockRule(handler=handler)]
    logger.warning("No rules, rule or handler in %s", path)
    return []


def _as_rule(value: Any) -> Any:
    if callable(value) and not isinstance(value, (MockRule, Mapping)):
        return MockRule(handler=value)
    return value


def load_directory_config(file: str | Path) -> DirectoryConfig | None:
    """Load the ``config`` exported by an ``index.config.py`` file.

    ``config`` may be a ``DirectoryConfig``, a mapping of its fields, or
    a zero-argument callable returning either.  Anything else is
    ``None``; the caller reports it as invalid.
    """
    module = load_module(file)
    if module is None:
        return None

    value = getattr(module, "config", None)
    if callable(value) and not isinstance(value, (DirectoryConfig, Mapping)):
        try:
            value = value()
        except Exception as exc:
            logger.warning("Config factory failed in %s: %s", file, exc)
            return None
    try:
        return DirectoryConfig.from_value(value)
    except TypeError as exc:
        logger.warning("Config fields rejected in %s: %s", file, exc)
        return None
