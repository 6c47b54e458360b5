"""Shared fixtures: build mock directory trees under ``tmp_path``."""

import textwrap
from collections.abc import Callable
from pathlib import Path

import pytest

type TreeFactory = Callable[[dict[str, str]], Path]


@pytest.fixture
def mock_tree(tmp_path: Path) -> TreeFactory:
    """Write ``{relative_path: source}`` under ``tmp_path/mock`` and return the root.

    Sources are dedented, so tests can write mock files inline.
    """
    root = tmp_path / "mock"
    root.mkdir(exist_ok=True)

    def build(files: dict[str, str]) -> Path:
        for relative, source in files.items():
            path = root / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(textwrap.dedent(source).lstrip(), encoding="utf-8")
        return root

    return build
