"""Tests for mockingbird.scanning.dirconfig: merging index.config.py chains."""

import logging

import pytest

from mockingbird.scanning.dirconfig import (
    ScanCaches,
    build_ancestor_chain,
    resolve_directory_config,
)


class TestAncestorChain:
    def test_root_first(self, tmp_path) -> None:
        chain = build_ancestor_chain(tmp_path / "a" / "b" / "file.get.json", tmp_path)
        assert chain == [tmp_path, tmp_path / "a", tmp_path / "a" / "b"]

    def test_file_at_root(self, tmp_path) -> None:
        assert build_ancestor_chain(tmp_path / "file.get.json", tmp_path) == [tmp_path]


class TestResolveDirectoryConfig:
    def test_no_configs(self, mock_tree) -> None:
        root = mock_tree({"users.get.json": "[]"})
        effective = resolve_directory_config(root / "users.get.json", root, ScanCaches())
        assert effective.config_chain == ()
        assert effective.status is None
        assert effective.headers is None
        assert effective.middlewares == ()

    def test_deepest_status_wins(self, mock_tree) -> None:
        root = mock_tree(
            {
                "index.config.py": "config = {'status': 201}",
                "a/index.config.py": "config = {'status': 202}",
                "a/b/index.config.py": "config = {'status': 203}",
                "a/b/c.get.json": "{}",
            }
        )
        effective = resolve_directory_config(root / "a/b/c.get.json", root, ScanCaches())
        assert effective.status == 203
        assert len(effective.config_chain) == 3
        assert effective.config_sources["status"] == str(root / "a/b/index.config.py")

    def test_unset_field_inherits(self, mock_tree) -> None:
        root = mock_tree(
            {
                "index.config.py": "config = {'delay': 50}",
                "a/index.config.py": "config = {'status': 202}",
                "a/c.get.json": "{}",
            }
        )
        effective = resolve_directory_config(root / "a/c.get.json", root, ScanCaches())
        assert effective.delay == 50
        assert effective.status == 202
        assert effective.config_sources["delay"] == str(root / "index.config.py")

    def test_header_merge(self, mock_tree) -> None:
        root = mock_tree(
            {
                "index.config.py": "config = {'headers': {'a': '1'}}",
                "leaf/index.config.py": "config = {'headers': {'a': '2', 'b': '3'}}",
                "leaf/x.get.json": "{}",
            }
        )
        effective = resolve_directory_config(root / "leaf/x.get.json", root, ScanCaches())
        assert dict(effective.headers) == {"a": "2", "b": "3"}

    def test_dataclass_and_factory_configs(self, mock_tree) -> None:
        root = mock_tree(
            {
                "index.config.py": """
                    from mockingbird import DirectoryConfig

                    config = DirectoryConfig(enabled=True, headers={"x-root": "1"})
                """,
                "a/index.config.py": """
                    def config():
                        return {"status": 418}
                """,
                "a/c.get.json": "{}",
            }
        )
        effective = resolve_directory_config(root / "a/c.get.json", root, ScanCaches())
        assert effective.enabled is True
        assert effective.status == 418
        assert dict(effective.headers) == {"x-root": "1"}

    def test_invalid_config_is_absent(self, mock_tree, caplog: pytest.LogCaptureFixture) -> None:
        root = mock_tree(
            {
                "index.config.py": "config = 42",
                "c.get.json": "{}",
            }
        )
        with caplog.at_level(logging.WARNING, logger="mockingbird.config"):
            effective = resolve_directory_config(root / "c.get.json", root, ScanCaches())
        assert effective.config_chain == ()
        assert "Invalid config in" in caplog.text

    def test_broken_config_is_absent(self, mock_tree, caplog: pytest.LogCaptureFixture) -> None:
        root = mock_tree(
            {
                "index.config.py": "raise RuntimeError('boom')",
                "c.get.json": "{}",
            }
        )
        with caplog.at_level(logging.WARNING):
            effective = resolve_directory_config(root / "c.get.json", root, ScanCaches())
        assert effective.config_chain == ()
        assert "Failed to load" in caplog.text

    def test_config_loaded_once_per_cycle(self, mock_tree) -> None:
        root = mock_tree(
            {
                "index.config.py": "config = {'status': 201}",
                "a.get.json": "{}",
                "b.get.json": "{}",
            }
        )
        caches = ScanCaches()
        first = resolve_directory_config(root / "a.get.json", root, caches)
        second = resolve_directory_config(root / "b.get.json", root, caches)
        assert first.status == second.status == 201
        assert list(caches.configs) == [root / "index.config.py"]


class TestMiddlewareOrdering:
    def test_pre_normal_post_across_levels(self, mock_tree) -> None:
        root = mock_tree(
            {
                "index.config.py": """
                    async def root_pre(ctx, next): return await next()
                    async def root_normal(ctx, next): return await next()
                    async def root_post(ctx, next): return await next()

                    config = {"pre": [root_pre], "normal": [root_normal], "post": [root_post]}
                """,
                "leaf/index.config.py": """
                    async def leaf_pre(ctx, next): return await next()
                    async def leaf_legacy(ctx, next): return await next()

                    config = {"pre": leaf_pre, "middleware": [leaf_legacy]}
                """,
                "leaf/x.get.json": "{}",
            }
        )
        effective = resolve_directory_config(root / "leaf/x.get.json", root, ScanCaches())
        names = [m.handle.__name__ for m in effective.middlewares]
        assert names == ["root_pre", "leaf_pre", "root_normal", "leaf_legacy", "root_post"]
        positions = [m.position for m in effective.middlewares]
        assert positions == ["pre", "pre", "normal", "normal", "post"]
        assert effective.middlewares[1].source == str(root / "leaf/index.config.py")

    def test_non_callable_dropped(self, mock_tree, caplog: pytest.LogCaptureFixture) -> None:
        root = mock_tree(
            {
                "index.config.py": """
                    async def keep(ctx, next): return await next()

                    config = {"normal": ["nope", keep]}
                """,
                "x.get.json": "{}",
            }
        )
        with caplog.at_level(logging.WARNING, logger="mockingbird.config"):
            effective = resolve_directory_config(root / "x.get.json", root, ScanCaches())
        assert [m.handle.__name__ for m in effective.middlewares] == ["keep"]
        assert effective.middlewares[0].index == 1
        assert "Invalid middleware" in caplog.text
