"""Tests for mockingbird.scanning.files: walking and classification."""

from mockingbird.scanning.files import (
    collect_files,
    is_config_file,
    is_supported_file,
    walk_files,
)


class TestWalkFiles:
    def test_recursive_sorted(self, mock_tree) -> None:
        root = mock_tree({"b.get.json": "{}", "a/c.get.json": "{}", "a.get.json": "{}"})
        relative = [p.relative_to(root).as_posix() for p in walk_files(root)]
        assert relative == ["a/c.get.json", "a.get.json", "b.get.json"]

    def test_excluded_dirs(self, mock_tree) -> None:
        root = mock_tree({"node_modules/x.get.json": "{}", "keep/y.get.json": "{}"})
        names = [p.name for p in walk_files(root, exclude_dirs={"node_modules"})]
        assert names == ["y.get.json"]

    def test_symlinked_dir_not_followed(self, mock_tree) -> None:
        root = mock_tree({"a.get.json": "{}", "nested/b.get.json": "{}"})
        (root / "loop").symlink_to(root, target_is_directory=True)
        (root / "alias").symlink_to(root / "nested", target_is_directory=True)
        relative = [p.relative_to(root).as_posix() for p in walk_files(root)]
        assert relative == ["a.get.json", "nested/b.get.json"]

    def test_custom_exclusion_set(self, mock_tree) -> None:
        root = mock_tree({"fixtures/x.get.json": "{}", "node_modules/y.get.json": "{}"})
        names = [p.name for p in walk_files(root, exclude_dirs={"fixtures"})]
        assert names == ["y.get.json"]


class TestCollectFiles:
    def test_missing_root_is_empty(self, tmp_path) -> None:
        assert collect_files([tmp_path / "missing"]) == []

    def test_root_listed_twice(self, mock_tree) -> None:
        root = mock_tree({"a.get.json": "{}"})
        files = collect_files([root, root])
        assert len(files) == 1
        assert files[0].root == root

    def test_default_exclusions(self, mock_tree) -> None:
        root = mock_tree({".git/HEAD": "ref", "__pycache__/x.pyc": "", "a.get.json": "{}"})
        assert [c.file.name for c in collect_files([root])] == ["a.get.json"]


class TestClassification:
    def test_config_file(self) -> None:
        assert is_config_file("mock/index.config.py")
        assert not is_config_file("mock/index.get.py")
        assert not is_config_file("mock/index.config.pyi")

    def test_supported(self) -> None:
        assert is_supported_file("mock/users.get.py")
        assert is_supported_file("mock/users.json")
        assert is_supported_file("mock/users.JSONC")
        assert not is_supported_file("mock/index.config.py")
        assert not is_supported_file("mock/users.get.pyi")
        assert not is_supported_file("mock/readme.md")
