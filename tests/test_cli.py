"""Tests for mockingbird.cli: argument parsing and the routes command."""

import argparse

import pytest

from mockingbird.cli import main
from mockingbird.cli._serve import build_config


class TestCLIHelp:
    def test_help_exits_zero(self) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["--help"])
        assert exc_info.value.code == 0

    @pytest.mark.parametrize("command", ["serve", "routes"])
    def test_subcommand_help_exits_zero(self, command: str) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main([command, "--help"])
        assert exc_info.value.code == 0

    def test_no_command_prints_help(self, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main([])
        assert exc_info.value.code == 0
        assert "mockingbird" in capsys.readouterr().out


class TestRoutesCommand:
    def test_table(self, mock_tree, capsys: pytest.CaptureFixture[str]) -> None:
        root = mock_tree({"users.get.json": "[]", "users/[id].delete.py": "rule = {'handler': None}"})
        main(["routes", str(root), "--prefix", "/api", "--log-level", "error"])
        out = capsys.readouterr().out
        lines = out.splitlines()
        assert lines[0].split() == ["METHOD", "PATH", "FILE"]
        assert any(line.split()[:2] == ["DELETE", "/api/users/[id]"] for line in lines[2:])
        assert any(line.split()[:2] == ["GET", "/api/users"] for line in lines[2:])

    def test_empty(self, tmp_path, capsys: pytest.CaptureFixture[str]) -> None:
        main(["routes", str(tmp_path), "--log-level", "error"])
        assert "No mock routes found." in capsys.readouterr().out

    def test_explain(self, mock_tree, capsys: pytest.CaptureFixture[str]) -> None:
        root = mock_tree(
            {
                "a.get.json": "{}",
                ".draft.get.json": "{}",
                "notes.md": "",
            }
        )
        main(["routes", str(root), "--explain", "--log-level", "error"])
        out = capsys.readouterr().out
        assert "Skipped:" in out
        assert "GET /.draft: ignore-prefix" in out
        assert "ignore-prefix=fail" in out
        assert "Ignored:" in out
        assert "file.supported=fail" in out
        assert "ignore-prefix: 1, unsupported: 1" in out

    def test_ignore_prefix(self, mock_tree, capsys: pytest.CaptureFixture[str]) -> None:
        root = mock_tree(
            {
                "_draft.get.json": "{}",
                "~old.get.json": "{}",
                ".dotted.get.json": "{}",
                "a.get.json": "{}",
            }
        )
        main(
            [
                "routes",
                str(root),
                "--ignore-prefix",
                "_",
                "--ignore-prefix",
                "~",
                "--log-level",
                "error",
            ]
        )
        paths = [line.split()[1] for line in capsys.readouterr().out.splitlines()[2:]]
        # Explicit prefixes replace the "." default
        assert sorted(paths) == ["/.dotted", "/a"]

    def test_invalid_pattern_exits(self, tmp_path, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["routes", str(tmp_path), "--include", "(bad", "--log-level", "error"])
        assert exc_info.value.code == 1
        assert "Invalid include pattern" in capsys.readouterr().err


class TestBuildConfig:
    def test_serve_flags(self) -> None:
        args = argparse.Namespace(
            dirs=["mock", "fixtures"],
            prefix="/api",
            include=None,
            exclude=["secret"],
            ignore_prefix=["_", "."],
            log_level="debug",
            host="0.0.0.0",
            port=9000,
            watch=False,
            debug=True,
        )
        config = build_config(args)
        assert config.dirs == ("mock", "fixtures")
        assert config.exclude == ("secret",)
        assert config.include is None
        assert config.ignore_prefix == ("_", ".")
        assert (config.host, config.port) == ("0.0.0.0", 9000)
        assert config.watch is False
        assert config.debug is True

    def test_defaults_kept_without_host_port(self) -> None:
        args = argparse.Namespace(
            dirs=["mock"], prefix="", include=None, exclude=None, log_level="info"
        )
        config = build_config(args)
        assert (config.host, config.port) == ("127.0.0.1", 8080)
        assert config.watch is False
        assert config.ignore_prefix is None
