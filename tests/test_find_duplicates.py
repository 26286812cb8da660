"""End-to-end tests for the command line entry point."""

import logging
import os

import pytest

from duplicate_resolver import Action
from find_duplicates import main, parse_args, run


class TestParseArgs:

    def test_defaults(self):
        args = parse_args(["/some/dir"])
        assert args.directory == "/some/dir"
        assert args.action is Action.REPORT_ONLY
        assert args.verify is False

    @pytest.mark.parametrize("flag,action", [
        ("--list", Action.REPORT_ONLY),
        ("--delete", Action.DELETE),
        ("--hardlink", Action.HARD_LINK),
    ])
    def test_action_flags(self, flag, action):
        assert parse_args(["dir", flag]).action is action

    def test_actions_are_exclusive(self):
        with pytest.raises(SystemExit):
            parse_args(["dir", "--delete", "--hardlink"])


class TestRun:

    def test_scenario_report(self, tmp_path, make_file, capsys):
        make_file("a.txt", "X", mtime=1_000)
        make_file("b.txt", "X", mtime=2_000)
        make_file("c.txt", "Y", mtime=500)

        assert run(tmp_path) == 0

        out = capsys.readouterr().out
        assert "Found 3 files" in out
        assert "Found 1 groups of duplicates" in out
        assert "Duplicate group (2 files)" in out
        assert f"Original: {tmp_path / 'a.txt'}" in out
        assert f"Duplicate: {tmp_path / 'b.txt'}" in out
        assert "c.txt" not in out
        assert "Hash: 1_" in out

    def test_empty_directory(self, tmp_path, capsys):
        assert run(tmp_path) == 0
        out = capsys.readouterr().out
        assert "Found 0 files" in out
        assert "No duplicates found." in out

    def test_missing_root_is_fatal(self, tmp_path, capsys, caplog):
        with caplog.at_level(logging.ERROR):
            assert run(tmp_path / "missing") == 1
        assert capsys.readouterr().out == ""
        assert "does not exist" in caplog.text

    def test_delete_prints_summary(self, tmp_path, make_file, capsys):
        make_file("a.txt", "XYZ", mtime=1_000)
        make_file("b.txt", "XYZ", mtime=2_000)

        assert run(tmp_path, Action.DELETE) == 0

        out = capsys.readouterr().out
        assert f"Deleted: {tmp_path / 'b.txt'}" in out
        assert "reclaimed: 3 bytes" in out
        assert not (tmp_path / "b.txt").exists()

    def test_delete_failure_still_exits_zero(self, tmp_path, make_file, capsys, caplog, monkeypatch):
        make_file("a.txt", "XYZ", mtime=1_000)
        make_file("b.txt", "XYZ", mtime=2_000)

        def deny(path):
            raise PermissionError(13, "Permission denied", str(path))

        monkeypatch.setattr(os, "remove", deny)
        with caplog.at_level(logging.WARNING):
            assert run(tmp_path, Action.DELETE) == 0

        assert "Delete failed" in capsys.readouterr().out
        assert "Could not delete" in caplog.text

    def test_lost_file_is_logged_as_error(self, tmp_path, make_file, capsys, caplog, monkeypatch):
        make_file("a.txt", "XYZ", mtime=1_000)
        make_file("b.txt", "XYZ", mtime=2_000)

        def deny(src, dst):
            raise OSError(18, "Invalid cross-device link", str(dst))

        monkeypatch.setattr(os, "link", deny)
        with caplog.at_level(logging.WARNING):
            assert run(tmp_path, Action.HARD_LINK) == 0

        out = capsys.readouterr().out
        assert "file is gone" in out
        assert "removed without link: 1" in out
        errors = [r for r in caplog.records if r.levelno == logging.ERROR]
        assert len(errors) == 1
        assert "b.txt" in errors[0].getMessage()

    def test_hardlink(self, tmp_path, make_file, capsys):
        make_file("a.txt", "XYZ", mtime=1_000)
        make_file("b.txt", "XYZ", mtime=2_000)

        assert run(tmp_path, Action.HARD_LINK) == 0

        assert "Created hardlink" in capsys.readouterr().out
        assert os.path.samefile(tmp_path / "a.txt", tmp_path / "b.txt")


class TestMain:

    def test_missing_root_exit_code(self, tmp_path, capsys):
        assert main([str(tmp_path / "missing")]) == 1
        assert capsys.readouterr().out == ""

    def test_list_is_side_effect_free(self, tmp_path, make_file, capsys):
        make_file("a.txt", "X", mtime=1_000)
        make_file("b.txt", "X", mtime=2_000)

        assert main([str(tmp_path), "--verify", "-q"]) == 0

        assert sorted(p.name for p in tmp_path.iterdir()) == ["a.txt", "b.txt"]
        assert "Duplicate group (2 files)" in capsys.readouterr().out
