"""Tests for the __main__ CLI entry point."""

from __future__ import annotations

import json
import os

import pytest

from filetag import __version__
from filetag.__main__ import build_parser, main
from filetag.persistence import TagStore


def run(capsys, *argv):
    code = main(list(argv))
    out, err = capsys.readouterr()
    return code, out, err


class TestParser:
    def test_global_flags_before_command(self):
        args = build_parser().parse_args(["--db", "x.json", "--json", "tags"])
        assert args.db == "x.json"
        assert args.json is True

    def test_global_flags_after_command(self):
        args = build_parser().parse_args(["search", "work", "--all", "--db", "y.json"])
        assert args.db == "y.json"
        assert args.match_all is True
        assert args.tags == ["work"]

    def test_flag_defaults(self):
        args = build_parser().parse_args(["tags"])
        assert args.db is None
        assert args.json is None


class TestHelpAndVersion:
    def test_no_args_prints_help(self, capsys):
        code, out, _ = run(capsys)
        assert code == 0
        assert "usage: filetag" in out

    def test_help_command(self, capsys):
        code, out, _ = run(capsys, "help")
        assert code == 0
        assert "search" in out
        assert "filetag add document.pdf work important" in out

    @pytest.mark.parametrize("flag", ["--version", "-v"])
    def test_version(self, capsys, flag):
        with pytest.raises(SystemExit) as exc_info:
            main([flag])
        assert exc_info.value.code == 0
        assert __version__ in capsys.readouterr().out


class TestCommandErrors:
    def test_unknown_command_exits_1(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(["frobnicate"])
        assert exc_info.value.code == 1
        assert "Error:" in capsys.readouterr().err

    @pytest.mark.parametrize("argv", [["add", "file.txt"], ["remove"], ["search"], ["list"]])
    def test_missing_arguments_exit_1(self, capsys, argv):
        with pytest.raises(SystemExit) as exc_info:
            main(argv)
        assert exc_info.value.code == 1

    def test_add_missing_file(self, capsys, db_path, tmp_path):
        code, _, err = run(capsys, "--db", str(db_path), "add", str(tmp_path / "nope"), "t")
        assert code == 1
        assert "Error:" in err
        assert "File not found" in err

    def test_blank_tag(self, capsys, db_path, sample_file):
        code, _, err = run(capsys, "--db", str(db_path), "add", str(sample_file), "  ")
        assert code == 1
        assert "empty" in err

    def test_store_not_utf8(self, capsys, db_path):
        db_path.write_bytes(b"\xff\xfe\x00garbage")
        code, _, err = run(capsys, "--db", str(db_path), "tags")
        assert code == 1
        assert "not valid JSON" in err

    def test_corrupt_store(self, capsys, db_path):
        db_path.write_text("{{{")
        code, _, err = run(capsys, "--db", str(db_path), "tags")
        assert code == 1
        assert "not valid JSON" in err


class TestCommands:
    def test_add_and_list(self, capsys, db_path, sample_file):
        code, out, _ = run(capsys, "--db", str(db_path), "add", str(sample_file), "Work", "home")
        assert code == 0
        assert f"Tags added to {sample_file}:" in out
        assert "work, home" in out

        code, out, _ = run(capsys, "--db", str(db_path), "list", str(sample_file))
        assert code == 0
        assert "work, home" in out

    def test_list_untagged(self, capsys, db_path, sample_file):
        _, out, _ = run(capsys, "--db", str(db_path), "list", str(sample_file))
        assert "(no tags)" in out

    def test_remove(self, capsys, db_path, sample_file):
        run(capsys, "--db", str(db_path), "add", str(sample_file), "a", "b")
        _, out, _ = run(capsys, "--db", str(db_path), "remove", str(sample_file), "a")
        assert "Remaining tags for" in out
        assert "b" in out.splitlines()[-1]

        _, out, _ = run(capsys, "--db", str(db_path), "remove", str(sample_file), "b")
        assert "(no tags)" in out

    def test_search_any_and_all(self, capsys, db_path, three_files):
        file1, file2, file3 = three_files
        store = TagStore(db_path)
        store.add_tags(file1, ["work", "important"])
        store.add_tags(file2, ["work", "draft"])
        store.add_tags(file3, ["personal", "important"])

        _, out, _ = run(capsys, "--db", str(db_path), "search", "work")
        assert "Files with tag work (any):" in out
        assert f"  {os.path.abspath(file1)}" in out
        assert f"  {os.path.abspath(file2)}" in out
        assert str(file3) not in out

        _, out, _ = run(capsys, "--db", str(db_path), "search", "work", "important", "--all")
        assert "Files with tags work, important (all):" in out
        assert str(file1) in out
        assert str(file2) not in out

    def test_search_no_results(self, capsys, db_path):
        _, out, _ = run(capsys, "--db", str(db_path), "search", "ghost")
        assert "(no files found)" in out

    def test_tags(self, capsys, db_path, three_files):
        TagStore(db_path).add_tags(three_files[0], ["zeta", "alpha"])
        _, out, _ = run(capsys, "--db", str(db_path), "tags")
        lines = out.splitlines()
        assert lines[0] == "All tags:"
        assert lines[1:] == ["  alpha", "  zeta"]

    def test_all(self, capsys, db_path, sample_file):
        TagStore(db_path).add_tags(sample_file, ["a"])
        _, out, _ = run(capsys, "--db", str(db_path), "all")
        assert "All files and tags:" in out
        assert f"{os.path.abspath(sample_file)}:" in out
        assert "  Tags: a" in out
        assert "  Created:" in out

    def test_all_empty(self, capsys, db_path):
        _, out, _ = run(capsys, "--db", str(db_path), "all")
        assert "(no files tagged)" in out

    def test_clear(self, capsys, db_path, sample_file):
        TagStore(db_path).add_tags(sample_file, ["a"])
        code, out, _ = run(capsys, "--db", str(db_path), "clear", str(sample_file))
        assert code == 0
        assert f"All tags cleared from {sample_file}" in out
        assert TagStore(db_path).list_all() == {}

    def test_default_db_in_cwd(self, capsys, tmp_path, sample_file, monkeypatch):
        monkeypatch.chdir(tmp_path)
        run(capsys, "add", sample_file.name, "here")
        assert (tmp_path / ".filetag.json").exists()

    def test_paths_with_brackets_survive_markup(self, capsys, db_path, tmp_path):
        odd = tmp_path / "[draft] notes.txt"
        odd.write_text("x")
        _, out, _ = run(capsys, "--db", str(db_path), "add", str(odd), "[b]")
        assert "[draft] notes.txt" in out
        assert "[b]" in out


class TestJsonOutput:
    def test_add(self, capsys, db_path, sample_file):
        _, out, _ = run(capsys, "--json", "--db", str(db_path), "add", str(sample_file), "A")
        assert json.loads(out) == {"path": os.path.abspath(sample_file), "tags": ["a"]}

    def test_search(self, capsys, db_path, sample_file):
        TagStore(db_path).add_tags(sample_file, ["a"])
        _, out, _ = run(capsys, "--db", str(db_path), "search", "a", "--json")
        assert json.loads(out) == {
            "tags": ["a"],
            "match_all": False,
            "files": [os.path.abspath(sample_file)],
        }

    def test_tags_and_all(self, capsys, db_path, sample_file):
        TagStore(db_path).add_tags(sample_file, ["b", "a"])
        _, out, _ = run(capsys, "--json", "--db", str(db_path), "tags")
        assert json.loads(out) == ["a", "b"]

        _, out, _ = run(capsys, "--json", "--db", str(db_path), "all")
        assert json.loads(out) == json.loads(db_path.read_text())

    def test_clear(self, capsys, db_path, sample_file):
        _, out, _ = run(capsys, "--json", "--db", str(db_path), "clear", str(sample_file))
        assert json.loads(out) == {"path": os.path.abspath(sample_file), "cleared": True}


class TestPreferencesIntegration:
    def test_preferred_db_path(self, capsys, tmp_path, sample_file, _isolated_preferences):
        prefs = _isolated_preferences
        prefs.parent.mkdir(parents=True)
        target = tmp_path / "from-prefs.json"
        prefs.write_text(f'store:\n  path: "{target}"\n')

        run(capsys, "add", str(sample_file), "x")
        assert TagStore(target).get_tags(sample_file) == ["x"]

    def test_json_preference_and_flag_precedence(self, capsys, db_path, _isolated_preferences):
        prefs = _isolated_preferences
        prefs.parent.mkdir(parents=True)
        prefs.write_text("output:\n  json: true\n")

        _, out, _ = run(capsys, "--db", str(db_path), "tags")
        assert json.loads(out) == []

    def test_db_flag_beats_preference(self, capsys, tmp_path, db_path, sample_file, _isolated_preferences):
        prefs = _isolated_preferences
        prefs.parent.mkdir(parents=True)
        prefs.write_text(f'store:\n  path: "{tmp_path / "ignored.json"}"\n')

        run(capsys, "--db", str(db_path), "add", str(sample_file), "x")
        assert db_path.exists()
        assert not (tmp_path / "ignored.json").exists()
