"""Tests for loading sets from the repo."""

import os

import pytest

from monja.exceptions import RepoStateError, SetConfigError, SetExistsError, SetWalkError
from monja.paths import LocalFilePath, SetShortcut
from monja.repo import SetConfig, create_empty_set, initialize_full_state


class TestInitializeFullState:
    def test_empty_repo(self, ws):
        ws.write_profile([])
        repo = initialize_full_state(ws.profile())
        assert len(repo) == 0

    def test_sets_and_files(self, ws):
        ws.set_file("base", ".bashrc")
        ws.set_file("base", ".config/git/config")
        ws.set_file("work", "notes.txt")
        ws.write_profile(["base"])
        repo = initialize_full_state(ws.profile())

        assert sorted(s.name for s in repo) == ["base", "work"]
        base = repo.get("base")
        assert sorted(p.path for p in base.files) == [".bashrc", ".config/git/config"]
        record = base.files[LocalFilePath(".config/git/config")]
        assert record.owning_set == "base"
        assert record.path_in_set == ".config/git/config"

    def test_shortcut_applied(self, ws):
        ws.make_set("nvim", shortcut=".config/nvim")
        ws.set_file("nvim", "init.lua")
        ws.write_profile(["nvim"])
        repo = initialize_full_state(ws.profile())

        s = repo.get("nvim")
        assert s.shortcut == SetShortcut(".config/nvim")
        assert s.tracks_file(LocalFilePath(".config/nvim/init.lua"))
        assert s.files[LocalFilePath(".config/nvim/init.lua")].path_in_set == "init.lua"

    def test_special_files_skipped(self, ws):
        ws.make_set("base", shortcut="")
        ws.set_file("base", ".monjaignore")
        ws.set_file("base", "sub/.monja-dir.toml")
        ws.set_file("base", "real")
        ws.write_profile(["base"])
        repo = initialize_full_state(ws.profile())
        assert list(repo.get("base").files) == [LocalFilePath("real")]

    def test_git_dir_and_plain_files_not_sets(self, ws):
        (ws.repo / ".git").mkdir()
        (ws.repo / ".git" / "HEAD").write_text("ref: refs/heads/main\n")
        (ws.repo / "README.md").write_text("readme")
        ws.set_file("base", "a")
        ws.write_profile(["base"])
        repo = initialize_full_state(ws.profile())
        assert ".git" not in repo
        assert "README.md" not in repo
        assert "base" in repo

    @pytest.mark.skipif(not hasattr(os, "symlink"), reason="symlinks unsupported")
    def test_symlinks_skipped(self, ws):
        target = ws.set_file("base", "real")
        (ws.repo / "base" / "link").symlink_to(target)
        ws.write_profile(["base"])
        repo = initialize_full_state(ws.profile())
        assert list(repo.get("base").files) == [LocalFilePath("real")]

    def test_errors_accumulated_across_sets(self, ws):
        ws.make_set("bad1", shortcut="..")
        ws.make_set("bad2", shortcut="/etc")
        ws.make_set("bad3")
        (ws.repo / "bad3" / ".monja-set.toml").write_text("shortcut = [")
        ws.set_file("good", "a")
        ws.write_profile(["good"])

        with pytest.raises(RepoStateError) as exc_info:
            initialize_full_state(ws.profile())
        errors = exc_info.value.errors
        assert len(errors) == 3
        assert all(isinstance(e, SetConfigError) for e in errors)
        assert sorted(e.set_name for e in errors) == ["bad1", "bad2", "bad3"]

    def test_non_utf8_file_name(self, ws):
        ws.set_file("base", "good")
        ws.raw_set_file("base", b"bad\xff")
        ws.set_file("other", "fine")
        ws.raw_set_file("other", b"\xfeother")
        ws.write_profile(["base"])
        with pytest.raises(RepoStateError) as exc_info:
            initialize_full_state(ws.profile())
        errors = exc_info.value.errors
        assert [type(e) for e in errors] == [SetWalkError, SetWalkError]
        assert [e.set_name for e in errors] == ["base", "other"]
        assert "not valid UTF-8" in str(errors[0])

    def test_non_string_shortcut(self, ws):
        ws.make_set("bad")
        (ws.repo / "bad" / ".monja-set.toml").write_text("shortcut = 3\n")
        ws.write_profile([])
        with pytest.raises(RepoStateError):
            initialize_full_state(ws.profile())


class TestSetConfig:
    def test_round_trip(self, ws):
        ws.make_set("base")
        ws.write_profile(["base"])
        profile = ws.profile()
        SetConfig(shortcut=".config").save(profile, "base")
        assert SetConfig.load(profile, "base").shortcut == ".config"

    def test_missing_file_is_default(self, ws):
        ws.make_set("base")
        ws.write_profile(["base"])
        config = SetConfig.load(ws.profile(), "base")
        assert config.shortcut is None
        assert config.validated_shortcut("base") == SetShortcut("")

    def test_comment_only_file(self, ws):
        ws.make_set("base")
        (ws.repo / "base" / ".monja-set.toml").write_text("# shortcut = '.config'\n")
        ws.write_profile(["base"])
        assert SetConfig.load(ws.profile(), "base").shortcut is None

    def test_failed_save_keeps_file(self, ws):
        ws.make_set("base", shortcut=".config")
        ws.write_profile(["base"])
        profile = ws.profile()
        with pytest.raises(SetConfigError):
            SetConfig(shortcut=".config\udcff").save(profile, "base")
        assert SetConfig.load(profile, "base").shortcut == ".config"
        assert sorted(p.name for p in (ws.repo / "base").iterdir()) == [".monja-set.toml"]


class TestCreateEmptySet:
    def test_creates_directory(self, ws):
        ws.write_profile([])
        path = create_empty_set(ws.profile(), "fresh")
        assert path.is_dir()

    def test_existing_set(self, ws):
        ws.make_set("base")
        ws.write_profile([])
        with pytest.raises(SetExistsError):
            create_empty_set(ws.profile(), "base")
