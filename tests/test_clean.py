"""Tests for the clean operation."""

import os

import pytest

from monja.exceptions import CleanError
from monja.index import FileIndex, IndexKind
from monja.operation import CleanMode, clean, pull
from monja.paths import LocalFilePath


def _paths(*raw):
    return [LocalFilePath(p) for p in raw]


@pytest.fixture
def dropped(ws):
    """Pulled twice; the second pull no longer provides the nvim set."""
    ws.set_file("base", ".bashrc")
    ws.make_set("nvim", shortcut=".config/nvim")
    ws.set_file("nvim", "init.lua")
    ws.set_file("nvim", "lua/plugins.lua")
    ws.write_profile(["base", "nvim"])
    pull(ws.profile(), ws.opts())
    ws.write_profile(["base"])
    pull(ws.profile(), ws.opts())
    return ws


class TestIndexClean:
    def test_removes_files_left_by_pull(self, dropped):
        ws = dropped
        result = clean(ws.profile(), ws.opts(), CleanMode.INDEX)
        assert result.files_cleaned == _paths(".config/nvim/init.lua", ".config/nvim/lua/plugins.lua")
        assert not (ws.local / ".config/nvim/init.lua").exists()
        assert (ws.local / ".bashrc").exists()

    def test_idempotent(self, dropped):
        ws = dropped
        clean(ws.profile(), ws.opts(), CleanMode.INDEX)
        assert clean(ws.profile(), ws.opts(), CleanMode.INDEX).files_cleaned == []

    def test_default_mode_is_index(self, dropped):
        ws = dropped
        assert len(clean(ws.profile(), ws.opts()).files_cleaned) == 2

    def test_respects_ignore(self, dropped):
        ws = dropped
        ws.local_file(".monjaignore", "plugins.lua\n")
        result = clean(ws.profile(), ws.opts(), CleanMode.INDEX)
        assert result.files_cleaned == _paths(".config/nvim/init.lua")
        assert (ws.local / ".config/nvim/lua/plugins.lua").exists()

    def test_dry_run(self, dropped):
        ws = dropped
        result = clean(ws.profile(), ws.opts(dry_run=True), CleanMode.INDEX)
        assert len(result.files_cleaned) == 2
        assert (ws.local / ".config/nvim/init.lua").exists()

    def test_does_not_need_repo(self, dropped):
        ws = dropped
        (ws.repo / "broken").mkdir()
        (ws.repo / "broken" / ".monja-set.toml").write_text("shortcut = '..'\n")
        assert len(clean(ws.profile(), ws.opts(), CleanMode.INDEX).files_cleaned) == 2


class TestFullClean:
    def test_removes_untracked_and_orphaned(self, ws):
        ws.set_file("base", ".bashrc")
        ws.set_file("base", ".vimrc")
        ws.write_profile(["base"])
        pull(ws.profile(), ws.opts())
        ws.local_file("untracked")
        (ws.repo / "base" / ".vimrc").unlink()
        profile = ws.profile()
        index = FileIndex.load(profile, IndexKind.CURRENT)
        ws.local_file(".orphan")
        index.set(LocalFilePath(".orphan"), "ghost")
        index.save(profile, IndexKind.CURRENT)

        result = clean(profile, ws.opts(), CleanMode.FULL)
        assert result.files_cleaned == _paths(".orphan", ".vimrc", "untracked")
        assert (ws.local / ".bashrc").exists()
        for name in (".orphan", ".vimrc", "untracked"):
            assert not (ws.local / name).exists()

    def test_ignored_files_survive(self, ws):
        ws.write_profile([])
        ws.local_file(".monjaignore", "keep\n")
        ws.local_file("keep")
        ws.local_file("drop")
        result = clean(ws.profile(), ws.opts(), CleanMode.FULL)
        assert result.files_cleaned == _paths("drop")
        assert (ws.local / "keep").exists()
        assert (ws.local / ".monjaignore").exists()

    def test_dry_run(self, ws):
        ws.write_profile([])
        ws.local_file("drop")
        result = clean(ws.profile(), ws.opts(dry_run=True), CleanMode.FULL)
        assert result.files_cleaned == _paths("drop")
        assert (ws.local / "drop").exists()


@pytest.mark.skipif(os.name == "nt" or os.geteuid() == 0, reason="needs POSIX permissions as non-root")
class TestCleanFailure:
    def test_reports_files_already_removed(self, ws):
        ws.write_profile([])
        ws.local_file("a")
        locked = ws.local / "locked"
        ws.local_file("locked/b")
        locked.chmod(0o555)
        try:
            with pytest.raises(CleanError) as exc_info:
                clean(ws.profile(), ws.opts(), CleanMode.FULL)
        finally:
            locked.chmod(0o755)
        assert exc_info.value.files_cleaned == _paths("a")
        assert not (ws.local / "a").exists()
