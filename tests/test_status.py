"""Tests for local_status."""

import pytest

from monja.index import FileIndex, IndexKind
from monja.operation import local_status, pull
from monja.paths import LocalFilePath


def _paths(*raw):
    return [LocalFilePath(p) for p in raw]


@pytest.fixture
def mixed(ws):
    ws.set_file("base", ".bashrc")
    ws.make_set("nvim", shortcut=".config/nvim")
    ws.set_file("nvim", "init.lua")
    ws.set_file("extra", ".extra")
    ws.write_profile(["nvim", "base"])
    profile = ws.profile()
    pull(profile, ws.opts())
    ws.local_file(".config/untracked")
    ws.local_file("top-untracked")
    ws.local_file(".extra")
    index = FileIndex.load(profile, IndexKind.CURRENT)
    index.set(LocalFilePath(".extra"), "extra")
    index.save(profile, IndexKind.CURRENT)
    return ws


class TestLocalStatus:
    def test_whole_tree(self, mixed):
        st = local_status(mixed.profile())
        assert st.files_to_push == [
            ("nvim", _paths(".config/nvim/init.lua")),
            ("base", _paths(".bashrc")),
            ("extra", _paths(".extra")),
        ]
        assert st.untracked_files == _paths(".config/untracked", "top-untracked")
        assert st.files_with_missing_sets == []
        assert st.missing_files == []

    def test_filtered_by_location(self, mixed):
        st = local_status(mixed.profile(), LocalFilePath(".config"))
        assert st.files_to_push == [("nvim", _paths(".config/nvim/init.lua"))]
        assert st.untracked_files == _paths(".config/untracked")

    def test_location_is_a_file(self, mixed):
        st = local_status(mixed.profile(), LocalFilePath(".bashrc"))
        assert st.files_to_push == [("base", _paths(".bashrc"))]
        assert st.untracked_files == []

    def test_problems_reported(self, mixed):
        ws = mixed
        (ws.repo / "base" / ".bashrc").unlink()
        (ws.repo / "extra" / ".extra").unlink()
        (ws.repo / "extra").rmdir()
        st = local_status(ws.profile())
        assert st.missing_files == [("base", _paths(".bashrc"))]
        assert st.files_with_missing_sets == [("extra", _paths(".extra"))]

    def test_old_files_since_last_pull(self, mixed):
        ws = mixed
        ws.write_profile(["base"])
        pull(ws.profile(), ws.opts())
        st = local_status(ws.profile())
        assert st.old_files_since_last_pull == _paths(".config/nvim/init.lua", ".extra")
        assert st.untracked_files == _paths(".config/nvim/init.lua", ".config/untracked", ".extra", "top-untracked")

    def test_read_only(self, mixed):
        ws = mixed
        before = (ws.data / "monja-index.toml").read_text()
        local_status(ws.profile())
        assert (ws.data / "monja-index.toml").read_text() == before
