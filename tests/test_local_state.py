"""Tests for the local walk and local-state classification."""

import pytest

from monja.index import FileIndex, IndexKind
from monja.local import retrieve_state, walk_local
from monja.paths import LocalFilePath
from monja.repo import initialize_full_state


def _paths(*raw):
    return [LocalFilePath(p) for p in raw]


class TestWalkLocal:
    def test_walks_regular_files(self, ws):
        ws.local_file(".bashrc")
        ws.local_file(".config/git/config")
        ws.write_profile([])
        assert sorted(walk_local(ws.profile())) == _paths(".bashrc", ".config/git/config")

    def test_skips_special_files(self, ws):
        ws.local_file("monja-profile.toml")
        ws.local_file("sub/.monja-dir.toml")
        ws.local_file(".monjaignore", "")
        ws.local_file("real")
        ws.write_profile([])
        assert list(walk_local(ws.profile())) == _paths("real")

    def test_respects_ignore_files(self, ws):
        ws.local_file(".monjaignore", "*.log\ncache/\n")
        ws.local_file("a.log")
        ws.local_file("cache/blob")
        ws.local_file("sub/.monjaignore", "!keep.log\n")
        ws.local_file("sub/keep.log")
        ws.local_file("sub/drop.log")
        ws.local_file("keep.txt")
        ws.write_profile([])
        assert sorted(walk_local(ws.profile())) == _paths("keep.txt", "sub/keep.log")

    def test_prunes_repo_inside_local_root(self, ws):
        repo = ws.local / ".local/share/monja/repo"
        (repo / "base").mkdir(parents=True)
        (repo / "base" / "file").write_text("x")
        ws.local_file(".bashrc")
        ws.write_profile([], repo_dir=".local/share/monja/repo")
        assert list(walk_local(ws.profile())) == _paths(".bashrc")


class TestRetrieveState:
    @pytest.fixture
    def setup(self, ws):
        ws.set_file("base", ".bashrc")
        ws.set_file("base", ".vimrc")
        ws.local_file(".bashrc")
        ws.local_file(".vimrc")
        ws.local_file(".gone-set-file")
        ws.local_file(".gone-file")
        ws.local_file("untracked")
        ws.write_profile(["base"])
        profile = ws.profile()
        FileIndex({
            LocalFilePath(".bashrc"): "base",
            LocalFilePath(".vimrc"): "base",
            LocalFilePath(".gone-set-file"): "removed",
            LocalFilePath(".gone-file"): "base",
        }).save(profile, IndexKind.CURRENT)
        return profile

    def test_partitions(self, setup):
        state = retrieve_state(setup, initialize_full_state(setup))
        assert state.files_to_push == {"base": _paths(".bashrc", ".vimrc")}
        assert state.files_with_missing_sets == {"removed": _paths(".gone-set-file")}
        assert state.missing_files == {"base": _paths(".gone-file")}
        assert state.untracked_files == _paths("untracked")
        assert not state.consistent

    def test_partitions_are_disjoint(self, setup):
        state = retrieve_state(setup, initialize_full_state(setup))
        seen = []
        for groups in (state.files_to_push, state.files_with_missing_sets, state.missing_files):
            for paths in groups.values():
                seen.extend(paths)
        seen.extend(state.untracked_files)
        assert len(seen) == len(set(seen)) == 5

    def test_explicit_index(self, setup):
        state = retrieve_state(setup, initialize_full_state(setup), index=FileIndex())
        assert state.consistent
        assert len(state.untracked_files) == 5

    def test_read_only(self, setup, ws):
        before = (ws.data / "monja-index.toml").read_text()
        retrieve_state(setup, initialize_full_state(setup))
        assert (ws.data / "monja-index.toml").read_text() == before
        assert not (ws.data / "monja-index-prev.toml").exists()

    def test_old_files_since_last_pull(self, setup):
        FileIndex({LocalFilePath("untracked"): "base"}).save(setup, IndexKind.PREVIOUS)
        state = retrieve_state(setup, initialize_full_state(setup))
        assert state.old_files_since_last_pull == _paths("untracked")
        assert LocalFilePath("untracked") in state.untracked_files
