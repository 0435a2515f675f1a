"""Shared fixtures for monja tests."""

import os
import shutil
from pathlib import Path

import pytest
from click.testing import CliRunner

from monja.profile import SET_CONFIG_FILENAME, ExecutionOptions, Profile, ProfileConfig


class CopyTransfer:
    """Stand-in for rsync with the same contract, recording every call."""

    def __init__(self):
        self.calls = []

    def __call__(self, source, dest, files, *, verbose=False):
        files = list(files)
        self.calls.append((Path(source), Path(dest), files))
        for rel in files:
            target = Path(dest) / rel
            target.parent.mkdir(parents=True, exist_ok=True)
            shutil.copy2(Path(source) / rel, target)


class Workspace:
    """A local tree, a repo and a data dir under one tmp directory."""

    def __init__(self, root: Path):
        self.root = root
        self.local = root / "home"
        self.repo = root / "repo"
        self.data = root / "data"
        for d in (self.local, self.repo, self.data):
            d.mkdir()
        self.profile_path = root / "monja-profile.toml"
        self.transfer = CopyTransfer()

    def opts(self, **kwargs) -> ExecutionOptions:
        kwargs.setdefault("transfer", self.transfer)
        return ExecutionOptions(**kwargs)

    def write_profile(self, target_sets, new_file_set=None, repo_dir=None):
        config = ProfileConfig(Path(repo_dir or self.repo), list(target_sets), new_file_set)
        config.save(self.profile_path)

    def profile(self) -> Profile:
        return Profile.load(self.profile_path, self.local, self.data)

    def make_set(self, name, shortcut=None):
        path = self.repo / name
        path.mkdir(parents=True, exist_ok=True)
        if shortcut is not None:
            (path / SET_CONFIG_FILENAME).write_text(f"shortcut = {shortcut!r}\n")
        return path

    def set_file(self, set_name, path_in_set, content="x"):
        path = self.repo / set_name / path_in_set
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content)
        return path

    def local_file(self, rel, content="x"):
        path = self.local / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content)
        return path

    def raw_set_file(self, set_name, raw_name: bytes, content=b"x"):
        """Create a set file whose name is arbitrary bytes, or skip the test."""
        directory = os.fsencode(self.repo / set_name)
        os.makedirs(directory, exist_ok=True)
        try:
            with open(os.path.join(directory, raw_name), "wb") as f:
                f.write(content)
        except (OSError, ValueError):
            pytest.skip("filesystem rejects non-UTF-8 file names")

    def read_local(self, rel):
        return (self.local / rel).read_text()

    def read_set(self, set_name, path_in_set):
        return (self.repo / set_name / path_in_set).read_text()


@pytest.fixture
def ws(tmp_path):
    return Workspace(tmp_path)


# ---------------------------------------------------------------------------
# CLI fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def cli_args(ws):
    """Global options pointing the CLI at the workspace."""
    return [
        "--profile", str(ws.profile_path),
        "--local-root", str(ws.local),
        "--data-dir", str(ws.data),
    ]
