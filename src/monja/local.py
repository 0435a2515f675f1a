"""Local state: classify every local file against the index and repo."""

from __future__ import annotations

import os
from collections.abc import Iterator
from dataclasses import dataclass, field
from pathlib import Path

from ._ignore import IgnoreMatcher
from .exceptions import LocalWalkError
from .index import FileIndex, IndexKind, diff_removed
from .paths import LocalFilePath
from .profile import Profile
from .repo import RepoState


@dataclass
class LocalState:
    """Disjoint partitions of the walked local files.

    ``old_files_since_last_pull`` is informational and may overlap
    ``untracked``.
    """
    files_to_push: dict[str, list[LocalFilePath]] = field(default_factory=dict)
    files_with_missing_sets: dict[str, list[LocalFilePath]] = field(default_factory=dict)
    missing_files: dict[str, list[LocalFilePath]] = field(default_factory=dict)
    untracked_files: list[LocalFilePath] = field(default_factory=list)
    old_files_since_last_pull: list[LocalFilePath] = field(default_factory=list)

    @property
    def consistent(self) -> bool:
        return not self.files_with_missing_sets and not self.missing_files


def walk_local(profile: Profile) -> Iterator[LocalFilePath]:
    """Yield every unignored regular file under the local root.

    The repo root is pruned, special filenames are skipped, and
    directories matched by ``.monjaignore`` are not descended into.
    Symlinked directories are not followed.  Output is sorted per
    directory.
    """
    root = profile.local_root.path
    repo_root = profile.repo_root.path
    matcher = IgnoreMatcher(root)

    def _raise(exc: OSError) -> None:
        raise LocalWalkError(f"Unable to read {exc.filename}: {exc.strerror}") from exc

    for dirpath, dirnames, filenames in os.walk(root, onerror=_raise):
        dp = Path(dirpath)
        rel_dir = dp.relative_to(root).as_posix()
        prefix = "" if rel_dir == "." else rel_dir + "/"

        kept = []
        for dname in sorted(dirnames):
            if dp / dname == repo_root:
                continue
            if matcher.is_ignored(prefix + dname, is_dir=True):
                continue
            kept.append(dname)
        dirnames[:] = kept

        for fname in sorted(filenames):
            if fname in profile.special_files:
                continue
            if not (dp / fname).is_file():
                continue
            rel = prefix + fname
            if matcher.is_ignored(rel):
                continue
            yield LocalFilePath(rel)


def retrieve_state(
    profile: Profile,
    repo: RepoState,
    *,
    index: FileIndex | None = None,
) -> LocalState:
    """Classify local files.  Reads only; neither the index nor *repo* change."""
    if index is None:
        index = FileIndex.load(profile, IndexKind.CURRENT)
    previous = FileIndex.load(profile, IndexKind.PREVIOUS)

    state = LocalState()
    walked: list[LocalFilePath] = []
    for local_path in walk_local(profile):
        walked.append(local_path)
        set_name = index.get(local_path)
        if set_name is None:
            state.untracked_files.append(local_path)
            continue

        owning = repo.get(set_name)
        if owning is None:
            state.files_with_missing_sets.setdefault(set_name, []).append(local_path)
        elif not owning.tracks_file(local_path):
            state.missing_files.setdefault(set_name, []).append(local_path)
        else:
            state.files_to_push.setdefault(set_name, []).append(local_path)

    state.old_files_since_last_pull = diff_removed(previous, index, walked)
    return state
