"""Put / fix: copy local files straight into a chosen set."""

from __future__ import annotations

import shutil
from collections.abc import Sequence

from .._lock import maybe_index_lock
from ..exceptions import NotValidFileError, SetNotFoundError
from ..index import FileIndex, IndexKind
from ..paths import LocalFilePath
from ..profile import ExecutionOptions, Profile
from ..repo import initialize_full_state
from ._types import PutResult


def put(
    profile: Profile,
    opts: ExecutionOptions,
    files: Sequence[LocalFilePath],
    owning_set: str,
    update_index: bool = False,
) -> PutResult:
    """Copy *files* into *owning_set*, bypassing the index and push checks.

    Every file is validated before anything is copied.  With
    *update_index* the current index records *owning_set* as the new
    owner, which repairs drift that blocks a push.

    Raises:
        RepoStateError: The repo could not be loaded.
        SetNotFoundError: *owning_set* does not exist.
        NotValidFileError: A path is not a regular local file.
        SetPathError: A path is outside the set's shortcut.
    """
    repo = initialize_full_state(profile)
    dest = repo.get(owning_set)
    if dest is None:
        raise SetNotFoundError(owning_set)

    copies = []
    for local_path in files:
        source = local_path.to_path(profile.local_root)
        if not source.is_file():
            raise NotValidFileError(source)
        copies.append((local_path, source, dest.repo_path_for(local_path)))

    if not opts.dry_run:
        for _local_path, source, target in copies:
            target.parent.mkdir(parents=True, exist_ok=True)
            shutil.copy2(source, target)

    owning_rank = profile.precedence(owning_set)
    targeted = [repo.sets[name] for name in dict.fromkeys(profile.target_sets) if name in repo]

    result = PutResult(owning_set=owning_set, set_is_targeted=owning_rank is not None)
    for local_path in files:
        result.files.append(local_path)
        # repo state predates the copy, so the destination counts as
        # tracking the file whenever it is targeted
        tracked = owning_rank is not None
        later = []
        for set_ in targeted:
            if set_.name == owning_set or not set_.tracks_file(local_path):
                continue
            tracked = True
            if owning_rank is None or profile.precedence(set_.name) > owning_rank:
                later.append(set_.name)
        if later:
            result.files_in_later_sets.append((local_path, later))
        if not tracked:
            result.untracked_files.append(local_path)

    if update_index:
        with maybe_index_lock(profile.data_root, dry_run=opts.dry_run):
            index = FileIndex.load(profile, IndexKind.CURRENT)
            for local_path in files:
                index.set(local_path, owning_set)
            if not opts.dry_run:
                index.save(profile, IndexKind.CURRENT)

    return result


def fix(
    profile: Profile,
    opts: ExecutionOptions,
    files: Sequence[LocalFilePath],
    owning_set: str,
) -> PutResult:
    """Reassign *files* to *owning_set* in both the repo and the index."""
    return put(profile, opts, files, owning_set, update_index=True)
