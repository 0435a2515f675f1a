"""Clean: remove local files that no set provides any more."""

from __future__ import annotations

import os

from ..exceptions import CleanError
from ..index import old_files_since_last_pull
from ..local import retrieve_state
from ..paths import LocalFilePath
from ..profile import ExecutionOptions, Profile
from ..repo import initialize_full_state
from ._types import CleanMode, CleanResult


def _full_candidates(profile: Profile) -> list[LocalFilePath]:
    repo = initialize_full_state(profile)
    state = retrieve_state(profile, repo)
    candidates = list(state.untracked_files)
    for paths in state.files_with_missing_sets.values():
        candidates.extend(paths)
    for paths in state.missing_files.values():
        candidates.extend(paths)
    return sorted(candidates)


def clean(profile: Profile, opts: ExecutionOptions, mode: CleanMode = CleanMode.INDEX) -> CleanResult:
    """Delete stale local files.

    ``CleanMode.INDEX`` removes what the last pull left behind, judged
    from the two index generations.  ``CleanMode.FULL`` removes every
    local file that is untracked or whose set or repo file is gone;
    ignored files are never touched in either mode.

    Raises:
        RepoStateError: The repo could not be loaded (full mode).
        CleanError: A file could not be removed.  Files removed before
            the failure are listed on the exception.
    """
    if mode == CleanMode.FULL:
        candidates = _full_candidates(profile)
    else:
        candidates = old_files_since_last_pull(profile)

    result = CleanResult()
    for local_path in candidates:
        if not opts.dry_run:
            path = local_path.to_path(profile.local_root)
            try:
                os.remove(path)
            except OSError as exc:
                raise CleanError(path, exc, list(result.files_cleaned)) from exc
        result.files_cleaned.append(local_path)
    return result
