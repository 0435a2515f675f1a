"""Push: copy tracked local files back into the sets that own them."""

from __future__ import annotations

from ..exceptions import ConsistencyError
from ..local import retrieve_state
from ..profile import ExecutionOptions, Profile, order_set_names
from ..repo import initialize_full_state
from ._types import PushResult, SetFiles


def _ordered(target_sets, groups) -> SetFiles:
    return [(name, sorted(groups[name])) for name in order_set_names(target_sets, groups)]


def push(profile: Profile, opts: ExecutionOptions) -> PushResult:
    """Push every tracked local file of a targeted set to the repo.

    Nothing is transferred unless every indexed local file still has
    both its set and its file in the repo.

    Raises:
        RepoStateError: The repo could not be loaded.
        ConsistencyError: Carries every file whose set is gone and every
            file its set no longer tracks.
        TransferError: The transfer tool failed.
    """
    target_sets = profile.target_sets
    repo = initialize_full_state(profile)
    state = retrieve_state(profile, repo)

    if not state.consistent:
        raise ConsistencyError(
            _ordered(target_sets, state.files_with_missing_sets),
            _ordered(target_sets, state.missing_files),
        )

    result = PushResult()
    for set_name, paths in _ordered(target_sets, state.files_to_push):
        if set_name not in target_sets:
            result.files_not_targeted.append((set_name, paths))
            continue
        result.files_pushed.append((set_name, paths))

    if not opts.dry_run:
        for set_name, paths in result.files_pushed:
            set_ = repo.sets[set_name]
            opts.transfer(
                set_.shortcut.to_path(profile.local_root),
                set_.root.path,
                [set_.files[p].path_in_set for p in paths],
                verbose=opts.verbosity > 0,
            )
    return result
