"""Pull: layer the target sets onto the local tree and rotate the index."""

from __future__ import annotations

from .._lock import maybe_index_lock
from ..index import FileIndex, IndexKind, diff_removed
from ..layering import group_by_set, layer_sets
from ..local import walk_local
from ..profile import ExecutionOptions, Profile
from ..repo import initialize_full_state
from ._types import PullResult


def pull(profile: Profile, opts: ExecutionOptions) -> PullResult:
    """Copy every target set's winning files to the local tree.

    Sets are transferred one at a time in ``target-sets`` order.  The
    new ownership map becomes the current index and the old current
    index becomes the previous one.

    Raises:
        RepoStateError: The repo could not be loaded.
        MissingSetsError: Target sets are missing; nothing is copied.
        TransferError: The transfer tool failed; the index is untouched.
    """
    target_sets = profile.target_sets
    repo = initialize_full_state(profile)
    winners = layer_sets(repo, target_sets)
    files_pulled = group_by_set(winners, target_sets)

    if not opts.dry_run:
        for set_name, records in files_pulled:
            set_ = repo.sets[set_name]
            # set shortcut foo/bar, file baz:
            #   <repo>/<set>/baz -> <local>/foo/bar/baz
            opts.transfer(
                set_.root.path,
                set_.shortcut.to_path(profile.local_root),
                [r.path_in_set for r in records],
                verbose=opts.verbosity > 0,
            )

    updated = FileIndex({path: record.owning_set for path, record in winners.items()})
    with maybe_index_lock(profile.data_root, dry_run=opts.dry_run):
        retired = FileIndex.load(profile, IndexKind.CURRENT)
        if not opts.dry_run:
            updated.save(profile, IndexKind.CURRENT)
            retired.save(profile, IndexKind.PREVIOUS)

    cleanable = diff_removed(retired, updated, walk_local(profile))
    return PullResult(files_pulled=files_pulled, cleanable_files=cleanable)
