"""Status: a read-only view of the local tree against the repo."""

from __future__ import annotations

from ..local import retrieve_state
from ..paths import LocalFilePath
from ..profile import Profile, order_set_names
from ..repo import initialize_full_state
from ._types import SetFiles, Status


def _filter_groups(
    target_sets: list[str],
    groups: dict[str, list[LocalFilePath]],
    location: LocalFilePath,
) -> SetFiles:
    result = []
    for name in order_set_names(target_sets, groups):
        paths = sorted(p for p in groups[name] if p.is_child_of(location))
        if paths:
            result.append((name, paths))
    return result


def local_status(profile: Profile, location: LocalFilePath | None = None) -> Status:
    """Classify the local files at or below *location* (default: everything)."""
    if location is None:
        location = LocalFilePath("")
    target_sets = profile.target_sets
    repo = initialize_full_state(profile)
    state = retrieve_state(profile, repo)

    return Status(
        files_to_push=_filter_groups(target_sets, state.files_to_push, location),
        files_with_missing_sets=_filter_groups(target_sets, state.files_with_missing_sets, location),
        missing_files=_filter_groups(target_sets, state.missing_files, location),
        untracked_files=sorted(p for p in state.untracked_files if p.is_child_of(location)),
        old_files_since_last_pull=[
            p for p in state.old_files_since_last_pull if p.is_child_of(location)
        ],
    )
