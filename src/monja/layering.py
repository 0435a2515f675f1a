"""Layering of target sets: the last listed set wins.

Target sets are stacked in declared order.  When several sets map a file
to the same local path, the one with the highest precedence rank (the
latest in ``target-sets``) owns it.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from .exceptions import MissingSetsError
from .paths import LocalFilePath
from .repo import FileRecord, RepoState, Set


@dataclass(frozen=True)
class LayeredFile:
    record: FileRecord
    rank: int


def merge_layer(
    accumulator: dict[LocalFilePath, LayeredFile],
    layer: Set,
    precedence_rank: int,
) -> None:
    """Overlay *layer* onto *accumulator*.

    Each of the layer's files replaces the entry for the same local path
    unless that entry came from a strictly higher rank.  Equal ranks
    overwrite, so re-applying a layer is harmless.
    """
    for local_path, record in layer.files.items():
        existing = accumulator.get(local_path)
        if existing is not None and existing.rank > precedence_rank:
            continue
        accumulator[local_path] = LayeredFile(record, precedence_rank)


def layer_sets(repo: RepoState, target_sets: Sequence[str]) -> dict[LocalFilePath, FileRecord]:
    """Winning file record for every local path the target sets provide.

    Raises :class:`~monja.exceptions.MissingSetsError` naming every
    missing set before any layering happens.
    """
    missing = [name for name in target_sets if name not in repo]
    if missing:
        raise MissingSetsError(missing)

    accumulator: dict[LocalFilePath, LayeredFile] = {}
    for rank, name in enumerate(target_sets):
        merge_layer(accumulator, repo.sets[name], rank)
    return {path: layered.record for path, layered in accumulator.items()}


def group_by_set(
    winners: dict[LocalFilePath, FileRecord],
    target_sets: Sequence[str],
) -> list[tuple[str, list[FileRecord]]]:
    """Winning records per set, in declared order, sorted by path in set.

    Sets that won no files are left out.
    """
    groups: dict[str, list[FileRecord]] = {}
    for record in winners.values():
        groups.setdefault(record.owning_set, []).append(record)

    result = []
    for name in dict.fromkeys(target_sets):
        if name in groups:
            result.append((name, sorted(groups[name], key=lambda r: r.path_in_set)))
    return result
