"""Data structures returned by operations.

Every result is produced identically for real and dry runs; a dry run
simply skips the filesystem writes that would have produced it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from ..paths import AbsolutePath, LocalFilePath
from ..profile import Profile
from ..repo import FileRecord

SetFiles = list[tuple[str, list[LocalFilePath]]]


class CleanMode(str, Enum):
    """``INDEX`` uses the two index generations; ``FULL`` reclassifies everything."""
    INDEX = "index"
    FULL = "full"

    def __str__(self) -> str:          # noqa: D105
        return self.value


@dataclass
class PullResult:
    """What a pull copied and what it left behind.

    Attributes:
        files_pulled: Winning files per set, in target order.
        cleanable_files: Local files the previous pull placed that no
            target set provides any more.
    """
    files_pulled: list[tuple[str, list[FileRecord]]] = field(default_factory=list)
    cleanable_files: list[LocalFilePath] = field(default_factory=list)

    @property
    def total(self) -> int:
        return sum(len(records) for _, records in self.files_pulled)


@dataclass
class PushResult:
    """Files pushed per set, plus files owned by sets outside ``target-sets``."""
    files_pushed: SetFiles = field(default_factory=list)
    files_not_targeted: SetFiles = field(default_factory=list)

    @property
    def total(self) -> int:
        return sum(len(paths) for _, paths in self.files_pushed)


@dataclass
class PutResult:
    """Outcome of copying local files into a set.

    Attributes:
        owning_set: The destination set.
        files: The files that were (or would be) copied.
        set_is_targeted: Whether the destination is in ``target-sets``;
            if not, pull never selects it.
        files_in_later_sets: Files also provided by targeted sets with
            higher precedence, which the next pull will prefer.
        untracked_files: Files no targeted set provides after the put.
    """
    owning_set: str
    files: list[LocalFilePath] = field(default_factory=list)
    set_is_targeted: bool = False
    files_in_later_sets: list[tuple[LocalFilePath, list[str]]] = field(default_factory=list)
    untracked_files: list[LocalFilePath] = field(default_factory=list)


@dataclass
class CleanResult:
    files_cleaned: list[LocalFilePath] = field(default_factory=list)


@dataclass
class Status:
    """Local status, filtered to a location."""
    files_to_push: SetFiles = field(default_factory=list)
    files_with_missing_sets: SetFiles = field(default_factory=list)
    missing_files: SetFiles = field(default_factory=list)
    untracked_files: list[LocalFilePath] = field(default_factory=list)
    old_files_since_last_pull: list[LocalFilePath] = field(default_factory=list)


@dataclass
class InitSpec:
    """Where a fresh installation puts its pieces.

    ``repo_root`` need not exist yet; ``relative_repo_root`` is what gets
    written to the profile (relative to ``local_root`` or absolute).
    """
    profile_config_path: Path
    local_root: AbsolutePath
    data_root: AbsolutePath
    repo_root: Path
    relative_repo_root: Path
    initial_set_name: str


@dataclass
class InitResult:
    profile_config_path: Path
    profile: Profile | None = None  # None on dry runs


@dataclass
class NewSetResult:
    new_set: str
    shortcut: str
    files: list[LocalFilePath] = field(default_factory=list)
