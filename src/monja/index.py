"""The file index: which set owns each local file.

Two generations are kept in the data directory.  *current* is the
ownership computed by the last successful pull; *previous* is what
*current* was before that pull.  Files present in *previous* but not in
*current* are what a pull left behind, i.e. cleanup candidates.
"""

from __future__ import annotations

import tomllib
from collections.abc import Iterable, Iterator, Mapping
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING

import tomli_w

from ._atomic import atomic_write_bytes
from .exceptions import FileIndexError, PathSafetyError
from .paths import LocalFilePath
from .profile import INDEX_FILENAME, PREV_INDEX_FILENAME

if TYPE_CHECKING:
    from .profile import Profile


class IndexKind(str, Enum):
    """Index generation: ``CURRENT`` or ``PREVIOUS``."""
    CURRENT = INDEX_FILENAME
    PREVIOUS = PREV_INDEX_FILENAME

    def __str__(self) -> str:          # noqa: D105
        return self.value


class FileIndex:
    """Mapping of local file path to owning set name."""

    def __init__(self, mapping: Mapping[LocalFilePath, str] | None = None) -> None:
        self._mapping: dict[LocalFilePath, str] = dict(mapping or {})

    def __repr__(self) -> str:
        return f"FileIndex({len(self._mapping)} entries)"

    def __contains__(self, local_path: LocalFilePath) -> bool:
        return local_path in self._mapping

    def __iter__(self) -> Iterator[LocalFilePath]:
        return iter(self._mapping)

    def __len__(self) -> int:
        return len(self._mapping)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FileIndex):
            return NotImplemented
        return self._mapping == other._mapping

    def get(self, local_path: LocalFilePath) -> str | None:
        return self._mapping.get(local_path)

    def set(self, local_path: LocalFilePath, owning_set: str) -> None:
        self._mapping[local_path] = owning_set

    def items(self):
        return self._mapping.items()

    # ------------------------------------------------------------------
    @staticmethod
    def path(profile: Profile, kind: IndexKind) -> Path:
        # not an AbsolutePath: the file may not exist yet
        return profile.data_root / kind.value

    @classmethod
    def load(cls, profile: Profile, kind: IndexKind) -> FileIndex:
        """Read one generation; a missing file is an empty index."""
        path = cls.path(profile, kind)
        try:
            raw = path.read_bytes()
        except FileNotFoundError:
            return cls()
        except OSError as exc:
            raise FileIndexError(kind, f"unable to read: {exc.strerror}") from exc
        try:
            data = tomllib.loads(raw.decode("utf-8"))
        except (UnicodeDecodeError, tomllib.TOMLDecodeError) as exc:
            raise FileIndexError(kind, f"unable to parse: {exc}") from exc

        mapping: dict[LocalFilePath, str] = {}
        for key, value in data.items():
            if not isinstance(value, str):
                raise FileIndexError(kind, f"owning set for {key!r} must be a string")
            try:
                mapping[LocalFilePath.from_relative(key)] = value
            except PathSafetyError as exc:
                raise FileIndexError(kind, str(exc)) from exc
        return cls(mapping)

    def save(self, profile: Profile, kind: IndexKind) -> None:
        path = self.path(profile, kind)
        data = {lp.path: name for lp, name in sorted(self._mapping.items())}
        try:
            encoded = tomli_w.dumps(data).encode("utf-8")
        except UnicodeEncodeError as exc:
            raise FileIndexError(kind, f"unable to write: {exc.reason}") from exc
        try:
            atomic_write_bytes(path, encoded)
        except OSError as exc:
            raise FileIndexError(kind, f"unable to write: {exc.strerror}") from exc


def diff_removed(
    old: FileIndex,
    new: FileIndex,
    present: Iterable[LocalFilePath],
) -> list[LocalFilePath]:
    """Paths *old* tracked that *new* does not, limited to *present* files.

    *present* is the result of a local walk, so files that are gone or
    covered by ``.monjaignore`` never show up.  Sorted by path.
    """
    present = set(present)
    return sorted(p for p in old if p in present and p not in new)


def old_files_since_last_pull(profile: Profile) -> list[LocalFilePath]:
    """Files the last pull left behind, judged from the two index generations.

    Cheaper than a full classification: no repo walk is needed.
    """
    from .local import walk_local

    current = FileIndex.load(profile, IndexKind.CURRENT)
    previous = FileIndex.load(profile, IndexKind.PREVIOUS)
    return diff_removed(previous, current, walk_local(profile))
