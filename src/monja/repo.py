"""Repo state: the sets under the repo root and the files they map locally.

A repo is a directory whose immediate subdirectories are *sets*.  Each set
may carry a ``.monja-set.toml`` naming a *shortcut*: the directory under
the local root its contents are mounted at.  The state is rebuilt from
scratch on every operation.
"""

from __future__ import annotations

import os
import tomllib
from collections.abc import Iterator
from dataclasses import dataclass, field
from pathlib import Path

import tomli_w

from ._atomic import atomic_write_bytes
from .exceptions import (
    PathSafetyError,
    RepoStateError,
    SetConfigError,
    SetExistsError,
    SetNameError,
    SetWalkError,
)
from .paths import AbsolutePath, LocalFilePath, SetShortcut, validate_set_name
from .profile import SET_CONFIG_FILENAME, Profile

# Directories under the repo root that are never sets.
RESERVED_REPO_DIRS: frozenset[str] = frozenset({".git"})


# ---------------------------------------------------------------------------
# Data structures
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class FileRecord:
    """A file inside a set, and where it lands locally."""
    owning_set: str
    path_in_set: str
    local_path: LocalFilePath


@dataclass
class Set:
    name: str
    shortcut: SetShortcut
    root: AbsolutePath
    files: dict[LocalFilePath, FileRecord] = field(default_factory=dict)

    def tracks_file(self, local_path: LocalFilePath) -> bool:
        return local_path in self.files

    def repo_path_for(self, local_path: LocalFilePath) -> Path:
        """Where *local_path* lives (or would live) inside this set."""
        return self.root / self.shortcut.relative(local_path)


@dataclass
class RepoState:
    sets: dict[str, Set] = field(default_factory=dict)

    def __contains__(self, set_name: str) -> bool:
        return set_name in self.sets

    def __iter__(self) -> Iterator[Set]:
        return iter(self.sets.values())

    def __len__(self) -> int:
        return len(self.sets)

    def get(self, set_name: str) -> Set | None:
        return self.sets.get(set_name)


@dataclass
class SetConfig:
    """Contents of a set's ``.monja-set.toml``."""
    shortcut: str | None = None

    @staticmethod
    def path(profile: Profile, set_name: str) -> Path:
        return profile.repo_root / set_name / SET_CONFIG_FILENAME

    @classmethod
    def read(cls, set_name: str, config_path: Path) -> SetConfig:
        """Parse *config_path*; a missing file yields the default config."""
        try:
            raw = config_path.read_bytes()
        except FileNotFoundError:
            return cls()
        except OSError as exc:
            raise SetConfigError(set_name, f"unable to read {config_path.name}: {exc.strerror}") from exc
        try:
            data = tomllib.loads(raw.decode("utf-8"))
        except (UnicodeDecodeError, tomllib.TOMLDecodeError) as exc:
            raise SetConfigError(set_name, f"unable to parse {config_path.name}: {exc}") from exc
        shortcut = data.get("shortcut")
        if shortcut is not None and not isinstance(shortcut, str):
            raise SetConfigError(set_name, "'shortcut' must be a string")
        return cls(shortcut=shortcut)

    @classmethod
    def load(cls, profile: Profile, set_name: str) -> SetConfig:
        return cls.read(set_name, cls.path(profile, set_name))

    def save(self, profile: Profile, set_name: str) -> None:
        data = {} if self.shortcut is None else {"shortcut": self.shortcut}
        path = self.path(profile, set_name)
        try:
            encoded = tomli_w.dumps(data).encode("utf-8")
        except UnicodeEncodeError as exc:
            raise SetConfigError(set_name, f"unable to write {path.name}: {exc.reason}") from exc
        try:
            atomic_write_bytes(path, encoded)
        except OSError as exc:
            raise SetConfigError(set_name, f"unable to write {path.name}: {exc.strerror}") from exc

    def validated_shortcut(self, set_name: str) -> SetShortcut:
        try:
            return SetShortcut.from_path(self.shortcut or "")
        except PathSafetyError as exc:
            raise SetConfigError(set_name, str(exc)) from exc


# ---------------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------------

def _list_set_dirs(repo_root: Path) -> tuple[list[tuple[str, Path]], list[Exception]]:
    """Candidate sets under *repo_root*, sorted by name, plus naming errors."""
    found: list[tuple[str, Path]] = []
    errors: list[Exception] = []
    try:
        entries = sorted(os.scandir(repo_root), key=lambda e: e.name)
    except OSError as exc:
        raise RepoStateError([exc]) from exc

    for entry in entries:
        try:
            if not entry.is_dir():
                continue
        except OSError as exc:
            errors.append(exc)
            continue
        if entry.name in RESERVED_REPO_DIRS:
            continue
        try:
            entry.name.encode("utf-8")
        except UnicodeEncodeError:
            errors.append(SetNameError(Path(entry.path)))
            continue
        found.append((entry.name, Path(entry.path)))
    return found, errors


def _walk_set_files(
    set_name: str,
    set_path: Path,
    shortcut: SetShortcut,
    special_files: frozenset[str],
) -> tuple[dict[LocalFilePath, FileRecord], list[Exception]]:
    """Map every regular file in a set to its local path."""
    files: dict[LocalFilePath, FileRecord] = {}
    errors: list[Exception] = []

    def _on_error(exc: OSError) -> None:
        errors.append(SetWalkError(set_name, exc))

    for dirpath, dirnames, filenames in os.walk(set_path, onerror=_on_error):
        dirnames.sort()
        dp = Path(dirpath)
        for fname in sorted(filenames):
            if fname in special_files:
                continue
            full = dp / fname
            if full.is_symlink() or not full.is_file():
                continue
            path_in_set = full.relative_to(set_path).as_posix()
            try:
                path_in_set.encode("utf-8")
            except UnicodeEncodeError:
                message = f"file name is not valid UTF-8: {path_in_set!r}"
                errors.append(SetWalkError(set_name, message=message))
                continue
            record = FileRecord(set_name, path_in_set, shortcut.join(path_in_set))
            files[record.local_path] = record
    return files, errors


def _load_set(profile: Profile, set_name: str, set_path: Path) -> tuple[Set | None, list[Exception]]:
    try:
        config = SetConfig.read(set_name, set_path / SET_CONFIG_FILENAME)
        shortcut = config.validated_shortcut(set_name)
        root = AbsolutePath.for_existing_path(set_path)
    except SetConfigError as exc:
        return None, [exc]
    except OSError as exc:
        return None, [SetWalkError(set_name, exc)]

    files, errors = _walk_set_files(set_name, set_path, shortcut, profile.special_files)
    return Set(set_name, shortcut, root, files), errors


def initialize_full_state(profile: Profile) -> RepoState:
    """Load every set in the repo.

    Every set is attempted before failing; if anything went wrong a
    single :class:`~monja.exceptions.RepoStateError` carries all of it.
    """
    candidates, errors = _list_set_dirs(profile.repo_root.path)

    sets: dict[str, Set] = {}
    for set_name, set_path in candidates:
        loaded, set_errors = _load_set(profile, set_name, set_path)
        errors.extend(set_errors)
        if loaded is not None:
            sets[set_name] = loaded

    if errors:
        raise RepoStateError(errors)
    return RepoState(sets)


def create_empty_set(profile: Profile, set_name: str) -> Path:
    """Create the directory for a new set; it must not already exist."""
    validate_set_name(set_name)
    path = profile.repo_root / set_name
    try:
        path.mkdir()
    except FileExistsError as exc:
        raise SetExistsError(set_name) from exc
    return path
