"""Exceptions for monja."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pathlib import Path

    from .index import IndexKind
    from .paths import LocalFilePath


class MonjaError(Exception):
    """Base class for every error raised by the monja library."""


# ---------------------------------------------------------------------------
# Path safety
# ---------------------------------------------------------------------------

class PathSafetyError(MonjaError, ValueError):
    """A path was rejected because it could escape a declared root."""


class OutsideRootError(PathSafetyError):
    """Raised when a path resolves outside the local root."""

    def __init__(self, path: str, root: str) -> None:
        super().__init__(f"Path is outside the local root {root}: {path}")
        self.path = path
        self.root = root


class NotRelativeError(PathSafetyError):
    """Raised when a set shortcut is absolute."""

    def __init__(self, raw: str) -> None:
        super().__init__(f"Shortcut must be a relative path: {raw!r}")
        self.raw = raw


class TraversalToParentError(PathSafetyError):
    """Raised when a set shortcut climbs out of the local root."""

    def __init__(self, raw: str) -> None:
        super().__init__(f"Shortcut escapes the local root: {raw!r}")
        self.raw = raw


class SetPathError(PathSafetyError):
    """Raised when a local file does not live under a set's shortcut."""

    def __init__(self, local_path: str, shortcut: str) -> None:
        super().__init__(
            f"{local_path} is not under the set shortcut {shortcut or '(root)'}"
        )
        self.local_path = local_path
        self.shortcut = shortcut


class InvalidSetNameError(PathSafetyError):
    """Raised for set names that cannot be used as a directory name."""

    def __init__(self, name: str, reason: str) -> None:
        super().__init__(f"Invalid set name {name!r}: {reason}")
        self.name = name
        self.reason = reason


# ---------------------------------------------------------------------------
# Configuration and state loading
# ---------------------------------------------------------------------------

class ProfileConfigError(MonjaError):
    """The profile file could not be read, parsed, validated, or written."""


class SetNameError(MonjaError):
    """A directory in the repo root cannot be interpreted as a set name."""

    def __init__(self, path: Path) -> None:
        super().__init__(f"Unable to convert directory name into set name: {path}")
        self.path = path


class SetConfigError(MonjaError):
    """A set's ``.monja-set.toml`` is unreadable or invalid."""

    def __init__(self, set_name: str, message: str) -> None:
        super().__init__(f"Set {set_name}: {message}")
        self.set_name = set_name


class SetWalkError(MonjaError):
    """Walking a set directory failed, or turned up an unusable file."""

    def __init__(
        self,
        set_name: str,
        cause: OSError | None = None,
        message: str | None = None,
    ) -> None:
        if message is None:
            message = f"unable to walk {cause.filename}: {cause.strerror}"
        super().__init__(f"Set {set_name}: {message}")
        self.set_name = set_name
        self.cause = cause


class RepoStateError(MonjaError):
    """One or more sets failed to load.

    ``errors`` holds every failure found while loading the repo, not
    just the first one.
    """

    def __init__(self, errors: list[Exception]) -> None:
        lines = "\n".join(f"  {e}" for e in errors)
        super().__init__(f"Unable to initialize repo state:\n{lines}")
        self.errors = errors


class FileIndexError(MonjaError):
    """Reading or writing one generation of the file index failed."""

    def __init__(self, kind: IndexKind, message: str) -> None:
        super().__init__(f"{kind}: {message}")
        self.kind = kind


class LocalWalkError(MonjaError):
    """Walking the local tree failed."""


# ---------------------------------------------------------------------------
# Operations
# ---------------------------------------------------------------------------

class MissingSetsError(MonjaError):
    """Sets named by the profile are missing from the repo."""

    def __init__(self, missing: list[str]) -> None:
        super().__init__(
            "Sets needed by the profile are missing from the repo: "
            + ", ".join(missing)
        )
        self.missing = missing


class ConsistencyError(MonjaError):
    """Local files disagree with the repo, so nothing may be pushed.

    Both partitions are complete: every file whose recorded set is gone
    and every file its set no longer tracks.
    """

    def __init__(
        self,
        files_with_missing_sets: list[tuple[str, list[LocalFilePath]]],
        missing_files: list[tuple[str, list[LocalFilePath]]],
    ) -> None:
        super().__init__("Local state is inconsistent with the repo.")
        self.files_with_missing_sets = files_with_missing_sets
        self.missing_files = missing_files


class TransferError(MonjaError):
    """The transfer tool exited unsuccessfully or could not be started."""

    def __init__(self, source: str, dest: str, message: str, stderr: str = "") -> None:
        super().__init__(f"Transfer {source} -> {dest} failed: {message}")
        self.source = source
        self.dest = dest
        self.stderr = stderr


class SetNotFoundError(MonjaError):
    """The requested set does not exist in the repo."""

    def __init__(self, set_name: str) -> None:
        super().__init__(f"Set not found in repo: {set_name}")
        self.set_name = set_name


class NotValidFileError(MonjaError):
    """A path given to put is not a regular file."""

    def __init__(self, path: Path) -> None:
        super().__init__(f"Not a file: {path}")
        self.path = path


class CleanError(MonjaError):
    """Removing a file failed; the remaining batch was not attempted."""

    def __init__(self, path: Path, cause: OSError, files_cleaned: list[LocalFilePath]) -> None:
        super().__init__(f"Failed to remove {path}: {cause.strerror}")
        self.path = path
        self.cause = cause
        self.files_cleaned = files_cleaned


class AlreadyInitializedError(MonjaError):
    """A profile already exists at the requested location."""

    def __init__(self, path: Path) -> None:
        super().__init__(f"monja has already been initialized: {path}")
        self.path = path


class SetExistsError(MonjaError):
    """A set with the requested name already exists in the repo."""

    def __init__(self, set_name: str) -> None:
        super().__init__(f"Set already exists in repo: {set_name}")
        self.set_name = set_name
