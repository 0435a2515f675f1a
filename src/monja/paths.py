"""Path-safety types.

Every path that crosses a root boundary goes through one of these types:

* :class:`AbsolutePath` -- an existing, canonical filesystem path.
* :class:`LocalFilePath` -- a normalized path relative to the local root.
* :class:`SetShortcut` -- where, under the local root, a set is mounted.

Relative paths are stored repo-style (forward slashes, no leading or
trailing slash) so they compare, hash, and serialize the same on every
platform.  Resolution of ``.`` and ``..`` is purely logical; nothing here
touches the filesystem except :meth:`AbsolutePath.for_existing_path`.
"""

from __future__ import annotations

import os
import re
from dataclasses import dataclass
from pathlib import Path

from .exceptions import (
    InvalidSetNameError,
    NotRelativeError,
    OutsideRootError,
    SetPathError,
    TraversalToParentError,
)

_WINDOWS_ABSOLUTE = re.compile(r"^[a-zA-Z]:[\\/]")


def _fold_segments(path: str) -> tuple[list[str], bool]:
    """Fold ``.``/``..`` segments of a relative path.

    Returns the remaining segments and whether a ``..`` tried to climb
    above the starting point.
    """
    parts: list[str] = []
    escaped = False
    for seg in path.replace("\\", "/").split("/"):
        if seg in ("", "."):
            continue
        if seg == "..":
            if parts:
                parts.pop()
            else:
                escaped = True
            continue
        parts.append(seg)
    return parts, escaped


def validate_set_name(name: str) -> str:
    """Return *name* if it can be used as a set directory name."""
    if not isinstance(name, str):
        raise InvalidSetNameError(str(name), "must be a string")
    if not name:
        raise InvalidSetNameError(name, "must not be empty")
    if name in (".", ".."):
        raise InvalidSetNameError(name, "must not be a relative directory reference")
    for ch, label in (("/", "slash"), ("\\", "backslash"), ("\0", "NUL")):
        if ch in name:
            raise InvalidSetNameError(name, f"contains {label}")
    return name


@dataclass(frozen=True)
class AbsolutePath:
    """An existing, canonicalized filesystem path."""
    path: Path

    @classmethod
    def for_existing_path(cls, path: str | os.PathLike[str]) -> AbsolutePath:
        """Canonicalize *path*; raises ``FileNotFoundError`` if it does not exist."""
        return cls(Path(path).resolve(strict=True))

    def __fspath__(self) -> str:
        return os.fspath(self.path)

    def __truediv__(self, other: str | os.PathLike[str]) -> Path:
        return self.path / other

    def __str__(self) -> str:
        return str(self.path)


@dataclass(frozen=True, order=True)
class LocalFilePath:
    """A normalized path relative to the local root.

    The empty string denotes the local root itself.
    """
    path: str

    @classmethod
    def from_input(
        cls,
        local_root: str | os.PathLike[str],
        input_path: str | os.PathLike[str],
        base_dir: str | os.PathLike[str],
    ) -> LocalFilePath:
        """Resolve *input_path* against *base_dir* and make it root-relative.

        Relative inputs are joined to *base_dir*; absolute inputs are used
        as-is.  Either way ``.`` and ``..`` are folded logically, and a
        result that is not *local_root* or one of its descendants raises
        :class:`~monja.exceptions.OutsideRootError`.
        """
        root = Path(os.path.normpath(os.fspath(local_root)))
        joined = os.path.join(os.fspath(base_dir), os.fspath(input_path))
        resolved = Path(os.path.normpath(joined))
        if not resolved.is_relative_to(root):
            raise OutsideRootError(str(resolved), str(root))
        rel = resolved.relative_to(root).as_posix()
        return cls("" if rel == "." else rel)

    @classmethod
    def from_relative(cls, rel: str) -> LocalFilePath:
        """Build from an already root-relative path (index keys, walk results)."""
        parts, escaped = _fold_segments(rel)
        if escaped or os.path.isabs(rel):
            raise OutsideRootError(rel, "<local root>")
        return cls("/".join(parts))

    def to_path(self, local_root: str | os.PathLike[str]) -> Path:
        base = Path(local_root)
        return base / self.path if self.path else base

    def is_child_of(self, location: LocalFilePath) -> bool:
        """True if this path is *location* or lies beneath it."""
        if not location.path:
            return True
        return self.path == location.path or self.path.startswith(location.path + "/")

    def __str__(self) -> str:
        return self.path


@dataclass(frozen=True)
class SetShortcut:
    """A validated relative mount point for a set under the local root."""
    path: str = ""

    @classmethod
    def from_path(cls, raw: str | os.PathLike[str]) -> SetShortcut:
        """Validate a raw shortcut.

        Absolute shortcuts raise :class:`~monja.exceptions.NotRelativeError`.
        A shortcut whose ``..`` segments climb above the local root, or
        which is non-empty yet folds down to nothing (``".."``,
        ``"a/.."``), raises :class:`~monja.exceptions.TraversalToParentError`.
        """
        raw = os.fspath(raw)
        if os.path.isabs(raw) or raw.startswith(("/", "\\")) or _WINDOWS_ABSOLUTE.match(raw):
            raise NotRelativeError(raw)
        parts, escaped = _fold_segments(raw)
        if escaped or (raw and not parts):
            raise TraversalToParentError(raw)
        return cls("/".join(parts))

    def join(self, path_in_set: str) -> LocalFilePath:
        """Local path of a file at *path_in_set* inside a set mounted here."""
        if not self.path:
            return LocalFilePath(path_in_set)
        return LocalFilePath(f"{self.path}/{path_in_set}")

    def relative(self, local_path: LocalFilePath) -> str:
        """Inverse of :meth:`join`: the path a local file has inside the set."""
        if not self.path:
            return local_path.path
        prefix = self.path + "/"
        if not local_path.path.startswith(prefix):
            raise SetPathError(local_path.path, self.path)
        return local_path.path[len(prefix):]

    def to_path(self, local_root: str | os.PathLike[str]) -> Path:
        base = Path(local_root)
        return base / self.path if self.path else base

    def __str__(self) -> str:
        return self.path
