"""Profile configuration and per-invocation execution options."""

from __future__ import annotations

import os
import tomllib
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from pathlib import Path

import tomli_w

from ._atomic import atomic_write_bytes
from .exceptions import InvalidSetNameError, ProfileConfigError
from .paths import AbsolutePath, validate_set_name
from .transfer import rsync

PROFILE_FILENAME = "monja-profile.toml"
SET_CONFIG_FILENAME = ".monja-set.toml"
DIR_CONFIG_FILENAME = ".monja-dir.toml"
INDEX_FILENAME = "monja-index.toml"
PREV_INDEX_FILENAME = "monja-index-prev.toml"
LOCK_FILENAME = "monja-index.lock"
IGNORE_FILENAME = ".monjaignore"

# Excluded from every walk of both trees.
SPECIAL_FILES: frozenset[str] = frozenset({
    SET_CONFIG_FILENAME,
    DIR_CONFIG_FILENAME,
    PROFILE_FILENAME,
    INDEX_FILENAME,
    PREV_INDEX_FILENAME,
    LOCK_FILENAME,
    IGNORE_FILENAME,
})

Transfer = Callable[..., None]


@dataclass
class ExecutionOptions:
    """Options shared by every operation.

    Attributes:
        dry_run: Compute and report results without touching the filesystem.
        verbosity: Forwarded to the transfer tool (``-v`` when > 0).
        transfer: ``transfer(source, dest, files, *, verbose)`` callable
            used to copy file lists between trees.
    """
    dry_run: bool = False
    verbosity: int = 0
    transfer: Transfer = rsync


@dataclass
class ProfileConfig:
    """Contents of ``monja-profile.toml``."""
    repo_dir: Path
    target_sets: list[str] = field(default_factory=list)
    new_file_set: str | None = None

    @classmethod
    def from_dict(cls, data: dict) -> ProfileConfig:
        repo_dir = data.get("repo-dir")
        if not isinstance(repo_dir, str):
            raise ProfileConfigError("'repo-dir' must be a string")
        target_sets = data.get("target-sets")
        if not isinstance(target_sets, list) or not all(isinstance(s, str) for s in target_sets):
            raise ProfileConfigError("'target-sets' must be a list of strings")
        new_file_set = data.get("new-file-set")
        if new_file_set is not None and not isinstance(new_file_set, str):
            raise ProfileConfigError("'new-file-set' must be a string")
        try:
            for name in target_sets:
                validate_set_name(name)
            if new_file_set is not None:
                validate_set_name(new_file_set)
        except InvalidSetNameError as exc:
            raise ProfileConfigError(str(exc)) from exc
        return cls(Path(repo_dir), list(target_sets), new_file_set)

    def to_dict(self) -> dict:
        data: dict = {
            "repo-dir": os.fspath(self.repo_dir),
            "target-sets": list(self.target_sets),
        }
        if self.new_file_set is not None:
            data["new-file-set"] = self.new_file_set
        return data

    @classmethod
    def load(cls, config_path: str | os.PathLike[str]) -> ProfileConfig:
        try:
            raw = Path(config_path).read_bytes()
        except OSError as exc:
            raise ProfileConfigError(f"Unable to read {config_path}: {exc.strerror}") from exc
        try:
            data = tomllib.loads(raw.decode("utf-8"))
        except (UnicodeDecodeError, tomllib.TOMLDecodeError) as exc:
            raise ProfileConfigError(f"Unable to parse {config_path}: {exc}") from exc
        return cls.from_dict(data)

    def save(self, config_path: str | os.PathLike[str]) -> None:
        try:
            encoded = tomli_w.dumps(self.to_dict()).encode("utf-8")
        except UnicodeEncodeError as exc:
            raise ProfileConfigError(f"Unable to write {config_path}: {exc.reason}") from exc
        try:
            atomic_write_bytes(config_path, encoded)
        except OSError as exc:
            raise ProfileConfigError(f"Unable to write {config_path}: {exc.strerror}") from exc


@dataclass
class Profile:
    """Resolved roots plus the profile configuration.

    ``special_files`` is the immutable set of reserved filenames skipped
    by every walk.
    """
    local_root: AbsolutePath
    repo_root: AbsolutePath
    data_root: AbsolutePath
    config: ProfileConfig
    special_files: frozenset[str] = SPECIAL_FILES

    @property
    def target_sets(self) -> list[str]:
        return self.config.target_sets

    def precedence(self, set_name: str) -> int | None:
        """Last position of *set_name* in ``target-sets``; later means higher precedence.

        A name listed twice ranks by its last occurrence, as in layering.
        """
        ranks = [i for i, name in enumerate(self.config.target_sets) if name == set_name]
        return ranks[-1] if ranks else None

    @classmethod
    def from_config(
        cls,
        config: ProfileConfig,
        local_root: AbsolutePath,
        data_root: AbsolutePath,
        *,
        special_files: frozenset[str] = SPECIAL_FILES,
    ) -> Profile:
        repo_dir = config.repo_dir
        if not repo_dir.is_absolute():
            repo_dir = local_root / repo_dir
        try:
            repo_root = AbsolutePath.for_existing_path(repo_dir)
        except OSError as exc:
            raise ProfileConfigError(f"Repo directory is not accessible: {repo_dir}") from exc
        return cls(local_root, repo_root, data_root, config, special_files)

    @classmethod
    def load(
        cls,
        config_path: str | os.PathLike[str],
        local_root: str | os.PathLike[str],
        data_root: str | os.PathLike[str],
    ) -> Profile:
        """Read *config_path* and resolve the roots it refers to."""
        return cls.from_config(
            ProfileConfig.load(config_path),
            AbsolutePath.for_existing_path(local_root),
            AbsolutePath.for_existing_path(data_root),
        )


def order_set_names(target_sets: Sequence[str], names) -> list[str]:
    """Targeted names first, in declared order, then any others sorted."""
    names = set(names)
    ordered = [n for n in target_sets if n in names]
    ordered.extend(sorted(names - set(ordered)))
    return ordered
