"""Advisory index lock: serializes index rotation across processes."""

from __future__ import annotations

import os
from contextlib import contextmanager, nullcontext

from .profile import LOCK_FILENAME


def _lock_path(data_root: str | os.PathLike[str]) -> str:
    return os.path.join(os.fspath(data_root), LOCK_FILENAME)


try:
    import fcntl

    @contextmanager
    def index_lock(data_root: str | os.PathLike[str]):
        fd = os.open(_lock_path(data_root), os.O_CREAT | os.O_RDWR | getattr(os, "O_CLOEXEC", 0))
        try:
            fcntl.flock(fd, fcntl.LOCK_EX)
            yield
        finally:
            fcntl.flock(fd, fcntl.LOCK_UN)
            os.close(fd)

except ImportError:
    import msvcrt

    @contextmanager
    def index_lock(data_root: str | os.PathLike[str]):
        fd = os.open(_lock_path(data_root), os.O_CREAT | os.O_RDWR)
        os.set_inheritable(fd, False)
        try:
            msvcrt.locking(fd, msvcrt.LK_LOCK, 1)
            yield
        finally:
            msvcrt.locking(fd, msvcrt.LK_UNLCK, 1)
            os.close(fd)


def maybe_index_lock(data_root: str | os.PathLike[str], *, dry_run: bool):
    """The index lock, or a no-op context for dry runs (which write nothing)."""
    return nullcontext() if dry_run else index_lock(data_root)
