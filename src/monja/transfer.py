"""Adapter for the external transfer tool (rsync)."""

from __future__ import annotations

import os
import subprocess
from collections.abc import Iterable

from .exceptions import TransferError

# --checksum: files with equal size and mtime but different content still
# get copied.  --mkpath: destination directories are created as needed.
RSYNC_ARGS = ("-a", "--files-from=-", "--checksum", "--mkpath")


def _file_list(files: Iterable[str]) -> bytes:
    return b"".join(os.fsencode(f) + b"\n" for f in files)


def rsync(
    source: str | os.PathLike[str],
    dest: str | os.PathLike[str],
    files: Iterable[str],
    *,
    verbose: bool = False,
) -> None:
    """Copy *files* (relative to *source*) into *dest*.

    The file list is fed to rsync on stdin.  rsync's own output is only
    shown when *verbose* is set.  Raises :class:`TransferError` when rsync
    is missing or exits non-zero.
    """
    source = os.fspath(source)
    # trailing separator lets --mkpath create the destination itself
    dest = os.path.join(os.fspath(dest), "")
    args = ["rsync", *RSYNC_ARGS]
    if verbose:
        args.append("-v")
    args += [source, dest]

    try:
        proc = subprocess.run(
            args,
            input=_file_list(files),
            stdout=None if verbose else subprocess.DEVNULL,
            stderr=subprocess.PIPE,
        )
    except FileNotFoundError as exc:
        raise TransferError(source, dest, "rsync executable not found") from exc

    stderr = proc.stderr.decode(errors="replace")
    if proc.returncode != 0:
        raise TransferError(
            source, dest, f"rsync exited with status {proc.returncode}", stderr,
        )
