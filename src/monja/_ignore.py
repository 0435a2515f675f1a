"""``.monjaignore`` support for local-tree walks.

Each directory may hold a ``.monjaignore`` file in gitignore syntax
(implemented by ``dulwich.ignore.IgnoreFilter``).  Patterns apply to the
directory holding the file and everything below it; a deeper file
overrides a shallower one, including through ``!`` negation.

Unlike git's defaults nothing is ignored implicitly: hidden files are
walked unless a pattern says otherwise.
"""

from __future__ import annotations

from pathlib import Path

from dulwich.ignore import IgnoreFilter

from .profile import IGNORE_FILENAME


class IgnoreMatcher:
    """Answers "is this path ignored" for paths relative to *root*."""

    def __init__(self, root: Path, *, filename: str = IGNORE_FILENAME) -> None:
        self._root = Path(root)
        self._filename = filename
        # {rel_dir: IgnoreFilter | None} -- lazily loaded per directory
        self._dir_filters: dict[str, IgnoreFilter | None] = {}

    def _filter_for(self, rel_dir: str) -> IgnoreFilter | None:
        if rel_dir not in self._dir_filters:
            path = self._root / rel_dir / self._filename
            self._dir_filters[rel_dir] = (
                IgnoreFilter.from_path(str(path)) if path.is_file() else None
            )
        return self._dir_filters[rel_dir]

    def is_ignored(self, rel_path: str, *, is_dir: bool = False) -> bool:
        """Check *rel_path* against every ``.monjaignore`` above it.

        Filters are consulted from the deepest ancestor directory up to
        the root; the first one with an opinion decides.  Ancestor
        directories themselves are not checked -- walks prune ignored
        directories before descending.
        """
        parts = rel_path.split("/")
        for depth in range(len(parts) - 1, -1, -1):
            dir_key = "/".join(parts[:depth])
            filt = self._filter_for(dir_key)
            if filt is None:
                continue
            sub = "/".join(parts[depth:])
            result = filt.is_ignored(sub + "/" if is_dir else sub)
            if result is not None:
                return result
        return False
