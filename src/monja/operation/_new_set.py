"""New set: carve a fresh set out of existing local files."""

from __future__ import annotations

import os
from collections.abc import Sequence
from dataclasses import replace

from ..exceptions import NotValidFileError, SetExistsError
from ..paths import LocalFilePath, SetShortcut, validate_set_name
from ..profile import ExecutionOptions, Profile, ProfileConfig
from ..repo import SetConfig, create_empty_set, initialize_full_state
from ._put import put
from ._types import NewSetResult


def compute_shortcut(files: Sequence[LocalFilePath]) -> SetShortcut:
    """Deepest directory containing every one of *files*.

    >>> compute_shortcut([LocalFilePath(".config/nvim/init.lua"),
    ...                   LocalFilePath(".config/git/config")])
    SetShortcut(path='.config')
    """
    dirs = [p.path.split("/")[:-1] for p in files]
    if not dirs:
        return SetShortcut()
    prefix: list[str] = []
    for segments in zip(*dirs):
        if any(seg != segments[0] for seg in segments):
            break
        prefix.append(segments[0])
    return SetShortcut("/".join(prefix))


def new_set(
    profile: Profile,
    opts: ExecutionOptions,
    profile_config_path: str | os.PathLike[str],
    files: Sequence[LocalFilePath],
    name: str,
) -> NewSetResult:
    """Create set *name* from *files* and make it the highest-precedence target.

    Every input is checked before anything is written, dry run or not.
    The set is appended to ``target-sets`` in the profile file, its
    shortcut is the directory the files share, and the files are put
    with an index update so they can be pushed right away.

    Raises:
        InvalidSetNameError: *name* is unusable.
        SetExistsError: A set named *name* already exists.
        NotValidFileError: A path is not a regular local file.
        ProfileConfigError: The profile file could not be read or updated.
        RepoStateError: The repo could not be loaded.
    """
    validate_set_name(name)
    if (profile.repo_root / name).exists():
        raise SetExistsError(name)
    for local_path in files:
        source = local_path.to_path(profile.local_root)
        if not source.is_file():
            raise NotValidFileError(source)
    config = ProfileConfig.load(profile_config_path)
    initialize_full_state(profile)

    shortcut = compute_shortcut(files)
    result = NewSetResult(new_set=name, shortcut=shortcut.path, files=list(files))
    if opts.dry_run:
        return result

    create_empty_set(profile, name)

    if name not in config.target_sets:
        config.target_sets.append(name)
        config.save(profile_config_path)

    SetConfig(shortcut=shortcut.path).save(profile, name)

    # the in-memory profile must see the new set as targeted too
    profile = replace(profile, config=replace(profile.config, target_sets=list(config.target_sets)))
    put_result = put(profile, opts, files, name, update_index=True)
    result.files = put_result.files
    return result
