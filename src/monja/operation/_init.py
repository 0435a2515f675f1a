"""Init: lay down a fresh profile, repo, and first set."""

from __future__ import annotations

import textwrap

from ..exceptions import AlreadyInitializedError
from ..paths import validate_set_name
from ..profile import IGNORE_FILENAME, SET_CONFIG_FILENAME, ExecutionOptions, Profile, ProfileConfig
from ._types import InitResult, InitSpec

SET_CONFIG_TEMPLATE = textwrap.dedent("""\
    # Use a shortcut to reduce the amount of initial folder nesting!
    # shortcut = '.config'
""")

# Keeps files out of the repo on push and protects them from clean.
DEFAULT_IGNORE = textwrap.dedent("""\
    # ignore files are used to keep stuff from getting to the repo from local,
    # and to prevent local files from being cleaned

    .*
    !.config/
    # consider putting this in a set, since machines may need different rules
    !.monjaignore

    Desktop/
    Documents/
    Downloads/
    Music/
    Pictures/
    Public/
    Videos/
""")

README = textwrap.dedent("""\
    ## monja
    This repo uses monja for managing dotfiles.

    To use the dotfiles in this repo:
    1. Install monja (`pip install monja[cli]`)
    2. Clone this repo. The default path is `$XDG_DATA_HOME/monja/repo`, but anywhere works.
    3. Create a profile (see below)
    4. Run `monja pull`. Keep in mind this can overwrite existing files.

    ### Profiles
    A profile mainly lists the directories found at the root of this repo (called sets).
    It lives in `$XDG_CONFIG_HOME/monja/monja-profile.toml`. Sample:

    ```toml
    # this can be an absolute path or a path relative to $HOME
    repo-dir = '.local/share/monja/repo'

    # these are layered on top of each other. if a file is in multiple sets, the later one wins.
    target-sets = [
        'foo',
        'bar',
        'baz',
    ]
    ```
""")


def init(opts: ExecutionOptions, spec: InitSpec) -> InitResult:
    """Create the profile, the repo root and its first set.

    A default ``.monjaignore`` (local root) and ``README.md`` (repo root)
    are written only if absent.  A dry run validates and stops.

    Raises:
        AlreadyInitializedError: The profile file already exists.
        InvalidSetNameError: The initial set name is unusable.
    """
    if spec.profile_config_path.exists():
        raise AlreadyInitializedError(spec.profile_config_path)
    validate_set_name(spec.initial_set_name)

    if opts.dry_run:
        return InitResult(spec.profile_config_path)

    config = ProfileConfig(spec.relative_repo_root, [spec.initial_set_name])
    spec.profile_config_path.parent.mkdir(parents=True, exist_ok=True)
    config.save(spec.profile_config_path)

    set_path = spec.repo_root / spec.initial_set_name
    set_path.mkdir(parents=True, exist_ok=True)
    set_config = set_path / SET_CONFIG_FILENAME
    if not set_config.exists():
        set_config.write_text(SET_CONFIG_TEMPLATE, encoding="utf-8")

    ignore_file = spec.local_root / IGNORE_FILENAME
    if not ignore_file.exists():
        ignore_file.write_text(DEFAULT_IGNORE, encoding="utf-8")

    readme = spec.repo_root / "README.md"
    if not readme.exists():
        readme.write_text(README, encoding="utf-8")

    profile = Profile.from_config(config, spec.local_root, spec.data_root)
    return InitResult(spec.profile_config_path, profile)
