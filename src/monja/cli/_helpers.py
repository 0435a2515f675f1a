"""Shared helpers, option decorators, and the main CLI group."""

from __future__ import annotations

import os
from contextlib import contextmanager
from pathlib import Path

import click

from ..exceptions import ConsistencyError, MonjaError, PathSafetyError, TransferError
from ..paths import LocalFilePath
from ..profile import PROFILE_FILENAME, ExecutionOptions, Profile


# ---------------------------------------------------------------------------
# Defaults
# ---------------------------------------------------------------------------

def _xdg_dir(env: str, fallback: str) -> Path:
    value = os.environ.get(env)
    if value:
        return Path(value)
    return Path.home() / fallback


def _default_profile_path() -> Path:
    return _xdg_dir("XDG_CONFIG_HOME", ".config") / "monja" / PROFILE_FILENAME


def _default_data_dir() -> Path:
    return _xdg_dir("XDG_DATA_HOME", ".local/share") / "monja"


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _status(ctx, msg):
    """Emit a status message to stderr when verbose mode (-v) is on."""
    if ctx.obj.get("verbose"):
        click.echo(msg, err=True)


def _dry_run_option(f):
    """Shared -n/--dry-run flag."""
    return click.option(
        "-n", "--dry-run", "dry_run", is_flag=True, default=False,
        help="Show what would happen without changing anything.",
    )(f)


def _execution_options(ctx, dry_run: bool) -> ExecutionOptions:
    opts = ExecutionOptions(dry_run=dry_run, verbosity=1 if ctx.obj.get("verbose") else 0)
    # tests substitute the transfer tool through the context object
    transfer = ctx.obj.get("transfer")
    if transfer is not None:
        opts.transfer = transfer
    return opts


def _profile_path(ctx) -> Path:
    return Path(ctx.obj["profile_path"]).expanduser()


def _local_root(ctx) -> Path:
    return Path(ctx.obj["local_root"]).expanduser()


def _data_dir(ctx) -> Path:
    return Path(ctx.obj["data_dir"]).expanduser()


def _load_profile(ctx) -> Profile:
    """Load the profile named by the global options, creating the data dir."""
    profile_path = _profile_path(ctx)
    if not profile_path.exists():
        raise click.ClickException(
            f"No profile at {profile_path}. Run 'monja init' or pass --profile."
        )
    data_dir = _data_dir(ctx)
    data_dir.mkdir(parents=True, exist_ok=True)
    with _monja_errors():
        try:
            profile = Profile.load(profile_path, _local_root(ctx), data_dir)
        except FileNotFoundError as exc:
            raise click.ClickException(f"Directory not found: {exc.filename}")
    _status(ctx, f"Profile: {profile_path}")
    _status(ctx, f"Repo: {profile.repo_root}")
    return profile


def _local_paths(profile: Profile, raw_paths) -> list[LocalFilePath]:
    """Turn command-line paths (relative to the cwd) into local file paths."""
    cwd = os.getcwd()
    result = []
    for raw in raw_paths:
        try:
            result.append(LocalFilePath.from_input(profile.local_root, raw, cwd))
        except PathSafetyError as exc:
            raise click.ClickException(str(exc))
    return result


def _format_set_files(groups, indent: str = "  ") -> list[str]:
    lines = []
    for set_name, paths in groups:
        lines.append(f"{indent}{set_name}:")
        lines.extend(f"{indent}  {p}" for p in paths)
    return lines


def _format_error(exc: MonjaError) -> str:
    if isinstance(exc, ConsistencyError):
        lines = [str(exc)]
        if exc.files_with_missing_sets:
            lines.append("Files whose sets are missing from the repo:")
            lines.extend(_format_set_files(exc.files_with_missing_sets))
        if exc.missing_files:
            lines.append("Files missing from the sets they were expected in:")
            lines.extend(_format_set_files(exc.missing_files))
        lines.append(
            "Merge the local changes into the repo and pull, or use 'monja fix' "
            "to assign the files to a set."
        )
        return "\n".join(lines)
    if isinstance(exc, TransferError) and exc.stderr:
        return f"{exc}\n{exc.stderr.rstrip()}"
    return str(exc)


@contextmanager
def _monja_errors():
    """Convert library errors into ClickException."""
    try:
        yield
    except MonjaError as exc:
        raise click.ClickException(_format_error(exc))


def _echo_set_files(title: str, groups) -> None:
    if not groups:
        return
    click.echo(title)
    for line in _format_set_files(groups):
        click.echo(line)


def _echo_paths(title: str, paths) -> None:
    if not paths:
        return
    click.echo(title)
    for p in paths:
        click.echo(f"  {p}")


# ---------------------------------------------------------------------------
# Main group
# ---------------------------------------------------------------------------

@click.group()
@click.option("--profile", "profile_path", type=click.Path(dir_okay=False),
              envvar="MONJA_PROFILE", default=None,
              help="Profile file (or set MONJA_PROFILE). "
                   "Default: $XDG_CONFIG_HOME/monja/monja-profile.toml.")
@click.option("--local-root", type=click.Path(file_okay=False),
              envvar="MONJA_LOCAL_ROOT", default=None,
              help="Local tree to manage (or set MONJA_LOCAL_ROOT). Default: ~.")
@click.option("--data-dir", type=click.Path(file_okay=False),
              envvar="MONJA_DATA_DIR", default=None,
              help="Where the file index is kept (or set MONJA_DATA_DIR). "
                   "Default: $XDG_DATA_HOME/monja.")
@click.option("-v", "--verbose", is_flag=True, help="Verbose output on stderr.")
@click.pass_context
def main(ctx, profile_path, local_root, data_dir, verbose):
    """monja: layered dotfile sets synced between a repo and $HOME.

    \b
    Quick start:
      monja init
      monja new-set base .bashrc .config/git/config
      monja push
      monja pull

    \b
    Common workflows:
      pull / push     Sync the target sets to or from the local tree
      status          Show how local files relate to the repo
      clean           Remove files a pull left behind
      put / fix       Copy files into a chosen set
      new-set         Create a set from local files

    Sets listed later in the profile's target-sets win.
    """
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["profile_path"] = profile_path or _default_profile_path()
    ctx.obj["local_root"] = local_root or Path.home()
    ctx.obj["data_dir"] = data_dir or _default_data_dir()
