"""The put, fix, new-set and init commands."""

from __future__ import annotations

import platform
from pathlib import Path

import click

from .. import operation
from ..operation import InitSpec
from ..paths import AbsolutePath
from ._helpers import (
    main,
    _data_dir,
    _dry_run_option,
    _echo_paths,
    _execution_options,
    _load_profile,
    _local_paths,
    _local_root,
    _monja_errors,
    _profile_path,
    _status,
)


def _set_option(f):
    """Shared --set/-s option; falls back to the profile's new-file-set."""
    return click.option(
        "--set", "-s", "set_name", default=None,
        help="Destination set (default: the profile's new-file-set).",
    )(f)


def _destination_set(profile, set_name):
    name = set_name or profile.config.new_file_set
    if not name:
        raise click.ClickException(
            "No set given. Use --set or add 'new-file-set' to the profile."
        )
    return name


def _report_put(result, dry_run):
    _echo_paths(
        f"Would copy into {result.owning_set}:" if dry_run else f"Copied into {result.owning_set}:",
        result.files,
    )
    if not result.set_is_targeted:
        click.echo(
            f"WARNING: {result.owning_set} is not in target-sets; "
            "pull will not use these files.", err=True,
        )
    for path, sets in result.files_in_later_sets:
        click.echo(
            f"WARNING: {path} is also in {', '.join(sets)}, which pull prefers.",
            err=True,
        )
    for path in result.untracked_files:
        click.echo(f"WARNING: {path} is not provided by any target set.", err=True)


@main.command()
@_set_option
@_dry_run_option
@click.argument("files", nargs=-1, required=True, type=click.Path())
@click.pass_context
def put(ctx, set_name, dry_run, files):
    """Copy FILES into a set without touching the index.

    Useful to seed a set with files that should not be pushed from this
    machine.  Use 'fix' to also take ownership of the files locally.
    """
    profile = _load_profile(ctx)
    opts = _execution_options(ctx, dry_run)
    name = _destination_set(profile, set_name)
    paths = _local_paths(profile, files)
    with _monja_errors():
        result = operation.put(profile, opts, paths, name)
    _report_put(result, dry_run)


@main.command()
@_set_option
@_dry_run_option
@click.argument("files", nargs=-1, required=True, type=click.Path())
@click.pass_context
def fix(ctx, set_name, dry_run, files):
    """Copy FILES into a set and record that set as their owner.

    This repairs files that block 'push' because their set, or their file
    in the set, has gone missing from the repo.
    """
    profile = _load_profile(ctx)
    opts = _execution_options(ctx, dry_run)
    name = _destination_set(profile, set_name)
    paths = _local_paths(profile, files)
    with _monja_errors():
        result = operation.fix(profile, opts, paths, name)
    _report_put(result, dry_run)


@main.command("new-set")
@_dry_run_option
@click.argument("name")
@click.argument("files", nargs=-1, type=click.Path())
@click.pass_context
def new_set(ctx, dry_run, name, files):
    """Create set NAME from FILES and add it to the end of target-sets.

    The set's shortcut is the deepest directory shared by all FILES.
    """
    profile = _load_profile(ctx)
    opts = _execution_options(ctx, dry_run)
    paths = _local_paths(profile, files)
    with _monja_errors():
        result = operation.new_set(profile, opts, _profile_path(ctx), paths, name)

    verb = "Would create" if dry_run else "Created"
    click.echo(f"{verb} set {result.new_set} (shortcut: {result.shortcut or '(root)'})")
    _echo_paths("Files:", result.files)


@main.command()
@_dry_run_option
@click.option("--repo-dir", type=click.Path(file_okay=False), default=None,
              help="Where to create the repo. Default: <data-dir>/repo.")
@click.option("--set", "-s", "set_name", default=None,
              help="Name of the first set. Default: this machine's hostname.")
@click.pass_context
def init(ctx, dry_run, repo_dir, set_name):
    """Create a profile, a repo and its first set."""
    local_root = _local_root(ctx)
    data_dir = _data_dir(ctx)
    repo_root = Path(repo_dir).expanduser() if repo_dir else data_dir / "repo"
    repo_root = repo_root.resolve()
    set_name = set_name or platform.node() or "default"

    if not dry_run:
        data_dir.mkdir(parents=True, exist_ok=True)
    try:
        local = AbsolutePath.for_existing_path(local_root)
        # the data dir does not exist yet on a dry run
        data = AbsolutePath(data_dir.resolve()) if dry_run else AbsolutePath.for_existing_path(data_dir)
    except FileNotFoundError as exc:
        raise click.ClickException(f"Directory not found: {exc.filename}")

    relative = repo_root.relative_to(local.path) if repo_root.is_relative_to(local.path) else repo_root
    spec = InitSpec(
        profile_config_path=_profile_path(ctx),
        local_root=local,
        data_root=data,
        repo_root=repo_root,
        relative_repo_root=relative,
        initial_set_name=set_name,
    )
    opts = _execution_options(ctx, dry_run)
    with _monja_errors():
        result = operation.init(opts, spec)

    verb = "Would create" if dry_run else "Created"
    click.echo(f"{verb} profile {result.profile_config_path}")
    click.echo(f"{verb} set {set_name} in {repo_root}")
    _status(ctx, f"Repo dir in profile: {relative}")
