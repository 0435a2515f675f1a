"""The pull, push, status and clean commands."""

from __future__ import annotations

import os

import click

from .. import operation
from ..operation import CleanMode
from ..paths import LocalFilePath
from ._helpers import (
    main,
    _dry_run_option,
    _echo_paths,
    _echo_set_files,
    _execution_options,
    _load_profile,
    _local_paths,
    _monja_errors,
    _status,
)


@main.command()
@_dry_run_option
@click.pass_context
def pull(ctx, dry_run):
    """Copy the target sets into the local tree.

    Sets are layered in profile order; when several sets provide the same
    file the one listed last wins.  Existing local files are overwritten.
    """
    profile = _load_profile(ctx)
    opts = _execution_options(ctx, dry_run)
    with _monja_errors():
        result = operation.pull(profile, opts)

    if not result.files_pulled:
        click.echo("No files pulled.")
    else:
        click.echo("Would pull:" if dry_run else "Pulled:")
        for set_name, records in result.files_pulled:
            click.echo(f"  {set_name}:")
            for record in records:
                click.echo(f"    {record.path_in_set} -> {record.local_path}")
    _echo_paths(
        "Files no longer provided by any set (remove with 'monja clean'):",
        result.cleanable_files,
    )
    _status(ctx, f"{result.total} file(s) from {len(result.files_pulled)} set(s)")


@main.command()
@_dry_run_option
@click.pass_context
def push(ctx, dry_run):
    """Copy tracked local files back into the sets that own them.

    Nothing is copied if any tracked file's set, or its file in the set,
    has disappeared from the repo.
    """
    profile = _load_profile(ctx)
    opts = _execution_options(ctx, dry_run)
    with _monja_errors():
        result = operation.push(profile, opts)

    if not result.files_pushed:
        click.echo("No files pushed.")
    else:
        _echo_set_files("Would push:" if dry_run else "Pushed:", result.files_pushed)
    _echo_set_files(
        "Not pushed (set is not in target-sets):", result.files_not_targeted,
    )
    _status(ctx, f"{result.total} file(s) pushed")


@main.command()
@click.argument("location", required=False, type=click.Path())
@click.pass_context
def status(ctx, location):
    """Show how local files relate to the repo.

    With LOCATION, only files at or below that path are shown.
    """
    profile = _load_profile(ctx)
    loc = _local_paths(profile, [location])[0] if location else LocalFilePath("")
    with _monja_errors():
        st = operation.local_status(profile, loc)

    _echo_set_files("Tracked files:", st.files_to_push)
    _echo_set_files("Files whose set is missing from the repo:", st.files_with_missing_sets)
    _echo_set_files("Files missing from their set:", st.missing_files)
    _echo_paths("Untracked files:", st.untracked_files)
    _echo_paths("Files left behind by the last pull:", st.old_files_since_last_pull)
    if not (st.files_to_push or st.files_with_missing_sets or st.missing_files
            or st.untracked_files or st.old_files_since_last_pull):
        click.echo(f"Nothing to report under {os.fspath(loc.to_path(profile.local_root))}.")


@main.command()
@_dry_run_option
@click.option("--mode", type=click.Choice([m.value for m in CleanMode]),
              default=CleanMode.INDEX.value, show_default=True,
              help="'index': files the last pull left behind. "
                   "'full': every untracked or orphaned local file.")
@click.pass_context
def clean(ctx, dry_run, mode):
    """Remove local files that no set provides any more.

    Files matched by .monjaignore are never removed.
    """
    profile = _load_profile(ctx)
    opts = _execution_options(ctx, dry_run)
    with _monja_errors():
        result = operation.clean(profile, opts, CleanMode(mode))

    if not result.files_cleaned:
        click.echo("Nothing to clean.")
        return
    _echo_paths("Would remove:" if dry_run else "Removed:", result.files_cleaned)
