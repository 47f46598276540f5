"""Backup commands for Sandman CLI.

Commands:
- backup: Back up one directory once
- watch: Run every configured target continuously
"""

from __future__ import annotations

import signal
import sys
import threading
from pathlib import Path

import click

from sandman.backup import Gatherer, create_object_store, run_gatherers
from sandman.cli.config import ensure_config_files
from sandman.core.config import BackupTarget, ConfigError, load_config
from sandman.core.paths import get_config_file, get_global_ignore_file


@click.command()
@click.option(
    "--local-directory",
    required=True,
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    help="Local directory to back up.",
)
@click.option("--s3-bucket", required=True, help="S3 bucket name for the backup.")
@click.option("--bucket-prefix", default="", help="Key prefix inside the bucket.")
def backup(local_directory: Path, s3_bucket: str, bucket_prefix: str) -> None:
    """Back up a directory once.

    Uploads the files that changed since the last run and records the new
    baseline in the directory. Credentials come from the default AWS chain.
    """
    target = BackupTarget(
        name=local_directory.resolve().name or str(local_directory),
        directory=str(local_directory),
        bucket=s3_bucket,
        prefix=bucket_prefix,
    )
    gatherer = Gatherer(
        target,
        create_object_store(),
        global_ignore_file=get_global_ignore_file(),
    )
    run_gatherers([gatherer], oneshot=True)

    result = gatherer.last_result
    if result is None:
        click.echo("Backup did not complete, see the log for details.", err=True)
        return

    click.echo(
        f"  ↑ {len(result.uploaded)}/{len(result.changes.files)} changed files uploaded "
        f"({result.scanned} scanned)"
    )
    if result.failed:
        click.echo(click.style(f"  {len(result.failed)} uploads failed", fg="red"))


@click.command()
@click.option(
    "--config-path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Configuration file (default: the one in the configuration directory).",
)
def watch(config_path: Path | None) -> None:
    """Back up every configured directory until interrupted.

    Each target runs on its own interval. Ctrl+C finishes the cycles in
    progress and exits.
    """
    if config_path is None:
        try:
            bootstrap = ensure_config_files()
        except OSError as e:
            click.echo(f"Error: Unable to create configuration: {e}", err=True)
            sys.exit(1)
        config_path = get_config_file()
        if bootstrap.created_config:
            click.echo(
                "No configuration file was found-- please modify the default "
                f"found at {config_path} and restart Sandman",
                err=True,
            )
            sys.exit(1)

    try:
        config = load_config(config_path)
    except ConfigError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    if not config.backups:
        click.echo("No backups configured, nothing to do.")
        return

    cancel_event = threading.Event()
    global_ignore_file = get_global_ignore_file()
    gatherers = [
        Gatherer(target, create_object_store(config.aws), cancel_event, global_ignore_file)
        for target in config.backups
    ]

    def signal_handler(signum: int, frame: object) -> None:
        busy = [g.target.name for g in gatherers if g.state.in_cycle]
        if busy:
            click.echo(f"\nStopping after the current cycles of: {', '.join(busy)}...")
        else:
            click.echo("\nStopping...")
        cancel_event.set()

    previous_int = signal.signal(signal.SIGINT, signal_handler)
    previous_term = signal.signal(signal.SIGTERM, signal_handler)
    click.echo(f"Watching {len(gatherers)} backups. Press Ctrl+C to stop.")
    try:
        run_gatherers(gatherers)
    finally:
        signal.signal(signal.SIGINT, previous_int)
        signal.signal(signal.SIGTERM, previous_term)
