"""Backup management commands.

Lists, restores and prunes backup sessions created by ``spacectl clean
--backup``.
"""

from pathlib import Path
from typing import Annotated

import typer
from rich.table import Table

from spacectl.cli.types import get_store
from spacectl.filesystem.backup import BackupManager
from spacectl.utils.formatting import (
    console,
    format_size,
    print_error,
    print_info,
    print_success,
    print_warning,
)

app = typer.Typer(
    help="Manage backup sessions.",
    no_args_is_help=True,
)


@app.command("list")
def list_backups() -> None:
    """List backup sessions, newest first."""
    manager = BackupManager()
    backups = manager.list_backups()

    if not backups:
        print_info("No backups found.")
        return

    table = Table(
        title="Backup Sessions",
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("Session", style="text", no_wrap=True)
    table.add_column("Created", style="muted")
    table.add_column("Size", style="size", justify="right")

    for info in backups:
        table.add_row(
            info.path.name,
            info.modified_at.strftime("%Y-%m-%d %H:%M:%S UTC"),
            format_size(info.size_bytes),
        )

    console.print(table)
    console.print(f"\n[dim]Backups are stored in {manager.backup_root}[/dim]")


@app.command()
def restore(
    session: Annotated[
        str | None,
        typer.Argument(help="Session name or path. Defaults to the most recent session."),
    ] = None,
    yes: Annotated[
        bool,
        typer.Option("--yes", "-y", help="Skip confirmation prompt."),
    ] = False,
) -> None:
    """Restore a backup session to its original locations."""
    manager = BackupManager()

    if session is None:
        backups = manager.list_backups()
        if not backups:
            print_error("No backups found.")
            raise typer.Exit(code=1)
        session_dir = backups[0].path
    else:
        candidate = Path(session)
        session_dir = candidate if candidate.is_absolute() else manager.backup_root / session

    if not yes:
        confirmed = typer.confirm(
            f"Restore {session_dir.name}? Existing files at the original paths are replaced.",
            default=False,
        )
        if not confirmed:
            print_info("Aborted.")
            raise typer.Exit(code=0)

    result = manager.restore_backup(session_dir)

    for error in result.errors:
        print_warning(error)

    if result.success:
        print_success(f"Restored {result.success} file(s) from {session_dir.name}.")

    if result.failed:
        print_error(f"{result.failed} file(s) could not be restored.")
        raise typer.Exit(code=1)


@app.command()
def prune(
    ctx: typer.Context,
    days: Annotated[
        int | None,
        typer.Option(
            "--days",
            "-d",
            min=1,
            help="Remove sessions older than this many days (default: from config).",
        ),
    ] = None,
) -> None:
    """Remove backup sessions older than the retention window."""
    retention = days if days is not None else get_store(ctx).get().backup_retention_days
    removed = BackupManager().clean_old_backups(retention)

    if removed:
        print_success(f"Removed {removed} backup session(s) older than {retention} days.")
    else:
        print_info(f"No backup sessions older than {retention} days.")
