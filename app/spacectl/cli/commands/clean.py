"""Clean command implementation.

Scans, lets the user choose what to remove, then deletes the selection or
moves it into a backup session.
"""

from typing import Annotated

import typer
from rich.progress import BarColumn, MofNCompleteColumn, Progress, SpinnerColumn, TextColumn

from spacectl.cli.display import (
    create_result_items_table,
    create_summary_table,
    print_clean_summary,
)
from spacectl.cli.types import get_store, is_quiet, parse_selection, run_scans, select_scanners
from spacectl.core.cleaner import CategorySelection, clean_selection
from spacectl.filesystem.backup import BackupManager
from spacectl.models.category import CategoryId, ConfirmationPolicy, SafetyLevel
from spacectl.models.item import CleanableItem, CleanSummary, ScanResult, ScanSummary
from spacectl.utils.formatting import (
    console,
    err_console,
    format_size,
    print_info,
    print_success,
    print_warning,
)

app = typer.Typer(
    help="Remove reclaimable files.",
    invoke_without_command=True,
)


@app.callback(invoke_without_command=True)
def clean_categories(
    ctx: typer.Context,
    select_all: Annotated[
        bool,
        typer.Option("--all", "-a", help="Clean every category found, without selection prompts."),
    ] = False,
    yes: Annotated[
        bool,
        typer.Option("--yes", "-y", help="Skip the final confirmation prompt."),
    ] = False,
    dry_run: Annotated[
        bool,
        typer.Option("--dry-run", help="Show what would be removed."),
    ] = False,
    unsafe: Annotated[
        bool,
        typer.Option("--unsafe", help="Include risky categories."),
    ] = False,
    categories: Annotated[
        list[CategoryId] | None,
        typer.Option(
            "--category",
            "-c",
            help="Category to clean (repeatable). Defaults to all enabled categories.",
            case_sensitive=False,
        ),
    ] = None,
    backup: Annotated[
        bool | None,
        typer.Option(
            "--backup/--no-backup",
            help="Move items into a backup session instead of deleting them.",
        ),
    ] = None,
) -> None:
    """Clean selected categories.

    Risky categories are skipped unless --unsafe is given. Categories that
    may hold user data are confirmed item by item.

    Examples:
        spacectl clean                       # Choose categories interactively
        spacectl clean --all --yes           # Clean all safe categories
        spacectl clean -c trash --dry-run    # Preview cleaning the trash
        spacectl clean --backup              # Keep a restorable backup
    """
    if ctx.invoked_subcommand is not None:
        return

    store = get_store(ctx)
    config = store.get()
    quiet = is_quiet(ctx)

    scanners = select_scanners(categories, config)
    if not scanners:
        print_warning("No categories selected.")
        return

    summary = run_scans(scanners, config, quiet=quiet)
    for error in summary.errors:
        print_warning(f"Scan failed for {error}")

    results = [r for r in summary.results if r.items]
    if not results:
        print_success("Nothing to clean.")
        raise typer.Exit(code=1 if summary.errors else 0)

    if not unsafe:
        results = _skip_risky(results)
        if not results:
            print_success("Nothing safe to clean.")
            return

    policy = config.confirmation_policy()
    if select_all:
        selections = [
            CategorySelection(category_id=r.category.id, items=r.items) for r in results
        ]
    else:
        selections = _select_interactively(results, policy)

    if not selections:
        print_info("No items selected for cleaning.")
        return

    use_backup = config.backup_enabled if backup is None else backup
    total_items = sum(len(s.items) for s in selections)
    total_size = sum(item.size_bytes for s in selections for item in s.items)

    if not yes and not dry_run:
        action = "Back up and remove" if use_backup else "Delete"
        confirmed = typer.confirm(
            f"\n{action} {total_items} items ({format_size(total_size)})?",
            default=False,
        )
        if not confirmed:
            print_info("Aborted.")
            raise typer.Exit(code=0)

    manager = BackupManager() if use_backup else None
    if dry_run:
        print_info("Dry run: no files will be changed.")

    clean_summary = _run_clean(selections, dry_run, manager, quiet)
    print_clean_summary(clean_summary, dry_run=dry_run)

    if manager is not None and not dry_run:
        pruned = manager.clean_old_backups(config.backup_retention_days)
        if pruned:
            print_info(f"Removed {pruned} expired backup session(s).")

    if clean_summary.total_errors or summary.errors:
        raise typer.Exit(code=1)


def _run_clean(
    selections: list[CategorySelection],
    dry_run: bool,
    manager: BackupManager | None,
    quiet: bool,
) -> CleanSummary:
    progress = Progress(
        SpinnerColumn(),
        TextColumn("[info]{task.description}[/]"),
        BarColumn(bar_width=30),
        MofNCompleteColumn(),
        console=err_console,
        transient=True,
        disable=quiet,
    )
    total = sum(len(s.items) for s in selections)

    with progress:
        task_id = progress.add_task("Cleaning...", total=total)

        def _on_progress(
            category_id: CategoryId, index: int, count: int, item: CleanableItem
        ) -> None:
            progress.update(task_id, advance=1, description=f"Cleaning {item.name}")

        return clean_selection(
            selections, dry_run=dry_run, backup=manager, on_progress=_on_progress
        )


def _skip_risky(results: list[ScanResult]) -> list[ScanResult]:
    """Drop risky categories and tell the user what was skipped."""
    risky = [r for r in results if r.category.safety_level == SafetyLevel.RISKY]
    if not risky:
        return results

    console.print("\n[warning]Skipping risky categories (use --unsafe to include):[/]")
    for result in risky:
        size = format_size(result.total_size)
        console.print(f"  [safety_risky]●[/] {result.category.name}: {size}")
        if result.category.safety_note:
            console.print(f"     [muted]{result.category.safety_note}[/]")
    console.print(f"  [muted]Total skipped: {format_size(sum(r.total_size for r in risky))}[/]")

    return [r for r in results if r.category.safety_level != SafetyLevel.RISKY]


def _select_items(result: ScanResult) -> tuple[CleanableItem, ...]:
    """Prompt for the items of one category until the input parses."""
    if result.category.safety_level == SafetyLevel.RISKY and result.category.safety_note:
        console.print(f"\n[safety_risky]WARNING:[/] {result.category.safety_note}")

    console.print(create_result_items_table(result))

    while True:
        answer = typer.prompt(
            "Items to clean (e.g. 1,3-5, 'all', empty for none)",
            default="",
            show_default=False,
        )
        try:
            indices = parse_selection(answer, len(result.items))
        except ValueError as e:
            print_warning(str(e))
            continue
        return tuple(result.items[i] for i in indices)


def _select_interactively(
    results: list[ScanResult], policy: ConfirmationPolicy
) -> list[CategorySelection]:
    """Ask per category, and per item where the policy requires it."""
    console.print(create_summary_table(ScanSummary(results=tuple(results)), title="Categories"))

    selections: list[CategorySelection] = []
    for result in results:
        category = result.category
        if not typer.confirm(
            f"Clean {category.name} ({format_size(result.total_size)})?", default=False
        ):
            continue

        if policy.requires_item_selection(category):
            items = _select_items(result)
        else:
            items = result.items

        if items:
            selections.append(CategorySelection(category_id=category.id, items=items))

    return selections
