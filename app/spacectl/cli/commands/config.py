"""Configuration commands.

Shows the effective configuration and creates a starter config file.
"""

import json
from typing import Annotated

import typer

from spacectl.cli.types import get_store
from spacectl.core.config import ConfigError, init_config
from spacectl.core.paths import get_config_path, get_rc_path
from spacectl.utils.formatting import console, print_error, print_info, print_success

app = typer.Typer(
    help="Show and initialize configuration.",
    no_args_is_help=True,
)


@app.command()
def show(ctx: typer.Context) -> None:
    """Print the effective configuration as JSON."""
    config = get_store(ctx).get()
    data = config.model_dump(mode="json", by_alias=True)
    console.print_json(json.dumps(data))


@app.command()
def init(
    ctx: typer.Context,
    force: Annotated[
        bool,
        typer.Option("--force", "-f", help="Overwrite an existing config file."),
    ] = False,
) -> None:
    """Write a starter configuration file to ~/.spacectlrc."""
    store = get_store(ctx)
    try:
        path = init_config(store.path, force=force)
    except ConfigError as e:
        print_error(str(e))
        if not force:
            print_info("Use --force to overwrite it.")
        raise typer.Exit(code=1) from e

    store.invalidate()
    print_success(f"Configuration written to {path}")


@app.command()
def path(ctx: typer.Context) -> None:
    """Show the configuration file locations, in lookup order."""
    store = get_store(ctx)
    candidates = [store.path] if store.path is not None else [get_rc_path(), get_config_path()]

    for candidate in candidates:
        marker = "[success]✓[/]" if candidate.exists() else "[muted]-[/]"
        console.print(f"{marker} {candidate}")
