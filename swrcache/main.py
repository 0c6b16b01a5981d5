"""Command line for inspecting and clearing swrcache stores on disk.

Sets up the Typer CLI application, wires configuration, logging and the
console display, and delegates to the store maintenance helpers.
"""

import logging
from pathlib import Path
from typing import Annotated, List, Optional

import typer

from swrcache.domain.exceptions import CacheConfigError
from swrcache.domain.models.options import CacheSettings
from swrcache.infrastructure.cache.maintenance import clear_stores, list_stores
from swrcache.infrastructure.cli.display import ConsoleDisplay
from swrcache.infrastructure.config.settings import get_log_file, get_log_level, load_cache_settings
from swrcache.infrastructure.monitoring.logger_setup import setup_logging

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="swrcache",
    help="Inspect and clear the disk stores behind swr() and memo() caches.",
    add_completion=False,
)

# Set by the callback, read by the commands
_state = {"dev": False}


def _settings(display: ConsoleDisplay) -> CacheSettings:
    try:
        return load_cache_settings(dev_mode=_state["dev"])
    except CacheConfigError as e:
        display.display_error(f"Invalid configuration: {e}")
        raise typer.Exit(code=2)


@app.callback()
def main_callback(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug logging.")] = False,
    dev: Annotated[bool, typer.Option("--dev", help="Resolve settings as in development mode.")] = False,
    log_file: Annotated[Optional[Path], typer.Option("--log-file", help="Also write log records to this file.")] = None,
):
    """Inspect and clear swrcache stores."""
    try:
        log_level = logging.DEBUG if verbose else get_log_level()
    except CacheConfigError as e:
        ConsoleDisplay().display_error(f"Invalid configuration: {e}")
        raise typer.Exit(code=2)
    setup_logging(log_level=log_level, log_file=log_file or get_log_file())
    _state["dev"] = dev


@app.command()
def info():
    """Show the resolved cache settings."""
    display = ConsoleDisplay()
    display.display_settings(_settings(display))


@app.command(name="list")
def list_command():
    """List the stores in the cache directory."""
    display = ConsoleDisplay()
    settings = _settings(display)
    display.display_stores(list_stores(settings.cache_dir))


@app.command()
def clear(
    names: Annotated[Optional[List[str]], typer.Argument(help="Store names to clear.")] = None,
    all_stores: Annotated[bool, typer.Option("--all", help="Clear every store in the cache directory.")] = False,
):
    """Empty stores on disk. Processes that already loaded them keep their in-memory copy."""
    display = ConsoleDisplay()
    if not names and not all_stores:
        display.display_error("Give one or more store names, or --all.")
        raise typer.Exit(code=1)

    settings = _settings(display)
    result = clear_stores(settings.cache_dir, [] if all_stores else names)
    for name in result.cleared:
        display.display_info(f"Cleared store '{name}'.")
    for name in result.skipped:
        display.display_info(f"Skipped '{name}': not a swrcache store, left untouched.")
    for name in result.missing:
        display.display_error(f"No store named '{name}' in {settings.cache_dir}.")
    if not result.cleared and not result.missing and not result.skipped:
        display.display_info("No stores found.")
    if result.missing or (not all_stores and result.skipped):
        raise typer.Exit(code=1)


def cli_entry_point():
    """Function to be called by the script entry point in pyproject.toml."""
    app()


if __name__ == "__main__":
    cli_entry_point()
