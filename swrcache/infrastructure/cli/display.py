"""Console output for the swrcache command line, rendered with rich."""

import logging
from typing import List, Optional

from rich.box import ROUNDED
from rich.console import Console
from rich.table import Table

from swrcache.domain.models.options import CacheSettings
from swrcache.infrastructure.cache.maintenance import StoreSummary

logger = logging.getLogger(__name__)


def _format_seconds(seconds: float) -> str:
    """1800 -> '30m', 604800 -> '7d', 90 -> '1m30s'."""
    remaining = int(seconds)
    parts = []
    for unit, size in (("d", 86400), ("h", 3600), ("m", 60)):
        if remaining >= size:
            parts.append(f"{remaining // size}{unit}")
            remaining %= size
    if remaining or not parts:
        parts.append(f"{remaining}s")
    return "".join(parts)


def _format_size(size_bytes: int) -> str:
    size = float(size_bytes)
    for unit in ("B", "KB", "MB"):
        if size < 1024:
            return f"{size:.0f} {unit}" if unit == "B" else f"{size:.1f} {unit}"
        size /= 1024
    return f"{size:.1f} GB"


class ConsoleDisplay:
    """Prints settings, store listings and status messages."""

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console()

    def display_info(self, message: str) -> None:
        self.console.print(f"[blue]Info:[/blue] {message}")

    def display_error(self, message: str) -> None:
        self.console.print(f"[bold red]Error:[/bold red] {message}")

    def display_settings(self, settings: CacheSettings) -> None:
        table = Table(title="swrcache settings", box=ROUNDED, show_header=True, header_style="bold cyan")
        table.add_column("Setting")
        table.add_column("Value")
        table.add_row("Cache directory", str(settings.cache_dir))
        table.add_row("Enabled", "yes" if settings.enabled else "no")
        table.add_row("Stale after", _format_seconds(settings.min_time_to_stale))
        table.add_row("Refetch after", _format_seconds(settings.max_time_to_live))
        table.add_row("Disk backstop (SWR)", _format_seconds(settings.backstop_ttl))
        self.console.print(table)

    def display_stores(self, stores: List[StoreSummary]) -> None:
        if not stores:
            self.display_info("No stores found.")
            return
        table = Table(title="Stores", box=ROUNDED, show_header=True, header_style="bold cyan")
        table.add_column("Name")
        table.add_column("Entries", justify="right")
        table.add_column("Size", justify="right")
        table.add_column("Modified")
        for store in stores:
            table.add_row(
                store.name,
                str(store.entries),
                _format_size(store.size_bytes),
                store.modified_at.strftime("%Y-%m-%d %H:%M:%S"),
            )
        self.console.print(table)
