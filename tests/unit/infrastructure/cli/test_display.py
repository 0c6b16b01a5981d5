import pytest
from datetime import datetime
from pathlib import Path
from unittest.mock import MagicMock

from rich.table import Table

from swrcache.domain.models.options import CacheSettings
from swrcache.infrastructure.cache.maintenance import StoreSummary
from swrcache.infrastructure.cli.display import ConsoleDisplay, _format_seconds, _format_size


@pytest.fixture
def mock_console():
    """Fixture to create a mock rich Console object."""
    return MagicMock()


@pytest.fixture
def console_display(mock_console: MagicMock):
    """Fixture to create a ConsoleDisplay instance with a mocked console."""
    return ConsoleDisplay(console=mock_console)


def test_display_info(console_display: ConsoleDisplay, mock_console: MagicMock):
    console_display.display_info("Process completed")
    mock_console.print.assert_called_once_with("[blue]Info:[/blue] Process completed")


def test_display_error(console_display: ConsoleDisplay, mock_console: MagicMock):
    console_display.display_error("Something went wrong")
    mock_console.print.assert_called_once_with("[bold red]Error:[/bold red] Something went wrong")


def test_display_settings_prints_a_table(console_display: ConsoleDisplay, mock_console: MagicMock, tmp_path: Path):
    console_display.display_settings(CacheSettings(cache_dir=tmp_path))

    mock_console.print.assert_called_once()
    table = mock_console.print.call_args.args[0]
    assert isinstance(table, Table)
    assert table.row_count == 5


def test_display_stores(console_display: ConsoleDisplay, mock_console: MagicMock, tmp_path: Path):
    stores = [
        StoreSummary("users", tmp_path / "users", 3, 2048, datetime(2026, 1, 2, 3, 4, 5)),
        StoreSummary("posts", tmp_path / "posts", 0, 12, datetime(2026, 1, 2, 3, 4, 5)),
    ]
    console_display.display_stores(stores)

    table = mock_console.print.call_args.args[0]
    assert isinstance(table, Table)
    assert table.row_count == 2


def test_display_stores_when_empty(console_display: ConsoleDisplay, mock_console: MagicMock):
    console_display.display_stores([])
    mock_console.print.assert_called_once_with("[blue]Info:[/blue] No stores found.")


@pytest.mark.parametrize("seconds, expected", [
    (0, "0s"),
    (45, "45s"),
    (90, "1m30s"),
    (1800, "30m"),
    (3600, "1h"),
    (604800, "7d"),
    (1209600, "14d"),
])
def test_format_seconds(seconds, expected):
    assert _format_seconds(seconds) == expected


@pytest.mark.parametrize("size, expected", [(12, "12 B"), (2048, "2.0 KB"), (5 * 1024 * 1024, "5.0 MB")])
def test_format_size(size, expected):
    assert _format_size(size) == expected
