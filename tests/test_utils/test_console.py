from __future__ import annotations

from typing import Generator
from unittest.mock import MagicMock, patch

import pytest
from rich.console import Console

from dotnet_outdated.utils.console import (
    OUTDATED_THEME,
    _get_console,
    _should_use_color,
    colorize_update_type,
    get_raw_console,
    print_error,
    print_heading,
    print_note,
    print_success,
    print_table,
    print_warning,
    reconfigure_console,
)


@pytest.fixture(autouse=True)
def reset_console() -> Generator[None, None, None]:
    """Reset the console singleton before and after each test."""
    reconfigure_console()
    yield
    reconfigure_console()


@pytest.fixture
def mock_console() -> Generator[MagicMock, None, None]:
    console = MagicMock(spec=Console)
    with patch("dotnet_outdated.utils.console._get_console", return_value=console):
        yield console


@pytest.mark.unit
class TestShouldUseColor:
    def test_no_color_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("NO_COLOR", "1")

        assert _should_use_color() is False

    def test_ci_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("NO_COLOR", raising=False)
        monkeypatch.setenv("CI", "true")

        assert _should_use_color() is False

    def test_tty(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("NO_COLOR", raising=False)
        monkeypatch.delenv("CI", raising=False)

        with patch("dotnet_outdated.utils.console.sys.stdout") as stdout:
            stdout.isatty.return_value = True
            assert _should_use_color() is True


@pytest.mark.unit
class TestConsoleSingleton:
    def test_singleton(self) -> None:
        assert _get_console() is _get_console()
        assert get_raw_console() is _get_console()

    def test_reconfigure_creates_new_console(self) -> None:
        first = _get_console()
        reconfigure_console()

        assert _get_console() is not first

    def test_theme_styles(self) -> None:
        for name in ("success", "error", "warning", "project", "framework"):
            assert name in OUTDATED_THEME.styles


@pytest.mark.unit
class TestStatusMessages:
    def test_success(self, mock_console: MagicMock) -> None:
        print_success("done")

        mock_console.print.assert_called_once_with("[OK] done", style="success", markup=False)

    def test_error_does_not_interpret_markup(self, mock_console: MagicMock) -> None:
        print_error("bad [range]")

        mock_console.print.assert_called_once_with(
            "[ERROR] bad [range]", style="error", markup=False
        )

    def test_warning_custom_prefix(self, mock_console: MagicMock) -> None:
        print_warning("careful", prefix="!")

        mock_console.print.assert_called_once_with("! careful", style="warning", markup=False)


@pytest.mark.unit
class TestHeadings:
    def test_heading_escapes_markup(self, mock_console: MagicMock) -> None:
        print_heading("[bold]App", style="framework", indent=2)

        mock_console.print.assert_called_once_with("  [framework]\\[bold]App[/framework]")

    def test_note_is_dim_plain_text(self, mock_console: MagicMock) -> None:
        print_note("-- none --")

        mock_console.print.assert_called_once_with("-- none --", style="dim", markup=False)


@pytest.mark.unit
class TestPrintTable:
    def test_empty_data_prints_nothing(self, mock_console: MagicMock) -> None:
        print_table([])

        mock_console.print.assert_not_called()

    def test_columns_from_first_row(self, mock_console: MagicMock) -> None:
        print_table([{"Package": "Serilog", "Latest": "3.1.1"}], title="net8.0")

        table = mock_console.print.call_args[0][0]
        assert [c.header for c in table.columns] == ["Package", "Latest"]
        assert table.title == "net8.0"
        assert table.row_count == 1

    def test_column_styles(self, mock_console: MagicMock) -> None:
        print_table(
            [{"Status": "OK"}],
            column_styles={"Status": {"justify": "center", "no_wrap": True}},
        )

        column = mock_console.print.call_args[0][0].columns[0]
        assert column.justify == "center"
        assert column.no_wrap is True


@pytest.mark.unit
class TestColorizeUpdateType:
    @pytest.mark.parametrize(
        "update_type, expected",
        [
            ("major", "[red]major[/red]"),
            ("minor", "[yellow]minor[/yellow]"),
            ("patch", "[green]patch[/green]"),
            ("prerelease", "[cyan]prerelease[/cyan]"),
            ("unknown", "unknown"),
        ],
    )
    def test_colors(self, update_type: str, expected: str) -> None:
        assert colorize_update_type(update_type) == expected
