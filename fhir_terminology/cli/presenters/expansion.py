from __future__ import annotations

from typing import TYPE_CHECKING

from rich.markup import escape
from rich.table import Table

if TYPE_CHECKING:
    from rich.console import Console

    from ...domain.entities.expansion import Expansion, ExpansionEntry

DEFAULT_ROW_LIMIT = 50


class ExpansionPresenter:
    pass

    def __init__(self, console: Console, *, row_limit: int = DEFAULT_ROW_LIMIT) -> None:
        super().__init__()
        self.console = console
        self.row_limit = row_limit

    def present(self, value_set_uri: str, expansion: Expansion) -> None:
        self.console.print()
        self.console.print(self._build_table(value_set_uri, expansion))
        hidden = len(expansion) - self.row_limit
        if hidden > 0:
            self.console.print(f"[dim]… {hidden:,} more concepts not shown[/dim]")
        self.console.print(f"[bold]Total:[/bold] {expansion.total:,}")
        self.console.print(
            f"[bold]Identifier:[/bold] {escape(expansion.identifier)}"
        )
        for parameter in expansion.parameters:
            self.console.print(
                f"[bold]Parameter:[/bold] {escape(parameter.name)} = "
                f"{escape(parameter.value)}"
            )
        for warning in expansion.warnings:
            self.console.print(f"[yellow]⚠[/yellow] {escape(warning.message)}")

    def _build_table(self, value_set_uri: str, expansion: Expansion) -> Table:
        table = Table(
            title=f"Expansion of {escape(value_set_uri)}",
            show_header=True,
            header_style="bold cyan",
            border_style="bright_blue",
        )
        table.add_column("System", style="dim", overflow="fold")
        table.add_column("Code", style="cyan", no_wrap=True)
        table.add_column("Display", overflow="fold")
        table.add_column("Abstract", justify="center", no_wrap=True)
        table.add_column("Children", justify="right", style="yellow", no_wrap=True)
        for entry in expansion.entries[: self.row_limit]:
            table.add_row(*self._row(entry))
        return table

    @staticmethod
    def _row(entry: ExpansionEntry) -> tuple[str, str, str, str, str]:
        return (
            escape(entry.system),
            escape(entry.code),
            escape(entry.display or ""),
            "✓" if entry.abstract else "",
            str(len(entry.children)) if entry.children else "",
        )
