from __future__ import annotations

from typing import TYPE_CHECKING

from rich.markup import escape
from rich.table import Table

from ...domain.entities.validation import IssueSeverity

if TYPE_CHECKING:
    from rich.console import Console

    from ...domain.entities.validation import ValidationResult

_SEVERITY_STYLES = {
    IssueSeverity.FATAL: "bold red",
    IssueSeverity.ERROR: "red",
    IssueSeverity.WARNING: "yellow",
    IssueSeverity.INFORMATION: "dim",
}


class ValidationPresenter:
    pass

    def __init__(self, console: Console) -> None:
        super().__init__()
        self.console = console

    def present(
        self, value_set_uri: str, code: str, system: str, result: ValidationResult
    ) -> None:
        coding = f"{escape(system)}#{escape(code)}"
        target = escape(value_set_uri)
        self.console.print()
        if result.success:
            self.console.print(f"[green]✓[/green] {coding} is valid in {target}")
        else:
            self.console.print(f"[red]✗[/red] {coding} is not valid in {target}")
        if result.issues:
            self.console.print(self._build_table(result))

    def _build_table(self, result: ValidationResult) -> Table:
        table = Table(show_header=True, header_style="bold cyan")
        table.add_column("Severity", no_wrap=True)
        table.add_column("Kind", style="cyan", no_wrap=True)
        table.add_column("Message", overflow="fold")
        for issue in result.issues:
            style = _SEVERITY_STYLES[issue.severity]
            table.add_row(
                f"[{style}]{issue.severity}[/{style}]",
                str(issue.kind),
                escape(issue.message),
            )
        return table
