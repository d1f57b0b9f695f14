from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import IntEnum
from typing import TYPE_CHECKING, override

from rich.console import Console
from rich.markup import escape

from ...application.ports.services import LoggerPort

if TYPE_CHECKING:
    from ...domain.entities.expansion import Expansion
    from ...domain.entities.validation import ValidationResult


class LogLevel(IntEnum):
    NORMAL = 0
    VERBOSE = 1
    DEBUG = 2


@dataclass(slots=True)
class LogContext:
    value_set_url: str = ""
    operation: str = ""
    start_time: datetime = field(default_factory=datetime.now)

    def elapsed_ms(self) -> float:
        return (datetime.now() - self.start_time).total_seconds() * 1000


def _empty_stats() -> dict[str, int]:
    return {
        "expansions": 0,
        "validations": 0,
        "failed_validations": 0,
        "warnings": 0,
        "errors": 0,
    }


class ConsoleLogger(LoggerPort):
    pass

    def __init__(self, console: Console | None = None, verbosity: int = 0) -> None:
        super().__init__()
        self.console = console or Console()
        self.verbosity = verbosity
        self._context: LogContext | None = None
        self._stats = _empty_stats()

    def set_context(self, **kwargs: str) -> None:
        if self._context is None:
            self._context = LogContext()
        for key, value in kwargs.items():
            if hasattr(self._context, key):
                setattr(self._context, key, value)

    def clear_context(self) -> None:
        self._context = None

    @override
    def info(self, message: str, *, level: int = LogLevel.NORMAL) -> None:
        if self.verbosity >= level:
            self.console.print(f"{self._get_prefix()}{escape(message)}")

    @override
    def verbose(self, message: str) -> None:
        if self.verbosity >= LogLevel.VERBOSE:
            self.console.print(f"[dim]{self._get_prefix()}{escape(message)}[/dim]")

    @override
    def debug(self, message: str) -> None:
        if self.verbosity >= LogLevel.DEBUG:
            self.console.print(
                f"[dim cyan]{self._get_prefix()}{escape(message)}[/dim cyan]"
            )

    @override
    def success(self, message: str) -> None:
        self.console.print(f"[green]✓[/green] {escape(message)}")

    @override
    def warning(self, message: str) -> None:
        self._stats["warnings"] += 1
        self.console.print(f"[yellow]⚠[/yellow] {escape(message)}")

    @override
    def error(self, message: str) -> None:
        self._stats["errors"] += 1
        self.console.print(f"[red]✗[/red] {escape(message)}")

    @override
    def log_expansion_start(self, value_set_url: str, *, forced: bool) -> None:
        self.set_context(value_set_url=value_set_url, operation="expand")
        if self._context is not None:
            self._context.start_time = datetime.now()
        action = "Re-expanding" if forced else "Expanding"
        self.verbose(f"{action} {value_set_url}")

    @override
    def log_expansion_complete(
        self, value_set_url: str, expansion: Expansion
    ) -> None:
        self._stats["expansions"] += 1
        msg = f"Expanded {value_set_url}: {expansion.total:,} concepts"
        if self.verbosity >= LogLevel.DEBUG and self._context is not None:
            msg += f" in {self._context.elapsed_ms():.1f} ms"
        self.verbose(msg)
        self.debug(f"  Identifier: {expansion.identifier}")
        for parameter in expansion.parameters:
            self.debug(f"  Parameter {parameter.name} = {parameter.value}")

    @override
    def log_validation_result(
        self, value_set_url: str, code: str, system: str, result: ValidationResult
    ) -> None:
        self._stats["validations"] += 1
        if result.success:
            self.verbose(f"{system}#{code} is valid in {value_set_url}")
            return
        self._stats["failed_validations"] += 1
        self.verbose(f"{system}#{code} failed validation against {value_set_url}")
        for issue in result.issues:
            self.debug(f"  [{issue.severity}] {issue.kind}: {issue.message}")

    @override
    def log_final_stats(self) -> None:
        if self.verbosity < LogLevel.VERBOSE:
            return
        self.console.print()
        self.console.print("[dim]Terminology Statistics:[/dim]")
        self.console.print(f"[dim]  Expansions: {self._stats['expansions']}[/dim]")
        self.console.print(f"[dim]  Validations: {self._stats['validations']}[/dim]")
        if self._stats["failed_validations"] > 0:
            self.console.print(
                f"[dim yellow]  Failed validations: "
                f"{self._stats['failed_validations']}[/dim yellow]"
            )
        if self._stats["warnings"] > 0:
            self.console.print(
                f"[dim yellow]  Warnings: {self._stats['warnings']}[/dim yellow]"
            )
        if self._stats["errors"] > 0:
            self.console.print(f"[dim red]  Errors: {self._stats['errors']}[/dim red]")

    def get_stats(self) -> dict[str, int]:
        return self._stats.copy()

    def reset_stats(self) -> None:
        self._stats = _empty_stats()

    def _get_prefix(self) -> str:
        if self._context is None or self.verbosity < LogLevel.DEBUG:
            return ""
        if not self._context.value_set_url:
            return ""
        return escape(f"[{self._context.value_set_url}] ")
