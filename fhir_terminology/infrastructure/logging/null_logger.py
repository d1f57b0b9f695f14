from __future__ import annotations

from typing import TYPE_CHECKING, override

from ...application.ports.services import LoggerPort

if TYPE_CHECKING:
    from ...domain.entities.expansion import Expansion
    from ...domain.entities.validation import ValidationResult


class NullLogger(LoggerPort):
    pass

    @override
    def info(self, message: str) -> None:
        return

    @override
    def success(self, message: str) -> None:
        return

    @override
    def warning(self, message: str) -> None:
        return

    @override
    def error(self, message: str) -> None:
        return

    @override
    def debug(self, message: str) -> None:
        return

    @override
    def verbose(self, message: str) -> None:
        return

    @override
    def log_expansion_start(self, value_set_url: str, *, forced: bool) -> None:
        return None

    @override
    def log_expansion_complete(
        self, value_set_url: str, expansion: Expansion
    ) -> None:
        return None

    @override
    def log_validation_result(
        self, value_set_url: str, code: str, system: str, result: ValidationResult
    ) -> None:
        return None

    @override
    def log_final_stats(self) -> None:
        return None
