from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from ...domain.entities.expansion import Expansion
    from ...domain.entities.validation import ValidationResult


@runtime_checkable
class LoggerPort(Protocol):
    pass

    def info(self, message: str) -> None: ...

    def success(self, message: str) -> None: ...

    def warning(self, message: str) -> None: ...

    def error(self, message: str) -> None: ...

    def debug(self, message: str) -> None: ...

    def verbose(self, message: str) -> None: ...

    def log_expansion_start(self, value_set_url: str, *, forced: bool) -> None: ...

    def log_expansion_complete(
        self, value_set_url: str, expansion: Expansion
    ) -> None: ...

    def log_validation_result(
        self, value_set_url: str, code: str, system: str, result: ValidationResult
    ) -> None: ...

    def log_final_stats(self) -> None: ...
