from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .code_system import CodeSystem
    from .expansion import Expansion


def _empty_rules() -> tuple[ComposeRule, ...]:
    return ()


@dataclass(frozen=True, slots=True)
class ConceptReference:
    code: str
    display: str | None = None


@dataclass(frozen=True, slots=True)
class ConceptFilter:
    property: str
    op: str
    value: str = ""


@dataclass(frozen=True, slots=True)
class IncludeAll:
    system: str
    version: str | None = None


@dataclass(frozen=True, slots=True)
class IncludeCodes:
    system: str
    codes: tuple[ConceptReference, ...]
    version: str | None = None


@dataclass(frozen=True, slots=True)
class IncludeFiltered:
    system: str
    filters: tuple[ConceptFilter, ...]
    version: str | None = None


@dataclass(frozen=True, slots=True)
class ImportValueSets:
    value_sets: tuple[str, ...]


ComposeRule = IncludeAll | IncludeCodes | IncludeFiltered | ImportValueSets


@dataclass(frozen=True, slots=True)
class Compose:
    include: tuple[ComposeRule, ...] = field(default_factory=_empty_rules)
    exclude: tuple[ComposeRule, ...] = field(default_factory=_empty_rules)

    def imported_value_sets(self) -> list[str]:
        uris: list[str] = []
        for rule in (*self.include, *self.exclude):
            if isinstance(rule, ImportValueSets):
                uris.extend(rule.value_sets)
        return uris


@dataclass(slots=True)
class ValueSet:
    """A value set definition with an optional cached expansion.

    Everything except ``expansion`` is treated as read-only. The expansion
    is only ever replaced as a whole through ``attach_expansion`` or
    ``clear_expansion``; an ``Expansion`` itself is immutable.
    """

    url: str
    version: str | None = None
    name: str | None = None
    code_system: CodeSystem | None = None
    compose: Compose | None = None
    expansion: Expansion | None = None

    def __post_init__(self) -> None:
        if not self.url:
            raise ValueError("ValueSet url must be a non-empty string")

    @property
    def has_expansion(self) -> bool:
        return self.expansion is not None

    @property
    def canonical(self) -> str:
        if self.version:
            return f"{self.url}|{self.version}"
        return self.url

    def attach_expansion(self, expansion: Expansion) -> None:
        self.expansion = expansion

    def clear_expansion(self) -> None:
        self.expansion = None

    def expansion_size(self) -> int:
        if self.expansion is None:
            return 0
        return len(self.expansion)

    def code_in_expansion(self, code: str, system: str | None = None) -> bool:
        if self.expansion is None:
            return False
        return self.expansion.contains_code(code, system)
