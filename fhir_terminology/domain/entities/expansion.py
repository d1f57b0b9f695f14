from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .validation import Issue


def _empty_entries() -> tuple[ExpansionEntry, ...]:
    return ()


def _empty_parameters() -> tuple[ExpansionParameter, ...]:
    return ()


def _empty_warnings() -> tuple[Issue, ...]:
    return ()


@dataclass(frozen=True, slots=True)
class ExpansionEntry:
    system: str
    code: str
    display: str | None = None
    abstract: bool = False
    version: str | None = None
    children: tuple[ExpansionEntry, ...] = field(default_factory=_empty_entries)

    @property
    def key(self) -> tuple[str, str]:
        return (self.system, self.code)

    def find_code(self, code: str) -> ExpansionEntry | None:
        """Find a descendant of this entry by code, searching depth first."""
        for child in self.children:
            if child.code == code:
                return child
            found = child.find_code(code)
            if found is not None:
                return found
        return None


@dataclass(frozen=True, slots=True)
class ExpansionParameter:
    name: str
    value: str


@dataclass(frozen=True, slots=True)
class Expansion:
    identifier: str
    timestamp: str
    entries: tuple[ExpansionEntry, ...] = field(default_factory=_empty_entries)
    parameters: tuple[ExpansionParameter, ...] = field(
        default_factory=_empty_parameters
    )
    total: int | None = None
    warnings: tuple[Issue, ...] = field(default_factory=_empty_warnings)

    def __post_init__(self) -> None:
        if self.total is None:
            object.__setattr__(self, "total", len(self.entries))

    def __iter__(self) -> Iterator[ExpansionEntry]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    def find(self, code: str, system: str | None = None) -> ExpansionEntry | None:
        for entry in self.entries:
            if entry.code == code and (system is None or entry.system == system):
                return entry
        return None

    def contains_code(self, code: str, system: str | None = None) -> bool:
        return self.find(code, system) is not None

    def parameters_named(self, name: str) -> list[ExpansionParameter]:
        return [param for param in self.parameters if param.name == name]

    def systems(self) -> list[str]:
        seen: list[str] = []
        for entry in self.entries:
            if entry.system not in seen:
                seen.append(entry.system)
        return seen
