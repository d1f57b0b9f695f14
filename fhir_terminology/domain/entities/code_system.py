from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field


def _empty_properties() -> dict[str, str]:
    return {}


def _empty_children() -> tuple[Concept, ...]:
    return ()


@dataclass(frozen=True, slots=True)
class Concept:
    code: str
    display: str | None = None
    abstract: bool = False
    properties: Mapping[str, str] = field(default_factory=_empty_properties)
    children: tuple[Concept, ...] = field(default_factory=_empty_children)

    def __post_init__(self) -> None:
        if not self.code:
            raise ValueError("Concept code must be a non-empty string")

    def iter_tree(self) -> Iterator[Concept]:
        """Yield this concept followed by all of its descendants, depth first."""
        yield self
        for child in self.children:
            yield from child.iter_tree()

    def find_child(self, code: str) -> Concept | None:
        for child in self.children:
            if child.code == code:
                return child
            found = child.find_child(code)
            if found is not None:
                return found
        return None


@dataclass(frozen=True, slots=True)
class CodeSystem:
    url: str
    concepts: tuple[Concept, ...]
    version: str | None = None
    name: str | None = None

    def __post_init__(self) -> None:
        if not self.url:
            raise ValueError("CodeSystem url must be a non-empty string")
        seen: set[str] = set()
        for concept in self.iter_concepts():
            if concept.code in seen:
                raise ValueError(
                    f"Duplicate code '{concept.code}' in code system {self.url}"
                )
            seen.add(concept.code)

    @property
    def canonical(self) -> str:
        if self.version:
            return f"{self.url}|{self.version}"
        return self.url

    def iter_concepts(self) -> Iterator[Concept]:
        for concept in self.concepts:
            yield from concept.iter_tree()

    def concept_count(self) -> int:
        return sum(1 for _ in self.iter_concepts())
