"""Evaluation of a value set ``compose`` definition.

Include rules are unioned in source order, exclude rules are subtracted
afterwards. Entries are keyed by ``(system, code)`` and the first
occurrence of a key wins, so the resulting order is the first-seen order
across all includes.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
import re
from typing import TYPE_CHECKING

from ...constants import FilterOps, FilterProperties
from ..entities.expansion import ExpansionEntry
from ..entities.validation import Issue, IssueKind, IssueSeverity
from ..entities.value_set import (
    ImportValueSets,
    IncludeAll,
    IncludeCodes,
    IncludeFiltered,
)
from ..exceptions import UnsupportedFilterError
from .code_system_index import CodeSystemIndex

if TYPE_CHECKING:
    from ...application.ports.repositories import ResourceResolverPort
    from ...application.ports.services import LoggerPort
    from ..entities.code_system import Concept
    from ..entities.expansion import Expansion
    from ..entities.value_set import Compose, ComposeRule, ConceptFilter

ImportExpander = Callable[[str, tuple[str, ...]], "Expansion"]
SystemVersion = tuple[str, str | None]


def _empty_warnings() -> tuple[Issue, ...]:
    return ()


@dataclass(frozen=True, slots=True)
class EvaluatedSet:
    entries: tuple[ExpansionEntry, ...]
    versions_used: tuple[SystemVersion, ...]
    warnings: tuple[Issue, ...] = field(default_factory=_empty_warnings)

    def __len__(self) -> int:
        return len(self.entries)


class _EntryBuilder:
    def __init__(self, index: CodeSystemIndex) -> None:
        super().__init__()
        self._index = index
        self._built: dict[str, ExpansionEntry] = {}

    def build(self, concept: Concept, display: str | None = None) -> ExpansionEntry:
        cached = self._built.get(concept.code)
        if cached is not None and display is None:
            return cached
        entry = ExpansionEntry(
            system=self._index.system,
            code=concept.code,
            display=concept.display or display,
            abstract=concept.abstract,
            version=self._index.version,
            children=tuple(self.build(child) for child in concept.children),
        )
        if display is None:
            self._built[concept.code] = entry
        return entry


def entries_from_index(index: CodeSystemIndex) -> list[ExpansionEntry]:
    """Flatten every concept of a code system into expansion entries."""
    builder = _EntryBuilder(index)
    return [builder.build(concept) for concept in index.all_concepts()]


class SetEvaluator:
    pass

    def __init__(
        self,
        resolver: ResourceResolverPort | None,
        expand_import: ImportExpander,
        logger: LoggerPort | None = None,
    ) -> None:
        super().__init__()
        self._resolver = resolver
        self._expand_import = expand_import
        self._logger = logger
        self._indexes: dict[SystemVersion, CodeSystemIndex] = {}

    def evaluate(
        self, compose: Compose, *, import_chain: tuple[str, ...] = ()
    ) -> EvaluatedSet:
        working: dict[tuple[str, str], ExpansionEntry] = {}
        versions: dict[SystemVersion, None] = {}
        warnings: list[Issue] = []

        for rule in compose.include:
            for entry in self._evaluate_rule(
                rule, import_chain, versions, warnings=warnings
            ):
                working.setdefault(entry.key, entry)

        # Versions seen only in excludes are not recorded.
        for rule in compose.exclude:
            for entry in self._evaluate_rule(rule, import_chain, {}):
                removed = working.pop(entry.key, None)
                if removed is not None:
                    self._debug(f"Excluded {entry.system}#{entry.code}")

        return EvaluatedSet(
            entries=tuple(working.values()),
            versions_used=tuple(versions),
            warnings=tuple(warnings),
        )

    def _evaluate_rule(
        self,
        rule: ComposeRule,
        import_chain: tuple[str, ...],
        versions: dict[SystemVersion, None],
        *,
        warnings: list[Issue] | None = None,
    ) -> list[ExpansionEntry]:
        if isinstance(rule, ImportValueSets):
            return self._evaluate_import(rule, import_chain, versions, warnings)
        if not isinstance(rule, (IncludeAll, IncludeCodes, IncludeFiltered)):
            raise TypeError(f"Unsupported compose rule type: {type(rule).__name__}")
        index = self._index_for(rule.system, rule.version)
        # A pin survives resolution to an unversioned code system.
        versions.setdefault((index.system, rule.version or index.version), None)
        if isinstance(rule, IncludeAll):
            return entries_from_index(index)
        if isinstance(rule, IncludeCodes):
            return self._evaluate_codes(rule, index, warnings)
        return self._evaluate_filters(rule, index)

    def _index_for(self, system: str, version: str | None) -> CodeSystemIndex:
        key = (system, version)
        index = self._indexes.get(key)
        if index is None:
            index = CodeSystemIndex.for_system(system, self._resolver, version=version)
            self._indexes[key] = index
        return index

    def _evaluate_import(
        self,
        rule: ImportValueSets,
        import_chain: tuple[str, ...],
        versions: dict[SystemVersion, None],
        warnings: list[Issue] | None,
    ) -> list[ExpansionEntry]:
        entries: list[ExpansionEntry] = []
        for uri in rule.value_sets:
            expansion = self._expand_import(uri, import_chain)
            if warnings is not None:
                warnings.extend(expansion.warnings)
            self._debug(f"Imported {len(expansion)} concepts from {uri}")
            for entry in expansion.entries:
                versions.setdefault((entry.system, entry.version), None)
                entries.append(entry)
        return entries

    def _evaluate_codes(
        self,
        rule: IncludeCodes,
        index: CodeSystemIndex,
        warnings: list[Issue] | None,
    ) -> list[ExpansionEntry]:
        builder = _EntryBuilder(index)
        entries: list[ExpansionEntry] = []
        for reference in rule.codes:
            concept = index.contains(reference.code)
            if concept is None:
                # Unknown enumerated codes are skipped, not fatal.
                if warnings is not None:
                    message = (
                        f"Code '{reference.code}' is not defined in code system "
                        f"'{index.system}' and was left out of the expansion"
                    )
                    warnings.append(
                        Issue(
                            severity=IssueSeverity.WARNING,
                            kind=IssueKind.CODE_INVALID,
                            message=message,
                            code=reference.code,
                            system=index.system,
                        )
                    )
                    self._warn(message)
                continue
            entries.append(builder.build(concept, reference.display))
        return entries

    def _evaluate_filters(
        self, rule: IncludeFiltered, index: CodeSystemIndex
    ) -> list[ExpansionEntry]:
        predicates = [_compile_filter(flt, index) for flt in rule.filters]
        builder = _EntryBuilder(index)
        return [
            builder.build(concept)
            for concept in index.all_concepts()
            if all(predicate(concept) for predicate in predicates)
        ]

    def _debug(self, message: str) -> None:
        if self._logger is not None:
            self._logger.debug(message)

    def _warn(self, message: str) -> None:
        if self._logger is not None:
            self._logger.warning(message)


ConceptPredicate = Callable[["Concept"], bool]


def _property_value(concept: Concept, property_name: str) -> str | None:
    if property_name in FilterProperties.CODE:
        return concept.code
    if property_name == FilterProperties.DISPLAY:
        return concept.display
    if property_name in FilterProperties.ABSTRACT:
        return "true" if concept.abstract else "false"
    return concept.properties.get(property_name)


def _split_values(raw: str) -> set[str]:
    return {token.strip() for token in raw.split(",") if token.strip()}


def _compile_filter(flt: ConceptFilter, index: CodeSystemIndex) -> ConceptPredicate:
    op = flt.op
    if op not in FilterOps.SUPPORTED:
        raise UnsupportedFilterError(index.system, flt.property, op)

    if op in (FilterOps.IS_A, FilterOps.DESCENDENT_OF, FilterOps.IS_NOT_A):
        if flt.property not in FilterProperties.CODE:
            raise UnsupportedFilterError(index.system, flt.property, op)
        subsumed = {concept.code for concept in index.descendants_of(flt.value)}
        if op != FilterOps.DESCENDENT_OF and index.contains(flt.value) is not None:
            subsumed.add(flt.value)
        if op == FilterOps.IS_NOT_A:
            return lambda concept: concept.code not in subsumed
        return lambda concept: concept.code in subsumed

    if op == FilterOps.EQUALS:
        expected = flt.value
        if flt.property in FilterProperties.ABSTRACT:
            expected = expected.lower()
        return lambda concept: _property_value(concept, flt.property) == expected

    if op == FilterOps.REGEX:
        try:
            pattern = re.compile(flt.value)
        except re.error as exc:
            raise UnsupportedFilterError(index.system, flt.property, op) from exc

        def _regex_match(concept: Concept) -> bool:
            value = _property_value(concept, flt.property)
            return value is not None and pattern.fullmatch(value) is not None

        return _regex_match

    if op in (FilterOps.IN, FilterOps.NOT_IN):
        allowed = _split_values(flt.value)
        if op == FilterOps.IN:
            return lambda concept: _property_value(concept, flt.property) in allowed
        return lambda concept: _property_value(concept, flt.property) not in allowed

    wanted = flt.value.strip().lower() != "false"

    def _exists(concept: Concept) -> bool:
        return (_property_value(concept, flt.property) is not None) == wanted

    return _exists
