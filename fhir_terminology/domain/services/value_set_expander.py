"""Value set expansion.

``ValueSetExpander.expand`` materializes the codes a value set denotes and
attaches the result to the value set. An expansion that is already
attached is reused unless ``force_recompute`` is set.

The expansion identifier is derived from the value set's canonical URL,
its version and every ``(system, version)`` pair the expansion drew on,
so pinning or unpinning a code system version yields a new identifier
while repeating an unchanged expansion reproduces the old one.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime
from typing import TYPE_CHECKING
import uuid

from ...constants import Defaults, Parameters, Uris
from ..entities.expansion import Expansion, ExpansionParameter
from ..entities.value_set import ValueSet
from ..exceptions import (
    CircularImportError,
    ExpansionError,
    ExpansionTooLargeError,
    UnresolvableReferenceError,
)
from .code_system_index import CodeSystemIndex
from .set_evaluator import EvaluatedSet, SetEvaluator, entries_from_index

if TYPE_CHECKING:
    from ...application.ports.repositories import ResourceResolverPort
    from ...application.ports.services import LoggerPort
    from .set_evaluator import SystemVersion


@dataclass(frozen=True, slots=True)
class ExpanderSettings:
    max_expansion_size: int = Defaults.MAX_EXPANSION_SIZE
    value_set_source: ResourceResolverPort | None = None
    force_recompute: bool = False
    max_import_depth: int = Defaults.MAX_IMPORT_DEPTH

    def __post_init__(self) -> None:
        if self.max_expansion_size < 1:
            raise ValueError(
                f"max_expansion_size must be positive, got {self.max_expansion_size}"
            )
        if self.max_import_depth < 1:
            raise ValueError(
                f"max_import_depth must be positive, got {self.max_import_depth}"
            )


def expansion_identifier(
    value_set: ValueSet, versions_used: tuple[SystemVersion, ...]
) -> str:
    parts = [value_set.url, value_set.version or ""]
    ordered = sorted(versions_used, key=lambda pair: (pair[0], pair[1] or ""))
    parts.extend(f"{system}|{version or ''}" for system, version in ordered)
    token = uuid.uuid5(uuid.NAMESPACE_URL, "\n".join(parts))
    return f"{Uris.IDENTIFIER_PREFIX}{token}"


def version_parameters(
    value_set: ValueSet, versions_used: tuple[SystemVersion, ...]
) -> tuple[ExpansionParameter, ...]:
    define_system = value_set.code_system.url if value_set.code_system else None
    parameters: list[ExpansionParameter] = []
    for system, version in versions_used:
        if not version:
            continue
        # The inline define is reported under the value set's own canonical URL.
        uri = value_set.url if system == define_system else system
        parameters.append(
            ExpansionParameter(
                name=Parameters.VERSION,
                value=f"{uri}{Parameters.VERSION_QUERY}{version}",
            )
        )
    return tuple(parameters)


class ValueSetExpander:
    pass

    def __init__(
        self,
        settings: ExpanderSettings | None = None,
        logger: LoggerPort | None = None,
    ) -> None:
        super().__init__()
        self.settings = settings or ExpanderSettings()
        self._logger = logger

    def expand(self, value_set: ValueSet) -> Expansion:
        return self._expand(value_set, import_chain=())

    def _expand(
        self, value_set: ValueSet, *, import_chain: tuple[str, ...]
    ) -> Expansion:
        if value_set.expansion is not None and not self.settings.force_recompute:
            return value_set.expansion

        if self._logger is not None:
            self._logger.log_expansion_start(
                value_set.url, forced=value_set.expansion is not None
            )

        evaluated = self._evaluate(value_set, (*import_chain, value_set.url))
        size = len(evaluated)
        if size > self.settings.max_expansion_size:
            raise ExpansionTooLargeError(
                value_set.url, size, self.settings.max_expansion_size
            )

        expansion = Expansion(
            identifier=expansion_identifier(value_set, evaluated.versions_used),
            timestamp=datetime.now(UTC).isoformat(timespec="seconds"),
            entries=evaluated.entries,
            parameters=version_parameters(value_set, evaluated.versions_used),
            total=size,
            warnings=evaluated.warnings,
        )
        value_set.attach_expansion(expansion)
        if self._logger is not None:
            self._logger.log_expansion_complete(value_set.url, expansion)
        return expansion

    def _evaluate(
        self, value_set: ValueSet, import_chain: tuple[str, ...]
    ) -> EvaluatedSet:
        if value_set.code_system is None and value_set.compose is None:
            raise ExpansionError(
                f"Value set '{value_set.url}' has neither a define nor a compose"
            )

        define: EvaluatedSet | None = None
        if value_set.code_system is not None:
            index = CodeSystemIndex(value_set.code_system)
            define = EvaluatedSet(
                entries=tuple(entries_from_index(index)),
                versions_used=((index.system, index.version),),
            )
            if value_set.compose is None:
                return define

        evaluator = SetEvaluator(
            self.settings.value_set_source, self._expand_import, logger=self._logger
        )
        composed = evaluator.evaluate(value_set.compose, import_chain=import_chain)
        if define is None:
            return composed
        return _union(define, composed)

    def _expand_import(self, uri: str, import_chain: tuple[str, ...]) -> Expansion:
        if uri in import_chain:
            raise CircularImportError(uri, import_chain)
        if len(import_chain) >= self.settings.max_import_depth:
            raise UnresolvableReferenceError(
                uri,
                f"Value set import depth exceeds {self.settings.max_import_depth} "
                f"while importing '{uri}'",
            )
        resolver = self.settings.value_set_source
        if resolver is None:
            raise UnresolvableReferenceError(
                uri, f"No value set source available to import '{uri}'"
            )
        resource = resolver.resolve_by_canonical_uri(uri)
        if not isinstance(resource, ValueSet):
            raise UnresolvableReferenceError(uri)
        return self._expand(resource, import_chain=import_chain)


def _union(first: EvaluatedSet, second: EvaluatedSet) -> EvaluatedSet:
    entries = {entry.key: entry for entry in first.entries}
    for entry in second.entries:
        entries.setdefault(entry.key, entry)
    versions = dict.fromkeys((*first.versions_used, *second.versions_used))
    return EvaluatedSet(
        entries=tuple(entries.values()),
        versions_used=tuple(versions),
        warnings=(*first.warnings, *second.warnings),
    )
