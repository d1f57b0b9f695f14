from __future__ import annotations

from dataclasses import replace
from difflib import get_close_matches
from typing import TYPE_CHECKING

from ...constants import Defaults
from ..entities.validation import Issue, IssueKind, IssueSeverity, ValidationResult
from ..entities.value_set import ValueSet
from ..exceptions import (
    ExpansionError,
    ExpansionTooLargeError,
    ResourceNotFoundError,
)
from .code_system_index import CodeSystemIndex
from .value_set_expander import ExpanderSettings, ValueSetExpander

if TYPE_CHECKING:
    from ...application.ports.repositories import ResourceResolverPort
    from ...application.ports.services import LoggerPort
    from ..entities.expansion import Expansion, ExpansionEntry


class LocalTerminologyService:
    """Validates codes against value sets available through a resolver.

    Validation never raises for expected domain outcomes. A value set that
    cannot be found yields a ``not-found`` issue, and a value set whose
    membership cannot be determined at all (an unresolvable import, an
    expansion over the size limit, an unsupported filter) yields a
    ``not-supported`` issue, which callers can tell apart from a code that
    was determined to be invalid.
    """

    def __init__(
        self,
        resolver: ResourceResolverPort,
        settings: ExpanderSettings | None = None,
        logger: LoggerPort | None = None,
    ) -> None:
        super().__init__()
        self._resolver = resolver
        base = settings or ExpanderSettings()
        if base.value_set_source is None:
            base = replace(base, value_set_source=resolver)
        self._expander = ValueSetExpander(base, logger=logger)
        self._logger = logger

    @property
    def settings(self) -> ExpanderSettings:
        return self._expander.settings

    def resolve_value_set(self, value_set_uri: str) -> ValueSet:
        resource = self._resolver.resolve_by_canonical_uri(value_set_uri)
        # A code system registered under the URI is not a value set either.
        if not isinstance(resource, ValueSet):
            raise ResourceNotFoundError(value_set_uri)
        return resource

    def expand(self, value_set_uri: str) -> Expansion:
        return self._expander.expand(self.resolve_value_set(value_set_uri))

    def lookup_display(self, code: str, system: str) -> str | None:
        index = CodeSystemIndex.for_system(system, self._resolver)
        return index.display_of(code)

    def validate_code(
        self,
        value_set_uri: str,
        code: str,
        system: str,
        display: str | None = None,
        abstract_allowed: bool = False,
    ) -> ValidationResult:
        result = self._validate(value_set_uri, code, system, display, abstract_allowed)
        if self._logger is not None:
            self._logger.log_validation_result(value_set_uri, code, system, result)
        return result

    def _validate(
        self,
        value_set_uri: str,
        code: str,
        system: str,
        display: str | None,
        abstract_allowed: bool,
    ) -> ValidationResult:
        try:
            value_set = self.resolve_value_set(value_set_uri)
        except ResourceNotFoundError as exc:
            return ValidationResult.single(IssueKind.RESOURCE_NOT_FOUND, str(exc))

        try:
            expansion = self._expander.expand(value_set)
        except ExpansionTooLargeError as exc:
            return ValidationResult.single(
                IssueKind.NOT_SUPPORTED,
                f"Cannot determine membership in '{value_set_uri}': {exc}. "
                "Raise the maximum expansion size to validate against it.",
                code=code,
                system=system,
            )
        except ExpansionError as exc:
            return ValidationResult.single(
                IssueKind.NOT_SUPPORTED,
                f"Cannot determine membership in '{value_set_uri}': {exc}",
                code=code,
                system=system,
            )

        issues = [
            warning
            for warning in expansion.warnings
            if warning.code == code and warning.system == system
        ]
        entry = expansion.find(code, system)
        if entry is None:
            issues.append(
                _issue(
                    IssueKind.CODE_INVALID,
                    _code_invalid_message(expansion, value_set_uri, code, system),
                    code,
                    system,
                )
            )
            return ValidationResult(issues=tuple(issues))

        if entry.abstract and not abstract_allowed:
            issues.append(
                _issue(
                    IssueKind.BUSINESS_RULE,
                    f"Code '{code}' from system '{system}' is abstract and cannot "
                    "be used as a concrete value",
                    code,
                    system,
                )
            )

        if display is not None and not _display_matches(entry, display):
            issues.append(
                _issue(
                    IssueKind.INVALID_DISPLAY,
                    f"Display '{display}' does not match the expected display "
                    f"'{entry.display or ''}' for code '{code}' from system "
                    f"'{system}'",
                    code,
                    system,
                )
            )

        return ValidationResult(issues=tuple(issues))


def _issue(kind: IssueKind, message: str, code: str, system: str) -> Issue:
    return Issue(
        severity=IssueSeverity.ERROR,
        kind=kind,
        message=message,
        code=code,
        system=system,
    )


def _display_matches(entry: ExpansionEntry, display: str) -> bool:
    if entry.display is None:
        return False
    return entry.display.strip() == display.strip()


def _code_invalid_message(
    expansion: Expansion, value_set_uri: str, code: str, system: str
) -> str:
    message = (
        f"Code '{code}' from system '{system}' is not in value set "
        f"'{value_set_uri}'"
    )
    candidates = [entry.code for entry in expansion.entries if entry.system == system]
    suggestions = get_close_matches(
        code,
        candidates,
        n=Defaults.SUGGESTION_LIMIT,
        cutoff=Defaults.SUGGESTION_CUTOFF,
    )
    if suggestions:
        message += f" (did you mean: {', '.join(suggestions)}?)"
    return message
