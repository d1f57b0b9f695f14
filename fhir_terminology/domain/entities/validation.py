from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum


class IssueSeverity(StrEnum):
    FATAL = "fatal"
    ERROR = "error"
    WARNING = "warning"
    INFORMATION = "information"

    @property
    def is_failure(self) -> bool:
        return self in (IssueSeverity.FATAL, IssueSeverity.ERROR)


class IssueKind(StrEnum):
    """Issue kinds, using the OperationOutcome issue-type codes where one exists."""

    RESOURCE_NOT_FOUND = "not-found"
    UNRESOLVABLE = "unresolvable"
    EXPANSION_TOO_LARGE = "too-costly"
    CODE_INVALID = "code-invalid"
    INVALID_DISPLAY = "invalid-display"
    BUSINESS_RULE = "business-rule"
    NOT_SUPPORTED = "not-supported"


def _empty_issues() -> tuple[Issue, ...]:
    return ()


@dataclass(frozen=True, slots=True)
class Issue:
    severity: IssueSeverity
    kind: IssueKind
    message: str
    code: str | None = None
    system: str | None = None

    def to_dict(self) -> dict[str, object]:
        return {
            "severity": str(self.severity),
            "kind": str(self.kind),
            "message": self.message,
            "code": self.code,
            "system": self.system,
        }


@dataclass(frozen=True, slots=True)
class ValidationResult:
    issues: tuple[Issue, ...] = field(default_factory=_empty_issues)

    @property
    def success(self) -> bool:
        return not self.has_errors()

    def has_errors(self) -> bool:
        return any(issue.severity.is_failure for issue in self.issues)

    def issues_of(self, kind: IssueKind) -> list[Issue]:
        return [issue for issue in self.issues if issue.kind == kind]

    def error_count(self) -> int:
        return sum(1 for issue in self.issues if issue.severity.is_failure)

    def warning_count(self) -> int:
        return sum(
            1 for issue in self.issues if issue.severity == IssueSeverity.WARNING
        )

    def to_dict(self) -> dict[str, object]:
        return {
            "success": self.success,
            "error_count": self.error_count(),
            "warning_count": self.warning_count(),
            "issues": [issue.to_dict() for issue in self.issues],
        }

    @classmethod
    def single(
        cls,
        kind: IssueKind,
        message: str,
        *,
        severity: IssueSeverity = IssueSeverity.ERROR,
        code: str | None = None,
        system: str | None = None,
    ) -> ValidationResult:
        return cls(
            issues=(
                Issue(
                    severity=severity,
                    kind=kind,
                    message=message,
                    code=code,
                    system=system,
                ),
            )
        )
