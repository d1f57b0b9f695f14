"""Domain entities.

Code systems, value sets, expansions and validation results.
"""

from .code_system import CodeSystem, Concept
from .expansion import Expansion, ExpansionEntry, ExpansionParameter
from .validation import Issue, IssueKind, IssueSeverity, ValidationResult
from .value_set import (
    Compose,
    ComposeRule,
    ConceptFilter,
    ConceptReference,
    ImportValueSets,
    IncludeAll,
    IncludeCodes,
    IncludeFiltered,
    ValueSet,
)

__all__ = [
    # Code systems
    "CodeSystem",
    "Concept",
    # Value sets
    "Compose",
    "ComposeRule",
    "ConceptFilter",
    "ConceptReference",
    "ImportValueSets",
    "IncludeAll",
    "IncludeCodes",
    "IncludeFiltered",
    "ValueSet",
    # Expansions
    "Expansion",
    "ExpansionEntry",
    "ExpansionParameter",
    # Validation
    "Issue",
    "IssueKind",
    "IssueSeverity",
    "ValidationResult",
]
