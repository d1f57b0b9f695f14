"""FHIR terminology package.

Local expansion of FHIR value sets and validation of codes against them.

Features:
- Value set expansion from inline defines, compose rules and imports
- Cached expansions with deterministic identifiers and version parameters
- Code validation with display, abstract and membership checks
- FHIR JSON and flat CSV terminology resource loading
"""

from importlib.metadata import PackageNotFoundError, version

try:  # pragma: no cover
    __version__ = version("fhir-terminology")
except PackageNotFoundError:  # pragma: no cover
    __version__ = "0.0.0"

# Core exports
from fhir_terminology.domain.entities.code_system import CodeSystem, Concept
from fhir_terminology.domain.entities.expansion import Expansion, ExpansionEntry
from fhir_terminology.domain.entities.validation import (
    IssueKind,
    ValidationResult,
)
from fhir_terminology.domain.entities.value_set import ValueSet
from fhir_terminology.domain.services.terminology_service import (
    LocalTerminologyService,
)
from fhir_terminology.domain.services.value_set_expander import (
    ExpanderSettings,
    ValueSetExpander,
)
from fhir_terminology.infrastructure.repositories.resource_repository import (
    DirectoryResourceResolver,
    InMemoryResourceResolver,
)

__all__ = [
    "__version__",
    # Resources
    "CodeSystem",
    "Concept",
    "ValueSet",
    # Expansion
    "ExpanderSettings",
    "Expansion",
    "ExpansionEntry",
    "ValueSetExpander",
    # Validation
    "IssueKind",
    "LocalTerminologyService",
    "ValidationResult",
    # Resolution
    "DirectoryResourceResolver",
    "InMemoryResourceResolver",
]
