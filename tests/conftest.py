"""Shared fixtures: small FHIR terminology resources and resolvers."""

from __future__ import annotations

from typing import Any

import pytest

from fhir_terminology.domain.services.terminology_service import (
    LocalTerminologyService,
)
from fhir_terminology.domain.services.value_set_expander import (
    ExpanderSettings,
    ValueSetExpander,
)
from fhir_terminology.infrastructure.repositories.resource_loader import (
    resource_from_dict,
)
from fhir_terminology.infrastructure.repositories.resource_repository import (
    InMemoryResourceResolver,
)

ISSUE_TYPE_VS = "http://hl7.org/fhir/ValueSet/issue-type"
ISSUE_TYPE_SYSTEM = "http://hl7.org/fhir/issue-type"
MARITAL_STATUS_VS = "http://hl7.org/fhir/ValueSet/marital-status"
MARITAL_STATUS_SYSTEM = "http://hl7.org/fhir/v3/MaritalStatus"
NULL_FLAVOR_SYSTEM = "http://hl7.org/fhir/v3/NullFlavor"
DATA_ABSENT_VS = "http://hl7.org/fhir/ValueSet/data-absent-reason"
DATA_ABSENT_SYSTEM = "http://hl7.org/fhir/data-absent-reason"
ACK_DETAIL_VS = "http://hl7.org/fhir/ValueSet/v3-AcknowledgementDetailCode"
ACK_DETAIL_SYSTEM = "http://hl7.org/fhir/v3/AcknowledgementDetailCode"
YES_NO_VS = "http://hl7.org/fhir/ValueSet/yesnodontknow"
SNOMED_SYSTEM = "http://snomed.info/sct"
SUBSTANCE_VS = "http://hl7.org/fhir/ValueSet/allergyintolerance-substance-code"
REFERENCE_RANGE_VS = "http://hl7.org/fhir/ValueSet/referencerange-meaning"
REFERENCE_RANGE_SYSTEM = "http://example.org/fhir/referencerange-meaning"
REFERENCE_RANGE_SIZE = 937

_ISSUE_TYPES: dict[str, list[str]] = {
    "invalid": ["structure", "required", "value", "invariant"],
    "security": ["login", "unknown", "expired", "forbidden", "suppressed"],
    "processing": [
        "not-supported",
        "duplicate",
        "not-found",
        "too-long",
        "code-invalid",
        "extension",
        "too-costly",
        "business-rule",
        "conflict",
        "incomplete",
    ],
    "transient": ["lock-error", "no-store", "exception", "timeout", "throttled"],
    "informational": [],
}


def _display(code: str) -> str:
    return code.replace("-", " ").capitalize()


def issue_type_value_set() -> dict[str, Any]:
    """Issue-type value set with an inline define of 29 codes."""
    return {
        "resourceType": "ValueSet",
        "url": ISSUE_TYPE_VS,
        "version": "1.0.2",
        "name": "IssueType",
        "codeSystem": {
            "system": ISSUE_TYPE_SYSTEM,
            "version": "1.0.2",
            "concept": [
                {
                    "code": parent,
                    "display": _display(parent),
                    "concept": [
                        {"code": child, "display": _display(child)}
                        for child in children
                    ],
                }
                for parent, children in _ISSUE_TYPES.items()
            ],
        },
    }


def marital_status_resources() -> list[dict[str, Any]]:
    marital = {
        "A": "Annulled",
        "D": "Divorced",
        "I": "Interlocutory",
        "L": "Legally Separated",
        "M": "Married",
        "P": "Polygamous",
        "S": "Never Married",
        "T": "Domestic partner",
        "W": "Widowed",
    }
    return [
        {
            "resourceType": "CodeSystem",
            "url": MARITAL_STATUS_SYSTEM,
            "concept": [
                {"code": code, "display": display}
                for code, display in marital.items()
            ],
        },
        {
            "resourceType": "CodeSystem",
            "url": NULL_FLAVOR_SYSTEM,
            "concept": [
                {
                    "code": "NI",
                    "display": "NoInformation",
                    "concept": [
                        {"code": "UNK", "display": "unknown"},
                        {"code": "MSK", "display": "masked"},
                    ],
                }
            ],
        },
        {
            "resourceType": "ValueSet",
            "url": MARITAL_STATUS_VS,
            "compose": {
                "include": [
                    {"system": MARITAL_STATUS_SYSTEM},
                    {
                        "system": "http://hl7.org/fhir/marital-status",
                        "concept": [{"code": "U", "display": "unmarried"}],
                    },
                    {"system": NULL_FLAVOR_SYSTEM, "concept": [{"code": "UNK"}]},
                ]
            },
        },
        {
            "resourceType": "CodeSystem",
            "url": "http://hl7.org/fhir/marital-status",
            "concept": [{"code": "U", "display": "unmarried"}],
        },
    ]


def data_absent_reason_resources() -> list[dict[str, Any]]:
    return [
        {
            "resourceType": "CodeSystem",
            "url": DATA_ABSENT_SYSTEM,
            "version": "1.0.2",
            "concept": [
                {
                    "code": "unknown",
                    "display": "Unknown",
                    "concept": [
                        {"code": "asked", "display": "Asked"},
                        {"code": "temp", "display": "Temp"},
                    ],
                },
                {"code": "not-asked", "display": "Not Asked"},
                {"code": "masked", "display": "Masked"},
                {"code": "unsupported", "display": "Unsupported"},
                {"code": "astext", "display": "As Text"},
                {
                    "code": "error",
                    "display": "Error",
                    "concept": [{"code": "NaN", "display": "Not a Number"}],
                },
            ],
        },
        {
            "resourceType": "ValueSet",
            "url": DATA_ABSENT_VS,
            "compose": {"include": [{"system": DATA_ABSENT_SYSTEM}]},
        },
    ]


def ack_detail_resources() -> list[dict[str, Any]]:
    return [
        {
            "resourceType": "CodeSystem",
            "url": ACK_DETAIL_SYSTEM,
            "concept": [
                {
                    "code": "_AcknowledgementDetailNotSupportedCode",
                    "display": "AcknowledgementDetailNotSupportedCode",
                    "abstract": True,
                    "concept": [
                        {"code": "NS200", "display": "Unsupported interaction"},
                        {"code": "NS250", "display": "Unsupported message type"},
                        {"code": "NS260", "display": "Unsupported message event"},
                    ],
                },
                {
                    "code": "INTERR",
                    "display": "Internal system error",
                    "property": [{"code": "notSelectable", "valueBoolean": False}],
                },
                {"code": "NOSTORE", "display": "No storage space for message."},
            ],
        },
        {
            "resourceType": "ValueSet",
            "url": ACK_DETAIL_VS,
            "compose": {"include": [{"system": ACK_DETAIL_SYSTEM}]},
        },
    ]


def yes_no_value_set() -> dict[str, Any]:
    """Value set that ships with an expansion and has nothing to compose from."""
    return {
        "resourceType": "ValueSet",
        "url": YES_NO_VS,
        "compose": {
            "import": ["http://hl7.org/fhir/ValueSet/v2-0136"],
            "include": [
                {
                    "system": "http://hl7.org/fhir/data-absent-reason",
                    "concept": [{"code": "asked"}],
                }
            ],
        },
        "expansion": {
            "identifier": "urn:uuid:bf99fe50-2c2b-41ad-bd63-bee6919810b4",
            "timestamp": "2015-07-14T10:00:00Z",
            "contains": [
                {
                    "system": "http://hl7.org/fhir/v2/0136",
                    "code": "Y",
                    "display": "Yes",
                },
                {
                    "system": "http://hl7.org/fhir/v2/0136",
                    "code": "N",
                    "display": "No",
                },
                {
                    "system": "http://hl7.org/fhir/data-absent-reason",
                    "code": "asked",
                    "display": "Don't know",
                },
            ],
        },
    }


def substance_value_set() -> dict[str, Any]:
    """Value set over a code system no resolver can supply."""
    return {
        "resourceType": "ValueSet",
        "url": SUBSTANCE_VS,
        "compose": {
            "include": [
                {
                    "system": SNOMED_SYSTEM,
                    "filter": [
                        {"property": "concept", "op": "is-a", "value": "105590001"}
                    ],
                }
            ]
        },
    }


def reference_range_resources() -> list[dict[str, Any]]:
    concepts = [
        {"code": f"RR{index:04d}", "display": f"Reference range meaning {index}"}
        for index in range(REFERENCE_RANGE_SIZE)
    ]
    return [
        {
            "resourceType": "CodeSystem",
            "url": REFERENCE_RANGE_SYSTEM,
            "concept": concepts,
        },
        {
            "resourceType": "ValueSet",
            "url": REFERENCE_RANGE_VS,
            "compose": {"include": [{"system": REFERENCE_RANGE_SYSTEM}]},
        },
    ]


def all_resource_dicts() -> list[dict[str, Any]]:
    return [
        issue_type_value_set(),
        *marital_status_resources(),
        *data_absent_reason_resources(),
        *ack_detail_resources(),
        yes_no_value_set(),
        substance_value_set(),
        *reference_range_resources(),
    ]


@pytest.fixture
def resolver() -> InMemoryResourceResolver:
    """A fresh resolver per test, so no expansion leaks between tests."""
    return InMemoryResourceResolver(
        resource_from_dict(data) for data in all_resource_dicts()
    )


@pytest.fixture
def settings(resolver: InMemoryResourceResolver) -> ExpanderSettings:
    return ExpanderSettings(value_set_source=resolver)


@pytest.fixture
def expander(settings: ExpanderSettings) -> ValueSetExpander:
    return ValueSetExpander(settings)


@pytest.fixture
def service(resolver: InMemoryResourceResolver) -> LocalTerminologyService:
    return LocalTerminologyService(resolver)


@pytest.fixture
def resource_dicts() -> list[dict[str, Any]]:
    return all_resource_dicts()


@pytest.fixture
def issue_type_data() -> dict[str, Any]:
    return issue_type_value_set()
