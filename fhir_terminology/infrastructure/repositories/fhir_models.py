"""Wire-level models for FHIR JSON terminology resources.

These mirror the subset of the CodeSystem and ValueSet JSON shapes the
loader understands. Unknown elements are ignored; the loader converts the
validated models into domain entities.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class _FhirModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class ConceptPropertyModel(_FhirModel):
    code: str
    value_code: str | None = Field(default=None, alias="valueCode")
    value_string: str | None = Field(default=None, alias="valueString")
    value_boolean: bool | None = Field(default=None, alias="valueBoolean")
    value_integer: int | None = Field(default=None, alias="valueInteger")
    value_coding: dict[str, Any] | None = Field(default=None, alias="valueCoding")

    def as_text(self) -> str | None:
        if self.value_boolean is not None:
            return "true" if self.value_boolean else "false"
        if self.value_integer is not None:
            return str(self.value_integer)
        if self.value_coding is not None:
            code = self.value_coding.get("code")
            return str(code) if code is not None else None
        return self.value_code if self.value_code is not None else self.value_string


class ConceptDefinitionModel(_FhirModel):
    code: str
    display: str | None = None
    abstract: bool = False
    property: list[ConceptPropertyModel] = Field(default_factory=list)
    concept: list[ConceptDefinitionModel] = Field(default_factory=list)


class CodeSystemModel(_FhirModel):
    resource_type: str = Field(default="CodeSystem", alias="resourceType")
    url: str
    version: str | None = None
    name: str | None = None
    concept: list[ConceptDefinitionModel] = Field(default_factory=list)


class InlineCodeSystemModel(_FhirModel):
    system: str
    version: str | None = None
    concept: list[ConceptDefinitionModel] = Field(default_factory=list)


class ConceptReferenceModel(_FhirModel):
    code: str
    display: str | None = None


class ConceptFilterModel(_FhirModel):
    property: str
    op: str
    value: str = ""


class ConceptSetModel(_FhirModel):
    system: str | None = None
    version: str | None = None
    concept: list[ConceptReferenceModel] = Field(default_factory=list)
    filter: list[ConceptFilterModel] = Field(default_factory=list)
    value_set: list[str] = Field(default_factory=list, alias="valueSet")


class ComposeModel(_FhirModel):
    import_: list[str] = Field(default_factory=list, alias="import")
    include: list[ConceptSetModel] = Field(default_factory=list)
    exclude: list[ConceptSetModel] = Field(default_factory=list)


class ExpansionParameterModel(_FhirModel):
    name: str
    value_uri: str | None = Field(default=None, alias="valueUri")
    value_string: str | None = Field(default=None, alias="valueString")
    value_code: str | None = Field(default=None, alias="valueCode")
    value_boolean: bool | None = Field(default=None, alias="valueBoolean")
    value_integer: int | None = Field(default=None, alias="valueInteger")

    def as_text(self) -> str:
        for value in (self.value_uri, self.value_string, self.value_code):
            if value is not None:
                return value
        if self.value_boolean is not None:
            return "true" if self.value_boolean else "false"
        if self.value_integer is not None:
            return str(self.value_integer)
        return ""


class ExpansionContainsModel(_FhirModel):
    system: str | None = None
    version: str | None = None
    code: str | None = None
    display: str | None = None
    abstract: bool = False
    contains: list[ExpansionContainsModel] = Field(default_factory=list)


class ExpansionModel(_FhirModel):
    identifier: str | None = None
    timestamp: str | None = None
    total: int | None = None
    parameter: list[ExpansionParameterModel] = Field(default_factory=list)
    contains: list[ExpansionContainsModel] = Field(default_factory=list)


class ValueSetModel(_FhirModel):
    resource_type: str = Field(default="ValueSet", alias="resourceType")
    url: str
    version: str | None = None
    name: str | None = None
    code_system: InlineCodeSystemModel | None = Field(default=None, alias="codeSystem")
    compose: ComposeModel | None = None
    expansion: ExpansionModel | None = None
