"""FHIR JSON resource loader (infrastructure).

Converts parsed FHIR JSON objects for ``CodeSystem`` and ``ValueSet`` into
domain entities. Both the current ``compose.include.valueSet`` form and
the older ``compose.import`` and inline ``codeSystem`` forms are read.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from pydantic import ValidationError

from ...constants import Uris
from ...domain.entities.code_system import CodeSystem, Concept
from ...domain.entities.expansion import (
    Expansion,
    ExpansionEntry,
    ExpansionParameter,
)
from ...domain.entities.value_set import (
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
from ..io.exceptions import DataParseError
from ..io.json_reader import read_json_object
from .fhir_models import (
    CodeSystemModel,
    ComposeModel,
    ConceptDefinitionModel,
    ConceptSetModel,
    ExpansionContainsModel,
    ExpansionModel,
    ValueSetModel,
)

if TYPE_CHECKING:
    from pathlib import Path


class ResourceLoadError(DataParseError):
    pass


def _concept_from_model(model: ConceptDefinitionModel) -> Concept:
    properties: dict[str, str] = {}
    abstract = model.abstract
    for prop in model.property:
        value = prop.as_text()
        if value is None:
            continue
        properties[prop.code] = value
        if prop.code == Uris.ABSTRACT_PROPERTY and value == "true":
            abstract = True
    return Concept(
        code=model.code,
        display=model.display,
        abstract=abstract,
        properties=properties,
        children=tuple(_concept_from_model(child) for child in model.concept),
    )


def _rules_from_concept_set(concept_set: ConceptSetModel) -> list[ComposeRule]:
    rules: list[ComposeRule] = []
    if concept_set.value_set:
        if concept_set.system:
            raise ResourceLoadError(
                "A compose element combining 'system' with 'valueSet' is not "
                f"supported (system '{concept_set.system}')"
            )
        rules.append(ImportValueSets(value_sets=tuple(concept_set.value_set)))
        return rules
    if not concept_set.system:
        raise ResourceLoadError(
            "A compose element needs either a 'system' or a 'valueSet'"
        )
    if concept_set.concept and concept_set.filter:
        raise ResourceLoadError(
            f"A compose element for '{concept_set.system}' cannot list both "
            "concepts and filters"
        )
    if concept_set.concept:
        rules.append(
            IncludeCodes(
                system=concept_set.system,
                codes=tuple(
                    ConceptReference(code=ref.code, display=ref.display)
                    for ref in concept_set.concept
                ),
                version=concept_set.version,
            )
        )
    elif concept_set.filter:
        rules.append(
            IncludeFiltered(
                system=concept_set.system,
                filters=tuple(
                    ConceptFilter(property=flt.property, op=flt.op, value=flt.value)
                    for flt in concept_set.filter
                ),
                version=concept_set.version,
            )
        )
    else:
        rules.append(IncludeAll(system=concept_set.system, version=concept_set.version))
    return rules


def _compose_from_model(model: ComposeModel) -> Compose:
    include: list[ComposeRule] = []
    if model.import_:
        include.append(ImportValueSets(value_sets=tuple(model.import_)))
    for concept_set in model.include:
        include.extend(_rules_from_concept_set(concept_set))
    exclude: list[ComposeRule] = []
    for concept_set in model.exclude:
        exclude.extend(_rules_from_concept_set(concept_set))
    return Compose(include=tuple(include), exclude=tuple(exclude))


def _entry_from_contains(
    model: ExpansionContainsModel, parent_system: str | None
) -> ExpansionEntry | None:
    system = model.system or parent_system
    if model.code is None or system is None:
        return None
    children = [_entry_from_contains(child, system) for child in model.contains]
    return ExpansionEntry(
        system=system,
        code=model.code,
        display=model.display,
        abstract=model.abstract,
        version=model.version,
        children=tuple(child for child in children if child is not None),
    )


def _flatten_contains(
    contains: list[ExpansionContainsModel],
    parent_system: str | None,
    entries: dict[tuple[str, str], ExpansionEntry],
) -> None:
    for item in contains:
        entry = _entry_from_contains(item, parent_system)
        if entry is not None:
            entries.setdefault(entry.key, entry)
        _flatten_contains(item.contains, item.system or parent_system, entries)


def _expansion_from_model(model: ExpansionModel, value_set_url: str) -> Expansion:
    entries: dict[tuple[str, str], ExpansionEntry] = {}
    _flatten_contains(model.contains, None, entries)
    return Expansion(
        identifier=model.identifier or f"{value_set_url}#shipped-expansion",
        timestamp=model.timestamp or "",
        entries=tuple(entries.values()),
        parameters=tuple(
            ExpansionParameter(name=param.name, value=param.as_text())
            for param in model.parameter
        ),
        total=len(entries),
    )


def code_system_from_dict(data: dict[str, Any]) -> CodeSystem:
    try:
        model = CodeSystemModel.model_validate(data)
    except ValidationError as exc:
        raise ResourceLoadError(f"Invalid CodeSystem resource: {exc}") from exc
    try:
        return CodeSystem(
            url=model.url,
            version=model.version,
            name=model.name,
            concepts=tuple(_concept_from_model(concept) for concept in model.concept),
        )
    except ValueError as exc:
        raise ResourceLoadError(str(exc)) from exc


def value_set_from_dict(data: dict[str, Any]) -> ValueSet:
    try:
        model = ValueSetModel.model_validate(data)
    except ValidationError as exc:
        raise ResourceLoadError(f"Invalid ValueSet resource: {exc}") from exc
    try:
        define = None
        if model.code_system is not None:
            define = CodeSystem(
                url=model.code_system.system,
                version=model.code_system.version,
                name=model.name,
                concepts=tuple(
                    _concept_from_model(concept)
                    for concept in model.code_system.concept
                ),
            )
        return ValueSet(
            url=model.url,
            version=model.version,
            name=model.name,
            code_system=define,
            compose=(
                _compose_from_model(model.compose)
                if model.compose is not None
                else None
            ),
            expansion=(
                _expansion_from_model(model.expansion, model.url)
                if model.expansion is not None
                else None
            ),
        )
    except ValueError as exc:
        raise ResourceLoadError(str(exc)) from exc


def resource_from_dict(data: dict[str, Any]) -> CodeSystem | ValueSet:
    resource_type = data.get("resourceType")
    if resource_type == "CodeSystem":
        return code_system_from_dict(data)
    if resource_type == "ValueSet":
        return value_set_from_dict(data)
    raise ResourceLoadError(f"Unsupported resource type: {resource_type!r}")


def load_resource_file(path: Path) -> CodeSystem | ValueSet:
    try:
        return resource_from_dict(read_json_object(path))
    except ResourceLoadError as exc:
        raise ResourceLoadError(f"{path}: {exc}") from exc
