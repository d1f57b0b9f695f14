"""Tests for compose evaluation: includes, excludes, filters and imports."""

from __future__ import annotations

import pytest

from fhir_terminology.domain.entities.code_system import CodeSystem, Concept
from fhir_terminology.domain.entities.expansion import Expansion, ExpansionEntry
from fhir_terminology.domain.entities.validation import IssueKind, IssueSeverity
from fhir_terminology.domain.entities.value_set import (
    Compose,
    ConceptFilter,
    ConceptReference,
    ImportValueSets,
    IncludeAll,
    IncludeCodes,
    IncludeFiltered,
)
from fhir_terminology.domain.exceptions import (
    UnresolvableReferenceError,
    UnsupportedFilterError,
)
from fhir_terminology.domain.services.set_evaluator import SetEvaluator
from fhir_terminology.infrastructure.repositories.resource_repository import (
    InMemoryResourceResolver,
)

SYSTEM = "http://example.org/fhir/letters"
OTHER = "http://example.org/fhir/other"


def _letters() -> CodeSystem:
    return CodeSystem(
        url=SYSTEM,
        version="2.0",
        concepts=(
            Concept(
                code="A",
                display="Ay",
                properties={"status": "active"},
                children=(
                    Concept(
                        code="A1",
                        display="Ay one",
                        properties={"status": "retired"},
                    ),
                    Concept(code="A2"),
                ),
            ),
            Concept(code="B", display="Bee", abstract=True),
            Concept(code="C", display="Cee"),
        ),
    )


def _other() -> CodeSystem:
    return CodeSystem(url=OTHER, concepts=(Concept(code="X", display="Ex"),))


def _no_imports(uri: str, chain: tuple[str, ...]) -> Expansion:
    raise AssertionError(f"unexpected import of {uri}")


@pytest.fixture
def evaluator() -> SetEvaluator:
    resolver = InMemoryResourceResolver([_letters(), _other()])
    return SetEvaluator(resolver, _no_imports)


def _codes(evaluated) -> list[str]:
    return [entry.code for entry in evaluated.entries]


def _filtered(*filters: ConceptFilter) -> Compose:
    return Compose(include=(IncludeFiltered(system=SYSTEM, filters=filters),))


class TestIncludes:
    """Tests for include rules."""

    def test_include_all_lists_every_concept(self, evaluator):
        """Including a whole system yields all concepts, nested ones too."""
        evaluated = evaluator.evaluate(Compose(include=(IncludeAll(system=SYSTEM),)))

        assert _codes(evaluated) == ["A", "A1", "A2", "B", "C"]
        assert evaluated.versions_used == ((SYSTEM, "2.0"),)

    def test_entries_keep_hierarchy(self, evaluator):
        """Entries carry their children, abstract flags and system version."""
        evaluated = evaluator.evaluate(Compose(include=(IncludeAll(system=SYSTEM),)))

        root = evaluated.entries[0]
        assert [child.code for child in root.children] == ["A1", "A2"]
        assert root.version == "2.0"
        assert evaluated.entries[3].abstract is True

    def test_include_codes_in_rule_order(self, evaluator):
        """Enumerated codes keep the order they are listed in."""
        compose = Compose(
            include=(
                IncludeCodes(
                    system=SYSTEM,
                    codes=(ConceptReference(code="C"), ConceptReference(code="A1")),
                ),
            )
        )

        assert _codes(evaluator.evaluate(compose)) == ["C", "A1"]

    def test_rule_display_is_fallback(self, evaluator):
        """The code system display wins; the rule display fills a gap."""
        compose = Compose(
            include=(
                IncludeCodes(
                    system=SYSTEM,
                    codes=(
                        ConceptReference(code="A2", display="Ay two"),
                        ConceptReference(code="C", display="Sea"),
                    ),
                ),
            )
        )

        entries = evaluator.evaluate(compose).entries

        assert entries[0].display == "Ay two"
        assert entries[1].display == "Cee"

    def test_unknown_code_is_skipped_with_warning(self, evaluator):
        """A code missing from its system is left out and reported."""
        compose = Compose(
            include=(
                IncludeCodes(
                    system=SYSTEM,
                    codes=(ConceptReference(code="A"), ConceptReference(code="Z")),
                ),
            )
        )

        evaluated = evaluator.evaluate(compose)

        assert _codes(evaluated) == ["A"]
        assert len(evaluated.warnings) == 1
        warning = evaluated.warnings[0]
        assert warning.severity == IssueSeverity.WARNING
        assert warning.kind == IssueKind.CODE_INVALID
        assert warning.code == "Z"
        assert warning.system == SYSTEM

    def test_first_occurrence_wins_across_includes(self, evaluator):
        """Codes included twice appear once, at their first position."""
        compose = Compose(
            include=(
                IncludeCodes(system=SYSTEM, codes=(ConceptReference(code="C"),)),
                IncludeAll(system=SYSTEM),
                IncludeAll(system=OTHER),
            )
        )

        evaluated = evaluator.evaluate(compose)

        assert _codes(evaluated) == ["C", "A", "A1", "A2", "B", "X"]
        assert evaluated.versions_used == ((SYSTEM, "2.0"), (OTHER, None))

    def test_same_code_in_two_systems_is_kept_twice(self):
        """Entries are keyed on (system, code), not on code alone."""
        resolver = InMemoryResourceResolver(
            [
                _letters(),
                CodeSystem(url=OTHER, concepts=(Concept(code="A"),)),
            ]
        )
        evaluator = SetEvaluator(resolver, _no_imports)
        compose = Compose(
            include=(
                IncludeCodes(system=SYSTEM, codes=(ConceptReference(code="A"),)),
                IncludeAll(system=OTHER),
            )
        )

        entries = evaluator.evaluate(compose).entries

        assert [entry.key for entry in entries] == [(SYSTEM, "A"), (OTHER, "A")]

    def test_pinned_version_of_unversioned_system_is_recorded(self, evaluator):
        """The version a rule pins is kept when the system itself has none."""
        compose = Compose(include=(IncludeAll(system=OTHER, version="3.1"),))

        evaluated = evaluator.evaluate(compose)

        assert _codes(evaluated) == ["X"]
        assert evaluated.versions_used == ((OTHER, "3.1"),)

    def test_unresolvable_system_raises(self, evaluator):
        """An include over an unknown system cannot be evaluated."""
        compose = Compose(include=(IncludeAll(system="http://snomed.info/sct"),))

        with pytest.raises(UnresolvableReferenceError):
            evaluator.evaluate(compose)

    def test_unknown_rule_type_rejected(self, evaluator):
        """Only the known rule variants are accepted."""
        compose = Compose(include=("not a rule",))  # type: ignore[arg-type]

        with pytest.raises(TypeError):
            evaluator.evaluate(compose)


class TestExcludes:
    """Tests for exclude rules."""

    def test_exclude_removes_codes(self, evaluator):
        """Excluded codes are subtracted after all includes."""
        compose = Compose(
            include=(IncludeAll(system=SYSTEM),),
            exclude=(
                IncludeCodes(
                    system=SYSTEM,
                    codes=(ConceptReference(code="A1"), ConceptReference(code="B")),
                ),
            ),
        )

        assert _codes(evaluator.evaluate(compose)) == ["A", "A2", "C"]

    def test_exclude_by_filter(self, evaluator):
        """Exclude rules accept filters too."""
        compose = Compose(
            include=(IncludeAll(system=SYSTEM),),
            exclude=(
                IncludeFiltered(
                    system=SYSTEM,
                    filters=(ConceptFilter(property="concept", op="is-a", value="A"),),
                ),
            ),
        )

        assert _codes(evaluator.evaluate(compose)) == ["B", "C"]

    def test_unknown_excluded_code_is_silent(self, evaluator):
        """Excluding a code that is not in the system produces no warning."""
        compose = Compose(
            include=(IncludeAll(system=SYSTEM),),
            exclude=(IncludeCodes(system=SYSTEM, codes=(ConceptReference(code="Z"),)),),
        )

        evaluated = evaluator.evaluate(compose)

        assert len(evaluated) == 5
        assert evaluated.warnings == ()

    def test_excluded_system_version_is_not_recorded(self, evaluator):
        """A system used only by an exclude does not count as a used version."""
        compose = Compose(
            include=(IncludeAll(system=SYSTEM),),
            exclude=(
                IncludeCodes(
                    system=OTHER, version="7", codes=(ConceptReference(code="X"),)
                ),
            ),
        )

        evaluated = evaluator.evaluate(compose)

        assert evaluated.versions_used == ((SYSTEM, "2.0"),)


class TestFilters:
    """Tests for filter operators."""

    @pytest.mark.parametrize(
        ("flt", "expected"),
        [
            (ConceptFilter("concept", "is-a", "A"), ["A", "A1", "A2"]),
            (ConceptFilter("concept", "descendent-of", "A"), ["A1", "A2"]),
            (ConceptFilter("concept", "is-not-a", "A"), ["B", "C"]),
            (ConceptFilter("concept", "is-a", "Z"), []),
            (ConceptFilter("status", "=", "active"), ["A"]),
            (ConceptFilter("abstract", "=", "TRUE"), ["B"]),
            (ConceptFilter("display", "regex", "[BC].e"), ["B", "C"]),
            (ConceptFilter("code", "in", "A, C"), ["A", "C"]),
            (ConceptFilter("code", "not-in", "A,C"), ["A1", "A2", "B"]),
            (ConceptFilter("status", "exists", "true"), ["A", "A1"]),
            (ConceptFilter("status", "exists", "false"), ["A2", "B", "C"]),
        ],
    )
    def test_filter_operators(self, evaluator, flt, expected):
        """Each supported operator selects the expected concepts."""
        assert _codes(evaluator.evaluate(_filtered(flt))) == expected

    def test_filters_are_anded(self, evaluator):
        """All filters of one rule must hold."""
        compose = _filtered(
            ConceptFilter("concept", "is-a", "A"),
            ConceptFilter("status", "exists", "true"),
        )

        assert _codes(evaluator.evaluate(compose)) == ["A", "A1"]

    def test_unsupported_operator(self, evaluator):
        """Unknown operators raise UnsupportedFilterError."""
        with pytest.raises(UnsupportedFilterError) as exc_info:
            evaluator.evaluate(_filtered(ConceptFilter("concept", "generalizes", "A")))

        assert exc_info.value.op == "generalizes"

    def test_hierarchy_operator_needs_code_property(self, evaluator):
        """Subsumption filters only apply to the concept property."""
        with pytest.raises(UnsupportedFilterError):
            evaluator.evaluate(_filtered(ConceptFilter("display", "is-a", "A")))

    def test_invalid_regex(self, evaluator):
        """A regex that does not compile is reported as unsupported."""
        with pytest.raises(UnsupportedFilterError):
            evaluator.evaluate(_filtered(ConceptFilter("display", "regex", "(")))


class TestImports:
    """Tests for value set imports."""

    def test_import_entries_are_unioned(self):
        """Imported expansions contribute their entries and versions."""
        imported = Expansion(
            identifier="urn:uuid:imported",
            timestamp="",
            entries=(
                ExpansionEntry(system=OTHER, code="X", version="7"),
                ExpansionEntry(system=SYSTEM, code="C"),
            ),
        )
        calls: list[tuple[str, tuple[str, ...]]] = []

        def expand_import(uri: str, chain: tuple[str, ...]) -> Expansion:
            calls.append((uri, chain))
            return imported

        resolver = InMemoryResourceResolver([_letters()])
        evaluator = SetEvaluator(resolver, expand_import)
        compose = Compose(
            include=(
                IncludeCodes(system=SYSTEM, codes=(ConceptReference(code="C"),)),
                ImportValueSets(value_sets=("http://example.org/vs/imported",)),
            )
        )

        evaluated = evaluator.evaluate(compose, import_chain=("http://example.org/vs",))

        keys = [entry.key for entry in evaluated.entries]
        assert keys == [(SYSTEM, "C"), (OTHER, "X")]
        assert evaluated.entries[0].version == "2.0"
        assert (OTHER, "7") in evaluated.versions_used
        assert calls == [
            ("http://example.org/vs/imported", ("http://example.org/vs",))
        ]
