from __future__ import annotations

from typing import TYPE_CHECKING

from ..entities.code_system import CodeSystem
from ..exceptions import UnresolvableReferenceError

if TYPE_CHECKING:
    from ...application.ports.repositories import ResourceResolverPort
    from ..entities.code_system import Concept


def canonical_reference(system: str, version: str | None) -> str:
    if version:
        return f"{system}|{version}"
    return system


class CodeSystemIndex:
    """Single-code queries against one code system.

    The flat code lookup table is built on first use, so constructing an
    index for a code system that is never queried costs nothing.
    """

    def __init__(self, code_system: CodeSystem) -> None:
        super().__init__()
        self.code_system = code_system
        self._by_code: dict[str, Concept] | None = None

    @classmethod
    def for_system(
        cls,
        system: str,
        resolver: ResourceResolverPort | None,
        *,
        version: str | None = None,
    ) -> CodeSystemIndex:
        reference = canonical_reference(system, version)
        if resolver is None:
            raise UnresolvableReferenceError(
                reference, f"No resolver available to look up code system '{system}'"
            )
        resource = resolver.resolve_by_canonical_uri(reference)
        if resource is None and version:
            resource = resolver.resolve_by_canonical_uri(system)
        if not isinstance(resource, CodeSystem):
            raise UnresolvableReferenceError(reference)
        if version and resource.version and resource.version != version:
            raise UnresolvableReferenceError(
                reference,
                f"Code system '{system}' is available in version "
                f"'{resource.version}', not '{version}'",
            )
        return cls(resource)

    @property
    def system(self) -> str:
        return self.code_system.url

    @property
    def version(self) -> str | None:
        return self.code_system.version

    def _index(self) -> dict[str, Concept]:
        if self._by_code is None:
            self._by_code = {
                concept.code: concept for concept in self.code_system.iter_concepts()
            }
        return self._by_code

    def contains(self, code: str) -> Concept | None:
        return self._index().get(code)

    def is_abstract(self, code: str) -> bool:
        concept = self.contains(code)
        return concept.abstract if concept is not None else False

    def display_of(self, code: str) -> str | None:
        concept = self.contains(code)
        return concept.display if concept is not None else None

    def find_in_hierarchy(self, root_code: str, target_code: str) -> Concept | None:
        root = self.contains(root_code)
        if root is None:
            return None
        if root.code == target_code:
            return root
        return root.find_child(target_code)

    def descendants_of(self, code: str) -> list[Concept]:
        root = self.contains(code)
        if root is None:
            return []
        return [concept for concept in root.iter_tree() if concept is not root]

    def all_concepts(self) -> list[Concept]:
        return list(self._index().values())

    def __len__(self) -> int:
        return len(self._index())
