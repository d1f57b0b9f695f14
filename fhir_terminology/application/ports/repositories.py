from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from ...domain.entities.code_system import CodeSystem
    from ...domain.entities.value_set import ValueSet


@runtime_checkable
class ResourceResolverPort(Protocol):
    """Maps a canonical URI (optionally ``uri|version``) to a parsed resource.

    Implementations report failures by returning ``None`` and never raise.
    """

    def resolve_by_canonical_uri(
        self, uri: str
    ) -> ValueSet | CodeSystem | None: ...
