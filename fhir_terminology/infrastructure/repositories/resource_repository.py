from __future__ import annotations

from typing import TYPE_CHECKING

from ...constants import ResourceFiles
from ...domain.entities.code_system import CodeSystem
from ...domain.entities.value_set import ValueSet
from ..caching.memory_cache import MemoryCache
from ..io.exceptions import DataSourceError
from .csv_code_system_loader import load_csv_code_system
from .resource_loader import load_resource_file

if TYPE_CHECKING:
    from collections.abc import Iterable
    from pathlib import Path

    from ...application.ports.services import LoggerPort

type Resource = CodeSystem | ValueSet
type ResourceRegistry = dict[str, Resource]


def _register(registry: ResourceRegistry, resource: Resource) -> None:
    registry[resource.url] = resource
    if resource.version:
        registry[f"{resource.url}|{resource.version}"] = resource


def _lookup(registry: ResourceRegistry, uri: str) -> Resource | None:
    resource = registry.get(uri)
    if resource is not None:
        return resource
    url, sep, version = uri.partition("|")
    if not sep:
        return None
    candidate = registry.get(url)
    if candidate is not None and candidate.version in (None, version):
        return candidate
    return None


class InMemoryResourceResolver:
    pass

    def __init__(self, resources: Iterable[Resource] = ()) -> None:
        super().__init__()
        self._registry: ResourceRegistry = {}
        for resource in resources:
            self.register(resource)

    def register(self, resource: Resource) -> None:
        _register(self._registry, resource)

    def resolve_by_canonical_uri(self, uri: str) -> Resource | None:
        return _lookup(self._registry, uri)

    def list_canonical_uris(self) -> list[str]:
        return sorted(self._registry.keys())


class DirectoryResourceResolver:
    """Resolves resources from FHIR JSON and CSV files in a directory.

    Files are parsed once, on the first lookup, and the parsed resources are
    kept in a ``MemoryCache`` so repeated lookups return the same instances
    (and with them any expansion already attached to a value set). Files that
    cannot be parsed are reported to the logger and skipped.
    """

    def __init__(
        self,
        directory: Path,
        cache: MemoryCache[ResourceRegistry] | None = None,
        logger: LoggerPort | None = None,
    ) -> None:
        super().__init__()
        self._directory = directory
        self._cache = cache or MemoryCache()
        self._logger = logger
        self._registry_cache_key = f"resource_registry:{directory}"

    def resolve_by_canonical_uri(self, uri: str) -> Resource | None:
        return _lookup(self._load_registry(), uri)

    def list_canonical_uris(self) -> list[str]:
        return sorted(self._load_registry().keys())

    def clear_cache(self) -> None:
        self._cache.delete(self._registry_cache_key)

    def _load_registry(self) -> ResourceRegistry:
        cached = self._cache.get(self._registry_cache_key)
        if cached is not None:
            return cached
        registry: ResourceRegistry = {}
        for resource in self._load_resources():
            _register(registry, resource)
        self._cache.set(self._registry_cache_key, registry)
        if self._logger is not None:
            self._logger.verbose(
                f"Loaded {len(registry)} terminology references "
                f"from {self._directory}"
            )
        return registry

    def _load_resources(self) -> list[Resource]:
        if not self._directory.is_dir():
            if self._logger is not None:
                self._logger.warning(
                    f"Terminology resource directory not found: {self._directory}"
                )
            return []
        resources: list[Resource] = []
        for path in sorted(self._directory.glob(ResourceFiles.JSON_PATTERN)):
            try:
                resources.append(load_resource_file(path))
            except DataSourceError as exc:
                self._skip(path, exc)
        for path in sorted(self._directory.glob(ResourceFiles.CSV_PATTERN)):
            try:
                resources.append(load_csv_code_system(path))
            except DataSourceError as exc:
                self._skip(path, exc)
        return resources

    def _skip(self, path: Path, exc: Exception) -> None:
        if self._logger is not None:
            self._logger.warning(f"Skipping {path.name}: {exc}")
