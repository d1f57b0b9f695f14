from __future__ import annotations

from dataclasses import replace
from typing import TYPE_CHECKING

from rich.console import Console

from ..config import TerminologyConfig
from ..domain.services.terminology_service import LocalTerminologyService
from ..domain.services.value_set_expander import ValueSetExpander
from .caching.memory_cache import MemoryCache
from .logging.console_logger import ConsoleLogger
from .logging.null_logger import NullLogger
from .repositories.resource_repository import DirectoryResourceResolver

if TYPE_CHECKING:
    from ..application.ports.repositories import ResourceResolverPort
    from ..application.ports.services import LoggerPort
    from .repositories.resource_repository import ResourceRegistry


class DependencyContainer:
    pass

    def __init__(
        self,
        config: TerminologyConfig | None = None,
        console: Console | None = None,
        use_null_logger: bool = False,
        resolver: ResourceResolverPort | None = None,
    ) -> None:
        super().__init__()
        self.config = config or TerminologyConfig()
        self.console = console or Console()
        self.use_null_logger = use_null_logger
        self._logger_instance: LoggerPort | None = None
        self._resolver_instance: ResourceResolverPort | None = resolver
        self._resource_cache: MemoryCache[ResourceRegistry] = MemoryCache()
        self._terminology_service_instance: LocalTerminologyService | None = None

    def create_logger(self) -> LoggerPort:
        if self._logger_instance is None:
            if self.use_null_logger:
                self._logger_instance = NullLogger()
            else:
                self._logger_instance = ConsoleLogger(
                    console=self.console, verbosity=self.config.verbosity
                )
        return self._logger_instance

    def create_resolver(self) -> ResourceResolverPort:
        if self._resolver_instance is None:
            self._resolver_instance = DirectoryResourceResolver(
                self.config.resources_dir,
                cache=self._resource_cache,
                logger=self.create_logger(),
            )
        return self._resolver_instance

    def create_expander(
        self, *, max_expansion_size: int | None = None, force_recompute: bool = False
    ) -> ValueSetExpander:
        settings = self.config.expander_settings(self.create_resolver())
        settings = replace(settings, force_recompute=force_recompute)
        if max_expansion_size is not None:
            settings = replace(settings, max_expansion_size=max_expansion_size)
        return ValueSetExpander(settings, logger=self.create_logger())

    def create_terminology_service(self) -> LocalTerminologyService:
        if self._terminology_service_instance is None:
            resolver = self.create_resolver()
            self._terminology_service_instance = LocalTerminologyService(
                resolver,
                settings=self.config.expander_settings(resolver),
                logger=self.create_logger(),
            )
        return self._terminology_service_instance

    def reset(self) -> None:
        self._logger_instance = None
        self._terminology_service_instance = None
        self._resource_cache.clear()
