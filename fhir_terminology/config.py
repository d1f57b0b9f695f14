from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
import os
from pathlib import Path
import tomllib
from typing import TYPE_CHECKING, cast
import warnings

from .constants import Defaults
from .domain.services.value_set_expander import ExpanderSettings

if TYPE_CHECKING:
    from .application.ports.repositories import ResourceResolverPort


@dataclass(frozen=True, slots=True)
class TerminologyConfig:
    resources_dir: Path = field(default_factory=lambda: Path(Defaults.RESOURCES_DIR))
    max_expansion_size: int = Defaults.MAX_EXPANSION_SIZE
    max_import_depth: int = Defaults.MAX_IMPORT_DEPTH
    verbosity: int = 0

    def __post_init__(self) -> None:
        if self.max_expansion_size < 1:
            raise ValueError(
                f"max_expansion_size must be positive, got {self.max_expansion_size}"
            )
        if self.max_import_depth < 1:
            raise ValueError(
                f"max_import_depth must be positive, got {self.max_import_depth}"
            )
        if self.verbosity < 0:
            raise ValueError(f"verbosity must be non-negative, got {self.verbosity}")

    @classmethod
    def from_env(cls) -> TerminologyConfig:
        return cls(
            resources_dir=Path(
                os.getenv("TERMINOLOGY_RESOURCES_DIR", Defaults.RESOURCES_DIR)
            ),
            max_expansion_size=int(
                os.getenv("MAX_EXPANSION_SIZE", str(Defaults.MAX_EXPANSION_SIZE))
            ),
            max_import_depth=int(
                os.getenv("MAX_IMPORT_DEPTH", str(Defaults.MAX_IMPORT_DEPTH))
            ),
        )

    def expander_settings(
        self, resolver: ResourceResolverPort | None = None
    ) -> ExpanderSettings:
        return ExpanderSettings(
            max_expansion_size=self.max_expansion_size,
            value_set_source=resolver,
            max_import_depth=self.max_import_depth,
        )


class ConfigLoader:
    pass

    @staticmethod
    def load(config_file: Path | None = None) -> TerminologyConfig:
        config = TerminologyConfig.from_env()
        if config_file is None:
            config_file = Path(Defaults.CONFIG_FILE)
        if config_file.exists():
            try:
                config = ConfigLoader._load_from_toml(config_file, config)
            except Exception as e:
                warnings.warn(
                    f"Failed to load config from {config_file}: {e}", stacklevel=2
                )
        return config

    @staticmethod
    def _load_from_toml(
        config_file: Path, base_config: TerminologyConfig
    ) -> TerminologyConfig:
        with config_file.open("rb") as handle:
            data = tomllib.load(handle)
        paths = _get_table(data, "paths")
        expansion = _get_table(data, "expansion")
        resources_dir = base_config.resources_dir
        if value := paths.get("resources_dir"):
            resources_dir = Path(str(value))
        max_expansion_size = base_config.max_expansion_size
        if (value := expansion.get("max_size")) is not None:
            max_expansion_size = _coerce_int(value, key="expansion.max_size")
        max_import_depth = base_config.max_import_depth
        if (value := expansion.get("max_import_depth")) is not None:
            max_import_depth = _coerce_int(value, key="expansion.max_import_depth")
        return TerminologyConfig(
            resources_dir=resources_dir,
            max_expansion_size=max_expansion_size,
            max_import_depth=max_import_depth,
            verbosity=base_config.verbosity,
        )


def _get_table(data: Mapping[str, object], key: str) -> Mapping[str, object]:
    value = data.get(key)
    if isinstance(value, Mapping):
        return cast("Mapping[str, object]", value)
    return {}


def _coerce_int(value: object, *, key: str) -> int:
    if isinstance(value, bool):
        raise ValueError(f"{key} must be an int, got bool")
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value)
    if isinstance(value, str):
        return int(value)
    raise ValueError(f"{key} must be int-like or string, got {type(value).__name__}")
