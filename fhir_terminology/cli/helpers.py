from __future__ import annotations

from dataclasses import replace
from typing import TYPE_CHECKING

from ..config import ConfigLoader
from ..infrastructure.container import DependencyContainer

if TYPE_CHECKING:
    from pathlib import Path

    from rich.console import Console


def build_container(
    console: Console,
    *,
    config_file: Path | None,
    resources_dir: Path | None,
    verbose: int,
    max_size: int | None = None,
) -> DependencyContainer:
    config = ConfigLoader.load(config_file)
    if resources_dir is not None:
        config = replace(config, resources_dir=resources_dir)
    if max_size is not None:
        config = replace(config, max_expansion_size=max_size)
    config = replace(config, verbosity=verbose)
    return DependencyContainer(config=config, console=console)
