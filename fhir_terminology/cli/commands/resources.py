from __future__ import annotations

from typing import TYPE_CHECKING

import click
from rich.console import Console
from rich.table import Table

from ...domain.entities.code_system import CodeSystem
from ..helpers import build_container
from .options import config_option, resources_option

if TYPE_CHECKING:
    from pathlib import Path

console = Console()


@click.command()
@config_option
@resources_option
def list_resources_command(
    config_file: Path | None, resources_dir: Path | None
) -> None:
    """List the code systems and value sets available for resolution."""
    container = build_container(
        console, config_file=config_file, resources_dir=resources_dir, verbose=0
    )
    resolver = container.create_resolver()
    table = Table(title="Terminology Resources")
    table.add_column("Canonical", style="cyan", overflow="fold")
    table.add_column("Type", no_wrap=True)
    table.add_column("Version", style="dim")
    list_uris = getattr(resolver, "list_canonical_uris", None)
    uris: list[str] = list_uris() if callable(list_uris) else []
    for uri in uris:
        if "|" in uri:
            continue
        resource = resolver.resolve_by_canonical_uri(uri)
        if resource is None:
            continue
        kind = "CodeSystem" if isinstance(resource, CodeSystem) else "ValueSet"
        table.add_row(uri, kind, resource.version or "")
    console.print(table)
