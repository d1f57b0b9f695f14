"""Expand command - Materialize the codes a value set denotes."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click
from rich.console import Console

from ...domain.exceptions import ExpansionTooLargeError, TerminologyError
from ..helpers import build_container
from ..presenters.expansion import ExpansionPresenter
from .options import config_option, resources_option, verbose_option

if TYPE_CHECKING:
    from pathlib import Path

console = Console()


@click.command()
@click.argument("value_set_uri")
@config_option
@resources_option
@verbose_option
@click.option(
    "--max-size",
    type=click.IntRange(min=1),
    help="Maximum number of concepts an expansion may contain",
)
@click.option(
    "--limit",
    type=click.IntRange(min=1),
    default=50,
    show_default=True,
    help="Number of concepts to print",
)
def expand_command(
    value_set_uri: str,
    config_file: Path | None,
    resources_dir: Path | None,
    verbose: int,
    max_size: int | None,
    limit: int,
) -> None:
    """Expand a value set and print its concepts.

    Examples:

    \b
        fhir-terminology expand http://hl7.org/fhir/ValueSet/issue-type \\
            --resources ./resources
    """
    container = build_container(
        console,
        config_file=config_file,
        resources_dir=resources_dir,
        verbose=verbose,
        max_size=max_size,
    )
    service = container.create_terminology_service()
    logger = container.create_logger()
    try:
        expansion = service.expand(value_set_uri)
    except ExpansionTooLargeError as exc:
        logger.error(str(exc))
        raise click.ClickException(
            f"Retry with --max-size {exc.size} or higher to expand {value_set_uri}"
        ) from exc
    except TerminologyError as exc:
        logger.error(str(exc))
        raise click.ClickException(str(exc)) from exc
    ExpansionPresenter(console, row_limit=limit).present(value_set_uri, expansion)
    logger.log_final_stats()
