"""Validate command - Check a code against a value set."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

import click
from rich.console import Console

from ..helpers import build_container
from ..presenters.validation import ValidationPresenter
from .options import config_option, resources_option, verbose_option

if TYPE_CHECKING:
    from pathlib import Path

console = Console()


@click.command()
@click.argument("value_set_uri")
@click.argument("code")
@click.argument("system")
@config_option
@resources_option
@verbose_option
@click.option("--display", help="Display text that must match the concept")
@click.option(
    "--abstract-allowed",
    is_flag=True,
    default=False,
    help="Accept abstract (categorizing) codes",
)
@click.option(
    "--format",
    "report_format",
    type=click.Choice(["text", "json"]),
    default="text",
    show_default=True,
    help="Report format",
)
def validate_command(
    value_set_uri: str,
    code: str,
    system: str,
    config_file: Path | None,
    resources_dir: Path | None,
    verbose: int,
    display: str | None,
    abstract_allowed: bool,
    report_format: str,
) -> None:
    """Validate that CODE from SYSTEM is a member of a value set.

    Exits with status 1 when the code is not valid or membership could not
    be determined.

    Examples:

    \b
        fhir-terminology validate http://hl7.org/fhir/ValueSet/data-absent-reason \\
            NaN http://hl7.org/fhir/data-absent-reason --display "Not a Number"
    """
    container = build_container(
        console,
        config_file=config_file,
        resources_dir=resources_dir,
        verbose=verbose,
    )
    service = container.create_terminology_service()
    result = service.validate_code(
        value_set_uri,
        code,
        system,
        display=display,
        abstract_allowed=abstract_allowed,
    )
    if report_format == "json":
        click.echo(json.dumps(result.to_dict(), indent=2))
        if not result.success:
            raise click.exceptions.Exit(1)
        return

    ValidationPresenter(console).present(value_set_uri, code, system, result)
    container.create_logger().log_final_stats()
    if not result.success:
        raise click.ClickException(
            f"Validation failed with {result.error_count()} errors"
        )
