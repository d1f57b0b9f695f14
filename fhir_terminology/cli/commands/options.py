from pathlib import Path

import click

config_option = click.option(
    "--config",
    "config_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Path to a fhir_terminology.toml config file "
    "(default: ./fhir_terminology.toml)",
)
resources_option = click.option(
    "--resources",
    "resources_dir",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    help="Directory of FHIR JSON and CSV terminology resources",
)
verbose_option = click.option(
    "-v",
    "--verbose",
    count=True,
    help="Increase verbosity (-v verbose, -vv debug)",
)
