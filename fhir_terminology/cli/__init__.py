import click

from .commands.expand import expand_command
from .commands.resources import list_resources_command
from .commands.validate import validate_command


@click.group()
def app() -> None:
    pass


app.add_command(expand_command, name="expand")
app.add_command(validate_command, name="validate")
app.add_command(list_resources_command, name="resources")
__all__ = ["app"]
