# teamctl/cli/main.py

import logging
import sys
from pathlib import Path

import typer

from teamctl.cli.common.utils import fail
from teamctl.core.config import SETTINGS_FILE, load_settings
from teamctl.core.errors import SettingsError

from teamctl.cli.delete.quickstart_location import (
    QUICKSTART_LOCATION,
    QUICKSTART_LOCATION_ALIASES,
    delete_qsloc,
)
from teamctl.cli.get.quickstart_location import get_qsloc


app = typer.Typer(
    name="teamctl",
    help="A command-line tool for managing a team's settings on Kubernetes."
)

delete_app = typer.Typer(name="delete", help="Commands for deleting team resources.")
get_app = typer.Typer(name="get", help="Commands for displaying team resources.")

# Add commands to their respective apps, aliases stay out of --help
delete_app.command(QUICKSTART_LOCATION)(delete_qsloc)
get_app.command(QUICKSTART_LOCATION)(get_qsloc)
for alias in QUICKSTART_LOCATION_ALIASES:
    delete_app.command(alias, hidden=True)(delete_qsloc)
    get_app.command(alias, hidden=True)(get_qsloc)


@app.callback()
def setup(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
    config: Path = typer.Option(SETTINGS_FILE, "--config", help="Path to the teamctl settings file.")
):
    # Logging goes to stderr only, never stdout
    logging.basicConfig(stream=sys.stderr, level=logging.DEBUG if verbose else logging.INFO)
    try:
        ctx.obj = {"settings": load_settings(config)}
    except SettingsError as e:
        fail(str(e))


# Add the sub-apps to the main app
app.add_typer(delete_app, name="delete")
app.add_typer(get_app, name="get")

def main():
    app()

if __name__ == "__main__":
    main()
