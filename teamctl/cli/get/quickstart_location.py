# teamctl/cli/get/quickstart_location.py

import typer
from rich.console import Console
from rich.table import Table

from teamctl.cli.common.utils import fail
from teamctl.core.quickstart import list_quickstart_locations

console = Console()


def get_qsloc(
    ctx: typer.Context,
    namespace: str = typer.Option(None, "--namespace", "-n", help="The team's dev namespace.")
):
    """Lists the quickstart locations configured for your team."""
    result = list_quickstart_locations(namespace=namespace, settings=ctx.obj["settings"])

    if not result["success"]:
        fail(result["error"])

    if result["total_count"] == 0:
        typer.echo("No quickstart locations configured.")
        return

    table = Table(title=f"Quickstart Locations ({result['namespace']})")
    table.add_column("Git URL")
    table.add_column("Kind")
    table.add_column("Owner")
    table.add_column("Includes")
    table.add_column("Excludes")
    for loc in result["locations"]:
        table.add_row(
            loc["gitUrl"],
            loc["gitKind"],
            loc["owner"],
            ", ".join(loc["includes"]),
            ", ".join(loc["excludes"]),
        )
    console.print(table)
