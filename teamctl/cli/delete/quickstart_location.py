# teamctl/cli/delete/quickstart_location.py

import typer

from teamctl.cli.common.utils import color_info, fail, pick_name
from teamctl.core.config import GITHUB_URL
from teamctl.core.quickstart import delete_quickstart_location
from teamctl.core.utils import url_join

QUICKSTART_LOCATION = "quickstartlocation"
QUICKSTART_LOCATION_ALIASES = ["quickstartlocations", "qsloc", "qsl"]


def delete_qsloc(
    ctx: typer.Context,
    url: str = typer.Option(GITHUB_URL, "--url", "-u", help="The URL of the git service"),
    owner: str = typer.Option("", "--owner", "-o", help="The owner is the user or organisation of the git provider"),
    batch_mode: bool = typer.Option(False, "--batch-mode", "-b", help="Run without prompting; --url and --owner become required."),
    namespace: str = typer.Option(None, "--namespace", "-n", help="The team's dev namespace.")
):
    """
    Deletes a quickstart location for your team.

    Without --owner you are asked to pick one of the team's existing
    locations, e.g. `teamctl delete qsloc --url https://foo.com --owner myowner`.
    """
    settings = ctx.obj["settings"]
    result = delete_quickstart_location(
        git_url=url,
        owner=owner,
        batch_mode=batch_mode or settings["batch_mode"],
        picker=pick_name,
        namespace=namespace,
        settings=settings,
    )

    if not result["success"]:
        fail(result["error"])

    typer.echo(f"Removing quickstart git owner {color_info(url_join(result['git_url'], result['owner']))}")
