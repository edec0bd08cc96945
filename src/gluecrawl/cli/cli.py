"""CLI application for crawling an AWS Glue Data Catalog."""

from importlib.metadata import PackageNotFoundError, version

import typer

from gluecrawl.cli.commands.crawl import databases, partitions, tables, testcatalog
from gluecrawl.cli.common.context import build_crawl_context
from gluecrawl.cli.common.options import CatalogIdOpt, ProfileOpt, RegionOpt

app = typer.Typer(
    help="gluecrawl - perform operations against resources in an AWS Glue Data Catalog",
    no_args_is_help=True,
)


def _version_callback(value: bool) -> None:
    if not value:
        return
    try:
        typer.echo(version("gluecrawl"))
    except PackageNotFoundError:
        typer.echo("unknown")
    raise typer.Exit(0)


@app.callback()
def _init(
    ctx: typer.Context,
    region: str = RegionOpt,
    profile: str | None = ProfileOpt,
    catalog_id: str | None = CatalogIdOpt,
    _version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show the version and exit",
    ),
):
    """Build the shared Glue client and crawler once per invocation."""
    ctx.obj = build_crawl_context(region, profile, catalog_id)


app.command("databases")(databases)
app.command("tables")(tables)
app.command("partitions")(partitions)
app.command("testcatalog")(testcatalog)


if __name__ == "__main__":
    app()
