"""Common CLI options for the CLI."""

import typer

RegionOpt = typer.Option(
    "us-east-1",
    "--aws-region",
    "-r",
    envvar="AWS_REGION",
    help="AWS region of the Glue Data Catalog",
)

ProfileOpt = typer.Option(
    None,
    "--profile",
    "-p",
    envvar="AWS_PROFILE",
    help="AWS profile (from ~/.aws/config)",
)

CatalogIdOpt = typer.Option(
    None,
    "--catalog-id",
    "-C",
    envvar="GLUECRAWL_CATALOG_ID",
    help="ID of the Glue Data Catalog to target (defaults to the account's catalog)",
)

CommandArg = typer.Argument(
    None,
    help="Command template run with bash for every item, e.g. 'echo {name}'",
    show_default=False,
)

NameOpt = typer.Option(
    None,
    "--name",
    help="Regex on the item name (database, database.table or partition path)",
)

DryRunOpt = typer.Option(
    False,
    "--dry-run",
    help="Print the rendered commands, but don't run anything",
)

ConfirmOpt = typer.Option(
    False,
    "--confirm/--no-confirm",
    help="Ask for confirmation before running the command on every item",
)
