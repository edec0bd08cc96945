"""Commands that crawl the Glue Data Catalog and act on every item."""

from __future__ import annotations

import re
from typing import Any, Callable

import typer
from rich.markup import escape

from gluecrawl.cli.common.context import CrawlAppContext
from gluecrawl.cli.common.exits import exit_from_exc, ok_exit, warn_exit
from gluecrawl.cli.common.options import (
    CommandArg,
    ConfirmOpt,
    DryRunOpt,
    NameOpt,
)
from gluecrawl.cli.common.output import out
from gluecrawl.core.commands import render_command, run_command
from gluecrawl.core.crawler import CrawlError


def _compile_regex_or_exit(pattern: str | None, *, option_name: str) -> re.Pattern | None:
    """Compile a regex pattern and convert invalid syntax into CLI input errors."""
    if not pattern:
        return None
    try:
        return re.compile(pattern)
    except re.error as exc:
        out.error(f"Invalid regex for {option_name}: {exc}")
        raise typer.Exit(2) from exc


def _run_crawl(
    *,
    kind: str,
    crawl: Callable[[Callable[[Any], None]], None],
    render_table: Callable[[list[Any]], None],
    command: str | None,
    name: str | None,
    dry_run: bool,
    confirm: bool,
) -> None:
    """
    Crawl one catalog level and either list the items or run ``command`` per item.

    Listing mode collects the (optionally name-filtered) items and renders
    them as a table. Command mode renders the template for every item and
    runs it, stopping at the first failure.
    """
    name_rx = _compile_regex_or_exit(name, option_name="--name")

    if command and confirm and not dry_run:
        if not out.confirm(f"Run `{command}` for every {kind}?"):
            ok_exit("Cancelled")

    matched: list[Any] = []

    def visit(item: Any) -> None:
        if name_rx and not name_rx.search(item.display_name):
            return
        matched.append(item)
        if not command:
            return
        rendered = render_command(command, item)
        if dry_run:
            out.print(f"[meta]would run[/]: {escape(rendered)}")
            return
        result = run_command(rendered)
        out.command_output(result.stdout, result.stderr)

    try:
        if command:
            out.info(f"Crawling {kind}s...")
            crawl(visit)
        else:
            with out.status(f"Loading {kind}s..."):
                crawl(visit)
    except CrawlError as exc:
        exit_from_exc(exc, message=f"Failed to crawl {kind}s", code=1)

    if not matched:
        warn_exit(f"No {kind}s found.", code=0)

    if command:
        verb = "matched" if dry_run else "processed"
        out.success(f"{kind.capitalize()}s {verb}: {len(matched)}")
        return

    out.header(f"{kind.capitalize()}s: {len(matched)}")
    render_table(matched)


def databases(
    ctx: typer.Context,
    command: str | None = CommandArg,
    name: str | None = NameOpt,
    dry_run: bool = DryRunOpt,
    confirm: bool = ConfirmOpt,
):
    """
    Run some command against every database in the Glue Data Catalog.

    Template fields: {name} {description} {location_uri} {catalog_id}
    """
    appctx: CrawlAppContext = ctx.obj
    _run_crawl(
        kind="database",
        crawl=appctx.crawler.crawl_databases,
        render_table=lambda items: out.databases_table(items, title="Databases"),
        command=command,
        name=name,
        dry_run=dry_run,
        confirm=confirm,
    )


def tables(
    ctx: typer.Context,
    command: str | None = CommandArg,
    name: str | None = NameOpt,
    dry_run: bool = DryRunOpt,
    confirm: bool = ConfirmOpt,
):
    """
    Run some command against every table in the Glue Data Catalog.

    Template fields: {database_name} {name} {full_name} {table_type} {owner}
    {location} {partition_keys} {catalog_id}
    """
    appctx: CrawlAppContext = ctx.obj
    _run_crawl(
        kind="table",
        crawl=appctx.crawler.crawl_tables,
        render_table=lambda items: out.tables_table(items, title="Tables"),
        command=command,
        name=name,
        dry_run=dry_run,
        confirm=confirm,
    )


def partitions(
    ctx: typer.Context,
    command: str | None = CommandArg,
    name: str | None = NameOpt,
    dry_run: bool = DryRunOpt,
    confirm: bool = ConfirmOpt,
):
    """
    Run some command against every partition in the Glue Data Catalog.

    Template fields: {database_name} {table_name} {values} {location} {catalog_id}
    """
    appctx: CrawlAppContext = ctx.obj
    _run_crawl(
        kind="partition",
        crawl=appctx.crawler.crawl_partitions,
        render_table=lambda items: out.partitions_table(items, title="Partitions"),
        command=command,
        name=name,
        dry_run=dry_run,
        confirm=confirm,
    )


def testcatalog(ctx: typer.Context):
    """Create a Glue database, table and partition for testing (idempotent)."""
    appctx: CrawlAppContext = ctx.obj

    out.header("Test catalog")
    out.kv(
        {
            "region": appctx.region or "",
            "profile": appctx.profile or "(default)",
            "catalog": appctx.catalog_id or "(account default)",
        }
    )
    try:
        with out.status("Setting up test glue catalog..."):
            appctx.crawler.setup_test_catalog()
    except CrawlError as exc:
        exit_from_exc(exc, message="testcatalog failed", code=1)

    out.success("Test catalog ready")
