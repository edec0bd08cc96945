"""Output formatting utilities for the CLI."""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Iterable, Mapping

import questionary
from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.theme import Theme

from gluecrawl.cli.common.tui_style import QUESTIONARY_STYLE_CONFIRM

_THEME = Theme(
    {
        "ok": "bold green",
        "warn": "yellow",
        "err": "bold red",
        "title": "bold cyan",
        "meta": "dim",
    }
)

console = Console(theme=_THEME)


@dataclass(frozen=True)
class Out:
    """Output formatter for CLI messages and tables."""

    def _q_try(self, fn, *args, **kwargs):
        """Call questionary prompts and drop unsupported kwargs on older versions."""
        try:
            return fn(*args, **kwargs)
        except TypeError:
            for k in ("pointer", "auto_enter"):
                kwargs.pop(k, None)
            return fn(*args, **kwargs)

    def info(self, msg: str) -> None:
        """Print an info message."""
        console.print(f"[title]›[/] {msg}")

    @contextmanager
    def status(self, msg: str):
        """Show a transient status spinner while work is in progress."""
        with console.status(msg, spinner="dots"):
            yield

    def success(self, msg: str) -> None:
        """Print a success message."""
        console.print(f"[ok]✓[/] {msg}")

    def warn(self, msg: str) -> None:
        """Print a warning message."""
        console.print(f"[warn]⚠[/] {msg}")

    def error(self, msg: str) -> None:
        """Print an error message."""
        console.print(f"[err]✗[/] {escape(msg)}")

    def header(self, title: str) -> None:
        """Print a header message."""
        console.print(f"[title]{title}[/]")

    def print(self, msg: str) -> None:
        """Print a raw Rich-formatted message to the console."""
        console.print(msg)

    def kv(self, items: Mapping[str, Any]) -> None:
        """Print key-value pairs."""
        for k, v in items.items():
            console.print(f"[meta]{k}[/]: {v}")

    def command_output(self, stdout: str, stderr: str) -> None:
        """Print the captured stdout/stderr of one command run, unformatted."""
        console.print("--- stdout ---", markup=False, highlight=False)
        console.print(stdout, markup=False, highlight=False)
        console.print("--- stderr ---", markup=False, highlight=False)
        console.print(stderr, markup=False, highlight=False)

    def confirm(self, message: str, *, default: bool = False) -> bool:
        """
        Ask the user for confirmation using a standardized Questionary prompt.

        Args:
            message: Confirmation question shown to the user.
            default: Default answer if the user just presses enter.

        Returns:
            True if the user confirms, False otherwise.
        """
        console.print("[meta]Use y/n then Enter[/]")

        prompt = self._q_try(
            questionary.confirm,
            f"[gluecrawl] {message}",
            default=default,
            style=QUESTIONARY_STYLE_CONFIRM,
            qmark="✦",
            auto_enter=False,
        )
        return bool(prompt.ask())

    def databases_table(self, databases: Iterable[Any], title: str = "Databases") -> None:
        """
        Expects objects with .name, optional .description and .location_uri
        (like gluecrawl.core.models.Database)
        """
        t = Table(title=title, show_lines=False)
        t.add_column("Database", style="ok")
        t.add_column("Location", style="meta")
        t.add_column("Description", style="meta")

        for d in databases:
            t.add_row(
                escape(d.name),
                escape(getattr(d, "location_uri", None) or ""),
                escape(getattr(d, "description", None) or ""),
            )

        console.print(t)

    def tables_table(self, tables: Iterable[Any], title: str = "Tables") -> None:
        """
        Render Glue tables.

        Expects objects with `.database_name`, `.name`, optional `.table_type`,
        `.owner` and `.partition_keys`.
        """
        t = Table(title=title, show_lines=False)
        t.add_column("Database", style="meta")
        t.add_column("Table", style="ok")
        t.add_column("Type", style="meta")
        t.add_column("Owner", style="meta")
        t.add_column("Partition keys", style="meta")

        for item in tables:
            t.add_row(
                escape(item.database_name),
                escape(item.name),
                escape(str(getattr(item, "table_type", "") or "")),
                escape(str(getattr(item, "owner", "") or "")),
                escape(", ".join(getattr(item, "partition_keys", ()) or ())),
            )

        console.print(t)

    def partitions_table(
        self, partitions: Iterable[Any], title: str = "Partitions"
    ) -> None:
        """Render Glue partitions (database, table, values, location)."""
        t = Table(title=title, show_lines=False)
        t.add_column("Database", style="meta")
        t.add_column("Table", style="meta")
        t.add_column("Values", style="ok")
        t.add_column("Location", style="meta")

        for p in partitions:
            t.add_row(
                escape(p.database_name),
                escape(p.table_name),
                escape(", ".join(p.values)),
                escape(getattr(p, "location", None) or ""),
            )

        console.print(t)


out = Out()
