"""Per-item shell command rendering and execution.

A command template is a ``str.format`` string whose fields come from the
item's ``template_fields()`` (e.g. ``"echo {database_name}.{name}"`` for a
table, ``"echo {values[0]}"`` for a partition). Rendered commands run through
``bash -c`` and their output is captured for the caller to display.
"""

from __future__ import annotations

import subprocess
from dataclasses import dataclass
from typing import Any, Protocol


class CommandTemplateError(ValueError):
    """Raised when a command template cannot be rendered for an item."""


class CommandError(RuntimeError):
    """Raised when a rendered command exits with a non-zero status."""

    def __init__(self, command: str, returncode: int, stderr: str) -> None:
        detail = stderr.strip()
        message = f"command exited with status {returncode}: {command}"
        if detail:
            message = f"{message}\n{detail}"
        super().__init__(message)
        self.command = command
        self.returncode = returncode
        self.stderr = stderr


class Templated(Protocol):
    def template_fields(self) -> dict[str, Any]:
        ...


@dataclass(frozen=True)
class CommandResult:
    """Captured output of one command run."""

    command: str
    stdout: str
    stderr: str


def render_command(template: str, item: Templated) -> str:
    """Render ``template`` with the item's fields."""
    try:
        return template.format_map(item.template_fields())
    except KeyError as exc:
        raise CommandTemplateError(f"unknown template field {exc}") from exc
    except (IndexError, ValueError, AttributeError) as exc:
        raise CommandTemplateError(f"failed to render command template: {exc}") from exc


def run_command(command: str, *, shell: str = "bash") -> CommandResult:
    """Run ``command`` with ``<shell> -c`` and return its captured output."""
    proc = subprocess.run(
        [shell, "-c", command],
        capture_output=True,
        text=True,
        check=False,
    )
    if proc.returncode != 0:
        raise CommandError(command, proc.returncode, proc.stderr)
    return CommandResult(command=command, stdout=proc.stdout, stderr=proc.stderr)
