"""Catalog client interface and error taxonomy.

The crawler only ever talks to the remote catalog through the
``CatalogClient`` protocol defined here. The production implementation lives
in ``gluecrawl.core.adapters.glue``; tests provide in-memory stubs.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Generic, Protocol, Sequence, TypeVar

from gluecrawl.core.models import Database, Partition, StorageSpec, Table, TableSpec

T = TypeVar("T")


class CatalogError(RuntimeError):
    """Raised when a catalog API call fails (network, auth, throttling, not-found)."""

    def __init__(
        self, message: str, *, operation: str | None = None, code: str | None = None
    ) -> None:
        super().__init__(message)
        self.operation = operation
        self.code = code


class AlreadyExistsError(CatalogError):
    """Raised by create operations when the entity already exists."""


@dataclass(frozen=True)
class Page(Generic[T]):
    """
    A single page of a paginated listing.

    Attributes:
        items: Items in the order the service returned them.
        next_token: Continuation token for the following page, or None on the
                    last page.
    """

    items: list[T] = field(default_factory=list)
    next_token: str | None = None


class CatalogClient(Protocol):
    """Interface for the paginated listing and create calls used by the crawler."""

    def list_databases(self, token: str | None = None) -> Page[Database]:
        """Return one page of databases."""
        ...

    def list_tables(self, database_name: str, token: str | None = None) -> Page[Table]:
        """Return one page of tables in a database."""
        ...

    def list_partitions(
        self, database_name: str, table_name: str, token: str | None = None
    ) -> Page[Partition]:
        """Return one page of partitions of a table."""
        ...

    def create_database(self, name: str) -> None:
        """Create a database; raise AlreadyExistsError if it exists."""
        ...

    def create_table(self, database_name: str, spec: TableSpec) -> None:
        """Create a table; raise AlreadyExistsError if it exists."""
        ...

    def create_partition(
        self,
        database_name: str,
        table_name: str,
        values: Sequence[str],
        storage: StorageSpec,
    ) -> None:
        """Create a partition; raise AlreadyExistsError if it exists."""
        ...
