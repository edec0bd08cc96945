"""Memoizing crawler over the database -> table -> partition hierarchy.

The crawler lazily lists each level of the catalog the first time it is
crawled and keeps the result for the lifetime of the instance. Listing a
child level always populates its parent level first, so callers never have
to sequence calls themselves. Everything here is synchronous and
single-threaded; a Crawler must not be shared between threads.
"""

from __future__ import annotations

from typing import Callable, Optional, Sequence, TypeVar

from gluecrawl.core.catalog import AlreadyExistsError, CatalogClient, CatalogError, Page
from gluecrawl.core.models import (
    Column,
    Database,
    Partition,
    StorageSpec,
    Table,
    TableSpec,
)

T = TypeVar("T")

TEST_DATABASE = "testdb"
TEST_TABLE = "testtable"
TEST_PARTITION_VALUES = ("20220902",)
_TEST_COLUMN = Column(name="logdate", type="int")


class CrawlError(RuntimeError):
    """Raised when fetching a catalog level or visiting an item fails."""


def _collect_pages(list_page: Callable[[str | None], Page[T]]) -> list[T]:
    """Follow continuation tokens from the first page until none is returned."""
    page = list_page(None)
    items = list(page.items)
    while page.next_token is not None:
        page = list_page(page.next_token)
        items.extend(page.items)
    return items


def _visit_all(items: Sequence[T], visit: Callable[[T], None], kind: str) -> None:
    for item in items:
        try:
            visit(item)
        except Exception as exc:  # noqa: BLE001
            raise CrawlError(
                f"failed to run function on {kind} "
                f"'{getattr(item, 'display_name', item)}': {exc}"
            ) from exc


class Crawler:
    """
    Crawl databases, tables and partitions of a catalog.

    Each level is cached after its first successful fetch. ``None`` marks a
    level that has not been fetched yet; an empty tuple is a fetched level
    with no items. Cached levels are tuples and never change once set.
    """

    def __init__(self, client: CatalogClient) -> None:
        self.client = client
        self._databases: Optional[tuple[Database, ...]] = None
        self._tables: Optional[tuple[Table, ...]] = None
        self._partitions: Optional[tuple[Partition, ...]] = None

    @property
    def databases(self) -> Optional[tuple[Database, ...]]:
        """Cached databases, or None if not fetched yet."""
        return self._databases

    @property
    def tables(self) -> Optional[tuple[Table, ...]]:
        """Cached tables, or None if not fetched yet."""
        return self._tables

    @property
    def partitions(self) -> Optional[tuple[Partition, ...]]:
        """Cached partitions, or None if not fetched yet."""
        return self._partitions

    def crawl_databases(self, visit: Callable[[Database], None]) -> None:
        """
        Call ``visit`` once per database, in catalog listing order.

        Raises:
            CrawlError: if listing fails (nothing is visited) or ``visit``
                raises (remaining databases are skipped).
        """
        _visit_all(self._fetch_databases(), visit, "database")

    def crawl_tables(self, visit: Callable[[Table], None]) -> None:
        """Call ``visit`` once per table; databases are fetched first if needed."""
        _visit_all(self._fetch_tables(), visit, "table")

    def crawl_partitions(self, visit: Callable[[Partition], None]) -> None:
        """Call ``visit`` once per partition; tables are fetched first if needed."""
        _visit_all(self._fetch_partitions(), visit, "partition")

    def _fetch_databases(self) -> tuple[Database, ...]:
        if self._databases is not None:
            return self._databases
        try:
            databases = tuple(_collect_pages(self.client.list_databases))
        except CatalogError as exc:
            raise CrawlError(f"while fetching databases: {exc}") from exc
        self._databases = databases
        return databases

    def _fetch_tables(self) -> tuple[Table, ...]:
        if self._tables is not None:
            return self._tables
        tables: list[Table] = []
        for db in self._fetch_databases():
            try:
                tables.extend(
                    _collect_pages(
                        lambda token, name=db.name: self.client.list_tables(name, token)
                    )
                )
            except CatalogError as exc:
                raise CrawlError(
                    f"while fetching tables for database '{db.name}': {exc}"
                ) from exc
        self._tables = tuple(tables)
        return self._tables

    def _fetch_partitions(self) -> tuple[Partition, ...]:
        if self._partitions is not None:
            return self._partitions
        partitions: list[Partition] = []
        for table in self._fetch_tables():
            try:
                partitions.extend(
                    _collect_pages(
                        lambda token, t=table: self.client.list_partitions(
                            t.database_name, t.name, token
                        )
                    )
                )
            except CatalogError as exc:
                raise CrawlError(
                    f"while fetching partitions for table '{table.display_name}': {exc}"
                ) from exc
        self._partitions = tuple(partitions)
        return self._partitions

    def setup_test_catalog(self) -> None:
        """
        Make sure a small test database, table and partition exist.

        Safe to call repeatedly: "already exists" answers from the catalog
        count as success. Any other catalog failure is raised as CrawlError.
        """
        storage = StorageSpec(
            columns=(_TEST_COLUMN,),
            location="s3://bucket-path/",
            serialization_library="org.openx.data.jsonserde.JsonSerDe",
        )
        steps: list[tuple[str, Callable[[], None]]] = [
            (
                f"create database '{TEST_DATABASE}'",
                lambda: self.client.create_database(TEST_DATABASE),
            ),
            (
                f"create table '{TEST_DATABASE}.{TEST_TABLE}'",
                lambda: self.client.create_table(
                    TEST_DATABASE,
                    TableSpec(
                        name=TEST_TABLE,
                        storage=storage,
                        partition_keys=(_TEST_COLUMN,),
                        parameters={"classification": "json"},
                    ),
                ),
            ),
            (
                f"create partition {list(TEST_PARTITION_VALUES)} "
                f"of '{TEST_DATABASE}.{TEST_TABLE}'",
                lambda: self.client.create_partition(
                    TEST_DATABASE,
                    TEST_TABLE,
                    TEST_PARTITION_VALUES,
                    StorageSpec(columns=(_TEST_COLUMN,)),
                ),
            ),
        ]
        for description, step in steps:
            try:
                step()
            except AlreadyExistsError:
                continue
            except CatalogError as exc:
                raise CrawlError(f"failed to {description}: {exc}") from exc
