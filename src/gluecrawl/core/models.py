"""Core domain models for the Glue Data Catalog.

These models represent catalog entities (databases, tables, partitions) and
the specs used to create them in a simple, immutable form. They are
intentionally free of boto3 response shapes and UI/CLI concerns.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping


@dataclass(frozen=True)
class Database:
    """
    Represents a database in the catalog.

    Attributes:
        name: Database name, unique within the catalog.
        description: Optional free-form description.
        location_uri: Optional default storage location for the database.
        catalog_id: Identifier of the catalog the database lives in.
    """

    name: str
    description: str | None = None
    location_uri: str | None = None
    catalog_id: str | None = None

    @property
    def display_name(self) -> str:
        return self.name

    def template_fields(self) -> dict[str, Any]:
        """Return the fields available to per-database command templates."""
        return {
            "name": self.name,
            "description": self.description or "",
            "location_uri": self.location_uri or "",
            "catalog_id": self.catalog_id or "",
        }


@dataclass(frozen=True)
class Table:
    """
    Represents a table belonging to exactly one database.

    Attributes:
        database_name: Name of the owning database.
        name: Table name, unique within its database.
        table_type: Optional table type (e.g. EXTERNAL_TABLE, VIRTUAL_VIEW).
        owner: Optional owner of the table.
        location: Optional storage location of the table data.
        partition_keys: Ordered partition key column names.
        catalog_id: Identifier of the catalog the table lives in.
    """

    database_name: str
    name: str
    table_type: str | None = None
    owner: str | None = None
    location: str | None = None
    partition_keys: tuple[str, ...] = ()
    catalog_id: str | None = None

    @property
    def display_name(self) -> str:
        return f"{self.database_name}.{self.name}"

    def template_fields(self) -> dict[str, Any]:
        """Return the fields available to per-table command templates."""
        return {
            "database_name": self.database_name,
            "name": self.name,
            "full_name": self.display_name,
            "table_type": self.table_type or "",
            "owner": self.owner or "",
            "location": self.location or "",
            "partition_keys": list(self.partition_keys),
            "catalog_id": self.catalog_id or "",
        }


@dataclass(frozen=True)
class Partition:
    """
    Represents a partition belonging to exactly one table.

    Attributes:
        database_name: Name of the database owning the table.
        table_name: Name of the owning table.
        values: Ordered partition key values.
        location: Optional storage location of the partition data.
        catalog_id: Identifier of the catalog the partition lives in.
    """

    database_name: str
    table_name: str
    values: tuple[str, ...]
    location: str | None = None
    catalog_id: str | None = None

    @property
    def display_name(self) -> str:
        return f"{self.database_name}.{self.table_name}/{'/'.join(self.values)}"

    def template_fields(self) -> dict[str, Any]:
        """Return the fields available to per-partition command templates."""
        return {
            "database_name": self.database_name,
            "table_name": self.table_name,
            "values": list(self.values),
            "location": self.location or "",
            "catalog_id": self.catalog_id or "",
        }


@dataclass(frozen=True)
class Column:
    """A column (or partition key) definition: name and Hive type string."""

    name: str
    type: str


@dataclass(frozen=True)
class StorageSpec:
    """Physical storage description for a table or partition."""

    columns: tuple[Column, ...] = ()
    location: str | None = None
    serialization_library: str | None = None


@dataclass(frozen=True)
class TableSpec:
    """Everything needed to create a table in a database."""

    name: str
    storage: StorageSpec
    partition_keys: tuple[Column, ...] = ()
    parameters: Mapping[str, str] = field(default_factory=dict)
