from __future__ import annotations

from typing import Any, Sequence

from botocore.exceptions import BotoCoreError, ClientError

from gluecrawl.core.catalog import AlreadyExistsError, CatalogError, Page
from gluecrawl.core.models import (
    Column,
    Database,
    Partition,
    StorageSpec,
    Table,
    TableSpec,
)

_ALREADY_EXISTS_CODE = "AlreadyExistsException"


def _columns_payload(columns: Sequence[Column]) -> list[dict[str, str]]:
    return [{"Name": c.name, "Type": c.type} for c in columns]


def _storage_payload(storage: StorageSpec) -> dict[str, Any]:
    payload: dict[str, Any] = {"Columns": _columns_payload(storage.columns)}
    if storage.location:
        payload["Location"] = storage.location
    if storage.serialization_library:
        payload["SerdeInfo"] = {"SerializationLibrary": storage.serialization_library}
    return payload


class GlueCatalogAdapter:
    """Adapter around the boto3 Glue Data Catalog APIs (databases/tables/partitions)."""

    def __init__(self, client: Any, catalog_id: str | None = None) -> None:
        self.client = client
        self.catalog_id = catalog_id or None

    def _call(self, operation: str, **kwargs: Any) -> dict[str, Any]:
        """Invoke a Glue operation and translate botocore errors into CatalogError."""
        if self.catalog_id:
            kwargs["CatalogId"] = self.catalog_id
        try:
            return getattr(self.client, operation)(**kwargs)
        except ClientError as exc:
            error = exc.response.get("Error", {})
            code = error.get("Code")
            message = error.get("Message") or str(exc)
            if code == _ALREADY_EXISTS_CODE:
                raise AlreadyExistsError(
                    f"{operation}: {message}", operation=operation, code=code
                ) from exc
            raise CatalogError(
                f"{operation} failed ({code}): {message}", operation=operation, code=code
            ) from exc
        except BotoCoreError as exc:
            raise CatalogError(f"{operation} failed: {exc}", operation=operation) from exc

    def list_databases(self, token: str | None = None) -> Page[Database]:
        """Return one page of databases in the catalog."""
        kwargs: dict[str, Any] = {}
        if token:
            kwargs["NextToken"] = token
        resp = self._call("get_databases", **kwargs)
        out: list[Database] = []
        for d in resp.get("DatabaseList", []):
            name = d.get("Name")
            if not name:
                continue
            out.append(
                Database(
                    name=name,
                    description=d.get("Description"),
                    location_uri=d.get("LocationUri"),
                    catalog_id=d.get("CatalogId"),
                )
            )
        return Page(items=out, next_token=resp.get("NextToken") or None)

    def list_tables(self, database_name: str, token: str | None = None) -> Page[Table]:
        """Return one page of tables in a database."""
        kwargs: dict[str, Any] = {"DatabaseName": database_name}
        if token:
            kwargs["NextToken"] = token
        resp = self._call("get_tables", **kwargs)
        out: list[Table] = []
        for t in resp.get("TableList", []):
            name = t.get("Name")
            if not name:
                continue
            out.append(
                Table(
                    # DatabaseName is absent on some older responses
                    database_name=t.get("DatabaseName") or database_name,
                    name=name,
                    table_type=t.get("TableType"),
                    owner=t.get("Owner"),
                    location=(t.get("StorageDescriptor") or {}).get("Location"),
                    partition_keys=tuple(
                        k["Name"] for k in t.get("PartitionKeys", []) if k.get("Name")
                    ),
                    catalog_id=t.get("CatalogId"),
                )
            )
        return Page(items=out, next_token=resp.get("NextToken") or None)

    def list_partitions(
        self, database_name: str, table_name: str, token: str | None = None
    ) -> Page[Partition]:
        """Return one page of partitions of a table."""
        kwargs: dict[str, Any] = {"DatabaseName": database_name, "TableName": table_name}
        if token:
            kwargs["NextToken"] = token
        resp = self._call("get_partitions", **kwargs)
        out = [
            Partition(
                database_name=p.get("DatabaseName") or database_name,
                table_name=p.get("TableName") or table_name,
                values=tuple(p.get("Values", [])),
                location=(p.get("StorageDescriptor") or {}).get("Location"),
                catalog_id=p.get("CatalogId"),
            )
            for p in resp.get("Partitions", [])
        ]
        return Page(items=out, next_token=resp.get("NextToken") or None)

    def create_database(self, name: str) -> None:
        """Create a database."""
        self._call("create_database", DatabaseInput={"Name": name})

    def create_table(self, database_name: str, spec: TableSpec) -> None:
        """Create a table in a database."""
        table_input: dict[str, Any] = {
            "Name": spec.name,
            "StorageDescriptor": _storage_payload(spec.storage),
            "PartitionKeys": _columns_payload(spec.partition_keys),
        }
        if spec.parameters:
            table_input["Parameters"] = dict(spec.parameters)
        self._call("create_table", DatabaseName=database_name, TableInput=table_input)

    def create_partition(
        self,
        database_name: str,
        table_name: str,
        values: Sequence[str],
        storage: StorageSpec,
    ) -> None:
        """Create a partition of a table."""
        self._call(
            "create_partition",
            DatabaseName=database_name,
            TableName=table_name,
            PartitionInput={
                "Values": list(values),
                "StorageDescriptor": _storage_payload(storage),
            },
        )
