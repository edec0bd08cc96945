import pytest

from gluecrawl.core.catalog import AlreadyExistsError, CatalogError, Page
from gluecrawl.core.crawler import (
    TEST_DATABASE,
    TEST_PARTITION_VALUES,
    TEST_TABLE,
    Crawler,
    CrawlError,
)
from gluecrawl.core.models import Database, Partition, Table


class _StubCatalog:
    """In-memory catalog: pages keyed by (scope, token), every call recorded."""

    def __init__(self, pages=None, failures=None):
        self.pages = pages or {}
        self.failures = failures or {}
        self.calls: list[tuple] = []
        self.existing: set[tuple] = set()

    def _page(self, key):
        self.calls.append(key)
        if key in self.failures:
            raise self.failures[key]
        return self.pages.get(key, Page())

    def list_databases(self, token=None):
        return self._page(("databases", token))

    def list_tables(self, database_name, token=None):
        return self._page(("tables", database_name, token))

    def list_partitions(self, database_name, table_name, token=None):
        return self._page(("partitions", database_name, table_name, token))

    def _create(self, key):
        self.calls.append(("create",) + key)
        if key in self.failures:
            raise self.failures[key]
        if key in self.existing:
            raise AlreadyExistsError("AlreadyExistsException: exists", code="x")
        self.existing.add(key)

    def create_database(self, name):
        self._create(("database", name))

    def create_table(self, database_name, spec):
        self._create(("table", database_name, spec.name))

    def create_partition(self, database_name, table_name, values, storage):
        self._create(("partition", database_name, table_name, tuple(values)))


def _db(name):
    return Database(name=name)


def _tbl(db, name):
    return Table(database_name=db, name=name)


def _part(db, tbl, *values):
    return Partition(database_name=db, table_name=tbl, values=tuple(values))


def test_crawl_databases_follows_continuation_token():
    catalog = _StubCatalog(
        pages={
            ("databases", None): Page([_db("testdb")], next_token="tok1"),
            ("databases", "tok1"): Page([_db("testdb2")]),
        }
    )
    crawler = Crawler(catalog)
    visited: list[str] = []

    crawler.crawl_databases(lambda d: visited.append(d.name))

    assert visited == ["testdb", "testdb2"]
    assert [d.name for d in crawler.databases] == ["testdb", "testdb2"]
    assert catalog.calls == [("databases", None), ("databases", "tok1")]


def test_crawl_databases_is_cached_after_first_call():
    catalog = _StubCatalog(
        pages={("databases", None): Page([_db("a"), _db("b")])}
    )
    crawler = Crawler(catalog)
    first: list[str] = []
    second: list[str] = []

    crawler.crawl_databases(lambda d: first.append(d.name))
    crawler.crawl_databases(lambda d: second.append(d.name))

    assert first == second == ["a", "b"]
    assert catalog.calls == [("databases", None)]


def test_empty_level_is_cached_and_not_refetched():
    catalog = _StubCatalog()
    crawler = Crawler(catalog)

    crawler.crawl_databases(lambda d: None)
    crawler.crawl_databases(lambda d: None)

    assert crawler.databases == ()
    assert catalog.calls == [("databases", None)]


def test_caches_start_unpopulated():
    crawler = Crawler(_StubCatalog())

    assert crawler.databases is None
    assert crawler.tables is None
    assert crawler.partitions is None


def test_crawl_tables_keeps_parent_order():
    catalog = _StubCatalog(
        pages={
            ("databases", None): Page([_db("db1"), _db("db2")]),
            ("tables", "db1", None): Page([_tbl("db1", "t1")]),
            ("tables", "db2", None): Page([_tbl("db2", "t2")]),
        }
    )
    crawler = Crawler(catalog)
    visited: list[str] = []

    crawler.crawl_tables(lambda t: visited.append(t.name))

    assert visited == ["t1", "t2"]
    assert [t.name for t in crawler.tables] == ["t1", "t2"]


def test_crawl_tables_concatenates_pages_per_parent():
    catalog = _StubCatalog(
        pages={
            ("databases", None): Page([_db("db1"), _db("db2")]),
            ("tables", "db1", None): Page([_tbl("db1", "a1")], next_token="n1"),
            ("tables", "db1", "n1"): Page([_tbl("db1", "a2")]),
            ("tables", "db2", None): Page([_tbl("db2", "b1")], next_token="n2"),
            ("tables", "db2", "n2"): Page([_tbl("db2", "b2")]),
        }
    )
    crawler = Crawler(catalog)

    crawler.crawl_tables(lambda t: None)

    assert [t.display_name for t in crawler.tables] == [
        "db1.a1",
        "db1.a2",
        "db2.b1",
        "db2.b2",
    ]
    assert catalog.calls == [
        ("databases", None),
        ("tables", "db1", None),
        ("tables", "db1", "n1"),
        ("tables", "db2", None),
        ("tables", "db2", "n2"),
    ]


def test_crawl_tables_populates_databases_first():
    catalog = _StubCatalog(
        pages={
            ("databases", None): Page([_db("db1")], next_token="t"),
            ("databases", "t"): Page([_db("db2")]),
        }
    )
    crawler = Crawler(catalog)

    crawler.crawl_tables(lambda t: None)

    assert [d.name for d in crawler.databases] == ["db1", "db2"]
    assert crawler.tables == ()
    assert crawler.partitions is None


def test_crawl_tables_reuses_cached_databases():
    catalog = _StubCatalog(pages={("databases", None): Page([_db("db1")])})
    crawler = Crawler(catalog)

    crawler.crawl_databases(lambda d: None)
    crawler.crawl_tables(lambda t: None)

    assert catalog.calls.count(("databases", None)) == 1


def test_crawl_partitions_fetches_whole_hierarchy():
    catalog = _StubCatalog(
        pages={
            ("databases", None): Page([_db("db1")]),
            ("tables", "db1", None): Page([_tbl("db1", "t1"), _tbl("db1", "t2")]),
            ("partitions", "db1", "t1", None): Page(
                [_part("db1", "t1", "1")], next_token="p"
            ),
            ("partitions", "db1", "t1", "p"): Page([_part("db1", "t1", "2")]),
            ("partitions", "db1", "t2", None): Page([_part("db1", "t2", "3")]),
        }
    )
    crawler = Crawler(catalog)
    visited: list[tuple[str, ...]] = []

    crawler.crawl_partitions(lambda p: visited.append((p.table_name,) + p.values))
    crawler.crawl_partitions(lambda p: None)

    assert visited == [("t1", "1"), ("t1", "2"), ("t2", "3")]
    assert len(crawler.tables) == 2
    assert len(catalog.calls) == 5


def test_visitor_error_stops_iteration():
    catalog = _StubCatalog(
        pages={("databases", None): Page([_db("a"), _db("b"), _db("c")])}
    )
    crawler = Crawler(catalog)
    visited: list[str] = []

    def visit(d):
        visited.append(d.name)
        if d.name == "b":
            raise RuntimeError("boom")

    with pytest.raises(CrawlError, match="boom") as excinfo:
        crawler.crawl_databases(visit)

    assert visited == ["a", "b"]
    assert isinstance(excinfo.value.__cause__, RuntimeError)


def test_fetch_error_visits_nothing_and_leaves_level_unpopulated():
    catalog = _StubCatalog(
        pages={
            ("databases", None): Page([_db("db1"), _db("db2")]),
            ("tables", "db1", None): Page([_tbl("db1", "t1")]),
        },
        failures={("tables", "db2", None): CatalogError("throttled")},
    )
    crawler = Crawler(catalog)
    visited: list[str] = []

    with pytest.raises(CrawlError, match="tables for database 'db2'"):
        crawler.crawl_tables(lambda t: visited.append(t.name))

    assert visited == []
    assert crawler.tables is None
    assert [d.name for d in crawler.databases] == ["db1", "db2"]


def test_partition_fetch_error_leaves_level_unpopulated():
    catalog = _StubCatalog(
        pages={
            ("databases", None): Page([_db("db1")]),
            ("tables", "db1", None): Page([_tbl("db1", "t1"), _tbl("db1", "t2")]),
            ("partitions", "db1", "t1", None): Page([_part("db1", "t1", "1")]),
        },
        failures={("partitions", "db1", "t2", None): CatalogError("boom")},
    )
    crawler = Crawler(catalog)
    visited: list[Partition] = []

    with pytest.raises(
        CrawlError, match="while fetching partitions for table 'db1.t2'"
    ) as excinfo:
        crawler.crawl_partitions(visited.append)

    assert visited == []
    assert isinstance(excinfo.value.__cause__, CatalogError)
    assert crawler.partitions is None
    assert [t.name for t in crawler.tables] == ["t1", "t2"]


def test_partition_visitor_error_stops_iteration():
    catalog = _StubCatalog(
        pages={
            ("databases", None): Page([_db("db1")]),
            ("tables", "db1", None): Page([_tbl("db1", "t1")]),
            ("partitions", "db1", "t1", None): Page(
                [_part("db1", "t1", "1"), _part("db1", "t1", "2"), _part("db1", "t1", "3")]
            ),
        }
    )
    crawler = Crawler(catalog)
    visited: list[tuple[str, ...]] = []

    def visit(p):
        visited.append(p.values)
        if p.values == ("2",):
            raise ValueError("bad partition")

    with pytest.raises(CrawlError, match="partition 'db1.t1/2'"):
        crawler.crawl_partitions(visit)

    assert visited == [("1",), ("2",)]
    assert len(crawler.partitions) == 3


def test_cached_levels_cannot_be_modified():
    catalog = _StubCatalog(
        pages={
            ("databases", None): Page([_db("db1")]),
            ("tables", "db1", None): Page([_tbl("db1", "t1")]),
        }
    )
    crawler = Crawler(catalog)
    crawler.crawl_partitions(lambda p: None)

    for cached in (crawler.databases, crawler.tables, crawler.partitions):
        assert isinstance(cached, tuple)
        with pytest.raises(AttributeError):
            cached.append(_db("injected"))

    seen: list[str] = []
    crawler.crawl_databases(lambda d: seen.append(d.name))

    assert seen == ["db1"]


def test_fetch_error_on_continuation_page_is_wrapped():
    catalog = _StubCatalog(
        pages={("databases", None): Page([_db("db1")], next_token="tok")},
        failures={("databases", "tok"): CatalogError("expired token")},
    )
    crawler = Crawler(catalog)

    with pytest.raises(CrawlError, match="while fetching databases") as excinfo:
        crawler.crawl_databases(lambda d: None)

    assert isinstance(excinfo.value.__cause__, CatalogError)
    assert crawler.databases is None


def test_setup_test_catalog_is_idempotent():
    catalog = _StubCatalog()
    crawler = Crawler(catalog)

    crawler.setup_test_catalog()
    crawler.setup_test_catalog()

    assert catalog.existing == {
        ("database", TEST_DATABASE),
        ("table", TEST_DATABASE, TEST_TABLE),
        ("partition", TEST_DATABASE, TEST_TABLE, TEST_PARTITION_VALUES),
    }
    assert len(catalog.calls) == 6


def test_setup_test_catalog_propagates_other_errors():
    catalog = _StubCatalog(
        failures={("table", TEST_DATABASE, TEST_TABLE): CatalogError("access denied")}
    )
    crawler = Crawler(catalog)

    with pytest.raises(CrawlError, match="create table"):
        crawler.setup_test_catalog()

    assert not [c for c in catalog.calls if c[:2] == ("create", "partition")]
