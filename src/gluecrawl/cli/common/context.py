"""Application context management for the CLI."""

from dataclasses import dataclass

from gluecrawl.cli.common.exits import die
from gluecrawl.core.adapters.glue import GlueCatalogAdapter
from gluecrawl.core.auth import AuthError, get_client
from gluecrawl.core.crawler import Crawler


@dataclass
class CrawlAppContext:
    """Application context holding the AWS settings and the crawler for this invocation."""

    region: str | None
    profile: str | None
    catalog_id: str | None
    crawler: Crawler


def build_crawl_context(
    region: str | None, profile: str | None, catalog_id: str | None
) -> CrawlAppContext:
    """Build and return the application context with a Glue-backed crawler.

    Args:
        region: AWS region of the catalog.
        profile: Optional AWS profile name to use for authentication.
        catalog_id: Optional catalog ID; the caller's account catalog when None.

    Returns:
        CrawlAppContext: Application context with a fresh (empty-cache) crawler.
    """
    try:
        client = get_client(region=region, profile=profile)
    except AuthError as exc:
        die(str(exc), code=1)
    adapter = GlueCatalogAdapter(client, catalog_id=catalog_id)
    return CrawlAppContext(
        region=region,
        profile=profile,
        catalog_id=catalog_id,
        crawler=Crawler(adapter),
    )
