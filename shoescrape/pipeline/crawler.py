# shoescrape/pipeline/crawler.py
import asyncio
import logging
from typing import AsyncIterator, Callable, List, Optional, Protocol
from urllib.parse import urldefrag, urljoin, urlparse, urlunparse

from .. import config
from ..delegates.html_document import HtmlDocument
from ..errors import ExtractionFailure, NetworkError, OutOfScopeProduct
from ..models import DetailPage, ExtractionRuleSet, ListingPage, ProductReference, ProductVariantRecord
from .extractor import extract_product
from .visited import VisitedSet

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[str, int], None]


class FetchStrategy(Protocol):
    async def fetch_document(self, url: str) -> HtmlDocument:
        ...


def normalize_url(url: str) -> str:
    """Dedup form of a URL: no fragment, lower-case scheme and host, no trailing slash."""
    url, _ = urldefrag(url)
    parts = urlparse(url)
    path = parts.path.rstrip("/") or "/"
    return urlunparse((parts.scheme.lower(), parts.netloc.lower(), path, parts.params, parts.query, ""))


def parse_listing_page(document: HtmlDocument, rules: ExtractionRuleSet) -> ListingPage:
    """Reads the product references and the next-page link of one search results page."""
    page = ListingPage(url=document.url)
    for item in document.select(rules.listing_item_selector):
        href = item.attr("href", rules.listing_link_selector)
        if not href:
            logger.debug("Listing item without a link on %s", document.url)
            continue
        url = urljoin(document.url, href)
        identifier = item.attr(rules.listing_id_attribute) if rules.listing_id_attribute else ""
        page.references.append(ProductReference(identifier=identifier or normalize_url(url), url=url))

    next_href = document.attr("href", rules.next_page_selector)
    if next_href:
        page.next_page_url = urljoin(document.url, next_href)
    return page


async def _process_detail(reference: ProductReference, keyword: str, downloader: FetchStrategy,
                          rules: ExtractionRuleSet, semaphore: asyncio.Semaphore) -> List[ProductVariantRecord]:
    async with semaphore:
        logger.debug("Visiting %s", reference.url)
        try:
            document = await downloader.fetch_document(reference.url)
        except NetworkError as e:
            logger.error("Something went wrong fetching detail page: %s", e)
            return []

    try:
        return extract_product(DetailPage(url=document.url, document=document), keyword, rules)
    except OutOfScopeProduct as e:
        logger.debug("Excluded: %s", e)
    except ExtractionFailure as e:
        logger.debug("Skipping product: %s", e)
    except Exception as e:
        logger.error("Unexpected error extracting %s: %s", reference.url, e, exc_info=True)
    return []


async def run_crawl(
    keyword: str,
    downloader: FetchStrategy,
    rules: ExtractionRuleSet,
    max_concurrency: int = config.MAX_CONCURRENT_DETAILS,
    max_pages: int = config.MAX_LISTING_PAGES,
    on_product: Optional[ProgressCallback] = None,
) -> AsyncIterator[ProductVariantRecord]:
    """
    Crawls the search results for one keyword and yields records as detail pages
    finish. All crawl state lives in this call; a second call starts from scratch.

    Listing pages are walked one after another. The detail pages of one listing
    page are fetched concurrently, at most `max_concurrency` at a time. When the
    consumer stops early (timeout, cancellation) in-flight detail fetches are
    cancelled.
    """
    visited = VisitedSet()
    seen_pages = set()
    semaphore = asyncio.Semaphore(max_concurrency)
    url: Optional[str] = rules.search_url(keyword)
    pages = 0

    while url and pages < max_pages:
        page_key = normalize_url(url)
        if page_key in seen_pages:
            logger.warning("Pagination loops back to %s, stopping.", url)
            break
        seen_pages.add(page_key)
        pages += 1

        try:
            document = await downloader.fetch_document(url)
        except NetworkError as e:
            logger.error("Something went wrong fetching listing page: %s", e)
            break
        logger.debug("Product list is opened: %s", document.url)

        listing = parse_listing_page(document, rules)
        fresh = []
        for reference in listing.references:
            if visited.mark_if_new(reference.identifier):
                fresh.append(reference)
            else:
                logger.debug("Already scheduled %s, skipping", reference.identifier)
        logger.info("Page %d for %r: %d products, %d new", pages, keyword, len(listing.references), len(fresh))

        tasks = [
            asyncio.ensure_future(_process_detail(reference, keyword, downloader, rules, semaphore))
            for reference in fresh
        ]
        try:
            for finished in asyncio.as_completed(tasks):
                records = await finished
                if on_product is not None:
                    on_product(records[0].url if records else "", len(records))
                for record in records:
                    yield record
        finally:
            for task in tasks:
                if not task.done():
                    task.cancel()

        url = listing.next_page_url

    if url and pages >= max_pages:
        logger.warning("Stopped %r after %d listing pages (limit reached).", keyword, pages)
