# shoescrape/main.py
import asyncio
import logging
from contextlib import AsyncExitStack
from datetime import datetime
from pathlib import Path
from typing import List, Optional

from rich.progress import Progress, SpinnerColumn, TextColumn

from . import config
from .delegates import DownloaderDelegate, FileManagerDelegate
from .models import ExtractionRuleSet
from .pipeline.crawler import FetchStrategy, run_crawl
from .retailers import get_rule_set

logger = logging.getLogger(__name__)


def default_output_filename(rules: ExtractionRuleSet, now: Optional[datetime] = None) -> str:
    """e.g. eastbay_com_2018_06_30_14_05_59.csv"""
    now = now or datetime.now()
    return f"{rules.file_name_prefix}{now.strftime(config.FILENAME_TIMESTAMP_FORMAT)}.csv"


async def scrape_keyword(keyword: str, downloader: FetchStrategy, rules: ExtractionRuleSet,
                         sink: FileManagerDelegate, progress: Optional[Progress] = None,
                         max_concurrency: int = config.MAX_CONCURRENT_DETAILS,
                         max_pages: int = config.MAX_LISTING_PAGES) -> int:
    """Runs one keyword's crawl into the sink. Returns the number of rows written."""
    task_id = progress.add_task(f"[bold blue]{keyword}[/bold blue]", total=None) if progress else None

    def on_product(url: str, record_count: int):
        if progress is not None:
            progress.advance(task_id)
        if record_count:
            logger.debug("Extracted %d rows from %s", record_count, url)

    rows = 0
    async for record in run_crawl(keyword, downloader, rules, max_concurrency=max_concurrency,
                                  max_pages=max_pages, on_product=on_product):
        sink.append(record)
        rows += 1
    return rows


async def main(
    keywords: List[str],
    output_path: Path,
    retailer: str = config.DEFAULT_RETAILER,
    proxies: Optional[List[str]] = None,
    max_concurrency: int = config.MAX_CONCURRENT_DETAILS,
    max_pages: int = config.MAX_LISTING_PAGES,
    timeout: Optional[float] = None,
    downloader: Optional[FetchStrategy] = None,
    show_progress: bool = True,
) -> int:
    """
    The main orchestrator: crawls every keyword, one after another, into a single CSV file.
    Raises ConfigurationError if the retailer is unknown or the output file cannot be created.
    Returns the total number of rows written.
    """
    rules = get_rule_set(retailer)

    with FileManagerDelegate(output_path) as sink:
        async with AsyncExitStack() as stack:
            if downloader is None:
                downloader = await stack.enter_async_context(DownloaderDelegate(proxies=proxies))

            with Progress(SpinnerColumn(), TextColumn("{task.description}"),
                          TextColumn("{task.completed} products"), disable=not show_progress) as progress:
                for keyword in keywords:
                    keyword = keyword.strip()
                    if not keyword:
                        continue
                    logger.info("Scraping %r on %s", keyword, rules.retailer_name)
                    crawl = scrape_keyword(keyword, downloader, rules, sink, progress,
                                           max_concurrency=max_concurrency, max_pages=max_pages)
                    before = sink.rows_written
                    try:
                        await asyncio.wait_for(crawl, timeout)
                    except asyncio.TimeoutError:
                        logger.warning("Timed out after %ss on %r; keeping the rows written so far.", timeout, keyword)
                    logger.info("Done with %r: %d rows", keyword, sink.rows_written - before)

        return sink.rows_written
