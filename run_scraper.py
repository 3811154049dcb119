# run_scraper.py
import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import List, Optional

# Import RichHandler here for centralized logging
from rich.logging import RichHandler
from rich.console import Console

from shoescrape import config
from shoescrape.delegates import parse_proxy_list
from shoescrape.errors import ConfigurationError
from shoescrape.main import default_output_filename, main as run_pipeline
from shoescrape.retailers import RULE_SETS, get_rule_set

console = Console(stderr=True)


def configure_logging(debug: bool = False, log_file_path: Path = config.LOG_FILE_PATH):
    """Everything goes to the log file; the console shows INFO (or DEBUG with --debug)."""
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)

    formatter = logging.Formatter(
        fmt="%(asctime)s - %(levelname)-8s - %(name)-25s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    )

    file_handler = logging.FileHandler(log_file_path)
    file_handler.setLevel(logging.DEBUG)  # Log all debug messages to file
    file_handler.setFormatter(formatter)
    root_logger.addHandler(file_handler)

    rich_handler = RichHandler(
        level=logging.DEBUG if debug else logging.INFO,
        console=console,
        show_time=True,
        show_level=True,
        show_path=False,
    )
    root_logger.addHandler(rich_handler)

    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Scrape shoe listings from a retailer into a CSV file, one row per size.",
        usage="%(prog)s [options] keyword [keyword ...]",
        epilog='  keyword: list of search terms. E.g.: "Nike Pegasus"',
        formatter_class=argparse.RawTextHelpFormatter
    )
    parser.add_argument('keywords', nargs='*', help="Search terms; each one is crawled separately.")
    parser.add_argument(
        '--retailer',
        default=config.DEFAULT_RETAILER,
        choices=sorted(RULE_SETS),
        help="Which retailer to scrape (default: %(default)s)."
    )
    parser.add_argument(
        '--filename',
        type=str,
        default=None,
        help="Output file name (default: <retailer prefix>_YYYY_MM_DD_HH_MM_SS.csv)."
    )
    parser.add_argument('--proxies', type=str, default="", help="Comma separated list of proxies (optional).")
    parser.add_argument(
        '--concurrency',
        type=int,
        default=config.MAX_CONCURRENT_DETAILS,
        help="Detail pages fetched at the same time (default: %(default)s)."
    )
    parser.add_argument(
        '--max-pages',
        type=int,
        default=config.MAX_LISTING_PAGES,
        help="Stop paginating after this many listing pages (default: %(default)s)."
    )
    parser.add_argument('--timeout', type=float, default=None, help="Give up on a keyword after this many seconds.")
    parser.add_argument('--list-retailers', action='store_true', help="Print the supported retailers and exit.")
    parser.add_argument('--debug', action='store_true', help="Enable debug output.")
    return parser


def run(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.list_retailers:
        for name in sorted(RULE_SETS):
            console.print(f"{name}\t{RULE_SETS[name].retailer_name}")
        return 0

    if not args.keywords:
        parser.print_help(sys.stderr)
        return 1

    configure_logging(args.debug)

    try:
        rules = get_rule_set(args.retailer)
        output_path = Path(args.filename or default_output_filename(rules))

        logging.info("=" * 60)
        logging.info("Scraping %s for %d keyword(s) into %s", rules.retailer_name, len(args.keywords), output_path)
        logging.info("=" * 60)

        rows = asyncio.run(run_pipeline(
            keywords=args.keywords,
            output_path=output_path,
            retailer=args.retailer,
            proxies=parse_proxy_list(args.proxies),
            max_concurrency=args.concurrency,
            max_pages=args.max_pages,
            timeout=args.timeout,
        ))
    except ConfigurationError as e:
        logging.critical("%s", e)
        return 2
    except KeyboardInterrupt:
        logging.warning("Scraper interrupted by user; rows written so far are kept.")
        return 130

    logging.info("Scraping finished: %d rows.", rows)
    return 0


def cli():
    sys.exit(run())


if __name__ == "__main__":
    cli()
