# shoescrape/config.py

from pathlib import Path

# --- Core Settings ---
# The rule set used when no --retailer flag is given. See shoescrape/retailers for the registered names.
DEFAULT_RETAILER = "eastbay"

# --- File Path Settings ---
# The debug log is written next to wherever the scraper is launched from.
LOG_FILE_PATH = Path("scraper.log")

# --- Browser/Network Settings ---
# A desktop Chrome user agent.
USER_AGENT = "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/67.0.3396.79 Safari/537.36"
# Sent with every request, on top of the User-Agent.
DEFAULT_HEADERS = {
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,image/apng,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.9,ru;q=0.8",
}
# The maximum time (in seconds) to wait for a single page before giving up.
REQUEST_TIMEOUT = 30.0

# --- Crawl Settings ---
# How many detail pages of one listing page may be fetched at the same time.
# Keep this small: retailers throttle or block aggressive clients.
MAX_CONCURRENT_DETAILS = 4
# Hard stop for pagination, in case a site keeps handing out "next" links.
MAX_LISTING_PAGES = 50

# --- Retry Settings ---
# Transient network errors (timeouts, connection resets, 5xx) are retried this many times.
FETCH_MAX_RETRIES = 2
FETCH_INITIAL_BACKOFF = 1.0
FETCH_MAX_BACKOFF = 10.0
FETCH_BACKOFF_FACTOR = 2.0

# --- Output Settings ---
# Column order of the CSV file. Every row written by the sink follows this order.
CSV_HEADER = [
    "Keyword",
    "Brand",
    "Shoe",
    "Price",
    "URL",
    "Image URL",
    "Size",
    "Width",
    "Color",
    "Gender",
    "Retailer",
]
# Suffix appended to the retailer prefix to build the default output file name.
FILENAME_TIMESTAMP_FORMAT = "_%Y_%m_%d_%H_%M_%S"

# --- Extraction Settings ---
# Product titles containing any of these markers are children's shoes and are skipped.
JUVENILE_MARKERS = ("kids'", "boys'", "girls'")
