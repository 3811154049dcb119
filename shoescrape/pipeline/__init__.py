# shoescrape/pipeline/__init__.py

# This file makes the pipeline entry points directly available from the 'pipeline' package.
from .crawler import parse_listing_page, run_crawl
from .extractor import extract_product
from .payload import ParseFailure, find_embedded_payload
from .visited import VisitedSet
