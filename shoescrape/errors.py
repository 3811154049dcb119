# shoescrape/errors.py
from typing import Optional


class ScraperError(Exception):
    """Base class for every error raised by the scraper."""


class ConfigurationError(ScraperError):
    """A resource needed for the whole run is unavailable. Always fatal."""


class NetworkError(ScraperError):
    """A page could not be fetched (connection problem, timeout or non-2xx status)."""

    def __init__(self, url: str, message: str, status_code: Optional[int] = None):
        super().__init__(f"{message} ({url})")
        self.url = url
        self.status_code = status_code

    @property
    def retryable(self) -> bool:
        # 4xx answers will not change on a second try
        return self.status_code is None or self.status_code >= 500


class ExtractionFailure(ScraperError):
    """A detail page did not yield any usable record. Only that product is skipped."""

    reason = "extraction failed"

    def __init__(self, url: str, detail: str = ""):
        message = f"{self.reason}: {detail}" if detail else self.reason
        super().__init__(f"{message} ({url})")
        self.url = url
        self.detail = detail


class OutOfScopeProduct(ExtractionFailure):
    reason = "out of scope product"


class NoPriceFound(ExtractionFailure):
    reason = "no price found"


class NoVariantsFound(ExtractionFailure):
    reason = "no variants found"
