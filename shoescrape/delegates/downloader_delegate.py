# shoescrape/delegates/downloader_delegate.py
import itertools
import logging
from typing import Dict, List, Optional

import httpx

from .. import config
from ..errors import NetworkError
from ..utils.retry import async_retry
from .html_document import HtmlDocument

logger = logging.getLogger(__name__)


def parse_proxy_list(proxies: Optional[str]) -> List[str]:
    """Splits a comma separated proxy list, dropping blanks."""
    if not proxies:
        return []
    return [p.strip() for p in proxies.split(",") if p.strip()]


class DownloaderDelegate:
    """
    Fetches pages over HTTP and hands them back as HtmlDocuments.
    With a proxy list, requests rotate round-robin over one client per proxy.
    """
    def __init__(
        self,
        user_agent: str = config.USER_AGENT,
        proxies: Optional[List[str]] = None,
        timeout: float = config.REQUEST_TIMEOUT,
        headers: Optional[Dict[str, str]] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.user_agent = user_agent
        self.proxies = list(proxies or [])
        self.timeout = timeout
        self.headers = {**config.DEFAULT_HEADERS, **(headers or {}), "User-Agent": user_agent}
        self._transport = transport
        self._clients: List[httpx.AsyncClient] = []
        self._rotation = None

    async def __aenter__(self):
        # httpx.AsyncClient instances are created here so they are closed by the async with
        if self.proxies:
            self._clients = [self._new_client(proxy) for proxy in self.proxies]
            logger.debug("DownloaderDelegate rotating over %d proxies.", len(self.proxies))
        else:
            self._clients = [self._new_client(None)]
        self._rotation = itertools.cycle(self._clients)
        logger.debug("DownloaderDelegate httpx.AsyncClient initialized.")
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        for client in self._clients:
            await client.aclose()
        self._clients = []
        self._rotation = None
        logger.debug("DownloaderDelegate httpx.AsyncClient closed.")

    def _new_client(self, proxy: Optional[str]) -> httpx.AsyncClient:
        kwargs = {
            "headers": self.headers,
            "follow_redirects": True,
            "timeout": self.timeout,
        }
        if proxy:
            kwargs["proxy"] = proxy
        if self._transport is not None:
            kwargs["transport"] = self._transport
        return httpx.AsyncClient(**kwargs)

    @async_retry(
        max_retries=config.FETCH_MAX_RETRIES,
        initial_backoff=config.FETCH_INITIAL_BACKOFF,
        max_backoff=config.FETCH_MAX_BACKOFF,
        backoff_factor=config.FETCH_BACKOFF_FACTOR,
    )
    async def fetch_document(self, url: str) -> HtmlDocument:
        """Downloads `url` and parses it. Raises NetworkError on any transport or HTTP failure."""
        if self._rotation is None:
            raise RuntimeError("DownloaderDelegate must be used as an async context manager.")

        client = next(self._rotation)
        try:
            logger.debug("Fetching %s", url)
            response = await client.get(url)
            response.raise_for_status()  # Raise an exception for 4xx/5xx responses
        except httpx.HTTPStatusError as e:
            raise NetworkError(url, f"HTTP {e.response.status_code}", status_code=e.response.status_code) from e
        except httpx.RequestError as e:
            raise NetworkError(url, f"network error: {e!r}") from e

        logger.debug("Successfully downloaded %s (%d bytes)", response.url, len(response.content))
        return HtmlDocument(str(response.url), response.text)
