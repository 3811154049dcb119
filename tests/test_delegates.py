"""
Tests for the delegates: HTML document access, the HTTP downloader and the CSV row sink.
"""

import csv

import httpx
import pytest

from shoescrape import config
from shoescrape.delegates import DownloaderDelegate, FileManagerDelegate, HtmlDocument, parse_proxy_list
from shoescrape.errors import ConfigurationError, NetworkError
from shoescrape.models import ProductVariantRecord
from shoescrape.utils.retry import async_retry


def record(size="9.0", price="$99.99"):
    return ProductVariantRecord(
        keyword="air max", brand="Nike", name="air max 270", price=price,
        url="https://www.eastbay.com/product/model:M1/", image_url="https://images.eastbay.com/M1",
        size=size, width="D - Medium", color="Black, White", gender="Woman", retailer="Eastbay.com",
    )


class TestHtmlDocument:
    """Selector based text and attribute access."""

    HTML = """<html><head><meta name="title" content=" Nike Air Max "></head><body>
    <div class="price"> $10 </div><div class="price">$12</div>
    <ul><li><a href="/a">A</a><a href="/b">B</a></li></ul>
    <div id="wrap"><script>var x = {"a": "<b>"};</script></div>
    </body></html>"""

    def test_text_concatenates_matches(self):
        assert HtmlDocument("u", self.HTML).text(".price") == "$10 $12"

    def test_missing_selector_is_empty(self):
        document = HtmlDocument("u", self.HTML)

        assert document.text(".nothing") == ""
        assert document.attr("href", ".nothing") == ""

    def test_attr_of_first_match(self):
        document = HtmlDocument("u", self.HTML)

        assert document.attr("content", 'meta[name="title"]') == "Nike Air Max"
        assert document.attr("href", "li a:nth-of-type(1)") == "/a"

    def test_script_text(self):
        assert HtmlDocument("u", self.HTML).script_text("#wrap script") == 'var x = {"a": "<b>"};'

    def test_script_text_leaves_out_comments(self):
        html = '<div id="pixel"><!-- tracking --><script>var b = 1;</script></div>'

        assert HtmlDocument("u", html).script_text("#pixel") == "var b = 1;"

    def test_select_returns_fragments(self):
        items = HtmlDocument("u", self.HTML).select("li a")

        assert [item.attr("href") for item in items] == ["/a", "/b"]
        assert items[0].url == "u"


class TestDownloaderDelegate:
    """httpx based fetch client; errors become NetworkError."""

    @pytest.mark.asyncio
    async def test_fetch_document(self):
        seen_headers = {}

        def handler(request):
            seen_headers.update(request.headers)
            return httpx.Response(200, text="<html><h1>Ghost 11</h1></html>")

        async with DownloaderDelegate(transport=httpx.MockTransport(handler)) as downloader:
            document = await downloader.fetch_document("https://shop.example.com/ghost")

        assert document.url == "https://shop.example.com/ghost"
        assert document.text("h1") == "Ghost 11"
        assert seen_headers["user-agent"] == config.USER_AGENT
        assert seen_headers["accept-language"] == config.DEFAULT_HEADERS["Accept-Language"]

    @pytest.mark.asyncio
    async def test_redirects_are_followed(self):
        def handler(request):
            if request.url.path == "/old":
                return httpx.Response(301, headers={"Location": "https://shop.example.com/new"})
            return httpx.Response(200, text="<p>moved</p>")

        async with DownloaderDelegate(transport=httpx.MockTransport(handler)) as downloader:
            document = await downloader.fetch_document("https://shop.example.com/old")

        assert document.url == "https://shop.example.com/new"

    @pytest.mark.asyncio
    async def test_client_error_is_not_retried(self):
        calls = []

        def handler(request):
            calls.append(request.url)
            return httpx.Response(404, text="gone")

        async with DownloaderDelegate(transport=httpx.MockTransport(handler)) as downloader:
            with pytest.raises(NetworkError) as excinfo:
                await downloader.fetch_document("https://shop.example.com/missing")

        assert excinfo.value.status_code == 404
        assert len(calls) == 1

    @pytest.mark.asyncio
    async def test_must_be_entered(self):
        with pytest.raises(RuntimeError):
            await DownloaderDelegate().fetch_document("https://shop.example.com/")

    @pytest.mark.asyncio
    async def test_one_client_per_proxy(self):
        async with DownloaderDelegate(proxies=["http://10.0.0.1:8080", "http://10.0.0.2:8080"]) as downloader:
            assert len(downloader._clients) == 2

    def test_parse_proxy_list(self):
        assert parse_proxy_list(" http://a:1, ,http://b:2 ") == ["http://a:1", "http://b:2"]
        assert parse_proxy_list("") == []
        assert parse_proxy_list(None) == []


class TestAsyncRetry:
    """Transient NetworkErrors are retried, client errors are not."""

    @pytest.mark.asyncio
    async def test_retries_until_success(self):
        attempts = []

        @async_retry(max_retries=2, initial_backoff=0, jitter=False)
        async def flaky():
            attempts.append(1)
            if len(attempts) < 3:
                raise NetworkError("u", "HTTP 503", status_code=503)
            return "ok"

        assert await flaky() == "ok"
        assert len(attempts) == 3

    @pytest.mark.asyncio
    async def test_gives_up_after_max_retries(self):
        attempts = []

        @async_retry(max_retries=1, initial_backoff=0, jitter=False)
        async def down():
            attempts.append(1)
            raise NetworkError("u", "network error")

        with pytest.raises(NetworkError):
            await down()
        assert len(attempts) == 2

    @pytest.mark.asyncio
    async def test_client_error_raised_at_once(self):
        attempts = []

        @async_retry(max_retries=3, initial_backoff=0, jitter=False)
        async def missing():
            attempts.append(1)
            raise NetworkError("u", "HTTP 404", status_code=404)

        with pytest.raises(NetworkError):
            await missing()
        assert len(attempts) == 1


class TestFileManagerDelegate:
    """The CSV row sink."""

    def test_header_then_rows(self, tmp_path):
        output = tmp_path / "out" / "shoes.csv"

        with FileManagerDelegate(output) as sink:
            sink.append(record("9.0"))
            sink.append(record("10.0"))

        with output.open(newline="", encoding="utf-8") as f:
            rows = list(csv.reader(f))
        assert rows[0] == config.CSV_HEADER
        assert rows[1] == [
            "air max", "Nike", "air max 270", "$99.99", "https://www.eastbay.com/product/model:M1/",
            "https://images.eastbay.com/M1", "9.0", "D - Medium", "Black, White", "Woman", "Eastbay.com",
        ]
        assert [row[6] for row in rows[1:]] == ["9.0", "10.0"]
        assert sink.rows_written == 2

    def test_rows_are_flushed_immediately(self, tmp_path):
        output = tmp_path / "shoes.csv"
        sink = FileManagerDelegate(output)
        sink.open()
        try:
            sink.append(record())
            assert len(output.read_text(encoding="utf-8").splitlines()) == 2
        finally:
            sink.close()

    def test_unwritable_output_is_a_configuration_error(self, tmp_path):
        with pytest.raises(ConfigurationError):
            FileManagerDelegate(tmp_path).open()

    def test_append_before_open(self, tmp_path):
        with pytest.raises(RuntimeError):
            FileManagerDelegate(tmp_path / "x.csv").append(record())
