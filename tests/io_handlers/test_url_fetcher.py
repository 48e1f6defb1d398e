"""
Tests for URL validation, sanitization and the retrieval strategies.
"""

import asyncio

import httpx
import pytest
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from heyi.errors import SourceError
from heyi.io_handlers.url_fetcher import (
    BrowserRetriever,
    FetchRetriever,
    html_to_text,
    is_browser_path,
    select_retriever,
    validate_url,
)


PAGE = """
<html>
  <head><title>Report</title><style>body { color: red; }</style></head>
  <body>
    <script>alert("x")</script>
    <h1 class="title">Quarterly <b>results</b></h1>
    <form><select><option>Hidden choice</option></select><textarea>draft</textarea></form>
    <p onclick="steal()">Revenue grew.</p>
  </body>
</html>
"""


class FakePage:
    def __init__(self, html, goto_error=None):
        self.html = html
        self.goto_error = goto_error
        self.visited = []

    async def goto(self, url, wait_until=None, timeout=None):
        self.visited.append((url, wait_until))
        if self.goto_error is not None:
            raise self.goto_error

    async def content(self):
        return self.html


class FakeBrowser:
    def __init__(self, page):
        self.page = page
        self.closed = False

    async def new_page(self):
        return self.page

    async def close(self):
        self.closed = True


class FakeChromium:
    def __init__(self, browser, launch_error=None):
        self.browser = browser
        self.launch_error = launch_error
        self.launch_kwargs = None

    async def launch(self, **kwargs):
        self.launch_kwargs = kwargs
        if self.launch_error is not None:
            raise self.launch_error
        return self.browser


class FakePlaywright:
    """Stands in for the object returned by async_playwright()."""

    def __init__(self, chromium):
        self.chromium = chromium

    def __call__(self):
        return self

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        return False


def make_browser(html=PAGE, goto_error=None, launch_error=None, executable_path=None):
    page = FakePage(html, goto_error)
    browser = FakeBrowser(page)
    chromium = FakeChromium(browser, launch_error)
    retriever = BrowserRetriever(
        executable_path=executable_path,
        playwright_factory=FakePlaywright(chromium),
    )
    return retriever, browser, chromium


class TestValidateUrl:
    """Scheme and format checks."""

    @pytest.mark.parametrize("url", ["http://example.com", "https://example.com/a?b=c"])
    def test_accepts_http(self, url):
        validate_url(url)

    def test_rejects_ftp(self):
        with pytest.raises(SourceError) as exc_info:
            validate_url("ftp://example.com/file")
        assert "Invalid protocol 'ftp:'" in str(exc_info.value)
        assert exc_info.value.source == "ftp://example.com/file"

    @pytest.mark.parametrize("url", ["example.com", "not a url", "https://"])
    def test_rejects_malformed(self, url):
        with pytest.raises(SourceError, match="Invalid URL format"):
            validate_url(url)


class TestHtmlToText:
    """Markup removal."""

    def test_strips_tags_and_non_text_elements(self):
        text = html_to_text(PAGE)
        assert "Quarterly results" in text
        assert "Revenue grew." in text
        for fragment in ("<", "alert", "color: red", "Hidden choice", "draft", "steal", "class="):
            assert fragment not in text

    def test_plain_text_passes_through(self):
        assert html_to_text("  just text  ") == "just text"


class TestFetchRetriever:
    """Plain HTTP retrieval through a mock transport."""

    def test_success(self):
        transport = httpx.MockTransport(lambda request: httpx.Response(200, text=PAGE))
        text = asyncio.run(FetchRetriever(transport=transport).fetch("https://example.com"))
        assert "Revenue grew." in text
        assert "<p" not in text

    def test_invalid_scheme_sends_no_request(self):
        requests = []

        def handler(request):
            requests.append(request)
            return httpx.Response(200, text="ok")

        retriever = FetchRetriever(transport=httpx.MockTransport(handler))
        with pytest.raises(SourceError, match="Invalid protocol"):
            asyncio.run(retriever.fetch("ftp://example.com"))
        assert requests == []

    def test_http_error_status(self):
        transport = httpx.MockTransport(lambda request: httpx.Response(404))
        with pytest.raises(SourceError) as exc_info:
            asyncio.run(FetchRetriever(transport=transport).fetch("https://example.com/gone"))
        assert str(exc_info.value) == "Failed to fetch URL 'https://example.com/gone': HTTP 404: Not Found"

    def test_connection_error(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(SourceError, match="connection refused"):
            asyncio.run(FetchRetriever(transport=httpx.MockTransport(handler)).fetch("https://example.com"))


class TestBrowserRetriever:
    """Headless browser retrieval with a fake Playwright."""

    def test_success_closes_browser(self):
        retriever, browser, chromium = make_browser()

        text = asyncio.run(retriever.fetch("https://example.com"))

        assert "Revenue grew." in text
        assert browser.closed
        assert browser.page.visited == [("https://example.com", "networkidle")]
        assert chromium.launch_kwargs["headless"] is True
        assert "--no-sandbox" in chromium.launch_kwargs["args"]

    def test_network_idle_timeout_uses_loaded_content(self):
        retriever, browser, _ = make_browser(goto_error=PlaywrightTimeoutError("Timeout 10000ms exceeded"))

        text = asyncio.run(retriever.fetch("https://example.com"))

        assert "Revenue grew." in text
        assert browser.closed

    def test_navigation_error_is_fatal_and_closes_browser(self):
        retriever, browser, _ = make_browser(goto_error=PlaywrightError("net::ERR_NAME_NOT_RESOLVED"))

        with pytest.raises(SourceError, match="ERR_NAME_NOT_RESOLVED"):
            asyncio.run(retriever.fetch("https://nowhere.invalid"))
        assert browser.closed

    def test_launch_failure(self):
        retriever, browser, chromium = make_browser(
            launch_error=PlaywrightError("Failed to launch: executable doesn't exist"),
            executable_path="/opt/missing/chrome",
        )

        with pytest.raises(SourceError, match="Failed to launch"):
            asyncio.run(retriever.fetch("https://example.com"))
        assert chromium.launch_kwargs["executable_path"] == "/opt/missing/chrome"

    def test_invalid_scheme_never_launches(self):
        retriever, _, chromium = make_browser()
        with pytest.raises(SourceError):
            asyncio.run(retriever.fetch("file:///etc/passwd"))
        assert chromium.launch_kwargs is None


class TestSelectRetriever:
    """Crawler token dispatch."""

    def test_fetch(self):
        assert isinstance(select_retriever("fetch"), FetchRetriever)

    def test_chrome(self):
        retriever = select_retriever("chrome")
        assert isinstance(retriever, BrowserRetriever)
        assert retriever.executable_path is None

    @pytest.mark.parametrize("token", [
        "/usr/bin/chromium",
        "./bin/chrome",
        "C:\\Program Files\\Chrome\\chrome.exe",
        "browsers/chrome",
    ])
    def test_paths_select_browser(self, token):
        retriever = select_retriever(token)
        assert isinstance(retriever, BrowserRetriever)
        assert retriever.executable_path == token

    def test_home_path_is_expanded(self, monkeypatch):
        monkeypatch.setenv("HOME", "/home/tester")
        retriever = select_retriever("~/chrome")
        assert retriever.executable_path == "/home/tester/chrome"

    def test_unknown_token_falls_back_to_fetch(self):
        assert isinstance(select_retriever("firefox"), FetchRetriever)

    @pytest.mark.parametrize("token,expected", [
        ("chrome", False),
        ("fetch", False),
        ("/bin/x", True),
        ("~/x", True),
        ("D:/x", True),
        ("a\\b", True),
    ])
    def test_is_browser_path(self, token, expected):
        assert is_browser_path(token) is expected
