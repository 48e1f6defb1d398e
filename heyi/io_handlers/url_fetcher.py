"""
URL retrieval for heyi.

Two strategies turn a web page into plain text for the prompt context:

- FetchRetriever issues a single HTTP GET with httpx. Cheap, no scripts run.
- BrowserRetriever renders the page in a headless Chromium via Playwright,
  for pages that only produce their content after running JavaScript.

Both strip every tag and attribute from the resulting markup.
"""
import logging
import os
import re
from abc import ABC, abstractmethod
from typing import Any, Callable, Optional
from urllib.parse import urlsplit

import httpx
from bs4 import BeautifulSoup
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError
from playwright.async_api import async_playwright

from ..constants import (
    BROWSER_ARGS,
    CHROME_CRAWLER,
    FETCH_TIMEOUT_SECONDS,
    NETWORK_IDLE_TIMEOUT_MS,
)
from ..errors import SourceError
from ..utils import format_bytes


logger = logging.getLogger(__name__)


ALLOWED_SCHEMES = frozenset({"http", "https"})

# Elements whose text is never page content
NON_TEXT_TAGS = ("script", "style", "textarea", "option", "noscript")

_WINDOWS_PATH = re.compile(r'^[A-Za-z]:[\\/]')


def validate_url(url: str) -> None:
    """Reject anything that is not an absolute http(s) URL.

    Raises:
        SourceError: If the URL is malformed or uses another scheme
    """
    try:
        parts = urlsplit(url)
    except ValueError as e:
        raise SourceError(url, "url", f"Invalid URL format: {url}") from e

    if not parts.scheme:
        raise SourceError(url, "url", f"Invalid URL format: {url}")
    if parts.scheme.lower() not in ALLOWED_SCHEMES:
        raise SourceError(
            url, "url",
            f"Invalid protocol '{parts.scheme}:'. Only http and https are supported.",
        )
    if not parts.netloc:
        raise SourceError(url, "url", f"Invalid URL format: {url}")


def html_to_text(html: str) -> str:
    """Strip all markup from an HTML document, keeping only its text.

    Tags, attributes, comments and the contents of non-text elements
    (scripts, styles, form option lists...) are discarded.
    """
    soup = BeautifulSoup(html, "html.parser")
    for element in soup(NON_TEXT_TAGS):
        element.decompose()
    return soup.get_text().strip()


def is_browser_path(crawler: str) -> bool:
    """Check whether a crawler token looks like a filesystem path."""
    if crawler.startswith(("/", "./", "../", "~", ".\\", "..\\")):
        return True
    if _WINDOWS_PATH.match(crawler):
        return True
    return "/" in crawler or "\\" in crawler


class UrlRetriever(ABC):
    """Base class for URL retrieval strategies."""

    name: str = ""

    async def fetch(self, url: str) -> str:
        """
        Retrieve a URL as plain text.

        Args:
            url: http or https URL

        Returns:
            Sanitized page text

        Raises:
            SourceError: On an invalid URL or any retrieval failure
        """
        validate_url(url)
        html = await self._fetch_html(url)
        text = html_to_text(html)
        logger.debug(
            f"Fetched '{url}' with {self.name} "
            f"({format_bytes(len(html))} markup, {format_bytes(len(text))} text)"
        )
        return text

    @abstractmethod
    async def _fetch_html(self, url: str) -> str:
        """Return the raw markup for a validated URL."""
        pass


class FetchRetriever(UrlRetriever):
    """Plain HTTP GET retrieval."""

    name = "fetch"

    def __init__(
        self,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: float = FETCH_TIMEOUT_SECONDS,
    ) -> None:
        """
        Args:
            transport: Optional httpx transport (tests pass a MockTransport)
            timeout: Request timeout in seconds
        """
        self._transport = transport
        self._timeout = timeout

    async def _fetch_html(self, url: str) -> str:
        try:
            async with httpx.AsyncClient(
                transport=self._transport,
                follow_redirects=True,
                timeout=self._timeout,
            ) as client:
                response = await client.get(url)
        except httpx.HTTPError as e:
            raise SourceError(url, "url", str(e) or type(e).__name__) from e

        if not response.is_success:
            raise SourceError(
                url, "url", f"HTTP {response.status_code}: {response.reason_phrase}"
            )
        return response.text


class BrowserRetriever(UrlRetriever):
    """
    Headless Chromium retrieval.

    Navigation waits for the network to go idle. If that wait times out the
    page is read as far as it has loaded; any other navigation error fails
    the source. The browser is closed on every exit path.
    """

    name = "chrome"

    def __init__(
        self,
        executable_path: Optional[str] = None,
        timeout_ms: int = NETWORK_IDLE_TIMEOUT_MS,
        playwright_factory: Callable[[], Any] = async_playwright,
    ) -> None:
        """
        Args:
            executable_path: Browser binary to launch instead of the bundled one
            timeout_ms: Upper bound for the network-idle wait
            playwright_factory: Returns the Playwright async context manager
        """
        self._executable_path = executable_path
        self._timeout_ms = timeout_ms
        self._playwright_factory = playwright_factory

    @property
    def executable_path(self) -> Optional[str]:
        return self._executable_path

    async def _fetch_html(self, url: str) -> str:
        try:
            async with self._playwright_factory() as playwright:
                browser = await playwright.chromium.launch(
                    headless=True,
                    executable_path=self._executable_path,
                    args=list(BROWSER_ARGS),
                )
                try:
                    page = await browser.new_page()
                    try:
                        await page.goto(
                            url,
                            wait_until="networkidle",
                            timeout=self._timeout_ms,
                        )
                    except PlaywrightTimeoutError:
                        logger.warning(
                            f"Network did not settle within {self._timeout_ms} ms "
                            f"for '{url}', using partially loaded content"
                        )
                    return await page.content()
                finally:
                    await browser.close()
        except PlaywrightError as e:
            raise SourceError(url, "url", e.message or str(e)) from e


def select_retriever(crawler: str) -> UrlRetriever:
    """
    Pick the retrieval strategy for a crawler token.

    "chrome" selects the browser with its bundled binary, a path-shaped token
    selects the browser using that binary, anything else plain fetch.

    Args:
        crawler: Value of --crawler, the preset, or HEYI_CRAWLER

    Returns:
        A UrlRetriever instance
    """
    if crawler == CHROME_CRAWLER:
        return BrowserRetriever()
    if is_browser_path(crawler):
        return BrowserRetriever(executable_path=os.path.expanduser(crawler))
    return FetchRetriever()
