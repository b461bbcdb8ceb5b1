"""Content fetcher: download a product page and reduce it to hint-prefixed text."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass

import httpx
from bs4 import BeautifulSoup, Comment

from product_enricher.config import DEFAULT_MAX_CONTENT_CHARS

logger = logging.getLogger(__name__)

TRUNCATION_MARKER = "...[truncated]"
MAX_HINTS = 5

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/120.0.0.0 Safari/537.36"
)
DEFAULT_HEADERS = {
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.9",
}

_PRICE_PATTERN = re.compile(r"\$\d+\.?\d{0,2}")
_SIZE_PATTERN = re.compile(
    r"\d+\s*(?:ml|oz|g|fl\s*oz|count|capsules?|tablets?|softgels?)\b", re.IGNORECASE
)

_DROP_TAGS = ["script", "style", "noscript"]
_BLOCK_SUFFIXES = {
    "p": "\n\n",
    "div": "\n",
    "li": "\n",
    "h1": "\n\n",
    "h2": "\n\n",
    "h3": "\n\n",
    "h4": "\n\n",
    "h5": "\n\n",
    "h6": "\n\n",
    "tr": "\n",
    "td": " | ",
}
_INLINE_SPACE = re.compile(r"[ \t\r\f\v\xa0]+")


@dataclass(frozen=True)
class FetchResult:
    success: bool
    content: str | None = None
    error: str | None = None
    status_code: int | None = None


def html_to_text(html: str) -> str:
    """Strip markup from `html`, keeping block boundaries as line breaks."""
    soup = BeautifulSoup(html, "html.parser")
    for tag in soup.find_all(_DROP_TAGS):
        tag.decompose()
    for comment in soup.find_all(string=lambda text: isinstance(text, Comment)):
        comment.extract()
    for tag in soup.find_all("br"):
        tag.replace_with("\n")
    for tag in soup.find_all(list(_BLOCK_SUFFIXES)):
        tag.append(_BLOCK_SUFFIXES[tag.name])

    text = soup.get_text()
    lines = [_INLINE_SPACE.sub(" ", line).strip() for line in text.split("\n")]
    text = "\n".join(lines)
    return re.sub(r"\n{3,}", "\n\n", text).strip()


def extract_page_hints(html: str) -> str:
    """Return explicit price/size hint lines scanned from raw `html`."""
    hints = ""
    prices = _unique(match.group(0) for match in _PRICE_PATTERN.finditer(html))
    sizes = _unique(match.group(0) for match in _SIZE_PATTERN.finditer(html))
    if prices:
        hints += f"\n[PRICES FOUND ON PAGE: {', '.join(prices[:MAX_HINTS])}]\n"
    if sizes:
        hints += f"[SIZES FOUND ON PAGE: {', '.join(sizes[:MAX_HINTS])}]\n"
    return hints


def build_page_content(html: str, max_chars: int = DEFAULT_MAX_CONTENT_CHARS) -> str:
    text = extract_page_hints(html) + html_to_text(html)
    if len(text) > max_chars:
        text = text[:max_chars] + TRUNCATION_MARKER
    return text


def _unique(values) -> list[str]:
    seen: dict[str, None] = {}
    for value in values:
        seen.setdefault(value, None)
    return list(seen)


class ContentFetcher:
    """Single-request page fetcher with a browser user agent."""

    def __init__(
        self,
        timeout: float = 30.0,
        max_chars: int = DEFAULT_MAX_CONTENT_CHARS,
        user_agent: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.timeout = timeout
        self.max_chars = max_chars
        self.user_agent = user_agent or DEFAULT_USER_AGENT
        self.transport = transport

    async def fetch(self, url: str) -> FetchResult:
        """Fetch `url` and return its reduced text.

        HTTP and network failures are returned as `FetchResult(success=False)`,
        never raised.
        """
        headers = {**DEFAULT_HEADERS, "User-Agent": self.user_agent}
        try:
            async with httpx.AsyncClient(
                timeout=httpx.Timeout(self.timeout),
                headers=headers,
                follow_redirects=True,
                transport=self.transport,
            ) as client:
                response = await client.get(url)
        except httpx.HTTPError as exc:
            logger.warning("fetch failed for %s: %s", url, exc)
            return FetchResult(success=False, error=str(exc) or type(exc).__name__)

        if not response.is_success:
            logger.warning("fetch for %s returned HTTP %s", url, response.status_code)
            return FetchResult(
                success=False,
                error=f"HTTP {response.status_code}",
                status_code=response.status_code,
            )

        content = build_page_content(response.text, self.max_chars)
        logger.info("fetched %s (%d chars of content)", url, len(content))
        return FetchResult(success=True, content=content, status_code=response.status_code)
