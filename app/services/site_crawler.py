"""
Website crawler that gathers business context for the sales avatar

Fetches the homepage plus a few well-known secondary pages (about, products,
services...) and merges their text into one labelled content blob.
"""
import asyncio
import logging
import time
from typing import List, Optional, Sequence, Tuple
from urllib.parse import quote, urlparse

from app.config import CrawlerConfig
from app.models import CrawlResult, PageExtract
from app.services.page_fetcher import PageFetcher
from app.services.text_extractor import (
    extract_meta_description,
    extract_text_from_html,
    extract_text_from_markdown,
    extract_title,
    split_reader_output,
)

logger = logging.getLogger(__name__)

# Common paths to check for additional content, in priority order
SECONDARY_PATHS = [
    "/about",
    "/about-us",
    "/products",
    "/services",
    "/features",
    "/pricing",
    "/solutions",
]

# An extraction below this length falls through to the next strategy
MIN_EXTRACT_CHARS = 200
# Secondary pages must carry more than this to be included
MIN_SECONDARY_CHARS = 100


class ExtractionStrategy:
    """One way of turning a URL into text; returns None on failure"""

    name = "base"

    async def extract(self, url: str, timeout: float) -> Optional[PageExtract]:
        raise NotImplementedError


class ReaderStrategy(ExtractionStrategy):
    """Third-party reader service that renders the page and returns markdown"""

    name = "reader"

    def __init__(self, fetcher: PageFetcher, base_url: str, timeout: float = 10.0):
        self.fetcher = fetcher
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout

    def reader_url(self, url: str) -> str:
        return f"{self.base_url}/{quote(url, safe=':/?&=#%')}"

    async def extract(self, url: str, timeout: float) -> Optional[PageExtract]:
        raw = await self.fetcher.fetch(self.reader_url(url), timeout=self.timeout)
        if raw is None:
            return None

        title, _ = split_reader_output(raw)
        return PageExtract(
            text=extract_text_from_markdown(raw),
            title=title,
            source=self.name
        )


class HtmlStrategy(ExtractionStrategy):
    """Direct GET of the page, stripped to text with BeautifulSoup"""

    name = "html"

    def __init__(self, fetcher: PageFetcher):
        self.fetcher = fetcher

    async def extract(self, url: str, timeout: float) -> Optional[PageExtract]:
        html = await self.fetcher.fetch(url, timeout=timeout)
        if html is None:
            return None

        return PageExtract(
            text=extract_text_from_html(html),
            title=extract_title(html),
            description=extract_meta_description(html),
            source=self.name
        )


def page_label(path: str) -> str:
    return path.strip('/').replace('-', ' ')


def site_origin(url: str) -> str:
    parsed = urlparse(url)
    return f"{parsed.scheme}://{parsed.netloc}"


class WebsiteCrawler:
    """Homepage-first crawler with an ordered fallback chain of extractors"""

    def __init__(
        self,
        config: CrawlerConfig,
        fetcher: Optional[PageFetcher] = None,
        strategies: Optional[Sequence[ExtractionStrategy]] = None
    ):
        self.config = config
        self.fetcher = fetcher or PageFetcher()

        html_strategy = HtmlStrategy(self.fetcher)
        if strategies is None:
            strategies = [html_strategy]
            if config.reader_enabled:
                strategies.insert(
                    0,
                    ReaderStrategy(self.fetcher, config.reader_base_url, config.reader_timeout)
                )
        self.strategies: List[ExtractionStrategy] = list(strategies)
        # Reader quota is spent on the homepage only
        self.secondary_strategies: List[ExtractionStrategy] = [self.strategies[-1]]

    async def extract_page(
        self,
        url: str,
        timeout: float,
        strategies: Sequence[ExtractionStrategy]
    ) -> Optional[PageExtract]:
        """
        Try each strategy in order and return the first extract that meets
        MIN_EXTRACT_CHARS. When none does, the longest extract obtained is
        returned; None means every strategy failed outright.
        """
        best: Optional[PageExtract] = None

        for strategy in strategies:
            extract = await strategy.extract(url, timeout)
            if extract is None:
                logger.info(f"   ✗ {strategy.name}: no response for {url}")
                continue

            if len(extract.text) >= MIN_EXTRACT_CHARS:
                logger.info(f"   ✓ {strategy.name}: {len(extract.text)} chars from {url}")
                return extract

            logger.info(f"   ↓ {strategy.name}: only {len(extract.text)} chars from {url}, trying next")
            if best is None or len(extract.text) > len(best.text):
                best = extract

        return best

    async def _crawl_secondary(self, origin: str, path: str) -> str:
        extract = await self.extract_page(
            f"{origin}{path}",
            self.config.secondary_page_timeout,
            self.secondary_strategies
        )
        if extract and len(extract.text) > MIN_SECONDARY_CHARS:
            return f"{page_label(path)} page:\n{extract.text}\n\n"
        return ""

    async def _homepage_metadata(self, url: str, homepage: PageExtract) -> Tuple[str, str]:
        """
        Title and description come from the homepage HTML. A reader extract
        carries no meta tags, so the raw page is fetched for them.
        """
        if homepage.source == HtmlStrategy.name:
            return homepage.title, homepage.description

        html = await self.fetcher.fetch(url, timeout=self.config.homepage_timeout)
        if html is None:
            return homepage.title, homepage.description

        return extract_title(html) or homepage.title, extract_meta_description(html)

    async def crawl(self, url: str) -> CrawlResult:
        """
        Crawl the homepage, then a bounded set of secondary pages concurrently.

        Returns an empty CrawlResult when the homepage cannot be fetched.
        """
        start_time = time.time()
        logger.info(f"🌐 Fetching content from {url}...")

        try:
            origin = site_origin(url)
        except ValueError as e:
            logger.warning(f"⚠️  Invalid URL {url}: {str(e)}")
            return CrawlResult()

        homepage = await self.extract_page(url, self.config.homepage_timeout, self.strategies)
        if homepage is None:
            logger.error(f"❌ Homepage unreachable: {url}")
            return CrawlResult()

        content = f"Homepage:\n{homepage.text}\n\n"
        title, description = await self._homepage_metadata(url, homepage)

        paths = SECONDARY_PATHS[:self.config.max_secondary_pages]
        sections = await asyncio.gather(
            *(self._crawl_secondary(origin, path) for path in paths)
        )
        accepted = [section for section in sections if section]
        content += "".join(accepted)

        elapsed = time.time() - start_time
        logger.info(f"✅ Crawl finished: {1 + len(accepted)} pages, {len(content):,} chars, {elapsed:.1f}s")

        return CrawlResult(
            content=content,
            title=title,
            description=description
        )
