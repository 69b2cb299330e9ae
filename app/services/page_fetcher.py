"""
Single-page HTTP fetcher with bounded timeouts
"""
import logging
from typing import Optional

import httpx

logger = logging.getLogger(__name__)

USER_AGENT = "Mozilla/5.0 (compatible; LiveAvatarBot/1.0)"


class PageFetcher:
    """
    Fetches one URL and returns its body, or None on any failure.

    Network errors, timeouts and non-2xx responses all collapse to None so
    the caller can decide on a fallback.
    """

    def __init__(self, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.transport = transport
        self.headers = {'User-Agent': USER_AGENT}

    async def fetch(self, url: str, timeout: float = 5.0) -> Optional[str]:
        try:
            async with httpx.AsyncClient(
                headers=self.headers,
                timeout=timeout,
                follow_redirects=True,
                transport=self.transport
            ) as client:
                response = await client.get(url)

            if not response.is_success:
                logger.warning(f"⚠️  {url} returned HTTP {response.status_code}")
                return None

            return response.text

        except httpx.TimeoutException:
            logger.warning(f"⚠️  Timed out after {timeout}s fetching {url}")
            return None
        except Exception as e:
            logger.warning(f"⚠️  Failed to fetch {url}: {str(e)}")
            return None
