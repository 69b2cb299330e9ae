"""
Website-to-context pipeline: crawl, name, reuse-or-create
"""
import logging
import time
from typing import Callable, Optional

from app.config import PipelineConfig
from app.models import GenerateContextResponse
from app.services.business_identity import extract_business_name, normalize_url
from app.services.liveavatar_service import LiveAvatarService
from app.services.prompt_composer import context_name, generate_sales_prompt, opening_text
from app.services.site_crawler import WebsiteCrawler

logger = logging.getLogger(__name__)


class WebsiteUnreachableError(Exception):
    """No content could be fetched from the submitted website"""

    def __init__(self, url: str):
        super().__init__(
            f'Could not access the website "{url}". '
            f'Please double-check the URL and make sure the website is accessible.'
        )
        self.url = url


class ContextPipeline:
    """
    Turns a business website into a LiveAvatar context id.

    With reuse enabled an existing "<Business> Sales Rep" context is returned
    instead of creating a new one, which saves remote credits at the cost of
    serving the content captured when that context was first created.
    """

    def __init__(
        self,
        crawler: WebsiteCrawler,
        liveavatar: LiveAvatarService,
        config: PipelineConfig,
        clock: Callable[[], float] = time.time
    ):
        self.crawler = crawler
        self.liveavatar = liveavatar
        self.config = config
        self.clock = clock

    async def generate_context(
        self,
        user_name: str,
        business_url: str,
        avatar_id: Optional[str] = None,
        voice_id: Optional[str] = None
    ) -> GenerateContextResponse:
        url = normalize_url(business_url)

        # Step 1: Fetch website content from multiple pages
        crawl = await self.crawler.crawl(url)
        if not crawl.content:
            raise WebsiteUnreachableError(business_url)

        business_name = extract_business_name(url)
        logger.info(f"🏢 Business name: {business_name}, content length: {len(crawl.content)} chars")

        # Step 2: Check if we already have a context for this business
        if self.config.reuse_enabled:
            existing_context_id = await self.liveavatar.find_existing_context(business_name)
            if existing_context_id:
                logger.info(f"♻️  Reusing existing context for {business_name}")
                return GenerateContextResponse(
                    contextId=existing_context_id,
                    businessName=business_name,
                    reused=True
                )

        # Step 3: Generate the sales representative prompt
        prompt = generate_sales_prompt(
            user_name,
            business_name,
            crawl.content,
            crawl.title,
            crawl.description,
            max_content_chars=self.config.max_content_chars
        )

        # Step 4: Create context via LiveAvatar API
        timestamp = int(self.clock() * 1000)
        context_id = await self.liveavatar.create_context(
            name=context_name(business_name, user_name, timestamp),
            avatar_id=avatar_id or self.liveavatar.config.avatar_id,
            voice_id=voice_id or self.liveavatar.config.voice_id,
            prompt=prompt,
            opening_text=opening_text(business_name)
        )

        return GenerateContextResponse(contextId=context_id, businessName=business_name)
