"""
Service providers for the routers (overridable in tests)
"""
from app.config import get_crawler_config, get_liveavatar_config, get_pipeline_config
from app.services.context_pipeline import ContextPipeline
from app.services.liveavatar_service import LiveAvatarService
from app.services.site_crawler import WebsiteCrawler


def get_liveavatar_service() -> LiveAvatarService:
    return LiveAvatarService(get_liveavatar_config())


def get_website_crawler() -> WebsiteCrawler:
    return WebsiteCrawler(get_crawler_config())


def get_context_pipeline() -> ContextPipeline:
    return ContextPipeline(
        crawler=get_website_crawler(),
        liveavatar=get_liveavatar_service(),
        config=get_pipeline_config()
    )
