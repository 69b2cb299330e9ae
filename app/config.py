"""
Configuration settings for the backend
"""
import os
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel

# Load environment variables
load_dotenv()


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


# LiveAvatar Configuration
# Get your API key from https://app.heygen.com/settings/api
LIVEAVATAR_API_KEY = os.getenv("LIVEAVATAR_API_KEY", "")
LIVEAVATAR_API_URL = os.getenv("LIVEAVATAR_API_URL", "https://api.liveavatar.com")

# Avatar: Ann Therapist - Professional female avatar
LIVEAVATAR_AVATAR_ID = os.getenv("LIVEAVATAR_AVATAR_ID", "513fd1b7-7ef9-466d-9af2-344e51eeb833")
# Voice: Ann - IA (matches the avatar)
LIVEAVATAR_VOICE_ID = os.getenv("LIVEAVATAR_VOICE_ID", "de5574fc-009e-4a01-a881-9919ef8f5a0c")
LIVEAVATAR_LANGUAGE = os.getenv("LIVEAVATAR_LANGUAGE", "en")

# Sandbox mode uses minimal credits (integration and development)
LIVEAVATAR_SANDBOX = _env_flag("LIVEAVATAR_SANDBOX")

# Context reuse: look up an existing "<Business> Sales Rep" context before creating one.
# Disable to always create a fresh context from the latest website content.
CONTEXT_REUSE_ENABLED = _env_flag("CONTEXT_REUSE_ENABLED", "true")
CONTEXT_PAGE_SIZE = int(os.getenv("CONTEXT_PAGE_SIZE", 100))

# Website crawling
READER_ENABLED = _env_flag("READER_ENABLED", "true")
READER_BASE_URL = os.getenv("READER_BASE_URL", "https://r.jina.ai")
HOMEPAGE_TIMEOUT = float(os.getenv("HOMEPAGE_TIMEOUT", 5.0))
SECONDARY_PAGE_TIMEOUT = float(os.getenv("SECONDARY_PAGE_TIMEOUT", 3.0))
READER_TIMEOUT = float(os.getenv("READER_TIMEOUT", 10.0))
MAX_SECONDARY_PAGES = int(os.getenv("MAX_SECONDARY_PAGES", 3))

# Prompt generation
PROMPT_MAX_CONTENT_CHARS = int(os.getenv("PROMPT_MAX_CONTENT_CHARS", 6000))

# Demo client (auto-start a session on load)
AUTO_START = _env_flag("AUTO_START")
AUTO_WEBSITE_URL = os.getenv("WEBSITE_URL", "")
AUTO_USER_NAME = os.getenv("USER_NAME", "Visitor")
DEMO_API_URL = os.getenv("DEMO_API_URL", f"http://localhost:{os.getenv('PORT', 8001)}")

# CORS Configuration
# Allow additional origins from environment variable for production
ADDITIONAL_ORIGINS = os.getenv("ALLOWED_ORIGINS", "").split(",") if os.getenv("ALLOWED_ORIGINS") else []
ALLOWED_ORIGINS = [
    "http://localhost:3000",
    "http://localhost:3001",
    *[origin.strip() for origin in ADDITIONAL_ORIGINS if origin.strip()]
]

# API Configuration
API_HOST = os.getenv("HOST", "0.0.0.0")
API_PORT = int(os.getenv("PORT", 8001))


class LiveAvatarConfig(BaseModel):
    """Explicit configuration handed to the LiveAvatar client"""
    api_key: str = ""
    api_url: str = "https://api.liveavatar.com"
    avatar_id: str = ""
    voice_id: str = ""
    language: str = "en"
    is_sandbox: bool = False
    context_page_size: int = 100
    timeout: float = 30.0


class CrawlerConfig(BaseModel):
    """Explicit configuration handed to the page fetcher and site crawler"""
    reader_enabled: bool = True
    reader_base_url: str = "https://r.jina.ai"
    homepage_timeout: float = 5.0
    secondary_page_timeout: float = 3.0
    reader_timeout: float = 10.0
    max_secondary_pages: int = 3


class PipelineConfig(BaseModel):
    """Policy switches for context generation"""
    reuse_enabled: bool = True
    max_content_chars: int = 6000


def get_liveavatar_config(api_key: Optional[str] = None) -> LiveAvatarConfig:
    return LiveAvatarConfig(
        api_key=api_key if api_key is not None else LIVEAVATAR_API_KEY,
        api_url=LIVEAVATAR_API_URL,
        avatar_id=LIVEAVATAR_AVATAR_ID,
        voice_id=LIVEAVATAR_VOICE_ID,
        language=LIVEAVATAR_LANGUAGE,
        is_sandbox=LIVEAVATAR_SANDBOX,
        context_page_size=CONTEXT_PAGE_SIZE,
    )


def get_crawler_config() -> CrawlerConfig:
    return CrawlerConfig(
        reader_enabled=READER_ENABLED,
        reader_base_url=READER_BASE_URL,
        homepage_timeout=HOMEPAGE_TIMEOUT,
        secondary_page_timeout=SECONDARY_PAGE_TIMEOUT,
        reader_timeout=READER_TIMEOUT,
        max_secondary_pages=MAX_SECONDARY_PAGES,
    )


def get_pipeline_config() -> PipelineConfig:
    return PipelineConfig(
        reuse_enabled=CONTEXT_REUSE_ENABLED,
        max_content_chars=PROMPT_MAX_CONTENT_CHARS,
    )
