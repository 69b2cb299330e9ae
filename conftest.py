"""
Shared fixtures: an in-memory LiveAvatar API and a fake website, both served
through httpx.MockTransport so no test touches the network.
"""
import json
from typing import Dict, List, Optional, Tuple

import httpx
import pytest

from app.config import CrawlerConfig, LiveAvatarConfig, PipelineConfig
from app.services.context_pipeline import ContextPipeline
from app.services.liveavatar_service import LiveAvatarService
from app.services.page_fetcher import PageFetcher
from app.services.site_crawler import WebsiteCrawler


LONG_TEXT = (
    "Acme builds durable widgets for factories, warehouses and workshops. "
    "Our widgets ship worldwide with a two year warranty and free returns. "
    "Customers choose Acme for reliable delivery and friendly support. "
)


def html_page(title: str, body: str, description: str = "") -> str:
    meta = f'<meta name="description" content="{description}">' if description else ""
    return (
        f"<html><head><title>{title}</title>{meta}"
        f"<script>trackVisitor()</script><style>p {{ color: red; }}</style></head>"
        f"<body><nav>Home | About | Pricing</nav><main><p>{body}</p></main>"
        f"<footer>Copyright Acme</footer></body></html>"
    )


class FakeWebsite:
    """Serves canned pages keyed by "host/path"; everything else is a 404"""

    def __init__(self, pages: Optional[Dict[str, Tuple[int, str]]] = None):
        self.pages = pages or {}
        self.requests: List[httpx.Request] = []
        self.timeouts = set()

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        key = f"{request.url.host}{request.url.path}"
        if key in self.timeouts:
            raise httpx.ReadTimeout("timed out", request=request)
        if request.url.host == "r.jina.ai" and "r.jina.ai" in self.pages:
            status, body = self.pages["r.jina.ai"]
            return httpx.Response(status, text=body)
        status, body = self.pages.get(key, (404, "Not Found"))
        return httpx.Response(status, text=body)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def requested(self) -> List[str]:
        return [f"{r.url.host}{r.url.path}" for r in self.requests]


class FakeLiveAvatar:
    """Minimal in-memory stand-in for the LiveAvatar HTTP API"""

    def __init__(self):
        self.contexts: List[dict] = []
        self.requests: List[httpx.Request] = []
        self.create_failure: Optional[httpx.Response] = None
        self.session_failure: Optional[httpx.Response] = None
        self.list_failure: Optional[httpx.Response] = None
        self.avatars = [
            {
                "id": "avatar-1",
                "name": "Ann",
                "preview_url": "https://cdn.example/ann.png",
                "default_voice": {"id": "voice-1", "name": "Ann IA"},
                "is_custom": False,
            },
            {"id": "avatar-2", "name": "Wayne"},
        ]

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path

        if path == "/v1/contexts" and request.method == "GET":
            if self.list_failure is not None:
                return self.list_failure
            size = int(request.url.params.get("page_size", 100))
            return httpx.Response(200, json={
                "code": 1000,
                "data": {"count": len(self.contexts), "results": self.contexts[:size]},
            })

        if path == "/v1/contexts" and request.method == "POST":
            if self.create_failure is not None:
                return self.create_failure
            body = json.loads(request.content)
            context_id = f"ctx-{len(self.contexts) + 1}"
            self.contexts.append({"id": context_id, **body})
            return httpx.Response(200, json={"code": 1000, "data": {"id": context_id}})

        if path == "/v1/sessions/token" and request.method == "POST":
            if self.session_failure is not None:
                return self.session_failure
            body = json.loads(request.content)
            token = f"token-for-{body['avatar_persona']['context_id']}"
            return httpx.Response(200, json={
                "code": 1000,
                "data": {"session_id": "session-1", "session_token": token},
            })

        if path == "/v1/avatars/public" and request.method == "GET":
            return httpx.Response(200, json={"code": 1000, "data": {"results": self.avatars}})

        return httpx.Response(404, json={"code": 4004, "message": "Not found"})

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def calls(self, method: str, path: str) -> List[httpx.Request]:
        return [r for r in self.requests if r.method == method and r.url.path == path]


@pytest.fixture
def fake_liveavatar():
    return FakeLiveAvatar()


@pytest.fixture
def liveavatar_config():
    return LiveAvatarConfig(
        api_key="test-key",
        api_url="https://api.liveavatar.test",
        avatar_id="default-avatar",
        voice_id="default-voice",
        language="en",
        is_sandbox=True,
    )


@pytest.fixture
def liveavatar_service(fake_liveavatar, liveavatar_config):
    return LiveAvatarService(liveavatar_config, transport=fake_liveavatar.transport)


@pytest.fixture
def acme_site():
    return FakeWebsite({
        "acme.com/": (200, html_page("Acme Widgets", LONG_TEXT * 2, "Widgets for every workshop")),
        "acme.com/about": (200, html_page("About Acme", "Founded in 1999. " + LONG_TEXT)),
        "acme.com/products": (200, html_page("Products", "Tiny")),
    })


def make_crawler(site: FakeWebsite, reader_enabled: bool = False, **overrides) -> WebsiteCrawler:
    config = CrawlerConfig(reader_enabled=reader_enabled, **overrides)
    return WebsiteCrawler(config, fetcher=PageFetcher(transport=site.transport))


def make_pipeline(
    site: FakeWebsite,
    liveavatar: LiveAvatarService,
    reuse_enabled: bool = True,
    max_content_chars: int = 6000
) -> ContextPipeline:
    return ContextPipeline(
        crawler=make_crawler(site),
        liveavatar=liveavatar,
        config=PipelineConfig(reuse_enabled=reuse_enabled, max_content_chars=max_content_chars),
        clock=lambda: 1700000000.0
    )
