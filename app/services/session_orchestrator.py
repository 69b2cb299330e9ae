"""
Demo onboarding flow: form -> generating -> session -> ended

Drives the same sequence the browser client runs against this API
(generate-context, then start-session) and tracks what each screen needs.
"""
import asyncio
import logging
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

import httpx

from app import config
from app.models import Avatar, GenerationStatus
from app.services.business_identity import normalize_url

logger = logging.getLogger(__name__)

EMBED_BASE_URL = "https://embed.liveavatar.com/v1"


class SetupStep(str, Enum):
    FORM = "form"
    GENERATING = "generating"
    SESSION = "session"
    ENDED = "ended"


class DemoRequestError(Exception):
    """An API call made on behalf of the demo UI failed"""


class DemoApiBackend:
    """HTTP client for this service's own demo endpoints"""

    def __init__(self, base_url: str, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.base_url = base_url.rstrip("/")
        self.transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(base_url=self.base_url, timeout=60.0, transport=self.transport)

    @staticmethod
    def _raise_for_error(response: httpx.Response, default: str) -> None:
        if response.is_success:
            return
        try:
            payload = response.json()
        except ValueError:
            payload = None
        message = payload.get("error") if isinstance(payload, dict) else None
        raise DemoRequestError(message or default)

    async def generate_context(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        async with self._client() as client:
            response = await client.post("/api/generate-context", json=payload)
        self._raise_for_error(response, "Failed to generate context")
        return response.json()

    async def start_session(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        async with self._client() as client:
            response = await client.post("/api/start-session", json=payload)
        self._raise_for_error(response, "Failed to start session")
        return response.json()

    async def list_avatars(self) -> List[Dict[str, Any]]:
        async with self._client() as client:
            response = await client.get("/api/get-avatars")
        self._raise_for_error(response, "Failed to fetch avatars")
        return response.json().get("avatars", [])


class SessionOrchestrator:
    """
    State machine behind the onboarding screens.

    A session token only ever reaches the SESSION step after both the
    context and the session calls succeed; any failure drops back to FORM
    with an error message and keeps the entered form values.
    """

    def __init__(
        self,
        backend,
        user_name: str = "Visitor",
        business_url: str = "",
        auto_start: bool = False,
        on_change: Optional[Callable[["SessionOrchestrator"], None]] = None
    ):
        self.backend = backend
        self.user_name = user_name
        self.business_url = business_url
        self.auto_start = auto_start
        self.on_change = on_change

        self.step = SetupStep.FORM
        self.error: Optional[str] = None
        self.status = GenerationStatus()
        self.session_token = ""

        # Context of the last successful attempt, for the embed screen
        self.context_id: Optional[str] = None
        self.business_name = ""

        self.avatars: List[Avatar] = []
        self.selected_avatar: Optional[Avatar] = None
        self._auto_start_triggered = False

    def _set_step(self, step: SetupStep) -> None:
        logger.info(f"🔀 {self.step.value} -> {step.value}")
        self.step = step
        if self.on_change:
            self.on_change(self)

    def _set_status(self, step: str, detail: str) -> None:
        self.status = GenerationStatus(step=step, detail=detail)
        if self.on_change:
            self.on_change(self)

    def _avatar_fields(self) -> Dict[str, Optional[str]]:
        avatar = self.selected_avatar
        return {
            "avatarId": avatar.id if avatar else None,
            "voiceId": avatar.default_voice.id if avatar and avatar.default_voice else None,
        }

    async def load_avatars(self) -> None:
        """Fetch the avatar gallery and preselect the first entry"""
        try:
            self.avatars = [Avatar(**a) for a in await self.backend.list_avatars()]
        except Exception as e:
            logger.warning(f"⚠️  Failed to fetch avatars: {str(e)}")
            self.avatars = []

        if self.avatars and not self.selected_avatar:
            self.selected_avatar = self.avatars[0]

        await self.maybe_auto_start()

    def select_avatar(self, avatar_id: str) -> None:
        for avatar in self.avatars:
            if avatar.id == avatar_id:
                self.selected_avatar = avatar
                return
        raise ValueError(f"Unknown avatar: {avatar_id}")

    async def maybe_auto_start(self) -> bool:
        if (
            self.auto_start
            and self.business_url
            and not self._auto_start_triggered
            and self.selected_avatar
        ):
            self._auto_start_triggered = True
            await self.start_session()
            return True
        return False

    async def submit(self) -> None:
        """Form submission; both fields must be filled in"""
        if not self.user_name.strip() or not self.business_url.strip():
            self.error = "Please enter your name and a website URL"
            return
        await self.start_session()

    async def start_session(self) -> None:
        self.error = None
        self.session_token = ""
        self._set_step(SetupStep.GENERATING)

        normalized_url = normalize_url(self.business_url)

        try:
            # Step 1: Generate context
            self._set_status("Analyzing website", f"Fetching content from {normalized_url}...")
            context = await self.backend.generate_context({
                "userName": self.user_name,
                "businessUrl": normalized_url,
                **self._avatar_fields(),
            })
            context_id = context.get("contextId")
            business_name = context.get("businessName", "")
            if not context_id:
                raise DemoRequestError("Failed to generate context")

            # Step 2: Start session with the new context
            self._set_status(
                "Creating your AI representative",
                f"Setting up sales agent for {business_name}..."
            )
            session = await self.backend.start_session({
                "contextId": context_id,
                **self._avatar_fields(),
            })
            session_token = session.get("session_token")
            if not session_token:
                raise DemoRequestError("Failed to start session")

        except Exception as e:
            logger.error(f"❌ Session setup failed: {str(e)}")
            self.error = str(e) or "Failed to start session"
            self._set_step(SetupStep.FORM)
            return

        self.context_id = context_id
        self.business_name = business_name
        self.session_token = session_token
        self._set_step(SetupStep.SESSION)

    def session_stopped(self) -> None:
        """Live session ended; show the embed screen when a context exists"""
        self.session_token = ""
        self._set_step(SetupStep.ENDED if self.context_id else SetupStep.FORM)

    def start_over(self) -> None:
        self.context_id = None
        self.business_name = ""
        self._set_step(SetupStep.FORM)

    async def chat_again(self) -> None:
        await self.start_session()

    def embed_url(self) -> Optional[str]:
        if not self.context_id:
            return None
        return f"{EMBED_BASE_URL}/{self.context_id}"

    def embed_code(self) -> str:
        """iframe snippet for putting the avatar on the business's own site"""
        if not self.context_id:
            return ""
        return (
            f'<iframe src="{self.embed_url()}" allow="microphone" '
            f'title="LiveAvatar - {self.business_name}" '
            f'style="width: 100%; aspect-ratio: 16/9; border: none;"></iframe>'
        )


def build_demo_orchestrator(
    transport: Optional[httpx.AsyncBaseTransport] = None
) -> SessionOrchestrator:
    """Orchestrator wired to the running API, prefilled from the environment"""
    return SessionOrchestrator(
        DemoApiBackend(config.DEMO_API_URL, transport=transport),
        user_name=config.AUTO_USER_NAME,
        business_url=config.AUTO_WEBSITE_URL,
        auto_start=config.AUTO_START
    )


async def run_demo(orchestrator: SessionOrchestrator) -> SessionOrchestrator:
    """
    Load the avatar gallery (which auto-starts when configured) and submit
    the prefilled form if that did not already happen.
    """
    await orchestrator.load_avatars()
    if orchestrator.step == SetupStep.FORM and orchestrator.error is None:
        await orchestrator.submit()
    return orchestrator


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    orchestrator = asyncio.run(run_demo(build_demo_orchestrator()))

    if orchestrator.step != SetupStep.SESSION:
        print(f"❌ {orchestrator.error}")
        raise SystemExit(1)

    print(f"✅ Session ready for {orchestrator.business_name}")
    print(f"   Session token: {orchestrator.session_token}")
    print(f"   Embed code: {orchestrator.embed_code()}")


if __name__ == "__main__":
    main()
