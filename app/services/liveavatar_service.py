"""
LiveAvatar API service for contexts, session tokens and the avatar catalogue
"""
import logging
from typing import List, Optional

import httpx

from app.config import LiveAvatarConfig
from app.models import Avatar, LiveAvatarContext
from app.services.prompt_composer import context_search_prefix

logger = logging.getLogger(__name__)


class LiveAvatarAPIError(Exception):
    """Remote call rejected; message is the remote error text when it sent one"""

    def __init__(self, message: str, status_code: int = 500):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


def _error_message(response: httpx.Response, default: str) -> str:
    try:
        payload = response.json()
    except ValueError:
        return default

    if not isinstance(payload, dict):
        return default

    errors = payload.get("data")
    if isinstance(errors, list) and errors and isinstance(errors[0], dict):
        if errors[0].get("message"):
            return errors[0]["message"]

    return payload.get("message") or default


class LiveAvatarService:
    """Service for interacting with the LiveAvatar API"""

    def __init__(
        self,
        config: LiveAvatarConfig,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self.config = config
        self.base_url = config.api_url.rstrip("/")
        self.transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.base_url,
            headers={
                "X-API-KEY": self.config.api_key,
                "Content-Type": "application/json"
            },
            timeout=self.config.timeout,
            transport=self.transport
        )

    async def list_contexts(self, page: int = 1) -> List[LiveAvatarContext]:
        """One page of contexts owned by this API key"""
        async with self._client() as client:
            response = await client.get(
                "/v1/contexts",
                params={"page": page, "page_size": self.config.context_page_size}
            )

        if not response.is_success:
            raise LiveAvatarAPIError(
                _error_message(response, "Failed to list contexts"),
                response.status_code
            )

        data = response.json().get("data") or {}
        return [LiveAvatarContext(**ctx) for ctx in data.get("results") or [] if ctx.get("id")]

    async def find_existing_context(self, business_name: str) -> Optional[str]:
        """
        Id of the first context on page one whose name starts with
        "<business_name> Sales Rep", or None.

        Lookup failures are logged and treated as a miss.
        """
        search_prefix = context_search_prefix(business_name)

        try:
            contexts = await self.list_contexts()
        except Exception as e:
            logger.error(f"❌ Error searching for existing context: {str(e)}")
            return None

        for ctx in contexts:
            if (ctx.name or "").startswith(search_prefix):
                logger.info(f"♻️  Found existing context for {business_name}: {ctx.id}")
                return ctx.id

        return None

    async def create_context(
        self,
        name: str,
        avatar_id: str,
        voice_id: str,
        prompt: str,
        opening_text: str
    ) -> str:
        """Create a context and return its id"""
        async with self._client() as client:
            response = await client.post(
                "/v1/contexts",
                json={
                    "name": name,
                    "avatar_id": avatar_id,
                    "voice_id": voice_id,
                    "prompt": prompt,
                    "opening_text": opening_text
                }
            )

        if not response.is_success:
            message = _error_message(response, "Failed to create context")
            logger.error(f"❌ LiveAvatar API error creating context: {response.text}")
            raise LiveAvatarAPIError(message, response.status_code)

        data = response.json().get("data") or {}
        context_id = data.get("context_id") or data.get("id")
        if not context_id:
            raise LiveAvatarAPIError("Failed to create context")

        logger.info(f"✅ Created context {context_id}: {name}")
        return context_id

    async def create_session_token(
        self,
        context_id: str,
        avatar_id: Optional[str] = None,
        voice_id: Optional[str] = None
    ) -> str:
        """Start a FULL mode session bound to a context and return its access token"""
        async with self._client() as client:
            response = await client.post(
                "/v1/sessions/token",
                json={
                    "mode": "FULL",
                    "avatar_id": avatar_id or self.config.avatar_id,
                    "avatar_persona": {
                        "voice_id": voice_id or self.config.voice_id,
                        "context_id": context_id,
                        "language": self.config.language
                    },
                    "is_sandbox": self.config.is_sandbox
                }
            )

        if not response.is_success:
            message = _error_message(response, "Failed to start session")
            logger.error(f"❌ LiveAvatar API error starting session: {response.text}")
            raise LiveAvatarAPIError(message, response.status_code)

        data = response.json().get("data") or {}
        session_token = data.get("session_token")
        if not session_token:
            raise LiveAvatarAPIError("Failed to start session")

        return session_token

    async def list_avatars(self) -> List[Avatar]:
        """Public avatar catalogue"""
        async with self._client() as client:
            response = await client.get("/v1/avatars/public")

        if not response.is_success:
            raise LiveAvatarAPIError(
                _error_message(response, "Failed to fetch avatars"),
                response.status_code
            )

        data = response.json().get("data") or {}
        results = data.get("results", []) if isinstance(data, dict) else data
        return [Avatar(**avatar) for avatar in results if avatar.get("id")]
