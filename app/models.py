"""
Pydantic models for the backend API
"""
from pydantic import BaseModel
from typing import List, Optional


# Website crawl models
class PageExtract(BaseModel):
    text: str
    title: str = ""
    description: str = ""
    source: str = "html"  # html or reader


class CrawlResult(BaseModel):
    content: str = ""
    title: str = ""
    description: str = ""


# Context models
class GenerateContextRequest(BaseModel):
    # Required fields are validated in the router so they surface as 400 {error}
    userName: Optional[str] = None
    businessUrl: Optional[str] = None
    avatarId: Optional[str] = None
    voiceId: Optional[str] = None


class GenerateContextResponse(BaseModel):
    contextId: str
    businessName: str
    reused: Optional[bool] = None


class LiveAvatarContext(BaseModel):
    id: str
    name: Optional[str] = ""
    avatar_id: Optional[str] = None
    voice_id: Optional[str] = None
    prompt: Optional[str] = None
    opening_text: Optional[str] = None


# Session models
class StartSessionRequest(BaseModel):
    contextId: Optional[str] = None
    avatarId: Optional[str] = None
    voiceId: Optional[str] = None


class StartSessionResponse(BaseModel):
    session_token: str


# Avatar models
class AvatarVoice(BaseModel):
    id: str
    name: Optional[str] = None


class Avatar(BaseModel):
    id: str
    name: str = ""
    preview_url: Optional[str] = None
    default_voice: Optional[AvatarVoice] = None
    is_custom: Optional[bool] = None


class AvatarListResponse(BaseModel):
    avatars: List[Avatar]


class ErrorResponse(BaseModel):
    error: str


# Demo UI models
class GenerationStatus(BaseModel):
    step: str = ""
    detail: str = ""
