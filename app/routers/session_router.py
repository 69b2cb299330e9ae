"""
Thin proxy endpoints for LiveAvatar sessions and the avatar gallery
"""
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
import logging

from app.dependencies import get_liveavatar_service
from app.models import AvatarListResponse, ErrorResponse, StartSessionRequest, StartSessionResponse
from app.services.liveavatar_service import LiveAvatarAPIError, LiveAvatarService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "/start-session",
    response_model=StartSessionResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}}
)
async def start_session(
    request: StartSessionRequest,
    liveavatar: LiveAvatarService = Depends(get_liveavatar_service)
):
    """Exchange a context id for a short-lived session token"""
    if not (request.contextId or "").strip():
        return JSONResponse(status_code=400, content={"error": "Missing contextId"})

    try:
        session_token = await liveavatar.create_session_token(
            context_id=request.contextId,
            avatar_id=request.avatarId,
            voice_id=request.voiceId
        )
        logger.info(f"✅ Session started for context {request.contextId}")
        return StartSessionResponse(session_token=session_token)

    except LiveAvatarAPIError as e:
        return JSONResponse(status_code=e.status_code, content={"error": e.message})
    except Exception as e:
        logger.error(f"❌ Error starting session: {str(e)}")
        logger.exception(e)
        return JSONResponse(status_code=500, content={"error": str(e)})


@router.get(
    "/get-avatars",
    response_model=AvatarListResponse,
    response_model_exclude_none=True,
    responses={500: {"model": ErrorResponse}}
)
async def get_avatars(liveavatar: LiveAvatarService = Depends(get_liveavatar_service)):
    """Avatars available to the picker"""
    try:
        avatars = await liveavatar.list_avatars()
        return AvatarListResponse(avatars=avatars)

    except LiveAvatarAPIError as e:
        return JSONResponse(status_code=e.status_code, content={"error": e.message})
    except Exception as e:
        logger.error(f"❌ Error fetching avatars: {str(e)}")
        logger.exception(e)
        return JSONResponse(status_code=500, content={"error": str(e)})
