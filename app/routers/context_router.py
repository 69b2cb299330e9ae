"""
Router for turning a business website into a LiveAvatar context
"""
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
import logging

from app.dependencies import get_context_pipeline
from app.models import ErrorResponse, GenerateContextRequest, GenerateContextResponse
from app.services.context_pipeline import ContextPipeline, WebsiteUnreachableError
from app.services.liveavatar_service import LiveAvatarAPIError

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "/generate-context",
    response_model=GenerateContextResponse,
    response_model_exclude_none=True,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}}
)
async def generate_context(
    request: GenerateContextRequest,
    pipeline: ContextPipeline = Depends(get_context_pipeline)
):
    """
    Build (or reuse) a sales representative context for a website

    This endpoint:
    1. Crawls the homepage and a few secondary pages
    2. Derives the business name from the hostname
    3. Reuses an existing "<Business> Sales Rep" context when enabled
    4. Otherwise composes the prompt and creates a new context
    """
    if not (request.userName or "").strip() or not (request.businessUrl or "").strip():
        return JSONResponse(status_code=400, content={"error": "Missing userName or businessUrl"})

    try:
        logger.info(f"🚀 Generating context for {request.businessUrl} (user: {request.userName})")

        result = await pipeline.generate_context(
            user_name=request.userName,
            business_url=request.businessUrl,
            avatar_id=request.avatarId,
            voice_id=request.voiceId
        )
        return result

    except WebsiteUnreachableError as e:
        logger.warning(f"⚠️  {str(e)}")
        return JSONResponse(status_code=400, content={"error": str(e)})
    except LiveAvatarAPIError as e:
        return JSONResponse(status_code=e.status_code, content={"error": e.message})
    except Exception as e:
        logger.error(f"❌ Error generating context: {str(e)}")
        logger.exception(e)
        return JSONResponse(status_code=500, content={"error": str(e)})
