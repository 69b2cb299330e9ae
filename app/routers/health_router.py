"""
Health check router
"""
from datetime import datetime, timezone

from fastapi import APIRouter

from app.config import CONTEXT_REUSE_ENABLED, LIVEAVATAR_API_KEY, LIVEAVATAR_SANDBOX, READER_ENABLED

router = APIRouter(tags=["health"])


@router.get("/")
async def root():
    """Health check endpoint"""
    return {
        "message": "LiveAvatar Sales Rep API",
        "version": "1.0.0",
        "status": "healthy"
    }


@router.get("/health")
async def health_check():
    """Detailed health check"""
    return {
        "status": "healthy" if LIVEAVATAR_API_KEY else "degraded",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "services": {
            "liveavatar": "configured" if LIVEAVATAR_API_KEY else "missing api key",
            "reader": "enabled" if READER_ENABLED else "disabled"
        },
        "settings": {
            "sandbox": LIVEAVATAR_SANDBOX,
            "context_reuse": CONTEXT_REUSE_ENABLED
        }
    }
