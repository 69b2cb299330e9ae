"""
Main FastAPI application for the LiveAvatar sales representative demo
"""
import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.config import ALLOWED_ORIGINS, API_HOST, API_PORT, LIVEAVATAR_API_KEY, LIVEAVATAR_SANDBOX
from app.routers import health_router, context_router, session_router

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
logger = logging.getLogger(__name__)

# Create FastAPI app
app = FastAPI(
    title="LiveAvatar Sales Rep API",
    description="Turns a business website into a live avatar sales representative",
    version="1.0.0"
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(health_router.router)
app.include_router(context_router.router, prefix="/api", tags=["context"])
app.include_router(session_router.router, prefix="/api", tags=["session"])


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Malformed request bodies are client errors in the same {error} shape as every other failure"""
    errors = exc.errors()
    if errors:
        first = errors[0]
        field = ".".join(str(part) for part in first.get("loc", ()) if isinstance(part, str) and part != "body")
        message = f"Invalid {field}: {first.get('msg', 'invalid value')}" if field else first.get("msg", "Invalid request")
    else:
        message = "Invalid request"
    logger.warning(f"⚠️  Rejected request to {request.url.path}: {message}")
    return JSONResponse(status_code=400, content={"error": message})


@app.on_event("startup")
async def startup_event():
    """Report configuration on startup"""
    logger.info("🚀 LiveAvatar Sales Rep API starting...")
    if not LIVEAVATAR_API_KEY:
        logger.warning("⚠️  LIVEAVATAR_API_KEY is not set - context and session calls will be rejected")
    if LIVEAVATAR_SANDBOX:
        logger.info("🧪 Sandbox mode enabled")
    logger.info("✅ All routers loaded")


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "app.main:app",
        host=API_HOST,
        port=API_PORT,
        reload=True,
        log_level="info"
    )
