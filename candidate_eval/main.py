from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from candidate_eval.routers import evaluate, summarize, share
from candidate_eval.utils.config import get_settings

# Import logging and middleware
from candidate_eval.utils.logging_config import configure_for_environment, get_logger
from candidate_eval.middleware.error_handlers import (
    BodySizeLimitMiddleware,
    ExceptionHandlerMiddleware,
    RequestLoggingMiddleware,
    register_exception_handlers,
)

# Configure logging first
configure_for_environment()
logger = get_logger(__name__)

settings = get_settings()

# Endpoints that accept base64 documents, images or share payloads
LARGE_BODY_PATHS = ["/api/evaluate", "/api/share-create", "/api/share-upload"]


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan context manager"""
    logger.info(f"{settings.app_name} starting up...")
    if not settings.anthropic_api_key:
        logger.warning("ANTHROPIC_API_KEY is not set - evaluation and summary endpoints will return 500")
    if not settings.blob_read_write_token:
        logger.warning("BLOB_READ_WRITE_TOKEN is not set - share endpoints will return 500")

    yield

    logger.info(f"{settings.app_name} shutting down...")


app = FastAPI(title=settings.app_name, version=settings.version, lifespan=lifespan)

register_exception_handlers(app)

# Add middleware in order (LIFO - Last In, First Out)
app.add_middleware(BodySizeLimitMiddleware, max_bytes=settings.max_body_bytes, paths=LARGE_BODY_PATHS)
app.add_middleware(RequestLoggingMiddleware)
# Exception handler wraps everything except CORS so error responses still get CORS headers
app.add_middleware(ExceptionHandlerMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type"],
)


@app.get("/")
@app.head("/")
async def root():
    """Root endpoint - handles both GET and HEAD requests for health checks"""
    return {"message": f"Welcome to the {settings.app_name}", "version": settings.version, "status": "ok"}


@app.get("/health")
@app.head("/health")
async def health_check():
    """Health check endpoint - handles both GET and HEAD requests"""
    return {"status": "healthy"}


app.include_router(evaluate.router, prefix="/api", tags=["evaluate"])
app.include_router(summarize.router, prefix="/api", tags=["summarize"])
app.include_router(share.router, prefix="/api", tags=["share"])

logger.info(f"{settings.app_name} initialized successfully")
