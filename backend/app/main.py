"""
Main FastAPI Application.

This is the entry point for the backend server.
It configures and runs the complete API.
"""
from fastapi import FastAPI
import dotenv

from app.api.middleware.cors import setup_cors
from app.api.routes import api_router, health
from app.api.middleware.error_handler import middleware
from app.api.responses import outcome_to_response
from contextlib import asynccontextmanager
from app.core.config import settings
from app.core.exceptions import UploadRejectedError
from app.models.chassis import PipelineOutcome
from app.services.ocr_service import build_text_detector
from app.services.storage import ImageStorage
from app.utils import get_logger

dotenv.load_dotenv()

logger = get_logger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    # Startup
    logger.info(f"Starting {settings.APP_NAME} v{settings.APP_VERSION}")
    logger.info(f"Environment: {'Development' if settings.DEBUG else 'Production'}")

    # Upload directory
    settings.ensure_directories()
    storage = ImageStorage(settings.UPLOAD_DIR)
    storage.ensure_directory()
    app.state.image_storage = storage
    logger.info(f"✅ Upload directory ready: {settings.UPLOAD_DIR}")

    # Validate services
    logger.info("Validating services...")
    for problem in settings.validate_required_settings():
        logger.warning(f"⚠️  {problem}")

    # Vision client - None keeps the server up and answers "not configured"
    app.state.text_detector = build_text_detector(settings)
    if app.state.text_detector is not None:
        logger.info("✅ Vision OCR ready")
    else:
        logger.error("❌ Vision OCR unavailable - extraction requests will fail")

    logger.info(f"🚀 Server ready at http://{settings.HOST}:{settings.PORT}")

    yield  # Server runs here

    # Shutdown
    logger.info("Shutting down gracefully...")


# Create FastAPI app
app = FastAPI(
    lifespan=lifespan,
    title = settings.APP_NAME,
    description = "Chassis/VIN number extraction from vehicle photos",
    version = settings.APP_VERSION,
    debug=settings.DEBUG,
    middleware=middleware,
)

# CORS middleware
setup_cors(app)


@app.exception_handler(UploadRejectedError)
async def upload_rejected_handler(request, exc: UploadRejectedError):
    logger.warning(f"Upload rejected: {exc.message}")
    return outcome_to_response(PipelineOutcome.caller_error(exc.message))


# Routes
app.include_router(health.router, tags=["health"])
app.include_router(api_router, prefix=settings.API_PREFIX)

@app.get("/")
async def root():
    """Root endpoint - API information."""
    return {
        "name": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "status": "running",
        "vision_configured": getattr(app.state, "text_detector", None) is not None,
        "docs": "/docs",
        "openapi": "/openapi.json"
    }


if __name__ == "__main__":
    import uvicorn
    try:
        uvicorn.run(
            "app.main:app",
            host=settings.HOST,
            port=settings.PORT,
            reload=settings.DEBUG,  # Auto-reload in dev mode
            log_level=settings.LOG_LEVEL.lower()
        )
    except KeyboardInterrupt:
        logger.warning("Shutdown requested")
        logger.info("Goodbye")
