import os
from datetime import datetime

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
from shortlist.routers import score

# Import logging and middleware
from shortlist.utils.logging_config import configure_for_environment, get_logger
from shortlist.middleware.error_handlers import (
    ExceptionHandlerMiddleware,
    RequestLoggingMiddleware,
    PerformanceMiddleware,
)
from shortlist.models.settings import get_settings

# Configure logging first
configure_for_environment()
logger = get_logger(__name__)

VERSION = "1.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan context manager"""
    settings = get_settings()
    logger.info("Shortlisting API starting up...")
    logger.info(
        f"Max concurrent resumes: {settings.processing.max_concurrent}, "
        f"collaborator timeout: {settings.processing.collaborator_timeout}s, "
        f"semantic boost: {'on' if settings.embedding.enabled else 'off'}, "
        f"OCR: {'on' if settings.processing.ocr_enabled else 'off'}"
    )

    yield

    logger.info("Shortlisting API shutting down...")

app = FastAPI(title="Resume Shortlisting API", version=VERSION, lifespan=lifespan)

# Add middleware in order (LIFO - Last In, First Out)
# Exception handler should be the outermost middleware
app.add_middleware(PerformanceMiddleware, slow_request_threshold=10.0)
app.add_middleware(RequestLoggingMiddleware)
app.add_middleware(ExceptionHandlerMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/")
@app.head("/")
async def root():
    """Root endpoint - handles both GET and HEAD requests for health checks"""
    logger.debug("Root endpoint accessed")
    return {"message": "Welcome to the Resume Shortlisting API", "version": VERSION, "status": "ok"}


@app.get("/health")
@app.head("/health")
async def health_check():
    """Health check endpoint - handles both GET and HEAD requests"""
    return {"status": "healthy", "timestamp": datetime.utcnow().isoformat()}

app.include_router(score.router, prefix="/api")

logger.info("Shortlisting API initialized successfully")


def run():
    """Serve the API with uvicorn (HOST / PORT from the environment)"""
    uvicorn.run(app, host=os.getenv("HOST", "0.0.0.0"), port=int(os.getenv("PORT", "8000")), log_config=None)


if __name__ == "__main__":
    run()
