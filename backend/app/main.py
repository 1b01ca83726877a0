"""
FastAPI entrypoint for the Sri Lanka Explorer backend.
"""
import logging
import os
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException
from app.core.config import settings
from app.core.utils import format_error
from app.api.router import api_router
from app.db.session import check_db_connection, init_db

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    logger.info(f"{settings.APP_NAME} API started ({settings.ENVIRONMENT})")
    yield


app = FastAPI(
    title="Sri Lanka Explorer API",
    description="Backend API for Sri Lanka travel experiences",
    version="1.0.0",
    lifespan=lifespan
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Serve uploaded images at /uploads/experiences/<filename>
os.makedirs(settings.experience_upload_dir, exist_ok=True)
app.mount("/uploads", StaticFiles(directory=settings.UPLOAD_ROOT), name="uploads")

# Include API routes
app.include_router(api_router, prefix="/api")


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Render HTTP errors (including app errors) in the response envelope."""
    message = exc.detail
    if exc.status_code == status.HTTP_404_NOT_FOUND and exc.detail == "Not Found":
        message = "Route not found"
    return JSONResponse(
        status_code=exc.status_code,
        content=format_error(str(message)),
        headers=getattr(exc, "headers", None)
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Malformed input is a 400 with the first offending field."""
    errors = exc.errors()
    message = "Invalid request"
    if errors:
        first = errors[0]
        field = ".".join(str(part) for part in first.get("loc", []) if part not in ("body", "query", "path"))
        message = f"{field}: {first.get('msg')}" if field else first.get("msg", message)
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=format_error(message))


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    """Unexpected failures become a generic 500; details only outside production."""
    logger.error(f"Unhandled error on {request.method} {request.url.path}: {exc}", exc_info=True)
    details = str(exc) if settings.DEBUG or settings.ENVIRONMENT == "development" else None
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=format_error("Something went wrong!", details)
    )


@app.get("/")
async def root():
    """Welcome endpoint listing the API groups."""
    return {
        "status": "success",
        "message": "Welcome to Sri Lanka Explorer API!",
        "version": "1.0.0",
        "endpoints": {
            "health": "/api/health",
            "experiences": "/api/experiences",
            "auth": "/api/auth",
            "upload": "/api/upload",
            "locations": "/api/locations/provinces",
            "sitemap": "/api/sitemap.xml",
        },
    }


@app.get("/api/health")
async def health():
    """Health check endpoint."""
    return {
        "status": "OK",
        "message": "Sri Lanka Explorer API is running",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "database": "Connected" if check_db_connection() else "Disconnected",
    }
