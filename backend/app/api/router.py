"""
Main API router that includes all route modules.
"""
from fastapi import APIRouter
from app.api.routes import auth, experiences, upload, seo, locations

api_router = APIRouter()

# Include all route modules
api_router.include_router(auth.router)
api_router.include_router(experiences.router)
api_router.include_router(upload.router)
api_router.include_router(locations.router)
api_router.include_router(seo.router)
