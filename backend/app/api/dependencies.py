"""
Shared FastAPI dependencies: authentication and service wiring.
"""
import logging
from functools import lru_cache
from typing import Optional
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session
from app.core.config import settings
from app.core.exceptions import Unauthenticated
from app.core.security import InvalidTokenError, verify_access_token
from app.db.session import get_db
from app.models.user import User
from app.services.image_service import ImageAssetManager, build_image_asset_manager
from app.services.user_service import find_user_by_id

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db)
) -> User:
    """Resolve the bearer token to a user or reject the request with 401."""
    if credentials is None or not credentials.credentials:
        raise Unauthenticated("Access token required")

    try:
        user_id = verify_access_token(credentials.credentials)
    except InvalidTokenError as e:
        logger.info(f"Rejected bearer token: {e}")
        raise Unauthenticated("Invalid or expired token")

    user = find_user_by_id(user_id, db)
    if not user:
        # Valid token for an account that no longer exists
        raise Unauthenticated("User not found")

    return user


@lru_cache()
def get_image_manager() -> ImageAssetManager:
    """Process-wide image asset manager built from settings."""
    return build_image_asset_manager(settings)
