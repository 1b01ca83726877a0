"""
Authentication routes for registration, login and profile.
"""
import logging
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from app.db.session import get_db
from app.schemas.common import ResponseEnvelope
from app.schemas.user import (
    AuthResult, LoginRequest, ProfileUpdate, RegisterRequest, UserResponse, UserResult
)
from app.models.user import User
from app.core.exceptions import Unauthenticated, ValidationError
from app.core.security import verify_password, create_access_token
from app.api.dependencies import get_current_user
from app.services.user_service import create_user, find_user_by_username, update_user

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])

MIN_PASSWORD_LENGTH = 6


def _auth_result(user: User) -> AuthResult:
    return AuthResult(user=UserResponse.model_validate(user), token=create_access_token(user.id))


@router.post(
    "/register",
    response_model=ResponseEnvelope[AuthResult],
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED
)
async def register(payload: RegisterRequest, db: Session = Depends(get_db)):
    """Register a new user and return it with a bearer token."""
    name = (payload.name or "").strip()
    username = (payload.username or "").strip()
    if not all([name, username, payload.password, payload.confirm_password]):
        raise ValidationError("All fields are required")

    if payload.password != payload.confirm_password:
        raise ValidationError("Passwords do not match")

    if len(payload.password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")

    user = create_user(name, username, payload.password, db)

    return ResponseEnvelope(message="User registered successfully", data=_auth_result(user))


@router.post("/login", response_model=ResponseEnvelope[AuthResult], response_model_exclude_none=True)
async def login(credentials: LoginRequest, db: Session = Depends(get_db)):
    """Login and get JWT token."""
    if not credentials.username or not credentials.password:
        raise ValidationError("Username and password are required")

    user = find_user_by_username(credentials.username, db)

    # Unknown user and wrong password look the same to the caller
    if not user or not verify_password(credentials.password, user.hashed_password):
        logger.info("Failed login attempt")
        raise Unauthenticated("Invalid credentials")

    return ResponseEnvelope(message="Login successful", data=_auth_result(user))


@router.get("/me", response_model=ResponseEnvelope[UserResult], response_model_exclude_none=True)
async def get_me(current_user: User = Depends(get_current_user)):
    """Get current user information."""
    return ResponseEnvelope(data=UserResult(user=UserResponse.model_validate(current_user)))


@router.put("/profile", response_model=ResponseEnvelope[UserResult], response_model_exclude_none=True)
async def update_profile(
    payload: ProfileUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Update display name and/or password. Changing the password needs the current one."""
    name = payload.name.strip() if payload.name else None

    if payload.new_password:
        if not payload.current_password:
            raise ValidationError("Current password is required to change password")

        if not verify_password(payload.current_password, current_user.hashed_password):
            raise ValidationError("Current password is incorrect")

        if len(payload.new_password) < MIN_PASSWORD_LENGTH:
            raise ValidationError(f"New password must be at least {MIN_PASSWORD_LENGTH} characters")

    user = update_user(current_user, db, name=name, password=payload.new_password)

    return ResponseEnvelope(
        message="Profile updated successfully",
        data=UserResult(user=UserResponse.model_validate(user))
    )
