"""
Experience routes. Reads are public; writes require the author's token.
"""
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import List, Optional
from app.db.session import get_db
from app.models.user import User
from app.schemas.common import ResponseEnvelope
from app.schemas.experience import (
    ExperienceCreate, ExperienceFilters, ExperienceResponse, ExperienceUpdate
)
from app.api.dependencies import get_current_user, get_image_manager
from app.services import experience_service
from app.services.image_service import ImageAssetManager

router = APIRouter(prefix="/experiences", tags=["experiences"])


@router.get("", response_model=ResponseEnvelope[List[ExperienceResponse]], response_model_exclude_none=True)
async def list_experiences(
    province_id: Optional[str] = Query(None, alias="provinceId"),
    district_id: Optional[str] = Query(None, alias="districtId"),
    city_name: Optional[str] = Query(None, alias="cityName"),
    db: Session = Depends(get_db)
):
    """List experiences, newest first, optionally filtered by location."""
    filters = ExperienceFilters(province_id=province_id, district_id=district_id, city_name=city_name)
    experiences = experience_service.list_experiences(filters, db)
    return ResponseEnvelope(
        count=len(experiences),
        data=[ExperienceResponse.model_validate(e) for e in experiences]
    )


@router.get("/{experience_id}", response_model=ResponseEnvelope[ExperienceResponse], response_model_exclude_none=True)
async def get_experience(experience_id: str, db: Session = Depends(get_db)):
    """Get a single experience."""
    experience = experience_service.get_experience(experience_id, db)
    return ResponseEnvelope(data=ExperienceResponse.model_validate(experience))


@router.post(
    "",
    response_model=ResponseEnvelope[ExperienceResponse],
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED
)
async def create_experience(
    payload: ExperienceCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Create a new experience authored by the current user."""
    experience = experience_service.create_experience(current_user, payload, db)
    return ResponseEnvelope(
        message="Experience created successfully",
        data=ExperienceResponse.model_validate(experience)
    )


@router.put("/{experience_id}", response_model=ResponseEnvelope[ExperienceResponse], response_model_exclude_none=True)
async def update_experience(
    experience_id: str,
    payload: ExperienceUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Update an experience. Only its author may do this."""
    experience = experience_service.update_experience(current_user, experience_id, payload, db)
    return ResponseEnvelope(
        message="Experience updated successfully",
        data=ExperienceResponse.model_validate(experience)
    )


@router.delete("/{experience_id}", response_model=ResponseEnvelope, response_model_exclude_none=True)
async def delete_experience(
    experience_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    image_manager: ImageAssetManager = Depends(get_image_manager)
):
    """Delete an experience and, best-effort, its images. Only its author may do this."""
    experience_service.delete_experience(current_user, experience_id, db, image_manager)
    return ResponseEnvelope(message="Experience deleted successfully")
