"""
Experience persistence: create, fetch, list, update and delete rows.

No authorization happens here; see experience_service for the lifecycle rules.
"""
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError
from typing import Dict, List, Optional
from app.db.base import utcnow
from app.models.experience import Experience
from app.schemas.experience import ExperienceFilters


def create_experience(fields: Dict, db: Session) -> Experience:
    """Insert an experience; created_at and updated_at share one timestamp."""
    now = utcnow()
    experience = Experience(**fields, created_at=now, updated_at=now)
    db.add(experience)
    db.commit()
    db.refresh(experience)
    return experience


def get_experience(experience_id: str, db: Session) -> Optional[Experience]:
    return db.query(Experience).filter(Experience.id == str(experience_id)).first()


def list_experiences(filters: ExperienceFilters, db: Session) -> List[Experience]:
    """All experiences matching every provided filter, newest first."""
    query = db.query(Experience)
    if filters.province_id:
        query = query.filter(Experience.province_id == filters.province_id)
    if filters.district_id:
        query = query.filter(Experience.district_id == filters.district_id)
    if filters.city_name:
        query = query.filter(Experience.city_name == filters.city_name)
    return query.order_by(Experience.created_at.desc()).all()


def update_experience(experience: Experience, changes: Dict, db: Session) -> Optional[Experience]:
    """Apply column changes and bump updated_at. Returns None if the row was deleted meanwhile."""
    for field, value in changes.items():
        setattr(experience, field, value)
    experience.updated_at = max(utcnow(), experience.created_at)
    try:
        db.commit()
    except StaleDataError:
        # Concurrent delete removed the row before this UPDATE ran
        db.rollback()
        return None
    db.refresh(experience)
    return experience


def delete_experience(experience_id: str, db: Session) -> int:
    """Delete by id and return the number of rows removed (0 if already gone)."""
    deleted = db.query(Experience).filter(
        Experience.id == str(experience_id)
    ).delete(synchronize_session=False)
    db.commit()
    return deleted


def image_referenced_elsewhere(url: str, experience_id: str, db: Session) -> bool:
    """True if any experience other than `experience_id` lists `url` among its images."""
    # Compared on decoded lists; the stored JSON text escapes non-ASCII and quotes
    rows = db.query(Experience.images).filter(
        Experience.id != str(experience_id)
    ).all()
    return any(url in (images or []) for (images,) in rows)
