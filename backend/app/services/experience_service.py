"""
Experience lifecycle: create, read, update and delete with authorship rules.

Lifecycle per experience: absent -> created -> updated* -> deleted.
Reads are public. Writes need an authenticated user, and only the author may
update or delete. Deleting an experience also removes its image assets,
best-effort.
"""
import logging
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from typing import List
from app.core.exceptions import Forbidden, NotFound, ValidationError
from app.models.experience import Experience
from app.models.user import User
from app.schemas.experience import ExperienceCreate, ExperienceFilters, ExperienceUpdate
from app.services import experience_store
from app.services.image_service import ImageAssetManager

logger = logging.getLogger(__name__)

# Columns that must never be null/empty after an update
REQUIRED_FIELDS = (
    "title", "description", "province_id", "province_name",
    "district_id", "district_name", "city_name",
)


def is_author(experience: Experience, user: User) -> bool:
    """Compare ids in canonical string form."""
    return str(experience.created_by) == str(user.id)


def create_experience(user: User, payload: ExperienceCreate, db: Session) -> Experience:
    """Create an experience owned by `user`. Authorship always comes from the user, never the payload."""
    fields = payload.model_dump()
    fields["images"] = [url for url in fields.get("images") or [] if url]
    fields["created_by"] = str(user.id)
    fields["created_by_name"] = user.name

    experience = experience_store.create_experience(fields, db)
    logger.info(f"User {user.id} created experience {experience.id}")
    return experience


def list_experiences(filters: ExperienceFilters, db: Session) -> List[Experience]:
    return experience_store.list_experiences(filters, db)


def get_experience(experience_id: str, db: Session) -> Experience:
    experience = experience_store.get_experience(experience_id, db)
    if not experience:
        raise NotFound("Experience not found")
    return experience


def update_experience(user: User, experience_id: str, payload: ExperienceUpdate, db: Session) -> Experience:
    """
    Apply the provided fields to the user's own experience.

    Raises:
        NotFound: no experience with this id, or it was deleted mid-update
        Forbidden: the user is not the author
        ValidationError: a required field was set to null
    """
    experience = get_experience(experience_id, db)
    if not is_author(experience, user):
        raise Forbidden("You can only edit your own experiences")

    changes = payload.model_dump(exclude_unset=True)
    for field in REQUIRED_FIELDS:
        if field in changes and not changes[field]:
            raise ValidationError(f"{field} is required")
    if "images" in changes:
        changes["images"] = [url for url in changes["images"] or [] if url]

    experience = experience_store.update_experience(experience, changes, db)
    if experience is None:
        logger.info(f"Experience {experience_id} was deleted before the update committed")
        raise NotFound("Experience not found")
    logger.info(f"User {user.id} updated experience {experience.id}")
    return experience


def _image_in_use(url: str, experience_id: str, db: Session) -> bool:
    """Shared-image check for cleanup. An unanswerable check keeps the image."""
    try:
        return experience_store.image_referenced_elsewhere(url, experience_id, db)
    except SQLAlchemyError:
        db.rollback()
        logger.error(f"Could not check whether {url} is shared; keeping it", exc_info=True)
        return True


def delete_experience(
    user: User,
    experience_id: str,
    db: Session,
    image_manager: ImageAssetManager
) -> None:
    """
    Delete the user's own experience and its image assets.

    Every image is attempted independently; asset failures are logged by the
    image manager and never abort the delete. Images still used by another
    experience are kept. A record that vanished between the ownership check
    and the delete (concurrent delete) counts as deleted.

    Raises:
        NotFound: no experience with this id
        Forbidden: the user is not the author
    """
    experience = get_experience(experience_id, db)
    if not is_author(experience, user):
        raise Forbidden("You can only delete your own experiences")

    # Cleanup may run alongside other writers; keep plain values, not the ORM row
    record_id = experience.id
    images = list(experience.images or [])
    for url in images:
        if _image_in_use(url, record_id, db):
            logger.info(f"Keeping image still used by another experience: {url}")
            continue
        image_manager.delete_asset(url)

    deleted = experience_store.delete_experience(record_id, db)
    if not deleted:
        logger.info(f"Experience {experience_id} was already deleted")
    else:
        logger.info(f"User {user.id} deleted experience {experience_id} ({len(images)} images)")
