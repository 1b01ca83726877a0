"""
User service: credential store lookups and persistence.
"""
import logging
from typing import Optional
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from app.core.exceptions import Conflict
from app.core.security import get_password_hash
from app.models.user import User

logger = logging.getLogger(__name__)


def normalize_username(username: str) -> str:
    """Usernames are unique case-insensitively; store and look up lower-cased."""
    return username.strip().lower()


def find_user_by_username(username: str, db: Session) -> Optional[User]:
    return db.query(User).filter(User.username == normalize_username(username)).first()


def find_user_by_id(user_id: str, db: Session) -> Optional[User]:
    return db.query(User).filter(User.id == str(user_id)).first()


def create_user(name: str, username: str, password: str, db: Session) -> User:
    """
    Persist a new user with a bcrypt-hashed password.

    Raises:
        Conflict: the username is already taken
    """
    if find_user_by_username(username, db):
        raise Conflict("Username already exists")

    user = User(
        name=name.strip(),
        username=normalize_username(username),
        hashed_password=get_password_hash(password)
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        # Concurrent registration won the unique index
        db.rollback()
        raise Conflict("Username already exists")
    db.refresh(user)

    logger.info(f"Registered user {user.id} ({user.username})")
    return user


def update_user(user: User, db: Session, name: Optional[str] = None, password: Optional[str] = None) -> User:
    """Update display name and/or password of an existing user."""
    if name:
        user.name = name.strip()
    if password:
        user.hashed_password = get_password_hash(password)
    db.commit()
    db.refresh(user)
    return user
