"""Models package - Import all models for SQLAlchemy registration."""
from app.models.user import User
from app.models.experience import Experience

__all__ = [
    "User",
    "Experience",
]
