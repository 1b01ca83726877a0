"""
User model for authentication and profile management.
"""
from sqlalchemy import Column, String
from app.db.base import BaseModel


class User(BaseModel):
    """User model; username is stored lower-cased so uniqueness is case-insensitive."""
    __tablename__ = "users"

    name = Column(String(100), nullable=False)
    username = Column(String(50), unique=True, nullable=False, index=True)
    hashed_password = Column(String(255), nullable=False)
