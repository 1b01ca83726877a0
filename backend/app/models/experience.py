"""
Experience model for travel posts tied to a province/district/city.
"""
from sqlalchemy import Column, String, Text, JSON
from sqlalchemy.ext.mutable import MutableList
from app.db.base import BaseModel


class Experience(BaseModel):
    """A user's travel experience post.

    Location names are denormalized from the static hierarchy at write time.
    `created_by` is a weak reference to the author and never changes after
    creation.
    """
    __tablename__ = "experiences"

    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=False)

    province_id = Column(String(20), nullable=False, index=True)
    province_name = Column(String(100), nullable=False)
    district_id = Column(String(20), nullable=False, index=True)
    district_name = Column(String(100), nullable=False)
    city_name = Column(String(100), nullable=False, index=True)

    # Ordered image URLs; order is display order
    images = Column(MutableList.as_mutable(JSON), nullable=False, default=list)

    created_by = Column(String(32), nullable=False, index=True)
    created_by_name = Column(String(100), nullable=False)
