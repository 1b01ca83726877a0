"""
Pydantic schemas for Experience entity.
"""
from pydantic import ConfigDict, Field
from typing import List, Optional
from datetime import datetime
from app.schemas.common import CamelModel


class ExperienceBase(CamelModel):
    """Location ids arrive as strings or numbers from the client; both are stored as strings."""
    model_config = ConfigDict(coerce_numbers_to_str=True, str_strip_whitespace=True)


class ExperienceCreate(ExperienceBase):
    """Schema for experience creation. Author fields are never accepted."""
    title: str = Field(min_length=1, max_length=200)
    description: str = Field(min_length=1)
    province_id: str = Field(min_length=1, max_length=20)
    province_name: str = Field(min_length=1, max_length=100)
    district_id: str = Field(min_length=1, max_length=20)
    district_name: str = Field(min_length=1, max_length=100)
    city_name: str = Field(min_length=1, max_length=100)
    images: List[str] = []


class ExperienceUpdate(ExperienceBase):
    """Partial update. Omitted fields are left as they are."""
    title: Optional[str] = Field(default=None, min_length=1, max_length=200)
    description: Optional[str] = Field(default=None, min_length=1)
    province_id: Optional[str] = Field(default=None, min_length=1, max_length=20)
    province_name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    district_id: Optional[str] = Field(default=None, min_length=1, max_length=20)
    district_name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    city_name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    images: Optional[List[str]] = None


class ExperienceFilters(CamelModel):
    """Equality filters for listing; unset filters are not constraints."""
    province_id: Optional[str] = None
    district_id: Optional[str] = None
    city_name: Optional[str] = None


class ExperienceResponse(CamelModel):
    """Schema for experience response."""
    id: str
    title: str
    description: str
    province_id: str
    province_name: str
    district_id: str
    district_name: str
    city_name: str
    images: List[str] = []
    created_by: str
    created_by_name: str
    created_at: datetime
    updated_at: datetime
