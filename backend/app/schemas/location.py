"""
Pydantic schemas for the province/district/city hierarchy.
"""
from typing import List
from app.schemas.common import CamelModel


class DistrictSummary(CamelModel):
    id: str
    name: str
    city_count: int


class ProvinceSummary(CamelModel):
    id: str
    name: str
    district_count: int


class ProvinceDetail(CamelModel):
    id: str
    name: str
    districts: List[DistrictSummary]


class DistrictCities(CamelModel):
    id: str
    name: str
    province_id: str
    province_name: str
    cities: List[str]
