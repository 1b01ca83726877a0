"""
Read-only routes for the static province/district/city hierarchy.
"""
from fastapi import APIRouter
from typing import List
from app.core.exceptions import NotFound
from app.schemas.common import ResponseEnvelope
from app.schemas.location import DistrictCities, DistrictSummary, ProvinceDetail, ProvinceSummary
from app.services.location_service import get_district, get_province, list_provinces

router = APIRouter(prefix="/locations", tags=["locations"])


@router.get("/provinces", response_model=ResponseEnvelope[List[ProvinceSummary]], response_model_exclude_none=True)
async def get_provinces():
    """List all provinces."""
    provinces = [
        ProvinceSummary(id=str(p["id"]), name=p["name"], district_count=len(p["districts"]))
        for p in list_provinces()
    ]
    return ResponseEnvelope(count=len(provinces), data=provinces)


@router.get("/provinces/{province_id}", response_model=ResponseEnvelope[ProvinceDetail], response_model_exclude_none=True)
async def get_province_detail(province_id: str):
    """Get a province with its districts."""
    province = get_province(province_id)
    if not province:
        raise NotFound("Province not found")

    districts = [
        DistrictSummary(id=str(d["id"]), name=d["name"], city_count=len(d["cities"]))
        for d in province["districts"]
    ]
    return ResponseEnvelope(data=ProvinceDetail(id=str(province["id"]), name=province["name"], districts=districts))


@router.get("/districts/{district_id}/cities", response_model=ResponseEnvelope[DistrictCities], response_model_exclude_none=True)
async def get_district_cities(district_id: str):
    """Get the cities of a district."""
    district = get_district(district_id)
    if not district:
        raise NotFound("District not found")

    province = district["province"]
    return ResponseEnvelope(
        count=len(district["cities"]),
        data=DistrictCities(
            id=str(district["id"]),
            name=district["name"],
            province_id=str(province["id"]),
            province_name=province["name"],
            cities=district["cities"],
        )
    )
