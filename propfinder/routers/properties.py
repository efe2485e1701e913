from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi_limiter.depends import RateLimiter
from structlog import get_logger

from propfinder.config import settings
from propfinder.dependencies.store import get_property_store
from propfinder.schemas.property_search import (
    AIOverviewResponse,
    DetectedCityResponse,
    PropertyOut,
    PropertySearchRequest,
    PropertySearchResponse,
    PropertyUpdateRequest,
    SupportedCitiesResponse,
)
from propfinder.services.locations import DEFAULT_CITY, INDIAN_CITIES, detect_city
from propfinder.services.property_search import search_properties
from propfinder.services.property_store import PropertyReadError, PropertyStore, PropertyStoreError

logger = get_logger()
router = APIRouter(prefix="/api/v1", tags=["properties"])

search_rate_limiter = RateLimiter(
    times=settings.SEARCH_RATE_LIMIT_TIMES,
    seconds=settings.SEARCH_RATE_LIMIT_SECONDS,
)


@router.post("/properties/search", response_model=PropertySearchResponse, dependencies=[Depends(search_rate_limiter)])
async def search(request: PropertySearchRequest, store: PropertyStore = Depends(get_property_store)):
    try:
        properties = await search_properties(request.query, store)
    except PropertyReadError as e:
        raise HTTPException(status_code=e.status_code, detail="Property search failed")
    return PropertySearchResponse(results=[PropertyOut.model_validate(p) for p in properties])


@router.get("/properties", response_model=List[PropertyOut])
async def list_properties(store: PropertyStore = Depends(get_property_store)):
    try:
        properties = await store.list_all()
    except PropertyReadError as e:
        raise HTTPException(status_code=e.status_code, detail="Could not load properties")
    return [PropertyOut.model_validate(p) for p in properties]


@router.get("/properties/{property_id}", response_model=PropertyOut)
async def get_property(property_id: UUID, store: PropertyStore = Depends(get_property_store)):
    try:
        prop = await store.get_by_id(property_id)
    except PropertyStoreError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    return PropertyOut.model_validate(prop)


@router.get("/properties/{property_id}/ai-overview", response_model=AIOverviewResponse)
async def get_ai_overview(property_id: UUID, store: PropertyStore = Depends(get_property_store)):
    try:
        overview = await store.get_ai_overview(property_id)
    except PropertyStoreError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    return AIOverviewResponse(property_id=property_id, ai_overview=overview)


@router.patch("/properties/{property_id}", response_model=PropertyOut)
async def update_property(
    property_id: UUID,
    request: PropertyUpdateRequest,
    store: PropertyStore = Depends(get_property_store),
):
    patch = request.model_dump(exclude_unset=True)
    if not patch:
        raise HTTPException(status_code=422, detail="No fields to update")
    try:
        prop = await store.update_by_id(property_id, patch)
    except PropertyStoreError as e:
        logger.error("Property update failed", property_id=str(property_id), error=e.message)
        raise HTTPException(status_code=e.status_code, detail=e.message)
    except ValueError as ve:
        raise HTTPException(status_code=422, detail=str(ve))
    return PropertyOut.model_validate(prop)


@router.get("/locations/cities", response_model=SupportedCitiesResponse)
async def supported_cities():
    return SupportedCitiesResponse(cities=INDIAN_CITIES, default=DEFAULT_CITY)


@router.get("/locations/detect", response_model=DetectedCityResponse)
async def detect_location(
    lat: float = Query(..., ge=-90, le=90),
    lon: float = Query(..., ge=-180, le=180),
):
    city, detected = await detect_city(lat, lon)
    return DetectedCityResponse(city=city, detected=detected)
