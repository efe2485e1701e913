from datetime import datetime
from decimal import Decimal
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, Field, field_validator


class PropertySearchRequest(BaseModel):
    query: str = Field(..., max_length=2000)

    class Config:
        json_schema_extra = {
            "example": {"query": "3 bhk in Bangalore under 1.5 crore"}
        }


class PropertyOut(BaseModel):
    id: UUID
    title: str
    description: Optional[str] = None
    location: str
    price_min: Decimal  # JSON carries amounts as decimal strings
    price_max: Optional[Decimal] = None
    bedrooms_min: int
    bedrooms_max: Optional[int] = None
    ai_overview: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class PropertySearchResponse(BaseModel):
    results: List[PropertyOut]


class PropertyUpdateRequest(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = None
    location: Optional[str] = Field(default=None, min_length=1, max_length=255)
    price_min: Optional[Decimal] = Field(default=None, ge=0)
    price_max: Optional[Decimal] = Field(default=None, ge=0)
    bedrooms_min: Optional[int] = Field(default=None, ge=0)
    bedrooms_max: Optional[int] = Field(default=None, ge=0)
    ai_overview: Optional[str] = None

    class Config:
        extra = "forbid"

    @field_validator("title", "location", "price_min", "bedrooms_min")
    def required_columns_not_null(cls, v, info):
        # May be omitted, but these columns are NOT NULL
        if v is None:
            raise ValueError(f"{info.field_name} cannot be null")
        return v


class AIOverviewResponse(BaseModel):
    property_id: UUID
    ai_overview: Optional[str] = None


class DetectedCityResponse(BaseModel):
    city: str
    detected: bool


class SupportedCitiesResponse(BaseModel):
    cities: List[str]
    default: str
