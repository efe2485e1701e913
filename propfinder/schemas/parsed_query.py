from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field, model_validator


class ExactMatch(BaseModel):
    title: str
    location: str
    # Captured from the prompt but not used to filter
    price: Optional[int] = None

    class Config:
        frozen = True


class ParsedQuery(BaseModel):
    """Signals extracted from one search string. Built per call, never mutated."""

    exact_match: Optional[ExactMatch] = None
    bedrooms: Optional[int] = Field(default=None, ge=0)
    price_ceiling: Optional[Decimal] = Field(default=None, ge=0)  # base currency units
    location_phrase: Optional[str] = Field(default=None, min_length=1)

    class Config:
        frozen = True

    @model_validator(mode="after")
    def exact_match_is_exclusive(self):
        if self.exact_match is not None and any(
            v is not None for v in (self.bedrooms, self.price_ceiling, self.location_phrase)
        ):
            raise ValueError("exact_match cannot be combined with other signals")
        return self

    @property
    def is_empty(self) -> bool:
        return self.exact_match is None and all(
            v is None for v in (self.bedrooms, self.price_ceiling, self.location_phrase)
        )
