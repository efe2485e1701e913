import uuid
from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from propfinder.dependencies.store import get_property_store
from propfinder.main import app
from propfinder.models.property import Property
from propfinder.routers.properties import search_rate_limiter
from propfinder.services.predicates import NEWEST_FIRST, Operator
from propfinder.services.property_store import PropertyNotFoundError, PropertyReadError

BASE_TIME = datetime(2024, 1, 1, tzinfo=timezone.utc)


def make_property(title, location, price_min, bedrooms_min, days=0, **extra):
    return Property(
        id=extra.pop("id", uuid.uuid4()),
        title=title,
        location=location,
        price_min=Decimal(str(price_min)),
        bedrooms_min=bedrooms_min,
        created_at=BASE_TIME + timedelta(days=days),
        updated_at=BASE_TIME + timedelta(days=days),
        **extra,
    )


def _matches(prop, predicate):
    value = getattr(prop, predicate.field)
    if predicate.operator == Operator.EQUALS:
        return value == predicate.value
    if predicate.operator == Operator.SUBSTRING_CI:
        return str(predicate.value).lower() in (value or "").lower()
    if predicate.operator == Operator.LTE:
        return value is not None and value <= predicate.value
    raise ValueError(predicate.operator)


class FakePropertyStore:
    """In-memory stand-in for PropertyStore that records every filter call."""

    def __init__(self, rows=None, fail_on_call=None):
        self.rows = list(rows or [])
        self.calls = []
        self.fail_on_call = fail_on_call

    async def filter(self, predicates=(), order_by=NEWEST_FIRST):
        self.calls.append(tuple(predicates))
        if self.fail_on_call is not None and len(self.calls) == self.fail_on_call:
            raise PropertyReadError("connection refused")
        rows = [r for r in self.rows if all(_matches(r, p) for p in predicates)]
        return sorted(rows, key=lambda r: getattr(r, order_by.field), reverse=order_by.direction == "desc")

    async def list_all(self):
        return await self.filter()

    async def get_by_id(self, property_id):
        for r in self.rows:
            if str(r.id) == str(property_id):
                return r
        raise PropertyNotFoundError(property_id)

    async def get_ai_overview(self, property_id):
        prop = await self.get_by_id(property_id)
        return prop.ai_overview or None

    async def update_by_id(self, property_id, patch):
        unknown = set(patch) - set(Property.UPDATABLE_FIELDS)
        if unknown:
            raise ValueError(f"Cannot update fields: {', '.join(sorted(unknown))}")
        prop = await self.get_by_id(property_id)
        for field, value in patch.items():
            setattr(prop, field, value)
        return prop


@pytest.fixture
def catalog():
    return [
        make_property("Lake View Villa", "Koregaon Park, Pune", 4_500_000, 3, days=1, ai_overview="Quiet lakeside villa."),
        make_property("Skyline Heights", "Whitefield, Bangalore", 14_000_000, 3, days=5),
        make_property("Palm Residency", "Indiranagar, Bangalore", 16_000_000, 3, days=3),
        make_property("Green Acres", "Baner, Pune", 4_800_000, 2, days=4),
        make_property("Harbour Nest", "Bandra, Mumbai", 25_000_000, 2, days=2),
    ]


@pytest.fixture
def fake_store(catalog):
    return FakePropertyStore(catalog)


@pytest_asyncio.fixture
async def client(fake_store):
    app.dependency_overrides[get_property_store] = lambda: fake_store
    app.dependency_overrides[search_rate_limiter] = lambda: None
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()
