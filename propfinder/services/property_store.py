import uuid
from typing import Iterable, List, Optional, Union

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import Select
from structlog import get_logger

from propfinder.models.property import Property
from propfinder.services.predicates import NEWEST_FIRST, Operator, OrderBy, Predicate

logger = get_logger(__name__)

FILTERABLE_FIELDS = ("id", "title", "location", "price_min", "price_max", "bedrooms_min", "bedrooms_max", "created_at")

PropertyId = Union[uuid.UUID, str]


class PropertyStoreError(Exception):
    """Base class for record store failures. status_code is what the API answers with."""

    status_code = 500

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class PropertyReadError(PropertyStoreError):
    status_code = 503


class PropertyWriteError(PropertyStoreError):
    status_code = 500


class PropertyNotFoundError(PropertyStoreError):
    status_code = 404

    def __init__(self, property_id: PropertyId):
        super().__init__(f"Property with id {property_id} not found")
        self.property_id = property_id


def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def predicate_clause(predicate: Predicate):
    if predicate.field not in FILTERABLE_FIELDS:
        raise ValueError(f"Cannot filter on field {predicate.field!r}")
    column = getattr(Property, predicate.field)
    if predicate.operator == Operator.EQUALS:
        return column == predicate.value
    if predicate.operator == Operator.SUBSTRING_CI:
        return column.ilike(f"%{_escape_like(str(predicate.value))}%", escape="\\")
    if predicate.operator == Operator.LTE:
        return column <= predicate.value
    raise ValueError(f"Unsupported operator {predicate.operator!r}")


def build_filter_statement(predicates: Iterable[Predicate] = (), order_by: OrderBy = NEWEST_FIRST) -> Select:
    stmt = select(Property)
    clauses = [predicate_clause(p) for p in predicates]
    if clauses:
        stmt = stmt.where(*clauses)
    if order_by.field not in FILTERABLE_FIELDS:
        raise ValueError(f"Cannot order by field {order_by.field!r}")
    column = getattr(Property, order_by.field)
    return stmt.order_by(column.desc() if order_by.direction == "desc" else column.asc())


def _coerce_id(property_id: PropertyId) -> uuid.UUID:
    if isinstance(property_id, uuid.UUID):
        return property_id
    try:
        return uuid.UUID(str(property_id))
    except ValueError:
        raise PropertyNotFoundError(property_id) from None


class PropertyStore:
    """Reads and writes rows of the properties table through one AsyncSession."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def filter(self, predicates: Iterable[Predicate] = (), order_by: OrderBy = NEWEST_FIRST) -> List[Property]:
        predicates = tuple(predicates)
        stmt = build_filter_statement(predicates, order_by)
        try:
            result = await self.session.execute(stmt)
        except SQLAlchemyError as e:
            logger.error("Property read failed", predicates=[tuple(p) for p in predicates], error=str(e))
            raise PropertyReadError(f"Property read failed: {e}") from e
        return list(result.scalars().all())

    async def list_all(self) -> List[Property]:
        return await self.filter((), NEWEST_FIRST)

    async def get_by_id(self, property_id: PropertyId) -> Property:
        pk = _coerce_id(property_id)
        stmt = select(Property).where(Property.id == pk).execution_options(populate_existing=True)
        try:
            result = await self.session.execute(stmt)
        except SQLAlchemyError as e:
            logger.error("Property read failed", property_id=str(pk), error=str(e))
            raise PropertyReadError(f"Property read failed: {e}") from e
        prop = result.scalar_one_or_none()
        if prop is None:
            raise PropertyNotFoundError(property_id)
        return prop

    async def get_ai_overview(self, property_id: PropertyId) -> Optional[str]:
        pk = _coerce_id(property_id)
        try:
            result = await self.session.execute(select(Property.ai_overview).where(Property.id == pk))
        except SQLAlchemyError as e:
            logger.error("AI overview read failed", property_id=str(pk), error=str(e))
            raise PropertyReadError(f"Property read failed: {e}") from e
        row = result.one_or_none()
        if row is None:
            raise PropertyNotFoundError(property_id)
        return row[0] or None

    async def update_by_id(self, property_id: PropertyId, patch: dict) -> Property:
        unknown = set(patch) - set(Property.UPDATABLE_FIELDS)
        if unknown:
            raise ValueError(f"Cannot update fields: {', '.join(sorted(unknown))}")

        prop = await self.get_by_id(property_id)
        # rollback expires prop, so its key is read up front
        pk = prop.id
        for field, value in patch.items():
            setattr(prop, field, value)
        try:
            await self.session.commit()
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error("Property update failed", property_id=str(pk), fields=sorted(patch), error=str(e))
            raise PropertyWriteError(f"Property update failed: {e}") from e

        logger.info("Property updated", property_id=str(pk), fields=sorted(patch))
        return await self.get_by_id(pk)
