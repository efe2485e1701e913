from typing import List

from structlog import get_logger

from propfinder.models.property import Property
from propfinder.services.predicates import build_search_plan
from propfinder.services.property_store import PropertyReadError, PropertyStore
from propfinder.services.query_parser import parse_query

logger = get_logger(__name__)


def _describe(predicates) -> List[str]:
    return [f"{p.field} {p.operator.value} {p.value}" for p in predicates]


async def search_properties(query: str, store: PropertyStore) -> List[Property]:
    """
    Finds properties matching a free-form query.

    Exact references ("property "<title>" located at <place> priced at $<n>") look the
    listing up by title and, when nothing matches, retry once by location. Any other
    query becomes an AND of its bedroom, location and price signals with no retry.
    Store failures are logged with the branch that was running and re-raised.
    """
    parsed = parse_query(query)
    plan = build_search_plan(parsed)

    try:
        rows = await store.filter(plan.primary, plan.order_by)
    except PropertyReadError as e:
        logger.error("Property search failed", branch=plan.branch, predicates=_describe(plan.primary), error=e.message)
        raise

    if rows or plan.fallback is None:
        logger.info(
            "Property search executed",
            branch=plan.branch,
            predicates=_describe(plan.primary),
            unfiltered=parsed.is_empty,
            result_count=len(rows),
        )
        return rows

    logger.info("No title match, retrying by location", title=parsed.exact_match.title, location=parsed.exact_match.location)
    try:
        rows = await store.filter(plan.fallback, plan.order_by)
    except PropertyReadError as e:
        logger.error("Property search failed", branch="fallback", predicates=_describe(plan.fallback), error=e.message)
        raise

    logger.info("Property search executed", branch="fallback", predicates=_describe(plan.fallback), result_count=len(rows))
    return rows
