from decimal import Decimal
from enum import Enum
from typing import Any, NamedTuple, Optional, Tuple

from propfinder.schemas.parsed_query import ParsedQuery

# amount * multiplier = base currency units
PRICE_UNIT_MULTIPLIERS = {
    "crore": Decimal(10_000_000),
    "lakh": Decimal(100_000),
    "k": Decimal(1_000),
    "million": Decimal(1_000_000),
}


class Operator(str, Enum):
    EQUALS = "equals"
    SUBSTRING_CI = "substring-ci"
    LTE = "lte"


class Predicate(NamedTuple):
    field: str
    operator: Operator
    value: Any


class OrderBy(NamedTuple):
    field: str
    direction: str = "desc"


NEWEST_FIRST = OrderBy("created_at", "desc")


class SearchPlan(NamedTuple):
    primary: Tuple[Predicate, ...]
    # Only set for exact references; tried once when the primary read is empty
    fallback: Optional[Tuple[Predicate, ...]]
    order_by: OrderBy
    branch: str


def to_base_units(amount, unit: str) -> Optional[Decimal]:
    multiplier = PRICE_UNIT_MULTIPLIERS.get((unit or "").lower())
    if multiplier is None:
        return None
    return Decimal(str(amount)) * multiplier


def build_predicates(parsed: ParsedQuery) -> Tuple[Predicate, ...]:
    """
    Primary predicate set for a parsed query, combined with AND by the store.

    An exact reference filters on title alone; location is kept for the fallback.
    """
    if parsed.exact_match is not None:
        return (Predicate("title", Operator.SUBSTRING_CI, parsed.exact_match.title),)

    predicates = []
    if parsed.bedrooms is not None:
        predicates.append(Predicate("bedrooms_min", Operator.EQUALS, parsed.bedrooms))
    if parsed.location_phrase:
        predicates.append(Predicate("location", Operator.SUBSTRING_CI, parsed.location_phrase))
    if parsed.price_ceiling is not None:
        predicates.append(Predicate("price_min", Operator.LTE, parsed.price_ceiling))
    return tuple(predicates)


def fallback_predicates(parsed: ParsedQuery) -> Optional[Tuple[Predicate, ...]]:
    """Single relaxation step: drop the title, match the referenced location instead."""
    if parsed.exact_match is None:
        return None
    return (Predicate("location", Operator.SUBSTRING_CI, parsed.exact_match.location),)


def build_search_plan(parsed: ParsedQuery) -> SearchPlan:
    return SearchPlan(
        primary=build_predicates(parsed),
        fallback=fallback_predicates(parsed),
        order_by=NEWEST_FIRST,
        branch="exact" if parsed.exact_match is not None else "signals",
    )
