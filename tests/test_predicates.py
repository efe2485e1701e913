from decimal import Decimal

import pytest
from sqlalchemy.dialects import postgresql

from propfinder.services.predicates import (
    NEWEST_FIRST,
    Operator,
    OrderBy,
    Predicate,
    build_search_plan,
    to_base_units,
)
from propfinder.services.property_store import build_filter_statement
from propfinder.services.query_parser import parse_query


def compile_pg(stmt):
    return stmt.compile(dialect=postgresql.dialect())


def test_exact_reference_plan():
    plan = build_search_plan(parse_query('property "Lake View Villa" located at Pune priced at $5000000'))
    assert plan.branch == "exact"
    assert plan.primary == (Predicate("title", Operator.SUBSTRING_CI, "Lake View Villa"),)
    assert plan.fallback == (Predicate("location", Operator.SUBSTRING_CI, "Pune"),)
    assert plan.order_by == OrderBy("created_at", "desc")


def test_signals_plan_is_anded_without_fallback():
    plan = build_search_plan(parse_query("3 bhk in Bangalore under 1.5 crore"))
    assert plan.branch == "signals"
    assert plan.primary == (
        Predicate("bedrooms_min", Operator.EQUALS, 3),
        Predicate("location", Operator.SUBSTRING_CI, "Bangalore"),
        Predicate("price_min", Operator.LTE, Decimal("15000000")),
    )
    assert plan.fallback is None


def test_empty_plan_for_unrecognized_query():
    plan = build_search_plan(parse_query("flat near the beach"))
    assert plan.primary == ()
    assert plan.fallback is None
    assert plan.order_by == NEWEST_FIRST


def test_location_predicate_omitted_when_absent():
    plan = build_search_plan(parse_query("2bhk for 50 lakh"))
    assert plan.primary == (
        Predicate("bedrooms_min", Operator.EQUALS, 2),
        Predicate("price_min", Operator.LTE, Decimal("5000000")),
    )


@pytest.mark.parametrize(
    "amount,unit,expected",
    [
        ("1.5", "crore", Decimal("15000000")),
        ("50", "lakh", Decimal("5000000")),
        ("25", "K", Decimal("25000")),
        ("2", "million", Decimal("2000000")),
    ],
)
def test_to_base_units(amount, unit, expected):
    assert to_base_units(Decimal(amount), unit) == expected


@pytest.mark.parametrize("unit", ["lac", "cr", "", None, "billion"])
def test_unknown_unit_has_no_ceiling(unit):
    assert to_base_units(Decimal("5"), unit) is None


def test_filter_statement_for_signals():
    plan = build_search_plan(parse_query("3 bhk in Bangalore under 1.5 crore"))
    compiled = compile_pg(build_filter_statement(plan.primary, plan.order_by))
    sql = str(compiled)
    assert "properties.bedrooms_min = " in sql
    assert "properties.location ILIKE " in sql
    assert "properties.price_min <= " in sql
    assert " AND " in sql
    assert sql.rstrip().endswith("ORDER BY properties.created_at DESC")
    params = list(compiled.params.values())
    assert 3 in params
    assert "%Bangalore%" in params
    assert Decimal("15000000") in params


def test_filter_statement_for_title():
    plan = build_search_plan(parse_query('property "Lake View Villa" located at Pune priced at $5000000'))
    compiled = compile_pg(build_filter_statement(plan.primary, plan.order_by))
    assert "properties.title ILIKE " in str(compiled)
    assert "%Lake View Villa%" in compiled.params.values()


def test_filter_statement_escapes_like_wildcards():
    compiled = compile_pg(build_filter_statement((Predicate("title", Operator.SUBSTRING_CI, "100%_pure"),)))
    assert "%100\\%\\_pure%" in compiled.params.values()


def test_empty_filter_statement_returns_everything_newest_first():
    sql = str(compile_pg(build_filter_statement((), NEWEST_FIRST)))
    assert "WHERE" not in sql
    assert "ORDER BY properties.created_at DESC" in sql


def test_filter_statement_rejects_unknown_field():
    with pytest.raises(ValueError):
        build_filter_statement((Predicate("ai_overview", Operator.EQUALS, "x"),))
