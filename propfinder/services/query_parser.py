"""
Turns a free-form property query into a ParsedQuery.

Two extraction modes exist and they never mix:

* an exact reference to one listing, as produced by contextual follow-up
  prompts: ``property "<title>" located at <location> priced at $<amount>``
* independent signals found anywhere in the text: ``<n> bhk``,
  ``<amount> crore|lakh|k|million`` and ``in <place>``.

Nothing here raises on bad input; a signal that is not found is simply absent.
"""
import re
from decimal import Decimal
from typing import Callable, List, Optional, Tuple

from propfinder.schemas.parsed_query import ExactMatch, ParsedQuery
from propfinder.services.predicates import to_base_units

EXACT_REFERENCE_RE = re.compile(
    r'property "(?P<title>[^"]+)" located at (?P<location>[^"]+) priced at \$(?P<price>\d+)',
    re.IGNORECASE,
)
BEDROOMS_RE = re.compile(r"(?P<bedrooms>\d+)\s*bhk", re.IGNORECASE)
PRICE_RE = re.compile(
    r"(?P<amount>\d+(?:\.\d+)?)\s*(?P<unit>crore|lakh|k|million)s?\b",
    re.IGNORECASE,
)
# Connectives that end a location phrase ("in Pune under 50 lakh" -> "Pune")
LOCATION_STOP_WORDS = (
    "under", "below", "within", "upto", "up to", "for", "with", "near", "around",
    "less", "above", "over", "between", "budget", "priced", "price", "at", "from", "in",
)
LOCATION_RE = re.compile(
    r"\bin\s+(?P<location>[a-z][a-z\s,]*?)"
    r"(?=\s*(?:\b(?:" + "|".join(w.replace(" ", r"\s+") for w in LOCATION_STOP_WORDS) + r")\b"
    r"|[^a-z\s,]|$))",
    re.IGNORECASE,
)


def extract_exact_reference(text: str) -> Optional[ExactMatch]:
    match = EXACT_REFERENCE_RE.search(text)
    if not match:
        return None
    return ExactMatch(
        title=match.group("title"),
        location=match.group("location"),
        price=int(match.group("price")),
    )


def extract_bedrooms(text: str) -> Optional[int]:
    match = BEDROOMS_RE.search(text)
    return int(match.group("bedrooms")) if match else None


def extract_price(text: str) -> Optional[Tuple[Decimal, str]]:
    """Return the first ``(amount, unit)`` pair in the text, unit lower-cased."""
    match = PRICE_RE.search(text)
    if not match:
        return None
    return Decimal(match.group("amount")), match.group("unit").lower()


def extract_price_ceiling(text: str) -> Optional[Decimal]:
    price = extract_price(text)
    if price is None:
        return None
    return to_base_units(*price)


def extract_location(text: str) -> Optional[str]:
    match = LOCATION_RE.search(text)
    if not match:
        return None
    phrase = match.group("location").strip(" \t\r\n,")
    return phrase or None


# Each extractor fills one ParsedQuery field
SIGNAL_EXTRACTORS: List[Tuple[str, Callable[[str], object]]] = [
    ("bedrooms", extract_bedrooms),
    ("price_ceiling", extract_price_ceiling),
    ("location_phrase", extract_location),
]


def parse_query(query: Optional[str]) -> ParsedQuery:
    text = query or ""

    exact_match = extract_exact_reference(text)
    if exact_match is not None:
        return ParsedQuery(exact_match=exact_match)

    signals = {name: extractor(text) for name, extractor in SIGNAL_EXTRACTORS}
    return ParsedQuery(**signals)
