"""
Location Resolver Service

Parses free-text location labels into structured keys and decides
whether a jurisdiction covers a worker's location.
"""

from functools import lru_cache

from engines.exceptions import InvalidLocationError
from engines.schemas.location import (
    FEDERAL_LABELS,
    STATE_NAME_LOOKUP,
    US_STATES,
    LocationKey,
)

COUNTY_SUFFIXES = (" COUNTY", " PARISH", " BOROUGH")


def resolve_state(text: str) -> str | None:
    """Return the postal code for a state name or code, or None."""
    candidate = " ".join(text.split()).upper()
    if candidate in US_STATES:
        return candidate
    return STATE_NAME_LOOKUP.get(candidate)


@lru_cache(maxsize=4096)
def parse_location(label: str) -> LocationKey:
    """
    Parse a location label into a LocationKey.

    Accepted shapes (case-insensitive, commas separate components):
        "Federal" / "US"                -> federal key
        "California" / "CA"             -> state
        "San Francisco, CA"             -> city + state
        "Los Angeles County, California" -> county + state
        "Seattle, King County, WA"      -> city + county + state

    A label whose last component is not a state stays unresolved (city
    only) so it can never match another state's rules by accident.
    """
    if label is None or not label.strip():
        raise InvalidLocationError(label or "")

    normalized = " ".join(label.split())
    if normalized.upper() in FEDERAL_LABELS:
        return LocationKey()

    parts = [part.strip() for part in normalized.split(",") if part.strip()]
    if not parts:
        raise InvalidLocationError(label)

    state = resolve_state(parts[-1])
    remaining = parts[:-1] if state else parts

    county = None
    city = None
    for part in remaining:
        if part.upper().endswith(COUNTY_SUFFIXES):
            county = county or part
        elif city is None:
            city = part

    return LocationKey(state=state, county=county, city=city)


def _same(a: str | None, b: str | None) -> bool:
    return a is not None and b is not None and a.casefold() == b.casefold()


def covers(jurisdiction: LocationKey, location: LocationKey) -> bool:
    """
    True if a jurisdiction's territory includes the location.

    Every component the jurisdiction defines must match the location's.
    Unresolved jurisdictions (city or county with no state) cover nothing
    here; callers fall back to exact label equality for those.
    """
    if jurisdiction.is_federal:
        return True
    if not jurisdiction.is_resolved:
        return False
    if jurisdiction.country != location.country:
        return False
    if jurisdiction.state != location.state:
        return False
    if jurisdiction.county is not None and not _same(jurisdiction.county, location.county):
        return False
    if jurisdiction.city is not None and not _same(jurisdiction.city, location.city):
        return False
    return True
