"""
Location Schemas

Structured jurisdiction keys used to resolve which wage and overtime
records apply to a worker's location.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class JurisdictionLevel(str, Enum):
    """Governmental level issuing a wage or overtime requirement."""

    FEDERAL = "federal"
    STATE = "state"
    COUNTY = "county"
    LOCAL = "local"

    @property
    def precedence(self) -> int:
        """Higher value means a more specific jurisdiction."""
        return _PRECEDENCE[self]


_PRECEDENCE = {
    JurisdictionLevel.FEDERAL: 0,
    JurisdictionLevel.STATE: 1,
    JurisdictionLevel.COUNTY: 2,
    JurisdictionLevel.LOCAL: 3,
}


class LocationKey(BaseModel):
    """
    Structured location: country, state, county, city.

    A key with only ``country`` set is the federal jurisdiction. City and
    county names are kept as written; comparisons are case-insensitive.
    """

    model_config = ConfigDict(frozen=True)

    country: str = Field(default="US", description="ISO country code")
    state: str | None = Field(default=None, description="Two-letter postal code")
    county: str | None = None
    city: str | None = None

    @property
    def is_federal(self) -> bool:
        return self.state is None and self.county is None and self.city is None

    @property
    def is_resolved(self) -> bool:
        """False when a city or county could not be tied to a state."""
        return self.state is not None or self.is_federal

    def label(self) -> str:
        """Human-readable label, most specific component first."""
        if self.is_federal:
            return "Federal"
        parts = [p for p in (self.city, self.county, self.state) if p]
        return ", ".join(parts)


FEDERAL_LABELS = frozenset({"FEDERAL", "US", "USA", "UNITED STATES", "FLSA"})

# Postal code -> state name (50 states + DC)
US_STATES: dict[str, str] = {
    "AL": "Alabama",
    "AK": "Alaska",
    "AZ": "Arizona",
    "AR": "Arkansas",
    "CA": "California",
    "CO": "Colorado",
    "CT": "Connecticut",
    "DE": "Delaware",
    "DC": "District of Columbia",
    "FL": "Florida",
    "GA": "Georgia",
    "HI": "Hawaii",
    "ID": "Idaho",
    "IL": "Illinois",
    "IN": "Indiana",
    "IA": "Iowa",
    "KS": "Kansas",
    "KY": "Kentucky",
    "LA": "Louisiana",
    "ME": "Maine",
    "MD": "Maryland",
    "MA": "Massachusetts",
    "MI": "Michigan",
    "MN": "Minnesota",
    "MS": "Mississippi",
    "MO": "Missouri",
    "MT": "Montana",
    "NE": "Nebraska",
    "NV": "Nevada",
    "NH": "New Hampshire",
    "NJ": "New Jersey",
    "NM": "New Mexico",
    "NY": "New York",
    "NC": "North Carolina",
    "ND": "North Dakota",
    "OH": "Ohio",
    "OK": "Oklahoma",
    "OR": "Oregon",
    "PA": "Pennsylvania",
    "RI": "Rhode Island",
    "SC": "South Carolina",
    "SD": "South Dakota",
    "TN": "Tennessee",
    "TX": "Texas",
    "UT": "Utah",
    "VT": "Vermont",
    "VA": "Virginia",
    "WA": "Washington",
    "WV": "West Virginia",
    "WI": "Wisconsin",
    "WY": "Wyoming",
}

# Upper-cased state name -> postal code
STATE_NAME_LOOKUP: dict[str, str] = {name.upper(): code for code, name in US_STATES.items()}
