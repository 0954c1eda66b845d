"""
Rate & Rule Schemas

Minimum wage and overtime records issued by federal, state, county and
local jurisdictions. Records are immutable: a change in law is a new
record with a later effective date.
"""

from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, model_validator

from engines.schemas.location import JurisdictionLevel, LocationKey
from engines.services.location_resolver import parse_location


class _JurisdictionRecord(BaseModel):
    """Fields shared by every jurisdiction-issued record."""

    model_config = ConfigDict(frozen=True)

    jurisdiction: JurisdictionLevel = Field(..., description="Issuing level")
    location: str = Field(..., min_length=1, description="Jurisdiction label, e.g. 'California'")
    effective_date: date

    @property
    def location_key(self) -> LocationKey:
        """Structured key for this record's territory."""
        if self.jurisdiction == JurisdictionLevel.FEDERAL:
            return LocationKey()
        return parse_location(self.location)

    @property
    def identity(self) -> tuple[str, LocationKey]:
        """Records sharing an identity supersede one another by effective date."""
        return self.jurisdiction.value, self.location_key


class MinimumWageRate(_JurisdictionRecord):
    """
    A minimum hourly wage issued by one jurisdiction.

    ``tipped_rate`` is the cash wage floor for tipped workers where the
    jurisdiction allows a tip credit.
    """

    rate: Decimal = Field(..., gt=0, description="Minimum hourly wage")
    next_increase_date: date | None = None
    next_increase_rate: Decimal | None = Field(default=None, gt=0)
    tipped_rate: Decimal | None = Field(default=None, gt=0)

    @model_validator(mode="after")
    def _check_increase(self) -> "MinimumWageRate":
        if (self.next_increase_date is None) != (self.next_increase_rate is None):
            raise ValueError("next_increase_date and next_increase_rate must be set together")
        if self.next_increase_date is not None and self.next_increase_date <= self.effective_date:
            raise ValueError("next_increase_date must be after effective_date")
        return self

    def required_rate(self, is_tipped: bool = False) -> Decimal:
        """Rate this record requires for a worker."""
        if is_tipped and self.tipped_rate is not None:
            return self.tipped_rate
        return self.rate


class OvertimeRule(_JurisdictionRecord):
    """
    An overtime requirement issued by one jurisdiction.

    Federal rules define only a weekly threshold; some states add a
    daily threshold (e.g. California, 8 hours).
    """

    daily_threshold: Decimal | None = Field(default=None, gt=0)
    weekly_threshold: Decimal = Field(..., gt=0)
    multiplier: Decimal = Field(default=Decimal("1.5"), gt=1)
    exempt_categories: tuple[str, ...] = Field(default_factory=tuple)

    def exempts(self, job_category: str | None) -> bool:
        """True if the job category is exempt from this rule."""
        if not job_category:
            return False
        wanted = job_category.casefold()
        return any(category.casefold() == wanted for category in self.exempt_categories)


class RuleSnapshot(BaseModel):
    """
    Versioned, immutable set of rates and rules for one evaluation pass.

    ``version`` is a content hash, so two snapshots with the same records
    carry the same version.
    """

    model_config = ConfigDict(frozen=True)

    version: str
    rates: tuple[MinimumWageRate, ...] = Field(default_factory=tuple)
    rules: tuple[OvertimeRule, ...] = Field(default_factory=tuple)
    taken_at: datetime
