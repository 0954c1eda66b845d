"""
Worker Record Schemas

Wage and time records supplied by the worker directory.
"""

from datetime import date
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, model_validator


class WorkerWageRecord(BaseModel):
    """A worker's current hourly pay and work location."""

    model_config = ConfigDict(frozen=True)

    worker_id: str = Field(..., min_length=1, description="Unique worker identifier")
    name: str = Field(..., description="Display name")
    current_wage: Decimal = Field(..., ge=0, description="Current hourly rate")
    location: str = Field(..., description="Work location label")
    is_tipped: bool = Field(default=False, description="Paid a tipped cash wage")


class WorkerTimeRecord(BaseModel):
    """
    Hours worked by one worker over one pay period.

    ``daily_hours`` holds one entry per calendar day in the period, in
    order. ``total_hours`` is reported separately because it may include
    hours not attributed to a day (e.g. travel time).
    """

    model_config = ConfigDict(frozen=True)

    worker_id: str = Field(..., min_length=1)
    name: str | None = None
    location: str
    period_start: date
    period_end: date
    daily_hours: tuple[Decimal, ...] = Field(default_factory=tuple)
    total_hours: Decimal = Field(default=Decimal("0"), ge=0)
    overtime_hours_paid: Decimal = Field(default=Decimal("0"), ge=0)
    overtime_hours_compensated: Decimal = Field(
        default=Decimal("0"),
        ge=0,
        description="Overtime taken as compensatory time off (reported, not credited)",
    )
    hourly_rate: Decimal = Field(..., ge=0)
    job_category: str | None = Field(default=None, description="Matched against rule exemptions")

    @model_validator(mode="after")
    def _check_period(self) -> "WorkerTimeRecord":
        if self.period_end < self.period_start:
            raise ValueError("period_end must not be before period_start")
        if any(hours < 0 for hours in self.daily_hours):
            raise ValueError("daily_hours entries must be non-negative")
        return self
