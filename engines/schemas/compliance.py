"""
Compliance Result Schemas

Outputs of the wage and overtime evaluators and the fleet-wide scan.
These are recomputed on every evaluation and never persisted here.
"""

from datetime import date, datetime
from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from engines.schemas.rates import OvertimeRule


class WageStatus(str, Enum):
    """Outcome of a minimum wage check."""

    COMPLIANT = "compliant"
    WARNING = "warning"
    VIOLATION = "violation"
    UNKNOWN = "unknown"


class OvertimeStatus(str, Enum):
    """Outcome of an overtime check that found money owed."""

    WARNING = "warning"
    VIOLATION = "violation"


class ViolationType(str, Enum):
    """Finding categories."""

    MINIMUM_WAGE = "minimum_wage"
    OVERTIME = "overtime"
    NEAR_MINIMUM = "near_minimum"
    UPCOMING_INCREASE = "upcoming_increase"
    EVALUATION_ERROR = "evaluation_error"


class Severity(str, Enum):
    """Finding severity, lowest first."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"

    @property
    def rank(self) -> int:
        return list(Severity).index(self)


class WageComplianceCheck(BaseModel):
    """Minimum wage check for one worker."""

    worker_id: str
    worker_name: str
    current_wage: Decimal
    minimum_required: Decimal | None = Field(
        ..., description="Binding rate: highest among applicable records"
    )
    jurisdiction: str | None = Field(..., description="Label of the binding record")
    status: WageStatus
    difference: Decimal | None = Field(..., description="current_wage - minimum_required")
    evaluated_at: datetime

    upcoming_rate: Decimal | None = Field(
        default=None, description="Highest scheduled increase inside the look-ahead window"
    )
    upcoming_effective_date: date | None = None
    notes: list[str] = Field(default_factory=list)

    @property
    def shortfall(self) -> Decimal:
        """Per-hour underpayment; zero when compliant or unknown."""
        if self.difference is None or self.difference >= 0:
            return Decimal("0")
        return -self.difference

    @property
    def upcoming_shortfall(self) -> Decimal:
        """Per-hour gap to a scheduled increase; zero when none applies."""
        if self.upcoming_rate is None or self.current_wage >= self.upcoming_rate:
            return Decimal("0")
        return self.upcoming_rate - self.current_wage


class OvertimeViolation(BaseModel):
    """Overtime owed to one worker for one period under one rule."""

    worker_id: str
    worker_name: str
    period_start: date
    period_end: date
    total_hours: Decimal
    overtime_hours: Decimal = Field(..., description="max(daily, weekly) overtime hours")
    overtime_hours_paid: Decimal
    amount_owed: Decimal
    status: OvertimeStatus
    rule: OvertimeRule

    daily_overtime_hours: Decimal = Decimal("0")
    weekly_overtime_hours: Decimal = Decimal("0")


class ComplianceFinding(BaseModel):
    """Aggregated summary of one violation category across the population."""

    violation_type: ViolationType
    severity: Severity
    affected_count: int
    affected_worker_ids: list[str] = Field(default_factory=list)
    description: str
    potential_penalty: Decimal = Decimal("0")
    recommendation: str


class ScanDiagnostic(BaseModel):
    """A per-worker evaluation failure recorded during a scan."""

    worker_id: str
    stage: str = Field(..., description="'wage' or 'overtime'")
    error_type: str
    message: str


class ScoreSnapshot(BaseModel):
    """One recorded point of the compliance score trend."""

    model_config = ConfigDict(frozen=True)

    recorded_at: datetime
    score: int
    total_violations: int
    employees_at_risk: int
    workers_evaluated: int
    rule_version: str


class ComplianceScanResult(BaseModel):
    """Fleet-wide compliance scan output."""

    overall_score: int = Field(..., ge=0, le=100)
    total_violations: int
    employees_at_risk: int
    total_underpayment: Decimal = Field(
        default=Decimal("0"),
        description="Wage shortfall x hours worked, summed over minimum wage violations",
    )
    findings: list[ComplianceFinding] = Field(default_factory=list)
    trend_data: list[ScoreSnapshot] = Field(default_factory=list)

    wage_checks: list[WageComplianceCheck] = Field(default_factory=list)
    overtime_violations: list[OvertimeViolation] = Field(default_factory=list)
    diagnostics: list[ScanDiagnostic] = Field(default_factory=list)
    workers_evaluated: int = 0
    rule_version: str
    scanned_at: datetime
