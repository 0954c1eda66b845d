"""
Dashboard Schemas

Read model consumed by dashboard, report and alerting layers.
"""

from datetime import datetime
from decimal import Decimal
from typing import Literal

from pydantic import BaseModel, Field

from engines.schemas.compliance import ComplianceFinding


class JurisdictionBreakdown(BaseModel):
    """Wage check outcomes for workers bound by one jurisdiction."""

    jurisdiction: str
    workers: int = 0
    violations: int = 0
    warnings: int = 0
    underpayment_per_hour: Decimal = Decimal("0")


class TrendPoint(BaseModel):
    recorded_at: datetime
    score: int
    total_violations: int


class ComplianceDashboard(BaseModel):
    """Summary of one compliance scan."""

    overall_score: int
    health: Literal["healthy", "needs_attention", "critical"]
    total_violations: int
    employees_at_risk: int
    workers_evaluated: int

    status_counts: dict[str, int] = Field(default_factory=dict)
    total_underpayment: Decimal = Decimal("0")
    total_overtime_owed: Decimal = Decimal("0")
    total_potential_penalty: Decimal = Field(
        default=Decimal("0"),
        description="Penalty exposure for current violations; excludes scheduled increases",
    )
    scheduled_increase_exposure: Decimal = Field(
        default=Decimal("0"),
        description="Exposure if pay is not raised before scheduled minimum wage increases",
    )

    jurisdictions: list[JurisdictionBreakdown] = Field(default_factory=list)
    top_findings: list[ComplianceFinding] = Field(default_factory=list)
    trend: list[TrendPoint] = Field(default_factory=list)

    diagnostics_count: int = 0
    rule_version: str
    scanned_at: datetime
