"""
Dashboard Data Assembler

Shapes a ComplianceScanResult into the dashboard read model.
"""

from decimal import Decimal

from engines.config import get_settings
from engines.schemas.compliance import ComplianceScanResult, ViolationType, WageStatus
from engines.schemas.dashboard import ComplianceDashboard, JurisdictionBreakdown, TrendPoint
from engines.services.compliance_scanner import binding_violations

HEALTHY_SCORE = 90
ATTENTION_SCORE = 70


def health_band(score: int) -> str:
    """Map a score to a dashboard health band."""
    if score >= HEALTHY_SCORE:
        return "healthy"
    if score >= ATTENTION_SCORE:
        return "needs_attention"
    return "critical"


def build_dashboard(result: ComplianceScanResult, top_findings: int | None = None) -> ComplianceDashboard:
    """
    Build the dashboard read model from a scan result.

    Args:
        result: Output of ComplianceScanner.scan
        top_findings: How many ranked findings to include (defaults to settings)

    Returns:
        ComplianceDashboard
    """
    if top_findings is None:
        top_findings = get_settings().dashboard_top_findings

    status_counts = {status.value: 0 for status in WageStatus}
    breakdown: dict[str, JurisdictionBreakdown] = {}
    for check in result.wage_checks:
        status_counts[check.status.value] += 1
        label = check.jurisdiction or "Unresolved"
        row = breakdown.setdefault(label, JurisdictionBreakdown(jurisdiction=label))
        row.workers += 1
        if check.status == WageStatus.VIOLATION:
            row.violations += 1
            row.underpayment_per_hour += check.shortfall
        elif check.status == WageStatus.WARNING:
            row.warnings += 1

    owed = sum(
        (v.amount_owed for v in binding_violations(result.overtime_violations)),
        Decimal("0"),
    )
    penalty = sum(
        (f.potential_penalty for f in result.findings if f.violation_type != ViolationType.UPCOMING_INCREASE),
        Decimal("0"),
    )
    scheduled = sum(
        (f.potential_penalty for f in result.findings if f.violation_type == ViolationType.UPCOMING_INCREASE),
        Decimal("0"),
    )

    jurisdictions = sorted(
        breakdown.values(),
        key=lambda row: (-row.violations, -row.warnings, row.jurisdiction),
    )

    return ComplianceDashboard(
        overall_score=result.overall_score,
        health=health_band(result.overall_score),
        total_violations=result.total_violations,
        employees_at_risk=result.employees_at_risk,
        workers_evaluated=result.workers_evaluated,
        status_counts=status_counts,
        total_underpayment=result.total_underpayment,
        total_overtime_owed=owed,
        total_potential_penalty=penalty,
        scheduled_increase_exposure=scheduled,
        jurisdictions=jurisdictions,
        top_findings=result.findings[:top_findings],
        trend=[
            TrendPoint(
                recorded_at=snap.recorded_at,
                score=snap.score,
                total_violations=snap.total_violations,
            )
            for snap in result.trend_data
        ],
        diagnostics_count=len(result.diagnostics),
        rule_version=result.rule_version,
        scanned_at=result.scanned_at,
    )
