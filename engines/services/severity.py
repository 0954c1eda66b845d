"""
Finding Severity Table

Maps a violation type and its dollar exposure to a severity. Each type
has a base severity and optional escalation steps that apply once the
exposure reaches a threshold.
"""

from decimal import Decimal

from pydantic import BaseModel, Field

from engines.schemas.compliance import Severity, ViolationType


class SeverityStep(BaseModel):
    """Escalate to ``severity`` once exposure reaches ``min_exposure``."""

    min_exposure: Decimal = Field(..., ge=0)
    severity: Severity


class SeverityRule(BaseModel):
    """Severity policy for one violation type."""

    base: Severity
    steps: list[SeverityStep] = Field(default_factory=list)

    def resolve(self, exposure: Decimal) -> Severity:
        severity = self.base
        for step in sorted(self.steps, key=lambda s: s.min_exposure):
            if exposure >= step.min_exposure and step.severity.rank > severity.rank:
                severity = step.severity
        return severity


class SeverityTable(BaseModel):
    """Severity policy keyed by violation type."""

    rules: dict[ViolationType, SeverityRule]
    fallback: Severity = Severity.MEDIUM

    def severity_for(self, violation_type: ViolationType, exposure: Decimal = Decimal("0")) -> Severity:
        rule = self.rules.get(violation_type)
        if rule is None:
            return self.fallback
        return rule.resolve(exposure)


def default_severity_table() -> SeverityTable:
    """
    Default policy.

    Minimum wage findings start at 'high' and overtime findings at 'medium';
    both escalate with penalty exposure.
    """
    return SeverityTable(
        rules={
            ViolationType.MINIMUM_WAGE: SeverityRule(
                base=Severity.HIGH,
                steps=[SeverityStep(min_exposure=Decimal("10000"), severity=Severity.CRITICAL)],
            ),
            ViolationType.OVERTIME: SeverityRule(
                base=Severity.MEDIUM,
                steps=[
                    SeverityStep(min_exposure=Decimal("5000"), severity=Severity.HIGH),
                    SeverityStep(min_exposure=Decimal("25000"), severity=Severity.CRITICAL),
                ],
            ),
            ViolationType.NEAR_MINIMUM: SeverityRule(base=Severity.LOW),
            ViolationType.UPCOMING_INCREASE: SeverityRule(
                base=Severity.LOW,
                steps=[SeverityStep(min_exposure=Decimal("10000"), severity=Severity.MEDIUM)],
            ),
            ViolationType.EVALUATION_ERROR: SeverityRule(base=Severity.LOW),
        }
    )
