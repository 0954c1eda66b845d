"""
Overtime Compliance Evaluator

Computes overtime owed for one worker-period under every applicable
overtime rule.

Per rule:
1. Daily overtime = sum of hours above the daily threshold on each day
   (only when the rule defines a daily threshold)
2. Weekly overtime = hours above the weekly threshold for the period
3. Overtime hours = max(daily, weekly). The two are never added: the same
   excess hours cannot be owed twice under both triggers.
4. Amount owed = (overtime hours - overtime already paid)
   x hourly rate x (multiplier - 1)
5. Exact amounts above the tolerance produce a violation entry; above the
   violation threshold it is a 'violation', otherwise a 'warning'.

Rules are evaluated independently. Picking the single largest obligation
for a worker-period is left to the caller (see binding_violation).
"""

import logging
from collections.abc import Iterable
from decimal import ROUND_HALF_UP, Decimal

from engines.config import Settings, get_settings
from engines.exceptions import NoApplicableRuleError
from engines.schemas.compliance import OvertimeStatus, OvertimeViolation
from engines.schemas.rates import OvertimeRule
from engines.schemas.workers import WorkerTimeRecord
from engines.services.rate_repository import RateRuleRepository

logger = logging.getLogger(__name__)

ZERO = Decimal("0")
CENTS = Decimal("0.01")


def daily_overtime_hours(daily_hours: Iterable[Decimal], daily_threshold: Decimal | None) -> Decimal:
    """Sum of hours above the daily threshold; zero if the rule has none."""
    if daily_threshold is None:
        return ZERO
    return sum((max(ZERO, day - daily_threshold) for day in daily_hours), ZERO)


def weekly_overtime_hours(total_hours: Decimal, weekly_threshold: Decimal) -> Decimal:
    """Hours above the weekly threshold."""
    return max(ZERO, total_hours - weekly_threshold)


def overtime_hours_for_rule(record: WorkerTimeRecord, rule: OvertimeRule) -> tuple[Decimal, Decimal, Decimal]:
    """
    Return (daily, weekly, owed) overtime hours for one rule.

    owed is the larger of the two triggers, never their sum.
    """
    daily = daily_overtime_hours(record.daily_hours, rule.daily_threshold)
    weekly = weekly_overtime_hours(record.total_hours, rule.weekly_threshold)
    return daily, weekly, max(daily, weekly)


def unpaid_premium(
    overtime_hours: Decimal,
    overtime_hours_paid: Decimal,
    hourly_rate: Decimal,
    multiplier: Decimal,
) -> Decimal:
    """Exact unpaid overtime premium in dollars. May be negative."""
    return (overtime_hours - overtime_hours_paid) * hourly_rate * (multiplier - 1)


def amount_owed(
    overtime_hours: Decimal,
    overtime_hours_paid: Decimal,
    hourly_rate: Decimal,
    multiplier: Decimal,
) -> Decimal:
    """Unpaid overtime premium rounded half-up to cents, for reporting."""
    premium = unpaid_premium(overtime_hours, overtime_hours_paid, hourly_rate, multiplier)
    return premium.quantize(CENTS, rounding=ROUND_HALF_UP)


def binding_violation(violations: Iterable[OvertimeViolation]) -> OvertimeViolation | None:
    """
    The violation with the largest obligation for one worker-period.

    Ties go to the more specific jurisdiction (local over state over federal).
    """
    violations = list(violations)
    if not violations:
        return None
    return max(violations, key=lambda v: (v.amount_owed, v.rule.jurisdiction.precedence))


class OvertimeEvaluator:
    """Stateless overtime evaluator bound to one repository snapshot."""

    def __init__(self, repository: RateRuleRepository, settings: Settings | None = None):
        self.repository = repository
        self.settings = settings or get_settings()

    def classify(self, owed: Decimal) -> OvertimeStatus | None:
        """None when the amount is within rounding tolerance."""
        if owed <= self.settings.overtime_owed_tolerance:
            return None
        if owed > self.settings.overtime_violation_threshold:
            return OvertimeStatus.VIOLATION
        return OvertimeStatus.WARNING

    def evaluate(self, record: WorkerTimeRecord, worker_name: str | None = None) -> list[OvertimeViolation]:
        """
        Evaluate one worker-period against every applicable rule.

        Returns one entry per rule with money owed; an empty list when
        nothing is owed or no rule applies to the location.
        """
        try:
            rules = self.repository.rules_for_location(record.location)
        except NoApplicableRuleError:
            logger.debug(f"No overtime rules for {record.worker_id} at {record.location!r}; skipped")
            return []

        name = worker_name or record.name or record.worker_id
        violations: list[OvertimeViolation] = []

        for rule in rules:
            if rule.exempts(record.job_category):
                logger.debug(
                    f"{record.worker_id}: {record.job_category!r} exempt from "
                    f"{rule.jurisdiction.value} rule {rule.location!r}"
                )
                continue

            daily, weekly, overtime = overtime_hours_for_rule(record, rule)
            # Thresholds apply to the exact premium; only the reported amount is rounded
            premium = unpaid_premium(overtime, record.overtime_hours_paid, record.hourly_rate, rule.multiplier)
            status = self.classify(premium)
            if status is None:
                continue
            owed = amount_owed(overtime, record.overtime_hours_paid, record.hourly_rate, rule.multiplier)

            violations.append(
                OvertimeViolation(
                    worker_id=record.worker_id,
                    worker_name=name,
                    period_start=record.period_start,
                    period_end=record.period_end,
                    total_hours=record.total_hours,
                    overtime_hours=overtime,
                    overtime_hours_paid=record.overtime_hours_paid,
                    amount_owed=owed,
                    status=status,
                    rule=rule,
                    daily_overtime_hours=daily,
                    weekly_overtime_hours=weekly,
                )
            )

        return violations
