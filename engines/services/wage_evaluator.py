"""
Wage Compliance Evaluator

Resolves the binding minimum wage for a worker's location and classifies
the worker's current wage against it.

Algorithm:
1. Fetch every rate record applying to the worker's location
2. Binding rate = highest required rate among them (tipped rate where
   the worker is tipped and the record defines one)
3. difference = current wage - binding rate
4. difference < 0 -> violation; 0 <= difference < margin -> warning;
   otherwise compliant
"""

import logging
from collections import defaultdict
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal

from engines.config import Settings, get_settings
from engines.exceptions import InvalidLocationError, NoApplicableRuleError
from engines.schemas.compliance import WageComplianceCheck, WageStatus
from engines.schemas.location import JurisdictionLevel
from engines.schemas.rates import MinimumWageRate
from engines.schemas.workers import WorkerWageRecord
from engines.services.rate_repository import RateRuleRepository

logger = logging.getLogger(__name__)


def classify_wage(difference: Decimal, warning_margin: Decimal = Decimal("1.00")) -> WageStatus:
    """Classify a signed wage difference (current - required)."""
    if difference < 0:
        return WageStatus.VIOLATION
    if difference < warning_margin:
        return WageStatus.WARNING
    return WageStatus.COMPLIANT


def _record_label(record: MinimumWageRate) -> str:
    if record.jurisdiction == JurisdictionLevel.FEDERAL:
        return "Federal"
    return record.location


class WageEvaluator:
    """Stateless minimum wage evaluator bound to one repository snapshot."""

    def __init__(self, repository: RateRuleRepository, settings: Settings | None = None):
        self.repository = repository
        self.settings = settings or get_settings()

    def evaluate(
        self,
        worker: WorkerWageRecord,
        evaluated_at: datetime | None = None,
    ) -> WageComplianceCheck:
        """
        Evaluate one worker's wage.

        Raises NoApplicableRuleError or InvalidLocationError when the
        worker's location cannot be resolved to any rate.
        """
        rates = self.repository.rates_for_location(worker.location)
        evaluated_at = evaluated_at or datetime.now(timezone.utc)

        binding = max(
            rates,
            key=lambda r: (r.required_rate(worker.is_tipped), r.jurisdiction.precedence),
        )
        minimum_required = binding.required_rate(worker.is_tipped)
        difference = worker.current_wage - minimum_required
        status = classify_wage(difference, self.settings.wage_warning_margin)

        notes = self._ambiguity_notes(worker, rates)
        # Scheduled increases are published for the full rate only
        upcoming_rate, upcoming_date = None, None
        if not worker.is_tipped:
            upcoming_rate, upcoming_date = self._upcoming_increase(rates)

        logger.debug(
            f"Wage check {worker.worker_id}: {worker.current_wage} vs "
            f"{minimum_required} ({_record_label(binding)}) -> {status.value}"
        )

        return WageComplianceCheck(
            worker_id=worker.worker_id,
            worker_name=worker.name,
            current_wage=worker.current_wage,
            minimum_required=minimum_required,
            jurisdiction=_record_label(binding),
            status=status,
            difference=difference,
            evaluated_at=evaluated_at,
            upcoming_rate=upcoming_rate,
            upcoming_effective_date=upcoming_date,
            notes=notes,
        )

    def evaluate_lenient(
        self,
        worker: WorkerWageRecord,
        evaluated_at: datetime | None = None,
    ) -> WageComplianceCheck:
        """Like evaluate(), but an unresolvable location yields status 'unknown'."""
        try:
            return self.evaluate(worker, evaluated_at)
        except (NoApplicableRuleError, InvalidLocationError) as e:
            logger.warning(f"Wage status unknown for {worker.worker_id}: {e}")
            return WageComplianceCheck(
                worker_id=worker.worker_id,
                worker_name=worker.name,
                current_wage=worker.current_wage,
                minimum_required=None,
                jurisdiction=None,
                status=WageStatus.UNKNOWN,
                difference=None,
                evaluated_at=evaluated_at or datetime.now(timezone.utc),
                notes=[str(e)],
            )

    def _ambiguity_notes(self, worker: WorkerWageRecord, rates: list[MinimumWageRate]) -> list[str]:
        """
        Flag same-level records that disagree (e.g. two local ordinances).

        The binding rate is still the maximum; the conflict is reported so a
        reviewer can confirm which ordinance governs.
        """
        by_level: dict[JurisdictionLevel, list[MinimumWageRate]] = defaultdict(list)
        for rate in rates:
            if rate.jurisdiction != JurisdictionLevel.FEDERAL:
                by_level[rate.jurisdiction].append(rate)

        notes = []
        for level, records in by_level.items():
            amounts = {r.required_rate(worker.is_tipped) for r in records}
            if len(records) > 1 and len(amounts) > 1:
                labels = ", ".join(sorted(r.location for r in records))
                note = f"Multiple {level.value} rates apply ({labels}); highest used"
                logger.warning(f"Worker {worker.worker_id} at {worker.location!r}: {note}")
                notes.append(note)
        return notes

    def _upcoming_increase(self, rates: list[MinimumWageRate]) -> tuple[Decimal | None, date | None]:
        """Highest scheduled increase effective inside the look-ahead window."""
        as_of = self.repository.as_of
        horizon = as_of + timedelta(days=self.settings.upcoming_increase_window_days)
        scheduled = [
            r
            for r in rates
            if r.next_increase_date is not None and as_of < r.next_increase_date <= horizon
        ]
        if not scheduled:
            return None, None
        top = max(scheduled, key=lambda r: (r.next_increase_rate, r.next_increase_date))
        return top.next_increase_rate, top.next_increase_date

    def evaluate_all(
        self,
        workers: list[WorkerWageRecord],
        evaluated_at: datetime | None = None,
    ) -> list[WageComplianceCheck]:
        """Evaluate every worker with a shared timestamp (strict)."""
        evaluated_at = evaluated_at or datetime.now(timezone.utc)
        return [self.evaluate(worker, evaluated_at) for worker in workers]
