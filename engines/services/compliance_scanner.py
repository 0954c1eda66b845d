"""
Compliance Scanner

Runs the wage and overtime evaluators across a worker population and
aggregates the results into a compliance score, an at-risk headcount and
ranked findings.

Scoring:
    score = max(0, 100 - (violations / workers) x weight), rounded half-up

A violation is a wage check with status 'violation', or a worker-period
with money owed under at least one overtime rule (counted once, under the
rule with the largest obligation). Workers whose evaluation fails are
reported as diagnostics and left out of the denominator.
"""

import logging
from collections import defaultdict
from collections.abc import Iterable
from datetime import date, datetime, timezone
from decimal import ROUND_HALF_UP, Decimal

from engines.config import Settings, get_settings
from engines.exceptions import WageEngineError, WorkerNotFoundError
from engines.schemas.compliance import (
    ComplianceFinding,
    ComplianceScanResult,
    OvertimeViolation,
    ScanDiagnostic,
    ScoreSnapshot,
    ViolationType,
    WageComplianceCheck,
    WageStatus,
)
from engines.schemas.workers import WorkerTimeRecord, WorkerWageRecord
from engines.services.overtime_evaluator import OvertimeEvaluator, binding_violation
from engines.services.rate_repository import RateRuleRepository, RateSource, load_repository
from engines.services.score_history import ScoreHistory
from engines.services.severity import SeverityTable, default_severity_table
from engines.services.wage_evaluator import WageEvaluator

logger = logging.getLogger(__name__)

CENTS = Decimal("0.01")

# Per-worker failures that must not abort a scan
RECOVERABLE_ERRORS = (WageEngineError, ValueError, ArithmeticError)


def compute_score(total_violations: int, workers_evaluated: int, weight: Decimal = Decimal("20")) -> int:
    """Fleet compliance score in [0, 100]; 100 when nothing was evaluated."""
    if workers_evaluated <= 0:
        return 100
    raw = Decimal(100) - Decimal(total_violations) / Decimal(workers_evaluated) * weight
    score = int(raw.quantize(Decimal("1"), rounding=ROUND_HALF_UP))
    return max(0, min(100, score))


def binding_violations(violations: Iterable[OvertimeViolation]) -> list[OvertimeViolation]:
    """One violation per worker-period: the one with the largest obligation."""
    grouped: dict[tuple[str, date, date], list[OvertimeViolation]] = defaultdict(list)
    for violation in violations:
        grouped[(violation.worker_id, violation.period_start, violation.period_end)].append(violation)
    return [binding_violation(grouped[key]) for key in sorted(grouped)]


class ComplianceScanner:
    """
    Fleet-wide compliance aggregation over one repository snapshot.

    The scanner itself holds no per-scan state; the optional ScoreHistory
    is the only thing a scan appends to.
    """

    def __init__(
        self,
        repository: RateRuleRepository,
        settings: Settings | None = None,
        severity_table: SeverityTable | None = None,
        history: ScoreHistory | None = None,
    ):
        self.repository = repository
        self.settings = settings or get_settings()
        self.severity_table = severity_table or default_severity_table()
        self.history = history
        self.wage_evaluator = WageEvaluator(repository, self.settings)
        self.overtime_evaluator = OvertimeEvaluator(repository, self.settings)

    def scan(
        self,
        workers: Iterable[WorkerWageRecord],
        time_records: Iterable[WorkerTimeRecord] = (),
        scanned_at: datetime | None = None,
    ) -> ComplianceScanResult:
        """
        Evaluate every worker and aggregate.

        Args:
            workers: Wage records; these define the population
            time_records: Pay-period time records for overtime checks
            scanned_at: Timestamp stamped on checks and the trend snapshot

        Returns:
            ComplianceScanResult with score, findings and per-worker detail
        """
        scanned_at = scanned_at or datetime.now(timezone.utc)
        workers = sorted(workers, key=lambda w: w.worker_id)
        known_ids = {w.worker_id for w in workers}

        periods_by_worker: dict[str, list[WorkerTimeRecord]] = defaultdict(list)
        diagnostics: list[ScanDiagnostic] = []
        for record in sorted(time_records, key=lambda r: (r.worker_id, r.period_start)):
            if record.worker_id in known_ids:
                periods_by_worker[record.worker_id].append(record)
            else:
                error = WorkerNotFoundError(record.worker_id)
                diagnostics.append(self._diagnostic(record.worker_id, "overtime", error))

        wage_checks: list[WageComplianceCheck] = []
        overtime_violations: list[OvertimeViolation] = []
        hours_by_worker: dict[str, Decimal] = {}

        for worker in workers:
            stage = "wage"
            try:
                check = self.wage_evaluator.evaluate(worker, scanned_at)
                stage = "overtime"
                worker_violations = []
                for record in periods_by_worker.get(worker.worker_id, []):
                    worker_violations.extend(self.overtime_evaluator.evaluate(record, worker.name))
            except RECOVERABLE_ERRORS as e:
                diagnostics.append(self._diagnostic(worker.worker_id, stage, e))
                continue

            wage_checks.append(check)
            overtime_violations.extend(worker_violations)
            periods = periods_by_worker.get(worker.worker_id)
            hours_by_worker[worker.worker_id] = (
                sum((r.total_hours for r in periods), Decimal("0"))
                if periods
                else self.settings.default_period_hours
            )

        wage_violations = [c for c in wage_checks if c.status == WageStatus.VIOLATION]
        overtime_binding = binding_violations(overtime_violations)

        total_violations = len(wage_violations) + len(overtime_binding)
        workers_evaluated = len(wage_checks)
        score = compute_score(total_violations, workers_evaluated, self.settings.score_penalty_weight)
        at_risk = {c.worker_id for c in wage_violations} | {v.worker_id for v in overtime_binding}

        underpayment = sum(
            (c.shortfall * hours_by_worker[c.worker_id] for c in wage_violations),
            Decimal("0"),
        ).quantize(CENTS, rounding=ROUND_HALF_UP)
        findings = self._build_findings(wage_checks, overtime_binding, diagnostics, hours_by_worker, underpayment)

        snapshot = ScoreSnapshot(
            recorded_at=scanned_at,
            score=score,
            total_violations=total_violations,
            employees_at_risk=len(at_risk),
            workers_evaluated=workers_evaluated,
            rule_version=self.repository.version,
        )
        if self.history is not None:
            self.history.record(snapshot)
            trend = self.history.snapshots()
        else:
            trend = [snapshot]

        logger.info(
            f"Compliance scan: score {score}, {total_violations} violations, "
            f"{len(at_risk)} at risk, {workers_evaluated} evaluated, "
            f"{len(diagnostics)} diagnostics (rules {self.repository.version[:12]})"
        )

        return ComplianceScanResult(
            overall_score=score,
            total_violations=total_violations,
            employees_at_risk=len(at_risk),
            total_underpayment=underpayment,
            findings=findings,
            trend_data=trend,
            wage_checks=wage_checks,
            overtime_violations=overtime_violations,
            diagnostics=diagnostics,
            workers_evaluated=workers_evaluated,
            rule_version=self.repository.version,
            scanned_at=scanned_at,
        )

    @staticmethod
    def _diagnostic(worker_id: str, stage: str, error: Exception) -> ScanDiagnostic:
        logger.warning(f"Excluding worker {worker_id} from scan ({stage}): {error}")
        return ScanDiagnostic(
            worker_id=worker_id,
            stage=stage,
            error_type=type(error).__name__,
            message=str(error),
        )

    # ── Findings ──────────────────────────────────────

    def _finding(
        self,
        violation_type: ViolationType,
        worker_ids: Iterable[str],
        description: str,
        penalty: Decimal,
        recommendation: str,
    ) -> ComplianceFinding:
        affected = sorted(set(worker_ids))
        penalty = penalty.quantize(CENTS, rounding=ROUND_HALF_UP)
        return ComplianceFinding(
            violation_type=violation_type,
            severity=self.severity_table.severity_for(violation_type, penalty),
            affected_count=len(affected),
            affected_worker_ids=affected,
            description=description,
            potential_penalty=penalty,
            recommendation=recommendation,
        )

    def _build_findings(
        self,
        wage_checks: list[WageComplianceCheck],
        overtime_binding: list[OvertimeViolation],
        diagnostics: list[ScanDiagnostic],
        hours_by_worker: dict[str, Decimal],
        underpayment: Decimal,
    ) -> list[ComplianceFinding]:
        """Synthesize one finding per violation type present, ranked."""
        settings = self.settings
        findings: list[ComplianceFinding] = []

        wage_violations = [c for c in wage_checks if c.status == WageStatus.VIOLATION]
        if wage_violations:
            findings.append(
                self._finding(
                    ViolationType.MINIMUM_WAGE,
                    (c.worker_id for c in wage_violations),
                    (
                        f"{len(wage_violations)} worker(s) paid below the applicable minimum wage; "
                        f"estimated underpayment ${underpayment:,.2f}"
                    ),
                    underpayment * settings.minimum_wage_penalty_multiplier,
                    "Raise affected workers to the binding minimum wage and pay back wages for the shortfall",
                )
            )

        if overtime_binding:
            owed = sum((v.amount_owed for v in overtime_binding), Decimal("0"))
            findings.append(
                self._finding(
                    ViolationType.OVERTIME,
                    (v.worker_id for v in overtime_binding),
                    (
                        f"{len({v.worker_id for v in overtime_binding})} worker(s) owed ${owed:,.2f} "
                        f"in unpaid overtime across {len(overtime_binding)} pay period(s)"
                    ),
                    owed * settings.overtime_penalty_multiplier,
                    "Pay outstanding overtime premiums and check payroll applies both daily and weekly thresholds",
                )
            )

        near_minimum = [c for c in wage_checks if c.status == WageStatus.WARNING]
        if near_minimum:
            findings.append(
                self._finding(
                    ViolationType.NEAR_MINIMUM,
                    (c.worker_id for c in near_minimum),
                    (
                        f"{len(near_minimum)} worker(s) paid within "
                        f"${settings.wage_warning_margin:,.2f} of the minimum wage"
                    ),
                    Decimal("0"),
                    "Review pay rates for workers close to the minimum before the next rate change",
                )
            )

        upcoming = [c for c in wage_checks if c.upcoming_shortfall > 0]
        if upcoming:
            first_date = min(c.upcoming_effective_date for c in upcoming)
            future_gap = sum(
                (c.upcoming_shortfall * hours_by_worker[c.worker_id] for c in upcoming),
                Decimal("0"),
            )
            findings.append(
                self._finding(
                    ViolationType.UPCOMING_INCREASE,
                    (c.worker_id for c in upcoming),
                    (
                        f"{len(upcoming)} worker(s) will fall below a scheduled minimum wage "
                        f"increase starting {first_date.isoformat()}"
                    ),
                    future_gap * settings.minimum_wage_penalty_multiplier,
                    f"Adjust pay rates before {first_date.isoformat()}",
                )
            )

        if diagnostics:
            findings.append(
                self._finding(
                    ViolationType.EVALUATION_ERROR,
                    (d.worker_id for d in diagnostics),
                    (
                        f"{len({d.worker_id for d in diagnostics})} worker(s) could not be evaluated "
                        f"and were excluded from the score"
                    ),
                    Decimal("0"),
                    "Correct worker location, pay or time records and rerun the scan",
                )
            )

        findings.sort(key=lambda f: (-f.severity.rank, -f.potential_penalty, f.violation_type.value))
        return findings


async def run_compliance_scan(
    source: RateSource,
    workers: Iterable[WorkerWageRecord],
    time_records: Iterable[WorkerTimeRecord] = (),
    *,
    timeout: float | None = None,
    as_of: date | None = None,
    settings: Settings | None = None,
    severity_table: SeverityTable | None = None,
    history: ScoreHistory | None = None,
    scanned_at: datetime | None = None,
) -> ComplianceScanResult:
    """
    Snapshot the rule source once, then scan the whole population.

    All workers in the pass are judged against the same rule version.
    """
    settings = settings or get_settings()
    if timeout is None:
        timeout = settings.rule_source_timeout_seconds
    repository = await load_repository(source, timeout=timeout, as_of=as_of)
    scanner = ComplianceScanner(repository, settings, severity_table, history)
    return scanner.scan(workers, time_records, scanned_at)
