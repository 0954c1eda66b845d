"""
Compliance Service

Entry points used by host applications: per-worker wage and overtime
evaluation by worker id, and a full scan over the worker directory.
"""

from datetime import date, datetime

from engines.config import Settings, get_settings
from engines.schemas.compliance import ComplianceScanResult, OvertimeViolation, WageComplianceCheck
from engines.services.compliance_scanner import ComplianceScanner
from engines.services.overtime_evaluator import OvertimeEvaluator
from engines.services.rate_repository import RateRuleRepository
from engines.services.score_history import ScoreHistory
from engines.services.severity import SeverityTable
from engines.services.wage_evaluator import WageEvaluator
from engines.services.worker_directory import WorkerDirectory


class ComplianceService:
    """Binds a rule snapshot and a worker directory."""

    def __init__(
        self,
        repository: RateRuleRepository,
        directory: WorkerDirectory,
        settings: Settings | None = None,
        severity_table: SeverityTable | None = None,
    ):
        self.repository = repository
        self.directory = directory
        self.settings = settings or get_settings()
        self.severity_table = severity_table
        self.wage_evaluator = WageEvaluator(repository, self.settings)
        self.overtime_evaluator = OvertimeEvaluator(repository, self.settings)

    def evaluate_wage(self, worker_id: str, evaluated_at: datetime | None = None) -> WageComplianceCheck:
        """Raises WorkerNotFoundError for unknown ids."""
        worker = self.directory.get_wage_record(worker_id)
        return self.wage_evaluator.evaluate(worker, evaluated_at)

    def evaluate_overtime(self, worker_id: str, period_start: date) -> list[OvertimeViolation]:
        """Raises WorkerNotFoundError for unknown ids or periods."""
        record = self.directory.get_time_record(worker_id, period_start)
        return self.overtime_evaluator.evaluate(record)

    def run_scan(
        self,
        history: ScoreHistory | None = None,
        scanned_at: datetime | None = None,
    ) -> ComplianceScanResult:
        """Scan every worker the directory lists."""
        scanner = ComplianceScanner(self.repository, self.settings, self.severity_table, history)
        return scanner.scan(
            self.directory.list_wage_records(),
            self.directory.list_time_records(),
            scanned_at,
        )
