"""
Compliance Tasks

Background compliance scans over a rule set and worker population
supplied by the caller.
"""

import logging
from datetime import date

from engines.schemas.workers import WorkerTimeRecord, WorkerWageRecord
from engines.services.compliance_scanner import ComplianceScanner
from engines.services.dashboard import build_dashboard
from engines.services.rate_repository import RateRuleRepository, snapshot_from_payload
from workers.celery_app import app

logger = logging.getLogger(__name__)


@app.task
def run_compliance_scan_task(
    rule_set: dict,
    workers: list[dict],
    time_records: list[dict] | None = None,
    as_of: str | None = None,
) -> dict:
    """
    Run a full compliance scan in the background.

    The rule set is frozen into one snapshot before any worker is
    evaluated, so the whole pass uses a single rule version.

    Args:
        rule_set: {"rates": [...], "rules": [...]} from the regulatory feed
        workers: Wage records
        time_records: Pay-period time records
        as_of: Evaluation date (YYYY-MM-DD), defaults to today

    Returns:
        Dashboard dict plus findings and diagnostics
    """
    snapshot = snapshot_from_payload(rule_set)
    repository = RateRuleRepository(
        snapshot,
        as_of=date.fromisoformat(as_of) if as_of else None,
    )
    logger.info(
        f"Starting compliance scan of {len(workers)} workers "
        f"(rules {snapshot.version[:12]})"
    )

    wage_records = [WorkerWageRecord.model_validate(w) for w in workers]
    period_records = [WorkerTimeRecord.model_validate(t) for t in time_records or []]

    result = ComplianceScanner(repository).scan(wage_records, period_records)
    if result.diagnostics:
        logger.warning(
            f"Compliance scan excluded {len(result.diagnostics)} record(s); "
            f"see diagnostics"
        )

    return {
        "dashboard": build_dashboard(result).model_dump(mode="json"),
        "findings": [f.model_dump(mode="json") for f in result.findings],
        "diagnostics": [d.model_dump(mode="json") for d in result.diagnostics],
    }
