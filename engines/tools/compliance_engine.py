"""
Compliance Engine MCP Tools

Wage, overtime and fleet scan evaluation exposed as MCP tools.
Rules are read from the regulatory feed's JSON export.
"""

from datetime import date
from decimal import Decimal

from fastmcp import FastMCP

from engines.config import get_settings
from engines.schemas.workers import WorkerTimeRecord, WorkerWageRecord
from engines.services.compliance_scanner import ComplianceScanner
from engines.services.dashboard import build_dashboard
from engines.services.overtime_evaluator import OvertimeEvaluator, binding_violation
from engines.services.rate_repository import JsonRuleFileSource, RateRuleRepository, load_repository
from engines.services.wage_evaluator import WageEvaluator

# Initialize MCP server (started from server.py)
mcp = FastMCP("WageCheck Compliance Engine")


async def _repository(rule_file: str | None, as_of: str | None) -> RateRuleRepository:
    settings = get_settings()
    source = JsonRuleFileSource(rule_file or settings.rule_file_path)
    return await load_repository(
        source,
        timeout=settings.rule_source_timeout_seconds,
        as_of=date.fromisoformat(as_of) if as_of else None,
    )


@mcp.tool()
async def evaluate_wage(
    worker_id: str,
    name: str,
    current_wage: float,
    location: str,
    is_tipped: bool = False,
    rule_file: str | None = None,
    as_of: str | None = None,
) -> dict:
    """
    Check one worker's hourly wage against the binding minimum wage.

    The binding rate is the highest rate among all federal, state, county
    and local records covering the location.

    Args:
        worker_id: Unique worker identifier
        name: Display name
        current_wage: Current hourly rate
        location: Work location, e.g. "San Francisco, CA"
        is_tipped: Worker is paid a tipped cash wage
        rule_file: Rule set JSON (defaults to the configured path)
        as_of: Evaluation date (YYYY-MM-DD), defaults to today

    Returns:
        Wage check: minimum_required, jurisdiction, status
        (compliant / warning / violation), difference

    Example:
        Federal $7.25, California $16.00, worker in "California" at $15.50
        -> minimum_required 16.00, difference -0.50, status "violation"
    """
    repository = await _repository(rule_file, as_of)
    worker = WorkerWageRecord(
        worker_id=worker_id,
        name=name,
        current_wage=Decimal(str(current_wage)),
        location=location,
        is_tipped=is_tipped,
    )
    check = WageEvaluator(repository).evaluate(worker)
    return check.model_dump(mode="json")


@mcp.tool()
async def evaluate_overtime(
    worker_id: str,
    location: str,
    period_start: str,
    period_end: str,
    daily_hours: list[float],
    total_hours: float,
    hourly_rate: float,
    overtime_hours_paid: float = 0.0,
    overtime_hours_compensated: float = 0.0,
    job_category: str | None = None,
    name: str | None = None,
    rule_file: str | None = None,
    as_of: str | None = None,
) -> dict:
    """
    Compute overtime owed for one pay period under every applicable rule.

    Daily and weekly overtime are computed separately per rule and the
    larger one is used; they are never added together.

    Args:
        worker_id: Unique worker identifier
        location: Work location
        period_start: Period start date (YYYY-MM-DD)
        period_end: Period end date (YYYY-MM-DD)
        daily_hours: Hours worked on each day of the period, in order
        total_hours: Total hours worked in the period
        hourly_rate: Hourly rate
        overtime_hours_paid: Overtime hours already paid at premium
        overtime_hours_compensated: Overtime taken as comp time
        job_category: Job category, matched against rule exemptions
        name: Display name
        rule_file: Rule set JSON (defaults to the configured path)
        as_of: Evaluation date (YYYY-MM-DD), defaults to today

    Returns:
        Dictionary with per-rule violations and the binding (largest) one

    Example:
        Days [9, 10, 8, 8, 7, 0, 0] (42h) under daily 8 / weekly 40:
        daily overtime 3h, weekly 2h -> 3 overtime hours owed
    """
    repository = await _repository(rule_file, as_of or period_end)
    record = WorkerTimeRecord(
        worker_id=worker_id,
        name=name,
        location=location,
        period_start=date.fromisoformat(period_start),
        period_end=date.fromisoformat(period_end),
        daily_hours=tuple(Decimal(str(h)) for h in daily_hours),
        total_hours=Decimal(str(total_hours)),
        overtime_hours_paid=Decimal(str(overtime_hours_paid)),
        overtime_hours_compensated=Decimal(str(overtime_hours_compensated)),
        hourly_rate=Decimal(str(hourly_rate)),
        job_category=job_category,
    )
    violations = OvertimeEvaluator(repository).evaluate(record)
    binding = binding_violation(violations)
    return {
        "worker_id": worker_id,
        "violations": [v.model_dump(mode="json") for v in violations],
        "binding": binding.model_dump(mode="json") if binding else None,
    }


@mcp.tool()
async def run_compliance_scan(
    workers: list[dict],
    time_records: list[dict] | None = None,
    rule_file: str | None = None,
    as_of: str | None = None,
) -> dict:
    """
    Scan a worker population and return the compliance dashboard.

    Args:
        workers: Wage records (worker_id, name, current_wage, location, is_tipped)
        time_records: Pay-period time records for overtime checks
        rule_file: Rule set JSON (defaults to the configured path)
        as_of: Evaluation date (YYYY-MM-DD), defaults to today

    Returns:
        Dashboard: overall_score, total_violations, employees_at_risk,
        ranked findings, jurisdiction breakdown, trend
    """
    repository = await _repository(rule_file, as_of)
    wage_records = [WorkerWageRecord.model_validate(w) for w in workers]
    period_records = [WorkerTimeRecord.model_validate(t) for t in time_records or []]

    result = ComplianceScanner(repository).scan(wage_records, period_records)
    dashboard = build_dashboard(result)
    return {
        "dashboard": dashboard.model_dump(mode="json"),
        "findings": [f.model_dump(mode="json") for f in result.findings],
        "diagnostics": [d.model_dump(mode="json") for d in result.diagnostics],
    }
