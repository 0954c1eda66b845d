"""
Tests for the background compliance scan task.

The task is called directly, so no broker is needed.
"""

import pytest

from engines.exceptions import RuleSourceError
from workers.celery_app import app
from workers.tasks.compliance_tasks import run_compliance_scan_task

RULE_SET = {
    "rates": [
        {"jurisdiction": "federal", "location": "Federal", "rate": "7.25", "effective_date": "2009-07-24"},
        {"jurisdiction": "state", "location": "California", "rate": "16.00", "effective_date": "2024-01-01"},
    ],
    "rules": [
        {"jurisdiction": "federal", "location": "Federal", "weekly_threshold": "40", "effective_date": "1938-10-24"},
        {
            "jurisdiction": "state",
            "location": "California",
            "daily_threshold": "8",
            "weekly_threshold": "40",
            "effective_date": "2000-01-01",
        },
    ],
}

WORKERS = [
    {"worker_id": "a", "name": "Ana", "current_wage": "20.00", "location": "California"},
    {"worker_id": "b", "name": "Ben", "current_wage": "12.00", "location": "CA"},
    {"worker_id": "z", "name": "Zed", "current_wage": "20.00", "location": ""},
]

TIME_RECORDS = [
    {
        "worker_id": "a",
        "location": "California",
        "period_start": "2025-03-03",
        "period_end": "2025-03-09",
        "daily_hours": ["9", "10", "8", "8", "7", "0", "0"],
        "total_hours": "42",
        "hourly_rate": "20.00",
    }
]


class TestComplianceScanTask:
    def test_task_routed_to_compliance_queue(self):
        routes = app.conf.task_routes
        assert routes["workers.tasks.compliance_tasks.*"] == {"queue": "compliance"}

    def test_scan_returns_json_dashboard(self):
        output = run_compliance_scan_task(RULE_SET, WORKERS, TIME_RECORDS, as_of="2025-06-01")

        dashboard = output["dashboard"]
        assert dashboard["workers_evaluated"] == 2
        assert dashboard["total_violations"] == 2
        assert dashboard["employees_at_risk"] == 2
        assert dashboard["overall_score"] == 80
        assert dashboard["total_overtime_owed"] == "30.00"
        assert [d["worker_id"] for d in output["diagnostics"]] == ["z"]
        assert output["findings"][0]["violation_type"] == "minimum_wage"

    def test_invalid_rule_set_raises(self):
        with pytest.raises(RuleSourceError):
            run_compliance_scan_task({"rates": [{"location": "California"}]}, WORKERS)
