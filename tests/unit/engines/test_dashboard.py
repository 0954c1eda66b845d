"""
Tests for the dashboard read model.
"""

from datetime import date, datetime, timezone
from decimal import Decimal

import pytest

from engines.schemas.compliance import ViolationType
from engines.services.compliance_scanner import ComplianceScanner
from engines.services.dashboard import build_dashboard, health_band
from tests.factories import make_rate, make_repository, make_rule, make_time_record, make_wage_record

SCANNED_AT = datetime(2025, 6, 1, 9, 0, tzinfo=timezone.utc)


@pytest.fixture
def result(repository, settings):
    workers = [
        make_wage_record(worker_id="a", current_wage=Decimal("20.00")),
        make_wage_record(worker_id="b", current_wage=Decimal("12.00")),
        make_wage_record(worker_id="c", location="San Francisco, CA", current_wage=Decimal("19.00")),
        make_wage_record(worker_id="d", location="Texas", current_wage=Decimal("7.50")),
        make_wage_record(worker_id="z", location=""),
    ]
    records = [make_time_record(worker_id="a", daily_hours=(9, 10, 8, 8, 7, 0, 0))]
    return ComplianceScanner(repository, settings).scan(workers, records, scanned_at=SCANNED_AT)


class TestHealthBand:
    @pytest.mark.parametrize(
        "score,band",
        [(100, "healthy"), (90, "healthy"), (89, "needs_attention"), (70, "needs_attention"), (69, "critical"), (0, "critical")],
    )
    def test_bands(self, score, band):
        assert health_band(score) == band


class TestBuildDashboard:
    def test_headline_numbers(self, result):
        dashboard = build_dashboard(result, top_findings=5)
        assert dashboard.overall_score == result.overall_score == 90
        assert dashboard.health == "healthy"
        assert dashboard.total_violations == 2
        assert dashboard.employees_at_risk == 2
        assert dashboard.workers_evaluated == 4
        assert dashboard.diagnostics_count == 1
        assert dashboard.rule_version == result.rule_version

    def test_status_counts_cover_every_status(self, result):
        dashboard = build_dashboard(result, top_findings=5)
        assert dashboard.status_counts == {"compliant": 1, "warning": 2, "violation": 1, "unknown": 0}

    def test_overtime_owed_counts_binding_rule_only(self, result):
        """Federal owes $20.00 and California $30.00 for the same week."""
        dashboard = build_dashboard(result, top_findings=5)
        assert dashboard.total_overtime_owed == Decimal("30.00")

    def test_penalty_total(self, result):
        dashboard = build_dashboard(result, top_findings=5)
        assert dashboard.total_potential_penalty == sum(f.potential_penalty for f in result.findings)
        assert dashboard.scheduled_increase_exposure == Decimal("0")

    def test_total_underpayment(self, result):
        """Ben is $4.00 short over the default 40 hours."""
        dashboard = build_dashboard(result, top_findings=5)
        assert result.total_underpayment == Decimal("160.00")
        assert dashboard.total_underpayment == Decimal("160.00")

    def test_scheduled_increases_kept_out_of_penalty_total(self, settings):
        repository = make_repository(
            rates=[
                make_rate(),
                make_rate(
                    jurisdiction="state",
                    location="California",
                    rate=Decimal("16.00"),
                    effective_date=date(2024, 1, 1),
                    next_increase_date=date(2025, 7, 1),
                    next_increase_rate=Decimal("16.50"),
                ),
            ],
            rules=[make_rule()],
        )
        workers = [
            make_wage_record(worker_id="a", current_wage=Decimal("16.25")),
            make_wage_record(worker_id="b", current_wage=Decimal("12.00")),
        ]
        result = ComplianceScanner(repository, settings).scan(workers, scanned_at=SCANNED_AT)

        dashboard = build_dashboard(result, top_findings=5)
        # a: $0.25 short of $16.50 x 40h x 2; b: $4.50 short of $16.50 x 40h x 2
        assert dashboard.scheduled_increase_exposure == Decimal("380.00")
        # b: $4.00 short of $16.00 x 40h x 2
        assert dashboard.total_potential_penalty == Decimal("320.00")
        assert dashboard.total_underpayment == Decimal("160.00")

    def test_jurisdictions_sorted_by_violations(self, result):
        dashboard = build_dashboard(result, top_findings=5)
        rows = {row.jurisdiction: row for row in dashboard.jurisdictions}
        assert dashboard.jurisdictions[0].jurisdiction == "California"
        assert rows["California"].workers == 2
        assert rows["California"].violations == 1
        assert rows["California"].underpayment_per_hour == Decimal("4.00")
        assert rows["San Francisco, CA"].warnings == 1
        assert rows["Federal"].warnings == 1

    def test_top_findings_limit(self, result):
        dashboard = build_dashboard(result, top_findings=1)
        assert len(dashboard.top_findings) == 1
        assert dashboard.top_findings[0].violation_type == ViolationType.MINIMUM_WAGE

    def test_trend(self, result):
        dashboard = build_dashboard(result, top_findings=5)
        assert len(dashboard.trend) == 1
        assert dashboard.trend[0].score == result.overall_score
