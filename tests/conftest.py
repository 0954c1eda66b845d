"""
Test Configuration and Fixtures

Provides rule fixtures, a repository over a fixed snapshot and settings.
"""

from datetime import date
from decimal import Decimal

import pytest

from engines.config import Settings
from engines.services.rate_repository import RateRuleRepository, build_snapshot
from tests.factories import make_rate, make_rule

AS_OF = date(2025, 6, 1)


@pytest.fixture
def settings() -> Settings:
    """Default settings, independent of the environment."""
    return Settings(_env_file=None)


@pytest.fixture
def federal_rate():
    return make_rate(tipped_rate=Decimal("2.13"))


@pytest.fixture
def california_rate():
    return make_rate(
        jurisdiction="state",
        location="California",
        rate=Decimal("16.00"),
        effective_date=date(2024, 1, 1),
    )


@pytest.fixture
def san_francisco_rate():
    return make_rate(
        jurisdiction="local",
        location="San Francisco, CA",
        rate=Decimal("18.67"),
        effective_date=date(2024, 7, 1),
    )


@pytest.fixture
def federal_ot_rule():
    return make_rule(exempt_categories=("executive",))


@pytest.fixture
def california_ot_rule():
    return make_rule(
        jurisdiction="state",
        location="California",
        daily_threshold=Decimal("8"),
        exempt_categories=("executive",),
        effective_date=date(2000, 1, 1),
    )


@pytest.fixture
def snapshot(federal_rate, california_rate, san_francisco_rate, federal_ot_rule, california_ot_rule):
    return build_snapshot(
        [federal_rate, california_rate, san_francisco_rate],
        [federal_ot_rule, california_ot_rule],
    )


@pytest.fixture
def repository(snapshot) -> RateRuleRepository:
    """Federal + California + San Francisco, evaluated on 2025-06-01."""
    return RateRuleRepository(snapshot, as_of=AS_OF)
