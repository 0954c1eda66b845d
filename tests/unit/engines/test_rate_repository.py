"""
Tests for the rate & rule repository, snapshots and rule sources.
"""

import asyncio
import json
from datetime import date
from decimal import Decimal
from pathlib import Path

import pytest
from pydantic import ValidationError

from engines.exceptions import NoApplicableRuleError, RuleSourceError, RuleSourceTimeoutError
from engines.schemas.location import JurisdictionLevel
from engines.services.rate_repository import (
    JsonRuleFileSource,
    RateSource,
    StaticRateSource,
    build_snapshot,
    load_repository,
    snapshot_from_payload,
)
from tests.factories import make_rate, make_repository, make_rule

RULE_FILE = Path(__file__).resolve().parents[3] / "data" / "wage_rules.json"


class SlowSource(RateSource):
    """Source that never answers in time."""

    async def load(self):
        await asyncio.sleep(5)


class TestLocationLookup:
    def test_city_gets_every_covering_level(self, repository):
        rates = repository.rates_for_location("San Francisco, CA")
        assert [r.location for r in rates] == ["Federal", "California", "San Francisco, CA"]

    def test_state_code_matches_state_name_record(self, repository):
        by_name = repository.rates_for_location("California")
        by_code = repository.rates_for_location("CA")
        assert by_name == by_code
        assert {r.location for r in by_code} == {"Federal", "California"}

    def test_other_city_in_state(self, repository):
        rates = repository.rates_for_location("Los Angeles, CA")
        assert {r.location for r in rates} == {"Federal", "California"}

    def test_state_without_records_falls_back_to_federal(self, repository):
        rates = repository.rates_for_location("Texas")
        assert len(rates) == 1
        assert rates[0].jurisdiction == JurisdictionLevel.FEDERAL

    def test_rules_lookup(self, repository):
        rules = repository.rules_for_location("San Francisco, CA")
        assert [r.location for r in rules] == ["Federal", "California"]

    def test_unresolved_label_matches_exactly(self):
        repository = make_repository(
            rates=[make_rate(jurisdiction="local", location="Springfield", rate=Decimal("12.00"))]
        )
        assert repository.rates_for_location("Springfield")[0].rate == Decimal("12.00")
        with pytest.raises(NoApplicableRuleError):
            repository.rates_for_location("Springfield, IL")

    def test_no_records_raises(self):
        repository = make_repository(
            rates=[make_rate(jurisdiction="state", location="California", rate=Decimal("16.00"))]
        )
        with pytest.raises(NoApplicableRuleError) as exc_info:
            repository.rates_for_location("Texas")
        assert exc_info.value.location == "Texas"

    def test_no_rules_raises_with_kind(self):
        repository = make_repository(rates=[make_rate()])
        with pytest.raises(NoApplicableRuleError) as exc_info:
            repository.rules_for_location("Texas")
        assert exc_info.value.record_kind == "overtime rule"


class TestEffectiveDates:
    @pytest.fixture
    def rates(self):
        return [
            make_rate(),
            make_rate(
                jurisdiction="state",
                location="California",
                rate=Decimal("16.00"),
                effective_date=date(2024, 1, 1),
            ),
            make_rate(
                jurisdiction="state",
                location="CA",
                rate=Decimal("16.50"),
                effective_date=date(2025, 1, 1),
            ),
        ]

    def test_latest_in_force_record_supersedes(self, rates):
        repository = make_repository(rates=rates, as_of=date(2025, 6, 1))
        state_rates = [r for r in repository.rates_for_location("California") if r.location != "Federal"]
        assert [r.rate for r in state_rates] == [Decimal("16.50")]

    def test_future_record_not_yet_in_force(self, rates):
        repository = make_repository(rates=rates, as_of=date(2024, 6, 1))
        state_rates = [r for r in repository.rates_for_location("California") if r.location != "Federal"]
        assert [r.rate for r in state_rates] == [Decimal("16.00")]

    def test_as_of_defaults_to_today(self):
        repository = make_repository(rates=[make_rate()], as_of=None)
        assert repository.as_of == date.today()


class TestSnapshots:
    def test_version_ignores_record_order(self, federal_rate, california_rate):
        a = build_snapshot([federal_rate, california_rate], [])
        b = build_snapshot([california_rate, federal_rate], [])
        assert a.version == b.version

    def test_version_changes_with_content(self, federal_rate, california_rate):
        a = build_snapshot([federal_rate], [])
        b = build_snapshot([federal_rate, california_rate], [])
        assert a.version != b.version

    def test_snapshot_is_immutable(self, snapshot):
        with pytest.raises(ValidationError):
            snapshot.version = "tampered"

    def test_repository_exposes_version(self, repository, snapshot):
        assert repository.version == snapshot.version

    def test_payload_round_trip(self, snapshot):
        payload = {
            "rates": [r.model_dump(mode="json") for r in snapshot.rates],
            "rules": [r.model_dump(mode="json") for r in snapshot.rules],
        }
        assert snapshot_from_payload(payload).version == snapshot.version

    def test_invalid_payload_raises_source_error(self):
        payload = {
            "rates": [
                {
                    "jurisdiction": "state",
                    "location": "California",
                    "rate": "-1",
                    "effective_date": "2024-01-01",
                }
            ]
        }
        with pytest.raises(RuleSourceError):
            snapshot_from_payload(payload)

    def test_increase_fields_must_be_paired(self):
        with pytest.raises(ValidationError):
            make_rate(next_increase_date=date(2026, 1, 1))


class TestRuleSources:
    @pytest.mark.asyncio
    async def test_static_source(self, federal_rate, federal_ot_rule):
        source = StaticRateSource([federal_rate], [federal_ot_rule])
        repository = await load_repository(source, as_of=date(2025, 6, 1))
        assert repository.rates_for_location("Texas") == [federal_rate]
        assert repository.rules_for_location("Texas") == [federal_ot_rule]

    @pytest.mark.asyncio
    async def test_json_file_source(self, tmp_path):
        path = tmp_path / "rules.json"
        path.write_text(
            json.dumps(
                {
                    "rates": [
                        {
                            "jurisdiction": "federal",
                            "location": "Federal",
                            "rate": "7.25",
                            "effective_date": "2009-07-24",
                        }
                    ],
                    "rules": [],
                }
            )
        )
        snapshot = await JsonRuleFileSource(path).load()
        assert len(snapshot.rates) == 1
        assert snapshot.rates[0].rate == Decimal("7.25")

    @pytest.mark.asyncio
    async def test_json_file_source_invalid_json(self, tmp_path):
        path = tmp_path / "rules.json"
        path.write_text("{not json")
        with pytest.raises(RuleSourceError):
            await JsonRuleFileSource(path).load()

    @pytest.mark.asyncio
    async def test_json_file_source_missing_file(self, tmp_path):
        with pytest.raises(RuleSourceError):
            await JsonRuleFileSource(tmp_path / "missing.json").load()

    @pytest.mark.asyncio
    async def test_bundled_rule_file(self):
        repository = await load_repository(JsonRuleFileSource(RULE_FILE), as_of=date(2025, 8, 1))
        rates = repository.rates_for_location("San Francisco, CA")
        assert max(r.rate for r in rates) == Decimal("19.18")

    @pytest.mark.asyncio
    async def test_load_timeout(self):
        with pytest.raises(RuleSourceTimeoutError) as exc_info:
            await load_repository(SlowSource(), timeout=0.01)
        assert exc_info.value.timeout == 0.01

    def test_timeout_is_a_source_error(self):
        assert issubclass(RuleSourceTimeoutError, RuleSourceError)


class TestOvertimeRuleExemptions:
    def test_exempt_category_case_insensitive(self):
        rule = make_rule(exempt_categories=("executive",))
        assert rule.exempts("Executive")
        assert not rule.exempts("Cashier")
        assert not rule.exempts(None)
