"""
Rate & Rule Repository

Read-only lookup of minimum wage rates and overtime rules by location.

The repository wraps a single RuleSnapshot taken at the start of an
evaluation pass, so every worker in the pass is judged against the same
rule version. Sources of snapshots (fixtures, the regulatory feed export)
are injected through RateSource.
"""

import asyncio
import hashlib
import json
import logging
from abc import ABC, abstractmethod
from collections.abc import Iterable
from datetime import date, datetime, timezone
from pathlib import Path
from typing import TypeVar

from engines.exceptions import NoApplicableRuleError, RuleSourceError, RuleSourceTimeoutError
from engines.schemas.location import JurisdictionLevel, LocationKey
from engines.schemas.rates import MinimumWageRate, OvertimeRule, RuleSnapshot
from engines.services.location_resolver import covers, parse_location

logger = logging.getLogger(__name__)

RecordT = TypeVar("RecordT", MinimumWageRate, OvertimeRule)


def compute_version(rates: Iterable[MinimumWageRate], rules: Iterable[OvertimeRule]) -> str:
    """
    Content hash of a record set.

    Records are serialized canonically and sorted, so the version does not
    depend on the order the source returned them in.
    """
    payload = {
        "rates": sorted(json.dumps(r.model_dump(mode="json"), sort_keys=True) for r in rates),
        "rules": sorted(json.dumps(r.model_dump(mode="json"), sort_keys=True) for r in rules),
    }
    canonical = json.dumps(payload, sort_keys=True, separators=(",", ":"))
    return hashlib.sha256(canonical.encode()).hexdigest()


def build_snapshot(
    rates: Iterable[MinimumWageRate],
    rules: Iterable[OvertimeRule],
    taken_at: datetime | None = None,
) -> RuleSnapshot:
    """Freeze a record set into a versioned snapshot."""
    rates = tuple(rates)
    rules = tuple(rules)
    return RuleSnapshot(
        version=compute_version(rates, rules),
        rates=rates,
        rules=rules,
        taken_at=taken_at or datetime.now(timezone.utc),
    )


def snapshot_from_payload(payload: dict) -> RuleSnapshot:
    """Build a snapshot from a JSON-like dict with 'rates' and 'rules' lists."""
    try:
        rates = [MinimumWageRate.model_validate(item) for item in payload.get("rates", [])]
        rules = [OvertimeRule.model_validate(item) for item in payload.get("rules", [])]
    except ValueError as e:
        raise RuleSourceError(f"Invalid rule payload: {e}") from e
    return build_snapshot(rates, rules)


# ── Sources ───────────────────────────────────────────


class RateSource(ABC):
    """Regulatory data collaborator producing rule snapshots."""

    @abstractmethod
    async def load(self) -> RuleSnapshot:
        """Return a consistent snapshot of all rates and rules."""


class StaticRateSource(RateSource):
    """Fixed in-memory record set (fixtures, tests, pre-fetched feeds)."""

    def __init__(self, rates: Iterable[MinimumWageRate], rules: Iterable[OvertimeRule] = ()):
        self._snapshot = build_snapshot(rates, rules)

    async def load(self) -> RuleSnapshot:
        return self._snapshot


class JsonRuleFileSource(RateSource):
    """
    Rule set exported by the regulatory feed as a JSON file:

        {"rates": [{...MinimumWageRate...}], "rules": [{...OvertimeRule...}]}
    """

    def __init__(self, path: str | Path):
        self.path = Path(path)

    async def load(self) -> RuleSnapshot:
        try:
            raw = await asyncio.to_thread(self.path.read_text, encoding="utf-8")
        except OSError as e:
            raise RuleSourceError(f"Cannot read rule file {self.path}: {e}") from e
        try:
            payload = json.loads(raw)
        except json.JSONDecodeError as e:
            raise RuleSourceError(f"Rule file {self.path} is not valid JSON: {e}") from e
        snapshot = snapshot_from_payload(payload)
        logger.info(
            f"Loaded rule file {self.path}: {len(snapshot.rates)} rates, "
            f"{len(snapshot.rules)} rules (version {snapshot.version[:12]})"
        )
        return snapshot


# ── Repository ────────────────────────────────────────


class RateRuleRepository:
    """
    Location lookups over one immutable rule snapshot.

    A record applies to a location when it is federal, when its label
    equals the location label exactly, or when its jurisdiction covers the
    location's structured key. Only records in force on ``as_of`` are
    considered, and a later effective date supersedes an earlier record
    for the same jurisdiction.
    """

    def __init__(self, snapshot: RuleSnapshot, as_of: date | None = None):
        self.snapshot = snapshot
        self.as_of = as_of or date.today()
        self._rates = self._index(snapshot.rates)
        self._rules = self._index(snapshot.rules)

    @property
    def version(self) -> str:
        return self.snapshot.version

    def _index(self, records: Iterable[RecordT]) -> list[tuple[RecordT, LocationKey]]:
        """Keep the latest in-force record per jurisdiction identity."""
        latest: dict[tuple, RecordT] = {}
        for record in records:
            if record.effective_date > self.as_of:
                continue
            key = record.identity
            current = latest.get(key)
            if current is None or record.effective_date > current.effective_date:
                latest[key] = record
        indexed = [(record, record.location_key) for record in latest.values()]
        indexed.sort(key=lambda pair: (pair[0].jurisdiction.precedence, pair[0].location))
        return indexed

    @staticmethod
    def _applies(record, record_key: LocationKey, location: str, location_key: LocationKey) -> bool:
        if record.jurisdiction == JurisdictionLevel.FEDERAL:
            return True
        if record.location == location:
            return True
        return covers(record_key, location_key)

    def _lookup(self, indexed: list, location: str, kind: str) -> list:
        location_key = parse_location(location)
        applicable = [
            record
            for record, record_key in indexed
            if self._applies(record, record_key, location, location_key)
        ]
        if not applicable:
            raise NoApplicableRuleError(location, kind)
        return applicable

    def rates_for_location(self, location: str) -> list[MinimumWageRate]:
        """All minimum wage rates applying to a location, federal first."""
        return self._lookup(self._rates, location, "rate")

    def rules_for_location(self, location: str) -> list[OvertimeRule]:
        """All overtime rules applying to a location, federal first."""
        return self._lookup(self._rules, location, "overtime rule")


async def load_repository(
    source: RateSource,
    timeout: float | None = None,
    as_of: date | None = None,
) -> RateRuleRepository:
    """
    Take one snapshot from a source and wrap it in a repository.

    Raises RuleSourceTimeoutError if the source does not answer within
    ``timeout`` seconds.
    """
    try:
        snapshot = await asyncio.wait_for(source.load(), timeout=timeout)
    except asyncio.TimeoutError as e:
        raise RuleSourceTimeoutError(timeout) from e
    return RateRuleRepository(snapshot, as_of=as_of)
