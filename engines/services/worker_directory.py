"""
Worker Directory

Contract for the HR collaborator that supplies wage and time records,
plus an in-memory implementation for fixtures and pre-fetched batches.
"""

from abc import ABC, abstractmethod
from collections import defaultdict
from collections.abc import Iterable
from datetime import date

from engines.exceptions import WorkerNotFoundError
from engines.schemas.workers import WorkerTimeRecord, WorkerWageRecord


class WorkerDirectory(ABC):
    """Source of worker wage and time records."""

    @abstractmethod
    def get_wage_record(self, worker_id: str) -> WorkerWageRecord:
        """Raise WorkerNotFoundError for unknown ids."""

    @abstractmethod
    def get_time_record(self, worker_id: str, period_start: date) -> WorkerTimeRecord:
        """Raise WorkerNotFoundError when the worker or period is unknown."""

    @abstractmethod
    def list_wage_records(self) -> list[WorkerWageRecord]:
        """All workers."""

    @abstractmethod
    def list_time_records(self) -> list[WorkerTimeRecord]:
        """All worker-periods."""


class InMemoryWorkerDirectory(WorkerDirectory):
    """Directory over records held in memory."""

    def __init__(
        self,
        wage_records: Iterable[WorkerWageRecord] = (),
        time_records: Iterable[WorkerTimeRecord] = (),
    ):
        self._wages: dict[str, WorkerWageRecord] = {r.worker_id: r for r in wage_records}
        self._times: dict[str, dict[date, WorkerTimeRecord]] = defaultdict(dict)
        for record in time_records:
            self._times[record.worker_id][record.period_start] = record

    def get_wage_record(self, worker_id: str) -> WorkerWageRecord:
        try:
            return self._wages[worker_id]
        except KeyError:
            raise WorkerNotFoundError(worker_id) from None

    def get_time_record(self, worker_id: str, period_start: date) -> WorkerTimeRecord:
        periods = self._times.get(worker_id)
        if not periods or period_start not in periods:
            raise WorkerNotFoundError(worker_id)
        return periods[period_start]

    def list_wage_records(self) -> list[WorkerWageRecord]:
        return sorted(self._wages.values(), key=lambda r: r.worker_id)

    def list_time_records(self) -> list[WorkerTimeRecord]:
        records = [r for periods in self._times.values() for r in periods.values()]
        return sorted(records, key=lambda r: (r.worker_id, r.period_start))
