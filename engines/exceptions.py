"""
Compliance Engine Errors

Exceptions raised by the repository, evaluators and worker directory.
"""


class WageEngineError(Exception):
    """Base class for compliance engine errors."""


class InvalidLocationError(WageEngineError, ValueError):
    """A location label could not be turned into a jurisdiction key."""

    def __init__(self, label: str):
        self.label = label
        super().__init__(f"Invalid location label: {label!r}")


class NoApplicableRuleError(WageEngineError):
    """No rate or rule record applies to a location, not even a federal one."""

    def __init__(self, location: str, record_kind: str = "rate"):
        self.location = location
        self.record_kind = record_kind
        super().__init__(f"No applicable {record_kind} records for location {location!r}")


class WorkerNotFoundError(WageEngineError):
    """An evaluation was requested for an unknown worker id."""

    def __init__(self, worker_id: str):
        self.worker_id = worker_id
        super().__init__(f"Worker not found: {worker_id}")


class RuleSourceError(WageEngineError):
    """The regulatory data source could not produce a rule snapshot."""


class RuleSourceTimeoutError(RuleSourceError):
    """Loading a rule snapshot exceeded the caller's timeout."""

    def __init__(self, timeout: float):
        self.timeout = timeout
        super().__init__(f"Rule source did not respond within {timeout}s")
