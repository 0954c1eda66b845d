"""
Score History

Rolling window of compliance score snapshots used as trend data.
Snapshots are frozen once recorded; the oldest drop off as new ones arrive.
"""

from collections import deque

from engines.config import get_settings
from engines.schemas.compliance import ScoreSnapshot


class ScoreHistory:
    """Bounded, append-only window of ScoreSnapshot records."""

    def __init__(self, max_size: int | None = None, snapshots: list[ScoreSnapshot] | None = None):
        if max_size is None:
            max_size = get_settings().trend_window_size
        if max_size < 1:
            raise ValueError("max_size must be at least 1")
        self._snapshots: deque[ScoreSnapshot] = deque(snapshots or [], maxlen=max_size)

    @property
    def max_size(self) -> int:
        return self._snapshots.maxlen

    def record(self, snapshot: ScoreSnapshot) -> None:
        self._snapshots.append(snapshot)

    def snapshots(self) -> list[ScoreSnapshot]:
        """Oldest first. Returns a copy."""
        return list(self._snapshots)

    def latest(self) -> ScoreSnapshot | None:
        return self._snapshots[-1] if self._snapshots else None

    def __len__(self) -> int:
        return len(self._snapshots)
