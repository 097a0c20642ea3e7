"""Construction of concrete metric records."""
from datetime import datetime
from typing import Mapping, Sequence
from gitstats.domain.catalog import NAMESPACE_PREFIX, stat_key
from gitstats.domain.models import MetricRecord


class MetricEmitter:
    """Builds records that all share one collection timestamp."""

    def __init__(self, collected_at: datetime):
        self._collected_at = collected_at

    def emit(self, segments: Sequence[str], value: int, version: int) -> MetricRecord:
        """Build a record for the namespace prefix followed by ``segments``."""
        return MetricRecord(
            namespace=NAMESPACE_PREFIX + tuple(segments),
            value=int(value),
            timestamp=self._collected_at,
            version=version
        )

    def emit_stat(
        self,
        segments: Sequence[str],
        stats: Mapping[str, int],
        version: int
    ) -> MetricRecord:
        """Build a record for the stat named by the last segment.

        A stat missing from ``stats`` is emitted as 0.
        """
        return self.emit(segments, stats.get(stat_key(segments[-1]), 0), version)
