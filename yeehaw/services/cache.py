"""Reachability record cache.

Holds the latest probe record per host name. Records are replaced
wholesale and never expire on their own; staleness only marks a host as
a refresh candidate.

Writes may carry the sequence number of the probe batch that produced
them. A write from an older batch than the one behind the stored record
is rejected, so overlapping refreshes settle on the newest results.
"""

import logging
from collections.abc import Iterable

from yeehaw.models import REACHABILITY_TTL_MS, ReachabilityRecord
from yeehaw.utils.clock import Clock, now_ms

logger = logging.getLogger(__name__)


class ReachabilityCache:
    """Latest reachability record per host."""

    def __init__(self, ttl_ms: int = REACHABILITY_TTL_MS, clock: Clock = now_ms) -> None:
        self.ttl_ms = ttl_ms
        self.clock = clock
        self._records: dict[str, ReachabilityRecord] = {}
        self._sequences: dict[str, int] = {}

    def get(self, host_name: str) -> ReachabilityRecord | None:
        """Get the latest record for host."""
        return self._records.get(host_name)

    def put(self, record: ReachabilityRecord, sequence: int | None = None) -> bool:
        """Store a record, replacing any previous one.

        Args:
            record: New record
            sequence: Batch sequence number, or None to write unconditionally

        Returns:
            False if the write was rejected as older than the stored record
        """
        name = record.host_name
        if sequence is not None:
            current = self._sequences.get(name)
            if current is not None and sequence < current:
                logger.debug(
                    "Dropping out-of-order result for %s (batch %d < %d)",
                    name,
                    sequence,
                    current,
                )
                return False
            self._sequences[name] = sequence
        self._records[name] = record
        return True

    def is_fresh(self, record: ReachabilityRecord) -> bool:
        """Check if record is within the TTL."""
        return record.is_fresh(self.clock(), self.ttl_ms)

    def needs_refresh(self, host_names: Iterable[str]) -> bool:
        """Check if any host has a missing or stale record."""
        for name in host_names:
            record = self._records.get(name)
            if record is None or not self.is_fresh(record):
                return True
        return False

    def records(self) -> list[ReachabilityRecord]:
        """All stored records."""
        return list(self._records.values())

    def clear(self) -> None:
        """Drop all records."""
        self._records.clear()
        self._sequences.clear()

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, host_name: object) -> bool:
        return host_name in self._records
