"""Reachability data models."""

from dataclasses import dataclass
from enum import Enum

from yeehaw.models.host import HostDescriptor

REACHABILITY_TTL_MS = 5 * 60 * 1000


class ReachabilityState(str, Enum):
    """Whether the managed session is running on a host."""

    NOT_CHECKED = "not-checked"
    CHECKING = "checking"
    AVAILABLE = "available"
    UNAVAILABLE = "unavailable"
    UNREACHABLE = "unreachable"


@dataclass(frozen=True)
class ReachabilityRecord:
    """Result of the latest probe of one host.

    checked_at is epoch milliseconds.
    """

    host_name: str
    state: ReachabilityState
    checked_at: int

    def is_fresh(self, now_ms: int, ttl_ms: int = REACHABILITY_TTL_MS) -> bool:
        """Check if record is younger than the TTL."""
        return now_ms - self.checked_at < ttl_ms


@dataclass(frozen=True)
class RemoteEnvironment:
    """A host paired with its current reachability state."""

    host: HostDescriptor
    state: ReachabilityState
