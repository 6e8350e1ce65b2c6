"""Services for Yeehaw."""

from yeehaw.services.cache import ReachabilityCache
from yeehaw.services.completion import CompletionCache, CompletionFetcher
from yeehaw.services.coordinator import PollingCoordinator
from yeehaw.services.pool import ConnectionPool
from yeehaw.services.prober import ReachabilityProber
from yeehaw.services.remote import (
    CommandFailedError,
    ConfigIncompleteError,
    RemoteCommandRunner,
    RemoteError,
    TransportError,
)
from yeehaw.services.scheduler import Debouncer, schedule
from yeehaw.services.signals import SignalStore, sanitize_pane_id

__all__ = [
    "CommandFailedError",
    "CompletionCache",
    "CompletionFetcher",
    "ConfigIncompleteError",
    "ConnectionPool",
    "Debouncer",
    "PollingCoordinator",
    "ReachabilityCache",
    "ReachabilityProber",
    "RemoteCommandRunner",
    "RemoteError",
    "SignalStore",
    "TransportError",
    "sanitize_pane_id",
    "schedule",
]
