"""Data models for Yeehaw."""

from yeehaw.models.command import CommandResult
from yeehaw.models.host import (
    LOCAL_HOST,
    LOCAL_HOST_NAME,
    HostDescriptor,
    is_local_host,
    is_ssh_eligible,
)
from yeehaw.models.reachability import (
    REACHABILITY_TTL_MS,
    ReachabilityRecord,
    ReachabilityState,
    RemoteEnvironment,
)
from yeehaw.models.signal import STATUS_ICONS, SessionStatus, SignalRecord, status_icon
from yeehaw.models.ssh import PooledConnection

__all__ = [
    "CommandResult",
    "HostDescriptor",
    "LOCAL_HOST",
    "LOCAL_HOST_NAME",
    "PooledConnection",
    "REACHABILITY_TTL_MS",
    "ReachabilityRecord",
    "ReachabilityState",
    "RemoteEnvironment",
    "STATUS_ICONS",
    "SessionStatus",
    "SignalRecord",
    "is_local_host",
    "is_ssh_eligible",
    "status_icon",
]
