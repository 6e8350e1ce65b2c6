"""Protocol interfaces for dependency inversion.

Components depend on these instead of the concrete SSH classes, so tests
can pass in fakes:

    class FakeRunner:
        async def run(self, host, command, timeout):
            return CommandResult(output="yeehaw:running\\n", error="", returncode=0)

    prober = ReachabilityProber(FakeRunner())
"""

from typing import Any, Protocol, runtime_checkable

from yeehaw.models import CommandResult, HostDescriptor


@runtime_checkable
class SSHConnectionPool(Protocol):
    """Protocol for SSH connection pooling."""

    async def get_connection(self, host: HostDescriptor) -> Any:
        """Get or create connection for host."""
        ...

    def has_connection(self, host_name: str) -> bool:
        """Check if a live pooled connection exists for host."""
        ...

    async def remove_connection(self, host_name: str) -> None:
        """Remove connection from pool. Safe if absent."""
        ...

    async def close_all(self) -> None:
        """Close all connections in pool."""
        ...


@runtime_checkable
class CommandRunner(Protocol):
    """Protocol for running a command on a remote host.

    Implementations raise yeehaw.services.remote.RemoteError subclasses on
    transport failure and return non-zero exit codes as results.
    """

    async def run(self, host: HostDescriptor, command: str, timeout: float) -> CommandResult:
        """Run command on host within timeout seconds."""
        ...


__all__ = [
    "CommandRunner",
    "SSHConnectionPool",
]
