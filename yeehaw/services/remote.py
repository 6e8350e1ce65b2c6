"""Remote command execution over pooled SSH connections.

Failure taxonomy for remote work:
- ConfigIncompleteError: host lacks SSH connection fields
- TransportError: connect, auth or timeout failure
- CommandFailedError: command ran but gave no usable answer

Callers in this package convert all of them into terminal states
(unreachable host, empty completion list) instead of raising further.
"""

import asyncio
import logging

import asyncssh

from yeehaw.models import CommandResult, HostDescriptor, is_ssh_eligible
from yeehaw.protocols import SSHConnectionPool

logger = logging.getLogger(__name__)


class RemoteError(Exception):
    """Base class for remote operation failures."""

    def __init__(self, host_name: str, reason: object):
        """Initialize remote error.

        Args:
            host_name: Name of the host the operation targeted
            reason: Original exception or description of the failure
        """
        self.host_name = host_name
        self.reason = reason
        super().__init__(f"{host_name}: {reason}")


class ConfigIncompleteError(RemoteError):
    """Host is missing required SSH fields."""


class TransportError(RemoteError):
    """Could not reach the host over SSH."""


class CommandFailedError(RemoteError):
    """Remote command ran but produced no usable result."""


def _decode(value: str | bytes | None) -> str:
    if value is None:
        return ""
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    return value


class RemoteCommandRunner:
    """Runs shell commands on SSH hosts with an overall time bound."""

    def __init__(self, pool: SSHConnectionPool) -> None:
        """Initialize runner.

        Args:
            pool: Connection pool to draw connections from
        """
        self.pool = pool

    async def _run_once(self, host: HostDescriptor, command: str) -> CommandResult:
        conn = await self.pool.get_connection(host)
        result = await conn.run(command, check=False)
        return CommandResult(
            output=_decode(result.stdout),
            error=_decode(result.stderr),
            returncode=result.exit_status if result.exit_status is not None else -1,
        )

    async def _run_with_retry(self, host: HostDescriptor, command: str) -> CommandResult:
        reused = self.pool.has_connection(host.name)
        try:
            return await self._run_once(host, command)
        except (OSError, asyncssh.Error) as first_error:
            if not reused:
                raise
            # Pooled connection may have died silently; retry once on a fresh one
            logger.debug(
                "Command on reused connection to %s failed: %s, retrying",
                host.name,
                first_error,
            )
            await self.pool.remove_connection(host.name)
            return await self._run_once(host, command)

    async def run(self, host: HostDescriptor, command: str, timeout: float) -> CommandResult:
        """Run a command on host.

        Non-zero exit codes are returned, not raised.

        Args:
            host: SSH-eligible host
            command: Shell command line to run remotely
            timeout: Overall bound in seconds, connect included

        Returns:
            Command output and exit code

        Raises:
            ConfigIncompleteError: If host is not SSH-eligible
            TransportError: On connect, auth or timeout failure
        """
        if not is_ssh_eligible(host):
            raise ConfigIncompleteError(host.name, "missing SSH connection fields")

        try:
            return await asyncio.wait_for(self._run_with_retry(host, command), timeout)
        except TimeoutError as e:
            await self.pool.remove_connection(host.name)
            raise TransportError(host.name, f"timed out after {timeout}s") from e
        except (OSError, asyncssh.Error) as e:
            await self.pool.remove_connection(host.name)
            raise TransportError(host.name, e) from e
