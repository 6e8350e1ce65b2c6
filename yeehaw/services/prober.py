"""Remote session detection.

Checks, for every SSH-eligible host, whether the managed tmux session is
running there. All probes run concurrently and the batch resolves once
every probe has settled.
"""

import asyncio
import logging
from collections.abc import Iterable

from yeehaw.models import HostDescriptor, ReachabilityRecord, ReachabilityState, is_ssh_eligible
from yeehaw.protocols import CommandRunner
from yeehaw.utils.clock import Clock, now_ms
from yeehaw.utils.shell import quote_arg

logger = logging.getLogger(__name__)


def session_check_command(marker: str) -> str:
    """Remote command that prints '<marker>:running' if the session exists."""
    token = quote_arg(f"{marker}:running")
    return f"tmux has-session -t {quote_arg(marker)} 2>/dev/null && echo {token}"


class ReachabilityProber:
    """Probes hosts for a running session."""

    def __init__(
        self,
        runner: CommandRunner,
        marker: str = "yeehaw",
        timeout: float = 7,
        clock: Clock = now_ms,
    ) -> None:
        """Initialize prober.

        Args:
            runner: Executes the check command on a host
            marker: tmux session name that marks an active environment
            timeout: Overall per-probe bound in seconds, connect included
            clock: Epoch-milliseconds clock for checked_at
        """
        self.runner = runner
        self.marker = marker
        self.timeout = timeout
        self.clock = clock
        self._command = session_check_command(marker)
        self._token = f"{marker}:running"

    async def probe_host(self, host: HostDescriptor) -> ReachabilityRecord:
        """Probe one host. Never raises."""
        try:
            result = await self.runner.run(host, self._command, self.timeout)
        except Exception as e:
            logger.debug("Probe of %s (%s) failed: %s", host.name, host.target, e)
            state = ReachabilityState.UNREACHABLE
        else:
            if self._token in result.output:
                state = ReachabilityState.AVAILABLE
            else:
                state = ReachabilityState.UNAVAILABLE

        logger.debug("Probe %s -> %s", host.name, state.value)
        return ReachabilityRecord(host_name=host.name, state=state, checked_at=self.clock())

    async def probe(self, hosts: Iterable[HostDescriptor]) -> list[ReachabilityRecord]:
        """Probe every SSH-eligible host concurrently.

        Ineligible and local hosts are skipped and get no record. A host
        name listed twice is probed once.

        Args:
            hosts: Configured hosts

        Returns:
            One record per eligible host, in no particular order
        """
        eligible: dict[str, HostDescriptor] = {}
        for host in hosts:
            if is_ssh_eligible(host):
                eligible.setdefault(host.name, host)

        if not eligible:
            return []

        records = await asyncio.gather(*(self.probe_host(h) for h in eligible.values()))

        available = sum(1 for r in records if r.state is ReachabilityState.AVAILABLE)
        logger.info("Probed %d host(s): %d available", len(records), available)
        return list(records)
