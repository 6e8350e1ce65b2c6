"""Reachability polling.

Decides when to re-probe and publishes the hosts where the managed session
is available. Refreshes are batch-wide: if any eligible host has a missing
or stale record, every eligible host is probed again.
"""

import asyncio
import itertools
import logging
from collections import Counter
from collections.abc import Callable, Iterable

from yeehaw.models import (
    HostDescriptor,
    ReachabilityState,
    RemoteEnvironment,
    is_ssh_eligible,
)
from yeehaw.services.cache import ReachabilityCache
from yeehaw.services.prober import ReachabilityProber

logger = logging.getLogger(__name__)


class PollingCoordinator:
    """Keeps the reachability cache current for a set of hosts."""

    def __init__(
        self,
        prober: ReachabilityProber,
        cache: ReachabilityCache,
        hosts: Iterable[HostDescriptor] = (),
    ) -> None:
        self.prober = prober
        self.cache = cache
        self._hosts: list[HostDescriptor] = list(hosts)
        self._sequence = itertools.count(1)
        self._in_flight = 0
        # host name -> number of running batches covering it
        self._checking: Counter[str] = Counter()

    @property
    def hosts(self) -> list[HostDescriptor]:
        """Configured hosts."""
        return list(self._hosts)

    @property
    def eligible_hosts(self) -> list[HostDescriptor]:
        """Configured hosts that can be probed over SSH."""
        return [h for h in self._hosts if is_ssh_eligible(h)]

    @property
    def is_detecting(self) -> bool:
        """Whether a probe batch is in flight."""
        return self._in_flight > 0

    async def set_hosts(self, hosts: Iterable[HostDescriptor]) -> bool:
        """Replace the configured hosts.

        Refreshes when the set of eligible host names changed.

        Returns:
            Whether a probe batch ran
        """
        before = {h.name for h in self.eligible_hosts}
        self._hosts = list(hosts)
        after = {h.name for h in self.eligible_hosts}
        if before == after:
            return False
        logger.debug("Eligible hosts changed: %s", sorted(after))
        return await self.refresh()

    async def refresh(self, force: bool = False) -> bool:
        """Re-probe all eligible hosts if any record is missing or stale.

        Args:
            force: Probe even when every record is fresh

        Returns:
            Whether a probe batch ran
        """
        hosts = self.eligible_hosts
        if not hosts:
            return False
        if not force and not self.cache.needs_refresh(h.name for h in hosts):
            return False

        sequence = next(self._sequence)
        names = [h.name for h in hosts]
        self._in_flight += 1
        self._checking.update(names)
        logger.debug("Starting probe batch %d for %d host(s)", sequence, len(hosts))
        try:
            records = await self.prober.probe(hosts)
            for record in records:
                self.cache.put(record, sequence)
        finally:
            self._in_flight -= 1
            self._checking.subtract(names)
            self._checking += Counter()
        return True

    def state_of(self, host_name: str) -> ReachabilityState:
        """Current state for a host, including in-flight checks."""
        if self._checking[host_name] > 0:
            return ReachabilityState.CHECKING
        record = self.cache.get(host_name)
        return record.state if record else ReachabilityState.NOT_CHECKED

    def environment_states(self) -> list[RemoteEnvironment]:
        """Every eligible host with its current state."""
        return [RemoteEnvironment(host=h, state=self.state_of(h.name)) for h in self.eligible_hosts]

    def environments(self) -> list[RemoteEnvironment]:
        """Eligible hosts whose latest record is available."""
        result = []
        for host in self.eligible_hosts:
            record = self.cache.get(host.name)
            if record is not None and record.state is ReachabilityState.AVAILABLE:
                result.append(RemoteEnvironment(host=host, state=record.state))
        return result

    async def poll(
        self,
        interval: float,
        listener: Callable[[list[RemoteEnvironment]], None] | None = None,
    ) -> None:
        """Refresh stale records every interval seconds until cancelled.

        Args:
            interval: Seconds between refresh checks
            listener: Called with the available environments after each batch
        """
        logger.debug("Polling every %ss", interval)
        while True:
            if await self.refresh() and listener is not None:
                listener(self.environments())
            await asyncio.sleep(interval)
