"""Directory path completion, local or over SSH.

Local completion reads the parent directory synchronously. Remote
completion lists the whole parent directory once, caches the unfiltered
listing per (host, directory), and filters by prefix on every keystroke.
Cache misses go through a trailing debounce so fast typing issues a single
listing command.
"""

import asyncio
import logging
import os
from collections.abc import Coroutine
from typing import Any

from yeehaw.models import HostDescriptor, is_local_host, is_ssh_eligible
from yeehaw.protocols import CommandRunner
from yeehaw.services.remote import CommandFailedError
from yeehaw.services.scheduler import Debouncer
from yeehaw.utils.paths import (
    filter_prefix,
    remote_parent_dir,
    remote_prefix,
    resolve_tab,
    split_local_path,
)
from yeehaw.utils.shell import quote_remote_path

logger = logging.getLogger(__name__)

CacheKey = tuple[str, str]


def listing_command(directory: str) -> str:
    """Remote command printing one child directory name per line."""
    return f"ls -1F {quote_remote_path(directory)} 2>/dev/null | grep '/$' | sed 's|/$||' || true"


class CompletionCache:
    """Full directory listings keyed by (host name, directory)."""

    def __init__(self) -> None:
        self._entries: dict[CacheKey, list[str]] = {}

    def get(self, host_name: str, directory: str) -> list[str] | None:
        return self._entries.get((host_name, directory))

    def put(self, host_name: str, directory: str, names: list[str]) -> None:
        self._entries[(host_name, directory)] = list(names)

    def clear(self) -> None:
        self._entries.clear()

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)


class CompletionFetcher:
    """Completion source for one path input field."""

    def __init__(
        self,
        runner: CommandRunner,
        cache: CompletionCache,
        debounce: float = 0.2,
        timeout: float = 5,
    ) -> None:
        """Initialize fetcher.

        Args:
            runner: Executes the listing command on a host
            cache: Shared listing cache
            debounce: Seconds to wait after the last request before fetching
            timeout: Overall bound for one remote listing, in seconds
        """
        self.runner = runner
        self.cache = cache
        self.timeout = timeout
        self._debouncer = Debouncer(debounce)
        self._waiter: asyncio.Future[list[str]] | None = None
        self._running = 0
        self._tasks: set[asyncio.Task[list[str]]] = set()

    @property
    def is_loading(self) -> bool:
        """Whether a remote request is waiting or running."""
        return self._debouncer.pending or self._running > 0

    def complete_local(self, partial: str) -> list[str]:
        """Directory names in the local parent matching the trailing segment."""
        if not partial:
            return []
        directory, prefix = split_local_path(partial)
        try:
            with os.scandir(directory) as entries:
                names = [
                    entry.name
                    for entry in entries
                    if entry.name.startswith(prefix) and entry.is_dir(follow_symlinks=False)
                ]
        except OSError:
            return []
        return sorted(names)

    def cached_completions(self, partial: str, host: HostDescriptor) -> list[str] | None:
        """Remote completions from cache only.

        Returns:
            Matching names, or None on a cache miss
        """
        listing = self.cache.get(host.name, remote_parent_dir(partial))
        if listing is None:
            return None
        return filter_prefix(listing, remote_prefix(partial))

    async def complete(self, partial: str, host: HostDescriptor | None = None) -> list[str]:
        """Completion candidates for the trailing path segment.

        A request that is superseded by a newer one before its debounce
        window ends resolves to an empty list.

        Args:
            partial: Path typed so far
            host: Remote host, or None / the local host for local paths

        Returns:
            Matching child directory names
        """
        self.cancel()
        if host is None or is_local_host(host):
            return self.complete_local(partial)
        if not partial or not is_ssh_eligible(host):
            return []

        cached = self.cached_completions(partial, host)
        if cached is not None:
            return cached

        loop = asyncio.get_running_loop()
        waiter: asyncio.Future[list[str]] = loop.create_future()
        self._waiter = waiter
        self._debouncer.schedule(self._fire, partial, host, waiter)
        return await waiter

    def _supersede(self) -> None:
        if self._waiter is not None and not self._waiter.done():
            self._waiter.set_result([])
        self._waiter = None

    def _fire(self, partial: str, host: HostDescriptor, waiter: "asyncio.Future[list[str]]") -> None:
        if waiter.done():
            return
        task = self._spawn(self._fetch_and_filter(partial, host))

        def deliver(done: "asyncio.Task[list[str]]") -> None:
            if waiter.done():
                return
            if done.cancelled() or done.exception() is not None:
                waiter.set_result([])
            else:
                waiter.set_result(done.result())

        task.add_done_callback(deliver)

    async def _fetch_and_filter(self, partial: str, host: HostDescriptor) -> list[str]:
        directory = remote_parent_dir(partial)
        listing = self.cache.get(host.name, directory)
        if listing is None:
            listing = await self._list(directory, host)
            if listing is None:
                return []
            self.cache.put(host.name, directory, listing)
        return filter_prefix(listing, remote_prefix(partial))

    async def fetch_listing(self, directory: str, host: HostDescriptor) -> list[str]:
        """List child directories of a remote directory.

        Never raises; any failure yields an empty list.
        """
        return await self._list(directory, host) or []

    async def _list(self, directory: str, host: HostDescriptor) -> list[str] | None:
        # None on failure, so failed listings are never cached
        self._running += 1
        try:
            result = await self.runner.run(host, listing_command(directory), self.timeout)
            if result.returncode != 0:
                raise CommandFailedError(host.name, f"exit status {result.returncode}")
        except Exception as e:
            logger.debug("Listing %s on %s failed: %s", directory, host.name, e)
            return None
        finally:
            self._running -= 1

        names = [line for line in result.output.strip().splitlines() if line.strip()]
        logger.debug("Listed %s on %s: %d dir(s)", directory, host.name, len(names))
        return names

    def prefetch(self, directory: str, host: HostDescriptor) -> "asyncio.Task[list[str]] | None":
        """Fetch and cache a directory listing in the background.

        Skipped when the host is ineligible or the listing is already cached.

        Returns:
            The background task, or None if skipped
        """
        if not is_ssh_eligible(host) or (host.name, directory) in self.cache:
            return None
        return self._spawn(self._prefetch(directory, host))

    async def _prefetch(self, directory: str, host: HostDescriptor) -> list[str]:
        listing = await self._list(directory, host)
        if listing is None:
            return []
        self.cache.put(host.name, directory, listing)
        return listing

    def accept(
        self, value: str, candidates: list[str], host: HostDescriptor | None = None
    ) -> str | None:
        """Apply tab completion to value.

        When a single remote match is accepted, the new directory is
        prefetched so the next request is served from cache.

        Returns:
            New input value, or None when tab does nothing
        """
        remote = host is not None and not is_local_host(host)
        new_value = resolve_tab(value, candidates, remote=remote)
        if host is not None and remote and new_value is not None and len(candidates) == 1:
            self.prefetch(remote_parent_dir(new_value), host)
        return new_value

    def cancel(self) -> None:
        """Drop the pending debounced request, if any."""
        self._debouncer.cancel()
        self._supersede()

    def _spawn(self, coro: Coroutine[Any, Any, list[str]]) -> "asyncio.Task[list[str]]":
        task = asyncio.get_running_loop().create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task
