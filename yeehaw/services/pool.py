"""SSH connection pooling with lazy disconnect.

Locking Strategy:
- `_meta_lock`: Protects _connections OrderedDict and _host_locks dict structure
- Per-host locks: Protect connection creation/removal for specific hosts
- Lock acquisition order: Always per-host lock first, then meta-lock if needed

LRU Eviction:
- Uses OrderedDict with move_to_end() for O(1) LRU tracking
- Eviction happens when pool reaches max_size before creating new connection
"""

import asyncio
import logging
from collections import OrderedDict
from datetime import datetime, timedelta
from typing import TYPE_CHECKING, Any

import asyncssh

from yeehaw.models import PooledConnection

if TYPE_CHECKING:
    from yeehaw.models import HostDescriptor

logger = logging.getLogger(__name__)


class ConnectionPool:
    """SSH connection pool with size limits and LRU eviction."""

    def __init__(
        self,
        idle_timeout: int = 60,
        max_size: int = 100,
        connect_timeout: float = 5,
        known_hosts: str | None = None,
        strict_host_key_checking: bool = False,
    ) -> None:
        """Initialize pool.

        Args:
            idle_timeout: Seconds before idle connections are closed
            max_size: Maximum number of concurrent SSH connections (must be > 0)
            connect_timeout: Seconds allowed for TCP connect and SSH handshake
            known_hosts: Path to known_hosts file, or None to skip verification
            strict_host_key_checking: Whether to reject unverifiable host keys

        Raises:
            ValueError: If max_size is not positive
        """
        if max_size <= 0:
            raise ValueError(f"max_size must be > 0, got {max_size}")

        self.idle_timeout = idle_timeout
        self.max_size = max_size
        self.connect_timeout = connect_timeout
        self._connections: OrderedDict[str, PooledConnection] = OrderedDict()
        self._host_locks: dict[str, asyncio.Lock] = {}
        self._meta_lock = asyncio.Lock()
        self._cleanup_task: asyncio.Task[Any] | None = None

        self._known_hosts = known_hosts
        self._strict_host_key = strict_host_key_checking

        logger.debug(
            "ConnectionPool initialized (idle_timeout=%ds, max_size=%d, connect_timeout=%ss)",
            idle_timeout,
            max_size,
            connect_timeout,
        )

    async def _get_host_lock(self, host_name: str) -> asyncio.Lock:
        """Get or create lock for a specific host."""
        async with self._meta_lock:
            if host_name not in self._host_locks:
                self._host_locks[host_name] = asyncio.Lock()
            return self._host_locks[host_name]

    async def _evict_lru_if_needed(self) -> None:
        """Evict least recently used connections if at capacity.

        Connections are closed outside the meta-lock.
        """
        to_close: list[PooledConnection] = []

        async with self._meta_lock:
            while len(self._connections) >= self.max_size:
                oldest_host = next(iter(self._connections))
                logger.info(
                    "Pool at capacity (%d/%d), evicting LRU: %s",
                    len(self._connections),
                    self.max_size,
                    oldest_host,
                )
                to_close.append(self._connections.pop(oldest_host))

        for pooled in to_close:
            pooled.connection.close()

    def has_connection(self, host_name: str) -> bool:
        """Check if a live pooled connection exists for host."""
        pooled = self._connections.get(host_name)
        return pooled is not None and not pooled.is_stale

    async def _connect(
        self, host: "HostDescriptor", known_hosts: str | None
    ) -> asyncssh.SSHClientConnection:
        return await asyncssh.connect(
            host.host,
            port=host.port,
            username=host.user,
            client_keys=[host.identity_file] if host.identity_file else None,
            known_hosts=known_hosts,
            connect_timeout=self.connect_timeout,
        )

    def _has_known_key(self, host: "HostDescriptor") -> bool:
        """Check if known_hosts already holds an entry for host.

        An unreadable file counts as an entry, so accept-new fails closed.
        """
        if self._known_hosts is None:
            return False
        try:
            known = asyncssh.read_known_hosts(self._known_hosts)
        except (OSError, ValueError) as e:
            logger.warning("Cannot read known_hosts %s: %s", self._known_hosts, e)
            return True
        return any(known.match(host.host or "", "", host.port))

    def _record_host_key(
        self, host: "HostDescriptor", conn: asyncssh.SSHClientConnection
    ) -> None:
        """Append the server's key to known_hosts after accepting it."""
        key = conn.get_server_host_key()
        if key is None or self._known_hosts is None:
            return
        pattern = host.host if host.port in (None, 22) else f"[{host.host}]:{host.port}"
        line = f"{pattern} {key.export_public_key().decode().strip()}\n"
        try:
            with open(self._known_hosts, "a", encoding="utf-8") as f:
                f.write(line)
        except OSError as e:
            logger.warning("Cannot record host key for %s: %s", host.name, e)
            return
        logger.info("Recorded host key for %s in %s", host.name, self._known_hosts)

    async def get_connection(self, host: "HostDescriptor") -> asyncssh.SSHClientConnection:
        """Get or create a connection to the host."""
        host_lock = await self._get_host_lock(host.name)

        async with host_lock:
            pooled = self._connections.get(host.name)

            if pooled and not pooled.is_stale:
                pooled.touch()
                async with self._meta_lock:
                    self._connections.move_to_end(host.name)
                logger.debug(
                    "Reusing existing connection to %s (pool_size=%d)",
                    host.name,
                    len(self._connections),
                )
                return pooled.connection

            if pooled and pooled.is_stale:
                logger.debug("Connection to %s is stale, reconnecting", host.name)

            await self._evict_lru_if_needed()

            logger.debug("Opening SSH connection to %s (%s)", host.name, host.target)
            try:
                conn = await self._connect(host, self._known_hosts)
            except asyncssh.HostKeyNotVerifiable as e:
                if self._strict_host_key:
                    logger.error(
                        "Host key verification failed for %s: %s. "
                        "Add the host key to %s or set "
                        "YEEHAW_STRICT_HOST_KEY_CHECKING=accept-new",
                        host.name,
                        e,
                        self._known_hosts,
                    )
                    raise
                if self._has_known_key(host):
                    logger.error(
                        "Host key for %s does not match %s, refusing to connect",
                        host.name,
                        self._known_hosts,
                    )
                    raise
                logger.warning("Accepting new host key for %s", host.name)
                conn = await self._connect(host, None)
                self._record_host_key(host, conn)

            async with self._meta_lock:
                self._connections[host.name] = PooledConnection(connection=conn)
                self._connections.move_to_end(host.name)

            logger.debug(
                "SSH connection established to %s (pool_size=%d/%d)",
                host.name,
                len(self._connections),
                self.max_size,
            )

            if self._cleanup_task is None or self._cleanup_task.done():
                self._cleanup_task = asyncio.create_task(self._cleanup_loop())

            return conn

    async def _cleanup_loop(self) -> None:
        """Periodically clean up idle connections."""
        while True:
            await asyncio.sleep(max(self.idle_timeout // 2, 1))
            await self._cleanup_idle()

            if not self._connections:
                logger.debug("Cleanup loop stopped - no connections remaining")
                break

    async def _cleanup_idle(self) -> None:
        """Close connections that have been idle too long."""
        async with self._meta_lock:
            hosts_to_check = list(self._connections.keys())

        cutoff = datetime.now() - timedelta(seconds=self.idle_timeout)

        for host_name in hosts_to_check:
            host_lock = await self._get_host_lock(host_name)
            async with host_lock:
                pooled = self._connections.get(host_name)
                if pooled and (pooled.last_used < cutoff or pooled.is_stale):
                    reason = "stale" if pooled.is_stale else "idle"
                    logger.debug("Closing %s connection to %s", reason, host_name)
                    pooled.connection.close()
                    del self._connections[host_name]

    async def close_all(self) -> None:
        """Close all connections."""
        async with self._meta_lock:
            host_names = list(self._connections.keys())

        if host_names:
            logger.info("Closing all %d connection(s)", len(host_names))
            for host_name in host_names:
                await self.remove_connection(host_name)

        if self._cleanup_task and not self._cleanup_task.done():
            self._cleanup_task.cancel()

    async def remove_connection(self, host_name: str) -> None:
        """Remove a specific connection from the pool.

        Args:
            host_name: Name of the host to remove.
        """
        host_lock = await self._get_host_lock(host_name)
        async with host_lock:
            pooled = self._connections.pop(host_name, None)
            if pooled is not None:
                logger.debug("Removing connection to %s", host_name)
                pooled.connection.close()

    @property
    def pool_size(self) -> int:
        """Return the current number of connections in the pool."""
        return len(self._connections)

    @property
    def active_hosts(self) -> list[str]:
        """Return list of hosts with active connections."""
        return list(self._connections.keys())
