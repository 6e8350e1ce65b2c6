"""Dependency injection container for Yeehaw.

Owns the caches and the connection pool so nothing lives in module-level
state; tests build their own container or components.
"""

import weakref
from dataclasses import dataclass, field

from yeehaw.config import Config
from yeehaw.services.cache import ReachabilityCache
from yeehaw.services.completion import CompletionCache, CompletionFetcher
from yeehaw.services.coordinator import PollingCoordinator
from yeehaw.services.pool import ConnectionPool
from yeehaw.services.prober import ReachabilityProber
from yeehaw.services.remote import RemoteCommandRunner
from yeehaw.services.signals import SignalStore


@dataclass
class Dependencies:
    """Container for Yeehaw components.

    Example:
        deps = Dependencies.from_config(Config.from_env())
        await deps.coordinator.refresh()
        await deps.cleanup()
    """

    config: Config
    pool: ConnectionPool
    runner: RemoteCommandRunner
    reachability: ReachabilityCache
    coordinator: PollingCoordinator
    completions: CompletionCache
    signals: SignalStore
    _fetchers: "weakref.WeakSet[CompletionFetcher]" = field(
        default_factory=weakref.WeakSet, init=False, repr=False
    )

    @classmethod
    def create(cls) -> "Dependencies":
        """Create dependencies from the environment."""
        return cls.from_config(Config.from_env())

    @classmethod
    def from_config(cls, config: Config) -> "Dependencies":
        """Create dependencies with custom configuration.

        Args:
            config: Config instance

        Returns:
            Wired Dependencies
        """
        settings = config.settings
        pool = ConnectionPool(
            idle_timeout=settings.idle_timeout,
            max_size=settings.max_pool_size,
            connect_timeout=settings.probe_connect_timeout,
            known_hosts=config.known_hosts_path,
            strict_host_key_checking=config.strict_host_key_checking,
        )
        runner = RemoteCommandRunner(pool)
        reachability = ReachabilityCache(ttl_ms=settings.reachability_ttl_ms)
        prober = ReachabilityProber(
            runner,
            marker=settings.session_marker,
            timeout=settings.probe_timeout,
        )
        coordinator = PollingCoordinator(prober, reachability, config.get_hosts())
        signals = SignalStore(
            settings.signals_dir,
            max_age_ms=settings.signal_max_age_ms,
            sweep_age_ms=settings.signal_sweep_age_ms,
        )
        return cls(
            config=config,
            pool=pool,
            runner=runner,
            reachability=reachability,
            coordinator=coordinator,
            completions=CompletionCache(),
            signals=signals,
        )

    def completion_fetcher(self) -> CompletionFetcher:
        """New fetcher for one input field, sharing the listing cache."""
        settings = self.config.settings
        fetcher = CompletionFetcher(
            self.runner,
            self.completions,
            debounce=settings.completion_debounce,
            timeout=settings.completion_timeout,
        )
        self._fetchers.add(fetcher)
        return fetcher

    async def cleanup(self) -> None:
        """Cancel pending completions and close all connections."""
        for fetcher in list(self._fetchers):
            fetcher.cancel()
        await self.pool.close_all()
