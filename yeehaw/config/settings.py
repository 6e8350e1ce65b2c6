"""Application settings from environment variables.

Centralized environment variable parsing and validation.
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

logger = logging.getLogger(__name__)


def _default_signals_dir() -> Path:
    return Path.home() / ".yeehaw" / "session-signals"


@dataclass
class Settings:
    """Application settings from environment.

    Handles parsing, validation, and defaults for all env vars.
    """

    # Reachability
    session_marker: str = field(default="yeehaw")
    probe_connect_timeout: int = field(default=5)
    probe_grace: int = field(default=2)
    reachability_ttl_ms: int = field(default=300_000)
    poll_interval: int = field(default=60)

    # Path completion
    completion_debounce_ms: int = field(default=200)
    completion_timeout: int = field(default=5)

    # Session signals
    signals_dir: Path = field(default_factory=_default_signals_dir)
    signal_max_age_ms: int = field(default=300_000)
    signal_sweep_age_ms: int = field(default=3_600_000)

    # Connection pool
    idle_timeout: int = field(default=60)
    max_pool_size: int = field(default=100)

    # Logging
    log_level: str = field(default="INFO")
    log_colors: bool = field(default=True)

    @property
    def probe_timeout(self) -> int:
        """Overall probe timeout in seconds (connect timeout plus grace)."""
        return self.probe_connect_timeout + self.probe_grace

    @property
    def completion_debounce(self) -> float:
        """Completion debounce window in seconds."""
        return self.completion_debounce_ms / 1000

    @classmethod
    def from_env(cls) -> "Settings":
        """Load settings from YEEHAW_* environment variables.

        Returns:
            Settings instance with values from environment
        """
        signals_dir = os.getenv("YEEHAW_SIGNALS_DIR", "").strip()
        return cls(
            session_marker=os.getenv("YEEHAW_SESSION_MARKER", "yeehaw"),
            probe_connect_timeout=cls._get_int("YEEHAW_PROBE_CONNECT_TIMEOUT", 5),
            probe_grace=cls._get_int("YEEHAW_PROBE_GRACE", 2),
            reachability_ttl_ms=cls._get_int("YEEHAW_REACHABILITY_TTL_MS", 300_000),
            poll_interval=cls._get_int("YEEHAW_POLL_INTERVAL", 60),
            completion_debounce_ms=cls._get_int("YEEHAW_COMPLETION_DEBOUNCE_MS", 200),
            completion_timeout=cls._get_int("YEEHAW_COMPLETION_TIMEOUT", 5),
            signals_dir=(
                Path(os.path.expanduser(signals_dir)) if signals_dir else _default_signals_dir()
            ),
            signal_max_age_ms=cls._get_int("YEEHAW_SIGNAL_MAX_AGE_MS", 300_000),
            signal_sweep_age_ms=cls._get_int("YEEHAW_SIGNAL_SWEEP_AGE_MS", 3_600_000),
            idle_timeout=cls._get_int("YEEHAW_IDLE_TIMEOUT", 60),
            max_pool_size=cls._get_int("YEEHAW_MAX_POOL_SIZE", 100),
            log_level=os.getenv("YEEHAW_LOG_LEVEL", "INFO").upper(),
            log_colors=cls._get_bool("YEEHAW_LOG_COLORS", True),
        )

    @staticmethod
    def _get_int(key: str, default: int) -> int:
        """Get integer from environment.

        Args:
            key: Environment variable key
            default: Default value if not set or invalid

        Returns:
            Integer value from environment or default
        """
        value = os.getenv(key)
        if value is None:
            return default

        try:
            return int(value)
        except ValueError:
            logger.warning("Invalid int for %s: %s, using default %d", key, value, default)
            return default

    @staticmethod
    def _get_bool(key: str, default: bool) -> bool:
        """Get boolean from environment.

        Args:
            key: Environment variable key
            default: Default value if not set

        Returns:
            Boolean value from environment or default
        """
        value = os.getenv(key)
        if value is None:
            return default
        return value.lower() in ("1", "true", "yes", "on")
