"""Application configuration.

Delegates to specialized components:
- SSHConfigParser: Reads ~/.ssh/config
- HostKeyVerifier: Host key policy and known_hosts
- Settings: Environment variables
"""

import logging
import os
from dataclasses import dataclass, field

from yeehaw.config.host_keys import HostKeyPolicy, HostKeyVerifier
from yeehaw.config.parser import SSHConfigParser
from yeehaw.config.settings import Settings
from yeehaw.models import LOCAL_HOST, HostDescriptor

logger = logging.getLogger(__name__)


def _split_env_list(key: str) -> list[str] | None:
    value = os.getenv(key, "").strip()
    if not value:
        return None
    return [item.strip() for item in value.split(",") if item.strip()]


@dataclass
class Config:
    """Application configuration.

    Aggregates settings from SSH config, host key policy, and environment.
    """

    settings: Settings = field(default_factory=Settings)
    parser: SSHConfigParser = field(default_factory=SSHConfigParser)
    host_keys: HostKeyVerifier = field(default_factory=HostKeyVerifier)
    _hosts_cache: dict[str, HostDescriptor] | None = field(default=None, init=False, repr=False)

    @classmethod
    def from_env(cls) -> "Config":
        """Create config from environment.

        Returns:
            Configured instance with all components initialized
        """
        settings = Settings.from_env()
        parser = SSHConfigParser(
            config_path=os.getenv("YEEHAW_SSH_CONFIG") or None,
            allowlist=_split_env_list("YEEHAW_ALLOWLIST"),
            blocklist=_split_env_list("YEEHAW_BLOCKLIST"),
        )
        host_keys = HostKeyVerifier(
            known_hosts_path=os.getenv("YEEHAW_KNOWN_HOSTS"),
            policy=HostKeyPolicy.parse(os.getenv("YEEHAW_STRICT_HOST_KEY_CHECKING")),
        )
        logger.debug(
            "Config loaded: marker=%s, ttl=%dms, host_key_policy=%s",
            settings.session_marker,
            settings.reachability_ttl_ms,
            host_keys.policy.value,
        )
        return cls(settings=settings, parser=parser, host_keys=host_keys)

    def get_hosts(self) -> list[HostDescriptor]:
        """Get configured hosts, local pseudo-host first.

        Lazy loads and caches the SSH config on first call.
        """
        if self._hosts_cache is None:
            self._hosts_cache = self.parser.parse()
        return [LOCAL_HOST, *self._hosts_cache.values()]

    def get_host(self, name: str) -> HostDescriptor | None:
        """Get host by name.

        Args:
            name: Host name to look up

        Returns:
            HostDescriptor if found, None otherwise
        """
        for host in self.get_hosts():
            if host.name == name:
                return host
        return None

    @property
    def known_hosts_path(self) -> str | None:
        """Path to known_hosts file or None if verification is skipped."""
        return self.host_keys.get_known_hosts_path()

    @property
    def strict_host_key_checking(self) -> bool:
        """Whether to reject unverifiable host keys."""
        return self.host_keys.strict_checking
