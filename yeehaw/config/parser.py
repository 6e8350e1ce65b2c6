"""SSH config file parser.

Reads ~/.ssh/config and turns host definitions into host descriptors,
with allowlist/blocklist filtering. Port defaults to 22 as in ssh(1);
other fields a block does not set stay empty, and such hosts are kept
but never used for remote work.
"""

import logging
import os
import re
from fnmatch import fnmatch
from pathlib import Path

from yeehaw.models import LOCAL_HOST_NAME, HostDescriptor
from yeehaw.utils.hostname import is_localhost_target

logger = logging.getLogger(__name__)

_HOST_RE = re.compile(r"^Host\s+(.+)$", re.IGNORECASE)
_KV_RE = re.compile(r"^(\w+)(?:\s*=\s*|\s+)(.+)$")


class SSHConfigParser:
    """Parser for SSH config files."""

    def __init__(
        self,
        config_path: Path | str | None = None,
        allowlist: list[str] | None = None,
        blocklist: list[str] | None = None,
    ):
        """Initialize SSH config parser.

        Args:
            config_path: Path to SSH config file (default: ~/.ssh/config)
            allowlist: Only include hosts matching these globs (if set)
            blocklist: Exclude hosts matching these globs
        """
        if config_path is None:
            config_path = Path.home() / ".ssh" / "config"

        self.config_path = Path(config_path)
        self.allowlist = list(allowlist) if allowlist else None
        self.blocklist = list(blocklist) if blocklist else []

    def parse(self) -> dict[str, HostDescriptor]:
        """Parse SSH config and return host descriptors.

        Returns:
            Dictionary mapping host alias to HostDescriptor
        """
        if not self.config_path.exists():
            logger.debug("SSH config not found: %s", self.config_path)
            return {}

        try:
            content = self.config_path.read_text()
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("Cannot read SSH config %s: %s", self.config_path, e)
            return {}

        blocks: list[tuple[str, dict[str, str]]] = []
        global_defaults: dict[str, str] = {}
        current: dict[str, str] | None = None

        for raw in content.splitlines():
            line = raw.strip()
            if not line or line.startswith("#"):
                continue

            host_match = _HOST_RE.match(line)
            if host_match:
                alias = host_match.group(1).split()[0]
                if alias == "*":
                    current = global_defaults
                elif "*" in alias or "?" in alias:
                    current = None
                else:
                    current = {}
                    blocks.append((alias, current))
                continue

            kv_match = _KV_RE.match(line)
            if kv_match and current is not None:
                key = kv_match.group(1).lower()
                value = kv_match.group(2).strip().strip('"')
                if key == "identityfile":
                    value = os.path.expanduser(value)
                # First value wins, as in ssh(1)
                current.setdefault(key, value)

        hosts: dict[str, HostDescriptor] = {}
        for alias, data in blocks:
            if alias == LOCAL_HOST_NAME or not self._is_host_allowed(alias):
                continue
            merged = {**global_defaults, **data}
            hosts[alias] = HostDescriptor(
                name=alias,
                host=merged.get("hostname"),
                user=merged.get("user"),
                port=self._parse_port(alias, merged.get("port")),
                identity_file=merged.get("identityfile"),
                is_local=is_localhost_target(alias),
            )

        logger.info("Parsed %d hosts from %s", len(hosts), self.config_path)
        return hosts

    @staticmethod
    def _parse_port(alias: str, value: str | None) -> int:
        if value is None:
            return 22
        try:
            return int(value)
        except ValueError:
            logger.warning("Invalid port %r for %s, using 22", value, alias)
            return 22

    def _is_host_allowed(self, name: str) -> bool:
        """Check if host passes allowlist/blocklist filters."""
        if self.allowlist:
            return any(fnmatch(name, pattern) for pattern in self.allowlist)

        if self.blocklist:
            return not any(fnmatch(name, pattern) for pattern in self.blocklist)

        return True
