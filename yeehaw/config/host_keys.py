"""SSH host key verification.

Maps the OpenSSH StrictHostKeyChecking policies onto a known_hosts path
and a strictness flag the connection pool understands.
"""

import logging
import os
from enum import Enum
from pathlib import Path

logger = logging.getLogger(__name__)


class HostKeyPolicy(str, Enum):
    """StrictHostKeyChecking equivalents."""

    YES = "yes"
    ACCEPT_NEW = "accept-new"
    NO = "no"

    @classmethod
    def parse(cls, value: str | None) -> "HostKeyPolicy":
        """Parse a policy name, defaulting to accept-new."""
        if not value:
            return cls.ACCEPT_NEW
        normalized = value.strip().lower()
        aliases = {"true": cls.YES, "false": cls.NO, "off": cls.NO}
        if normalized in aliases:
            return aliases[normalized]
        try:
            return cls(normalized)
        except ValueError:
            logger.warning("Unknown host key policy %r, using accept-new", value)
            return cls.ACCEPT_NEW


class HostKeyVerifier:
    """SSH host key verification manager."""

    def __init__(
        self,
        known_hosts_path: str | None = None,
        policy: HostKeyPolicy = HostKeyPolicy.ACCEPT_NEW,
    ):
        """Initialize host key verifier.

        Args:
            known_hosts_path: Path to known_hosts file or 'none' to disable
            policy: How to treat unknown host keys

        Raises:
            FileNotFoundError: If policy is 'yes' and the file is missing
        """
        self.policy = policy
        self._known_hosts = self._resolve_known_hosts(known_hosts_path)

    @property
    def strict_checking(self) -> bool:
        """Whether unverifiable host keys are rejected."""
        return self.policy is HostKeyPolicy.YES

    def _resolve_known_hosts(self, value: str | None) -> str | None:
        """Resolve known_hosts path for the policy.

        Returns:
            Path to known_hosts file or None to skip verification

        Raises:
            FileNotFoundError: If strict and file missing
        """
        if self.policy is HostKeyPolicy.NO or (value and value.lower() == "none"):
            logger.warning("SSH host key verification disabled")
            return None

        path = Path(os.path.expanduser(value)) if value else Path.home() / ".ssh" / "known_hosts"
        if path.exists():
            return str(path)

        if self.strict_checking:
            raise FileNotFoundError(
                f"SSH host key verification required but known_hosts not found at {path}.\n"
                f"Add host keys with: ssh-keyscan <hostname> >> {path}\n"
                f"or set YEEHAW_STRICT_HOST_KEY_CHECKING=accept-new"
            )
        logger.debug("known_hosts not found at %s, accepting new host keys", path)
        return None

    def get_known_hosts_path(self) -> str | None:
        """Get path to known_hosts file.

        Returns:
            Path string or None if verification is skipped
        """
        return self._known_hosts
