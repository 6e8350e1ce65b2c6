"""Host descriptor models.

A host is either the local pseudo-host or a remote machine reached over SSH.
Remote operations only ever consider SSH-eligible hosts: every connection
field present and non-empty. Anything else is skipped without error.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

LOCAL_HOST_NAME = "local"


@dataclass(frozen=True)
class HostDescriptor:
    """A configured execution target."""

    name: str
    host: str | None = None
    user: str | None = None
    port: int | None = None
    identity_file: str | None = None
    is_local: bool = False

    @property
    def target(self) -> str:
        """Render user@host:port for log lines."""
        return f"{self.user or '?'}@{self.host or '?'}:{self.port or '?'}"

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "HostDescriptor":
        """Build a descriptor from a host mapping.

        Uses the external field names (name, host, user, port, identity_file).
        Missing keys stay None; eligibility is decided later.

        Args:
            data: Host mapping, e.g. a parsed host entry

        Returns:
            HostDescriptor for the mapping

        Raises:
            ValueError: If the mapping has no name
        """
        name = data.get("name")
        if not name:
            raise ValueError("host entry has no name")
        return cls(
            name=str(name),
            host=data.get("host"),
            user=data.get("user"),
            port=data.get("port"),
            identity_file=data.get("identity_file"),
        )


LOCAL_HOST = HostDescriptor(name=LOCAL_HOST_NAME, is_local=True)


def is_local_host(host: HostDescriptor) -> bool:
    """Check if host is the local machine."""
    return host.name == LOCAL_HOST_NAME or host.is_local


def _non_empty(value: object) -> bool:
    return isinstance(value, str) and len(value) > 0


def is_ssh_eligible(host: HostDescriptor) -> bool:
    """Check if host can be used for remote operations.

    Args:
        host: Host to check

    Returns:
        True if host is remote and has host, user, port and identity file
    """
    if is_local_host(host):
        return False
    port_ok = isinstance(host.port, int) and not isinstance(host.port, bool)
    return (
        _non_empty(host.host)
        and _non_empty(host.user)
        and port_ok
        and _non_empty(host.identity_file)
    )
