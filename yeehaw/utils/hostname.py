"""Hostname detection utilities for localhost identification."""

import socket


def get_server_hostname() -> str:
    """Get the hostname of the machine running Yeehaw.

    Returns:
        Hostname string (lowercase for consistent comparison)
    """
    return socket.gethostname().lower()


def is_localhost_target(target_host: str) -> bool:
    """Check if an SSH alias names the machine we are running on.

    Args:
        target_host: SSH host name to check

    Returns:
        True if target matches server hostname (case-insensitive)
    """
    if not target_host:
        return False

    server_hostname = get_server_hostname()
    target_lower = target_host.lower()

    if target_lower == server_hostname:
        return True

    # Server hostname is FQDN and target is short name
    if "." in server_hostname and target_lower == server_hostname.split(".")[0]:
        return True

    # Target is FQDN and server is short name
    if "." in target_lower and target_lower.split(".")[0] == server_hostname:
        return True

    return False
