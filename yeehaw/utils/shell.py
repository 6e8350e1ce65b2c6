"""Shell command safety utilities."""

import shlex


def quote_arg(arg: str) -> str:
    """Safely quote a shell argument.

    Args:
        arg: Argument to quote

    Returns:
        Shell-safe quoted argument
    """
    return shlex.quote(arg)


def quote_remote_path(path: str) -> str:
    """Quote a remote path, keeping a leading ~ expandable.

    The remote shell only expands an unquoted tilde prefix, so "~" and
    "~/rest" keep the tilde bare and quote the remainder.

    Args:
        path: Remote directory path

    Returns:
        Shell-safe path
    """
    if path == "~":
        return "~"
    if path.startswith("~/"):
        rest = path[2:]
        return "~/" + shlex.quote(rest) if rest else "~/"
    return shlex.quote(path)
