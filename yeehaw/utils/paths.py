"""Path completion helpers.

Splitting a partial path into the directory to list and the prefix to
match, plus the tab-resolution policy applied to a candidate list.
"""

import os
import posixpath
from collections.abc import Iterable, Sequence


def split_local_path(partial: str) -> tuple[str, str]:
    """Split a local partial path into (directory, prefix).

    A leading ~/ is expanded. A trailing slash means "list this directory".

    Args:
        partial: Path typed so far

    Returns:
        Directory to read and the trailing segment to match
    """
    expanded = os.path.expanduser(partial) if partial.startswith("~/") else partial
    if partial.endswith("/"):
        return expanded, ""
    return os.path.dirname(expanded) or ".", os.path.basename(expanded)


def remote_parent_dir(partial: str) -> str:
    """Normalize the remote directory a partial path completes in.

    Args:
        partial: Path typed so far

    Returns:
        Directory without trailing slash; "~" when the input names none
    """
    if partial.endswith("/"):
        stripped = partial.rstrip("/")
        if stripped:
            return stripped
        return "/" if partial.startswith("/") else "~"
    return posixpath.dirname(partial) or "~"


def remote_prefix(partial: str) -> str:
    """Trailing segment of a remote partial path."""
    if partial.endswith("/"):
        return ""
    return posixpath.basename(partial)


def filter_prefix(names: Iterable[str], prefix: str) -> list[str]:
    """Keep names starting with prefix, preserving order."""
    if not prefix:
        return list(names)
    return [name for name in names if name.startswith(prefix)]


def common_prefix(candidates: Sequence[str]) -> str:
    """Longest common prefix, compared character by character."""
    if not candidates:
        return ""
    prefix = candidates[0]
    for candidate in candidates[1:]:
        i = 0
        while i < len(prefix) and i < len(candidate) and prefix[i] == candidate[i]:
            i += 1
        prefix = prefix[:i]
        if not prefix:
            break
    return prefix


def display_dir(value: str, remote: bool = False) -> str:
    """Directory part of the input as the user typed it."""
    if value.endswith("/"):
        return value
    head = value[: value.rfind("/") + 1]
    if head:
        return head
    return "~/" if remote else ""


def resolve_tab(value: str, candidates: Sequence[str], remote: bool = False) -> str | None:
    """Apply tab completion to the input.

    Args:
        value: Current input
        candidates: Completion candidates for the trailing segment
        remote: Whether the input is a remote path

    Returns:
        New input value, or None when tab does nothing
    """
    if not candidates:
        return None
    if len(candidates) == 1:
        return display_dir(value, remote) + candidates[0] + "/"
    prefix = common_prefix(candidates)
    if not prefix:
        return None
    return display_dir(value, remote) + prefix
