"""Utilities for Yeehaw."""

from yeehaw.utils.clock import now_ms
from yeehaw.utils.console import ColorfulFormatter
from yeehaw.utils.hostname import get_server_hostname, is_localhost_target
from yeehaw.utils.paths import (
    common_prefix,
    display_dir,
    filter_prefix,
    remote_parent_dir,
    remote_prefix,
    resolve_tab,
    split_local_path,
)
from yeehaw.utils.shell import quote_arg, quote_remote_path

__all__ = [
    "ColorfulFormatter",
    "common_prefix",
    "display_dir",
    "filter_prefix",
    "get_server_hostname",
    "is_localhost_target",
    "now_ms",
    "quote_arg",
    "quote_remote_path",
    "remote_parent_dir",
    "remote_prefix",
    "resolve_tab",
    "split_local_path",
]
