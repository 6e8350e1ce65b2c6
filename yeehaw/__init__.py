"""Yeehaw remote reachability, path completion and session signals."""

__version__ = "0.1.0"
