"""Tests for the console log formatter."""

import logging

from yeehaw.utils.console import ColorfulFormatter


def _record(name: str, msg: str, *args: object) -> logging.LogRecord:
    return logging.LogRecord(name, logging.INFO, __file__, 1, msg, args, None)


def test_plain_format_has_all_columns() -> None:
    """Uncolored output is time | level | component | message."""
    formatter = ColorfulFormatter(use_colors=False)
    line = formatter.format(_record("yeehaw.services.prober", "Probe %s -> %s", "box", "available"))

    parts = [p.strip() for p in line.split("|")]
    assert parts[1] == "INFO"
    assert parts[2] == "services.prober"
    assert parts[3] == "Probe box -> available"
    assert "\033[" not in line


def test_colored_format_highlights_ssh_target() -> None:
    """SSH targets are highlighted when colors are on."""
    formatter = ColorfulFormatter(use_colors=True)
    line = formatter.format(_record("yeehaw.services.pool", "Opening dev@10.0.0.5:22"))

    assert "\033[95mdev@10.0.0.5:22" in line
