"""Session status signal files.

The assistant hook writes one small JSON file per tmux pane:

    {"status": "working", "updated": 1767225600}

File names come from the pane id with every character outside
[A-Za-z0-9] replaced by "_", the same rule the hook applies. Distinct
pane ids can therefore share a file ("%1.2" and "%1_2" both map to
"_1_2"); tmux pane ids ("%<n>") never collide this way.

Reads ignore signals older than five minutes. Sweeping deletes anything
older than an hour or unparsable, and is never triggered by reads.
"""

import json
import logging
import os
import re
import tempfile
from pathlib import Path

from yeehaw.models import SessionStatus, SignalRecord
from yeehaw.utils.clock import Clock, now_ms

logger = logging.getLogger(__name__)

_UNSAFE_CHARS = re.compile(r"[^a-zA-Z0-9]")


def sanitize_pane_id(pane_id: str) -> str:
    """Map a pane id to a safe file stem."""
    return _UNSAFE_CHARS.sub("_", pane_id)


def _parse(content: str) -> SignalRecord:
    """Decode a signal body.

    Raises:
        ValueError: If content is not a valid signal
    """
    return SignalRecord.from_dict(json.loads(content))


class SignalStore:
    """Reads, writes and sweeps per-pane signal files."""

    def __init__(
        self,
        directory: Path | str,
        max_age_ms: int = 300_000,
        sweep_age_ms: int = 3_600_000,
        clock: Clock = now_ms,
    ) -> None:
        self.directory = Path(directory)
        self.max_age_ms = max_age_ms
        self.sweep_age_ms = sweep_age_ms
        self.clock = clock

    def path_for(self, pane_id: str) -> Path:
        """Signal file path for a pane."""
        return self.directory / f"{sanitize_pane_id(pane_id)}.json"

    def read(self, pane_id: str) -> SignalRecord | None:
        """Read the current signal for a pane.

        Returns:
            The signal, or None if missing, unparsable or older than max age
        """
        path = self.path_for(pane_id)
        try:
            record = _parse(path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return None
        except (OSError, ValueError) as e:
            logger.debug("Ignoring unreadable signal %s: %s", path.name, e)
            return None

        if self.clock() - record.updated_ms > self.max_age_ms:
            return None
        return record

    def sweep(self) -> int:
        """Delete stale and malformed signal files.

        Returns:
            Number of files removed
        """
        if not self.directory.is_dir():
            return 0

        now = self.clock()
        removed = 0
        for path in self.directory.glob("*.json"):
            try:
                record = _parse(path.read_text(encoding="utf-8"))
            except (OSError, ValueError):
                stale = True
            else:
                stale = now - record.updated_ms > self.sweep_age_ms
            if not stale:
                continue
            try:
                path.unlink()
                removed += 1
            except FileNotFoundError:
                pass
            except OSError as e:
                logger.warning("Cannot remove signal %s: %s", path, e)

        if removed:
            logger.info("Swept %d stale signal file(s)", removed)
        return removed

    def remove(self, pane_id: str) -> None:
        """Delete the signal file for a pane, if present."""
        try:
            self.path_for(pane_id).unlink()
        except FileNotFoundError:
            pass

    def ensure_dir(self) -> None:
        """Create the signals directory."""
        self.directory.mkdir(parents=True, exist_ok=True)

    def write(
        self, pane_id: str, status: SessionStatus, updated: int | None = None
    ) -> SignalRecord:
        """Write a signal for a pane atomically.

        Args:
            pane_id: tmux pane id
            status: Current pane status
            updated: Epoch seconds, defaults to now

        Returns:
            The record written
        """
        if updated is None:
            updated = self.clock() // 1000
        record = SignalRecord(status=status, updated=updated)
        self.ensure_dir()
        path = self.path_for(pane_id)
        fd, tmp = tempfile.mkstemp(dir=self.directory, prefix=".", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(record.to_dict(), f)
            os.replace(tmp, path)
        except BaseException:
            Path(tmp).unlink(missing_ok=True)
            raise
        return record
