"""Wall clock helpers.

All freshness checks in Yeehaw compare epoch milliseconds.
"""

import time
from collections.abc import Callable

Clock = Callable[[], int]


def now_ms() -> int:
    """Current time in epoch milliseconds."""
    return int(time.time() * 1000)
