from __future__ import annotations

import logging
import time

logger = logging.getLogger(__name__)


class SystemClock:
    """Wall-clock time source in whole seconds."""

    def now(self) -> int:
        return int(time.time())


class ManualClock:
    """Deterministic clock for simulations and tests. Never moves backwards."""

    def __init__(self, start_time: int):
        self.current_time = int(start_time)

    def now(self) -> int:
        return self.current_time

    def advance(self, seconds: int) -> int:
        if seconds < 0:
            raise ValueError("Clock cannot move backwards.")
        self.current_time += int(seconds)
        return self.current_time

    def set(self, timestamp: int) -> int:
        timestamp = int(timestamp)
        if timestamp < self.current_time:
            raise ValueError(
                f"Clock cannot move backwards: {timestamp} < {self.current_time}"
            )
        self.current_time = timestamp
        logger.debug("Manual clock set to %s", timestamp)
        return self.current_time
