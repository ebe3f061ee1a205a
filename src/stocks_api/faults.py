"""
# faults.py

FaultInjector: simulates an unreliable backend by randomly delaying or
failing requests. Used by the flaky API version only.

Each call to apply() makes two independent draws in [0, 100):

  - latency roll d: if d < latency_percent the calling thread sleeps d + 1
    seconds before continuing;
  - error roll e: if e < error_percent InternalServerError is raised and the
    requested action is never performed.

The random source and the sleep function are injectable so tests can
script both draws and observe delays without waiting.
"""

from __future__ import annotations

import logging
import random
import time
from typing import Callable, Optional, Protocol

from .errors import InternalServerError

logger = logging.getLogger(__name__)


class RandomSource(Protocol):
    def randrange(self, stop: int) -> int:
        ...


class FaultInjector:
    """Randomly delay and fail requests."""

    def __init__(
        self,
        rng: Optional[RandomSource] = None,
        sleep: Optional[Callable[[float], None]] = None,
        latency_percent: int = 15,
        error_percent: int = 20,
    ) -> None:
        for name, value in (('latency_percent', latency_percent), ('error_percent', error_percent)):
            if not isinstance(value, int) or not 0 <= value <= 100:
                raise ValueError(f"{name} must be an integer between 0 and 100")
        self.rng = rng if rng is not None else random.Random()
        self.sleep = sleep if sleep is not None else time.sleep
        self.latency_percent = latency_percent
        self.error_percent = error_percent

    def delay(self) -> int:
        """Roll for latency; returns the seconds slept (0 if none)."""
        d = self.rng.randrange(100)
        if d < self.latency_percent:
            seconds = d + 1
            logger.warning("injecting %ds delay", seconds)
            self.sleep(seconds)
            return seconds
        return 0

    def fail(self) -> None:
        """Roll for an error; raises InternalServerError on a hit."""
        if self.rng.randrange(100) < self.error_percent:
            logger.warning("injecting internal server error")
            raise InternalServerError()

    def apply(self) -> None:
        self.delay()
        self.fail()

    def __repr__(self) -> str:
        return f"FaultInjector(latency_percent={self.latency_percent}, error_percent={self.error_percent})"


__all__ = ['FaultInjector', 'RandomSource']
