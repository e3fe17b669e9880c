"""Clock and TickContext for the stepping engine."""

import random
from typing import Callable

from ecosim.types import ConfigurationError, TickContext

DEFAULT_SPEED = 5.0


def delay_for_speed(speed: float) -> float:
    """Seconds between ticks for a UI speed value (2 s / speed)."""
    if not speed > 0:
        raise ConfigurationError(f"speed must be positive, got {speed!r}")
    return 2.0 / speed


class Clock:
    def __init__(self, speed: float = DEFAULT_SPEED) -> None:
        self._speed = speed
        self._dt = delay_for_speed(speed)
        self._tick_number = 0

    @property
    def speed(self) -> float:
        return self._speed

    @property
    def dt(self) -> float:
        return self._dt

    @property
    def tick_number(self) -> int:
        return self._tick_number

    def set_speed(self, speed: float) -> float:
        self._dt = delay_for_speed(speed)
        self._speed = speed
        return self._dt

    def advance(self) -> int:
        self._tick_number += 1
        return self._tick_number

    def context(self, stop_fn: Callable[[], None], rng: random.Random) -> TickContext:
        return TickContext(
            tick_number=self._tick_number,
            dt=self._dt,
            request_stop=stop_fn,
            random=rng,
        )

    def reset(self, tick_number: int = 0) -> None:
        self._tick_number = tick_number
