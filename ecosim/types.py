"""Shared enums, type aliases and errors for the ecosystem engine."""

from __future__ import annotations

import enum
import random as _random
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable

Vec = tuple[float, float]


class Kind(str, enum.Enum):
    PLANT = "plant"
    PREY = "prey"
    PREDATOR = "predator"


class ZoneKind(str, enum.Enum):
    POLLUTION = "pollution"
    DEFORESTATION = "deforestation"
    CONSERVATION = "conservation"


class Weather(str, enum.Enum):
    SUNNY = "sunny"
    RAINY = "rainy"
    STORM = "storm"
    SNOW = "snow"


class SimState(str, enum.Enum):
    IDLE = "idle"
    RUNNING = "running"
    STOPPED = "stopped"


@dataclass(frozen=True, slots=True)
class TickContext:
    tick_number: int
    dt: float
    request_stop: Callable[[], None]
    random: _random.Random


class ConfigurationError(ValueError):
    """Raised when settings, zones or control values are invalid."""


class SnapshotError(Exception):
    """Raised on restore failures (version mismatch)."""


def coerce(enum_type: type[enum.Enum], value: object) -> enum.Enum:
    """Accept an enum member or its string value."""
    if isinstance(value, enum_type):
        return value
    try:
        return enum_type(str(value).lower())
    except ValueError:
        choices = ", ".join(m.value for m in enum_type)
        raise ConfigurationError(
            f"Unknown {enum_type.__name__} {value!r}, expected one of: {choices}"
        ) from None


if TYPE_CHECKING:
    from ecosim.world import World

System = Callable[["World", TickContext], None]
