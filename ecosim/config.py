"""Simulation settings.

All tunables live in one frozen ``Settings`` value that is validated on
construction and read-only for the duration of a run. Invalid values raise
``ConfigurationError`` here, never from inside a tick.
"""
from __future__ import annotations

import dataclasses
import math
from dataclasses import dataclass, field

from ecosim.types import ConfigurationError

# Temperature band labels, coldest first.
FREEZE = "freeze"
CHILLY = "chilly"
IDEAL = "ideal"
HOT = "hot"

TEMPERATURE_MIN = -50.0
TEMPERATURE_MAX = 50.0


@dataclass(frozen=True)
class ClimateBand:
    """A temperature band and the per-tick deltas it applies.

    Attributes:
        label: Name reported by ``effect_zone``.
        upper: Exclusive upper bound in °C (``math.inf`` for the last band).
        plant_delta: Added to plant health every tick.
        animal_delta: Added to animal energy every tick.
    """

    label: str
    upper: float
    plant_delta: float = 0.0
    animal_delta: float = 0.0

    def __post_init__(self) -> None:
        if not self.label:
            raise ConfigurationError("ClimateBand label must be non-empty")
        if math.isnan(self.upper):
            raise ConfigurationError(f"ClimateBand {self.label!r} upper bound is NaN")


DEFAULT_CLIMATE: tuple[ClimateBand, ...] = (
    ClimateBand(FREEZE, 0.0, plant_delta=-0.2, animal_delta=-0.5),
    ClimateBand(CHILLY, 15.0, plant_delta=-0.05, animal_delta=-0.1),
    ClimateBand(IDEAL, 30.0),
    ClimateBand(HOT, math.inf, plant_delta=-0.05, animal_delta=-0.3),
)

_PROBABILITIES = (
    "sheep_reproduce_prob",
    "wolf_reproduce_prob",
    "plant_regrowth_chance",
    "pasture_birth_prob",
    "rain_plant_chance",
)

_POSITIVE = (
    "width",
    "height",
    "max_energy",
    "max_health",
)

_NON_NEGATIVE = (
    "plant_initial_health",
    "plant_partial_regrowth",
    "grass_regrow_time",
    "fear_range",
    "flee_multiplier",
    "prey_search_range",
    "predator_search_range",
    "eat_range",
    "attack_range",
    "predation_range",
    "prey_plant_range",
    "graze_amount",
    "sheep_gain_from_food",
    "wolf_gain_from_food",
    "pasture_bite",
    "pasture_gain",
    "prey_energy_cost",
    "predator_energy_cost",
    "sheep_reproduce_threshold",
    "wolf_reproduce_threshold",
    "pasture_birth_threshold",
    "zone_intensity",
    "pollution_plant_rate",
    "pollution_animal_rate",
    "deforestation_rate",
    "conservation_plant_rate",
    "conservation_animal_rate",
    "rain_plant_bonus",
)

_BANDS = ("prey_speed", "predator_speed", "initial_energy")


@dataclass(frozen=True)
class Settings:
    # World extents
    width: float = 800.0
    height: float = 500.0

    # Caps
    max_energy: float = 100.0
    max_health: float = 100.0
    plant_initial_health: float = 100.0
    initial_energy: tuple[float, float] = (50.0, 100.0)

    # Plants
    grass_regrow_time: int = 30
    plant_regrowth_chance: float = 0.7
    plant_partial_regrowth: float = 20.0

    # Movement and sensing
    prey_speed: tuple[float, float] = (1.5, 2.0)
    predator_speed: tuple[float, float] = (1.5, 1.5)
    fear_range: float = 80.0
    flee_multiplier: float = 1.2
    prey_search_range: float = 100.0
    predator_search_range: float = 150.0
    eat_range: float = 10.0
    attack_range: float = 10.0

    # Feeding
    graze_amount: float = 50.0
    sheep_gain_from_food: float = 4.0
    wolf_gain_from_food: float = 20.0
    prey_energy_cost: float = 1.0
    predator_energy_cost: float = 1.5

    # Reproduction
    sheep_reproduce_threshold: float = 30.0
    sheep_reproduce_prob: float = 0.04
    wolf_reproduce_threshold: float = 40.0
    wolf_reproduce_prob: float = 0.05
    birth_offset: float = 10.0

    # Pairwise interactions
    predation_range: float = 50.0
    prey_plant_range: float = 30.0
    pasture_bite: float = 20.0
    pasture_gain: float = 15.0
    pasture_birth_threshold: float = 80.0
    pasture_birth_prob: float = 0.03
    pasture_birth_offset: float = 20.0

    # Impact zones
    zone_intensity: float = 0.1
    pollution_plant_rate: float = 1.0
    pollution_animal_rate: float = 5.0
    deforestation_rate: float = 10.0
    conservation_plant_rate: float = 1.0
    conservation_animal_rate: float = 2.0

    # Weather and temperature
    climate: tuple[ClimateBand, ...] = field(default=DEFAULT_CLIMATE)
    rain_plant_bonus: float = 0.1
    rain_plant_chance: float = 0.02

    def __post_init__(self) -> None:
        for name in _POSITIVE:
            value = getattr(self, name)
            if not value > 0:
                raise ConfigurationError(f"{name} must be > 0, got {value!r}")
        for name in _NON_NEGATIVE:
            value = getattr(self, name)
            if not value >= 0:
                raise ConfigurationError(f"{name} must be >= 0, got {value!r}")
        for name in _PROBABILITIES:
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise ConfigurationError(
                    f"{name} must be within [0, 1], got {value!r}"
                )
        for name in _BANDS:
            lo, hi = getattr(self, name)
            if lo < 0 or hi < lo:
                raise ConfigurationError(
                    f"{name} must be a (low, high) band with 0 <= low <= high, "
                    f"got {(lo, hi)!r}"
                )
        if self.initial_energy[1] > self.max_energy:
            raise ConfigurationError("initial_energy must not exceed max_energy")
        if self.plant_initial_health > self.max_health:
            raise ConfigurationError("plant_initial_health must not exceed max_health")
        if self.pollution_animal_rate <= self.pollution_plant_rate:
            raise ConfigurationError(
                "pollution_animal_rate must exceed pollution_plant_rate"
            )
        if self.conservation_animal_rate <= self.conservation_plant_rate:
            raise ConfigurationError(
                "conservation_animal_rate must exceed conservation_plant_rate"
            )
        _check_climate(self.climate)

    def replace(self, **changes: object) -> Settings:
        """Return a copy with *changes* applied (validated again)."""
        return dataclasses.replace(self, **changes)


def _check_climate(bands: tuple[ClimateBand, ...]) -> None:
    if not bands:
        raise ConfigurationError("climate needs at least one band")
    previous = -math.inf
    for band in bands:
        if band.upper <= previous:
            raise ConfigurationError(
                f"climate band {band.label!r} upper bound {band.upper} "
                f"must be greater than {previous}"
            )
        previous = band.upper
    if bands[-1].upper != math.inf:
        raise ConfigurationError("the last climate band must be unbounded (math.inf)")
