"""ecosim - a tick-driven predator-prey-grass ecosystem engine."""

from ecosim.clock import Clock
from ecosim.config import ClimateBand, Settings
from ecosim.engine import Simulation
from ecosim.entity import Entity
from ecosim.environment import EnvironmentModel, effect_zone, suggest_weather
from ecosim.history import PopulationRecorder, PopulationSample
from ecosim.signals import TickSummary
from ecosim.types import (
    ConfigurationError,
    Kind,
    SimState,
    SnapshotError,
    TickContext,
    Weather,
    ZoneKind,
)
from ecosim.world import World
from ecosim.zones import ImpactZone

__all__ = [
    "Simulation",
    "World",
    "Clock",
    "Settings",
    "ClimateBand",
    "Entity",
    "ImpactZone",
    "EnvironmentModel",
    "PopulationRecorder",
    "PopulationSample",
    "TickContext",
    "TickSummary",
    "Kind",
    "ZoneKind",
    "Weather",
    "SimState",
    "ConfigurationError",
    "SnapshotError",
    "effect_zone",
    "suggest_weather",
]
