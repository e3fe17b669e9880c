"""Temperature and weather state and the per-tick deltas they produce."""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass

from ecosim.config import TEMPERATURE_MAX, TEMPERATURE_MIN, ClimateBand, Settings
from ecosim.entity import Entity
from ecosim.types import ConfigurationError, Weather
from ecosim.vec import clamp

logger = logging.getLogger(__name__)


def climate_band(temperature: float, bands: tuple[ClimateBand, ...]) -> ClimateBand:
    for band in bands:
        if temperature < band.upper:
            return band
    return bands[-1]


def effect_zone(temperature: float, bands: tuple[ClimateBand, ...]) -> str:
    """Label of the band *temperature* falls in (e.g. ``"freeze"``)."""
    return climate_band(temperature, bands).label


def suggest_weather(temperature: float) -> Weather:
    """Weather that usually goes with *temperature*."""
    if temperature < 0:
        return Weather.SNOW
    if temperature < 10:
        return Weather.STORM
    if temperature < 20:
        return Weather.RAINY
    return Weather.SUNNY


@dataclass
class EnvironmentModel:
    temperature: float = 20.0
    weather: Weather = Weather.SUNNY

    def set_temperature(self, celsius: float) -> float:
        if math.isnan(celsius):
            raise ConfigurationError("temperature must be a number, got NaN")
        clamped = clamp(float(celsius), TEMPERATURE_MIN, TEMPERATURE_MAX)
        if clamped != celsius:
            logger.debug("temperature %s clamped to %s", celsius, clamped)
        self.temperature = clamped
        return clamped

    def effect_zone(self, settings: Settings) -> str:
        return effect_zone(self.temperature, settings.climate)

    def apply_to(self, entity: Entity, settings: Settings) -> None:
        band = climate_band(self.temperature, settings.climate)
        if entity.is_plant:
            delta = band.plant_delta
            if self.weather is Weather.RAINY:
                delta += settings.rain_plant_bonus
            # Dormant plants only recover through the regrowth timer.
            if delta > 0 and entity.health <= 0.0:
                return
            if delta:
                entity.add_health(delta, settings.max_health)
        elif band.animal_delta:
            entity.add_energy(band.animal_delta, settings.max_energy)
