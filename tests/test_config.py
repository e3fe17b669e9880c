"""Tests for settings validation."""

import math

import pytest

from ecosim.config import DEFAULT_CLIMATE, ClimateBand, Settings
from ecosim.types import ConfigurationError


def test_defaults_are_valid():
    """Default settings pass validation."""
    s = Settings()
    assert s.width == 800.0
    assert s.height == 500.0
    assert s.grass_regrow_time == 30
    assert s.climate == DEFAULT_CLIMATE


def test_animals_more_sensitive_than_plants_by_default():
    s = Settings()
    assert s.pollution_animal_rate > s.pollution_plant_rate
    assert s.conservation_animal_rate > s.conservation_plant_rate


# --- Rejections ---

@pytest.mark.parametrize("name", ["sheep_reproduce_prob", "plant_regrowth_chance", "rain_plant_chance"])
def test_probability_out_of_range_rejected(name):
    """Probabilities must lie in [0, 1]."""
    with pytest.raises(ConfigurationError):
        Settings(**{name: 1.5})
    with pytest.raises(ConfigurationError):
        Settings(**{name: -0.1})


def test_negative_range_rejected():
    """Ranges cannot be negative."""
    with pytest.raises(ConfigurationError):
        Settings(predation_range=-1.0)


def test_zero_width_rejected():
    """The world needs a positive width."""
    with pytest.raises(ConfigurationError):
        Settings(width=0)


def test_nan_rejected():
    """NaN values are rejected."""
    with pytest.raises(ConfigurationError):
        Settings(max_energy=float("nan"))


def test_inverted_speed_band_rejected():
    """A speed band needs low <= high."""
    with pytest.raises(ConfigurationError):
        Settings(prey_speed=(2.0, 1.0))


def test_initial_energy_above_cap_rejected():
    """Seeded energy cannot exceed the cap."""
    with pytest.raises(ConfigurationError):
        Settings(initial_energy=(50.0, 150.0))


def test_pollution_rates_must_favor_plants():
    """Pollution must hit animals harder than plants."""
    with pytest.raises(ConfigurationError):
        Settings(pollution_plant_rate=5.0, pollution_animal_rate=5.0)


def test_conservation_rates_must_favor_animals():
    """Conservation must help animals more than plants."""
    with pytest.raises(ConfigurationError):
        Settings(conservation_plant_rate=3.0, conservation_animal_rate=2.0)


def test_configuration_error_is_value_error():
    """ConfigurationError is a ValueError."""
    with pytest.raises(ValueError):
        Settings(eat_range=-5)


# --- Climate bands ---

def test_climate_must_increase():
    """Band upper bounds must strictly increase."""
    bands = (
        ClimateBand("a", 10.0),
        ClimateBand("b", 5.0),
        ClimateBand("c", math.inf),
    )
    with pytest.raises(ConfigurationError):
        Settings(climate=bands)


def test_climate_last_band_unbounded():
    """The last band must be unbounded."""
    with pytest.raises(ConfigurationError):
        Settings(climate=(ClimateBand("a", 0.0), ClimateBand("b", 40.0)))


def test_climate_empty_rejected():
    """At least one band is required."""
    with pytest.raises(ConfigurationError):
        Settings(climate=())


def test_climate_band_needs_label():
    """Bands need a label."""
    with pytest.raises(ConfigurationError):
        ClimateBand("", 0.0)


def test_single_unbounded_band_is_valid():
    s = Settings(climate=(ClimateBand("only", math.inf, plant_delta=1.0),))
    assert len(s.climate) == 1


# --- replace() ---

def test_replace_returns_copy():
    """replace() returns a new validated copy."""
    s = Settings()
    t = s.replace(wolf_gain_from_food=30.0)
    assert t.wolf_gain_from_food == 30.0
    assert s.wolf_gain_from_food == 20.0


def test_replace_validates():
    """replace() validates the changed values."""
    with pytest.raises(ConfigurationError):
        Settings().replace(wolf_reproduce_prob=2.0)


def test_settings_frozen():
    """Settings are immutable."""
    s = Settings()
    with pytest.raises(Exception):
        s.width = 10.0  # type: ignore[misc]
