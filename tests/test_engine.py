"""Tests for the Simulation lifecycle and control surface."""

import pytest

from ecosim.config import Settings
from ecosim.engine import ALREADY_RUNNING, EMPTY_WORLD, Simulation
from ecosim.signals import TickSummary
from ecosim.types import ConfigurationError, Kind, SimState, Weather, ZoneKind


def _populated(seed: int = 1) -> Simulation:
    sim = Simulation(seed=seed)
    sim.add_entities(Kind.PREDATOR, 3)
    sim.add_entities(Kind.PREY, 10)
    sim.add_entities(Kind.PLANT, 20)
    return sim


# --- Lifecycle ---

def test_initial_state():
    """A new simulation is idle at tick 0 with no messages."""
    sim = Simulation(seed=1)
    assert sim.state is SimState.IDLE
    assert sim.running is False
    assert sim.tick_number == 0
    assert sim.messages == []


def test_start_refused_on_empty_world():
    """Starting an empty world is refused with a condition and a message."""
    sim = Simulation(seed=1)
    conditions = []
    sim.on_condition(lambda code, text: conditions.append((code, text)))
    assert sim.start() is False
    assert sim.state is SimState.IDLE
    assert conditions == [(EMPTY_WORLD, "Add animals and plants first!")]
    assert sim.messages[-1] == "Add animals and plants first!"


def test_start_and_already_running():
    """A second start() while running is refused."""
    sim = _populated()
    conditions = []
    sim.on_condition(lambda code, text: conditions.append(code))
    assert sim.start() is True
    assert sim.state is SimState.RUNNING
    assert sim.messages[-1] == "Simulation started!"
    assert sim.start() is False
    assert conditions == [ALREADY_RUNNING]
    assert sim.state is SimState.RUNNING


def test_stop():
    """stop() only acts while running."""
    sim = _populated()
    assert sim.stop() is False
    sim.start()
    assert sim.stop() is True
    assert sim.state is SimState.STOPPED
    assert sim.messages[-1] == "Simulation stopped."
    assert sim.stop() is False


def test_restart_after_stop():
    """A stopped simulation can be started again."""
    sim = _populated()
    sim.start()
    sim.stop()
    assert sim.start() is True
    assert sim.running


def test_reset():
    """Reset clears the world, zones and history, restores sunny weather and keeps the temperature."""
    sim = _populated()
    sim.place_zone(ZoneKind.POLLUTION, (100, 100))
    sim.set_weather(Weather.RAINY)
    sim.set_temperature(-5)
    sim.start()
    sim.run(5)
    sim.reset()
    assert sim.state is SimState.IDLE
    assert sim.world.entities == []
    assert sim.world.zones == []
    assert len(sim.history) == 0
    assert sim.tick_number == 0
    assert sim.environment.weather is Weather.SUNNY
    assert sim.environment.temperature == -5.0
    assert sim.messages == ["Reset! Start a new ecosystem!"]


def test_reset_is_idempotent():
    """Resetting twice gives the same state as resetting once."""
    sim = _populated()
    sim.start()
    sim.run(3)
    sim.reset()
    first = sim.snapshot()
    sim.reset()
    second = sim.snapshot()
    del first["rng_state"], second["rng_state"]
    assert first == second


# --- Stepping ---

def test_step_advances_in_any_state():
    """step() advances one tick even when not running."""
    sim = _populated()
    sim.step()
    assert sim.tick_number == 1
    assert sim.state is SimState.IDLE
    assert len(sim.history) == 1


def test_run_requires_running():
    """run() does nothing unless the simulation is running."""
    sim = _populated()
    assert sim.run(10) == 0
    assert sim.tick_number == 0


def test_run_counts_ticks():
    """run(n) executes n ticks and records one sample per tick."""
    sim = _populated()
    sim.start()
    assert sim.run(7) == 7
    assert sim.tick_number == 7
    assert [s.tick for s in sim.history] == list(range(1, 8))


def test_run_stops_on_collapse():
    """A world with no animals stops after its first tick."""
    sim = Simulation(seed=1)
    sim.add_entities(Kind.PLANT, 5)
    sim.start()
    assert sim.run(10) == 1
    assert sim.state is SimState.STOPPED
    assert "Ecosystem empty! Add more friends!" in sim.messages


def test_step_reentrancy_rejected():
    """Calling step() from inside a tick callback raises RuntimeError."""
    sim = _populated()
    sim.on_tick(lambda data: sim.step())
    with pytest.raises(RuntimeError):
        sim.step()
    assert sim.tick_number == 1


def test_on_tick_payload():
    """on_tick receives the census of every completed tick."""
    sim = _populated()
    seen = []
    sim.on_tick(seen.append)
    sim.start()
    sim.run(2)
    assert [d["tick"] for d in seen] == [1, 2]
    assert set(seen[0]) == {"tick", "predator_count", "prey_count", "plant_count", "temperature"}
    assert set(seen[0]) == set(TickSummary.__annotations__)
    latest = sim.history.latest()
    assert seen[-1]["prey_count"] == latest.prey
    assert seen[-1]["predator_count"] == latest.predators
    assert seen[-1]["plant_count"] == latest.plants


def test_on_message_receives_announcements():
    """Control calls announce themselves through on_message."""
    sim = Simulation(seed=1)
    texts = []
    sim.on_message(texts.append)
    sim.add_entities(Kind.PREDATOR, 1)
    sim.add_entities(Kind.PLANT, 2)
    assert texts == ["Added 1 wolf!", "Added 2 grass patches!"]


def test_run_forever_paces_and_stops(monkeypatch):
    """run_forever sleeps between ticks and exits once stopped."""
    sleeps = []
    monkeypatch.setattr("ecosim.engine.time.sleep", sleeps.append)
    sim = _populated()

    def stop_at_three(data):
        if data["tick"] == 3:
            sim.stop()

    sim.on_tick(stop_at_three)
    sim.start()
    sim.run_forever()
    assert sim.tick_number == 3
    assert sim.state is SimState.STOPPED
    assert len(sleeps) == 2
    assert all(0 < s <= 0.4 for s in sleeps)


def test_run_forever_not_running_returns_immediately():
    sim = _populated()
    sim.run_forever()
    assert sim.tick_number == 0


# --- Controls ---

def test_add_entities_accepts_strings():
    """Kinds can be given by their string value."""
    sim = Simulation(seed=1)
    added = sim.add_entities("prey", 3)
    assert len(added) == 3
    assert all(e.kind is Kind.PREY for e in added)
    assert sim.messages[-1] == "Added 3 sheep!"


def test_add_entities_random_positions_in_bounds():
    """Random entities land inside the world with speed and energy in their bands."""
    sim = Simulation(seed=2)
    for e in sim.add_entities(Kind.PREDATOR, 20):
        assert sim.world.in_bounds(e)
        lo, hi = sim.settings.predator_speed
        assert lo <= e.speed <= hi
        assert 0 < e.energy <= sim.settings.max_energy


def test_add_entities_zero_is_silent():
    sim = Simulation(seed=1)
    assert sim.add_entities(Kind.PLANT, 0) == []
    assert sim.messages == []


def test_add_entities_rejects_bad_input():
    """Unknown kinds and negative counts raise ConfigurationError."""
    sim = Simulation(seed=1)
    with pytest.raises(ConfigurationError):
        sim.add_entities("dragon", 1)
    with pytest.raises(ConfigurationError):
        sim.add_entities(Kind.PREY, -1)


def test_add_entity_clamps():
    """Explicit positions and energies are clamped to the world and the caps."""
    sim = Simulation(seed=1)
    wolf = sim.add_entity(Kind.PREDATOR, 900, -10, energy=500)
    assert wolf.position == (800.0, 0.0)
    assert wolf.energy == sim.settings.max_energy
    grass = sim.add_entity("plant", 10, 10, health=0)
    assert grass.health == 0.0


def test_place_zone():
    """place_zone adds a zone with the default radius and announces it."""
    sim = Simulation(seed=1)
    zone = sim.place_zone("conservation", (10, 20))
    assert zone.kind is ZoneKind.CONSERVATION
    assert zone.radius == 60.0
    assert sim.world.zones == [zone]
    assert sim.messages[-1] == "Placed conservation zone."


def test_place_zone_rejects_bad_radius():
    sim = Simulation(seed=1)
    with pytest.raises(ConfigurationError):
        sim.place_zone(ZoneKind.POLLUTION, (0, 0), radius=0)


def test_set_weather():
    """Weather accepts members or strings and rejects unknown values."""
    sim = Simulation(seed=1)
    assert sim.set_weather("storm") is Weather.STORM
    assert sim.environment.weather is Weather.STORM
    assert sim.messages[-1] == "Weather changed to storm!"
    with pytest.raises(ConfigurationError):
        sim.set_weather("hail")


def test_repeated_weather_message_deduplicated():
    """Setting the same weather twice posts one message."""
    sim = Simulation(seed=1)
    sim.set_weather(Weather.RAINY)
    sim.set_weather(Weather.RAINY)
    assert sim.messages == ["Weather changed to rainy!"]


def test_set_temperature_clamps():
    """Temperatures are clamped to 50 degrees either side of zero."""
    sim = Simulation(seed=1)
    assert sim.set_temperature(99) == 50.0
    assert sim.environment.temperature == 50.0
    assert sim.messages[-1] == "Temperature set to 50°C"


def test_set_temperature_rejects_nan():
    """A NaN temperature raises and leaves the environment untouched."""
    sim = Simulation(seed=1)
    with pytest.raises(ConfigurationError):
        sim.set_temperature(float("nan"))
    assert sim.environment.temperature == 20.0
    assert sim.messages == []


def test_set_temperature_sync_weather():
    """sync_weather picks the weather suggested for the new temperature."""
    sim = Simulation(seed=1)
    sim.set_temperature(-5, sync_weather=True)
    assert sim.environment.weather is Weather.SNOW
    sim.set_temperature(12)
    assert sim.environment.weather is Weather.SNOW


def test_set_speed():
    """set_speed returns the new delay and rejects non-positive speeds."""
    sim = Simulation(seed=1)
    assert sim.set_speed(5) == pytest.approx(0.4)
    assert sim.set_speed(1) == pytest.approx(2.0)
    assert sim.clock.speed == 1
    with pytest.raises(ConfigurationError):
        sim.set_speed(0)
    with pytest.raises(ConfigurationError):
        sim.set_speed(-3)


def test_set_speed_does_not_change_outcomes():
    """Speed only changes pacing, never results."""
    a = _populated(seed=9)
    b = _populated(seed=9)
    b.set_speed(10)
    for sim in (a, b):
        sim.start()
        sim.run(20)
    assert a.history.snapshot() == b.history.snapshot()


def test_invalid_settings_rejected():
    with pytest.raises(ConfigurationError):
        Simulation(settings=Settings(fear_range=-1))


def test_seed_generated_when_omitted():
    """A seed is generated when none is given."""
    sim = Simulation()
    assert isinstance(sim.seed, int)
