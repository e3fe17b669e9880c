"""Simulation - the stepping engine, its lifecycle and collaborator interface."""

from __future__ import annotations

import logging
import os
import random
import time
from typing import Any, Callable

from ecosim.clock import DEFAULT_SPEED, Clock
from ecosim.config import Settings
from ecosim.entity import Entity, make_entity
from ecosim.environment import EnvironmentModel, suggest_weather
from ecosim.feed import MessageFeed
from ecosim.history import PopulationRecorder
from ecosim.signals import (
    CONDITION,
    MESSAGE,
    TICK,
    ConditionPayload,
    MessagePayload,
    SignalBus,
    TickSummary,
)
from ecosim.systems import (
    make_behavior_system,
    make_census_system,
    make_cleanup_system,
    make_climate_system,
    make_interaction_system,
    make_rain_system,
    make_termination_system,
    make_zone_system,
)
from ecosim.types import (
    ConfigurationError,
    Kind,
    SimState,
    SnapshotError,
    System,
    Vec,
    Weather,
    ZoneKind,
    coerce,
)
from ecosim.world import World
from ecosim.zones import ImpactZone

logger = logging.getLogger(__name__)

_SNAPSHOT_VERSION = 1

DEFAULT_ZONE_RADIUS = 60.0

EMPTY_WORLD = "empty_world"
ALREADY_RUNNING = "already_running"

_LABELS = {
    Kind.PLANT: ("grass patch", "grass patches"),
    Kind.PREY: ("sheep", "sheep"),
    Kind.PREDATOR: ("wolf", "wolves"),
}


class Simulation:
    """Predator-prey-grass engine driven one tick at a time.

    The caller owns the instance. ``step()`` advances exactly one tick and is
    what a test harness or UI timer calls; ``run(n)`` and ``run_forever()``
    keep stepping only while the simulation is running.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        seed: int | None = None,
        speed: float = DEFAULT_SPEED,
        message_history: int = 3,
    ) -> None:
        self._clock = Clock(speed)
        self._world = World(settings)
        self._history = PopulationRecorder()
        self._feed = MessageFeed(message_history)
        self._bus = SignalBus()
        self._state = SimState.IDLE
        self._stop_requested = False
        self._ticking = False

        if seed is None:
            seed = int.from_bytes(os.urandom(8))
        self._seed = seed
        self._rng = random.Random(seed)

        self._systems: list[System] = [
            make_climate_system(),
            make_rain_system(self._notify),
            make_behavior_system(self._notify),
            make_zone_system(),
            make_interaction_system(self._notify),
            make_cleanup_system(),
            make_census_system(self._history, self._bus),
            make_termination_system(self._history, self._notify),
        ]

    # -- Read access --

    @property
    def world(self) -> World:
        return self._world

    @property
    def settings(self) -> Settings:
        return self._world.settings

    @property
    def environment(self) -> EnvironmentModel:
        return self._world.environment

    @property
    def history(self) -> PopulationRecorder:
        return self._history

    @property
    def clock(self) -> Clock:
        return self._clock

    @property
    def seed(self) -> int:
        return self._seed

    @property
    def state(self) -> SimState:
        return self._state

    @property
    def running(self) -> bool:
        return self._state is SimState.RUNNING

    @property
    def tick_number(self) -> int:
        return self._clock.tick_number

    @property
    def messages(self) -> list[str]:
        return self._feed.texts()

    # -- Collaborator callbacks --

    def on_tick(self, callback: Callable[[TickSummary], None]) -> None:
        """Call *callback* with the population summary after every tick."""
        self._bus.subscribe(TICK, lambda _name, data: callback(data))

    def on_message(self, callback: Callable[[str], None]) -> None:
        self._bus.subscribe(MESSAGE, lambda _name, data: callback(data["text"]))

    def on_condition(self, callback: Callable[[str, str], None]) -> None:
        """Call *callback* with ``(code, text)`` when a control call is refused."""
        self._bus.subscribe(
            CONDITION, lambda _name, data: callback(data["code"], data["text"])
        )

    # -- Population and environment controls --

    def add_entities(self, kind: Kind | str, count: int) -> list[Entity]:
        """Insert *count* entities of *kind* at random positions."""
        kind = coerce(Kind, kind)
        if count < 0:
            raise ConfigurationError(f"count must be >= 0, got {count!r}")
        added = []
        for _ in range(count):
            x = self._rng.uniform(0.0, self._world.width)
            y = self._rng.uniform(0.0, self._world.height)
            added.append(self._world.add(make_entity(kind, x, y, self.settings, self._rng)))
        if count:
            singular, plural = _LABELS[kind]
            self._announce(f"Added {count} {singular if count == 1 else plural}!")
        return added

    def add_entity(
        self,
        kind: Kind | str,
        x: float,
        y: float,
        energy: float | None = None,
        health: float | None = None,
    ) -> Entity:
        """Insert one entity at an explicit position.

        *energy* (animals) and *health* (plants) override the defaults and
        are clamped to the configured caps.
        """
        kind = coerce(Kind, kind)
        entity = make_entity(kind, x, y, self.settings, self._rng)
        if energy is not None and entity.is_animal:
            entity.energy = 0.0
            entity.add_energy(energy, self.settings.max_energy)
        if health is not None and entity.is_plant:
            entity.health = 0.0
            entity.add_health(health, self.settings.max_health)
        return self._world.add(entity)

    def place_zone(
        self,
        kind: ZoneKind | str,
        position: Vec,
        radius: float = DEFAULT_ZONE_RADIUS,
    ) -> ImpactZone:
        x, y = position
        zone = self._world.add_zone(ImpactZone(x=x, y=y, radius=radius, kind=kind))
        self._announce(f"Placed {zone.kind.value} zone.")
        return zone

    def set_weather(self, weather: Weather | str) -> Weather:
        weather = coerce(Weather, weather)
        self.environment.weather = weather
        self._announce(f"Weather changed to {weather.value}!")
        return weather

    def set_temperature(self, celsius: float, sync_weather: bool = False) -> float:
        """Set the temperature, clamped to [-50, 50] °C.

        With *sync_weather* the weather follows ``suggest_weather``.
        """
        temperature = self.environment.set_temperature(celsius)
        self._announce(f"Temperature set to {temperature:g}°C")
        if sync_weather:
            self.set_weather(suggest_weather(temperature))
        return temperature

    def set_speed(self, speed: float) -> float:
        """Change pacing only; returns the new delay between ticks in seconds."""
        delay = self._clock.set_speed(speed)
        self._announce(f"Simulation speed set to {speed:g}")
        return delay

    # -- Lifecycle --

    def start(self) -> bool:
        if self._state is SimState.RUNNING:
            self._refuse(ALREADY_RUNNING, "Simulation is already running.")
            return False
        if not self._world.entities:
            self._refuse(EMPTY_WORLD, "Add animals and plants first!")
            return False
        self._state = SimState.RUNNING
        logger.info("simulation started at tick %d (seed=%d)", self.tick_number, self._seed)
        self._announce("Simulation started!")
        return True

    def stop(self) -> bool:
        if self._state is not SimState.RUNNING:
            return False
        self._state = SimState.STOPPED
        logger.info("simulation stopped at tick %d", self.tick_number)
        self._announce("Simulation stopped.")
        return True

    def reset(self) -> None:
        self._state = SimState.IDLE
        self._world.clear()
        self._world.environment.weather = Weather.SUNNY
        self._history.clear()
        self._clock.reset()
        self._bus.clear()
        self._feed.clear()
        logger.info("simulation reset")
        self._announce("Reset! Start a new ecosystem!")

    # -- Stepping --

    def _request_stop(self) -> None:
        self._stop_requested = True

    def _tick(self) -> None:
        self._clock.advance()
        ctx = self._clock.context(self._request_stop, self._rng)
        for system in self._systems:
            system(self._world, ctx)

    def step(self) -> None:
        """Advance exactly one tick, whatever the lifecycle state."""
        if self._ticking:
            raise RuntimeError("step() called while a tick is in progress")
        self._ticking = True
        try:
            self._stop_requested = False
            self._tick()
            if self._stop_requested and self._state is SimState.RUNNING:
                self._state = SimState.STOPPED
                logger.info("simulation stopped at tick %d: collapse", self.tick_number)
            self._bus.flush()
        finally:
            self._ticking = False

    def run(self, n: int) -> int:
        """Step up to *n* ticks while running; returns the ticks executed."""
        done = 0
        while done < n and self._state is SimState.RUNNING:
            self.step()
            done += 1
        return done

    def run_forever(self) -> None:
        """Step in real time, pacing ticks by the clock's delay, until stopped."""
        while self._state is SimState.RUNNING:
            start = time.monotonic()
            self.step()
            if self._state is not SimState.RUNNING:
                break
            elapsed = time.monotonic() - start
            sleep_time = self._clock.dt - elapsed
            if sleep_time > 0:
                time.sleep(sleep_time)

    # -- Messages --

    def _notify(self, text: str) -> None:
        if self._feed.post(self.tick_number, text):
            logger.debug("tick %d: %s", self.tick_number, text)
            self._bus.publish(MESSAGE, **MessagePayload(text=text, tick=self.tick_number))

    def _announce(self, text: str) -> None:
        self._notify(text)
        if not self._ticking:
            self._bus.flush()

    def _refuse(self, code: str, text: str) -> None:
        logger.info("start refused: %s", code)
        self._bus.publish(CONDITION, **ConditionPayload(code=code, text=text))
        self._announce(text)

    # -- Snapshot / restore --

    def snapshot(self) -> dict[str, Any]:
        return {
            "version": _SNAPSHOT_VERSION,
            "tick_number": self._clock.tick_number,
            "speed": self._clock.speed,
            "seed": self._seed,
            "rng_state": _serialize_rng_state(self._rng.getstate()),
            "state": self._state.value,
            "world": self._world.snapshot(),
            "history": self._history.snapshot(),
            "messages": self._feed.snapshot(),
        }

    def restore(self, data: dict[str, Any]) -> None:
        version = data.get("version")
        if version != _SNAPSHOT_VERSION:
            raise SnapshotError(
                f"Unsupported snapshot version {version!r}, expected {_SNAPSHOT_VERSION}"
            )
        self._clock.reset(data["tick_number"])
        self._clock.set_speed(data["speed"])
        self._seed = data["seed"]
        self._rng.setstate(_deserialize_rng_state(data["rng_state"]))
        self._state = SimState(data["state"])
        self._world.restore(data["world"])
        self._history.restore(data["history"])
        self._feed.restore(data["messages"])
        self._bus.clear()


def _serialize_rng_state(state: tuple[int, tuple[int, ...], float | None]) -> list[Any]:
    """Convert Random.getstate() tuple to JSON-compatible list.

    The state format (version, internalstate, gauss_next) is the
    CPython Mersenne Twister representation. Stable across CPython
    versions but may differ on other implementations (PyPy, etc.).
    """
    version, internalstate, gauss_next = state
    return [version, list(internalstate), gauss_next]


def _deserialize_rng_state(data: list[Any]) -> tuple[int, tuple[int, ...], float | None]:
    """Convert JSON list back to Random.setstate() tuple."""
    version, internalstate, gauss_next = data
    return (version, tuple(internalstate), gauss_next)
