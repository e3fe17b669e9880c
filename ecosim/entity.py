"""Entity - the simulated plant, prey or predator."""
from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import Any

from ecosim.config import Settings
from ecosim.types import Kind, Vec
from ecosim.vec import clamp


@dataclass(eq=False)
class Entity:
    """One unit of simulated life.

    Plants use ``health`` and ``regrowth_timer``; animals use ``energy``.
    Equality is identity, so an entity can be looked up and removed from
    the world's list without ambiguity.
    """

    kind: Kind
    x: float
    y: float
    energy: float = 0.0
    health: float = 0.0
    speed: float = 0.0
    regrowth_timer: int = 0
    active_effects: set[str] = field(default_factory=set)

    @property
    def position(self) -> Vec:
        return (self.x, self.y)

    @property
    def is_plant(self) -> bool:
        return self.kind is Kind.PLANT

    @property
    def is_animal(self) -> bool:
        return self.kind is not Kind.PLANT

    @property
    def alive(self) -> bool:
        """Animals are alive while energy > 0; plants are never removed."""
        if self.kind is Kind.PLANT:
            return True
        return self.energy > 0.0

    @property
    def edible(self) -> bool:
        return self.kind is Kind.PLANT and self.health > 0.0

    def move_by(self, dx: float, dy: float) -> None:
        self.x += dx
        self.y += dy

    def clamp_to(self, width: float, height: float) -> None:
        self.x = clamp(self.x, 0.0, width)
        self.y = clamp(self.y, 0.0, height)

    def add_energy(self, amount: float, cap: float) -> None:
        self.energy = clamp(self.energy + amount, 0.0, cap)

    def add_health(self, amount: float, cap: float) -> None:
        self.health = clamp(self.health + amount, 0.0, cap)

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind.value,
            "x": self.x,
            "y": self.y,
            "energy": self.energy,
            "health": self.health,
            "speed": self.speed,
            "regrowth_timer": self.regrowth_timer,
            "active_effects": sorted(self.active_effects),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Entity:
        return cls(
            kind=Kind(data["kind"]),
            x=data["x"],
            y=data["y"],
            energy=data["energy"],
            health=data["health"],
            speed=data["speed"],
            regrowth_timer=data["regrowth_timer"],
            active_effects=set(data["active_effects"]),
        )


def make_plant(x: float, y: float, settings: Settings) -> Entity:
    return Entity(Kind.PLANT, x, y, health=settings.plant_initial_health)


def make_animal(
    kind: Kind,
    x: float,
    y: float,
    settings: Settings,
    rng: random.Random,
    energy: float | None = None,
) -> Entity:
    """Create a prey or predator with a speed drawn from its band.

    When *energy* is omitted it is drawn from ``settings.initial_energy``.
    """
    lo, hi = settings.prey_speed if kind is Kind.PREY else settings.predator_speed
    speed = rng.uniform(lo, hi)
    if energy is None:
        energy = rng.uniform(*settings.initial_energy)
    energy = clamp(energy, 0.0, settings.max_energy)
    return Entity(kind, x, y, energy=energy, speed=speed)


def make_entity(
    kind: Kind, x: float, y: float, settings: Settings, rng: random.Random
) -> Entity:
    if kind is Kind.PLANT:
        return make_plant(x, y, settings)
    return make_animal(kind, x, y, settings, rng)
