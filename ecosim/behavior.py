"""Per-kind entity behavior.

Each behavior moves and feeds only the acting entity and reports every
effect on other entities (plants grazed, prey killed, newborns) in an
``Outcome``. The behavior system applies outcomes in iteration order, right
after the step that produced them.
"""
from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Callable

from ecosim import vec
from ecosim.entity import Entity, make_animal
from ecosim.types import Kind

if TYPE_CHECKING:
    from ecosim.world import World


@dataclass
class Outcome:
    grazed: list[tuple[Entity, float]] = field(default_factory=list)
    killed: list[Entity] = field(default_factory=list)
    births: list[Entity] = field(default_factory=list)
    messages: list[str] = field(default_factory=list)


def _is_live_predator(e: Entity) -> bool:
    return e.kind is Kind.PREDATOR and e.energy > 0.0


def _is_live_prey(e: Entity) -> bool:
    return e.kind is Kind.PREY and e.energy > 0.0


def _approach(entity: Entity, target: Entity, speed: float) -> None:
    offset = vec.sub(target.position, entity.position)
    dist = vec.magnitude(offset)
    if dist == 0.0:
        return
    step = vec.scale(vec.normalize(offset), min(speed, dist))
    entity.move_by(*step)


def _wander(entity: Entity, rng: random.Random) -> None:
    dx = (rng.random() - 0.5) * entity.speed
    dy = (rng.random() - 0.5) * entity.speed
    entity.move_by(dx, dy)


def _maybe_reproduce(
    entity: Entity,
    world: World,
    rng: random.Random,
    threshold: float,
    prob: float,
    out: Outcome,
    message: str,
) -> None:
    if entity.energy > threshold and rng.random() < prob:
        entity.energy /= 2.0
        offset = world.settings.birth_offset
        child = make_animal(
            entity.kind,
            entity.x + offset,
            entity.y + offset,
            world.settings,
            rng,
            energy=entity.energy,
        )
        out.births.append(child)
        out.messages.append(message)


def step_plant(entity: Entity, world: World, rng: random.Random) -> Outcome:
    if entity.health <= 0.0:
        entity.regrowth_timer += 1
        if entity.regrowth_timer > world.settings.grass_regrow_time:
            entity.health = world.settings.plant_initial_health
            entity.regrowth_timer = 0
    else:
        entity.regrowth_timer = 0
    return Outcome()


def step_prey(entity: Entity, world: World, rng: random.Random) -> Outcome:
    s = world.settings
    out = Outcome()

    threat, _ = world.nearest(
        entity.position, world.entities, s.fear_range, _is_live_predator
    )
    target: Entity | None = None
    if threat is not None:
        away = vec.normalize(vec.sub(entity.position, threat.position))
        entity.move_by(*vec.scale(away, entity.speed * s.flee_multiplier))
    else:
        target, _ = world.nearest(
            entity.position, world.entities, s.prey_search_range, lambda e: e.edible
        )
        if target is not None:
            _approach(entity, target, entity.speed)
        else:
            _wander(entity, rng)

    if target is not None and vec.distance(entity.position, target.position) < s.eat_range:
        out.grazed.append((target, s.graze_amount))
        entity.add_energy(s.sheep_gain_from_food, s.max_energy)
        out.messages.append("Sheep ate grass!")

    entity.add_energy(-s.prey_energy_cost, s.max_energy)
    _maybe_reproduce(
        entity, world, rng,
        s.sheep_reproduce_threshold, s.sheep_reproduce_prob,
        out, "A sheep was born!",
    )
    return out


def step_predator(entity: Entity, world: World, rng: random.Random) -> Outcome:
    s = world.settings
    out = Outcome()

    prey, _ = world.nearest(
        entity.position, world.entities, s.predator_search_range, _is_live_prey
    )
    if prey is not None:
        _approach(entity, prey, entity.speed)
        if vec.distance(entity.position, prey.position) < s.attack_range:
            out.killed.append(prey)
            entity.add_energy(s.wolf_gain_from_food, s.max_energy)
            out.messages.append("A wolf ate a sheep!")
    else:
        _wander(entity, rng)

    entity.add_energy(-s.predator_energy_cost, s.max_energy)
    _maybe_reproduce(
        entity, world, rng,
        s.wolf_reproduce_threshold, s.wolf_reproduce_prob,
        out, "A wolf was born!",
    )
    return out


_BEHAVIORS: dict[Kind, Callable[[Entity, "World", random.Random], Outcome]] = {
    Kind.PLANT: step_plant,
    Kind.PREY: step_prey,
    Kind.PREDATOR: step_predator,
}


def step(entity: Entity, world: World, rng: random.Random) -> Outcome:
    """Run *entity*'s behavior for one tick and clamp it to the world bounds.

    Animals with no energy left do not act.
    """
    if not entity.alive:
        return Outcome()
    outcome = _BEHAVIORS[entity.kind](entity, world, rng)
    entity.clamp_to(world.width, world.height)
    return outcome
