"""System factories for the tick phases.

Every system has the signature ``(world, ctx) -> None``. Collaborator hooks
(the message sink, the recorder, the signal bus) are passed as closure
arguments so this module never imports the engine.
"""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Callable

from ecosim.behavior import step
from ecosim.entity import Entity, make_animal, make_plant
from ecosim.history import PopulationRecorder
from ecosim.signals import TICK, SignalBus, TickSummary
from ecosim.types import Kind, Weather
from ecosim.vec import distance

if TYPE_CHECKING:
    from ecosim.types import TickContext
    from ecosim.world import World

logger = logging.getLogger(__name__)

Notify = Callable[[str], None]


def make_climate_system() -> Callable[["World", "TickContext"], None]:
    """Apply temperature and weather deltas to every entity."""

    def climate_system(world: World, ctx: TickContext) -> None:
        env = world.environment
        for entity in world.entities:
            env.apply_to(entity, world.settings)

    return climate_system


def make_rain_system(notify: Notify) -> Callable[["World", "TickContext"], None]:
    """While it rains, occasionally sprout one plant at a random position."""

    def rain_system(world: World, ctx: TickContext) -> None:
        if world.environment.weather is not Weather.RAINY:
            return
        if ctx.random.random() >= world.settings.rain_plant_chance:
            return
        x = ctx.random.uniform(0.0, world.width)
        y = ctx.random.uniform(0.0, world.height)
        world.add(make_plant(x, y, world.settings))
        notify("Rain grew new plant!")

    return rain_system


def make_behavior_system(notify: Notify) -> Callable[["World", "TickContext"], None]:
    """Step every entity in insertion order and apply each outcome at once."""

    def behavior_system(world: World, ctx: TickContext) -> None:
        cap = world.settings.max_health
        for entity in list(world.entities):
            outcome = step(entity, world, ctx.random)
            for plant, amount in outcome.grazed:
                plant.add_health(-amount, cap)
            for prey in outcome.killed:
                prey.energy = 0.0
            for child in outcome.births:
                world.spawn_later(child)
            for text in outcome.messages:
                notify(text)

    return behavior_system


def make_zone_system() -> Callable[["World", "TickContext"], None]:
    """Apply every impact zone to every entity."""

    def zone_system(world: World, ctx: TickContext) -> None:
        for entity in world.entities:
            entity.active_effects.clear()
        for zone in world.zones:
            for entity in world.entities:
                zone.affect(entity, world.settings)

    return zone_system


def make_interaction_system(notify: Notify) -> Callable[["World", "TickContext"], None]:
    """Resolve predation and grazing over every unordered pair once.

    Pairs are visited in ascending ``(i, j)`` order over the list as it
    stood when the phase began. Consumed prey keep their slot with energy 0
    and are skipped by every later pair; removal happens in cleanup.
    """

    def _predation(world: World, predator: Entity, prey: Entity) -> None:
        s = world.settings
        if distance(predator.position, prey.position) >= s.predation_range:
            return
        predator.add_energy(s.wolf_gain_from_food, s.max_energy)
        prey.energy = 0.0
        notify("A wolf caught a sheep!")

    def _grazing(world: World, ctx: TickContext, prey: Entity, plant: Entity) -> None:
        s = world.settings
        if plant.health <= 0.0:
            return
        if distance(prey.position, plant.position) >= s.prey_plant_range:
            return
        plant.add_health(-s.pasture_bite, s.max_health)
        prey.add_energy(s.pasture_gain, s.max_energy)
        if plant.health <= 0.0:
            raining = world.environment.weather is Weather.RAINY
            if raining or ctx.random.random() < s.plant_regrowth_chance:
                plant.health = min(s.plant_partial_regrowth, s.max_health)
                notify("Grass grew back!")
        notify("Prey ate grass!")
        if prey.energy > s.pasture_birth_threshold and ctx.random.random() < s.pasture_birth_prob:
            offset = s.pasture_birth_offset
            world.spawn_later(
                make_animal(Kind.PREY, prey.x + offset, prey.y + offset, s, ctx.random)
            )
            notify("A baby prey was born!")

    def interaction_system(world: World, ctx: TickContext) -> None:
        entities = list(world.entities)
        n = len(entities)
        for i in range(n):
            a = entities[i]
            for j in range(i + 1, n):
                if not a.alive:
                    break
                b = entities[j]
                if not b.alive:
                    continue
                kinds = (a.kind, b.kind)
                if kinds == (Kind.PREDATOR, Kind.PREY):
                    _predation(world, a, b)
                elif kinds == (Kind.PREY, Kind.PREDATOR):
                    _predation(world, b, a)
                elif kinds == (Kind.PREY, Kind.PLANT):
                    _grazing(world, ctx, a, b)
                elif kinds == (Kind.PLANT, Kind.PREY):
                    _grazing(world, ctx, b, a)

    return interaction_system


def make_cleanup_system() -> Callable[["World", "TickContext"], None]:
    """Remove animals with no energy left, then add queued newborns."""

    def cleanup_system(world: World, ctx: TickContext) -> None:
        dead = world.remove_dead()
        born = world.flush_births()
        if dead or born:
            logger.debug(
                "tick %d: removed %d, born %d", ctx.tick_number, len(dead), born
            )

    return cleanup_system


def make_census_system(
    recorder: PopulationRecorder, bus: SignalBus
) -> Callable[["World", "TickContext"], None]:
    """Record population counts and publish the tick summary."""

    def census_system(world: World, ctx: TickContext) -> None:
        predators, prey, plants = world.counts()
        recorder.record(ctx.tick_number, predators, prey, plants)
        summary = TickSummary(
            tick=ctx.tick_number,
            predator_count=predators,
            prey_count=prey,
            plant_count=plants,
            temperature=world.environment.temperature,
        )
        bus.publish(TICK, **summary)

    return census_system


def make_termination_system(
    recorder: PopulationRecorder, notify: Notify
) -> Callable[["World", "TickContext"], None]:
    """Stop on collapse; warn about starvation and scarcity."""

    def termination_system(world: World, ctx: TickContext) -> None:
        sample = recorder.latest()
        if sample is None:
            return
        if sample.predators == 0 and sample.prey == 0:
            notify("Ecosystem empty! Add more friends!")
            logger.info("tick %d: ecosystem collapsed", ctx.tick_number)
            ctx.request_stop()
        elif sample.prey == 0:
            notify("No prey left! Wolves might starve!")
        elif sample.plants == 0:
            notify("No grass! Prey will struggle!")

    return termination_system
