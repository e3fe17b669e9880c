"""World - entity and zone storage with spatial queries."""

from __future__ import annotations

from typing import Any, Callable, Iterable, Iterator

from ecosim.config import Settings
from ecosim.entity import Entity
from ecosim.environment import EnvironmentModel
from ecosim.types import Kind, Vec, Weather
from ecosim.vec import distance
from ecosim.zones import ImpactZone


class World:
    """Owns the entity list, the zones and the environment.

    ``entities`` keeps insertion order, which is also iteration order for
    every tick phase. Newborns are queued with ``spawn_later`` and only join
    the list when ``flush_births`` runs at the end of a tick.
    """

    def __init__(self, settings: Settings | None = None) -> None:
        self.settings = settings if settings is not None else Settings()
        self.entities: list[Entity] = []
        self.zones: list[ImpactZone] = []
        self.environment = EnvironmentModel()
        self._nursery: list[Entity] = []

    @property
    def width(self) -> float:
        return self.settings.width

    @property
    def height(self) -> float:
        return self.settings.height

    def add(self, entity: Entity) -> Entity:
        entity.clamp_to(self.width, self.height)
        self.entities.append(entity)
        return entity

    def spawn_later(self, entity: Entity) -> None:
        entity.clamp_to(self.width, self.height)
        self._nursery.append(entity)

    def flush_births(self) -> int:
        born = len(self._nursery)
        self.entities.extend(self._nursery)
        self._nursery.clear()
        return born

    def remove_dead(self) -> list[Entity]:
        dead = [e for e in self.entities if not e.alive]
        if dead:
            self.entities = [e for e in self.entities if e.alive]
        return dead

    def add_zone(self, zone: ImpactZone) -> ImpactZone:
        self.zones.append(zone)
        return zone

    def clear(self) -> None:
        self.entities.clear()
        self.zones.clear()
        self._nursery.clear()

    # -- Queries --

    def of_kind(self, kind: Kind) -> Iterator[Entity]:
        for entity in self.entities:
            if entity.kind is kind:
                yield entity

    def nearest(
        self,
        origin: Vec,
        candidates: Iterable[Entity],
        within: float,
        predicate: Callable[[Entity], bool] | None = None,
    ) -> tuple[Entity | None, float]:
        """Closest candidate within *within* of *origin*.

        Ties keep the first candidate found, so results follow iteration
        order.
        """
        best: Entity | None = None
        best_dist = float("inf")
        for candidate in candidates:
            if predicate is not None and not predicate(candidate):
                continue
            d = distance(origin, candidate.position)
            if d < within and d < best_dist:
                best = candidate
                best_dist = d
        return best, best_dist

    def counts(self) -> tuple[int, int, int]:
        """(predators, prey, plants with health > 0)."""
        predators = prey = plants = 0
        for entity in self.entities:
            if entity.kind is Kind.PREDATOR:
                predators += 1
            elif entity.kind is Kind.PREY:
                prey += 1
            elif entity.health > 0.0:
                plants += 1
        return predators, prey, plants

    def in_bounds(self, entity: Entity) -> bool:
        return 0.0 <= entity.x <= self.width and 0.0 <= entity.y <= self.height

    # -- Snapshot / restore --

    def snapshot(self) -> dict[str, Any]:
        return {
            "entities": [e.to_dict() for e in self.entities],
            "zones": [z.to_dict() for z in self.zones],
            "temperature": self.environment.temperature,
            "weather": self.environment.weather.value,
        }

    def restore(self, data: dict[str, Any]) -> None:
        self.entities = [Entity.from_dict(d) for d in data["entities"]]
        self.zones = [ImpactZone.from_dict(d) for d in data["zones"]]
        self.environment.temperature = data["temperature"]
        self.environment.weather = Weather(data["weather"])
        self._nursery.clear()
