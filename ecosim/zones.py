"""Human impact zones: circular areas that modify entities inside them."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ecosim.config import Settings
from ecosim.entity import Entity
from ecosim.types import ConfigurationError, ZoneKind, coerce
from ecosim.vec import distance


@dataclass(frozen=True)
class ImpactZone:
    x: float
    y: float
    radius: float
    kind: ZoneKind

    def __post_init__(self) -> None:
        if not self.radius > 0:
            raise ConfigurationError(f"zone radius must be > 0, got {self.radius!r}")
        object.__setattr__(self, "kind", coerce(ZoneKind, self.kind))

    def contains(self, entity: Entity) -> bool:
        return distance((self.x, self.y), entity.position) <= self.radius

    def affect(self, entity: Entity, settings: Settings) -> bool:
        """Apply this zone's per-tick delta to *entity*.

        Returns True when the entity was inside the zone and affected.
        """
        if not self.contains(entity):
            return False
        i = settings.zone_intensity
        if self.kind is ZoneKind.POLLUTION:
            if entity.is_plant:
                entity.add_health(-settings.pollution_plant_rate * i, settings.max_health)
            else:
                entity.add_energy(-settings.pollution_animal_rate * i, settings.max_energy)
        elif self.kind is ZoneKind.DEFORESTATION:
            if not entity.is_plant:
                return False
            entity.add_health(-settings.deforestation_rate * i, settings.max_health)
        else:
            if entity.is_plant:
                if entity.health <= 0.0:
                    return False
                entity.add_health(settings.conservation_plant_rate * i, settings.max_health)
            else:
                entity.add_energy(settings.conservation_animal_rate * i, settings.max_energy)
        entity.active_effects.add(self.kind.value)
        return True

    def to_dict(self) -> dict[str, Any]:
        return {"x": self.x, "y": self.y, "radius": self.radius, "kind": self.kind.value}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ImpactZone:
        return cls(x=data["x"], y=data["y"], radius=data["radius"], kind=data["kind"])
