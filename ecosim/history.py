"""Per-tick population counts."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator


@dataclass(frozen=True)
class PopulationSample:
    tick: int
    predators: int
    prey: int
    plants: int


class PopulationRecorder:
    """Append-only record of one ``PopulationSample`` per tick.

    Unbounded for the length of a run; ``clear`` is only called on reset.
    """

    def __init__(self) -> None:
        self._samples: list[PopulationSample] = []

    def record(self, tick: int, predators: int, prey: int, plants: int) -> PopulationSample:
        sample = PopulationSample(tick=tick, predators=predators, prey=prey, plants=plants)
        self._samples.append(sample)
        return sample

    def latest(self) -> PopulationSample | None:
        if not self._samples:
            return None
        return self._samples[-1]

    def series(self, name: str) -> list[int]:
        """One column (``"predators"``, ``"prey"`` or ``"plants"``) as a list."""
        if name not in ("predators", "prey", "plants"):
            raise KeyError(f"Unknown population series {name!r}")
        return [getattr(s, name) for s in self._samples]

    def peak(self) -> int:
        """Largest single count across all series, at least 1 (for chart scaling)."""
        best = 1
        for s in self._samples:
            best = max(best, s.predators, s.prey, s.plants)
        return best

    def clear(self) -> None:
        self._samples.clear()

    def snapshot(self) -> list[list[int]]:
        return [[s.tick, s.predators, s.prey, s.plants] for s in self._samples]

    def restore(self, data: list[list[int]]) -> None:
        self._samples = [
            PopulationSample(tick=t, predators=pr, prey=py, plants=pl)
            for t, pr, py, pl in data
        ]

    def __iter__(self) -> Iterator[PopulationSample]:
        return iter(list(self._samples))

    def __len__(self) -> int:
        return len(self._samples)

    def __getitem__(self, index: int) -> PopulationSample:
        return self._samples[index]
