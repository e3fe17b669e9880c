"""Headless runner: seed an ecosystem, run it and print the census.

Run: python -m ecosim --wolves 3 --sheep 20 --grass 40 --ticks 300
"""
from __future__ import annotations

import argparse
import logging
import sys

from ecosim.engine import Simulation
from ecosim.signals import TickSummary
from ecosim.types import ConfigurationError, Kind, Weather


def _positive_int(text: str) -> int:
    value = int(text)
    if value < 1:
        raise argparse.ArgumentTypeError(f"must be >= 1, got {value}")
    return value


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="ecosim - headless ecosystem run")
    p.add_argument("--seed", type=int, default=42, help="Random seed (default: 42)")
    p.add_argument("--ticks", type=int, default=300, help="Ticks to run (default: 300)")
    p.add_argument("--wolves", type=int, default=3, help="Initial predators (default: 3)")
    p.add_argument("--sheep", type=int, default=20, help="Initial prey (default: 20)")
    p.add_argument("--grass", type=int, default=40, help="Initial plants (default: 40)")
    p.add_argument("--weather", choices=[w.value for w in Weather], default="sunny")
    p.add_argument("--temperature", type=float, default=20.0,
                   help="Temperature in °C, clamped to [-50, 50] (default: 20)")
    p.add_argument("--zone", action="append", default=[], metavar="KIND:X:Y[:R]",
                   help="Place an impact zone, e.g. pollution:400:250:60 (repeatable)")
    p.add_argument("--every", type=_positive_int, default=25,
                   help="Print the census every N ticks (default: 25)")
    p.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return p.parse_args(argv)


def _parse_zone(option: str) -> tuple[str, tuple[float, float], float]:
    parts = option.split(":")
    if len(parts) not in (3, 4):
        raise ConfigurationError(f"zone must be KIND:X:Y[:R], got {option!r}")
    radius = float(parts[3]) if len(parts) == 4 else 60.0
    return parts[0], (float(parts[1]), float(parts[2])), radius


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    sim = Simulation(seed=args.seed)
    try:
        sim.add_entities(Kind.PREDATOR, args.wolves)
        sim.add_entities(Kind.PREY, args.sheep)
        sim.add_entities(Kind.PLANT, args.grass)
        for option in args.zone:
            kind, position, radius = _parse_zone(option)
            sim.place_zone(kind, position, radius)
        sim.set_weather(args.weather)
        sim.set_temperature(args.temperature)
    except (ConfigurationError, ValueError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    def report(summary: TickSummary) -> None:
        if summary["tick"] % args.every == 0:
            print(
                f"[tick {summary['tick']:>4}]  wolves={summary['predator_count']:<4}  "
                f"sheep={summary['prey_count']:<4}  grass={summary['plant_count']:<4}"
            )

    sim.on_tick(report)
    sim.on_message(lambda text: logging.getLogger("ecosim.messages").info(text))

    print(f"=== ecosim (seed={sim.seed}) ===\n")
    if not sim.start():
        print("Nothing to simulate.", file=sys.stderr)
        return 1
    done = sim.run(args.ticks)

    final = sim.history.latest()
    if final is not None:
        print(
            f"\nFinished after {done} ticks ({sim.state.value}): "
            f"wolves={final.predators} sheep={final.prey} grass={final.plants}"
        )
    return 0


if __name__ == "__main__":
    sys.exit(main())
