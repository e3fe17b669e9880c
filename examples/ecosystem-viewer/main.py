"""
Ecosystem Viewer - ecosim Pygame Demo

Wolves, sheep and grass on a meadow, with weather, temperature and human
impact zones. The population graph along the bottom tracks every tick.

Space=Start/Stop  P=Wolf  E=Sheep  G=Grass (at mouse)
1=Pollution  2=Deforestation  3=Conservation (zone at mouse)
W=Cycle weather  Up/Down=Temperature  +/-=Speed  R=Reset  Esc=Quit
"""
from __future__ import annotations

import sys

import pygame

from ecosim import Kind, Simulation, Weather, ZoneKind
from ecosim.clock import DEFAULT_SPEED

TITLE = "Ecosystem Viewer - ecosim"
FPS = 60
GRAPH_H = 120
HUD_H = 70
BG_COLOR = (34, 52, 30)
HUD_COLOR = (220, 220, 230)
PANEL_COLOR = (18, 22, 30)
ENERGY_BAR_W = 16
ENERGY_BAR_H = 3

KIND_COLORS = {
    Kind.PREDATOR: (150, 150, 160),
    Kind.PREY: (240, 240, 235),
    Kind.PLANT: (60, 190, 70),
}
SERIES_COLORS = {
    "predators": (220, 80, 80),
    "prey": (240, 240, 235),
    "plants": (60, 190, 70),
}
ZONE_COLORS = {
    ZoneKind.POLLUTION: (120, 60, 140, 70),
    ZoneKind.DEFORESTATION: (150, 100, 40, 70),
    ZoneKind.CONSERVATION: (40, 140, 200, 70),
}
ZONE_KEYS = {
    pygame.K_1: ZoneKind.POLLUTION,
    pygame.K_2: ZoneKind.DEFORESTATION,
    pygame.K_3: ZoneKind.CONSERVATION,
}
SPAWN_KEYS = {
    pygame.K_p: Kind.PREDATOR,
    pygame.K_e: Kind.PREY,
    pygame.K_g: Kind.PLANT,
}
WEATHER_CYCLE = [Weather.SUNNY, Weather.RAINY, Weather.STORM, Weather.SNOW]


def _draw_zones(screen: pygame.Surface, sim: Simulation) -> None:
    for zone in sim.world.zones:
        r = int(zone.radius)
        overlay = pygame.Surface((r * 2, r * 2), pygame.SRCALPHA)
        pygame.draw.circle(overlay, ZONE_COLORS[zone.kind], (r, r), r)
        screen.blit(overlay, (int(zone.x) - r, int(zone.y) - r + HUD_H))


def _draw_entities(screen: pygame.Surface, sim: Simulation) -> None:
    s = sim.settings
    for e in sim.world.entities:
        x, y = int(e.x), int(e.y) + HUD_H
        if e.is_plant:
            # Dormant grass is drawn as a dry patch
            frac = e.health / s.max_health
            color = KIND_COLORS[Kind.PLANT] if frac > 0 else (110, 90, 50)
            pygame.draw.rect(screen, color, (x - 4, y - 4, 8, 8))
            continue

        frac = min(e.energy / s.max_energy, 1.0)
        r = 7 if e.kind is Kind.PREDATOR else 5
        pygame.draw.circle(screen, KIND_COLORS[e.kind], (x, y), r)
        if e.kind is Kind.PREDATOR:
            pygame.draw.circle(screen, (180, 30, 30), (x, y), r, 1)

        bar_x = x - ENERGY_BAR_W // 2
        bar_y = y - r - 6
        pygame.draw.rect(screen, (60, 60, 60), (bar_x, bar_y, ENERGY_BAR_W, ENERGY_BAR_H))
        bar_color = (50, 200, 50) if frac > 0.4 else (200, 200, 50) if frac > 0.2 else (200, 50, 50)
        pygame.draw.rect(screen, bar_color, (bar_x, bar_y, int(ENERGY_BAR_W * frac), ENERGY_BAR_H))


def _draw_graph(screen: pygame.Surface, sim: Simulation, top: int) -> None:
    """Plot the last ``width`` samples of each population series."""
    width = int(sim.settings.width)
    pygame.draw.rect(screen, PANEL_COLOR, (0, top, width, GRAPH_H))
    history = sim.history
    if len(history) < 2:
        return
    peak = history.peak()
    for name, color in SERIES_COLORS.items():
        values = history.series(name)[-width:]
        step = width / max(len(values) - 1, 1)
        points = [
            (int(i * step), top + GRAPH_H - 4 - int((GRAPH_H - 8) * v / peak))
            for i, v in enumerate(values)
        ]
        pygame.draw.lines(screen, color, False, points, 2)


def _draw_hud(screen: pygame.Surface, font: pygame.font.Font, sim: Simulation, fps_val: float) -> None:
    env = sim.environment
    sample = sim.history.latest()
    wolves, sheep, grass = sim.world.counts() if sample is None else (
        sample.predators, sample.prey, sample.plants
    )
    pygame.draw.rect(screen, PANEL_COLOR, (0, 0, int(sim.settings.width), HUD_H))
    lines = [
        f"Wolves: {wolves}  Sheep: {sheep}  Grass: {grass}   Tick: {sim.tick_number}   "
        f"{env.weather.value} {env.temperature:.0f}C ({env.effect_zone(sim.settings)})   "
        f"Speed: {sim.clock.speed:g}   {sim.state.value.upper()}   FPS: {fps_val:.0f}",
        "Space=Start/Stop  P/E/G=Add  1/2/3=Zone  W=Weather  Up/Down=Temp  +/-=Speed  R=Reset",
        " | ".join(sim.messages),
    ]
    for i, line in enumerate(lines):
        surf = font.render(line, True, HUD_COLOR)
        screen.blit(surf, (10, 6 + i * 20))


def _seed_meadow(sim: Simulation) -> None:
    sim.add_entities(Kind.PREDATOR, 3)
    sim.add_entities(Kind.PREY, 15)
    sim.add_entities(Kind.PLANT, 40)


def main() -> None:
    sim = Simulation()
    _seed_meadow(sim)
    width, height = int(sim.settings.width), int(sim.settings.height)

    pygame.init()
    screen = pygame.display.set_mode((width, height + HUD_H + GRAPH_H))
    pygame.display.set_caption(TITLE)
    pg_clock = pygame.time.Clock()
    font = pygame.font.SysFont("monospace", 13)

    speed = DEFAULT_SPEED
    tick_acc = 0.0
    running = True

    while running:
        dt = pg_clock.tick(FPS) / 1000.0

        # --- Events ---
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                running = False
            elif event.type == pygame.KEYDOWN:
                mx, my = pygame.mouse.get_pos()
                my -= HUD_H
                if event.key == pygame.K_ESCAPE:
                    running = False
                elif event.key == pygame.K_SPACE:
                    if sim.running:
                        sim.stop()
                    else:
                        sim.start()
                elif event.key in SPAWN_KEYS:
                    sim.add_entity(SPAWN_KEYS[event.key], float(mx), float(my))
                elif event.key in ZONE_KEYS:
                    sim.place_zone(ZONE_KEYS[event.key], (float(mx), float(my)))
                elif event.key == pygame.K_w:
                    i = WEATHER_CYCLE.index(sim.environment.weather)
                    sim.set_weather(WEATHER_CYCLE[(i + 1) % len(WEATHER_CYCLE)])
                elif event.key in (pygame.K_UP, pygame.K_DOWN):
                    delta = 5 if event.key == pygame.K_UP else -5
                    sim.set_temperature(sim.environment.temperature + delta)
                elif event.key in (pygame.K_PLUS, pygame.K_EQUALS, pygame.K_MINUS):
                    speed = min(10.0, speed + 1) if event.key != pygame.K_MINUS else max(1.0, speed - 1)
                    sim.set_speed(speed)
                elif event.key == pygame.K_r:
                    sim.reset()
                    tick_acc = 0.0

        # --- Update (tick accumulator) ---
        if sim.running:
            tick_acc += dt
            while tick_acc >= sim.clock.dt and sim.running:
                sim.step()
                tick_acc -= sim.clock.dt
        else:
            tick_acc = 0.0

        # --- Draw ---
        screen.fill(BG_COLOR)
        _draw_zones(screen, sim)
        _draw_entities(screen, sim)
        _draw_hud(screen, font, sim, pg_clock.get_fps())
        _draw_graph(screen, sim, HUD_H + height)
        pygame.display.flip()

    pygame.quit()
    sys.exit()


if __name__ == "__main__":
    main()
