"""pygame front-end that runs a local match at a fixed 60 frames per second."""

from __future__ import annotations

from typing import List, Optional, Tuple

import pygame

from . import config
from .game.constants import CANVAS_HEIGHT, CANVAS_WIDTH, TOWER_STATS, TowerType
from .game.models import Action, GameSnapshot
from .game.session import GameSession

BACKGROUND = (10, 20, 40)
PATH_COLOR = (0, 212, 255)
HUD_BACKGROUND = (5, 11, 22)
HUD_TEXT = (230, 241, 255)
MESSAGE_COLOR = (255, 204, 0)

TOWER_KEYS = {
    pygame.K_1: TowerType.FIREWALL,
    pygame.K_2: TowerType.IDS,
    pygame.K_3: TowerType.HONEYPOT,
    pygame.K_4: TowerType.PATCH,
}


class DesktopGame:
    """Window, input mapping and drawing around a :class:`GameSession`."""

    def __init__(self, session: Optional[GameSession] = None) -> None:
        pygame.init()
        self.screen = pygame.display.set_mode((CANVAS_WIDTH, CANVAS_HEIGHT + config.HUD_HEIGHT))
        pygame.display.set_caption(config.WINDOW_CAPTION)
        self.clock = pygame.time.Clock()
        self.font = pygame.font.Font(None, 24)
        self.small_font = pygame.font.Font(None, 18)
        self.session = session or GameSession()
        self.message: Optional[str] = None
        self.message_timer = 0.0

    def run(self) -> None:
        running = True
        while running:
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                for action in self.actions_for(event):
                    self.session.handle(action)

            self.update()
            self.render()
            pygame.display.flip()
            self.clock.tick(config.TICK_RATE)

    # ------------------------------------------------------------------
    # Input
    # ------------------------------------------------------------------
    def to_logical(self, position: Tuple[int, int]) -> Tuple[float, float]:
        return float(position[0]), float(position[1] - config.HUD_HEIGHT)

    def actions_for(self, event: pygame.event.Event) -> List[Action]:
        if event.type == pygame.KEYDOWN:
            if event.key in TOWER_KEYS:
                return [Action("select_tower", {"tower_type": TOWER_KEYS[event.key].value})]
            if event.key == pygame.K_SPACE:
                return [Action("start_wave")]
            if event.key == pygame.K_r:
                return [Action("restart")]
        elif event.type == pygame.MOUSEMOTION:
            x, y = self.to_logical(event.pos)
            return [Action("pointer_move", {"x": x, "y": y})]
        elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            x, y = self.to_logical(event.pos)
            return [Action("pointer_down", {"x": x, "y": y})]
        return []

    # ------------------------------------------------------------------
    # Simulation
    # ------------------------------------------------------------------
    def update(self) -> None:
        self.session.tick()
        for event in self.session.drain_events():
            message = event.get("message")
            if message:
                self.message = str(message)
                self.message_timer = config.MESSAGE_SECONDS
        if self.message_timer > 0:
            self.message_timer -= 1.0 / config.TICK_RATE
            if self.message_timer <= 0:
                self.message = None

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------
    def render(self) -> None:
        snapshot = self.session.snapshot()
        self.screen.fill(HUD_BACKGROUND)
        field = self.screen.subsurface(pygame.Rect(0, config.HUD_HEIGHT, CANVAS_WIDTH, CANVAS_HEIGHT))
        field.fill(BACKGROUND)
        self.render_path(field, snapshot)
        self.render_towers(field, snapshot)
        self.render_enemies(field, snapshot)
        self.render_preview(field, snapshot)
        self.render_projectiles(field, snapshot)
        self.render_hud(snapshot)

    def render_path(self, surface: pygame.Surface, snapshot: GameSnapshot) -> None:
        points = [(point["x"], point["y"]) for point in snapshot.path]
        pygame.draw.lines(surface, PATH_COLOR, False, points, 40)
        for point in points:
            pygame.draw.circle(surface, PATH_COLOR, point, 20)
        host_x = max(60, min(points[-1][0], CANVAS_WIDTH - 60))
        host_y = max(80, min(points[-1][1], CANVAS_HEIGHT - 80))
        self.blit_centered(surface, "HOST", (host_x, host_y + 25), (255, 0, 0), self.small_font)

    def render_towers(self, surface: pygame.Surface, snapshot: GameSnapshot) -> None:
        for tower in snapshot.towers:
            color = pygame.Color(tower["color"])
            if not tower["active"]:
                color = color.lerp(pygame.Color(*BACKGROUND), 0.4)
            pygame.draw.circle(surface, color, (tower["x"], tower["y"]), 20)
            self.blit_centered(surface, tower["glyph"], (tower["x"], tower["y"]), (0, 0, 0))

    def render_enemies(self, surface: pygame.Surface, snapshot: GameSnapshot) -> None:
        for enemy in snapshot.enemies:
            x, y = enemy["x"], enemy["y"]
            pygame.draw.circle(surface, pygame.Color(enemy["color"]), (x, y), 15)
            self.blit_centered(surface, enemy["glyph"], (x, y), (0, 0, 0), self.small_font)
            pygame.draw.rect(surface, (255, 51, 51), pygame.Rect(int(x) - 12, int(y) - 25, 24, 4))
            pygame.draw.rect(surface, (0, 255, 0), pygame.Rect(int(x) - 12, int(y) - 25, int(24 * enemy["health_fraction"]), 4))

    def render_preview(self, surface: pygame.Surface, snapshot: GameSnapshot) -> None:
        preview = snapshot.selection
        if not preview or snapshot.wave_active:
            return
        stats = TOWER_STATS[TowerType(preview["type"])]
        center = (preview["x"], preview["y"])
        pygame.draw.circle(surface, (0, 160, 0), center, stats.range, 2)
        pygame.draw.circle(surface, pygame.Color(stats.color), center, 20)
        self.blit_centered(surface, stats.glyph, center, (0, 0, 0))

    def render_projectiles(self, surface: pygame.Surface, snapshot: GameSnapshot) -> None:
        for projectile in snapshot.projectiles:
            color = pygame.Color(projectile["color"])
            start = (projectile["start_x"], projectile["start_y"])
            end = (projectile["x"], projectile["y"])
            pygame.draw.line(surface, color.lerp(pygame.Color(*BACKGROUND), 0.7), start, end, 2)
            pygame.draw.circle(surface, color, end, 6)

    def render_hud(self, snapshot: GameSnapshot) -> None:
        wave = f"Wave {snapshot.wave}/{snapshot.total_waves}"
        if snapshot.wave_name:
            wave += f" - {snapshot.wave_name}"
        parts = [f"Credits {snapshot.credits}", f"Health {snapshot.health}/{snapshot.max_health}", wave]
        if snapshot.game_over:
            parts.append("VICTORY - press R" if snapshot.victory else "GAME OVER - press R")
        elif not snapshot.wave_active:
            parts.append("1-4 towers, SPACE starts the wave")
        text = self.font.render("   ".join(parts), True, HUD_TEXT)
        self.screen.blit(text, (10, (config.HUD_HEIGHT - text.get_height()) // 2))
        if self.message:
            message = self.font.render(self.message, True, MESSAGE_COLOR)
            self.screen.blit(message, (CANVAS_WIDTH - message.get_width() - 10, config.HUD_HEIGHT + 10))

    def blit_centered(
        self,
        surface: pygame.Surface,
        text: str,
        center: Tuple[float, float],
        color: Tuple[int, int, int],
        font: Optional[pygame.font.Font] = None,
    ) -> None:
        rendered = (font or self.font).render(text, True, color)
        surface.blit(rendered, rendered.get_rect(center=(int(center[0]), int(center[1]))))


def main() -> None:
    game = DesktopGame()
    game.run()
    pygame.quit()


if __name__ == "__main__":
    main()
