import logging
from typing import Optional, Tuple

import numpy as np
import pygame

import physics
from bodies import create_default
from config import WORLD_CENTER, SimConfig

logger = logging.getLogger(__name__)

BACKGROUND = (0, 0, 0)
PANEL_COLOR = (20, 20, 40)
PANEL_BORDER = (100, 100, 120)
TEXT_COLOR = (255, 255, 255)

# pygame reports whole wheel notches; treat one notch as this many scroll pixels
SCROLL_PIXELS_PER_NOTCH = 50.0
MIN_ZOOM_FACTOR = 0.1


def world_to_screen(world_pos, camera_pos, zoom: float, screen_center) -> np.ndarray:
    """Projects a world position onto the screen around ``camera_pos``."""
    return np.asarray(screen_center, dtype=float) + (np.asarray(world_pos, dtype=float) - camera_pos) * zoom


def zoom_factor(wheel_y: float) -> float:
    return max(MIN_ZOOM_FACTOR, 1.0 + wheel_y * SCROLL_PIXELS_PER_NOTCH / 200.0)


class ControlPanel:
    """The "Controls" box with its Reset and Add Planet buttons."""

    LABELS = ("Reset", "Add Planet")

    def __init__(self, x=10, y=10, width=160, button_height=30, padding=8):
        self.title_height = 24
        height = self.title_height + len(self.LABELS) * (button_height + padding) + padding
        self.rect = pygame.Rect(x, y, width, height)
        self.buttons = {}
        for k, label in enumerate(self.LABELS):
            top = y + self.title_height + padding + k * (button_height + padding)
            self.buttons[label] = pygame.Rect(x + padding, top, width - 2 * padding, button_height)

    def hit(self, pos) -> Optional[str]:
        for label, rect in self.buttons.items():
            if rect.collidepoint(pos):
                return label
        return None

    def contains(self, pos) -> bool:
        return self.rect.collidepoint(pos)

    def draw(self, screen, font):
        pygame.draw.rect(screen, PANEL_COLOR, self.rect, border_radius=6)
        pygame.draw.rect(screen, PANEL_BORDER, self.rect, 2, border_radius=6)
        screen.blit(font.render("Controls", True, TEXT_COLOR), (self.rect.x + 8, self.rect.y + 4))
        for label, rect in self.buttons.items():
            pygame.draw.rect(screen, PANEL_BORDER, rect, border_radius=4)
            text = font.render(label, True, TEXT_COLOR)
            screen.blit(text, text.get_rect(center=rect.center))


class Simulation:
    def __init__(self, config: Optional[SimConfig] = None):
        self.config = config if config is not None else SimConfig()
        self.width, self.height = self.config.width, self.config.height
        self.screen = pygame.display.set_mode((self.width, self.height), pygame.RESIZABLE)
        pygame.display.set_caption("Interplanetary Simulation")
        self.clock = pygame.time.Clock()
        pygame.font.init()
        self.font = pygame.font.SysFont("Segoe UI", 18)
        self.controls = ControlPanel()
        self.store = create_default(config=self.config)
        self.camera_pos = np.array(WORLD_CENTER, dtype=float)
        self.zoom = 1.0
        self.panning = False

    def reset(self):
        """Fresh population and the camera back at its starting view."""
        self.store.reset()
        self.camera_pos = np.array(WORLD_CENTER, dtype=float)
        self.zoom = 1.0
        self.panning = False

    def add_planet(self):
        self.store.spawn_planet()

    def _screen_center(self) -> Tuple[float, float]:
        w, h = self.screen.get_size()
        return w / 2, h / 2

    def _press(self, label: str):
        if label == "Reset":
            self.reset()
        elif label == "Add Planet":
            self.add_planet()

    def handle_event(self, event) -> bool:
        """Applies one pygame event; returns False when the window should close."""
        if event.type == pygame.QUIT:
            return False
        if event.type == pygame.MOUSEWHEEL:
            self.zoom *= zoom_factor(event.y)
        if event.type == pygame.KEYDOWN:
            if event.key == pygame.K_r: self.reset()
            if event.key == pygame.K_p: self.add_planet()
            if event.key == pygame.K_ESCAPE: return False
        if event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            label = self.controls.hit(event.pos)
            if label:
                self._press(label)
            elif not self.controls.contains(event.pos):
                self.panning = True
        if event.type == pygame.MOUSEBUTTONUP and event.button == 1:
            self.panning = False
        if event.type == pygame.MOUSEMOTION and self.panning:
            self.camera_pos -= np.array(event.rel, dtype=float)
        return True

    def _draw_bodies(self):
        center = self._screen_center()
        for body in self.store:
            screen_pos = world_to_screen(body.position, self.camera_pos, self.zoom, center)
            draw_radius = max(body.radius * self.zoom, 1)
            pygame.draw.circle(self.screen, body.color, screen_pos.astype(int), int(draw_radius))

    def _draw_ui(self):
        self.controls.draw(self.screen, self.font)
        info = f"Bodies: {len(self.store)}   Zoom: {self.zoom:.2f}x   FPS: {self.clock.get_fps():.0f}"
        self.screen.blit(self.font.render(info, True, TEXT_COLOR), (10, self.screen.get_height() - 28))

    def run(self):
        logger.info("starting interactive run: %s", self.config.summary())
        running = True
        while running:
            dt = self.clock.tick(self.config.fps) / 1000.0
            for event in pygame.event.get():
                if not self.handle_event(event):
                    running = False
            physics.step(self.store, dt, self.config)
            self.screen.fill(BACKGROUND)
            self._draw_bodies()
            self._draw_ui()
            pygame.display.flip()
