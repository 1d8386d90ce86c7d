"""ui.helpers — Shared drawing utilities for scenes and panels."""

from __future__ import annotations
import pygame

from core.constants import COLOR_PANEL, COLOR_ACCENT


def draw_overlay(surface: pygame.Surface, alpha: int = 200) -> None:
    """Full-screen semi-transparent dark overlay."""
    overlay = pygame.Surface(surface.get_size(), pygame.SRCALPHA)
    overlay.fill((0, 0, 0, alpha))
    surface.blit(overlay, (0, 0))


def draw_panel(surface: pygame.Surface, rect: pygame.Rect,
               fill=COLOR_PANEL, border=COLOR_ACCENT, width: int = 4) -> None:
    """Filled box with a thick border, the look of every menu card."""
    pygame.draw.rect(surface, fill, rect)
    pygame.draw.rect(surface, border, rect, width)


def draw_meter(surface: pygame.Surface, rect: pygame.Rect, fraction: float,
               fill=(200, 30, 30), back=COLOR_PANEL, border=COLOR_ACCENT) -> None:
    """Horizontal progress bar; *fraction* is clamped to 0..1."""
    fraction = max(0.0, min(1.0, fraction))
    pygame.draw.rect(surface, back, rect)
    if fraction > 0:
        inner = pygame.Rect(rect.x, rect.y, int(rect.w * fraction), rect.h)
        pygame.draw.rect(surface, fill, inner)
    pygame.draw.rect(surface, border, rect, 2)


def draw_vision_mask(surface: pygame.Surface, center: tuple[int, int],
                     radius: float, clip: pygame.Rect) -> None:
    """Darken *clip* except for a soft circle of *radius* around *center*.

    Fully clear up to 0 %, ramps to 80 % dark at 70 % of the radius and
    to black at the edge.
    """
    mask = pygame.Surface(clip.size, pygame.SRCALPHA)
    mask.fill((0, 0, 0, 255))
    cx, cy = center[0] - clip.x, center[1] - clip.y
    steps = 24
    for i in range(steps, 0, -1):
        r = radius * i / steps
        frac = i / steps
        if frac <= 0.7:
            alpha = int(204 * frac / 0.7)
        else:
            alpha = int(204 + 51 * (frac - 0.7) / 0.3)
        pygame.draw.circle(mask, (0, 0, 0, alpha), (int(cx), int(cy)), int(r))
    surface.blit(mask, clip.topleft)


def draw_lines(surface: pygame.Surface, app, lines: list[tuple[str, tuple]],
               x: int, y: int, spacing: int = 22, font=None) -> int:
    """Draw ``(text, color)`` rows top-down.  Returns the y after the last row."""
    for text, color in lines:
        app.draw_text(surface, text, x, y, color, font=font)
        y += spacing
    return y
