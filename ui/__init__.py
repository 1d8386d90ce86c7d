"""ui — Shared drawing helpers.

Panels, meters, the night-mode vision mask and row lists used by the
menu, records and game scenes.
"""

from ui.helpers import draw_overlay, draw_panel, draw_meter, draw_vision_mask, draw_lines

__all__ = [
    "draw_overlay", "draw_panel", "draw_meter", "draw_vision_mask", "draw_lines",
]
