"""
Viewport bands and the scrolling camera.

The window width picks one of three control layouts. Scroll-style games also
get a `Camera` that follows the tracked entity; fixed-screen games have none.
"""

import math
from enum import Enum

TABLET_MIN_WIDTH = 720
TABLET_MAX_WIDTH = 1285

# Fraction of the remaining distance covered per second is 1 - exp(-rate).
CAMERA_SMOOTHING = 6.0


class ViewportBand(Enum):
    NARROW = "narrow"
    MID = "mid"
    WIDE = "wide"


def band_for_width(width):
    """Classify a window width in CSS pixels."""
    if width < TABLET_MIN_WIDTH:
        return ViewportBand.NARROW
    if width <= TABLET_MAX_WIDTH:
        return ViewportBand.MID
    return ViewportBand.WIDE


def tablet_controls_active(width):
    """Return True when tablet-band controls should accept input."""
    return band_for_width(width) is ViewportBand.MID


def clamp(v, lo, hi):
    return lo if v < lo else hi if v > hi else v


class Camera:
    """
    Smoothed scroll offset over a world larger than the view.

    `x`/`y` are the world coordinates of the view's top-left corner. The
    offset never leaves ``[0, world - view]`` on either axis, so nothing past
    the world edges is ever shown.
    """

    def __init__(self, view_size, world_size, smoothing=CAMERA_SMOOTHING):
        self.view_w, self.view_h = view_size
        self.world_w, self.world_h = world_size
        self.smoothing = float(smoothing)
        self.x = 0.0
        self.y = 0.0

    def _desired(self, target_x, target_y):
        x = clamp(target_x - self.view_w / 2.0, 0.0, max(0.0, self.world_w - self.view_w))
        y = clamp(target_y - self.view_h / 2.0, 0.0, max(0.0, self.world_h - self.view_h))
        return x, y

    def update(self, target_x, target_y, dt):
        """Move toward centering (target_x, target_y); time-scaled, not per frame."""
        if dt <= 0:
            return
        want_x, want_y = self._desired(target_x, target_y)
        alpha = 1.0 - math.exp(-self.smoothing * dt)
        self.x += (want_x - self.x) * alpha
        self.y += (want_y - self.y) * alpha
        self._clamp()

    def snap(self, target_x, target_y):
        """Jump straight to the target, used when a round restarts."""
        self.x, self.y = self._desired(target_x, target_y)

    def resize(self, view_size):
        self.view_w, self.view_h = view_size
        self._clamp()

    def _clamp(self):
        self.x = clamp(self.x, 0.0, max(0.0, self.world_w - self.view_w))
        self.y = clamp(self.y, 0.0, max(0.0, self.world_h - self.view_h))

    def transform(self):
        """Translation to apply to the scrolling layer."""
        return (-self.x, -self.y)

    def to_screen(self, x, y):
        return (x - self.x, y - self.y)
