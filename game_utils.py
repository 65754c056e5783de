"""
Shared game contract for the arcade runtime.

Every game subclasses `BaseGame` and supplies its rules; the runtime supplies
the screens, input, loop, camera and score persistence.

Subclasses should override:
- reset(): Initialize/reset game state
- update(intents, dt): Advance one frame; return False on a terminal condition
- draw(display, offset): Render the current game state
- focus(): World position the camera tracks (scroll games only)
"""

import pygame

WHITE = (255, 255, 255)
BLACK = (0, 0, 0)
GREY = (120, 120, 120)


class BaseGame:
    """
    Base class for arcade games providing common structure and utilities.

    Class attributes describe the game to the runtime:

    - ``game_id``: namespace of the persisted best score
    - ``title`` and ``instructions``: text of the instructions screen
    - ``view_size``: logical surface size
    - ``world_size``: world size for scroll games, ``None`` for a fixed screen
    """

    game_id = "base"
    title = "GAME"
    instructions = ("ARROWS / WASD TO MOVE", "SPACE TO START")
    view_size = (960, 600)
    world_size = None
    background = BLACK

    def __init__(self):
        """Initialize base game state."""
        self.score = 0
        self.frame = 0
        self.elapsed = 0.0
        self.reset()

    def reset(self):
        """
        Reset game state to initial values.

        Override this in subclasses to initialize game-specific state.
        Always call super().reset() to reset base state.
        """
        self.score = 0
        self.frame = 0
        self.elapsed = 0.0

    def update(self, intents, dt):
        """
        Update game logic for one frame.

        Args:
            intents: read-only intent map (``Left``, ``Right``, ``Up``,
                ``Down``, ``Action``)
            dt (float): seconds since the previous frame

        Returns:
            bool: True to continue, False when the round is over
        """
        self.frame += 1
        self.elapsed += dt
        return True

    def focus(self):
        """World position the camera keeps centered, or None."""
        return None

    def result_line(self):
        """Extra line for the game-over screen, or None."""
        return None

    def draw(self, display, offset):
        """
        Render the current game state.

        Must not change game state. `offset` is the camera translation.
        """
        pass


def draw_text(display, x, y, text, color=WHITE, size=28, center=False):
    """Draw `text` at logical (x, y) on a `ScaledDisplay`."""
    font = display.font(max(8, int(size * display.scale)))
    img = font.render(str(text), True, color)
    px, py = display.scale_point(x, y)
    if center:
        px -= img.get_width() // 2
    display.surface.blit(img, (px, py))


def draw_rect(display, rect, color, width=0):
    """Fill (or outline) a logical rectangle on a `ScaledDisplay`."""
    pygame.draw.rect(display.surface, color, display.scale_rect(rect), width)
