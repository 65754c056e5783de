"""
Frame scheduling for a game session.

`FrameLoop` is the recurring per-frame task: it measures elapsed time, runs
due timers, advances the game while playing, moves the camera and draws.
On desktop it is paced by ``pygame.time.Clock``; in the browser (pygbag) it
yields to the page once per frame with ``asyncio.sleep(0)`` so the tab keeps
rendering.
"""

import asyncio
import heapq
import itertools
import logging
import time

import env
from screens import ScreenState, Terminate

logger = logging.getLogger(__name__)

FPS = 60
MAX_DT = 0.1


def ticks_ms():
    """Monotonic milliseconds."""
    return int(time.monotonic() * 1000)


def ticks_diff(a, b):
    return a - b


class TimerHandle:
    """Cancellable handle for a callback scheduled with `Timers.call_later`."""

    __slots__ = ("deadline", "callback", "cancelled")

    def __init__(self, deadline, callback):
        self.deadline = deadline
        self.callback = callback
        self.cancelled = False

    def cancel(self):
        self.cancelled = True
        self.callback = None


class Timers:
    """
    Deferred callbacks driven by the frame loop.

    Callbacks run from `run_due`, i.e. on the same thread and between frames,
    never concurrently with input handlers or the game update.
    """

    def __init__(self, clock=ticks_ms):
        self.clock = clock
        self._queue = []
        self._seq = itertools.count()

    def call_later(self, delay_ms, callback):
        handle = TimerHandle(self.clock() + max(0, int(delay_ms)), callback)
        heapq.heappush(self._queue, (handle.deadline, next(self._seq), handle))
        return handle

    def run_due(self, now_ms=None):
        """Fire every callback whose deadline has passed; return how many ran."""
        now = self.clock() if now_ms is None else now_ms
        fired = 0
        while self._queue and self._queue[0][0] <= now:
            _, _, handle = heapq.heappop(self._queue)
            if handle.cancelled:
                continue
            callback = handle.callback
            handle.callback = None
            callback()
            fired += 1
        return fired

    def cancel_all(self):
        for _, _, handle in self._queue:
            handle.cancel()
        self._queue = []

    def __len__(self):
        return sum(1 for _, _, h in self._queue if not h.cancelled)


class FrameLoop:
    """
    Update/draw loop for one game.

    Args:
        screens: `ScreenMachine`; the game only advances while playing.
        game: object with ``update(intents, dt) -> bool``, ``score`` and
            ``focus()`` (see `game_utils.BaseGame`).
        intents: read-only intent map handed to ``game.update``.
        draw: callable ``draw(offset)``; must not mutate game state.
        camera: optional `viewport.Camera` for scroll games.
        poll_events: optional callable run at the start of every frame.
        timers: `Timers` whose due callbacks run each frame.
        clock: millisecond clock, injectable for tests.
    """

    def __init__(
        self,
        screens,
        game,
        intents,
        draw,
        camera=None,
        poll_events=None,
        timers=None,
        clock=ticks_ms,
        fps=FPS,
    ):
        self.screens = screens
        self.game = game
        self.intents = intents
        self.draw = draw
        self.camera = camera
        self.poll_events = poll_events
        self.clock = clock
        self.timers = timers if timers is not None else Timers(clock)
        self.fps = fps
        self.running = False
        self.frame = 0
        self._last = None

    def arm(self):
        """Reset the elapsed-time baseline so the next step starts at dt=0."""
        self._last = None

    def cancel(self):
        self.running = False

    def _elapsed(self, now):
        if self._last is None:
            self._last = now
            return 0.0
        dt = ticks_diff(now, self._last) / 1000.0
        self._last = now
        if dt < 0:
            return 0.0
        return dt if dt < MAX_DT else MAX_DT

    def step(self, now_ms=None):
        """Run one frame and return its dt in seconds."""
        now = self.clock() if now_ms is None else now_ms
        if self.poll_events is not None:
            self.poll_events()
        dt = self._elapsed(now)
        self.timers.run_due(now)

        if self.screens.state is ScreenState.PLAYING:
            if not self.game.update(self.intents, dt):
                self.screens.transition(Terminate(self.game.score))

        offset = (0.0, 0.0)
        if self.camera is not None:
            focus = self.game.focus()
            if focus is not None:
                self.camera.update(focus[0], focus[1], dt)
            offset = self.camera.transform()

        self.draw(offset)
        self.frame += 1
        return dt

    def run(self):
        """Blocking desktop loop; returns after `cancel()`."""
        import pygame

        clock = pygame.time.Clock()
        self.running = True
        self.arm()
        while self.running:
            self.step()
            clock.tick(self.fps)

    async def run_async(self):
        """Cooperative loop for pygbag; yields once per frame."""
        self.running = True
        self.arm()
        while self.running:
            self.step()
            await asyncio.sleep(0 if env.is_browser else 1.0 / self.fps)


class ScaledDisplay:
    """
    PyGame window whose backing surface is scaled by the device pixel ratio.

    Games draw in logical coordinates through `scale_rect`/`scale_point`; the
    ratio is fixed at `start()` and only recomputed by `resize()`.
    """

    def __init__(self, width, height, caption="Arcade"):
        self.width = int(width)
        self.height = int(height)
        self.caption = caption
        self.scale = 1.0
        self.surface = None
        self._pg = None
        self._fonts = {}

    def start(self):
        if self._pg is not None:
            return
        try:
            import pygame
        except Exception as e:
            raise RuntimeError("PyGame not installed. Install with: pip install pygame") from e
        self._pg = pygame
        pygame.init()
        pygame.display.set_caption(self.caption)
        self._apply_mode()

    def _apply_mode(self):
        self.scale = env.device_pixel_ratio()
        size = (int(self.width * self.scale), int(self.height * self.scale))
        self.surface = self._pg.display.set_mode(size, self._pg.RESIZABLE)
        logger.debug("display %dx%d at ratio %.2f", size[0], size[1], self.scale)

    def resize(self, width, height):
        self.width = int(width)
        self.height = int(height)
        if self._pg is not None:
            self._apply_mode()

    @property
    def logical_size(self):
        return (self.width, self.height)

    def scale_point(self, x, y):
        return (int(round(x * self.scale)), int(round(y * self.scale)))

    def scale_rect(self, rect):
        x, y, w, h = rect
        return self._pg.Rect(
            int(round(x * self.scale)),
            int(round(y * self.scale)),
            max(1, int(round(w * self.scale))),
            max(1, int(round(h * self.scale))),
        )

    def font(self, size):
        """Default font of `size` backing pixels, cached for this window."""
        font = self._fonts.get(size)
        if font is None:
            font = self._pg.font.Font(None, size)
            self._fonts[size] = font
        return font

    def show(self):
        if self._pg is not None:
            self._pg.display.flip()
