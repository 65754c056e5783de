"""
Runtime session for one arcade game.

`ArcadeSession` wires the pieces together for a single game instance: the
screen state machine, the input unifier, the frame loop (with its timers and
optional camera), best-score persistence, audio cues and the display. It runs
as a blocking loop on desktop and as a coroutine under pygbag, and it always
releases its listeners and schedule on the way out.
"""

import logging

import pygame

import env
from audio import ToneEmitter
from frame_loop import FrameLoop, ScaledDisplay, Timers, ticks_ms
from game_utils import GREY, WHITE, draw_rect, draw_text
from highscores import HighScores
from intents import InputUnifier, default_controls
from screens import Continue, Restart, ScreenMachine, ScreenState, Terminate
from viewport import Camera

logger = logging.getLogger(__name__)

CONTROL_COLOR = (70, 70, 90)
CONTROL_ACTIVE = (140, 140, 190)
OVERLAY = (0, 0, 0, 170)


def _boot_log(tag):
    logger.debug("BOOT: %s", tag)


class ArcadeSession:
    """
    Everything one game needs between page load and unload.

    Args:
        game: `game_utils.BaseGame` instance.
        highscores: persistence adapter; the platform store by default.
        audio: `audio.ToneEmitter`; a fresh one by default.
        display: `frame_loop.ScaledDisplay`; sized from ``game.view_size``.
        clock: millisecond clock shared by the loop and timers.
    """

    def __init__(self, game, highscores=None, audio=None, display=None, clock=ticks_ms):
        self.game = game
        self.highscores = highscores if highscores is not None else HighScores()
        self.audio = audio if audio is not None else ToneEmitter()
        width, height = game.view_size
        self.display = display if display is not None else ScaledDisplay(
            width, height, caption=game.title
        )
        self.timers = Timers(clock)
        self.screens = ScreenMachine(game.game_id, self.highscores)
        self.input = InputUnifier(self.screens, self.timers)
        self.camera = None
        if game.world_size is not None:
            self.camera = Camera(game.view_size, game.world_size)
        self.loop = FrameLoop(
            self.screens,
            game,
            self.input.intents,
            self.draw,
            camera=self.camera,
            poll_events=self.pump_events,
            timers=self.timers,
            clock=clock,
        )
        self.screens.add_listener(self._on_screen_change)
        self.started = False
        self.closed = False

    # ---------- lifecycle ----------
    def start(self):
        if self.started:
            return
        _boot_log("before display.start")
        self.display.start()
        _boot_log("after display.start")
        self.input.bind_keyboard()
        self.layout()
        self._snap_camera()
        self.started = True
        logger.info("session %s started on %s", self.game.game_id, env.get_platform_name())

    def layout(self):
        """Place the controls for the current window size."""
        width, height = self.display.logical_size
        persistent, tablet = default_controls(width, height)
        self.input.bind_persistent_touch_controls(persistent)
        self.input.bind_tablet_band_controls(tablet)
        self.input.update_layout(env.window_width(width), height, self.display.scale)

    def close(self):
        """Release listeners, timers and the frame schedule. Safe to call twice."""
        if self.closed:
            return
        self.closed = True
        self.loop.cancel()
        self.timers.cancel_all()
        self.input.unbind_all()
        self.screens.remove_listener(self._on_screen_change)
        logger.info("session %s closed", self.game.game_id)

    def __enter__(self):
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False

    def run(self):
        """Blocking desktop entry point."""
        try:
            self.start()
            self.loop.run()
        finally:
            self.close()

    async def run_async(self):
        """Coroutine entry point for pygbag."""
        try:
            self.start()
            await self.loop.run_async()
        finally:
            self.close()

    # ---------- events ----------
    def pump_events(self):
        for event in pygame.event.get():
            self.handle_event(event)

    def handle_event(self, event):
        if event.type == pygame.QUIT:
            self.loop.cancel()
            return True
        if event.type == pygame.VIDEORESIZE:
            scale = self.display.scale or 1.0
            self.display.resize(event.w / scale, event.h / scale)
            if self.camera is not None:
                self.camera.resize(self.display.logical_size)
            self.layout()
            return True
        return self.input.handle_event(event)

    def _on_screen_change(self, old, new, event):
        if isinstance(event, Continue):
            self.loop.arm()
            self.audio.play(660, 80, "square")
        elif isinstance(event, Terminate):
            if self.screens.is_new_best:
                self.audio.play(880, 220, "triangle")
            else:
                self.audio.play(220, 220, "sawtooth")
        elif isinstance(event, Restart):
            self.game.reset()
            self.input.reset()
            self._snap_camera()
            self.loop.arm()
            self.audio.play(660, 80, "square")

    def _snap_camera(self):
        if self.camera is None:
            return
        focus = self.game.focus()
        if focus is not None:
            self.camera.snap(focus[0], focus[1])

    # ---------- drawing ----------
    def draw(self, offset):
        """Draw one frame. Reads state only."""
        display = self.display
        if display.surface is None:
            return
        display.surface.fill(self.game.background)
        self.game.draw(display, offset)
        self._draw_hud()
        state = self.screens.state
        if state is ScreenState.INSTRUCTIONS:
            self._draw_overlay([self.game.title] + list(self.game.instructions))
        elif state is ScreenState.GAME_OVER:
            lines = ["GAME OVER", "SCORE %d" % (self.screens.final_score or 0)]
            result = self.game.result_line()
            if result:
                lines.append(result)
            if self.screens.is_new_best:
                lines.append("NEW BEST!")
            else:
                lines.append("BEST %d" % self.screens.best)
            lines.append("SPACE / A TO RESTART")
            self._draw_overlay(lines)
        self._draw_controls()
        display.show()

    def _draw_hud(self):
        width, _ = self.display.logical_size
        draw_text(self.display, 90, 16, "SCORE %d" % self.game.score, WHITE, 24)
        draw_text(self.display, width - 160, 16, "BEST %d" % self.screens.best, GREY, 24)

    def _draw_overlay(self, lines):
        width, height = self.display.logical_size
        shade = pygame.Surface(self.display.surface.get_size(), pygame.SRCALPHA)
        shade.fill(OVERLAY)
        self.display.surface.blit(shade, (0, 0))
        y = height / 2 - len(lines) * 20
        for i, line in enumerate(lines):
            size = 48 if i == 0 else 28
            draw_text(self.display, width / 2, y, line, WHITE, size, center=True)
            y += 52 if i == 0 else 34

    def _draw_controls(self):
        intents = self.input.intents
        for _, control in self.input.visible_controls():
            active = control.intent is not None and intents[control.intent]
            color = CONTROL_ACTIVE if active else CONTROL_COLOR
            draw_rect(self.display, control.rect, color, 2)
            draw_text(
                self.display,
                control.rect.centerx,
                control.rect.centery - 10,
                control.label,
                color,
                24,
                center=True,
            )
