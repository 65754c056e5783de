"""
Screen state machine: instructions, play and game over.

Exactly one screen is active. Events delivered in a state where they are not
valid are ignored, so a key held across a screen change (or a duplicated tap)
can never skip a screen.
"""

import logging
from dataclasses import dataclass
from enum import Enum

logger = logging.getLogger(__name__)


class ScreenState(Enum):
    INSTRUCTIONS = "instructions"
    PLAYING = "playing"
    GAME_OVER = "game_over"


@dataclass(frozen=True)
class Continue:
    """Leave the instructions screen and start playing."""


@dataclass(frozen=True)
class Terminate:
    """The game reached a terminal condition with `final_score`."""

    final_score: int = 0


@dataclass(frozen=True)
class Restart:
    """Start a new round from the game-over screen."""


CONTINUE = Continue()
RESTART = Restart()

_TRANSITIONS = {
    (ScreenState.INSTRUCTIONS, Continue): ScreenState.PLAYING,
    (ScreenState.PLAYING, Terminate): ScreenState.GAME_OVER,
    (ScreenState.GAME_OVER, Restart): ScreenState.PLAYING,
}


class ScreenMachine:
    """
    Owns the active screen and the end-of-round score bookkeeping.

    Listeners registered with `add_listener` are called as
    ``listener(old_state, new_state, event)`` after each applied transition.
    The session uses them to arm the loop on ``Continue`` and to reset game,
    intents and camera on ``Restart``.
    """

    def __init__(self, game_id, highscores):
        self.game_id = game_id
        self.highscores = highscores
        self._state = ScreenState.INSTRUCTIONS
        self._listeners = []
        self.final_score = None
        self.is_new_best = False
        self.best = highscores.load_best(game_id)

    @property
    def state(self):
        return self._state

    def add_listener(self, listener):
        self._listeners.append(listener)

    def remove_listener(self, listener):
        if listener in self._listeners:
            self._listeners.remove(listener)

    def action_event(self):
        """Return the event the action control triggers on the current screen.

        While playing the action is a gameplay intent, so ``None`` is returned.
        """
        if self._state is ScreenState.INSTRUCTIONS:
            return CONTINUE
        if self._state is ScreenState.GAME_OVER:
            return RESTART
        return None

    def transition(self, event):
        """Apply `event` if valid for the current screen; return True if applied."""
        target = _TRANSITIONS.get((self._state, type(event)))
        if target is None:
            logger.debug("ignoring %s in %s", type(event).__name__, self._state.value)
            return False

        if isinstance(event, Terminate):
            self._record_score(event.final_score)
        elif isinstance(event, Restart):
            self.final_score = None
            self.is_new_best = False

        old = self._state
        self._state = target
        logger.debug("screen %s -> %s", old.value, target.value)
        for listener in list(self._listeners):
            listener(old, target, event)
        return True

    def _record_score(self, final_score):
        score = max(0, int(final_score or 0))
        previous = self.highscores.load_best(self.game_id)
        self.final_score = score
        self.is_new_best = score > previous
        if self.is_new_best:
            self.highscores.save_best(self.game_id, score)
            logger.info("new best for %s: %d (was %d)", self.game_id, score, previous)
        self.best = max(previous, score)
