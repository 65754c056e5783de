"""
Unified player input.

Keyboard keys, the always-present touch buttons and the tablet-band touch
buttons all write into one `IntentMap`: five booleans (``Left``, ``Right``,
``Up``, ``Down``, ``Action``) that game logic reads once per frame. Each source
writes through its own `IntentWriter`; the last write wins.

The action key and every action-role button share one behaviour: continue on
the instructions screen, restart on the game-over screen, and the ``Action``
intent while playing.
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass

import pygame

import env
from viewport import ViewportBand, band_for_width

logger = logging.getLogger(__name__)

LEFT = "Left"
RIGHT = "Right"
UP = "Up"
DOWN = "Down"
ACTION = "Action"
INTENT_KEYS = (LEFT, RIGHT, UP, DOWN, ACTION)

# Pulse intents clear themselves after this many milliseconds.
PULSE_MS = 120

KEY_BINDINGS = {
    pygame.K_LEFT: LEFT,
    pygame.K_a: LEFT,
    pygame.K_RIGHT: RIGHT,
    pygame.K_d: RIGHT,
    pygame.K_UP: UP,
    pygame.K_w: UP,
    pygame.K_DOWN: DOWN,
    pygame.K_s: DOWN,
}
ACTION_KEYS = (pygame.K_SPACE, pygame.K_RETURN)

# Control roles
HOLD = "hold"
PULSE = "pulse"
ACTION_ROLE = "action"
HUB = "hub"


class IntentMap(Mapping):
    """Read-only view of the current intents; always holds all five keys."""

    def __init__(self):
        self._values = dict.fromkeys(INTENT_KEYS, False)
        self.last_source = dict.fromkeys(INTENT_KEYS)

    def __getitem__(self, key):
        return self._values[key]

    def __iter__(self):
        return iter(self._values)

    def __len__(self):
        return len(self._values)

    def __repr__(self):
        return "IntentMap(%r)" % (self._values,)

    def snapshot(self):
        return dict(self._values)

    def writer(self, source):
        return IntentWriter(self, source)

    def _set(self, key, value, source):
        if key not in self._values:
            raise KeyError(key)
        self._values[key] = bool(value)
        self.last_source[key] = source


class IntentWriter:
    """Write access to an `IntentMap` for one input source."""

    __slots__ = ("intents", "source")

    def __init__(self, intents, source):
        self.intents = intents
        self.source = source

    def set(self, key, value):
        self.intents._set(key, value, self.source)

    def clear_all(self):
        for key in INTENT_KEYS:
            self.intents._set(key, False, self.source)


@dataclass
class TouchControl:
    name: str
    rect: pygame.Rect
    intent: str = None
    role: str = HOLD
    label: str = ""


class ControlLayer:
    """A group of on-screen controls that share visibility and interactivity."""

    def __init__(self, name, writer):
        self.name = name
        self.writer = writer
        self.controls = []
        self.bound = False
        self.visible = False
        self.interactive = False

    def hit(self, pos):
        if not (self.bound and self.interactive):
            return None
        for control in self.controls:
            if control.rect.collidepoint(pos):
                return control
        return None


def default_controls(width, height):
    """Lay out the persistent and tablet-band controls for a logical surface.

    Returns ``(persistent, tablet)`` lists of `TouchControl`.
    """
    pad = 12
    s = 56
    gap = 6
    bottom = height - pad - s
    persistent = [
        TouchControl("hub", pygame.Rect(pad, pad, 64, 36), None, HUB, "HUB"),
        TouchControl("left", pygame.Rect(pad, bottom, s, s), LEFT, HOLD, "<"),
        TouchControl("down", pygame.Rect(pad + s + gap, bottom, s, s), DOWN, HOLD, "v"),
        TouchControl("right", pygame.Rect(pad + 2 * (s + gap), bottom, s, s), RIGHT, HOLD, ">"),
        TouchControl("up", pygame.Rect(pad + s + gap, bottom - s - gap, s, s), UP, HOLD, "^"),
        TouchControl(
            "action",
            pygame.Rect(width - pad - 84, height - pad - 84, 84, 84),
            ACTION,
            ACTION_ROLE,
            "A",
        ),
    ]
    big = 120
    mid_y = height // 2 - big // 2
    tablet = [
        TouchControl("tablet-left", pygame.Rect(pad, mid_y, big, big), LEFT, HOLD, "<"),
        TouchControl(
            "tablet-right", pygame.Rect(width - pad - big, mid_y, big, big), RIGHT, HOLD, ">"
        ),
        TouchControl(
            "tablet-jump",
            pygame.Rect(width - pad - big, mid_y - 80 - gap, big, 80),
            UP,
            PULSE,
            "JUMP",
        ),
    ]
    return persistent, tablet


class InputUnifier:
    """
    Normalize keyboard, touch buttons and tablet-band buttons into intents.

    Args:
        screens: `screens.ScreenMachine` receiving continue/restart events.
        timers: `frame_loop.Timers` running the pulse auto-clears.
        pulse_ms: duration of pulse intents.
        on_hub: called when the hub control is pressed.
    """

    def __init__(self, screens, timers, pulse_ms=PULSE_MS, on_hub=None):
        self.screens = screens
        self.timers = timers
        self.pulse_ms = pulse_ms
        self.on_hub = on_hub if on_hub is not None else env.navigate_to_hub
        self.intents = IntentMap()
        self._keys = self.intents.writer("keyboard")
        self.persistent = ControlLayer("persistent", self.intents.writer("persistent"))
        self.tablet = ControlLayer("tablet", self.intents.writer("tablet"))
        self.keyboard_bound = False
        self.touch_capable = env.has_touch()
        self.band = ViewportBand.WIDE
        self.size = (0, 0)
        self.pointer_scale = 1.0
        self._pressed = {}
        self._pulses = {}

    # ---------- binding ----------
    def bind_keyboard(self):
        self.keyboard_bound = True

    def bind_persistent_touch_controls(self, controls):
        self.persistent.controls = list(controls)
        self.persistent.bound = True
        self._refresh_layers()

    def bind_tablet_band_controls(self, controls):
        self.tablet.controls = list(controls)
        self.tablet.bound = True
        self._refresh_layers()

    def unbind_all(self):
        self.keyboard_bound = False
        for layer in (self.persistent, self.tablet):
            layer.bound = False
            layer.controls = []
        self._refresh_layers()
        self.reset()

    # ---------- layout ----------
    def update_layout(self, width, height=None, pointer_scale=1.0):
        """Recompute the viewport band from the window width."""
        self.band = band_for_width(width)
        self.size = (width, height if height is not None else self.size[1])
        self.pointer_scale = pointer_scale or 1.0
        self._refresh_layers()

    def _refresh_layers(self):
        mid = self.band is ViewportBand.MID
        self.tablet.visible = self.tablet.bound and mid
        self.tablet.interactive = self.tablet.bound and mid
        # never disabled, only hidden
        self.persistent.interactive = self.persistent.bound
        self.persistent.visible = self.persistent.bound and (
            self.touch_capable or self.band is ViewportBand.NARROW
        )

    def visible_controls(self):
        """Yield the `(layer, control)` pairs to draw.

        The hub control is drawn whenever its layer is bound, so a click that
        leaves the game always lands on something the player can see.
        """
        for layer in (self.persistent, self.tablet):
            if not layer.bound:
                continue
            for control in layer.controls:
                if layer.visible or control.role == HUB:
                    yield layer, control

    def control_at(self, pos):
        pos = (int(pos[0]), int(pos[1]))
        for layer in (self.tablet, self.persistent):
            control = layer.hit(pos)
            if control is not None:
                return layer, control
        return None

    # ---------- events ----------
    def handle_event(self, event):
        """Route a pygame event; return True when it was consumed."""
        etype = event.type
        if etype in (pygame.KEYDOWN, pygame.KEYUP):
            if not self.keyboard_bound:
                return False
            return self._on_key(event.key, etype == pygame.KEYDOWN)
        if etype in (pygame.MOUSEBUTTONDOWN, pygame.MOUSEBUTTONUP):
            # SDL mirrors touches as mouse events; the finger events handle those.
            if getattr(event, "touch", False) or getattr(event, "button", 1) != 1:
                return False
            x, y = event.pos
            pos = (x / self.pointer_scale, y / self.pointer_scale)
            return self._on_pointer("mouse", pos, etype == pygame.MOUSEBUTTONDOWN)
        if etype in (pygame.FINGERDOWN, pygame.FINGERUP):
            self.touch_capable = True
            self._refresh_layers()
            w, h = self.size
            pos = (event.x * w, event.y * h)
            pointer = ("finger", getattr(event, "finger_id", 0))
            return self._on_pointer(pointer, pos, etype == pygame.FINGERDOWN)
        return False

    def _on_key(self, key, down):
        if key in ACTION_KEYS:
            if down:
                self.press_action(self._keys)
            else:
                self._keys.set(ACTION, False)
            return True
        intent = KEY_BINDINGS.get(key)
        if intent is None:
            return False
        self._keys.set(intent, down)
        return True

    def _on_pointer(self, pointer, pos, down):
        if not down:
            pressed = self._pressed.pop(pointer, None)
            if pressed is None:
                return False
            layer, control = pressed
            layer.writer.set(control.intent, False)
            return True

        hit = self.control_at(pos)
        if hit is None:
            return False
        layer, control = hit
        if control.role == HUB:
            self.on_hub()
        elif control.role == PULSE:
            if control.intent == ACTION:
                self.press_action(layer.writer, pulse=True)
            else:
                self.pulse(control.intent, layer.writer)
        elif control.role == ACTION_ROLE:
            self.press_action(layer.writer)
            self._pressed[pointer] = (layer, control)
        else:
            layer.writer.set(control.intent, True)
            self._pressed[pointer] = (layer, control)
        return True

    def press_action(self, writer, pulse=False):
        """Continue, restart, or assert the ``Action`` intent while playing."""
        event = self.screens.action_event()
        if event is not None:
            self.screens.transition(event)
            return
        if pulse:
            self.pulse(ACTION, writer)
        else:
            writer.set(ACTION, True)

    # ---------- pulses ----------
    def pulse(self, intent, writer):
        """Assert `intent` and clear it after `pulse_ms`, release or not."""
        pending = self._pulses.pop(intent, None)
        if pending is not None:
            pending.cancel()
        writer.set(intent, True)

        def _clear():
            self._pulses.pop(intent, None)
            writer.set(intent, False)

        self._pulses[intent] = self.timers.call_later(self.pulse_ms, _clear)

    def reset(self):
        """Cancel pending pulses and set every intent back to False."""
        for handle in self._pulses.values():
            handle.cancel()
        self._pulses.clear()
        self._pressed.clear()
        self.intents.writer("reset").clear_all()
