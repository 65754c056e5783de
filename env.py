"""Platform detection and browser bridge for the arcade runtime.

This module is the single place that knows whether a game session runs on a
desktop CPython interpreter with PyGame or inside the browser through pygbag
(CPython compiled to WebAssembly). Everything that needs the hosting page
(window width, pixel density, touch capability, ``localStorage``, navigation
to the hub) goes through the helpers below so the rest of the runtime stays
platform-neutral.

Platform Support
----------------
1. **Desktop (CPython + PyGame)**:
   - Development and testing environment
   - Window metrics come from ``pygame.display``
   - Navigation to the hub ends the session

2. **Browser (Pygbag/Emscripten/WASM)**:
   - Detected via ``sys.platform == "emscripten"``
   - Requires async/await for cooperative multitasking
   - Window metrics, storage and navigation use ``platform.window``

Module Variables
----------------
is_browser : bool
    True when running in browser via pygbag (Emscripten/WASM).

is_desktop : bool
    True when running on desktop CPython with PyGame.

HUB_URL : str
    Entry point of the hub page, relative to the game page.

Example Usage
-------------
::

    import env

    env.configure_logging()
    if env.is_browser:
        print("pixel ratio", env.device_pixel_ratio())
"""

import logging
import os
import sys

logger = logging.getLogger(__name__)

HUB_URL = "../index.html"

DEFAULT_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

# ============================================================================
# Platform Detection
# ============================================================================
# IMPORTANT: Use sys.platform (not platform.system()) for browser detection.
# Pygbag patches sys.platform to "emscripten" and this is the recommended
# detection method per pygbag documentation.
try:
    is_browser = sys.platform == "emscripten"
except Exception:
    is_browser = False

is_desktop = not is_browser

# Uppercase alias kept for callers that test the pygbag flag directly.
IS_PYGBAG = is_browser


def get_platform_name():
    """Return ``"browser"`` or ``"desktop"``."""
    if is_browser:
        return "browser"
    return "desktop"


def configure_logging(level=None):
    """Install a root logging handler for a game session.

    The level defaults to ``INFO`` and can be overridden with the
    ``ARCADE_LOG_LEVEL`` environment variable (``DEBUG`` shows the boot
    milestones).
    """
    if level is None:
        level = os.environ.get("ARCADE_LOG_LEVEL", "INFO")
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(level=level, format=DEFAULT_LOG_FORMAT)
    logger.debug("logging configured for %s", get_platform_name())


def browser_window():
    """Return the page's ``window`` object under pygbag, else ``None``.

    Pygbag exposes the JavaScript global object as ``platform.window``.
    """
    if not is_browser:
        return None
    try:
        import platform  # pygbag replaces this module with its JS bridge

        return getattr(platform, "window", None)
    except Exception:
        return None


def window_width(default):
    """Return the current width of the hosting window in CSS pixels."""
    win = browser_window()
    if win is not None:
        try:
            return int(win.innerWidth)
        except Exception:
            return int(default)
    try:
        import pygame

        if pygame.display.get_init() and pygame.display.get_surface() is not None:
            return int(pygame.display.get_window_size()[0])
    except Exception:
        pass
    return int(default)


def device_pixel_ratio():
    """Return the device pixel density used to scale the backing surface.

    Desktop windows are always drawn at 1:1; the browser reports
    ``window.devicePixelRatio``. Values below 1 are treated as 1.
    """
    win = browser_window()
    if win is None:
        return 1.0
    try:
        ratio = float(win.devicePixelRatio)
    except Exception:
        return 1.0
    return ratio if ratio >= 1.0 else 1.0


def has_touch():
    """Return True when the hosting device reports touch input.

    Only used to decide what is *shown*; no input source is ever disabled
    based on this value.
    """
    win = browser_window()
    if win is None:
        return False
    try:
        return int(win.navigator.maxTouchPoints) > 0
    except Exception:
        return False


def navigate_to_hub(url=HUB_URL):
    """Leave the game and go back to the hub page.

    In the browser the hosting document navigates to ``url``. On desktop there
    is no hub page, so a ``QUIT`` event is posted and the session ends through
    its normal teardown path.
    """
    win = browser_window()
    if win is not None:
        logger.info("navigating to hub %s", url)
        win.location.href = url
        return
    logger.info("hub requested on %s, closing session", get_platform_name())
    try:
        import pygame

        pygame.event.post(pygame.event.Event(pygame.QUIT))
    except Exception as e:
        logger.debug("could not post QUIT event: %s", e)
