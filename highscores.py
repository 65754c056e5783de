"""
Best-score persistence for arcade games.

Each game stores one value under ``"<game_id>-best"``: a base-10 integer
string. The adapter is a dumb store. Deciding whether a score is a new best
is the screen state machine's job.
"""

import json
import logging

import env

logger = logging.getLogger(__name__)

BEST_SUFFIX = "-best"
FILE = "highscores.json"


def best_key(game_id):
    """Return the storage key holding the best score of `game_id`."""
    return str(game_id) + BEST_SUFFIX


def parse_score(raw):
    """Convert a stored value to a score, returning 0 for anything malformed."""
    if raw is None or isinstance(raw, bool):
        return 0
    if isinstance(raw, int):
        return raw if raw > 0 else 0
    text = str(raw).strip()
    # plain ASCII digits only: no sign, underscores or other scripts
    if not (text.isascii() and text.isdigit()):
        return 0
    return int(text, 10)


class JsonFileStore:
    """
    Desktop key-value store kept in a JSON file.

    Missing files read as empty. Errors while writing propagate so the adapter
    can fall back to its in-memory record.
    """

    def __init__(self, path=FILE):
        self.path = path

    def _load(self):
        try:
            with open(self.path, "r") as f:
                data = json.load(f)
        except FileNotFoundError:
            return {}
        except ValueError:
            logger.warning("ignoring unreadable score file %s", self.path)
            return {}
        return data if isinstance(data, dict) else {}

    def get_item(self, key):
        return self._load().get(key)

    def set_item(self, key, value):
        data = self._load()
        data[key] = value
        with open(self.path, "w") as f:
            json.dump(data, f)


class BrowserStore:
    """Key-value store backed by the page's ``window.localStorage``."""

    def __init__(self, window=None):
        self.window = window if window is not None else env.browser_window()

    def get_item(self, key):
        return self.window.localStorage.getItem(key)

    def set_item(self, key, value):
        self.window.localStorage.setItem(key, value)


def default_store():
    """Return the platform's durable store."""
    if env.is_browser:
        return BrowserStore()
    return JsonFileStore()


class HighScores:
    """
    Load and save best scores through a string-keyed store.

    Any failure of the underlying store (storage denied, quota exceeded,
    private browsing, read-only disk) degrades to an in-memory record that
    lives for the session. Nothing here ever raises into the game.
    """

    def __init__(self, store=None):
        self.store = store if store is not None else default_store()
        self._memory = {}
        self._unsaved = set()

    def load_best(self, game_id):
        """Return the stored best score for `game_id` (0 if absent or malformed)."""
        key = best_key(game_id)
        if key in self._unsaved:
            return self._memory[key]
        try:
            raw = self.store.get_item(key)
        except Exception as e:
            logger.debug("score store unavailable on load (%s), using memory", e)
            return self._memory.get(key, 0)
        return parse_score(raw)

    def save_best(self, game_id, value):
        """Overwrite the stored best score for `game_id`."""
        key = best_key(game_id)
        value = parse_score(value)
        self._memory[key] = value
        try:
            self.store.set_item(key, str(value))
        except Exception as e:
            self._unsaved.add(key)
            logger.debug("score store unavailable on save (%s), kept in memory", e)
        else:
            self._unsaved.discard(key)
