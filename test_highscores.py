"""Best-score persistence: key layout, parsing and graceful degradation."""

import json

import pytest

from conftest import MemoryStore
from highscores import BrowserStore, HighScores, JsonFileStore, best_key, parse_score


def test_key_layout():
    assert best_key("dash") == "dash-best"


@pytest.mark.parametrize("value", [0, 1, 42, 100, 987654321])
def test_save_then_load_returns_value(store, value):
    scores = HighScores(store)
    scores.save_best("dash", value)
    assert scores.load_best("dash") == value
    assert store.items["dash-best"] == str(value)


def test_absent_score_is_zero(store):
    assert HighScores(store).load_best("never-played") == 0


@pytest.mark.parametrize(
    "raw", ["", "abc", "4.2", "-7", "0x10", None, "1e3", "1_000", "+5", "\u0661\u0662", "\u00b2"]
)
def test_malformed_score_is_zero(raw):
    store = MemoryStore({"dash-best": raw})
    assert HighScores(store).load_best("dash") == 0


def test_parse_score_accepts_padded_digits():
    assert parse_score(" 17 ") == 17
    assert parse_score(17) == 17
    assert parse_score(True) == 0


def test_games_are_namespaced(store):
    scores = HighScores(store)
    scores.save_best("dash", 10)
    scores.save_best("snake", 30)
    assert scores.load_best("dash") == 10
    assert scores.load_best("snake") == 30


def test_save_overwrites_unconditionally(store):
    scores = HighScores(store)
    scores.save_best("dash", 50)
    scores.save_best("dash", 5)
    assert scores.load_best("dash") == 5


def test_unavailable_store_degrades_to_memory(broken_store):
    scores = HighScores(broken_store)
    assert scores.load_best("dash") == 0
    scores.save_best("dash", 12)
    assert scores.load_best("dash") == 12


def test_json_file_store_round_trip(tmp_path):
    path = tmp_path / "highscores.json"
    scores = HighScores(JsonFileStore(str(path)))
    assert scores.load_best("dash") == 0
    scores.save_best("dash", 33)
    assert json.loads(path.read_text()) == {"dash-best": "33"}
    assert HighScores(JsonFileStore(str(path))).load_best("dash") == 33


def test_json_file_store_ignores_corrupt_file(tmp_path):
    path = tmp_path / "highscores.json"
    path.write_text("{not json")
    scores = HighScores(JsonFileStore(str(path)))
    assert scores.load_best("dash") == 0
    scores.save_best("dash", 8)
    assert scores.load_best("dash") == 8


def test_json_file_store_unwritable_path(tmp_path):
    scores = HighScores(JsonFileStore(str(tmp_path / "missing" / "scores.json")))
    scores.save_best("dash", 9)
    assert scores.load_best("dash") == 9


class _LocalStorage:
    def __init__(self):
        self.data = {}

    def getItem(self, key):
        return self.data.get(key)

    def setItem(self, key, value):
        self.data[key] = value


class _Window:
    def __init__(self):
        self.localStorage = _LocalStorage()


def test_browser_store_uses_local_storage():
    window = _Window()
    scores = HighScores(BrowserStore(window))
    scores.save_best("dash", 77)
    assert window.localStorage.data == {"dash-best": "77"}
    assert scores.load_best("dash") == 77
