"""Screen state machine: transition table, no-op events and best-score rules."""

import itertools

import pytest

from conftest import MemoryStore
from highscores import HighScores
from screens import CONTINUE, RESTART, Continue, Restart, ScreenMachine, ScreenState, Terminate


def make_machine(stored=None):
    items = {} if stored is None else {"dash-best": str(stored)}
    scores = HighScores(MemoryStore(items))
    return ScreenMachine("dash", scores), scores


def test_starts_on_instructions():
    machine, _ = make_machine()
    assert machine.state is ScreenState.INSTRUCTIONS
    assert machine.final_score is None


def test_full_cycle():
    machine, _ = make_machine()
    assert machine.transition(CONTINUE)
    assert machine.state is ScreenState.PLAYING
    assert machine.transition(Terminate(5))
    assert machine.state is ScreenState.GAME_OVER
    assert machine.transition(RESTART)
    assert machine.state is ScreenState.PLAYING


INVALID = {
    ScreenState.INSTRUCTIONS: [Terminate(3), RESTART],
    ScreenState.PLAYING: [CONTINUE, RESTART],
    ScreenState.GAME_OVER: [CONTINUE, Terminate(9)],
}


def _drive_to(machine, state):
    if state is not ScreenState.INSTRUCTIONS:
        machine.transition(CONTINUE)
    if state is ScreenState.GAME_OVER:
        machine.transition(Terminate(1))


@pytest.mark.parametrize("state", list(ScreenState))
def test_invalid_event_sequences_are_noops(state):
    for length in (1, 2, 3):
        for seq in itertools.product(INVALID[state], repeat=length):
            machine, scores = make_machine()
            _drive_to(machine, state)
            before = (machine.final_score, machine.is_new_best, machine.best)
            for event in seq:
                assert machine.transition(event) is False
            assert machine.state is state
            assert (machine.final_score, machine.is_new_best, machine.best) == before


def test_invalid_event_does_not_notify_listeners():
    machine, _ = make_machine()
    calls = []
    machine.add_listener(lambda *args: calls.append(args))
    machine.transition(RESTART)
    machine.transition(Terminate(10))
    assert calls == []


def test_listeners_receive_old_new_and_event():
    machine, _ = make_machine()
    calls = []
    machine.add_listener(lambda old, new, event: calls.append((old, new, type(event))))
    machine.transition(CONTINUE)
    machine.transition(Terminate(2))
    machine.transition(RESTART)
    assert calls == [
        (ScreenState.INSTRUCTIONS, ScreenState.PLAYING, Continue),
        (ScreenState.PLAYING, ScreenState.GAME_OVER, Terminate),
        (ScreenState.GAME_OVER, ScreenState.PLAYING, Restart),
    ]


def test_removed_listener_is_not_called():
    machine, _ = make_machine()
    calls = []
    listener = lambda *args: calls.append(args)  # noqa: E731
    machine.add_listener(listener)
    machine.remove_listener(listener)
    machine.remove_listener(listener)
    machine.transition(CONTINUE)
    assert calls == []


def test_fresh_session_first_score_is_new_best():
    machine, scores = make_machine()
    machine.transition(CONTINUE)
    machine.transition(Terminate(42))
    assert machine.final_score == 42
    assert machine.is_new_best is True
    assert machine.best == 42
    assert scores.load_best("dash") == 42


def test_lower_score_keeps_stored_best():
    machine, scores = make_machine(stored=100)
    machine.transition(CONTINUE)
    machine.transition(Terminate(42))
    assert machine.is_new_best is False
    assert machine.best == 100
    assert scores.load_best("dash") == 100


def test_equal_score_is_not_a_new_best():
    machine, scores = make_machine(stored=42)
    machine.transition(CONTINUE)
    machine.transition(Terminate(42))
    assert machine.is_new_best is False
    assert scores.load_best("dash") == 42


@pytest.mark.parametrize("previous,score", [(None, 0), (None, 7), (10, 3), (10, 11), (500, 499)])
def test_persisted_best_is_max_of_previous_and_score(previous, score):
    machine, scores = make_machine(stored=previous)
    machine.transition(CONTINUE)
    machine.transition(Terminate(score))
    assert scores.load_best("dash") == max(previous or 0, score)


def test_negative_final_score_is_clamped():
    machine, scores = make_machine()
    machine.transition(CONTINUE)
    machine.transition(Terminate(-5))
    assert machine.final_score == 0
    assert scores.load_best("dash") == 0


def test_restart_clears_round_result():
    machine, _ = make_machine()
    machine.transition(CONTINUE)
    machine.transition(Terminate(42))
    machine.transition(RESTART)
    assert machine.final_score is None
    assert machine.is_new_best is False
    assert machine.best == 42


def test_action_event_follows_screen():
    machine, _ = make_machine()
    assert machine.action_event() == CONTINUE
    machine.transition(CONTINUE)
    assert machine.action_event() is None
    machine.transition(Terminate(0))
    assert machine.action_event() == RESTART
