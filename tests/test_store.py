"""
Testing in-memory store
- Create a game, make guesses, and check status/history/stats, etc.
"""

import threading

import pytest

from bullscows.config import GameConfig
from bullscows.engine import ValidationOutcome
from bullscows.store import GameStateError, GameStore, InvalidGuessError

def test_store_create_and_guess_basic(config):
    store = GameStore()

    # Secret is hardcoded so we know what outcome should be
    game = store.create(config, "medium", secret="1234")
    game_id = game.id

    assert game.status == "in_progress"
    assert game.history == []

    # Wrong guess -> history grows, still in progress
    store.guess(game_id, "5678")
    game_after = store.get(game_id)
    assert len(game_after.history) == 1
    first = game_after.history[0]
    assert (first.number, first.digits, first.bulls, first.cows) == (1, "5678", 0, 0)
    assert first.message == "no bulls, no cows"
    assert game_after.status == "in_progress"

    store.guess(game_id, "1243")
    assert store.get(game_id).history[-1].message == "2 bull(s) and 2 cow(s)"

    # Winning guess ends the game
    store.guess(game_id, "1234")
    game_win = store.get(game_id)
    assert game_win.status == "won"
    assert [r.number for r in game_win.history] == [1, 2, 3]
    assert game_win.finished_at is not None

def test_invalid_guess_leaves_history_untouched(config):
    store = GameStore()
    game = store.create(config, secret="1234")

    with pytest.raises(InvalidGuessError) as excinfo:
        store.guess(game.id, "1123")
    assert excinfo.value.outcome is ValidationOutcome.REPEATED_DIGITS
    assert str(excinfo.value) == "Digits must be unique (no repeats allowed)"

    with pytest.raises(InvalidGuessError):
        store.guess(game.id, "0123")
    with pytest.raises(InvalidGuessError):
        store.guess(game.id, "12345")

    assert store.get(game.id).history == []
    assert store.get(game.id).next_guess_number == 1

def test_guess_after_finish_is_ignored(config):
    store = GameStore()
    game = store.create(config, secret="1234")
    store.guess(game.id, "1234")
    store.guess(game.id, "5678")
    assert len(store.get(game.id).history) == 1

def test_unknown_game_returns_none(config):
    store = GameStore()
    assert store.get("nope") is None
    assert store.guess("nope", "1234") is None
    assert store.computer_guess("nope") is None
    assert store.forfeit("nope") is None

def test_bad_secrets_rejected(config):
    store = GameStore()
    with pytest.raises(InvalidGuessError):
        store.create(config, player_secret="0123")
    with pytest.raises(InvalidGuessError):
        store.create(config, secret="12")
    assert store.get_stats().games_started == 0

def test_generated_secret_follows_config():
    store = GameStore()
    cfg = GameConfig(length=6, allow_repeats=True, allow_leading_zero=False)
    game = store.create(cfg)
    assert len(game.secret) == 6
    assert game.secret[0] != "0"

def test_used_digits(config):
    store = GameStore()
    game = store.create(config, secret="1234")
    store.guess(game.id, "5678")
    store.guess(game.id, "9518")
    assert store.get(game.id).used_digits == ["1", "5", "6", "7", "8", "9"]

def test_computer_guess_needs_player_secret(config):
    store = GameStore()
    game = store.create(config, "hard", secret="1234")
    with pytest.raises(GameStateError):
        store.computer_guess(game.id)

def test_computer_opens_and_eventually_cracks_player_secret(config):
    store = GameStore()
    game = store.create(config, "hard", player_secret="5678", secret="1234")

    store.computer_guess(game.id)
    first = store.get(game.id).computer_history[0]
    assert (first.digits, first.bulls, first.cows) == ("1234", 0, 0)

    # Elimination always terminates within the candidate space
    for _ in range(20):
        if store.get(game.id).status != "in_progress":
            break
        store.computer_guess(game.id)

    final = store.get(game.id)
    assert final.status == "lost"
    assert final.computer_history[-1].digits == "5678"
    assert final.history == []

    with pytest.raises(GameStateError):
        store.computer_guess(game.id)

def test_forfeit_counts_as_loss(config):
    store = GameStore()
    game = store.create(config, secret="1234")
    store.forfeit(game.id)
    finished = store.get(game.id)
    assert finished.status == "lost"
    assert finished.forfeited is True
    # Second forfeit does not count twice
    store.forfeit(game.id)
    assert store.get_stats().games_lost == 1

def test_store_stats_update_on_win_and_loss():
    store = GameStore()

    # Game A: win in 2 guesses
    game_a = store.create(GameConfig(length=3), "easy", secret="123")
    store.guess(game_a.id, "456")  # wrong
    store.guess(game_a.id, "123")  # win

    stats_after_win = store.get_stats()
    assert stats_after_win.games_started == 1
    assert stats_after_win.games_won == 1
    assert stats_after_win.games_lost == 0
    assert stats_after_win.easy_started == 1
    assert stats_after_win.easy_won == 1
    assert stats_after_win.current_streak == 1
    assert stats_after_win.fastest_win_guesses == 2
    assert stats_after_win.average_guesses_to_win == 2

    # Game B: force a loss
    game_b = store.create(GameConfig(length=4), "hard", secret="9876")
    store.forfeit(game_b.id)

    stats_final = store.get_stats()
    assert stats_final.games_started == 2
    assert stats_final.hard_started == 1
    assert stats_final.games_won == 1
    assert stats_final.games_lost == 1
    assert stats_final.current_streak == 0
    assert stats_final.best_streak == 1

    store.reset_stats()
    assert store.get_stats().games_started == 0

def test_slow_computer_turn_does_not_block_other_games(config, monkeypatch):
    store = GameStore()
    slow = store.create(config, "hard", player_secret="5678", secret="1234")
    other = store.create(GameConfig(length=3), secret="123")

    thinking = threading.Event()
    release = threading.Event()
    real_make_guess = slow.opponent.make_guess

    def slow_make_guess(cfg, history):
        thinking.set()
        release.wait(timeout=5)
        return real_make_guess(cfg, history)

    monkeypatch.setattr(slow.opponent, "make_guess", slow_make_guess)

    computer = threading.Thread(target=store.computer_guess, args=(slow.id,))
    computer.start()
    assert thinking.wait(timeout=5)

    # While the opponent is still thinking, another game plays on
    player = threading.Thread(target=store.guess, args=(other.id, "456"))
    player.start()
    player.join(timeout=2)
    finished_while_thinking = not player.is_alive()

    release.set()
    computer.join(timeout=5)
    player.join(timeout=5)

    assert finished_while_thinking
    assert len(store.get(other.id).history) == 1
    assert store.get(slow.id).computer_history[0].digits == "1234"

def test_computer_guess_dropped_if_game_ends_meanwhile(config, monkeypatch):
    store = GameStore()
    game = store.create(config, "medium", player_secret="5678", secret="1234")

    def make_guess_then_player_gives_up(cfg, history):
        store.forfeit(game.id)
        return "9876"

    monkeypatch.setattr(game.opponent, "make_guess", make_guess_then_player_gives_up)

    with pytest.raises(GameStateError):
        store.computer_guess(game.id)
    assert store.get(game.id).computer_history == []
    assert store.get_stats().games_lost == 1

def test_get_stats_returns_a_snapshot(config):
    store = GameStore()
    game = store.create(config, secret="1234")

    before = store.get_stats()
    store.guess(game.id, "1234")

    assert before.games_won == 0
    assert store.get_stats().games_won == 1

    # Changing the copy does not touch the scoreboard
    copy = store.get_stats()
    copy.games_won = 99
    assert store.get_stats().games_won == 1
