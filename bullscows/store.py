"""
In-memory store
Holds game sessions and the scoreboard in memory.

Each game owns its config, secret, histories and Opponent; nothing is shared
between games. One lock guards the dict, the scoreboard and short state
changes, since the API may call in from several worker threads; each game
also has a turn lock for the slow computer move.
"""

import logging
from dataclasses import replace
from threading import RLock
from time import time
from typing import Dict, Optional
from uuid import uuid4

from .config import GameConfig
from .engine import ValidationOutcome, generate_secret, is_win, score_guess, validate_guess
from .models import Game, GuessRecord, Stats
from .opponent import Opponent
from .random_client import new_rng
from .types import Code, Difficulty

logger = logging.getLogger(__name__)


class InvalidGuessError(ValueError):
    """A guess (or player secret) that breaks the game's rules."""

    def __init__(self, outcome: ValidationOutcome) -> None:
        super().__init__(outcome.message)
        self.outcome = outcome


class GameStateError(Exception):
    """The game is not in a state that allows the requested action."""


class GameStore:
    def __init__(self) -> None:
        self._games: Dict[str, Game] = {}
        self._lock = RLock()
        self._stats = Stats()

    def create(
        self,
        config: GameConfig,
        difficulty: Difficulty = "medium",
        player_secret: Optional[Code] = None,
        secret: Optional[Code] = None,
    ) -> Game:
        """
        Start a game. `secret` is normally generated; passing one is for tests
        and replays and it must be valid under config like any guess.
        """
        if player_secret is not None:
            outcome = validate_guess(player_secret, config)
            if not outcome.is_valid:
                raise InvalidGuessError(outcome)

        rng = new_rng()
        if secret is None:
            secret = generate_secret(config, rng)
        else:
            outcome = validate_guess(secret, config)
            if not outcome.is_valid:
                raise InvalidGuessError(outcome)

        game = Game(
            id=str(uuid4()),
            config=config,
            secret=secret,
            difficulty=difficulty,
            opponent=Opponent(difficulty, rng),
            player_secret=player_secret,
        )
        with self._lock:
            self._games[game.id] = game

            self._stats.games_started += 1
            if difficulty == "easy":
                self._stats.easy_started += 1
            elif difficulty == "hard":
                self._stats.hard_started += 1
            else:
                self._stats.medium_started += 1

        logger.info("Game %s started (%s, %s)", game.id, difficulty, config)
        return game

    def get(self, game_id: str) -> Optional[Game]:
        with self._lock:
            return self._games.get(game_id)

    def guess(self, game_id: str, attempt: str) -> Optional[Game]:
        with self._lock:
            game = self._games.get(game_id)
            if game is None:
                return None

            if game.status != "in_progress":
                # If the game already ended, just return it (ignore extra guesses)
                return game

            # Invalid input leaves history and turn untouched
            outcome = validate_guess(attempt, game.config)
            if not outcome.is_valid:
                raise InvalidGuessError(outcome)

            bulls, cows = score_guess(game.secret, attempt)
            game.history.append(
                GuessRecord(number=game.next_guess_number, digits=attempt, bulls=bulls, cows=cows)
            )
            game.updated_at = time()

            if is_win(bulls, game.config.length):
                self._finish(game, "won")

            return game

    def computer_guess(self, game_id: str) -> Optional[Game]:
        """
        Let the opponent take one guess at the player's secret.

        Building and filtering the candidates can take a while (up to a million
        codes), so it runs under the game's own turn lock, not the store lock.
        """
        with self._lock:
            game = self._games.get(game_id)
        if game is None:
            return None

        with game.turn_lock:
            with self._lock:
                self._check_computer_turn(game)
                history = list(game.computer_history)

            attempt = game.opponent.make_guess(game.config, history)
            bulls, cows = score_guess(game.player_secret, attempt)

            with self._lock:
                # The player may have won or forfeited while the opponent was thinking
                self._check_computer_turn(game)
                game.computer_history.append(
                    GuessRecord(
                        number=len(game.computer_history) + 1,
                        digits=attempt,
                        bulls=bulls,
                        cows=cows,
                    )
                )
                game.updated_at = time()
                logger.debug("Game %s: computer guessed %s -> %d/%d (%d candidates left)",
                             game.id, attempt, bulls, cows,
                             game.opponent.get_remaining_candidates())

                if is_win(bulls, game.config.length):
                    self._finish(game, "lost")

            return game

    def _check_computer_turn(self, game: Game) -> None:
        if game.player_secret is None:
            raise GameStateError("This game has no player secret for the computer to guess.")
        if game.status != "in_progress":
            raise GameStateError(f"Game {game.status}. No more guesses allowed.")

    def forfeit(self, game_id: str) -> Optional[Game]:
        with self._lock:
            game = self._games.get(game_id)
            if game is None:
                return None
            if game.status == "in_progress":
                game.forfeited = True
                self._finish(game, "lost")
            return game

    # Must be called with the lock held; updates the scoreboard exactly once per game
    def _finish(self, game: Game, status: str) -> None:
        game.status = status
        game.finished_at = time()
        game.updated_at = game.finished_at
        logger.info("Game %s %s after %d guess(es)", game.id, status, len(game.history))

        if status == "won":
            self._stats.games_won += 1

            if game.difficulty == "easy":
                self._stats.easy_won += 1
            elif game.difficulty == "hard":
                self._stats.hard_won += 1
            else:
                self._stats.medium_won += 1

            self._stats.current_streak += 1
            if self._stats.current_streak > self._stats.best_streak:
                self._stats.best_streak = self._stats.current_streak

            guesses_used = len(game.history)
            self._stats.total_guesses_in_wins += guesses_used
            if self._stats.fastest_win_guesses is None or guesses_used < self._stats.fastest_win_guesses:
                self._stats.fastest_win_guesses = guesses_used
        else:
            self._stats.games_lost += 1
            self._stats.current_streak = 0

    def get_stats(self) -> Stats:
        """A copy of the scoreboard, so readers never see a half-applied update."""
        with self._lock:
            return replace(self._stats)

    def reset_stats(self) -> None:
        with self._lock:
            self._stats = Stats()
