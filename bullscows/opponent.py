"""
Computer opponent.

It keeps a candidate list: every code still consistent with the feedback seen
so far. The list is filled lazily on the first guess of a game and only
shrinks until reset().

Difficulties:
  easy   -> no filtering; 70% a random candidate, 30% a fresh random code
  medium -> filter by the whole history, then a random survivor
  hard   -> filter; with <= 2 left take the first; "1234" opener for
            4 digits without repeats; else a random survivor
"""

import logging
import random
from typing import List, Optional, Sequence

from .config import GameConfig
from .engine import enumerate_all, generate_secret, score_guess
from .types import Code, Difficulty

logger = logging.getLogger(__name__)

EASY_CANDIDATE_RATE = 0.7
HARD_OPENER = "1234"

DIFFICULTIES = ("easy", "medium", "hard")


class Opponent:
    def __init__(self, difficulty: Difficulty, rng: Optional[random.Random] = None) -> None:
        if difficulty not in DIFFICULTIES:
            raise ValueError(f"Unknown difficulty {difficulty!r}")
        self.difficulty = difficulty
        self._rng = rng if rng is not None else random.Random()
        self._candidates: List[Code] = []
        self._config: Optional[GameConfig] = None

    def initialize_candidates(self, config: GameConfig) -> None:
        self._candidates = enumerate_all(config)
        self._config = config
        logger.debug("Opponent(%s) initialized %d candidates for %s",
                     self.difficulty, len(self._candidates), config)

    def make_guess(self, config: GameConfig, history: Sequence) -> Code:
        """
        history: scored guesses in order, anything with .digits, .bulls, .cows.
        The history is only read, never changed.
        """
        if not self._candidates or self._config != config:
            self.initialize_candidates(config)

        if self.difficulty == "easy":
            return self._easy_guess(config)
        if self.difficulty == "medium":
            return self._medium_guess(config, history)
        return self._hard_guess(config, history)

    def get_remaining_candidates(self) -> int:
        return len(self._candidates)

    def reset(self) -> None:
        self._candidates = []
        self._config = None

    # --- strategies ---

    def _easy_guess(self, config: GameConfig) -> Code:
        if self._candidates and self._rng.random() < EASY_CANDIDATE_RATE:
            return self._rng.choice(self._candidates)
        return generate_secret(config, self._rng)

    def _medium_guess(self, config: GameConfig, history: Sequence) -> Code:
        self._filter(history)
        if self._candidates:
            return self._rng.choice(self._candidates)
        # Only reachable with contradictory feedback
        logger.warning("Opponent(medium) has no candidates left; guessing at random")
        return generate_secret(config, self._rng)

    def _hard_guess(self, config: GameConfig, history: Sequence) -> Code:
        self._filter(history)

        if len(self._candidates) <= 2:
            if self._candidates:
                return self._candidates[0]
            logger.warning("Opponent(hard) has no candidates left; guessing at random")
            return generate_secret(config, self._rng)

        if not history and config.length == 4 and not config.allow_repeats:
            return HARD_OPENER

        return self._rng.choice(self._candidates)

    def _filter(self, history: Sequence) -> None:
        # Re-applying feedback that was already used leaves the list unchanged
        before = len(self._candidates)
        for record in history:
            expected = (record.bulls, record.cows)
            self._candidates = [
                c for c in self._candidates if score_guess(c, record.digits) == expected
            ]
        logger.debug("Opponent(%s) filtered %d -> %d candidates",
                     self.difficulty, before, len(self._candidates))
