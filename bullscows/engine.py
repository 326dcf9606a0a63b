"""
Pure game logic (no HTTP, no storage).

For each guess we compute two feedback numbers:
- bulls: how many positions hold exactly the right digit
- cows: digits that are in the secret but sit in the wrong position,
  each secret digit counted at most once

Codes are strings of digit characters ("0427"). Whether a code is allowed
(length, repeats, leading zero) depends on the GameConfig of the game.
"""

import random
from enum import Enum
from typing import List, Optional

from .config import GameConfig
from .types import Code, Feedback

DIGITS = "0123456789"


class ValidationOutcome(Enum):
    VALID = "valid"
    INVALID_LENGTH = "invalid_length"
    NON_NUMERIC = "non_numeric"
    REPEATED_DIGITS = "repeated_digits"
    LEADING_ZERO = "leading_zero"

    @property
    def is_valid(self) -> bool:
        return self is ValidationOutcome.VALID

    @property
    def message(self) -> Optional[str]:
        """User-facing text for the outcome; None when the guess is fine."""
        return _MESSAGES[self]


_MESSAGES = {
    ValidationOutcome.VALID: None,
    ValidationOutcome.INVALID_LENGTH: "Guess must have the correct number of digits",
    ValidationOutcome.NON_NUMERIC: "Guess must contain only digits",
    ValidationOutcome.REPEATED_DIGITS: "Digits must be unique (no repeats allowed)",
    ValidationOutcome.LEADING_ZERO: "First digit cannot be 0",
}


def score_guess(secret: Code, guess: Code) -> Feedback:
    """
    Example:
      secret = "1234"
      guess  = "1123"
      bulls = 1  (the 1 in first position)
      cows  = 2  (the 2 and the 3; the second 1 has no secret digit left to match)
      Returns a tuple: (bulls, cows)
    """

    # 0. Lengths must match; callers validate against the config first
    n = len(secret)
    if len(guess) != n:
        raise ValueError("Secret and guess must be the same length.")

    secret_used = [False] * n
    guess_used = [False] * n

    # 1. Exact position matches --> bulls
    bulls = 0
    i = 0
    while i < n:
        if secret[i] == guess[i]:
            bulls += 1
            secret_used[i] = True
            guess_used[i] = True
        i += 1

    # 2. Each leftover guess digit claims the first free matching secret digit --> cows
    cows = 0
    i = 0
    while i < n:
        if not guess_used[i]:
            j = 0
            while j < n:
                if not secret_used[j] and secret[j] == guess[i]:
                    cows += 1
                    secret_used[j] = True
                    break
                j += 1
        i += 1

    return (bulls, cows)


def is_win(bulls: int, length: int) -> bool:
    """Win = every position is a bull."""
    return bulls == length


def validate_guess(guess: str, config: GameConfig) -> ValidationOutcome:
    """
    Checks run in a fixed order and the first failure wins:
    length, digits only, repeats, leading zero.
    """
    if len(guess) != config.length:
        return ValidationOutcome.INVALID_LENGTH

    # str.isdigit() also accepts things like superscripts, so compare to ASCII digits
    for ch in guess:
        if ch not in DIGITS:
            return ValidationOutcome.NON_NUMERIC

    if not config.allow_repeats and len(set(guess)) != len(guess):
        return ValidationOutcome.REPEATED_DIGITS

    if not config.allow_leading_zero and guess.startswith("0"):
        return ValidationOutcome.LEADING_ZERO

    return ValidationOutcome.VALID


def generate_secret(config: GameConfig, rng: Optional[random.Random] = None) -> Code:
    """
    Random code that always passes validate_guess(code, config).

    A leading zero (when not allowed) is fixed by swapping the first digit with
    the leftmost non-zero digit, instead of drawing a whole new code.
    """
    if rng is None:
        rng = random.Random()

    if config.allow_repeats:
        while True:
            digits = [rng.choice(DIGITS) for _ in range(config.length)]
            if config.allow_leading_zero or digits[0] != "0":
                return "".join(digits)

            # Swap with the first non-zero digit, if there is one
            k = 1
            while k < len(digits) and digits[k] == "0":
                k += 1
            if k < len(digits):
                digits[0], digits[k] = digits[k], digits[0]
                return "".join(digits)
            # all zeros: nothing to swap with, draw again

    pool = list(DIGITS)
    rng.shuffle(pool)
    digits = pool[:config.length]

    # Digits are unique, so anything after a leading zero is non-zero
    if not config.allow_leading_zero and digits[0] == "0":
        digits[0], digits[1] = digits[1], digits[0]

    return "".join(digits)


def enumerate_all(config: GameConfig) -> List[Code]:
    """
    Every code that is valid under config, in ascending order.

    Backtracks position by position, skipping digits already used (no repeats)
    and a leading '0' (no leading zero). Sizes with neither allowed:
    3 -> 648, 4 -> 4536, 5 -> 27216, 6 -> 136080.
    """
    codes: List[Code] = []
    prefix: List[str] = []

    def backtrack() -> None:
        if len(prefix) == config.length:
            code = "".join(prefix)
            # The pruning below must agree with validate_guess
            if validate_guess(code, config).is_valid:
                codes.append(code)
            return

        for digit in DIGITS:
            if not config.allow_repeats and digit in prefix:
                continue
            if not prefix and not config.allow_leading_zero and digit == "0":
                continue
            prefix.append(digit)
            backtrack()
            prefix.pop()

    backtrack()
    return codes
