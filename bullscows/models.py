"""
In-memory data models.

- GuessRecord: one scored guess (immutable, appended to a history list)
- Game: one game session (secret, histories, opponent, status)
- Stats: session scoreboard
"""

from dataclasses import dataclass, field
from threading import Lock
from time import time
from typing import List, Optional

from .config import GameConfig
from .opponent import Opponent
from .types import Code, Difficulty, GameStatus


@dataclass(frozen=True)
class GuessRecord:
    number: int            # 1, 2, 3, ... within its history
    digits: Code
    bulls: int
    cows: int
    timestamp: float = field(default_factory=time)

    @property
    def message(self) -> str:
        if self.bulls == 0 and self.cows == 0:
            return "no bulls, no cows"
        return f"{self.bulls} bull(s) and {self.cows} cow(s)"


@dataclass
class Game:
    id: str
    config: GameConfig
    secret: Code
    difficulty: Difficulty
    opponent: Opponent
    status: GameStatus = "in_progress"
    history: List[GuessRecord] = field(default_factory=list)
    # VS computer: the player's own code, which the opponent tries to crack
    player_secret: Optional[Code] = None
    computer_history: List[GuessRecord] = field(default_factory=list)
    forfeited: bool = False
    created_at: float = field(default_factory=time)
    updated_at: float = field(default_factory=time)
    finished_at: Optional[float] = None
    # Serializes computer turns for this game only; the opponent works outside the store lock
    turn_lock: Lock = field(default_factory=Lock, repr=False, compare=False)

    @property
    def next_guess_number(self) -> int:
        return len(self.history) + 1

    @property
    def used_digits(self) -> List[str]:
        """Digits the player has tried so far, sorted (for keypad shading)."""
        seen = set()
        for record in self.history:
            seen.update(record.digits)
        return sorted(seen)

    def elapsed_seconds(self, now: Optional[float] = None) -> int:
        end = self.finished_at
        if end is None:
            end = time() if now is None else now
        return max(0, int(end - self.created_at))


def format_elapsed(total_seconds: int) -> str:
    """Seconds as a MM:SS clock."""
    minutes = total_seconds // 60
    seconds = total_seconds % 60
    return f"{minutes:02d}:{seconds:02d}"


@dataclass
class Stats:
    games_started: int = 0
    games_won: int = 0
    games_lost: int = 0

    current_streak: int = 0
    best_streak: int = 0

    total_guesses_in_wins: int = 0
    fastest_win_guesses: Optional[int] = None

    # per-difficulty counters
    easy_started: int = 0
    medium_started: int = 0
    hard_started: int = 0
    easy_won: int = 0
    medium_won: int = 0
    hard_won: int = 0

    @property
    def average_guesses_to_win(self) -> Optional[float]:
        if self.games_won == 0:
            return None
        return self.total_guesses_in_wins / self.games_won
