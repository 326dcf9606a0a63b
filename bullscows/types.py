"""
Labels for clarity.
"""

from typing import Literal, Tuple

Code = str  # "1234": digit characters, length set by the game config
Feedback = Tuple[int, int]  # (bulls, cows)
GameStatus = Literal["in_progress", "won", "lost"]
Difficulty = Literal["easy", "medium", "hard"]
