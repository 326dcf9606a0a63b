"""
Explicit validation & Pydantic models
- Models are used to validate and serialize/deserialize data
  exchanged between the client and server.
- Defines the structure of API requests and responses.

Guesses travel as strings ("0427") so leading zeros survive. The rule checks
(length, repeats, leading zero) are NOT done here: they depend on the game's
config and are reported by the engine with their own messages.
"""

from typing import List, Literal, Optional
from pydantic import BaseModel, Field

from .config import MAX_LENGTH, MIN_LENGTH, GameConfig
from .models import Game, GuessRecord, Stats, format_elapsed

# 1. Ruleset for a game (shared by new-game and validate requests)
class ConfigIn(BaseModel):
    length: int = Field(4, ge=MIN_LENGTH, le=MAX_LENGTH, description="How many digits in a code")
    allow_repeats: bool = Field(False, description="May a digit appear more than once?")
    allow_leading_zero: bool = Field(False, description="May a code start with 0?")

    def to_config(self) -> GameConfig:
        return GameConfig(
            length=self.length,
            allow_repeats=self.allow_repeats,
            allow_leading_zero=self.allow_leading_zero,
        )

class ConfigOut(BaseModel):
    length: int
    allow_repeats: bool
    allow_leading_zero: bool

    @classmethod
    def from_config(cls, config: GameConfig) -> "ConfigOut":
        return cls(
            length=config.length,
            allow_repeats=config.allow_repeats,
            allow_leading_zero=config.allow_leading_zero,
        )

# 2. Start a game
class NewGameRequest(ConfigIn):
    difficulty: Literal["easy", "medium", "hard"] = Field("medium", description="Computer opponent level")
    player_secret: Optional[str] = Field(
        None, description="Your own code for the computer to crack (omit to play solo)"
    )

    model_config = {
        "json_schema_extra": {
            "examples": [
                {"length": 4, "difficulty": "medium"},
                {"length": 4, "difficulty": "hard", "player_secret": "5678"},
                {"length": 5, "allow_repeats": True, "allow_leading_zero": True, "difficulty": "easy"},
            ]
        }
    }

# 3. A player's guess
class GuessRequest(BaseModel):
    guess: str = Field(..., description="Digits as a string, e.g. \"1234\"")

class ValidateRequest(ConfigIn):
    guess: str = Field(..., description="Candidate code to check against the rules")

class ValidateResponse(BaseModel):
    outcome: Literal["valid", "invalid_length", "non_numeric", "repeated_digits", "leading_zero"]
    valid: bool
    message: Optional[str] = Field(None, description="Why the guess was rejected")

# 4. Feedback for a single guess
class GuessEntryOut(BaseModel):
    number: int = Field(..., description="1 for the first guess, 2 for the second, ...")
    guess: str = Field(..., description="The guessed code")
    bulls: int = Field(..., description="Right digit, right position")
    cows: int = Field(..., description="Right digit, wrong position")
    message: str = Field(..., description="Feedback message")
    timestamp: float = Field(..., description="When the guess was made")

    @classmethod
    def from_record(cls, record: GuessRecord) -> "GuessEntryOut":
        return cls(
            number=record.number,
            guess=record.digits,
            bulls=record.bulls,
            cows=record.cows,
            message=record.message,
            timestamp=record.timestamp,
        )

# 5. Overall state of a game
class GameState(BaseModel):
    game_id: str = Field(..., description="Unique ID for the game; the secret is only shown once it ends")
    status: Literal["in_progress", "won", "lost"] = Field(..., description="Current state of the game")
    difficulty: Literal["easy", "medium", "hard"]
    config: ConfigOut
    history: List[GuessEntryOut] = Field(..., description="All your guesses so far with feedback")
    computer_history: List[GuessEntryOut] = Field(
        default_factory=list, description="The computer's guesses at your secret"
    )
    used_digits: List[str] = Field(default_factory=list, description="Digits you have tried")
    elapsed_seconds: int
    elapsed: str = Field(..., description="Elapsed time as MM:SS")
    secret: Optional[str] = Field(None, description="Revealed once the game is over")

    @classmethod
    def from_game(cls, game: Game) -> "GameState":
        seconds = game.elapsed_seconds()
        return cls(
            game_id=game.id,
            status=game.status,
            difficulty=game.difficulty,
            config=ConfigOut.from_config(game.config),
            history=[GuessEntryOut.from_record(r) for r in game.history],
            computer_history=[GuessEntryOut.from_record(r) for r in game.computer_history],
            used_digits=game.used_digits,
            elapsed_seconds=seconds,
            elapsed=format_elapsed(seconds),
            secret=game.secret if game.status != "in_progress" else None,
        )

# 6. Result of a guess (yours or the computer's)
class GuessResponse(BaseModel):
    status: Literal["in_progress", "won", "lost"] = Field(..., description="Current state of the game")
    feedback: Optional[GuessEntryOut] = Field(None, description="Feedback from the latest guess")
    secret: Optional[str] = Field(None, description="The secret code (only revealed if game is over)")
    note: Optional[str] = Field(None, description="Extra note (ex. 'Game won. No more guesses allowed.')")

class ComputerGuessResponse(GuessResponse):
    remaining_candidates: int = Field(..., description="Codes the computer still considers possible")

# 7. Scoreboard
class StatsOut(BaseModel):
    games_started: int = Field(..., description="Total games started this session")
    games_won: int = Field(..., description="Total games won this session")
    games_lost: int = Field(..., description="Total games lost this session")

    current_streak: int = Field(..., description="Current consecutive wins")
    best_streak: int = Field(..., description="Best consecutive wins")

    average_guesses_to_win: Optional[float] = Field(
        None, description="Average number of guesses used in wins"
    )
    fastest_win_guesses: Optional[int] = Field(
        None, description="Fewest guesses taken to win a game"
    )

    easy_started: int = Field(..., description="Games started on Easy difficulty")
    medium_started: int = Field(..., description="Games started on Medium difficulty")
    hard_started: int = Field(..., description="Games started on Hard difficulty")

    easy_won: int = Field(..., description="Games won on Easy difficulty")
    medium_won: int = Field(..., description="Games won on Medium difficulty")
    hard_won: int = Field(..., description="Games won on Hard difficulty")

    @classmethod
    def from_stats(cls, stats: Stats) -> "StatsOut":
        return cls(
            games_started=stats.games_started,
            games_won=stats.games_won,
            games_lost=stats.games_lost,
            current_streak=stats.current_streak,
            best_streak=stats.best_streak,
            average_guesses_to_win=stats.average_guesses_to_win,
            fastest_win_guesses=stats.fastest_win_guesses,
            easy_started=stats.easy_started,
            medium_started=stats.medium_started,
            hard_started=stats.hard_started,
            easy_won=stats.easy_won,
            medium_won=stats.medium_won,
            hard_won=stats.hard_won,
        )
