'''
Bulls & Cows API

Endpoints:
POST /games                       -> start a game (optionally with your own secret)
GET  /games/{id}                  -> read state & history
POST /games/{id}/guess            -> submit a guess
POST /games/{id}/computer-guess   -> let the computer guess your secret
POST /games/{id}/forfeit          -> give up and reveal the secret

Extras:
POST /validate                    -> check a code against a ruleset
GET  /settings/defaults           -> default ruleset (from env / .env)
GET  /stats                       -> scoreboard
POST /stats/reset                 -> reset scoreboard
GET  /health                      -> liveness

Games live in memory (GameStore); restarting the server forgets them.
'''

import logging
import os

from fastapi import FastAPI, HTTPException, Depends
from fastapi.middleware.cors import CORSMiddleware

from .config import factory_defaults, load_default_config
from .engine import validate_guess
from .models import Game
from .store import GameStore, GameStateError
from .schemas import (
    ComputerGuessResponse,
    ConfigOut,
    GameState,
    GuessEntryOut,
    GuessRequest,
    GuessResponse,
    NewGameRequest,
    StatsOut,
    ValidateRequest,
    ValidateResponse,
)

logging.basicConfig(
    level=os.getenv("BULLSCOWS_LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)-8s %(name)s - %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="Bulls & Cows API", version="1.0.0")

# Allow everything in dev so the docs and front-end work easily
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"]
)

_store = GameStore()

@app.on_event("startup")
def _log_ready():
    logger.info("Bulls & Cows API ready (defaults: %s)", load_default_config())

# Routes ask for the store through Depends so tests can swap in a fresh one
def get_store() -> GameStore:
    return _store

def _get_game_or_404(store: GameStore, game_id: str) -> Game:
    game = store.get(game_id)
    if not game:
        raise HTTPException(status_code=404, detail="Game not found")
    return game

def _finished_note(game: Game):
    if game.status == "in_progress":
        return None
    return f"Game {game.status}. No more guesses allowed."

# ---------------- Routes ----------------

@app.post("/games", response_model=GameState, summary="Start a new game")
def start_game(
    payload: NewGameRequest,
    store: GameStore = Depends(get_store),
) -> GameState:
    try:
        game = store.create(
            payload.to_config(),
            difficulty=payload.difficulty,
            player_secret=payload.player_secret,
        )
    except ValueError as ve:
        # bad player secret (or a config pydantic let through)
        raise HTTPException(status_code=400, detail=str(ve))
    return GameState.from_game(game)

@app.get("/games/{game_id}", response_model=GameState, summary="Get current game state")
def get_game(
    game_id: str,
    store: GameStore = Depends(get_store),
) -> GameState:
    return GameState.from_game(_get_game_or_404(store, game_id))

@app.post("/games/{game_id}/guess", response_model=GuessResponse, summary="Submit a guess")
def submit_guess(
    game_id: str,
    payload: GuessRequest,
    store: GameStore = Depends(get_store),
) -> GuessResponse:
    # store.guess() validates against the game's rules & updates history/status
    try:
        updated = store.guess(game_id, payload.guess)
    except ValueError as ve:
        raise HTTPException(status_code=400, detail=str(ve))
    if not updated:
        raise HTTPException(status_code=404, detail="Game not found")

    feedback = GuessEntryOut.from_record(updated.history[-1]) if updated.history else None

    return GuessResponse(
        status=updated.status,
        feedback=feedback,
        secret=updated.secret if updated.status != "in_progress" else None,
        note=_finished_note(updated),
    )

@app.post("/games/{game_id}/computer-guess", response_model=ComputerGuessResponse,
          summary="Let the computer guess your secret")
def computer_guess(
    game_id: str,
    store: GameStore = Depends(get_store),
) -> ComputerGuessResponse:
    try:
        updated = store.computer_guess(game_id)
    except GameStateError as err:
        raise HTTPException(status_code=409, detail=str(err))
    if not updated:
        raise HTTPException(status_code=404, detail="Game not found")

    return ComputerGuessResponse(
        status=updated.status,
        feedback=GuessEntryOut.from_record(updated.computer_history[-1]),
        secret=updated.secret if updated.status != "in_progress" else None,
        note=_finished_note(updated),
        remaining_candidates=updated.opponent.get_remaining_candidates(),
    )

@app.post("/games/{game_id}/forfeit", response_model=GameState, summary="Give up and reveal the secret")
def forfeit_game(
    game_id: str,
    store: GameStore = Depends(get_store),
) -> GameState:
    updated = store.forfeit(game_id)
    if not updated:
        raise HTTPException(status_code=404, detail="Game not found")
    return GameState.from_game(updated)

@app.post("/validate", response_model=ValidateResponse, summary="Check a code against a ruleset")
def validate(payload: ValidateRequest) -> ValidateResponse:
    outcome = validate_guess(payload.guess, payload.to_config())
    return ValidateResponse(outcome=outcome.value, valid=outcome.is_valid, message=outcome.message)

@app.get("/settings/defaults", response_model=ConfigOut, summary="Default ruleset for new games")
def default_settings(factory: bool = False) -> ConfigOut:
    """?factory=true ignores BULLSCOWS_* overrides (the "reset to defaults" ruleset)."""
    config = factory_defaults() if factory else load_default_config()
    return ConfigOut.from_config(config)

@app.get("/stats", response_model=StatsOut, summary="Get scoreboard")
def get_stats(store: GameStore = Depends(get_store)) -> StatsOut:
    return StatsOut.from_stats(store.get_stats())

@app.post("/stats/reset", summary="Reset the scoreboard")
def reset_stats(store: GameStore = Depends(get_store)) -> dict:
    store.reset_stats()
    return {"message": "Stats reset."}

@app.get("/health")
def health() -> dict:
    return {"status": "ok"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "bullscows.main:app",
        host=os.getenv("BULLSCOWS_HOST", "127.0.0.1"),
        port=int(os.getenv("BULLSCOWS_PORT", "8000")),
    )
