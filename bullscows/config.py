"""
Game configuration (the ruleset for one game) and the defaults read from env.

- GameConfig is immutable and checked at construction time.
- load_default_config() reads BULLSCOWS_* vars (from the environment or a local .env).

A bad length passed straight to GameConfig is a programming error and raises.
A bad value in the environment is a deployment mistake: we log it and keep the default.
"""

import logging
import os
from dataclasses import dataclass

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

# dev convenience; in prod the platform injects env vars
load_dotenv()

MIN_LENGTH = 3
MAX_LENGTH = 6

DEFAULT_LENGTH = 4
DEFAULT_ALLOW_REPEATS = False
DEFAULT_ALLOW_LEADING_ZERO = False


class ConfigurationError(ValueError):
    """Raised when a GameConfig is built with a length outside [3, 6]."""


@dataclass(frozen=True)
class GameConfig:
    length: int = DEFAULT_LENGTH
    allow_repeats: bool = DEFAULT_ALLOW_REPEATS
    allow_leading_zero: bool = DEFAULT_ALLOW_LEADING_ZERO

    def __post_init__(self) -> None:
        if not isinstance(self.length, int) or isinstance(self.length, bool):
            raise ConfigurationError(f"length must be an int, got {self.length!r}")
        if self.length < MIN_LENGTH or self.length > MAX_LENGTH:
            raise ConfigurationError(
                f"length must be between {MIN_LENGTH} and {MAX_LENGTH}, got {self.length}"
            )


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    value = raw.strip().lower()
    if value in ("1", "true", "yes", "on"):
        return True
    if value in ("0", "false", "no", "off"):
        return False
    logger.warning("Ignoring %s=%r (not a boolean); using %s", name, raw, default)
    return default


def _env_length(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning("Ignoring %s=%r (not an integer); using %d", name, raw, default)
        return default
    if value < MIN_LENGTH or value > MAX_LENGTH:
        logger.warning("Ignoring %s=%d (outside %d..%d); using %d",
                       name, value, MIN_LENGTH, MAX_LENGTH, default)
        return default
    return value


def load_default_config() -> GameConfig:
    """Default ruleset for new games, read fresh from the environment each call."""
    return GameConfig(
        length=_env_length("BULLSCOWS_LENGTH", DEFAULT_LENGTH),
        allow_repeats=_env_bool("BULLSCOWS_ALLOW_REPEATS", DEFAULT_ALLOW_REPEATS),
        allow_leading_zero=_env_bool("BULLSCOWS_ALLOW_LEADING_ZERO", DEFAULT_ALLOW_LEADING_ZERO),
    )


def factory_defaults() -> GameConfig:
    """The built-in ruleset, ignoring the environment (the "reset to defaults" button)."""
    return GameConfig()
