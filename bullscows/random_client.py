"""
- HTTP call with clear fallback
Get a seed for a game's random generator from random.org. If anything goes
wrong (no internet, timeout, bad response), fall back to a local secure
random number so the game still works.

Set BULLSCOWS_RANDOM_SOURCE=local to skip the network entirely.
"""

import logging
import os
import random
from secrets import randbits

import requests

logger = logging.getLogger(__name__)

RANDOM_URL = "https://www.random.org/integers/"
SEED_MAX = 1_000_000_000  # random.org's upper bound for a single integer


def _local_seed() -> int:
    return randbits(64)


def fetch_seed() -> int:
    if os.getenv("BULLSCOWS_RANDOM_SOURCE", "random.org").lower() == "local":
        return _local_seed()

    params = {
        "num": 1,
        "min": 0,
        "max": SEED_MAX,
        "col": 1,
        "base": 10,
        "format": "plain",
        "rnd": "new",
    }

    # keep network quick; if it takes too long, we just fall back
    timeout_seconds = 3.0

    try:
        response = requests.get(RANDOM_URL, params=params, timeout=timeout_seconds)
        response.raise_for_status()

        # The body looks like: "48213907\n"
        text = response.text.strip()
        value = int(text)
        if value < 0 or value > SEED_MAX:
            raise ValueError(f"random.org number out of range 0..{SEED_MAX}.")
        return value

    except (requests.RequestException, ValueError) as exc:
        logger.warning("random.org unavailable (%s); using local seed", exc)
        return _local_seed()


def new_rng() -> random.Random:
    """A fresh generator for one game, so games never share random state."""
    return random.Random(fetch_seed())
