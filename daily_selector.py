"""
Deterministic daily content selection.

Everything here is a pure function of the calendar date and a static pool, so
the scheduler, the manual endpoints and the seeding script all recompute the
same selection for the same day without sharing any state.
"""

import datetime
import math
from typing import Sequence, Tuple

from content_pool import BROADCAST_TIPS, CHALLENGES, TIPS
from exceptions import ConfigurationError, MalformedInputError
from models import ContentEntry, SelectionResult
from timezone_utils import to_date_string

DAILY_CHALLENGE_COUNT = 2

MODE_SHUFFLE = "shuffle"
MODE_INDEX = "index"


def date_seed(day: datetime.date) -> int:
    """YYYYMMDD as an integer, e.g. 2025-11-09 -> 20251109."""
    return day.year * 10000 + day.month * 100 + day.day


def pseudo_random(x: int) -> float:
    """
    Maps an integer to [0, 1) with frac(sin(x) * 10000).

    Not a good generator, but it is the one every stored selection was made
    with, so it must stay bit-for-bit identical.
    """
    value = math.sin(x) * 10000
    return value - math.floor(value)


def _require_pool(pool: Sequence[ContentEntry]):
    if not pool:
        raise ConfigurationError("Cannot select from an empty pool.")


def select_shuffled(day: datetime.date, pool: Sequence[ContentEntry], count: int) -> Tuple[ContentEntry, ...]:
    """
    Seeded Fisher-Yates shuffle of the pool, returning the first `count` entries.

    Returns min(count, len(pool)) distinct entries; asking for more than the
    pool holds returns the whole shuffled pool.
    """
    _require_pool(pool)
    if count < 0:
        raise MalformedInputError(f"Selection count must not be negative, got {count}.")

    seed = date_seed(day)
    shuffled = list(pool)
    for i in range(len(shuffled) - 1, 0, -1):
        j = math.floor(pseudo_random(seed + i) * (i + 1))
        shuffled[i], shuffled[j] = shuffled[j], shuffled[i]
    return tuple(shuffled[:count])


def select_by_index(day: datetime.date, pool: Sequence):
    """Picks pool[seed % len(pool)] with no shuffling."""
    _require_pool(pool)
    return pool[date_seed(day) % len(pool)]


def generate_daily_challenges(day: datetime.date, pool: Sequence[ContentEntry] = CHALLENGES,
                              count: int = DAILY_CHALLENGE_COUNT) -> SelectionResult:
    return SelectionResult(
        date=to_date_string(day),
        mode=MODE_SHUFFLE,
        entries=select_shuffled(day, pool, count),
    )


def generate_daily_tip(day: datetime.date, pool: Sequence[ContentEntry] = TIPS) -> SelectionResult:
    return SelectionResult(
        date=to_date_string(day),
        mode=MODE_INDEX,
        entries=(select_by_index(day, pool),),
    )


def tip_of_the_day(day: datetime.date) -> str:
    """Text of the noon broadcast tip for the given day."""
    return select_by_index(day, BROADCAST_TIPS)
