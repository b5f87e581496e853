"""
SM-2 spaced repetition adapted for content memory.

Recall quality scale:
    5: memory used and the content performed exceptionally
    4: memory used and the content performed well
    3: memory used and the content performed on average
    2: memory used but the content underperformed
    1: memory accessed but not used
    0: memory decayed / blackout

`sm2_next` is the only transition between retention states. It never mutates
its input; callers persist the returned state and must serialise updates to
the same memory themselves.
"""

import logging
import math
from datetime import datetime, timedelta, timezone
from enum import IntEnum
from typing import Iterable, List, Optional

from ..core.exceptions import InvalidArgumentError
from ..core.models import ReviewCandidate, ReviewQueueItem, RetentionState
from .decay import DEFAULT_RECALL_BOOST_FACTOR, as_utc, days_since

logger = logging.getLogger(__name__)

MIN_EASE_FACTOR = 1.3
MAX_EASE_FACTOR = 5.0
MIN_STRENGTH = 0.0
MAX_STRENGTH = 1.0

FIRST_INTERVAL_DAYS = 1
SECOND_INTERVAL_DAYS = 6
SUCCESS_THRESHOLD = 3

DEFAULT_REVIEW_QUEUE_LIMIT = 20

# Fraction of the remaining headroom (1 - strength) gained on a good recall
STRENGTH_GAIN = {3: 0.05, 4: 0.15, 5: 0.25}
# Multiplier applied to strength on a poor recall
STRENGTH_RETENTION = {0: 0.7, 1: 0.7, 2: 0.9}


class RecallQuality(IntEnum):
    BLACKOUT = 0
    ACCESSED_NOT_USED = 1
    UNDERPERFORMED = 2
    AVERAGE = 3
    GOOD = 4
    EXCEPTIONAL = 5


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def validate_quality(quality) -> int:
    """Return `quality` as an int, or raise if it is not one of 0..5"""
    if isinstance(quality, bool) or not isinstance(quality, int) or not 0 <= quality <= 5:
        raise InvalidArgumentError("quality", quality, "an integer from 0 to 5")
    return int(quality)


def next_strength(strength: float, quality: int) -> float:
    if quality >= SUCCESS_THRESHOLD:
        updated = strength + (1 - strength) * STRENGTH_GAIN[quality]
    else:
        updated = strength * STRENGTH_RETENTION[quality]
    return _clamp(updated, MIN_STRENGTH, MAX_STRENGTH)


def next_ease_factor(ease_factor: float, quality: int) -> float:
    """Standard SM-2 ease update, clamped to [1.3, 5.0]"""
    miss = 5 - quality
    updated = ease_factor + (0.1 - miss * (0.08 + miss * 0.02))
    return _clamp(updated, MIN_EASE_FACTOR, MAX_EASE_FACTOR)


def sm2_next(state: RetentionState, quality: int) -> RetentionState:
    """
    Advance a retention state by one observed recall.

    Args:
        state: Current retention state snapshot
        quality: Recall quality, 0 (blackout) to 5 (exceptional)

    Returns:
        A new RetentionState

    Raises:
        InvalidArgumentError: if quality is not an integer from 0 to 5

    Interval schedule: a failed recall (quality < 3) resets to 1 day and
    clears the success streak; successful recalls give 1 day, then 6 days,
    then previous interval * new ease factor.
    """
    q = validate_quality(quality)

    strength = next_strength(state.strength, q)
    ease_factor = next_ease_factor(state.ease_factor, q)

    if q < SUCCESS_THRESHOLD:
        interval = FIRST_INTERVAL_DAYS
        repetitions = 0
    else:
        if state.repetitions == 0:
            interval = FIRST_INTERVAL_DAYS
        elif state.repetitions == 1:
            interval = SECOND_INTERVAL_DAYS
        else:
            interval = max(1, _round_half_up(state.interval * ease_factor))
        repetitions = state.repetitions + 1

    return RetentionState(
        ease_factor=round(ease_factor, 2),
        interval=interval,
        strength=round(strength, 4),
        recall_count=state.recall_count + 1,
        repetitions=repetitions,
    )


def boost_strength(strength: float, boost_factor: float = DEFAULT_RECALL_BOOST_FACTOR) -> float:
    """
    Implicit strength boost for a memory that was used during generation.

    Raises:
        InvalidArgumentError: if boost_factor is not positive
    """
    if boost_factor <= 0:
        raise InvalidArgumentError("boost_factor", boost_factor, "a positive number")
    return round(min(MAX_STRENGTH, strength * boost_factor), 4)


def next_review_at(state: RetentionState, reviewed_at: Optional[datetime] = None) -> datetime:
    """When a memory is next due, `state.interval` days after this review"""
    if reviewed_at is None:
        reviewed_at = datetime.now(timezone.utc)
    return reviewed_at + timedelta(days=state.interval)


def build_review_queue(
    candidates: Iterable[ReviewCandidate],
    now: Optional[datetime] = None,
    limit: int = DEFAULT_REVIEW_QUEUE_LIMIT,
) -> List[ReviewQueueItem]:
    """
    Memories due for review, most overdue first.

    Args:
        candidates: Memory rows with scheduling fields
        now: Reference time (default: now UTC)
        limit: Maximum number of items returned

    Returns:
        Items whose next_review_at is set and not in the future, sorted by
        next_review_at ascending

    Raises:
        InvalidArgumentError: if limit is not positive
    """
    if limit <= 0:
        raise InvalidArgumentError("limit", limit, "a positive integer")
    now = as_utc(now) if now is not None else datetime.now(timezone.utc)

    due = [
        candidate for candidate in candidates
        if candidate.next_review_at is not None
        and as_utc(candidate.next_review_at) <= now
    ]
    due.sort(key=lambda candidate: as_utc(candidate.next_review_at))

    items = []
    for candidate in due[:limit]:
        reference = candidate.last_recalled_at or candidate.next_review_at
        items.append(ReviewQueueItem(
            id=candidate.id,
            summary=candidate.summary,
            strength=candidate.strength,
            days_since_review=round(days_since(reference, now), 2),
            next_review_at=candidate.next_review_at,
        ))

    logger.debug(f"Review queue: {len(items)} of {len(due)} due memories returned")
    return items

