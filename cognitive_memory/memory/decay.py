"""
Exponential forgetting-curve decay for memory strength.

Weight of a memory after t days:

    strength * importance * exp(-ln(2) / half_life * t)

so the weight halves every `half_life` days. Half-lives are configurable per
event type. Pure functions only.
"""

import math
from datetime import datetime, timezone
from typing import Dict, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

SECONDS_PER_DAY = 86400.0
LN2 = math.log(2)

DEFAULT_HALF_LIFE_DAYS = 30.0
DEFAULT_MIN_STRENGTH = 0.05
DEFAULT_RECALL_BOOST_FACTOR = 1.2

# Shorter half-life = faster decay. Calibrated for social media content.
EVENT_HALF_LIVES: Dict[str, float] = {
    "post_success": 30,
    "post_failure": 14,
    "viral_moment": 60,
    "audience_shift": 45,
    "goal_milestone": 90,
    "strategy_change": 21,
    "competitor_insight": 30,
    "trend_detected": 14,
    "budget_exhausted": 7,
    "content_gap_found": 21,
}


class DecayConfig(BaseModel):
    """Resolved decay parameters for one kind of memory"""
    model_config = ConfigDict(frozen=True)

    half_life_days: float = Field(default=DEFAULT_HALF_LIFE_DAYS, gt=0.0)
    min_strength: float = Field(default=DEFAULT_MIN_STRENGTH, ge=0.0, le=1.0)
    recall_boost_factor: float = Field(default=DEFAULT_RECALL_BOOST_FACTOR, gt=0.0)


Timestamp = Union[datetime, str]


def as_utc(value: datetime) -> datetime:
    # Naive datetimes are assumed to be UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def days_since(timestamp: Timestamp, now: Optional[datetime] = None) -> float:
    """
    Fractional days elapsed since `timestamp`.

    Args:
        timestamp: datetime or ISO-8601 string
        now: Reference time (default: now UTC)

    Returns:
        Days elapsed, never negative. Unparseable strings count as 0.
    """
    if isinstance(timestamp, str):
        try:
            timestamp = datetime.fromisoformat(timestamp.replace("Z", "+00:00"))
        except ValueError:
            return 0.0

    reference = as_utc(now) if now is not None else datetime.now(timezone.utc)
    elapsed = (reference - as_utc(timestamp)).total_seconds() / SECONDS_PER_DAY
    return max(0.0, elapsed)


def calculate_decay_weight(
    strength: float,
    importance: float,
    half_life_days: float,
    days_since_created: float,
) -> float:
    """
    Decayed weight of a memory.

    At t = 0 the weight is strength * importance; at t = half_life it is half
    of that.
    """
    if strength <= 0 or importance <= 0:
        return 0.0
    if days_since_created <= 0:
        return strength * importance
    if half_life_days <= 0:
        return 0.0

    decay_factor = math.exp((-LN2 / half_life_days) * days_since_created)
    return strength * importance * decay_factor


def calculate_composite_score(
    strength: float,
    importance: float,
    half_life_days: float,
    days_since_created: float,
    similarity: float = 1.0,
    recency_multiplier: float = 1.0,
) -> float:
    """
    Composite score = similarity * decay weight * recency multiplier.

    `similarity` comes from an upstream vector search when one was run;
    without one it stays at 1.0.
    """
    decay_weight = calculate_decay_weight(
        strength=strength,
        importance=importance,
        half_life_days=half_life_days,
        days_since_created=days_since_created,
    )
    return similarity * decay_weight * recency_multiplier


def resolve_decay_config(
    event_type: str,
    half_life_days: Optional[float] = None,
    min_strength: Optional[float] = None,
    recall_boost_factor: Optional[float] = None,
    default_half_life_days: float = DEFAULT_HALF_LIFE_DAYS,
) -> DecayConfig:
    """
    Decay parameters for an event type, with optional overrides

    Event types missing from EVENT_HALF_LIVES use `default_half_life_days`.
    """
    base_half_life = EVENT_HALF_LIVES.get(event_type, default_half_life_days)

    return DecayConfig(
        half_life_days=half_life_days if half_life_days is not None else base_half_life,
        min_strength=min_strength if min_strength is not None else DEFAULT_MIN_STRENGTH,
        recall_boost_factor=(
            recall_boost_factor if recall_boost_factor is not None else DEFAULT_RECALL_BOOST_FACTOR
        ),
    )


def half_life_to_decay_rate(half_life_days: float) -> float:
    """Convert a half-life to the rate used by `importance * exp(-rate * days)`"""
    if half_life_days <= 0:
        return 1.0
    return LN2 / half_life_days


def decay_rate_to_half_life(decay_rate: float) -> float:
    """Inverse of `half_life_to_decay_rate`; a non-positive rate never decays"""
    if decay_rate <= 0:
        return math.inf
    return LN2 / decay_rate


def estimate_memory_lifespan(
    strength: float,
    importance: float,
    half_life_days: float,
    min_threshold: float = DEFAULT_MIN_STRENGTH,
) -> float:
    """
    Days until a memory's decayed weight falls to `min_threshold`.

    Solves strength * importance * exp(-ln2 / h * t) = min_threshold for t.
    """
    initial_weight = strength * importance
    if initial_weight <= 0 or initial_weight <= min_threshold:
        return 0.0
    if half_life_days <= 0:
        return 0.0
    if min_threshold <= 0:
        return math.inf

    ratio = min_threshold / initial_weight
    return (-half_life_days * math.log(ratio)) / LN2
