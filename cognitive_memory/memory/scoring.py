"""
Relevance scoring for the episodic, semantic and procedural memory layers.

Scores are unitless and non-negative. Each layer has its own scorer:

- episodic: strength * importance * half-life decay * recency bias
- semantic: confidence shrunk toward a neutral prior, times recency bias
- procedural: prior effectiveness blended with a Laplace-smoothed success rate

`cross_layer_score` folds the per-layer values into one number using
`DEFAULT_LAYER_WEIGHTS`, renormalised over the layers actually present.
"""

from datetime import datetime
from typing import Optional, Sequence

from ..core.models import (
    EpisodicRecord,
    LayerWeights,
    PrecomputedEpisodicEntry,
    ProceduralEntry,
    SemanticEntry,
)
from .decay import Timestamp, calculate_composite_score, days_since


DEFAULT_LAYER_WEIGHTS = LayerWeights(
    episodic=0.35,
    semantic=0.30,
    procedural=0.25,
    working=0.10,
)

# Bayesian shrinkage for semantic confidence: three pseudo-observations at 0.5
SEMANTIC_PRIOR_MEAN = 0.5
SEMANTIC_PRIOR_WEIGHT = 3

# Applications after which a strategy's own success rate is fully trusted
PROCEDURAL_FULL_CONFIDENCE_APPLICATIONS = 10

# (max age in days, multiplier); anything older gets 1.0
RECENCY_BUCKETS = (
    (1, 2.0),
    (3, 1.5),
    (7, 1.2),
    (14, 1.1),
)


def recency_bias(timestamp: Optional[Timestamp], now: Optional[datetime] = None) -> float:
    """
    Boost multiplier for recently created or updated memories.

    < 1 day: 2.0, 1-3 days: 1.5, 3-7 days: 1.2, 7-14 days: 1.1, older: 1.0.
    A missing timestamp gets 1.0.
    """
    if timestamp is None:
        return 1.0

    age_days = days_since(timestamp, now)
    for max_age, multiplier in RECENCY_BUCKETS:
        if age_days < max_age:
            return multiplier
    return 1.0


def score_episodic_entry(entry: EpisodicRecord, now: Optional[datetime] = None) -> float:
    """Score an episodic memory; precomputed scores are returned verbatim"""
    if isinstance(entry, PrecomputedEpisodicEntry):
        return entry.composite_score

    if entry.created_at is None:
        age_days = 0.0
        bias = 1.0
    else:
        age_days = days_since(entry.created_at, now)
        bias = recency_bias(entry.created_at, now)

    return calculate_composite_score(
        strength=entry.strength,
        importance=entry.importance,
        half_life_days=entry.half_life_days,
        days_since_created=age_days,
        recency_multiplier=bias,
    )


def score_semantic_entry(entry: SemanticEntry, now: Optional[datetime] = None) -> float:
    """
    Score a semantic pattern.

    Confidence backed by few observations is pulled toward 0.5; with many
    observations it converges to the raw confidence:

        (0.5 * 3 + confidence * n) / (3 + n)
    """
    effective_confidence = (
        SEMANTIC_PRIOR_MEAN * SEMANTIC_PRIOR_WEIGHT + entry.confidence * entry.sample_size
    ) / (SEMANTIC_PRIOR_WEIGHT + entry.sample_size)

    return effective_confidence * recency_bias(entry.updated_at, now)


def score_procedural_entry(entry: ProceduralEntry) -> float:
    """
    Score a procedural strategy.

    More applications shift trust from the static `effectiveness` prior to the
    observed success rate. Not time-decayed.
    """
    success_rate = (entry.times_succeeded + 1) / (entry.times_applied + 2)
    data_weight = min(1.0, entry.times_applied / PROCEDURAL_FULL_CONFIDENCE_APPLICATIONS)
    return (1 - data_weight) * entry.effectiveness + data_weight * success_rate


def cross_layer_score(
    episodic_scores: Sequence[float],
    semantic_score: Optional[float],
    procedural_score: Optional[float],
    weights: LayerWeights = DEFAULT_LAYER_WEIGHTS,
) -> float:
    """
    Combine per-layer scores into one relevance number.

    Episodic contributes the mean of its scores, semantic and procedural their
    single value. An empty episodic list or a None value means the layer is
    absent; weights are renormalised over the layers that are present. No
    layer present gives 0.
    """
    contributions = {}
    if len(episodic_scores) > 0:
        contributions["episodic"] = sum(episodic_scores) / len(episodic_scores)
    if semantic_score is not None:
        contributions["semantic"] = semantic_score
    if procedural_score is not None:
        contributions["procedural"] = procedural_score

    if not contributions:
        return 0.0

    normalized = weights.normalized_over(contributions)
    score = sum(value * normalized[layer] for layer, value in contributions.items())
    return round(score, 4)
