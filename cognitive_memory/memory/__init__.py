"""
Memory scoring package for the cognitive memory engine

Provides relevance scoring per layer, cross-layer ranking, forgetting-curve
decay and SM-2 spaced repetition. Everything here is a pure function.
"""

from .decay import (
    EVENT_HALF_LIVES,
    DecayConfig,
    calculate_decay_weight,
    calculate_composite_score,
    resolve_decay_config,
    half_life_to_decay_rate,
    decay_rate_to_half_life,
    estimate_memory_lifespan,
    days_since,
)
from .scoring import (
    DEFAULT_LAYER_WEIGHTS,
    recency_bias,
    score_episodic_entry,
    score_semantic_entry,
    score_procedural_entry,
    cross_layer_score,
)
from .ranking import allocate_slots, rank_memories
from .spaced_repetition import (
    RecallQuality,
    sm2_next,
    boost_strength,
    next_review_at,
    build_review_queue,
)

__all__ = [
    'EVENT_HALF_LIVES',
    'DecayConfig',
    'calculate_decay_weight',
    'calculate_composite_score',
    'resolve_decay_config',
    'half_life_to_decay_rate',
    'decay_rate_to_half_life',
    'estimate_memory_lifespan',
    'days_since',
    'DEFAULT_LAYER_WEIGHTS',
    'recency_bias',
    'score_episodic_entry',
    'score_semantic_entry',
    'score_procedural_entry',
    'cross_layer_score',
    'allocate_slots',
    'rank_memories',
    'RecallQuality',
    'sm2_next',
    'boost_strength',
    'next_review_at',
    'build_review_queue'
]
