"""
Memory engine facade.

Bundles configuration, logging and the pure scoring, ranking and retention
operations behind one object for the prompt-assembly and persistence
collaborators. Holds no mutable state, so one instance can be shared freely.
"""

import logging
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional

from ..config import ConfigManager, get_config
from ..memory.decay import DecayConfig, estimate_memory_lifespan, resolve_decay_config
from ..memory.ranking import rank_memories
from ..memory.scoring import (
    cross_layer_score,
    score_episodic_entry,
    score_procedural_entry,
    score_semantic_entry,
)
from ..memory.spaced_repetition import (
    boost_strength,
    build_review_queue,
    sm2_next,
)
from .models import (
    EpisodicEntry,
    LayerWeights,
    MemoryContext,
    RankedMemories,
    RetentionState,
    ReviewCandidate,
    ReviewQueueItem,
)


class MemoryEngine:
    """Relevance ranking and retention updates for one tenant's memories"""

    def __init__(self, config: Optional[ConfigManager] = None):
        self.config = config or get_config()
        self.weights = LayerWeights(**self.config.layer_weights())
        self.logger = logging.getLogger(__name__)

    def rank(
        self,
        context: MemoryContext,
        top_k: Optional[int] = None,
        now: Optional[datetime] = None,
    ) -> RankedMemories:
        """Select the most relevant memories of a context across layers"""
        if top_k is None:
            top_k = self.config.scoring.default_top_k

        ranked = rank_memories(
            episodic=context.episodic,
            semantic=context.semantic,
            procedural=context.procedural,
            top_k=top_k,
            now=now,
            weights=self.weights,
            working=context.working,
        )
        self.logger.info(
            f"Ranked {ranked.total} of "
            f"{len(context.episodic) + len(context.semantic) + len(context.procedural)} memories "
            f"(episodic={len(ranked.ranked_episodic)}, semantic={len(ranked.ranked_semantic)}, "
            f"procedural={len(ranked.ranked_procedural)}, working={len(ranked.working)})"
        )
        return ranked

    def score_context(self, context: MemoryContext, now: Optional[datetime] = None) -> float:
        """
        One relevance number for a whole context.

        Episodic contributes every entry's score (averaged downstream); the
        semantic and procedural layers are represented by their best entry.
        """
        episodic_scores = [score_episodic_entry(entry, now) for entry in context.episodic]
        semantic_score = max(
            (score_semantic_entry(entry, now) for entry in context.semantic), default=None
        )
        procedural_score = max(
            (score_procedural_entry(entry) for entry in context.procedural), default=None
        )

        score = cross_layer_score(
            episodic_scores=episodic_scores,
            semantic_score=semantic_score,
            procedural_score=procedural_score,
            weights=self.weights,
        )
        self.logger.debug(f"Cross-layer context score: {score:.4f}")
        return score

    def reinforce(self, state: RetentionState, quality: int) -> RetentionState:
        """Apply one observed recall quality to a retention state"""
        try:
            next_state = sm2_next(state, quality)
        except ValueError as e:
            self.logger.warning(f"Rejected reinforcement: {e}")
            raise

        self.logger.debug(
            f"Reinforced memory (quality={quality}): interval {state.interval} -> {next_state.interval}, "
            f"strength {state.strength:.4f} -> {next_state.strength:.4f}, "
            f"ease {state.ease_factor:.2f} -> {next_state.ease_factor:.2f}"
        )
        return next_state

    def boost(self, strength: float) -> float:
        """Implicit access boost with the configured factor"""
        return boost_strength(strength, self.config.retention.recall_boost_factor)

    def review_queue(
        self,
        candidates: Iterable[ReviewCandidate],
        now: Optional[datetime] = None,
        limit: Optional[int] = None,
    ) -> List[ReviewQueueItem]:
        """Memories due for review, most overdue first"""
        if limit is None:
            limit = self.config.retention.review_queue_limit
        return build_review_queue(candidates, now=now, limit=limit)

    def decay_config(self, event_type: str) -> DecayConfig:
        """Decay parameters for an event type under the configured defaults"""
        return resolve_decay_config(
            event_type,
            min_strength=self.config.retention.min_strength,
            recall_boost_factor=self.config.retention.recall_boost_factor,
            default_half_life_days=self.config.scoring.default_half_life_days,
        )

    def estimate_lifespan(self, entry: EpisodicEntry) -> float:
        """
        Days until an episodic memory decays to the configured min_strength.

        An entry without an explicit half-life uses its event type's
        half-life, falling back to the configured default.
        """
        decay = self.decay_config(entry.event_type)
        if "half_life_days" in entry.model_fields_set:
            half_life = entry.half_life_days
        else:
            half_life = decay.half_life_days

        return estimate_memory_lifespan(
            strength=entry.strength,
            importance=entry.importance,
            half_life_days=half_life,
            min_threshold=decay.min_strength,
        )

    def get_stats(self) -> Dict[str, Any]:
        """Engine settings for operator visibility"""
        return {
            "layer_weights": self.weights.model_dump(),
            "default_top_k": self.config.scoring.default_top_k,
            "default_half_life_days": self.config.scoring.default_half_life_days,
            "recall_boost_factor": self.config.retention.recall_boost_factor,
            "review_queue_limit": self.config.retention.review_queue_limit,
            "min_strength": self.config.retention.min_strength,
        }
