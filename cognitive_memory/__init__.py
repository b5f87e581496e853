"""
Cognitive memory scoring and retention engine.

Ranks episodic, semantic and procedural memories by relevance at generation
time and evolves each memory's strength with SM-2 spaced repetition.
"""

from .core.engine import MemoryEngine
from .core.models import (
    EpisodicEntry,
    PrecomputedEpisodicEntry,
    SemanticEntry,
    ProceduralEntry,
    WorkingMemoryEntry,
    MemoryContext,
    RetentionState,
    RankedMemories,
)
from .memory import (
    DEFAULT_LAYER_WEIGHTS,
    cross_layer_score,
    rank_memories,
    sm2_next,
)

__version__ = "0.1.0"

__all__ = [
    "MemoryEngine",
    "EpisodicEntry",
    "PrecomputedEpisodicEntry",
    "SemanticEntry",
    "ProceduralEntry",
    "WorkingMemoryEntry",
    "MemoryContext",
    "RetentionState",
    "RankedMemories",
    "DEFAULT_LAYER_WEIGHTS",
    "cross_layer_score",
    "rank_memories",
    "sm2_next",
]
