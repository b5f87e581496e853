"""
Shared core foundation for the cognitive memory engine.

Components:
- models: Memory records, retention state and ranking results
- exceptions: Boundary validation errors
- engine: MemoryEngine facade (import from cognitive_memory.core.engine)
"""

from .models import (
    EpisodicEntry,
    PrecomputedEpisodicEntry,
    EpisodicRecord,
    SemanticEntry,
    ProceduralEntry,
    WorkingMemoryEntry,
    MemoryContext,
    RetentionState,
    LayerWeights,
    ReviewCandidate,
    ReviewQueueItem,
    ScoredEntry,
    RankedMemories,
    episodic_entry_from_dict,
)

from .exceptions import MemoryEngineError, InvalidArgumentError

__all__ = [
    # Data models
    "EpisodicEntry",
    "PrecomputedEpisodicEntry",
    "EpisodicRecord",
    "SemanticEntry",
    "ProceduralEntry",
    "WorkingMemoryEntry",
    "MemoryContext",
    "RetentionState",
    "LayerWeights",
    "ReviewCandidate",
    "ReviewQueueItem",
    "ScoredEntry",
    "RankedMemories",
    "episodic_entry_from_dict",

    # Errors
    "MemoryEngineError",
    "InvalidArgumentError"
]
