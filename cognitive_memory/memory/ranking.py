"""
Top-K memory selection across layers.

Every entry is scored by its layer's scorer, each layer is sorted by
descending score, and the K slots are split between layers in proportion to
their weights. Slots a layer cannot fill are handed to layers that still have
unselected entries.
"""

import logging
import math
from datetime import datetime, timezone
from typing import Dict, List, Mapping, Optional, Sequence

from ..core.models import (
    SCORED_LAYERS,
    EpisodicRecord,
    LayerWeights,
    ProceduralEntry,
    RankedMemories,
    ScoredEntry,
    SemanticEntry,
    WorkingMemoryEntry,
)
from .scoring import (
    DEFAULT_LAYER_WEIGHTS,
    score_episodic_entry,
    score_procedural_entry,
    score_semantic_entry,
)

logger = logging.getLogger(__name__)

DEFAULT_TOP_K = 15


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _largest_remainder(total: int, shares: Mapping[str, float]) -> Dict[str, int]:
    """Split `total` integer units by `shares` (summing to 1.0) exactly"""
    quotas = {layer: total * share for layer, share in shares.items()}
    grants = {layer: int(math.floor(quota)) for layer, quota in quotas.items()}
    leftover = total - sum(grants.values())

    # Largest fractional part first, heavier layer on ties
    order = sorted(
        shares,
        key=lambda layer: (quotas[layer] - grants[layer], shares[layer]),
        reverse=True,
    )
    for layer in order[:leftover]:
        grants[layer] += 1
    return grants


def allocate_slots(
    weights: LayerWeights,
    available: Mapping[str, int],
    top_k: int,
) -> Dict[str, int]:
    """
    Decide how many entries each scored layer contributes to the top K.

    Args:
        weights: Cross-layer weights
        available: Number of entries per layer name
        top_k: Total number of slots

    Returns:
        Slot count per scored layer. A layer never gets more slots than it has
        entries and the total never exceeds `top_k`.

    Each layer with entries starts from round(top_k * w / sum of present
    weights). Shortfall is then redistributed to layers with spare entries in
    proportion to their weights. Every round either places the whole
    shortfall or exhausts at least one layer, so one round per layer is
    enough to reach the fixed point.
    """
    slots = {layer: 0 for layer in SCORED_LAYERS}
    present = [layer for layer in SCORED_LAYERS if available.get(layer, 0) > 0]
    if top_k <= 0 or not present:
        return slots

    shares = weights.normalized_over(present)
    ideal = {layer: _round_half_up(top_k * shares[layer]) for layer in present}

    # Rounding up several layers can overshoot top_k; trim the lightest first
    excess = sum(ideal.values()) - top_k
    for layer in sorted(present, key=lambda name: shares[name]):
        if excess <= 0:
            break
        cut = min(excess, ideal[layer])
        ideal[layer] -= cut
        excess -= cut

    for layer in present:
        slots[layer] = min(ideal[layer], available[layer])

    for _ in range(len(present)):
        shortfall = top_k - sum(slots.values())
        spare = {
            layer: available[layer] - slots[layer]
            for layer in present
            if available[layer] > slots[layer]
        }
        if shortfall <= 0 or not spare:
            break

        grants = _largest_remainder(shortfall, weights.normalized_over(spare))
        for layer, granted in grants.items():
            slots[layer] += min(granted, spare[layer])

    return slots


def _sorted_by_score(scored: List[ScoredEntry]) -> List[ScoredEntry]:
    # sorted() is stable, so equal scores keep input order
    return sorted(scored, key=lambda item: item.score, reverse=True)


def rank_memories(
    episodic: Sequence[EpisodicRecord],
    semantic: Sequence[SemanticEntry],
    procedural: Sequence[ProceduralEntry],
    top_k: int = DEFAULT_TOP_K,
    now: Optional[datetime] = None,
    weights: LayerWeights = DEFAULT_LAYER_WEIGHTS,
    working: Optional[Sequence[WorkingMemoryEntry]] = None,
) -> RankedMemories:
    """
    Score, sort and select the top K memories across layers.

    Args:
        episodic: Episodic entries (raw or precomputed)
        semantic: Semantic patterns
        procedural: Procedural strategies
        top_k: Total number of scored entries to select; non-positive selects none
        now: Reference time shared by every scorer (default: now UTC)
        weights: Cross-layer weights used to split the slots
        working: Working memory, passed through unchanged

    Returns:
        RankedMemories with one descending list per scored layer
    """
    if now is None:
        now = datetime.now(timezone.utc)

    scored = {
        "episodic": _sorted_by_score(
            [ScoredEntry(entry, score_episodic_entry(entry, now)) for entry in episodic]
        ),
        "semantic": _sorted_by_score(
            [ScoredEntry(entry, score_semantic_entry(entry, now)) for entry in semantic]
        ),
        "procedural": _sorted_by_score(
            [ScoredEntry(entry, score_procedural_entry(entry)) for entry in procedural]
        ),
    }

    slots = allocate_slots(
        weights,
        {layer: len(entries) for layer, entries in scored.items()},
        top_k,
    )
    logger.debug(f"Allocated top_k={top_k} slots: {slots}")

    return RankedMemories(
        ranked_episodic=scored["episodic"][:slots["episodic"]],
        ranked_semantic=scored["semantic"][:slots["semantic"]],
        ranked_procedural=scored["procedural"][:slots["procedural"]],
        working=list(working or []),
    )
