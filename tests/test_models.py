"""
Unit tests for memory data models
"""

import pytest
from datetime import datetime, timezone
from pydantic import ValidationError

from cognitive_memory.core.models import (
    EpisodicEntry,
    PrecomputedEpisodicEntry,
    SemanticEntry,
    ProceduralEntry,
    WorkingMemoryEntry,
    MemoryContext,
    RetentionState,
    LayerWeights,
    ScoredEntry,
    RankedMemories,
    episodic_entry_from_dict,
)


class TestEpisodicEntry:
    """Test episodic entry variants"""

    def test_defaults(self):
        """Test missing optional fields take their documented defaults"""
        entry = EpisodicEntry(event_type="post_success")

        assert entry.strength == 0.5
        assert entry.importance == 0.5
        assert entry.half_life_days == 30.0
        assert entry.recall_count == 0
        assert entry.created_at is None

    def test_raw_entry_rejects_composite_score(self):
        """Test a raw entry cannot smuggle in a precomputed score"""
        with pytest.raises(ValidationError, match="PrecomputedEpisodicEntry"):
            EpisodicEntry(event_type="post_success", composite_score=0.4)

    def test_out_of_range_strength_rejected(self):
        """Test strength outside [0, 1] is rejected"""
        with pytest.raises(ValidationError):
            EpisodicEntry(event_type="post_success", strength=1.5)

    def test_non_positive_half_life_rejected(self):
        """Test half-life must be positive"""
        with pytest.raises(ValidationError):
            EpisodicEntry(event_type="post_success", half_life_days=0)

    def test_from_dict_picks_precomputed_variant(self):
        """Test rows with a composite score become PrecomputedEpisodicEntry"""
        entry = episodic_entry_from_dict({
            "event_type": "viral_moment",
            "composite_score": 0.42,
        })

        assert isinstance(entry, PrecomputedEpisodicEntry)
        assert entry.composite_score == 0.42

    def test_from_dict_picks_raw_variant(self):
        """Test rows with a null composite score become EpisodicEntry"""
        entry = episodic_entry_from_dict({
            "event_type": "viral_moment",
            "composite_score": None,
            "strength": 0.9,
        })

        assert isinstance(entry, EpisodicEntry)
        assert entry.strength == 0.9

    def test_importance_score_alias(self):
        """Test rows carrying importance_score populate importance"""
        entry = EpisodicEntry(event_type="post_success", importance_score=0.9)

        assert entry.importance == 0.9

    def test_importance_score_alias_from_row(self):
        """Test persistence rows using the column name are read"""
        entry = episodic_entry_from_dict({
            "event_type": "goal_milestone",
            "composite_score": None,
            "importance_score": 0.2,
        })

        assert isinstance(entry, EpisodicEntry)
        assert entry.importance == 0.2

    def test_importance_score_alias_validated(self):
        """Test the aliased column keeps the [0, 1] bound"""
        with pytest.raises(ValidationError):
            EpisodicEntry(event_type="post_success", importance_score=1.4)

    def test_entries_are_frozen(self):
        """Test records cannot be mutated after construction"""
        entry = EpisodicEntry(event_type="post_success")

        with pytest.raises(ValidationError):
            entry.strength = 0.9


class TestOtherLayers:
    """Test semantic, procedural and working memory records"""

    def test_semantic_defaults(self):
        """Test semantic entry defaults"""
        entry = SemanticEntry(pattern_type="best_time", pattern_key="weekday_morning")

        assert entry.confidence == 0.5
        assert entry.sample_size == 0
        assert entry.updated_at is None

    def test_negative_sample_size_rejected(self):
        """Test negative sample sizes are rejected"""
        with pytest.raises(ValidationError):
            SemanticEntry(pattern_type="best_time", pattern_key="k", sample_size=-1)

    def test_negative_times_applied_rejected(self):
        """Test negative application counts are rejected"""
        with pytest.raises(ValidationError):
            ProceduralEntry(name="thread", strategy_type="format", times_applied=-3)

    def test_procedural_defaults(self):
        """Test procedural entry defaults"""
        entry = ProceduralEntry(name="thread", strategy_type="format")

        assert entry.effectiveness == 0.5
        assert entry.times_applied == 0
        assert entry.times_succeeded == 0

    def test_working_memory_keeps_arbitrary_content(self):
        """Test working memory content is carried as given"""
        entry = WorkingMemoryEntry(memory_type="session", content={"draft": 3})

        assert entry.content == {"draft": 3}


class TestMemoryContext:
    """Test memory context construction"""

    def test_empty_context(self):
        """Test every layer defaults to an empty list"""
        context = MemoryContext()

        assert context.episodic == []
        assert context.semantic == []
        assert context.procedural == []
        assert context.working == []

    def test_episodic_rows_coerced_to_variants(self):
        """Test raw episodic rows are mapped onto the right variant"""
        context = MemoryContext(episodic=[
            {"event_type": "post_success", "composite_score": 0.3},
            {"event_type": "post_failure", "strength": 0.2},
        ])

        assert isinstance(context.episodic[0], PrecomputedEpisodicEntry)
        assert isinstance(context.episodic[1], EpisodicEntry)


class TestRetentionState:
    """Test retention state defaults and bounds"""

    def test_default_initial_state(self):
        """Test the initial state of a new memory"""
        state = RetentionState()

        assert state.ease_factor == 2.5
        assert state.interval == 1
        assert state.strength == 0.5
        assert state.recall_count == 0
        assert state.repetitions == 0

    def test_ease_factor_bounds(self):
        """Test ease factor outside [1.3, 5.0] is rejected"""
        with pytest.raises(ValidationError):
            RetentionState(ease_factor=1.2)
        with pytest.raises(ValidationError):
            RetentionState(ease_factor=5.1)

    def test_interval_at_least_one(self):
        """Test interval below one day is rejected"""
        with pytest.raises(ValidationError):
            RetentionState(interval=0)


class TestLayerWeights:
    """Test cross-layer weight validation"""

    def test_weights_must_sum_to_one(self):
        """Test weights not summing to 1.0 are rejected"""
        with pytest.raises(ValidationError, match="sum to"):
            LayerWeights(episodic=0.5, semantic=0.3, procedural=0.25, working=0.1)

    def test_negative_weight_rejected(self):
        """Test negative weights are rejected"""
        with pytest.raises(ValidationError):
            LayerWeights(episodic=1.1, semantic=0.0, procedural=0.0, working=-0.1)

    def test_normalized_over_subset(self):
        """Test renormalising over the layers present"""
        weights = LayerWeights(episodic=0.35, semantic=0.30, procedural=0.25, working=0.10)

        normalized = weights.normalized_over(["episodic", "procedural"])

        assert normalized["episodic"] == pytest.approx(0.35 / 0.60)
        assert normalized["procedural"] == pytest.approx(0.25 / 0.60)
        assert sum(normalized.values()) == pytest.approx(1.0)

    def test_normalized_over_zero_weights_splits_equally(self):
        """Test layers that all weigh zero share the mass equally"""
        weights = LayerWeights(episodic=0.0, semantic=0.0, procedural=0.0, working=1.0)

        assert weights.normalized_over(["episodic", "semantic"]) == {
            "episodic": 0.5,
            "semantic": 0.5,
        }

    def test_normalized_over_nothing(self):
        """Test an empty layer list gives an empty mapping"""
        weights = LayerWeights(episodic=0.35, semantic=0.30, procedural=0.25, working=0.10)

        assert weights.normalized_over([]) == {}


class TestScoredEntry:
    """Test scored entry wrapper"""

    def test_attribute_access_falls_through(self):
        """Test fields of the wrapped entry are reachable directly"""
        entry = SemanticEntry(pattern_type="best_time", pattern_key="friday", confidence=0.7)
        scored = ScoredEntry(entry, 0.61)

        assert scored.pattern_key == "friday"
        assert scored.confidence == 0.7
        assert scored.score == 0.61

    def test_unknown_attribute_raises(self):
        """Test missing attributes still raise AttributeError"""
        scored = ScoredEntry(SemanticEntry(pattern_type="a", pattern_key="b"), 0.5)

        with pytest.raises(AttributeError):
            scored.not_a_field

    def test_to_dict_carries_score(self):
        """Test serialisation merges the score into the entry fields"""
        created = datetime(2026, 1, 1, tzinfo=timezone.utc)
        entry = EpisodicEntry(id="m1", event_type="post_success", created_at=created)

        data = ScoredEntry(entry, 0.25).to_dict()

        assert data["id"] == "m1"
        assert data["created_at"] == created
        assert data["score"] == 0.25


class TestRankedMemories:
    """Test ranked memories container"""

    def test_total_counts_scored_layers_only(self):
        """Test working memory does not count toward the total"""
        ranked = RankedMemories(
            ranked_episodic=[ScoredEntry(EpisodicEntry(event_type="x"), 0.1)],
            ranked_semantic=[ScoredEntry(SemanticEntry(pattern_type="a", pattern_key="b"), 0.2)],
            working=[WorkingMemoryEntry(memory_type="session")],
        )

        assert ranked.total == 2

    def test_to_dict(self):
        """Test dictionary form of an empty ranking"""
        assert RankedMemories().to_dict() == {
            "ranked_episodic": [],
            "ranked_semantic": [],
            "ranked_procedural": [],
            "working": [],
        }
