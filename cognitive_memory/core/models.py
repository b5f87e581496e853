"""
Data models for the cognitive memory engine.

Memory records arrive from the persistence layer and are read-only here:
every model is frozen, missing optional fields take their documented
defaults at construction, and the engine returns new values instead of
mutating its inputs.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Generic, Iterable, List, Mapping, Optional, TypeVar, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, model_validator

# Layers that take part in relevance scoring. Working memory is carried
# through ranking but never scored.
SCORED_LAYERS = ("episodic", "semantic", "procedural")
ALL_LAYERS = SCORED_LAYERS + ("working",)

LAYER_WEIGHT_TOLERANCE = 1e-6


class _MemoryRecord(BaseModel):
    model_config = ConfigDict(frozen=True)


class _EpisodicBase(_MemoryRecord):
    """Fields shared by both episodic variants"""
    id: Optional[str] = None
    summary: str = ""
    event_type: str
    platform: Optional[str] = None
    created_at: Optional[datetime] = None
    recall_count: int = Field(default=0, ge=0)
    last_recalled_at: Optional[datetime] = None
    ease_factor: Optional[float] = Field(default=None, ge=1.3, le=5.0)
    next_review_at: Optional[datetime] = None


class EpisodicEntry(_EpisodicBase):
    """Something that happened, scored from its raw fields"""
    strength: float = Field(default=0.5, ge=0.0, le=1.0)
    # Persistence rows call this column importance_score
    importance: float = Field(
        default=0.5,
        ge=0.0,
        le=1.0,
        validation_alias=AliasChoices("importance", "importance_score"),
    )
    half_life_days: float = Field(default=30.0, gt=0.0)

    @model_validator(mode="before")
    @classmethod
    def _reject_composite_score(cls, data: Any) -> Any:
        if isinstance(data, Mapping) and data.get("composite_score") is not None:
            raise ValueError(
                "composite_score given on a raw episodic entry; "
                "use PrecomputedEpisodicEntry instead"
            )
        return data


class PrecomputedEpisodicEntry(_EpisodicBase):
    """Episodic entry whose score was computed upstream and is used verbatim"""
    composite_score: float


EpisodicRecord = Union[PrecomputedEpisodicEntry, EpisodicEntry]


def episodic_entry_from_dict(data: Mapping[str, Any]) -> EpisodicRecord:
    """Build the right episodic variant from a raw persistence row"""
    if data.get("composite_score") is not None:
        return PrecomputedEpisodicEntry(**data)
    row = {key: value for key, value in data.items() if key != "composite_score"}
    return EpisodicEntry(**row)


class SemanticEntry(_MemoryRecord):
    """A statistically learned pattern"""
    pattern_type: str
    pattern_key: str
    pattern_value: Any = None
    platform: Optional[str] = None
    confidence: float = Field(default=0.5, ge=0.0, le=1.0)
    sample_size: int = Field(default=0, ge=0)
    updated_at: Optional[datetime] = None


class ProceduralEntry(_MemoryRecord):
    """A reusable strategy with a track record"""
    name: str
    strategy_type: str
    platform: Optional[str] = None
    description: Optional[str] = None
    conditions: Any = None
    actions: Any = None
    effectiveness: float = Field(default=0.5, ge=0.0, le=1.0)
    times_applied: int = Field(default=0, ge=0)
    times_succeeded: int = Field(default=0, ge=0)


class WorkingMemoryEntry(_MemoryRecord):
    """Ephemeral session state, passed through untouched"""
    memory_type: str
    content: Any = None
    valid_until: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class MemoryContext(_MemoryRecord):
    """Everything the persistence layer loaded for one generation request"""
    episodic: List[EpisodicRecord] = Field(default_factory=list)
    semantic: List[SemanticEntry] = Field(default_factory=list)
    procedural: List[ProceduralEntry] = Field(default_factory=list)
    working: List[WorkingMemoryEntry] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def _coerce_episodic_rows(cls, data: Any) -> Any:
        if isinstance(data, Mapping) and data.get("episodic"):
            data = dict(data)
            data["episodic"] = [
                episodic_entry_from_dict(row) if isinstance(row, Mapping) else row
                for row in data["episodic"]
            ]
        return data


class RetentionState(_MemoryRecord):
    """Spaced repetition state of one memory"""
    ease_factor: float = Field(default=2.5, ge=1.3, le=5.0)
    interval: int = Field(default=1, ge=1)
    strength: float = Field(default=0.5, ge=0.0, le=1.0)
    recall_count: int = Field(default=0, ge=0)
    repetitions: int = Field(default=0, ge=0)  # consecutive successful reviews


class LayerWeights(_MemoryRecord):
    """Cross-layer weights; the four values always sum to 1.0"""
    episodic: float = Field(ge=0.0)
    semantic: float = Field(ge=0.0)
    procedural: float = Field(ge=0.0)
    working: float = Field(ge=0.0)

    @model_validator(mode="after")
    def _check_sum(self) -> "LayerWeights":
        total = self.episodic + self.semantic + self.procedural + self.working
        if abs(total - 1.0) > LAYER_WEIGHT_TOLERANCE:
            raise ValueError(f"Layer weights sum to {total:.6f}, should be 1.0")
        return self

    def weight(self, layer: str) -> float:
        return getattr(self, layer)

    def normalized_over(self, layers: Iterable[str]) -> Dict[str, float]:
        """Return weights for `layers` only, rescaled to sum to 1.0.

        Layers whose weights are all zero share the mass equally.
        """
        layers = list(layers)
        if not layers:
            return {}
        total = sum(self.weight(layer) for layer in layers)
        if total == 0:
            return {layer: 1.0 / len(layers) for layer in layers}
        return {layer: self.weight(layer) / total for layer in layers}


class ReviewCandidate(_MemoryRecord):
    """A memory row considered for the review queue"""
    id: str
    summary: str = ""
    strength: float = Field(default=0.5, ge=0.0, le=1.0)
    last_recalled_at: Optional[datetime] = None
    next_review_at: Optional[datetime] = None


class ReviewQueueItem(_MemoryRecord):
    """A memory whose scheduled review time has passed"""
    id: str
    summary: str
    strength: float
    days_since_review: float
    next_review_at: Optional[datetime] = None


EntryT = TypeVar("EntryT", bound=BaseModel)


@dataclass(frozen=True)
class ScoredEntry(Generic[EntryT]):
    """A memory record paired with its computed relevance score.

    Attribute access falls through to the wrapped entry, so
    ``scored.summary`` works as well as ``scored.entry.summary``.
    """
    entry: EntryT
    score: float

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_"):
            raise AttributeError(name)
        return getattr(object.__getattribute__(self, "entry"), name)

    def to_dict(self) -> Dict[str, Any]:
        data = self.entry.model_dump()
        data["score"] = self.score
        return data


@dataclass(frozen=True)
class RankedMemories:
    """Top-K selection across layers, each list sorted by descending score"""
    ranked_episodic: List[ScoredEntry] = field(default_factory=list)
    ranked_semantic: List[ScoredEntry] = field(default_factory=list)
    ranked_procedural: List[ScoredEntry] = field(default_factory=list)
    working: List[WorkingMemoryEntry] = field(default_factory=list)

    @property
    def total(self) -> int:
        """Number of scored entries selected across all layers"""
        return len(self.ranked_episodic) + len(self.ranked_semantic) + len(self.ranked_procedural)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "ranked_episodic": [s.to_dict() for s in self.ranked_episodic],
            "ranked_semantic": [s.to_dict() for s in self.ranked_semantic],
            "ranked_procedural": [s.to_dict() for s in self.ranked_procedural],
            "working": [w.model_dump() for w in self.working],
        }
