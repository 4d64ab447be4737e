"""Personality profiles -> canonical search configuration.

Two profile shapes exist in character data:

* modern: an ``ai`` block (or top-level keys) with ``maxDepth``,
  ``timeLimitMs``, ``endgameSolverDepth``, ``randomness``,
  ``useMoveOrdering`` and per-phase ``weights``;
* legacy: flat ``parameters`` plus ``logicType`` (``static`` or
  ``dynamic_turn``), an integer ``depth`` and ``randomness``.

Both normalize to the same frozen ``SearchConfig``.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError

from reversi_engine.config import CONFIG, DEFAULT_PHASE_WEIGHTS
from reversi_engine.errors import ProfileError

PHASES = ("opening", "midgame", "endgame")

# Legacy depth -> iterative deepening limit.
LEGACY_DEPTH_MAP = {1: 2, 2: 3, 3: 4, 4: 6}

MODERN_KEYS = frozenset({
    "maxDepth", "max_depth", "timeLimitMs", "time_limit_ms", "timeLimit",
    "endgameSolverDepth", "endgame_solver_depth", "useMoveOrdering",
    "use_move_ordering", "weights",
})


@dataclass(frozen=True)
class PhaseWeights:
    mobility: float
    position: float
    disc_diff: float
    stability: float = 0.0
    corner: float = 0.0
    frontier: float = 0.0

    def to_dict(self) -> Dict[str, float]:
        return {
            "mobility": self.mobility,
            "position": self.position,
            "discDiff": self.disc_diff,
            "stability": self.stability,
            "corner": self.corner,
            "frontier": self.frontier,
        }


@dataclass(frozen=True)
class PhaseWeightSet:
    opening: PhaseWeights
    midgame: PhaseWeights
    endgame: PhaseWeights

    def for_phase(self, phase: str) -> PhaseWeights:
        if phase not in PHASES:
            return self.midgame
        return getattr(self, phase)

    def to_dict(self) -> Dict[str, Dict[str, float]]:
        return {phase: self.for_phase(phase).to_dict() for phase in PHASES}


def default_weight_set() -> PhaseWeightSet:
    return PhaseWeightSet(**{
        phase: _to_phase_weights(_WeightsModel.model_validate(DEFAULT_PHASE_WEIGHTS[phase]))
        for phase in PHASES
    })


@dataclass(frozen=True)
class SearchConfig:
    max_depth: int = field(default_factory=lambda: CONFIG.search.max_depth)
    time_limit_ms: int = field(default_factory=lambda: CONFIG.search.time_limit_ms)
    endgame_solver_depth: int = 0
    randomness: int = 0
    use_move_ordering: bool = False
    weights: PhaseWeightSet = field(default_factory=default_weight_set)

    def __post_init__(self):
        if self.max_depth < 1:
            raise ProfileError(f"max_depth must be >= 1, got {self.max_depth}")
        if self.time_limit_ms <= 0:
            raise ProfileError(f"time_limit_ms must be > 0, got {self.time_limit_ms}")
        if self.endgame_solver_depth < 0:
            raise ProfileError(f"endgame_solver_depth must be >= 0, got {self.endgame_solver_depth}")
        if self.randomness < 0:
            raise ProfileError(f"randomness must be >= 0, got {self.randomness}")

    def to_dict(self) -> Dict[str, Any]:
        """Emit a modern profile that normalizes back to this config."""
        return {
            "maxDepth": self.max_depth,
            "timeLimitMs": self.time_limit_ms,
            "endgameSolverDepth": self.endgame_solver_depth,
            "randomness": self.randomness,
            "useMoveOrdering": self.use_move_ordering,
            "weights": self.weights.to_dict(),
        }


# --- wire shapes -----------------------------------------------------------

class _WeightsModel(BaseModel):
    model_config = ConfigDict(extra="ignore")

    mobility: float
    position: float
    disc_diff: float = Field(validation_alias=AliasChoices("discDiff", "disc_diff"))
    stability: float = 0.0
    corner: float = 0.0
    frontier: float = 0.0


class _FlatWeightsModel(BaseModel):
    model_config = ConfigDict(extra="ignore")

    mobility: Optional[float] = None
    position: Optional[float] = None
    disc_diff: Optional[float] = Field(default=None, validation_alias=AliasChoices("discDiff", "disc_diff"))


class _ModernModel(BaseModel):
    model_config = ConfigDict(extra="ignore")

    max_depth: Optional[int] = Field(default=None, validation_alias=AliasChoices("maxDepth", "max_depth"))
    time_limit_ms: Optional[int] = Field(
        default=None, validation_alias=AliasChoices("timeLimitMs", "time_limit_ms", "timeLimit")
    )
    endgame_solver_depth: Optional[int] = Field(
        default=None, validation_alias=AliasChoices("endgameSolverDepth", "endgame_solver_depth")
    )
    randomness: int = 0
    use_move_ordering: bool = Field(
        default=False, validation_alias=AliasChoices("useMoveOrdering", "use_move_ordering")
    )
    weights: Optional[Dict[str, _WeightsModel]] = None


class _LegacyModel(BaseModel):
    model_config = ConfigDict(extra="ignore")

    logic_type: str = Field(default="static", validation_alias=AliasChoices("logicType", "logic_type"))
    depth: Optional[int] = None
    randomness: Optional[int] = None
    parameters: Dict[str, Any] = Field(default_factory=dict)


def _to_phase_weights(model: _WeightsModel) -> PhaseWeights:
    return PhaseWeights(
        mobility=model.mobility,
        position=model.position,
        disc_diff=model.disc_diff,
        stability=model.stability,
        corner=model.corner,
        frontier=model.frontier,
    )


# --- legacy mapping ----------------------------------------------------------

def legacy_max_depth(depth: int) -> int:
    return LEGACY_DEPTH_MAP.get(depth, depth + 2)


def legacy_endgame_depth(depth: int) -> int:
    if depth >= 4:
        return 8
    if depth >= 3:
        return 4
    return 0


def _flat(raw: Any, defaults: Mapping[str, float]) -> Dict[str, float]:
    """Parse a flat weight set, filling gaps from ``defaults``."""
    parsed = _FlatWeightsModel.model_validate(raw or {})
    return {
        "mobility": defaults["mobility"] if parsed.mobility is None else parsed.mobility,
        "position": defaults["position"] if parsed.position is None else parsed.position,
        "disc_diff": defaults["discDiff"] if parsed.disc_diff is None else parsed.disc_diff,
    }


def legacy_weights(logic_type: str, params: Mapping[str, Any]) -> PhaseWeightSet:
    d = CONFIG.search
    corner = d.legacy_corner_bonus
    stability = d.legacy_stability_bonus

    if logic_type == "dynamic_turn":
        early = _flat(params.get("early"), d.legacy_early_weights)
        late = _flat(params.get("late"), d.legacy_late_weights)
        mid = {k: (early[k] + late[k]) / 2 for k in early}
        return PhaseWeightSet(
            opening=PhaseWeights(**early, stability=stability["opening"], corner=corner),
            midgame=PhaseWeights(**mid, stability=stability["midgame"], corner=corner),
            endgame=PhaseWeights(**late, stability=stability["endgame"], corner=corner),
        )

    flat = _flat(params, d.legacy_static_weights)
    return PhaseWeightSet(**{
        phase: PhaseWeights(**flat, stability=stability[phase], corner=corner)
        for phase in PHASES
    })


# --- entry points ------------------------------------------------------------

def is_modern_profile(profile: Mapping[str, Any]) -> bool:
    return "ai" in profile or any(key in profile for key in MODERN_KEYS)


def _normalize_modern(block: Mapping[str, Any]) -> SearchConfig:
    m = _ModernModel.model_validate(block)
    defaults = default_weight_set()
    if m.weights:
        fallback = m.weights.get("midgame")
        phases = {}
        for phase in PHASES:
            raw = m.weights.get(phase) or fallback
            phases[phase] = _to_phase_weights(raw) if raw else defaults.for_phase(phase)
        weights = PhaseWeightSet(**phases)
    else:
        weights = defaults
    return SearchConfig(
        max_depth=m.max_depth or CONFIG.search.max_depth,
        time_limit_ms=m.time_limit_ms or CONFIG.search.time_limit_ms,
        endgame_solver_depth=m.endgame_solver_depth or 0,
        randomness=m.randomness,
        use_move_ordering=m.use_move_ordering,
        weights=weights,
    )


def _normalize_legacy(profile: Mapping[str, Any]) -> SearchConfig:
    m = _LegacyModel.model_validate(profile)
    depth = m.depth or CONFIG.search.legacy_depth
    return SearchConfig(
        max_depth=legacy_max_depth(depth),
        time_limit_ms=CONFIG.search.time_limit_ms,
        endgame_solver_depth=legacy_endgame_depth(depth),
        randomness=m.randomness if m.randomness is not None else 0,
        use_move_ordering=depth >= 4,
        weights=legacy_weights(m.logic_type, m.parameters),
    )


def normalize_profile(profile: Any) -> SearchConfig:
    """Build the canonical SearchConfig for ``profile``.

    A SearchConfig is returned as-is, so normalizing twice is harmless.
    Raises ProfileError for anything that is not a usable profile.
    """
    if isinstance(profile, SearchConfig):
        return profile
    if not isinstance(profile, Mapping):
        raise ProfileError(f"profile must be a mapping, got {type(profile).__name__}")
    try:
        if "ai" in profile:
            block = profile["ai"]
            if not isinstance(block, Mapping):
                raise ProfileError("profile 'ai' block must be a mapping")
            return _normalize_modern(block)
        if is_modern_profile(profile):
            return _normalize_modern(profile)
        return _normalize_legacy(profile)
    except ValidationError as e:
        raise ProfileError(f"invalid personality profile: {e}") from e
