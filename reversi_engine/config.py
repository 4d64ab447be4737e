# reversi_engine/config.py
from dataclasses import dataclass, field
from typing import Dict
import os
import tomllib  # python >=3.11

# Default phase weights for modern profiles that omit "weights".
DEFAULT_PHASE_WEIGHTS = {
    "opening": {"mobility": 30, "position": 20, "discDiff": -10, "stability": 0, "corner": 50},
    "midgame": {"mobility": 20, "position": 30, "discDiff": 10, "stability": 10, "corner": 50},
    "endgame": {"mobility": 5, "position": 10, "discDiff": 100, "stability": 30, "corner": 30},
}

@dataclass
class SearchDefaults:
    max_depth: int = 4
    time_limit_ms: int = 2000
    legacy_depth: int = 4
    # bonuses folded into legacy flat weight sets
    legacy_corner_bonus: int = 50
    legacy_stability_bonus: Dict[str, int] = field(default_factory=lambda: {
        "opening": 0, "midgame": 10, "endgame": 20
    })
    legacy_static_weights: Dict[str, float] = field(default_factory=lambda: {
        "mobility": 30, "position": 20, "discDiff": 10
    })
    legacy_early_weights: Dict[str, float] = field(default_factory=lambda: {
        "mobility": 30, "position": 10, "discDiff": -5
    })
    legacy_late_weights: Dict[str, float] = field(default_factory=lambda: {
        "mobility": 5, "position": 20, "discDiff": 100
    })

@dataclass
class UIConfig:
    engine_name: str = "Reversi Duel"
    api_port: int = 8000
    default_profile: str = "defender"

@dataclass
class Config:
    search: SearchDefaults = field(default_factory=SearchDefaults)
    ui: UIConfig = field(default_factory=UIConfig)
    log_level: str = "INFO"

    @staticmethod
    def load_from_toml(path: str = "config.toml") -> "Config":
        cfg = Config()
        if not os.path.exists(path):
            return cfg
        with open(path, "rb") as f:
            raw = tomllib.load(f)
        for section in ("search", "ui"):
            if section in raw:
                target = getattr(cfg, section)
                for k, v in raw[section].items():
                    if not hasattr(target, k):
                        continue
                    current = getattr(target, k)
                    # weight and bonus tables override key by key
                    if isinstance(current, dict) and isinstance(v, dict):
                        v = {**current, **v}
                    setattr(target, k, v)
        if "log_level" in raw:
            cfg.log_level = str(raw["log_level"])
        return cfg

# single globally importable config instance
CONFIG = Config.load_from_toml(os.environ.get("REVERSI_ENGINE_CONFIG_TOML", "config.toml"))
# allow env override of the search budget for quick debugging
try:
    override_time = os.environ.get("REVERSI_TIME_LIMIT_MS")
    if override_time:
        CONFIG.search.time_limit_ms = int(override_time)
except ValueError:
    pass
