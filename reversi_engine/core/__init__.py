"""Core engine components: board rules, personality configs, evaluator, and search."""

from .board import ReversiBoard, Move, legal_moves, apply_move
from .personality import SearchConfig, PhaseWeights, normalize_profile
from .evaluator import Evaluator
from .search import SearchEngine, compute_move
