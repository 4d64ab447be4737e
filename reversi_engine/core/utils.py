import logging

from reversi_engine.core.evaluator import FINAL_SCORE_SCALE


def configure_logging(level="INFO"):
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def format_search_info(mode, depth, score, nodes, elapsed, move):
    nps = int(nodes / elapsed) if elapsed > 0 else 0
    move_str = f"{move.row},{move.col}" if move else "-"

    # exact solver scores are scaled final disc differences
    if mode == "endgame" and score is not None:
        score_str = f"discs {int(score // FINAL_SCORE_SCALE):+d}"
    else:
        score_str = f"eval {score:.1f}" if score is not None else "eval -"

    return f"info {mode} depth {depth} score {score_str} nodes {nodes} nps {nps} time {int(elapsed * 1000)}ms move {move_str}"
