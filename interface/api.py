"""FastAPI REST interface for the engine."""

import threading
from typing import Any, Dict, Optional

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel

from interface.schemas import MovePayload
from interface.worker import SearchWorker
from reversi_engine.config import CONFIG
from reversi_engine.core.board import BLACK, CHAR_MAP, ReversiBoard
from reversi_engine.core.search import SearchEngine
from reversi_engine.core.utils import configure_logging
from reversi_engine.errors import InvalidMoveError, ReversiError
from reversi_engine.profiles import BUILTIN_PROFILES, get_profile

configure_logging(CONFIG.log_level)
app = FastAPI(title=CONFIG.ui.engine_name, version="1.0.0")

engine = SearchEngine()
session = ReversiBoard()
_session_lock = threading.Lock()
# compute requests run inline through the worker's request handler
_boundary = SearchWorker(post_message=lambda message: None, engine=engine)


class SearchBody(BaseModel):
    profile_id: Optional[str] = None
    config: Optional[Dict[str, Any]] = None


def _color_name(side: int) -> str:
    return "black" if side == BLACK else "white"


def _state() -> Dict[str, Any]:
    black, white = session.score()
    over = session.is_game_over()
    return {
        "board": session.to_list(),
        "render": session.render(),
        "turn": _color_name(session.turn),
        "side": session.turn,
        "legal_moves": [{"row": m.row, "col": m.col} for m in session.get_legal_moves()],
        "is_game_over": over,
        "score": {"black": black, "white": white},
        "winner": CHAR_MAP[session.winner()] if over else None,
        "move_number": session.move_number(),
    }


@app.get("/board")
def get_board():
    with _session_lock:
        return _state()


@app.post("/move")
def make_move(req: MovePayload):
    with _session_lock:
        try:
            session.play((req.row, req.col))
        except InvalidMoveError as e:
            raise HTTPException(status_code=400, detail=str(e))
        return _state()


@app.post("/search")
def search_move(req: SearchBody = SearchBody()):
    if req.config is not None:
        profile = req.config
    else:
        profile_id = req.profile_id or CONFIG.ui.default_profile
        try:
            profile = get_profile(profile_id)
        except KeyError:
            raise HTTPException(status_code=404, detail=f"Unknown profile: {profile_id}")

    with _session_lock:
        if session.is_game_over():
            raise HTTPException(status_code=400, detail="Game is already over")
        board = session.to_list()
        side = session.turn

    try:
        result = engine.search(board, side, profile)
    except ReversiError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {
        "move": {"row": result.move.row, "col": result.move.col} if result.move else None,
        "score": result.score,
        "depth": result.depth,
        "mode": result.mode,
        "nodes": result.nodes,
        "side": side,
    }


@app.post("/compute")
def compute(request: Dict[str, Any]):
    """Stateless boundary call: returns a RESULT or ERROR message."""
    return _boundary.handle(request)


@app.post("/undo")
def undo_move():
    with _session_lock:
        if not session.undo_move():
            raise HTTPException(status_code=400, detail="Nothing to undo")
        return _state()


@app.post("/reset")
def reset_board():
    with _session_lock:
        session.reset()
        return _state()


@app.get("/profiles")
def list_profiles():
    return [
        {"id": p["id"], "displayName": p["displayName"], "logicType": p["logicType"], "depth": p["depth"]}
        for p in BUILTIN_PROFILES
    ]


def main():
    import uvicorn

    uvicorn.run(app, host="127.0.0.1", port=CONFIG.ui.api_port)


if __name__ == "__main__":
    main()
