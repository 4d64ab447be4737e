"""
Integration tests: full games, the background search worker, the REST API,
and the CLI helpers.
"""

import queue
import random

import pytest

from reversi_engine.core.board import BLACK, WHITE, ReversiBoard, count_discs, is_terminal, new_board
from reversi_engine.core.search import SearchEngine
from reversi_engine.main import Engine
from reversi_engine.profiles import BUILTIN_PROFILES, profile_ids

FAST = {"maxDepth": 2, "timeLimitMs": 300}
OPENING_MOVES = [{"row": 2, "col": 3}, {"row": 3, "col": 2}, {"row": 4, "col": 5}, {"row": 5, "col": 4}]


# ════════════════════════════════════════════════════════════════════════════
#  FULL GAMES
# ════════════════════════════════════════════════════════════════════════════

class TestFullGame:
    def test_engine_vs_engine_completes(self):
        black = SearchEngine(rng=random.Random(1))
        white = SearchEngine(rng=random.Random(2))
        game = ReversiBoard()
        placed = 0
        while not game.is_game_over():
            engine = black if game.turn == BLACK else white
            profile = dict(FAST, randomness=2) if game.turn == BLACK else FAST
            move = engine.compute_move(game.to_list(), game.turn, profile)
            assert move in game.get_legal_moves()
            game.play(move)
            placed += 1
            assert placed <= 60

        assert is_terminal(game.board)
        assert sum(count_discs(game.board)) == placed + 4

    def test_engine_wrapper_alternates_with_human(self):
        game = Engine(profile=FAST)
        assert game.make_move(2, 3) is True
        reply = game.play_ai_move()
        assert reply is not None
        assert game.board.turn == BLACK
        assert game.board.move_number() == 3

    def test_engine_wrapper_uses_builtin_profile(self):
        game = Engine(profile="attacker")
        assert game.profile["id"] == "attacker"

    def test_engine_wrapper_game_over(self):
        b = [[0] * 8 for _ in range(8)]
        b[0][0] = BLACK
        game = Engine(profile=FAST)
        game.board = ReversiBoard(b)
        assert game.board.is_game_over()
        assert game.get_best_move() is None
        assert game.play_ai_move() is None

    def test_endgame_profile_finishes_game(self):
        rng = random.Random(4)
        game = ReversiBoard()
        while not game.is_game_over() and sum(row.count(0) for row in game.board) > 8:
            game.play(rng.choice(game.get_legal_moves()))
        profile = {"maxDepth": 1, "endgameSolverDepth": 8, "timeLimitMs": 30000}
        engine = SearchEngine()
        while not game.is_game_over():
            game.play(engine.compute_move(game.to_list(), game.turn, profile))
        assert is_terminal(game.board)


# ════════════════════════════════════════════════════════════════════════════
#  SEARCH WORKER
# ════════════════════════════════════════════════════════════════════════════

class TestSearchWorker:
    @pytest.fixture(autouse=True)
    def worker(self):
        from interface.worker import SearchWorker

        self.messages = queue.Queue()
        self.worker = SearchWorker(self.messages.put, engine=SearchEngine(rng=random.Random(0)))
        self.worker.start()
        yield
        self.worker.shutdown(timeout=5)

    def _next(self):
        return self.messages.get(timeout=10)

    def test_ready_before_results(self):
        self.worker.submit({"board": new_board(), "side": BLACK, "config": FAST, "requestId": 1})
        assert self._next() == {"type": "READY"}
        result = self._next()
        assert result["type"] == "RESULT"
        assert result["requestId"] == 1
        assert result["move"] in OPENING_MOVES

    def test_requests_answered_in_order(self):
        for rid in ("a", "b", "c"):
            self.worker.submit({"board": new_board(), "side": WHITE, "config": FAST, "requestId": rid})
        assert self._next()["type"] == "READY"
        assert [self._next()["requestId"] for _ in range(3)] == ["a", "b", "c"]

    def test_pass_is_a_result_not_an_error(self):
        b = [[0] * 8 for _ in range(8)]
        b[0][0] = BLACK
        self.worker.submit({"board": b, "side": WHITE, "config": FAST, "requestId": 7})
        self._next()
        assert self._next() == {"type": "RESULT", "move": None, "requestId": 7}

    def test_malformed_board_reports_error(self):
        self.worker.submit({"board": [[0] * 8] * 3, "side": BLACK, "config": FAST, "requestId": 9})
        self._next()
        reply = self._next()
        assert reply["type"] == "ERROR"
        assert reply["requestId"] == 9
        assert "rows" in reply["error"]

    def test_corrupt_config_reports_error(self):
        self.worker.submit({"board": new_board(), "side": BLACK, "config": {"maxDepth": "x"}, "requestId": 10})
        self._next()
        reply = self._next()
        assert reply["type"] == "ERROR"
        assert reply["requestId"] == 10

    def test_worker_survives_errors(self):
        self.worker.submit({"nonsense": True, "requestId": 1})
        self.worker.submit({"board": new_board(), "side": BLACK, "config": FAST, "requestId": 2})
        self._next()
        assert self._next()["type"] == "ERROR"
        assert self._next()["type"] == "RESULT"


# ════════════════════════════════════════════════════════════════════════════
#  REST API
# ════════════════════════════════════════════════════════════════════════════

class TestAPIIntegration:
    @pytest.fixture(autouse=True)
    def setup_client(self):
        from fastapi.testclient import TestClient
        from interface.api import app, session

        self.client = TestClient(app)
        session.reset()

    def test_get_board_initial(self):
        data = self.client.get("/board").json()
        assert data["board"] == new_board()
        assert data["turn"] == "black"
        assert data["is_game_over"] is False
        assert data["score"] == {"black": 2, "white": 2}
        assert data["legal_moves"] == OPENING_MOVES

    def test_post_move_valid(self):
        response = self.client.post("/move", json={"row": 2, "col": 3})
        assert response.status_code == 200
        data = response.json()
        assert data["turn"] == "white"
        assert data["score"] == {"black": 4, "white": 1}

    def test_post_move_illegal(self):
        response = self.client.post("/move", json={"row": 0, "col": 0})
        assert response.status_code == 400

    def test_post_move_out_of_range(self):
        response = self.client.post("/move", json={"row": 9, "col": 0})
        assert response.status_code == 422

    def test_search_returns_legal_move(self):
        response = self.client.post("/search", json={"config": FAST})
        assert response.status_code == 200
        data = response.json()
        assert data["move"] in OPENING_MOVES
        assert data["mode"] == "iterative"
        assert data["side"] == BLACK

    def test_search_builtin_profile(self):
        response = self.client.post("/search", json={"profile_id": "whimsical"})
        assert response.status_code == 200
        assert response.json()["move"] in OPENING_MOVES

    def test_search_unknown_profile(self):
        response = self.client.post("/search", json={"profile_id": "nobody"})
        assert response.status_code == 404

    def test_search_bad_config(self):
        response = self.client.post("/search", json={"config": {"maxDepth": -3, "timeLimitMs": -1}})
        assert response.status_code == 400

    def test_compute_result(self):
        response = self.client.post(
            "/compute", json={"board": new_board(), "side": BLACK, "config": FAST, "requestId": "r1"}
        )
        data = response.json()
        assert data["type"] == "RESULT"
        assert data["requestId"] == "r1"
        assert data["move"] in OPENING_MOVES

    def test_compute_error(self):
        response = self.client.post("/compute", json={"board": [[5] * 8] * 8, "side": 1, "config": {}, "requestId": 3})
        data = response.json()
        assert data == {"type": "ERROR", "error": data["error"], "requestId": 3}

    def test_undo_and_reset(self):
        self.client.post("/move", json={"row": 2, "col": 3})
        assert self.client.post("/undo").json()["board"] == new_board()
        assert self.client.post("/undo").status_code == 400
        self.client.post("/move", json={"row": 2, "col": 3})
        assert self.client.post("/reset").json()["turn"] == "black"

    def test_profiles(self):
        data = self.client.get("/profiles").json()
        assert [p["id"] for p in data] == profile_ids()
        assert len(data) == len(BUILTIN_PROFILES)

    def test_full_api_game_flow(self):
        self.client.post("/move", json={"row": 2, "col": 3})
        reply = self.client.post("/search", json={"config": FAST}).json()["move"]
        r = self.client.post("/move", json=reply)
        assert r.status_code == 200
        assert r.json()["turn"] == "black"
        assert r.json()["move_number"] == 3


# ════════════════════════════════════════════════════════════════════════════
#  CLI
# ════════════════════════════════════════════════════════════════════════════

class TestCLI:
    @pytest.mark.parametrize("text,expected", [
        ("2 3", (2, 3)),
        ("2,3", (2, 3)),
        (" 4 , 5 ", (4, 5)),
        ("", None),
        ("a b", None),
        ("1 2 3", None),
    ])
    def test_parse_move(self, text, expected):
        from interface.cli import parse_move

        assert parse_move(text) == expected

    def test_game_against_engine(self, monkeypatch, capsys):
        import interface.cli as cli

        sessions = []
        real_engine = cli.Engine

        def fast_engine(profile):
            game = real_engine(profile=FAST)
            game.profile = dict(FAST, displayName=profile)
            sessions.append(game)
            return game

        def first_legal(prompt):
            m = sessions[0].board.get_legal_moves()[0]
            return f"{m.row} {m.col}"

        monkeypatch.setattr(cli, "Engine", fast_engine)
        monkeypatch.setattr("builtins.input", first_legal)
        cli.main(["--profile", "attacker", "--log-level", "WARNING"])

        assert sessions[0].board.is_game_over()
        assert "Game Over" in capsys.readouterr().out
