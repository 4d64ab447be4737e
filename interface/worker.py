"""Background search thread.

The worker announces READY once, then serves requests strictly one at a time
in arrival order. Every request yields exactly one RESULT or ERROR message
tagged with the caller's request id; discarding stale results is up to the
host's turn sequencing.
"""

import logging
import queue
import threading
from typing import Any, Callable, Dict, Mapping, Optional

from interface.schemas import ErrorMessage, MovePayload, ReadyMessage, ResultMessage, SearchRequest
from reversi_engine.core.search import SearchEngine

logger = logging.getLogger(__name__)

_STOP = object()


class SearchWorker:
    def __init__(self, post_message: Callable[[Dict[str, Any]], None], engine: Optional[SearchEngine] = None):
        self._post = post_message
        self.engine = engine or SearchEngine()
        self._inbox: "queue.Queue[Any]" = queue.Queue()
        self._thread: Optional[threading.Thread] = None

    def start(self):
        if self._thread and self._thread.is_alive():
            return
        self._thread = threading.Thread(target=self._run, name="reversi-search", daemon=True)
        self._thread.start()

    def submit(self, request: Mapping[str, Any]):
        self._inbox.put(request)

    def shutdown(self, timeout: Optional[float] = None):
        if self._thread is None:
            return
        self._inbox.put(_STOP)
        self._thread.join(timeout=timeout)

    def _run(self):
        self._post(ReadyMessage().model_dump())
        while True:
            request = self._inbox.get()
            if request is _STOP:
                break
            self._post(self.handle(request))

    def handle(self, request: Any) -> Dict[str, Any]:
        """Run one request synchronously and build its reply message."""
        request_id = None
        if isinstance(request, Mapping):
            request_id = request.get("requestId", request.get("request_id"))
        try:
            req = SearchRequest.model_validate(request)
            move = self.engine.compute_move(req.board, req.side, req.config)
        except Exception as e:
            logger.exception("search request %r failed", request_id)
            return ErrorMessage(error=str(e), request_id=request_id).model_dump(by_alias=True)

        payload = MovePayload(row=move.row, col=move.col) if move is not None else None
        return ResultMessage(move=payload, request_id=request_id).model_dump(by_alias=True)
