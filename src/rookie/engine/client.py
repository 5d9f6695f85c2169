"""Main-thread owner of the engine worker thread."""

from __future__ import annotations

import logging
from time import perf_counter

from PyQt6.QtCore import QObject, QThread, QTimer, pyqtSignal

from rookie.core.move_generator import MoveGenerator
from rookie.core.position import Position
from rookie.engine.evaluation import Evaluator
from rookie.engine.qt_bridge import EngineWorker
from rookie.engine.request import InvalidRequestError, SearchRequest
from rookie.engine.search import MATE_SCORE, SearchProgress
from rookie.engine.service import EngineResult, SkillEngine

_LOGGER = logging.getLogger(__name__)


class EngineClient(QObject):
    """Issues requests to an :class:`EngineWorker` and relays its answers.

    Only the latest request is live: results, progress and errors for an
    older request id are dropped. Searches with a time budget get a
    hard-deadline backstop; if the worker has not answered by then the
    client answers for it from the last progress it saw.
    """

    progress = pyqtSignal(int, object)
    result_ready = pyqtSignal(int, object)
    search_error = pyqtSignal(int, str)

    _search_requested = pyqtSignal(object, int)

    def __init__(
        self,
        engine: SkillEngine | None = None,
        parent: QObject | None = None,
    ) -> None:
        super().__init__(parent)
        self._worker = EngineWorker(engine)
        self._config = self._worker.engine.config
        self._thread = QThread(self)

        self._backstop = QTimer(self)
        self._backstop.setSingleShot(True)
        self._backstop.timeout.connect(self._on_hard_deadline)

        self._request_id = 0
        self._pending_request: int | None = None
        self._last_progress: SearchProgress | None = None
        self._pending_position: Position | None = None
        self._started_at = 0.0
        self._is_started = False

    @property
    def worker(self) -> EngineWorker:
        return self._worker

    @property
    def pending_request(self) -> int | None:
        return self._pending_request

    def start(self) -> None:
        """Start the worker thread and connect its signals."""
        if self._is_started:
            return
        self._worker.moveToThread(self._thread)
        self._search_requested.connect(self._worker.request_search)
        self._worker.progress.connect(self._on_progress)
        self._worker.result_ready.connect(self._on_result)
        self._worker.search_error.connect(self._on_error)
        self._thread.start()
        self._is_started = True

    def shutdown(self) -> None:
        """Cancel the active search and stop the worker thread."""
        if not self._is_started:
            return
        self.stop()
        self._pending_request = None
        self._thread.quit()
        self._thread.wait(2000)
        self._is_started = False

    def request(self, request: SearchRequest) -> int:
        """Queue *request*, superseding any in-flight one; returns its id."""
        if not self._is_started:
            raise RuntimeError("EngineClient.start() must be called first")

        self.stop()
        self._request_id += 1
        self._pending_request = self._request_id
        self._last_progress = None
        self._pending_position = None
        self._started_at = perf_counter()

        try:
            time_limit_ms = self._worker.engine.settings_for(request).time_limit_ms
            self._pending_position = request.to_position()
        except InvalidRequestError:
            # The worker rejects it and reports through search_error.
            time_limit_ms = None
        if time_limit_ms is not None:
            soft_ms = time_limit_ms * self._config.deadline_fraction
            self._backstop.start(int(soft_ms) + self._config.hard_deadline_grace_ms)

        self._search_requested.emit(request, self._request_id)
        return self._request_id

    def stop(self) -> None:
        """Ask the running search to finish now with its best result so far."""
        self._backstop.stop()
        self._worker.cancel()

    def _on_progress(self, request_id: int, progress: object) -> None:
        if request_id != self._pending_request:
            return
        if isinstance(progress, SearchProgress):
            self._last_progress = progress
        self.progress.emit(request_id, progress)

    def _on_result(self, request_id: int, result: object) -> None:
        if request_id != self._pending_request:
            return
        self._backstop.stop()
        self._pending_request = None
        self.result_ready.emit(request_id, result)

    def _on_error(self, request_id: int, message: str) -> None:
        if request_id != self._pending_request:
            return
        self._backstop.stop()
        self._pending_request = None
        self.search_error.emit(request_id, message)

    def _on_hard_deadline(self) -> None:
        request_id = self._pending_request
        if request_id is None:
            return
        _LOGGER.warning(
            "Engine missed its hard deadline for request %d, answering from progress",
            request_id,
        )
        self._worker.cancel()
        self._pending_request = None

        elapsed_ms = int((perf_counter() - self._started_at) * 1000)
        last = self._last_progress
        if last is None:
            result = self._fallback_result(elapsed_ms)
        else:
            result = EngineResult(
                last.best_move,
                last.score_cp,
                last.depth,
                last.nodes,
                elapsed_ms,
                stopped=True,
            )
        self.result_ready.emit(request_id, result)

    def _fallback_result(self, elapsed_ms: int) -> EngineResult:
        """Answer without any completed depth: first legal move, material score.

        A null move is reserved for positions with no legal move at all.
        """
        position = self._pending_position
        if position is None:
            return EngineResult(None, 0, 0, 0, elapsed_ms, stopped=True)
        gen = MoveGenerator(position)
        legal = gen.generate_legal_moves()
        if not legal:
            score = -MATE_SCORE if gen.is_in_check(position.side_to_move) else 0
            return EngineResult(None, score, 0, 0, elapsed_ms, stopped=True)
        return EngineResult(
            legal[0],
            Evaluator().material(position),
            0,
            0,
            elapsed_ms,
            stopped=True,
        )
