"""Qt bridge to run engine searches in a worker thread."""

from __future__ import annotations

import logging
import threading

from PyQt6.QtCore import QObject, pyqtSignal, pyqtSlot

from rookie.engine.request import InvalidRequestError, SearchRequest
from rookie.engine.search import SearchProgress
from rookie.engine.service import SkillEngine

_LOGGER = logging.getLogger(__name__)


class EngineWorker(QObject):
    """Thread-affine worker that runs :class:`SkillEngine` on demand.

    Every accepted request ends with exactly one of ``result_ready`` or
    ``search_error``; cancellation still produces a (degraded) result.
    """

    progress = pyqtSignal(int, object)
    result_ready = pyqtSignal(int, object)
    search_error = pyqtSignal(int, str)

    __slots__ = ("_cancel_event", "_engine")

    def __init__(self, engine: SkillEngine | None = None) -> None:
        super().__init__()
        self._engine = engine or SkillEngine()
        self._cancel_event = threading.Event()

    @property
    def engine(self) -> SkillEngine:
        return self._engine

    @pyqtSlot(object, int)
    def request_search(self, request_obj: object, request_id: int) -> None:
        """Run the search for *request_obj* and emit its outcome."""
        if not isinstance(request_obj, SearchRequest):
            self.search_error.emit(request_id, "Engine received invalid request")
            return

        self._cancel_event.clear()

        def on_progress(progress: SearchProgress) -> None:
            self.progress.emit(request_id, progress)

        try:
            result = self._engine.run(
                request_obj,
                is_cancelled=self._cancel_event.is_set,
                on_progress=on_progress,
            )
        except InvalidRequestError as exc:
            _LOGGER.warning("Rejected request %d: %s", request_id, exc)
            self.search_error.emit(request_id, str(exc))
            return
        except Exception as exc:
            _LOGGER.exception("Search %d failed", request_id)
            self.search_error.emit(request_id, str(exc))
            return

        self.result_ready.emit(request_id, result)

    def cancel(self) -> None:
        """Ask the running search to stop; safe to call from any thread."""
        self._cancel_event.set()

    def is_cancelled(self) -> bool:
        return self._cancel_event.is_set()
