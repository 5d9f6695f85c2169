"""Chess engine package: search, skill calibration and Qt worker bridge."""

from rookie.engine.calibration import settings_for_rating
from rookie.engine.client import EngineClient
from rookie.engine.negamax import NegamaxEngine
from rookie.engine.qt_bridge import EngineWorker
from rookie.engine.request import InvalidRequestError, SearchRequest
from rookie.engine.search import (
    EngineSettings,
    IEngine,
    ScoredMove,
    SearchProgress,
    SearchResult,
)
from rookie.engine.selection import MoveSelector
from rookie.engine.service import EngineResult, SkillEngine

__all__ = [
    "EngineClient",
    "EngineResult",
    "EngineSettings",
    "EngineWorker",
    "IEngine",
    "InvalidRequestError",
    "MoveSelector",
    "NegamaxEngine",
    "ScoredMove",
    "SearchProgress",
    "SearchRequest",
    "SearchResult",
    "SkillEngine",
    "settings_for_rating",
]
