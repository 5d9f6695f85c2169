"""Command-line entry point: pick a move for a FEN position."""

from __future__ import annotations

import argparse
import dataclasses
import logging
import sys

from rookie.core.notation import STARTING_FEN
from rookie.engine.calibration import settings_for_rating
from rookie.engine.request import InvalidRequestError, SearchRequest
from rookie.engine.search import SearchProgress
from rookie.engine.service import SkillEngine

_LOGGER = logging.getLogger(__name__)

DEFAULT_RATING = 1500


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="rookie",
        description="Choose a move the way a player of the given rating would.",
    )
    parser.add_argument(
        "fen", nargs="?", default=STARTING_FEN, help="position to search (FEN)"
    )
    parser.add_argument(
        "--rating", type=int, default=DEFAULT_RATING, help="target playing strength"
    )
    parser.add_argument("--depth", type=int, help="override the search depth")
    parser.add_argument("--time-ms", type=int, help="override the time budget")
    parser.add_argument("--seed", type=int, help="seed for reproducible choices")
    parser.add_argument(
        "--history",
        nargs="*",
        default=[],
        metavar="KEY",
        help="earlier position keys, for repetition detection",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="log search progress"
    )
    return parser


def _print_progress(progress: SearchProgress) -> None:
    print(
        f"depth {progress.depth}  score {progress.score_cp:+d}  "
        f"nodes {progress.nodes}  best {progress.best_move}"
    )


def main(argv: list[str] | None = None) -> int:
    """Run one search and print the chosen move with its statistics."""
    args = _build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        settings = settings_for_rating(args.rating, seed=args.seed)
        overrides: dict[str, int] = {}
        if args.depth is not None:
            overrides["search_depth"] = args.depth
        if args.time_ms is not None:
            overrides["time_limit_ms"] = args.time_ms
        if overrides:
            settings = dataclasses.replace(settings, **overrides)
        request = SearchRequest.from_fen(
            args.fen, history=args.history, settings=settings, seed=args.seed
        )
        result = SkillEngine().run(
            request, on_progress=_print_progress if args.verbose else None
        )
    except (InvalidRequestError, ValueError) as exc:
        _LOGGER.debug("Request rejected", exc_info=True)
        print(f"rookie: {exc}", file=sys.stderr)
        return 2

    move = result.move.uci if result.move is not None else "(none)"
    print(f"bestmove {move}")
    print(
        f"score {result.score_cp:+d} cp  depth {result.depth}  "
        f"nodes {result.nodes}  time {result.elapsed_ms} ms"
        + ("  (stopped)" if result.stopped else "")
        + ("  (mistake)" if result.mistake else "")
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
