"""Tests for the command-line entry point."""

from __future__ import annotations

import pytest

from rookie.app import main


class TestMain:
    def test_prints_best_move(self, capsys: pytest.CaptureFixture[str]) -> None:
        code = main(["--depth", "1", "--seed", "3"])
        out = capsys.readouterr().out

        assert code == 0
        assert out.startswith("bestmove ")
        assert "depth 1" in out

    def test_mated_position_has_no_move(self, capsys: pytest.CaptureFixture[str]) -> None:
        fen = "rnb1kbnr/pppp1ppp/8/4p3/6Pq/5P2/PPPPP2P/RNBQKBNR w KQkq - 1 3"
        code = main([fen, "--depth", "2"])

        assert code == 0
        assert "bestmove (none)" in capsys.readouterr().out

    def test_bad_fen_exits_with_error(self, capsys: pytest.CaptureFixture[str]) -> None:
        code = main(["not a fen"])

        assert code == 2
        assert "rookie:" in capsys.readouterr().err

    def test_verbose_prints_progress(self, capsys: pytest.CaptureFixture[str]) -> None:
        main(["--depth", "2", "--rating", "2400", "-v"])
        out = capsys.readouterr().out

        assert "depth 1 " in out
        assert "depth 2 " in out
