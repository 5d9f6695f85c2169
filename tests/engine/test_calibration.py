"""Tests for rating-to-settings calibration."""

from __future__ import annotations

import pytest

from rookie.config import EngineConfig
from rookie.engine.calibration import clamp_rating, interpolate, settings_for_rating


class TestSettingsForRating:
    def test_weakest_anchor(self) -> None:
        settings = settings_for_rating(400)
        assert settings.search_depth == 1
        assert settings.time_limit_ms == 300
        assert settings.max_nodes == 2_000
        assert settings.position_weight == 0.0
        assert settings.mistake_rate == pytest.approx(0.6)
        assert settings.mistake_size_cp == 400
        assert settings.temperature == pytest.approx(60.0)
        assert settings.softmax_window == 150
        assert not settings.use_quiescence

    def test_strongest_anchor(self) -> None:
        settings = settings_for_rating(2400)
        assert settings.search_depth == 5
        assert settings.time_limit_ms == 7_000
        assert settings.max_nodes == 400_000
        assert settings.position_weight == pytest.approx(1.2)
        assert settings.mobility_weight == pytest.approx(0.5)
        assert settings.mistake_rate == pytest.approx(0.02)
        assert settings.mistake_size_cp == 60
        assert settings.temperature == pytest.approx(2.0)
        assert settings.softmax_window == 15
        assert settings.use_quiescence

    def test_midpoint_is_linear(self) -> None:
        settings = settings_for_rating(1400)
        assert settings.search_depth == 3
        assert settings.time_limit_ms == 3_650
        assert settings.max_nodes == 201_000
        assert settings.position_weight == pytest.approx(0.6)
        assert settings.mistake_rate == pytest.approx(0.31)
        assert settings.temperature == pytest.approx(31.0)

    @pytest.mark.parametrize("rating, expected", [(-50, 400), (100, 400), (9000, 2400)])
    def test_out_of_band_ratings_clamp(self, rating: int, expected: int) -> None:
        assert clamp_rating(rating) == expected
        assert settings_for_rating(rating) == settings_for_rating(expected)

    def test_quiescence_threshold(self) -> None:
        assert not settings_for_rating(1399).use_quiescence
        assert settings_for_rating(1400).use_quiescence

    def test_strength_grows_with_rating(self) -> None:
        ratings = range(400, 2401, 100)
        depths = [settings_for_rating(r).search_depth for r in ratings]
        mistakes = [settings_for_rating(r).mistake_rate for r in ratings]
        assert depths == sorted(depths)
        assert mistakes == sorted(mistakes, reverse=True)

    def test_seed_and_rating_carried(self) -> None:
        settings = settings_for_rating(1800, seed=42)
        assert settings.seed == 42
        assert settings.rating == 1800

    def test_custom_band(self) -> None:
        config = EngineConfig(rating_min=1000, rating_max=2000, quiescence_min_rating=1500)
        assert interpolate("search_depth", 1500, config) == pytest.approx(3.0)
        assert settings_for_rating(500, config=config).rating == 1000
        assert settings_for_rating(1500, config=config).use_quiescence
