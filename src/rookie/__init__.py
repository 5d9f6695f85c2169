"""Rookie: a rating-calibrated chess search engine."""

__version__ = "0.1.0"
