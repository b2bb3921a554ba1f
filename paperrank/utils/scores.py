"""Helpers for the 1-10 relevance scale."""

import math

MIN_SCORE = 1.0
MAX_SCORE = 10.0


def round_half_up(value: float, digits: int = 1) -> float:
    """Round with ties going up (7.25 -> 7.3), unlike round()'s banker's rounding."""
    factor = 10**digits
    return math.floor(value * factor + 0.5) / factor


def clamp_score(value: float) -> float:
    """Clamp to [1, 10] and round half-up to one decimal."""
    return round_half_up(max(MIN_SCORE, min(MAX_SCORE, value)), 1)
